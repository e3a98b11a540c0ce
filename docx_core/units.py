"""
Unit Conversion
===============

Conversions between raster pixels and the measurement units used by
WordprocessingML. Pixels are always taken at 96 per inch.
"""

EMU_PER_INCH = 914400
TWIPS_PER_INCH = 1440
POINTS_PER_INCH = 72
PIXELS_PER_INCH = 96

EMU_PER_PIXEL = EMU_PER_INCH // PIXELS_PER_INCH      # 9525
TWIPS_PER_PIXEL = TWIPS_PER_INCH // PIXELS_PER_INCH  # 15


def px_to_emu(px: int) -> int:
    """Convert pixels to English Metric Units."""
    return int(px) * EMU_PER_PIXEL


def px_to_twips(px: int) -> int:
    """Convert pixels to twips (1/20th of a point)."""
    return int(px) * TWIPS_PER_PIXEL


def points_to_px(points: float) -> int:
    """Convert PDF points to whole pixels, rounding to the nearest pixel."""
    return int(round(points * PIXELS_PER_INCH / POINTS_PER_INCH))


def scale_px_to_reference(px: int, dpi: float) -> int:
    """Rescale a pixel count rendered at ``dpi`` to the 96 DPI reference grid."""
    return int(round(px * PIXELS_PER_INCH / dpi))
