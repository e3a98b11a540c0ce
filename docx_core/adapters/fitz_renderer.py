"""
PyMuPDF Renderer
================

Renders pages in-process: SVG through ``Page.get_svg_image`` and PNG
through ``Page.get_pixmap``.
"""

from pathlib import Path
from typing import Optional
import logging

import fitz  # PyMuPDF

from docx_core.adapters.base import PageRenderer, RenderedPage, count_pdf_pages
from docx_core.errors import RenderError
from docx_core.units import points_to_px

logger = logging.getLogger(__name__)


class FitzRenderer(PageRenderer):
    """
    Page renderer backed by PyMuPDF.

    The PNG is rendered at ``dpi``; the reported size is always the page
    size at 96 DPI so the drawing keeps the page's physical dimensions.

    Example:
        with FitzRenderer(Path("in.pdf"), dpi=150) as renderer:
            pages = list(renderer.iter_pages())
    """

    def __init__(self, pdf_path: Path, dpi: int = 150):
        super().__init__(pdf_path)
        self.dpi = dpi
        self._page_count = count_pdf_pages(self.pdf_path)
        self._doc: Optional[fitz.Document] = None

    def __enter__(self) -> 'FitzRenderer':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    def page_count(self) -> int:
        return self._page_count

    def render(self, page_index: int) -> RenderedPage:
        self._check_index(page_index)
        if self._doc is None:
            self._doc = fitz.open(str(self.pdf_path))

        try:
            page = self._doc[page_index]
            width = max(1, points_to_px(page.rect.width))
            height = max(1, points_to_px(page.rect.height))
            svg = page.get_svg_image(text_as_path=True).encode('utf-8')
            zoom = self.dpi / 72.0
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
            png = pix.tobytes("png")
        except Exception as e:
            raise RenderError(f"PyMuPDF failed: {e}", page_index) from e

        logger.debug(f"Rendered page {page_index}: {width}x{height}px, "
                     f"svg {len(svg)} bytes, png {len(png)} bytes")
        return RenderedPage(svg, png, width, height)
