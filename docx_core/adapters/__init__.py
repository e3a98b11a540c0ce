"""
Renderer Adapters
=================

Producers of per-page SVG + PNG renditions.

Components:
- PageRenderer: Abstract renderer interface
- RenderedPage: One page's renditions and size
- FitzRenderer: In-process renderer (PyMuPDF)
- InkscapeRenderer: External renderer (Inkscape CLI)
"""

from docx_core.adapters.base import (
    PageRenderer,
    RenderedPage,
    count_pdf_pages,
)

from docx_core.adapters.fitz_renderer import (
    FitzRenderer,
)

from docx_core.adapters.inkscape_renderer import (
    InkscapeRenderer,
    find_inkscape,
)

__all__ = [
    "PageRenderer",
    "RenderedPage",
    "count_pdf_pages",
    "FitzRenderer",
    "InkscapeRenderer",
    "find_inkscape",
]
