"""
Base Renderer Classes
=====================

Capability interface for producing the two renditions of each source
page. The assembler never calls a renderer itself; the orchestration
layer pulls pages from a renderer in order and hands them over.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional
import logging

import fitz  # PyMuPDF

from docx_core.errors import InvalidSource, RenderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedPage:
    """
    Both renditions of one page.

    Unpacks into the ``(vector, raster, width, height)`` tuple accepted by
    ``Document.from_tuples``.
    """
    vector: bytes
    raster: bytes
    width: int
    height: int

    def __iter__(self):
        return iter((self.vector, self.raster, self.width, self.height))


class PageRenderer(ABC):
    """
    Abstract base class for page renderers.

    Subclass this to produce SVG + PNG renditions of PDF pages with a
    particular tool.

    Example:
        class MyRenderer(PageRenderer):
            def page_count(self) -> int:
                return 3

            def render(self, page_index: int) -> RenderedPage:
                ...
    """

    def __init__(self, pdf_path: Path):
        self.pdf_path = Path(pdf_path)
        if not self.pdf_path.is_file():
            raise InvalidSource(f"PDF not found: {self.pdf_path}")

    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the source."""
        pass

    @abstractmethod
    def render(self, page_index: int) -> RenderedPage:
        """
        Render one page.

        Args:
            page_index: 0-based page index

        Returns:
            RenderedPage with both renditions and the 96 DPI pixel size
        """
        pass

    def iter_pages(self, pages: Optional[List[int]] = None) -> Iterator[RenderedPage]:
        """Render pages strictly in order (all pages when ``pages`` is None)."""
        indices = range(self.page_count()) if pages is None else pages
        for page_index in indices:
            logger.info(f"Rendering page {page_index + 1}/{self.page_count()} with {self.renderer_name}")
            yield self.render(page_index)

    def _check_index(self, page_index: int) -> None:
        count = self.page_count()
        if not 0 <= page_index < count:
            raise RenderError(f"out of range (PDF has {count} pages)", page_index)

    @property
    def renderer_name(self) -> str:
        """Return renderer name (default: class name)."""
        return self.__class__.__name__


def count_pdf_pages(pdf_path: Path) -> int:
    """
    Count the pages of a PDF with PyMuPDF.

    Raises:
        InvalidSource: If the file cannot be opened as a PDF
    """
    try:
        doc = fitz.open(str(pdf_path))
    except Exception as e:
        # PyMuPDF raises FileDataError or FzError* depending on the version
        raise InvalidSource(f"Cannot open PDF {pdf_path}: {e}") from e
    with doc:
        if not doc.is_pdf:
            raise InvalidSource(f"Not a PDF: {pdf_path}")
        return doc.page_count
