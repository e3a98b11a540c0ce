"""
Base Packaging Classes
======================

Data model shared by the package builders: pages and documents on the
input side, parts and relationships on the output side, plus the abstract
packager interface and the result container returned to callers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple
import logging

from docx_core.errors import InvalidPage

logger = logging.getLogger(__name__)


# Logical names of the fixed parts
PACKAGE_SCOPE = ""
CONTENT_TYPES_PART = "[Content_Types].xml"
DOCUMENT_PART = "word/document.xml"
MEDIA_DIR = "word/media"

# Content types
CT_RELATIONSHIPS = "application/vnd.openxmlformats-package.relationships+xml"
CT_XML = "application/xml"
CT_WML_DOCUMENT_MAIN = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"

# Relationship types
_OFFICE_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
RELTYPE_OFFICE_DOCUMENT = f"{_OFFICE_REL_NS}/officeDocument"
RELTYPE_IMAGE = f"{_OFFICE_REL_NS}/image"


@dataclass(frozen=True)
class Page:
    """
    One source page in both renditions.

    Attributes:
        index: 0-based position in the document
        vector: Vector rendition bytes (SVG by default)
        raster: Raster fallback bytes (PNG by default)
        width: Width in pixels at 96 DPI
        height: Height in pixels at 96 DPI
        vector_format: File extension of the vector rendition
        raster_format: File extension of the raster rendition
        vector_media_type: Explicit media type, derived from the extension if None
        raster_media_type: Explicit media type, derived from the extension if None
    """
    index: int
    vector: bytes
    raster: bytes
    width: int
    height: int
    vector_format: str = "svg"
    raster_format: str = "png"
    vector_media_type: Optional[str] = None
    raster_media_type: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.index, int) or self.index < 0:
            raise InvalidPage(self.index, "index must be a non-negative integer")
        if not self.vector:
            raise InvalidPage(self.index, "vector rendition is empty")
        if not self.raster:
            raise InvalidPage(self.index, "raster rendition is empty")
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidPage(self.index, f"{name} must be a positive integer, got {value!r}")
        if not self.vector_format or not self.raster_format:
            raise InvalidPage(self.index, "rendition formats must be non-empty")

    @property
    def number(self) -> int:
        """1-based page number."""
        return self.index + 1


class Document:
    """Ordered sequence of pages; insertion order is output order."""

    def __init__(self, pages: Optional[Iterable[Page]] = None):
        self._pages: List[Page] = []
        for page in pages or ():
            self.append(page)

    @classmethod
    def from_tuples(cls, tuples: Iterable[Sequence[Any]], **page_options: Any) -> 'Document':
        """
        Build a document from ``(vector, raster, width, height)`` tuples.

        Args:
            tuples: One tuple per page, in page order
            **page_options: Extra ``Page`` fields applied to every page

        Returns:
            Document with one page per tuple
        """
        document = cls()
        for vector, raster, width, height in tuples:
            document.add_page(vector, raster, width, height, **page_options)
        return document

    def add_page(self, vector: bytes, raster: bytes, width: int, height: int, **page_options: Any) -> Page:
        """Create the next page and append it."""
        page = Page(len(self._pages), vector, raster, width, height, **page_options)
        self._pages.append(page)
        return page

    def append(self, page: Page) -> None:
        """Append an existing page; its index must match its position."""
        if page.index != len(self._pages):
            raise InvalidPage(page.index, f"expected index {len(self._pages)} for next page")
        self._pages.append(page)

    @property
    def pages(self) -> Tuple[Page, ...]:
        return tuple(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)


@dataclass(frozen=True)
class Part:
    """A named entry of the package."""

    name: str           # Logical name without leading slash (e.g. "word/document.xml")
    content_type: str
    data: bytes


@dataclass(frozen=True)
class Relationship:
    """A directed reference from an owning part to a target part."""

    source_part: str    # Owner logical name, "" for the package root
    r_id: str
    rel_type: str
    target: str         # Target relative to the owner's directory
    target_part: str    # Resolved logical name of the target


@dataclass(frozen=True)
class ContentTypeEntry:
    """A ``Default`` (by extension) or ``Override`` (by part name) declaration."""

    kind: str           # "Default" or "Override"
    key: str            # Extension for defaults, part name for overrides
    content_type: str


@dataclass(frozen=True)
class MediaRef:
    """Relationship id and logical name assigned to a media part."""

    r_id: str
    part_name: str


@dataclass
class PackageResult:
    """
    Container for packaging results.

    Attributes:
        success: Whether packaging succeeded
        output_path: Path to the created package
        pages_packaged: Number of pages packaged
        media_packaged: Number of media parts written
        total_size_bytes: Total package size in bytes
        errors: List of error messages
        metadata: Additional packaging metadata
    """
    success: bool = True
    output_path: Optional[Path] = None
    pages_packaged: int = 0
    media_packaged: int = 0
    total_size_bytes: int = 0
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        self.success = False

    def summary(self) -> str:
        """Generate a text summary of packaging results."""
        status = "SUCCESS" if self.success else "FAILED"
        lines = [
            f"Packaging: {status}",
            f"Output: {self.output_path}",
            f"Pages: {self.pages_packaged}",
            f"Media parts: {self.media_packaged}",
        ]

        if self.total_size_bytes > 0:
            size_mb = self.total_size_bytes / (1024 * 1024)
            lines.append(f"Size: {size_mb:.2f} MB")

        if self.errors:
            lines.append(f"\nErrors ({len(self.errors)}):")
            for error in self.errors[:5]:
                lines.append(f"  - {error}")
            if len(self.errors) > 5:
                lines.append(f"  ... and {len(self.errors) - 5} more")

        return "\n".join(lines)


class BasePackager(ABC):
    """
    Abstract base class for package writers.

    Subclass this to serialize the assembled parts into a container
    format (a ZIP archive for DOCX).
    """

    @abstractmethod
    def write(self,
              document: Document,
              content_types_part: Optional[Part],
              relationship_parts: Sequence[Part],
              body_part: Part,
              media_parts: Sequence[Part]) -> bytes:
        """
        Serialize every part into the container.

        Args:
            document: Source document (page order reference)
            content_types_part: Finalized content-type declaration
            relationship_parts: One relationship list per owning part
            body_part: Main document part
            media_parts: Media parts in page order

        Returns:
            Container bytes
        """
        pass
