"""
Error Kinds
===========

Exceptions raised while assembling a DOCX package and while rendering
source pages. None of them are transient: they indicate malformed input
from the page producer or a broken internal invariant, so callers should
abort the build rather than retry.
"""

from typing import Optional


class DocxAssemblyError(Exception):
    """Base class for all package assembly failures."""
    pass


class TypeConflict(DocxAssemblyError):
    """An extension was registered with two different media types."""

    def __init__(self,
                 extension: str,
                 existing: str,
                 requested: str,
                 context: Optional[str] = None):
        self.extension = extension
        self.existing = existing
        self.requested = requested
        self.context = context
        message = (f"Extension '.{extension}' is already registered as '{existing}', "
                   f"cannot register it as '{requested}'")
        if context:
            message = f"{context}: {message}"
        super().__init__(message)


class NotFinalized(DocxAssemblyError):
    """The content-type table was used out of its finalize-once lifecycle."""
    pass


class UnknownScope(DocxAssemblyError):
    """A relationship list was requested for a part that was never declared."""

    def __init__(self, scope: str):
        self.scope = scope
        label = scope or "<package root>"
        super().__init__(f"Unknown relationship scope: {label}")


class PackageIntegrity(DocxAssemblyError):
    """Duplicate part names or dangling references found before writing."""

    def __init__(self, message: str, problems: Optional[list] = None):
        self.problems = list(problems or [])
        super().__init__(message)


class EmptyDocument(DocxAssemblyError, ValueError):
    """A document without pages cannot be packaged."""

    def __init__(self, message: str = "Document has no pages; refusing to build an empty package"):
        super().__init__(message)


class InvalidPage(DocxAssemblyError, ValueError):
    """A page violates the input contract (empty payload, bad dimensions)."""

    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(f"page {index}: {message}")


class RenderError(Exception):
    """Base class for failures while producing page renditions."""

    def __init__(self, message: str, page_index: Optional[int] = None):
        self.page_index = page_index
        if page_index is not None:
            message = f"page {page_index}: {message}"
        super().__init__(message)


class RasterizerNotFound(RenderError):
    """The external rasterizer executable could not be located."""
    pass


class InvalidSource(RenderError):
    """The source PDF is missing or cannot be opened."""
    pass
