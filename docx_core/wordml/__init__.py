"""
WordprocessingML Generation
===========================

Markup generators for the main document part.
"""

from docx_core.wordml.body import (
    DocumentBodyGenerator,
    PageFragment,
)

__all__ = [
    "DocumentBodyGenerator",
    "PageFragment",
]
