"""
XML Processing Utilities
========================

Namespace-aware construction, serialization and parsing helpers for the
OOXML parts of a package.
"""

from docx_core.xml.utils import (
    NAMESPACES,
    DOCUMENT_NSMAP,
    qn,
    create_element,
    sub_element,
    serialize_xml,
    parse_xml,
    iter_relationship_refs,
)

__all__ = [
    "NAMESPACES",
    "DOCUMENT_NSMAP",
    "qn",
    "create_element",
    "sub_element",
    "serialize_xml",
    "parse_xml",
    "iter_relationship_refs",
]
