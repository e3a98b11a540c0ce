"""
Packaging Framework
===================

Building blocks of an OPC package and the DOCX archive writer.

Components:
- Page, Document: input model
- Part, Relationship, ContentTypeEntry: package model
- ContentTypeRegistry: ``[Content_Types].xml`` builder
- RelationshipGraph: relationship ids, media parts and ``.rels`` lists
- DocxPackager: deterministic ZIP serialization
"""

from docx_core.packaging.base import (
    BasePackager,
    PackageResult,
    Page,
    Document,
    Part,
    Relationship,
    ContentTypeEntry,
    MediaRef,
    PACKAGE_SCOPE,
    CONTENT_TYPES_PART,
    DOCUMENT_PART,
    CT_WML_DOCUMENT_MAIN,
    RELTYPE_IMAGE,
    RELTYPE_OFFICE_DOCUMENT,
)

from docx_core.packaging.content_types import (
    ContentTypeRegistry,
    parse_content_types,
    resolve_content_type,
)

from docx_core.packaging.relationships import (
    RelationshipGraph,
    parse_relationships,
    rels_part_name,
    source_part_for,
)

from docx_core.packaging.docx_packager import (
    DocxPackager,
)

__all__ = [
    # Model
    "BasePackager",
    "PackageResult",
    "Page",
    "Document",
    "Part",
    "Relationship",
    "ContentTypeEntry",
    "MediaRef",
    "PACKAGE_SCOPE",
    "CONTENT_TYPES_PART",
    "DOCUMENT_PART",
    "CT_WML_DOCUMENT_MAIN",
    "RELTYPE_IMAGE",
    "RELTYPE_OFFICE_DOCUMENT",
    # Builders
    "ContentTypeRegistry",
    "parse_content_types",
    "resolve_content_type",
    "RelationshipGraph",
    "parse_relationships",
    "rels_part_name",
    "source_part_for",
    # Writer
    "DocxPackager",
]
