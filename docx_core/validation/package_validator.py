"""
DOCX Package Validator
======================

Reads a finished package back and checks the structural rules a reader
relies on: every part has a declared content type, every internal
relationship resolves, relationship ids are unique per list, the package
points at a main document, and every ``r:`` reference in an XML part is
present in that part's relationship list.
"""

import io
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple
import logging

from lxml import etree

from docx_core.packaging.base import CONTENT_TYPES_PART, CT_WML_DOCUMENT_MAIN, RELTYPE_OFFICE_DOCUMENT
from docx_core.packaging.content_types import parse_content_types, resolve_content_type
from docx_core.packaging.relationships import (
    RELS_PACKAGE_PART,
    parse_relationships,
    rels_part_name,
)
from docx_core.validation.base import ValidationResult
from docx_core.xml.utils import iter_relationship_refs, parse_xml

logger = logging.getLogger(__name__)

ContentTypeTables = Tuple[Dict[str, str], Dict[str, str]]


class PackageValidator:
    """
    Structural validator for DOCX packages.

    Example:
        validator = PackageValidator()
        result = validator.validate_package(Path("out.docx"))
        if not result.is_valid:
            print(result.summary())
    """

    def validate_package(self, package_path: Path) -> ValidationResult:
        """Validate a package stored on disk."""
        result = self.validate_bytes(Path(package_path).read_bytes())
        result.metadata['package_path'] = str(package_path)
        return result

    def validate_bytes(self, data: bytes) -> ValidationResult:
        """
        Validate a package held in memory.

        Args:
            data: Package bytes

        Returns:
            ValidationResult with one issue per problem found
        """
        result = ValidationResult()

        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                names = zf.namelist()
                parts = {name: zf.read(name) for name in names}
        except zipfile.BadZipFile as e:
            result.add_issue("<package>", f"Not a ZIP archive: {e}", "Container")
            return result

        result.metadata['part_count'] = len(parts)
        result.metadata['entry_order'] = names

        duplicates = {name for name in names if names.count(name) > 1}
        for name in sorted(duplicates):
            result.add_issue(name, "Part name occurs more than once", "Duplicate Part")

        tables = self._read_content_types(parts, result)
        if tables is not None:
            self._check_content_types(parts, tables, result)
        self._check_relationships(parts, tables, result)

        if result.is_valid:
            logger.debug(f"Package valid ({len(parts)} parts)")
        else:
            logger.warning(f"Package invalid: {result.error_count} error(s)")
        return result

    def _read_content_types(self, parts: Dict[str, bytes],
                            result: ValidationResult) -> Optional[ContentTypeTables]:
        if CONTENT_TYPES_PART not in parts:
            result.add_issue(CONTENT_TYPES_PART, "Content-type declaration is missing", "Content Types")
            return None
        try:
            return parse_content_types(parts[CONTENT_TYPES_PART])
        except etree.XMLSyntaxError as e:
            result.add_issue(CONTENT_TYPES_PART, f"Malformed XML: {e}", "XML Syntax")
            return None

    def _check_content_types(self, parts: Dict[str, bytes], tables: ContentTypeTables,
                             result: ValidationResult) -> None:
        defaults, overrides = tables
        for name in parts:
            if name == CONTENT_TYPES_PART or name.endswith('/'):
                continue
            if resolve_content_type(name, defaults, overrides) is None:
                result.add_issue(name, "No Default or Override content type resolves this part",
                                 "Content Types")

        for name in overrides:
            if name not in parts:
                result.add_issue(CONTENT_TYPES_PART, f"Override for missing part /{name}",
                                 "Content Types", severity="Warning")

    def _check_relationships(self, parts: Dict[str, bytes], tables: Optional[ContentTypeTables],
                             result: ValidationResult) -> None:
        if RELS_PACKAGE_PART not in parts:
            result.add_issue(RELS_PACKAGE_PART, "Package relationship list is missing", "Relationships")
            return

        rel_ids: Dict[str, Set[str]] = {}
        main_documents: List[str] = []

        for name, payload in parts.items():
            if not name.endswith('.rels'):
                continue
            try:
                relationships = parse_relationships(name, payload)
            except etree.XMLSyntaxError as e:
                result.add_issue(name, f"Malformed XML: {e}", "XML Syntax")
                continue

            ids: Set[str] = set()
            for rel in relationships:
                if rel.r_id in ids:
                    result.add_issue(name, "Duplicate relationship id", "Relationships", r_id=rel.r_id)
                ids.add(rel.r_id)
                if rel.target_part and rel.target_part not in parts:
                    result.add_issue(name, f"Targets missing part '{rel.target_part}'",
                                     "Dangling Reference", r_id=rel.r_id)
                if name == RELS_PACKAGE_PART and rel.rel_type == RELTYPE_OFFICE_DOCUMENT:
                    main_documents.append(rel.target_part)
            rel_ids[name] = ids

        if len(main_documents) != 1:
            result.add_issue(RELS_PACKAGE_PART,
                             f"Expected exactly one main document relationship, found {len(main_documents)}",
                             "Relationships")
        else:
            result.metadata['main_document'] = main_documents[0]
            if tables is not None:
                self._check_main_document(parts, main_documents[0], tables, result)

        for name, payload in parts.items():
            if not name.endswith('.xml') or name == CONTENT_TYPES_PART:
                continue
            try:
                root = parse_xml(payload)
            except etree.XMLSyntaxError as e:
                result.add_issue(name, f"Malformed XML: {e}", "XML Syntax")
                continue
            known = rel_ids.get(rels_part_name(name), set())
            for attribute, r_id in iter_relationship_refs(root):
                if r_id not in known:
                    result.add_issue(name, f"r:{attribute} has no matching relationship",
                                     "Dangling Reference", r_id=r_id)

    def _check_main_document(self, parts: Dict[str, bytes], name: str, tables: ContentTypeTables,
                             result: ValidationResult) -> None:
        if name not in parts:
            return
        declared = resolve_content_type(name, *tables)
        if declared != CT_WML_DOCUMENT_MAIN:
            result.add_issue(name, f"Main document declared as '{declared}'", "Content Types")
