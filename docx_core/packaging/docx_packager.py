"""
DOCX Packager
=============

Serializes assembled parts into a ZIP archive laid out as an OPC package.
Output is deterministic: entries carry a fixed timestamp and fixed
attributes, and are written in a fixed order, so identical input always
produces identical bytes.
"""

import io
import zipfile
import zlib
from typing import Dict, List, Optional, Sequence, Set
import logging

from docx_core.config.settings import PackagingConfig
from docx_core.errors import EmptyDocument, NotFinalized, PackageIntegrity
from docx_core.packaging.base import (
    CONTENT_TYPES_PART,
    BasePackager,
    Document,
    Part,
)
from docx_core.packaging.content_types import parse_content_types, resolve_content_type
from docx_core.packaging.relationships import RELS_PACKAGE_PART, parse_relationships, rels_part_name
from docx_core.xml.utils import iter_relationship_refs, parse_xml

logger = logging.getLogger(__name__)

# Earliest timestamp a ZIP entry can carry
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
# Regular file, rw-r--r--
ZIP_FILE_ATTR = (0o100644 << 16)


class DocxPackager(BasePackager):
    """
    Writes the parts of a DOCX package into a ZIP archive.

    Entry order: ``[Content_Types].xml``, ``_rels/.rels``, the document body,
    the remaining relationship lists, then every media part in the order
    given (page order, vector before raster).

    Example:
        packager = DocxPackager()
        data = packager.write(document, registry.finalize(),
                              graph.relationship_parts(), body_part,
                              graph.media_parts())
    """

    def __init__(self, config: Optional[PackagingConfig] = None):
        self.config = config or PackagingConfig()

    def write(self,
              document: Document,
              content_types_part: Optional[Part],
              relationship_parts: Sequence[Part],
              body_part: Part,
              media_parts: Sequence[Part]) -> bytes:
        """
        Build the archive in memory.

        Args:
            document: Source document; must contain at least one page
            content_types_part: Finalized ``[Content_Types].xml``
            relationship_parts: ``.rels`` parts, package-level list included
            body_part: ``word/document.xml``
            media_parts: Media parts in page order

        Returns:
            The archive bytes

        Raises:
            NotFinalized: If no content-type part is supplied
            EmptyDocument: If the document has no pages
            PackageIntegrity: On duplicate names, dangling relationship
                targets, parts without a resolvable content type or
                ``r:`` references missing from the owner's relationship list
        """
        if content_types_part is None:
            raise NotFinalized("Content-type declaration must be finalized before serialization")
        if len(document) == 0:
            raise EmptyDocument()

        ordered = self._order_parts(content_types_part, relationship_parts, body_part, media_parts)
        self.check_integrity(ordered)

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
            for part in ordered:
                self._write_entry(zf, part)

        data = buffer.getvalue()
        logger.info(f"Packaged {len(document)} page(s) into {len(ordered)} parts ({len(data)} bytes)")
        return data

    def check_integrity(self, parts: Sequence[Part]) -> None:
        """
        Verify a complete, ordered part list before anything is written.

        Raises:
            PackageIntegrity: With every problem found
        """
        problems: List[str] = []

        names: Dict[str, int] = {}
        for part in parts:
            names[part.name] = names.get(part.name, 0) + 1
        for name, count in names.items():
            if count > 1:
                problems.append(f"duplicate part name '{name}' ({count} occurrences)")

        content_types = next((p for p in parts if p.name == CONTENT_TYPES_PART), None)
        if content_types is None:
            problems.append(f"missing {CONTENT_TYPES_PART}")
        else:
            defaults, overrides = parse_content_types(content_types.data)
            for part in parts:
                if part.name == CONTENT_TYPES_PART:
                    continue
                resolved = resolve_content_type(part.name, defaults, overrides)
                if resolved is None:
                    problems.append(f"no content type declared for '{part.name}'")
                elif resolved != part.content_type:
                    problems.append(f"'{part.name}' is declared as '{resolved}' "
                                    f"but carries '{part.content_type}'")

        known_ids: Dict[str, Set[str]] = {}
        for part in parts:
            if not part.name.endswith('.rels'):
                continue
            seen_ids = known_ids.setdefault(part.name, set())
            for rel in parse_relationships(part.name, part.data):
                if rel.r_id in seen_ids:
                    problems.append(f"duplicate relationship id {rel.r_id} in '{part.name}'")
                seen_ids.add(rel.r_id)
                if rel.target_part and rel.target_part not in names:
                    owner = rel.source_part or '/'
                    problems.append(f"relationship {rel.r_id} of '{owner}' points at "
                                    f"missing part '{rel.target_part}'")

        for part in parts:
            if not part.name.endswith('.xml') or part.name == CONTENT_TYPES_PART:
                continue
            rels_name = rels_part_name(part.name)
            for attribute, r_id in iter_relationship_refs(parse_xml(part.data)):
                if r_id not in known_ids.get(rels_name, ()):
                    problems.append(f"'{part.name}' references {r_id} (r:{attribute}) "
                                    f"which is not in '{rels_name}'")

        if problems:
            for problem in problems:
                logger.error(f"Package integrity: {problem}")
            raise PackageIntegrity(f"Package integrity check failed: {problems[0]}"
                                   + (f" (and {len(problems) - 1} more)" if len(problems) > 1 else ""),
                                   problems)

    def _order_parts(self,
                     content_types_part: Part,
                     relationship_parts: Sequence[Part],
                     body_part: Part,
                     media_parts: Sequence[Part]) -> List[Part]:
        package_rels = [p for p in relationship_parts if p.name == RELS_PACKAGE_PART]
        other_rels = [p for p in relationship_parts if p.name != RELS_PACKAGE_PART]
        return [content_types_part, *package_rels, body_part, *other_rels, *media_parts]

    def _write_entry(self, zf: zipfile.ZipFile, part: Part) -> None:
        info = zipfile.ZipInfo(part.name, date_time=ZIP_EPOCH)
        info.create_system = 3
        info.external_attr = ZIP_FILE_ATTR
        info.compress_type = self._compression_for(part)
        zf.writestr(info, part.data, compresslevel=self.config.compression_level)
        logger.debug(f"Wrote {part.name} ({len(part.data)} bytes, "
                     f"{'stored' if info.compress_type == zipfile.ZIP_STORED else 'deflated'})")

    def _compression_for(self, part: Part) -> int:
        if part.name.endswith(('.xml', '.rels')) or not self.config.store_incompressible:
            return zipfile.ZIP_DEFLATED
        compressed = zlib.compress(part.data, self.config.compression_level)
        if len(compressed) >= len(part.data):
            return zipfile.ZIP_STORED
        return zipfile.ZIP_DEFLATED
