"""
Content Type Registry
=====================

Tracks the media types used by the parts of a package and produces the
``[Content_Types].xml`` declaration. Types are declared by extension
(``Default``) where possible and by exact part name (``Override``) where
the extension alone is ambiguous, such as the main document part.
"""

import mimetypes
from typing import Dict, List, Optional, Tuple
import logging

from docx_core.errors import NotFinalized, TypeConflict
from docx_core.packaging.base import (
    CONTENT_TYPES_PART,
    CT_RELATIONSHIPS,
    CT_XML,
    ContentTypeEntry,
    Part,
)
from docx_core.xml.utils import NAMESPACES, create_element, parse_xml, serialize_xml, sub_element, qn

logger = logging.getLogger(__name__)

# Media types for image formats commonly embedded in OOXML packages
IMAGE_MEDIA_TYPES: Dict[str, str] = {
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'gif': 'image/gif',
    'bmp': 'image/bmp',
    'tif': 'image/tiff',
    'tiff': 'image/tiff',
    'svg': 'image/svg+xml',
    'emf': 'image/x-emf',
    'wmf': 'image/x-wmf',
}


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and strip any leading dot."""
    return ext.strip().lstrip('.').lower()


def normalize_part_name(name: str) -> str:
    """Return a logical part name without the leading slash."""
    return name.lstrip('/')


class ContentTypeRegistry:
    """
    Collects ``Default`` and ``Override`` content-type entries.

    The registry is finalized exactly once; after that it is closed to
    further registrations and only serves lookups.

    Example:
        registry = ContentTypeRegistry()
        registry.register_extension("png", "image/png")
        registry.register_override("word/document.xml", CT_WML_DOCUMENT_MAIN)
        part = registry.finalize()
    """

    def __init__(self):
        self._defaults: Dict[str, str] = {}
        self._overrides: Dict[str, str] = {}
        self._part: Optional[Part] = None

        self.register_extension('rels', CT_RELATIONSHIPS)
        self.register_extension('xml', CT_XML)

    def register_extension(self, ext: str, media_type: str, context: Optional[str] = None) -> None:
        """
        Record a default mapping from extension to media type.

        Args:
            ext: File extension, with or without the leading dot
            media_type: Media type for every part with that extension
            context: Description of the caller (e.g. "page 3 vector") for errors

        Raises:
            TypeConflict: If the extension is already mapped to another type
            NotFinalized: If the registry has already been finalized
        """
        self._ensure_open()
        ext = normalize_extension(ext)
        existing = self._defaults.get(ext)
        if existing is None:
            self._defaults[ext] = media_type
            logger.debug(f"Registered default .{ext} -> {media_type}")
        elif existing != media_type:
            raise TypeConflict(ext, existing, media_type, context=context)

    def register_override(self, part_name: str, media_type: str) -> None:
        """Record an explicit media type for a single part."""
        self._ensure_open()
        self._overrides[normalize_part_name(part_name)] = media_type
        logger.debug(f"Registered override /{normalize_part_name(part_name)} -> {media_type}")

    def media_type_for(self, ext: str) -> str:
        """
        Best media type for an extension.

        Looks at already registered defaults first, then the built-in
        image table, then the platform ``mimetypes`` database.
        """
        ext = normalize_extension(ext)
        if ext in self._defaults:
            return self._defaults[ext]
        if ext in IMAGE_MEDIA_TYPES:
            return IMAGE_MEDIA_TYPES[ext]
        guessed, _ = mimetypes.guess_type(f"part.{ext}", strict=False)
        return guessed or 'application/octet-stream'

    def resolve(self, part_name: str) -> Optional[str]:
        """Media type a reader would resolve for ``part_name``, or None."""
        return resolve_content_type(part_name, self._defaults, self._overrides)

    def entries(self) -> List[ContentTypeEntry]:
        """All entries: defaults in registration order, then overrides."""
        entries = [ContentTypeEntry('Default', ext, ct) for ext, ct in self._defaults.items()]
        entries.extend(ContentTypeEntry('Override', '/' + name, ct) for name, ct in self._overrides.items())
        return entries

    def finalize(self) -> Part:
        """
        Close the registry and build the ``[Content_Types].xml`` part.

        Raises:
            NotFinalized: If called a second time
        """
        if self._part is not None:
            raise NotFinalized("Content-type registry has already been finalized")

        root = create_element('ct:Types', nsmap={None: NAMESPACES['ct']})
        for entry in self.entries():
            if entry.kind == 'Default':
                sub_element(root, 'ct:Default', {'Extension': entry.key, 'ContentType': entry.content_type})
            else:
                sub_element(root, 'ct:Override', {'PartName': entry.key, 'ContentType': entry.content_type})

        self._part = Part(CONTENT_TYPES_PART, CT_XML, serialize_xml(root))
        logger.debug(f"Finalized content types: {len(self._defaults)} default(s), "
                     f"{len(self._overrides)} override(s)")
        return self._part

    @property
    def is_finalized(self) -> bool:
        return self._part is not None

    @property
    def part(self) -> Part:
        """The finalized declaration part."""
        if self._part is None:
            raise NotFinalized("Content-type registry has not been finalized")
        return self._part

    def _ensure_open(self) -> None:
        if self._part is not None:
            raise NotFinalized("Content-type registry is finalized; no further registrations allowed")


def parse_content_types(data: bytes) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Read a ``[Content_Types].xml`` payload.

    Args:
        data: Raw XML bytes

    Returns:
        ``(defaults, overrides)``: extension -> type and logical name -> type
    """
    root = parse_xml(data)
    defaults: Dict[str, str] = {}
    overrides: Dict[str, str] = {}
    for element in root.iter(qn('ct:Default')):
        defaults[normalize_extension(element.get('Extension', ''))] = element.get('ContentType', '')
    for element in root.iter(qn('ct:Override')):
        overrides[normalize_part_name(element.get('PartName', ''))] = element.get('ContentType', '')
    return defaults, overrides


def resolve_content_type(part_name: str,
                         defaults: Dict[str, str],
                         overrides: Dict[str, str]) -> Optional[str]:
    """Resolve a part's type from parsed content-type tables."""
    name = normalize_part_name(part_name)
    if name in overrides:
        return overrides[name]
    base = name.rsplit('/', 1)[-1]
    if '.' not in base:
        return None
    return defaults.get(normalize_extension(base.rsplit('.', 1)[-1]))
