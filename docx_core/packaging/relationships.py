"""
Relationship Graph
==================

Assigns relationship ids and logical names, and records which part
references which. Every owning part ("scope") gets its own ``.rels``
relationship list; the package root uses the empty scope ``""`` whose
list lives at ``_rels/.rels``.
"""

import posixpath
from typing import Dict, List, Optional, Tuple
import logging

from docx_core.errors import UnknownScope
from docx_core.packaging.base import (
    CT_RELATIONSHIPS,
    MEDIA_DIR,
    PACKAGE_SCOPE,
    RELTYPE_IMAGE,
    MediaRef,
    Part,
    Relationship,
)
from docx_core.packaging.content_types import ContentTypeRegistry, normalize_extension
from docx_core.xml.utils import NAMESPACES, create_element, parse_xml, qn, serialize_xml, sub_element

logger = logging.getLogger(__name__)

RELS_PACKAGE_PART = "_rels/.rels"
R_ID_PREFIX = "rId"


def rels_part_name(source_part: str) -> str:
    """
    Logical name of the relationship list owned by ``source_part``.

    Example:
        >>> rels_part_name("word/document.xml")
        'word/_rels/document.xml.rels'
    """
    if source_part == PACKAGE_SCOPE:
        return RELS_PACKAGE_PART
    folder, _, base = source_part.rpartition('/')
    prefix = f"{folder}/" if folder else ""
    return f"{prefix}_rels/{base}.rels"


def source_part_for(rels_name: str) -> str:
    """Inverse of :func:`rels_part_name`."""
    if rels_name == RELS_PACKAGE_PART:
        return PACKAGE_SCOPE
    if "/_rels/" in rels_name:
        folder, suffix = rels_name.split("/_rels/", 1)
        return f"{folder}/{suffix[:-len('.rels')]}"
    if rels_name.startswith("_rels/"):
        return rels_name[len("_rels/"):-len('.rels')]
    return rels_name[:-len('.rels')]


def relative_target(source_part: str, target_part: str) -> str:
    """Target of a relationship as written in the owner's ``.rels`` list."""
    base_dir = posixpath.dirname(source_part)
    if not base_dir:
        return target_part
    return posixpath.relpath(target_part, base_dir)


def resolve_target(source_part: str, target: str) -> str:
    """Resolve a relationship target back to a logical part name."""
    if target.startswith('/'):
        return target.lstrip('/')
    base_dir = posixpath.dirname(source_part)
    return posixpath.normpath(posixpath.join(base_dir, target)) if base_dir else posixpath.normpath(target)


def parse_relationships(rels_name: str, data: bytes) -> List[Relationship]:
    """
    Read a ``.rels`` part back into ``Relationship`` objects.

    External relationships (``TargetMode="External"``) are returned with an
    empty ``target_part``.
    """
    source = source_part_for(rels_name)
    root = parse_xml(data)
    result: List[Relationship] = []
    for element in root.iter(qn('pr:Relationship')):
        target = element.get('Target', '')
        external = element.get('TargetMode') == 'External'
        result.append(Relationship(
            source_part=source,
            r_id=element.get('Id', ''),
            rel_type=element.get('Type', ''),
            target=target,
            target_part='' if external else resolve_target(source, target),
        ))
    return result


class RelationshipGraph:
    """
    Builder for the package's relationship lists and media parts.

    Relationship ids come from a single counter owned by the graph, so
    they are unique within every scope and across the whole package.

    Example:
        graph = RelationshipGraph(registry)
        graph.add_scope("word/document.xml")
        ref = graph.add_media(svg_bytes, "svg", "word/document.xml")
        graph.relationships_for("word/document.xml")
    """

    def __init__(self,
                 registry: ContentTypeRegistry,
                 media_dir: str = MEDIA_DIR,
                 media_prefix: str = "page",
                 media_padding: int = 4):
        """
        Initialize the graph.

        Args:
            registry: Content-type registry resolving media types
            media_dir: Folder for media parts inside the package
            media_prefix: Stem prefix for generated media names
            media_padding: Number of digits of generated media numbers
        """
        self.registry = registry
        self.media_dir = media_dir.strip('/')
        self.media_prefix = media_prefix
        self.media_padding = media_padding

        self._scopes: Dict[str, List[Relationship]] = {}
        self._media: List[Part] = []
        self._names: set = set()
        self._next_id = 1
        self._next_media = 1

    def add_scope(self, owner: str) -> None:
        """Declare an owning part; declaring it twice is a no-op."""
        self._scopes.setdefault(owner, [])

    @property
    def scopes(self) -> Tuple[str, ...]:
        return tuple(self._scopes)

    def add_relationship(self, owner: str, target_part: str, rel_type: str) -> Relationship:
        """
        Record an edge from ``owner`` to ``target_part``.

        Raises:
            UnknownScope: If ``owner`` was never declared
        """
        rels = self._require_scope(owner)
        relationship = Relationship(
            source_part=owner,
            r_id=self._allocate_id(),
            rel_type=rel_type,
            target=relative_target(owner, target_part),
            target_part=target_part,
        )
        rels.append(relationship)
        logger.debug(f"Relationship {relationship.r_id}: {owner or '/'} -> {target_part}")
        return relationship

    def add_media(self,
                  data: bytes,
                  extension: str,
                  owner_scope: str,
                  media_type: Optional[str] = None,
                  stem: Optional[str] = None,
                  context: Optional[str] = None) -> MediaRef:
        """
        Create a media part and an image relationship pointing at it.

        Args:
            data: Media payload
            extension: File extension of the payload
            owner_scope: Part that references the media
            media_type: Explicit media type; derived from the extension if None
            stem: File name stem; a numbered name is generated if None
            context: Description of the caller used in error messages

        Returns:
            MediaRef with the relationship id and the part's logical name

        Raises:
            UnknownScope: If ``owner_scope`` was never declared
            TypeConflict: If the extension already maps to another type
        """
        self._require_scope(owner_scope)
        ext = normalize_extension(extension)
        media_type = media_type or self.registry.media_type_for(ext)
        self.registry.register_extension(ext, media_type, context=context)

        name = self._media_name(ext, stem)
        part = Part(name, media_type, bytes(data))
        self._media.append(part)
        self._names.add(name)

        relationship = self.add_relationship(owner_scope, name, RELTYPE_IMAGE)
        return MediaRef(relationship.r_id, name)

    def relationships_for(self, owner_scope: str) -> Tuple[Relationship, ...]:
        """Relationships held by ``owner_scope``, in insertion order."""
        return tuple(self._require_scope(owner_scope))

    def relationship_parts(self) -> List[Part]:
        """One ``.rels`` part per declared scope, in declaration order."""
        parts = []
        for owner, rels in self._scopes.items():
            root = create_element('pr:Relationships', nsmap={None: NAMESPACES['pr']})
            for rel in rels:
                sub_element(root, 'pr:Relationship', {
                    'Id': rel.r_id,
                    'Type': rel.rel_type,
                    'Target': rel.target,
                })
            parts.append(Part(rels_part_name(owner), CT_RELATIONSHIPS, serialize_xml(root)))
        return parts

    def media_parts(self) -> List[Part]:
        """Media parts in creation order."""
        return list(self._media)

    def _require_scope(self, owner: str) -> List[Relationship]:
        try:
            return self._scopes[owner]
        except KeyError:
            raise UnknownScope(owner) from None

    def _allocate_id(self) -> str:
        r_id = f"{R_ID_PREFIX}{self._next_id}"
        self._next_id += 1
        return r_id

    def _media_name(self, ext: str, stem: Optional[str]) -> str:
        if stem is None:
            while True:
                stem_candidate = f"{self.media_prefix}{self._next_media:0{self.media_padding}d}"
                self._next_media += 1
                name = f"{self.media_dir}/{stem_candidate}.{ext}"
                if name not in self._names:
                    return name
        # Explicit stems are kept as given; duplicates surface as PackageIntegrity at write time
        return f"{self.media_dir}/{stem}.{ext}"
