"""
XML Utility Functions
=====================

Namespace handling, element construction and (de)serialization helpers
shared by every part generator and by the package validator. All helpers
work with lxml elements.
"""

from typing import Any, Dict, Iterator, Mapping, Optional, Tuple
import logging

from lxml import etree

logger = logging.getLogger(__name__)


NAMESPACES: Dict[str, str] = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main',
    'r': 'http://schemas.openxmlformats.org/officeDocument/2006/relationships',
    'wp': 'http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing',
    'a': 'http://schemas.openxmlformats.org/drawingml/2006/main',
    'pic': 'http://schemas.openxmlformats.org/drawingml/2006/picture',
    'asvg': 'http://schemas.microsoft.com/office/drawing/2016/SVG/main',
    'ct': 'http://schemas.openxmlformats.org/package/2006/content-types',
    'pr': 'http://schemas.openxmlformats.org/package/2006/relationships',
}

# Namespaces declared on the root of word/document.xml
DOCUMENT_NSMAP: Dict[str, str] = {
    prefix: NAMESPACES[prefix] for prefix in ('w', 'r', 'wp', 'a', 'pic', 'asvg')
}

# Parser for reading packages back; never resolves entities or fetches DTDs
_SAFE_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)


def qn(tag: str) -> str:
    """
    Convert a prefixed name into Clark notation.

    Args:
        tag: Name such as ``"w:p"``; unprefixed names are returned unchanged

    Returns:
        Qualified name such as ``"{http://...}p"``

    Example:
        >>> qn("w:p")
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p'
    """
    if ':' not in tag:
        return tag
    prefix, name = tag.split(':', 1)
    try:
        return f"{{{NAMESPACES[prefix]}}}{name}"
    except KeyError:
        raise ValueError(f"Unknown namespace prefix: {prefix}") from None


def _qualify_attrib(attrib: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not attrib:
        return {}
    return {qn(key): str(value) for key, value in attrib.items()}


def create_element(tag: str,
                   attrib: Optional[Mapping[str, Any]] = None,
                   nsmap: Optional[Mapping[str, str]] = None,
                   text: Optional[str] = None) -> Any:
    """
    Create a detached element.

    Args:
        tag: Prefixed tag name (``"w:document"``)
        attrib: Attributes; keys may be prefixed, values are stringified
        nsmap: Namespace declarations to place on the element
        text: Optional text content

    Returns:
        New lxml element
    """
    element = etree.Element(qn(tag), _qualify_attrib(attrib), nsmap=dict(nsmap) if nsmap else None)
    if text is not None:
        element.text = text
    return element


def sub_element(parent: Any,
                tag: str,
                attrib: Optional[Mapping[str, Any]] = None,
                nsmap: Optional[Mapping[str, str]] = None) -> Any:
    """Append a new child element to ``parent`` and return it."""
    return etree.SubElement(parent, qn(tag), _qualify_attrib(attrib),
                            nsmap=dict(nsmap) if nsmap else None)


def serialize_xml(element: Any) -> bytes:
    """
    Serialize an element tree the way OOXML consumers expect it.

    UTF-8, XML declaration with ``standalone="yes"``, no pretty printing so
    the output is byte-stable for identical trees.
    """
    return etree.tostring(element, xml_declaration=True, encoding='UTF-8', standalone=True)


def parse_xml(data: bytes) -> Any:
    """Parse raw XML bytes into a root element without resolving entities."""
    return etree.fromstring(data, parser=_SAFE_PARSER)


def iter_relationship_refs(root: Any) -> Iterator[Tuple[str, str]]:
    """
    Yield ``(attribute_local_name, r_id)`` for every attribute in the
    relationships namespace (``r:embed``, ``r:id``, ``r:link`` ...).
    """
    prefix = f"{{{NAMESPACES['r']}}}"
    for element in root.iter():
        if not isinstance(element.tag, str):
            continue
        for key, value in element.attrib.items():
            if key.startswith(prefix):
                yield key[len(prefix):], value
