"""
DOCX packager tests.

Run with: pytest tests/test_packager.py -v
"""

import os
import zipfile

import pytest

from conftest import read_zip
from docx_core.errors import EmptyDocument, NotFinalized, PackageIntegrity
from docx_core.packaging.base import (
    CT_WML_DOCUMENT_MAIN,
    DOCUMENT_PART,
    PACKAGE_SCOPE,
    RELTYPE_OFFICE_DOCUMENT,
    Document,
    Part,
)
from docx_core.packaging.content_types import ContentTypeRegistry
from docx_core.packaging.docx_packager import DocxPackager
from docx_core.packaging.relationships import RelationshipGraph

BODY = b'<?xml version="1.0"?><w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"/>'


def build_inputs(document, media=None):
    """Registry, graph and body for ``document`` with one svg+png per page."""
    registry = ContentTypeRegistry()
    registry.register_override(DOCUMENT_PART, CT_WML_DOCUMENT_MAIN)
    graph = RelationshipGraph(registry)
    graph.add_scope(PACKAGE_SCOPE)
    graph.add_scope(DOCUMENT_PART)
    graph.add_relationship(PACKAGE_SCOPE, DOCUMENT_PART, RELTYPE_OFFICE_DOCUMENT)
    for page in document:
        stem = f"page{page.number:04d}"
        graph.add_media(page.vector, "svg", DOCUMENT_PART, stem=stem)
        graph.add_media(page.raster, "png", DOCUMENT_PART, stem=stem)
    body = Part(DOCUMENT_PART, CT_WML_DOCUMENT_MAIN, BODY)
    return registry, graph, body


@pytest.fixture
def packager():
    return DocxPackager()


class TestLayout:
    """Entry order and archive format."""

    def test_entries_written_in_fixed_order(self, packager, three_page_document):
        registry, graph, body = build_inputs(three_page_document)
        data = packager.write(three_page_document, registry.finalize(),
                              graph.relationship_parts(), body, graph.media_parts())

        assert read_zip(data).namelist() == [
            "[Content_Types].xml",
            "_rels/.rels",
            "word/document.xml",
            "word/_rels/document.xml.rels",
            "word/media/page0001.svg",
            "word/media/page0001.png",
            "word/media/page0002.svg",
            "word/media/page0002.png",
            "word/media/page0003.svg",
            "word/media/page0003.png",
        ]

    def test_output_is_deterministic(self, packager, three_page_document):
        outputs = []
        for _ in range(2):
            registry, graph, body = build_inputs(three_page_document)
            outputs.append(packager.write(three_page_document, registry.finalize(),
                                          graph.relationship_parts(), body, graph.media_parts()))
        assert outputs[0] == outputs[1]

    def test_entries_carry_fixed_timestamp(self, packager, single_page_document):
        registry, graph, body = build_inputs(single_page_document)
        data = packager.write(single_page_document, registry.finalize(),
                              graph.relationship_parts(), body, graph.media_parts())
        assert {info.date_time for info in read_zip(data).infolist()} == {(1980, 1, 1, 0, 0, 0)}

    def test_incompressible_media_is_stored(self, packager):
        document = Document()
        document.add_page(b"<svg>" + b"<g/>" * 200 + b"</svg>", os.urandom(4096), 10, 10)
        registry, graph, body = build_inputs(document)
        data = packager.write(document, registry.finalize(),
                              graph.relationship_parts(), body, graph.media_parts())

        infos = {info.filename: info for info in read_zip(data).infolist()}
        assert infos["word/media/page0001.png"].compress_type == zipfile.ZIP_STORED
        assert infos["word/media/page0001.svg"].compress_type == zipfile.ZIP_DEFLATED
        assert infos["word/document.xml"].compress_type == zipfile.ZIP_DEFLATED

    def test_payloads_round_trip(self, packager, single_page_document):
        registry, graph, body = build_inputs(single_page_document)
        data = packager.write(single_page_document, registry.finalize(),
                              graph.relationship_parts(), body, graph.media_parts())
        archive = read_zip(data)
        assert archive.read("word/media/page0001.svg") == b"<svg/>"
        assert archive.read("word/document.xml") == BODY


class TestFailures:
    """Errors are raised before any bytes are produced."""

    def test_missing_content_types_raises_not_finalized(self, packager, single_page_document):
        registry, graph, body = build_inputs(single_page_document)
        with pytest.raises(NotFinalized):
            packager.write(single_page_document, None, graph.relationship_parts(), body, graph.media_parts())

    def test_empty_document_raises(self, packager):
        registry, graph, body = build_inputs(Document())
        with pytest.raises(EmptyDocument):
            packager.write(Document(), registry.finalize(), graph.relationship_parts(), body, [])

    def test_duplicate_part_name_raises(self, packager, single_page_document):
        registry, graph, body = build_inputs(single_page_document)
        media = graph.media_parts()
        with pytest.raises(PackageIntegrity) as excinfo:
            packager.write(single_page_document, registry.finalize(),
                           graph.relationship_parts(), body, media + [media[0]])
        assert any("duplicate part name" in p for p in excinfo.value.problems)

    def test_dangling_relationship_raises(self, packager, single_page_document):
        registry, graph, body = build_inputs(single_page_document)
        media = graph.media_parts()
        with pytest.raises(PackageIntegrity) as excinfo:
            packager.write(single_page_document, registry.finalize(),
                           graph.relationship_parts(), body, media[:1])
        assert any("word/media/page0001.png" in p for p in excinfo.value.problems)

    def test_undeclared_content_type_raises(self, packager, single_page_document):
        registry, graph, body = build_inputs(single_page_document)
        stray = Part("word/media/extra.bin", "application/octet-stream", b"\x00")
        with pytest.raises(PackageIntegrity) as excinfo:
            packager.write(single_page_document, registry.finalize(),
                           graph.relationship_parts(), body, graph.media_parts() + [stray])
        assert any("no content type declared" in p for p in excinfo.value.problems)

    def test_unknown_embed_id_in_body_raises(self, packager, single_page_document):
        registry, graph, _ = build_inputs(single_page_document)
        body = Part(DOCUMENT_PART, CT_WML_DOCUMENT_MAIN, (
            b'<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"'
            b' xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
            b'<w:body><w:p r:embed="rId2"/><w:p r:embed="rId9"/></w:body></w:document>'
        ))
        with pytest.raises(PackageIntegrity) as excinfo:
            packager.write(single_page_document, registry.finalize(),
                           graph.relationship_parts(), body, graph.media_parts())
        assert excinfo.value.problems == [
            "'word/document.xml' references rId9 (r:embed) which is not in 'word/_rels/document.xml.rels'"
        ]
