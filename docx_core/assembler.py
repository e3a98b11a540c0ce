"""
DOCX Assembler
==============

Runs the packaging pipeline for a sequence of pages:

    pages -> media parts + relationship ids -> body fragments
          -> content-type table -> ZIP archive

and writes the archive atomically so a failed build never leaves a
partial file at the destination.
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence, Union
import logging

from docx_core.config.settings import PipelineConfig
from docx_core.errors import EmptyDocument
from docx_core.packaging.base import (
    CT_WML_DOCUMENT_MAIN,
    DOCUMENT_PART,
    PACKAGE_SCOPE,
    RELTYPE_OFFICE_DOCUMENT,
    Document,
    PackageResult,
    Part,
)
from docx_core.packaging.content_types import ContentTypeRegistry, normalize_extension
from docx_core.packaging.docx_packager import DocxPackager
from docx_core.packaging.relationships import RelationshipGraph
from docx_core.validation.package_validator import PackageValidator
from docx_core.wordml.body import DocumentBodyGenerator

logger = logging.getLogger(__name__)

PageInput = Union[Document, Iterable[Sequence[Any]]]


class DocxAssembler:
    """
    Assembles pages into a DOCX package.

    Each call to :meth:`assemble` builds fresh registries, so one
    assembler can be reused for many documents.

    Example:
        assembler = DocxAssembler()
        document = Document.from_tuples(rendered_pages)
        result = assembler.write(document, Path("out.docx"))
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.packager = DocxPackager(self.config.packaging)
        self.validator = PackageValidator()

    def assemble(self, document: Document) -> bytes:
        """
        Build the package bytes for ``document``.

        Raises:
            EmptyDocument: If the document has no pages
            TypeConflict: If two pages disagree on a rendition's media type
            PackageIntegrity: If the assembled parts are inconsistent
        """
        if len(document) == 0:
            raise EmptyDocument()

        packaging = self.config.packaging
        registry = ContentTypeRegistry()
        graph = RelationshipGraph(
            registry,
            media_dir=packaging.media_dir_name,
            media_prefix=packaging.media_prefix,
            media_padding=packaging.media_padding,
        )
        generator = DocumentBodyGenerator(self.config.layout)

        registry.register_override(DOCUMENT_PART, CT_WML_DOCUMENT_MAIN)
        graph.add_scope(PACKAGE_SCOPE)
        graph.add_scope(DOCUMENT_PART)
        graph.add_relationship(PACKAGE_SCOPE, DOCUMENT_PART, RELTYPE_OFFICE_DOCUMENT)

        fragments = []
        for page in document:
            stem = f"{packaging.media_prefix}{page.number:0{packaging.media_padding}d}"
            same_format = normalize_extension(page.raster_format) == normalize_extension(page.vector_format)
            raster_stem = f"{stem}_fallback" if same_format else stem
            vector = graph.add_media(
                page.vector, page.vector_format, DOCUMENT_PART,
                media_type=page.vector_media_type, stem=stem,
                context=f"page {page.index} vector",
            )
            raster = graph.add_media(
                page.raster, page.raster_format, DOCUMENT_PART,
                media_type=page.raster_media_type, stem=raster_stem,
                context=f"page {page.index} raster",
            )
            fragments.append(generator.emit_page(page, vector.r_id, raster.r_id))

        body_part = Part(DOCUMENT_PART, CT_WML_DOCUMENT_MAIN, generator.finalize(fragments))
        content_types = registry.finalize()

        return self.packager.write(
            document,
            content_types,
            graph.relationship_parts(),
            body_part,
            graph.media_parts(),
        )

    def write(self, document: Document, output_path: Path) -> PackageResult:
        """
        Assemble ``document`` and move the result into place at ``output_path``.

        The archive is written to a temporary file in the destination
        directory first and renamed only once it is complete.

        Returns:
            PackageResult describing the written package

        Raises:
            DocxAssemblyError: Any assembly error; nothing is written in that case
        """
        output_path = Path(output_path)
        data = self.assemble(document)

        result = PackageResult(output_path=output_path)
        result.pages_packaged = len(document)
        result.media_packaged = 2 * len(document)

        if self.config.validate_output:
            validation = self.validator.validate_bytes(data)
            result.metadata['validation'] = validation.summary()
            if not validation.is_valid:
                for issue in validation.errors:
                    result.add_error(str(issue))
                logger.error(f"Refusing to write invalid package:\n{validation.summary()}")
                return result

        _atomic_write(output_path, data)
        result.total_size_bytes = output_path.stat().st_size
        logger.info(f"Created package: {output_path} ({result.total_size_bytes} bytes)")
        return result


def _atomic_write(output_path: Path, data: bytes) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(tmp_name, output_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def _as_document(pages: PageInput) -> Document:
    if isinstance(pages, Document):
        return pages
    return Document.from_tuples(pages)


def build_docx(pages: PageInput, config: Optional[PipelineConfig] = None) -> bytes:
    """
    Build a DOCX package from pages.

    Args:
        pages: A Document or ``(vector, raster, width, height)`` tuples
        config: Optional pipeline configuration

    Returns:
        Package bytes
    """
    return DocxAssembler(config).assemble(_as_document(pages))


def write_docx(pages: PageInput, output_path: Path, config: Optional[PipelineConfig] = None) -> PackageResult:
    """Build a DOCX package from pages and write it atomically to ``output_path``."""
    return DocxAssembler(config).write(_as_document(pages), Path(output_path))
