"""
docx_core
=========

Assembles image-only DOCX packages from rendered PDF pages. Each page is
embedded as a full-page picture carrying an SVG rendition with a PNG
fallback.

Architecture
------------

    docx_core/
    ├── packaging/     - Data model, content types, relationships, ZIP writer
    ├── wordml/        - word/document.xml generation
    ├── xml/           - lxml helpers
    ├── validation/    - Structural checks of finished packages
    ├── adapters/      - Page renderers (PyMuPDF, Inkscape)
    ├── config/        - Configuration management
    ├── assembler.py   - The packaging pipeline
    ├── errors.py      - Error kinds
    └── units.py       - Pixel / EMU / twip conversions

Usage
-----

    from docx_core import DocxAssembler, Document, FitzRenderer

    with FitzRenderer(Path("in.pdf")) as renderer:
        document = Document.from_tuples(renderer.iter_pages())
    DocxAssembler().write(document, Path("out.docx"))

"""

__version__ = "1.0.0"

from docx_core.errors import (
    DocxAssemblyError,
    TypeConflict,
    NotFinalized,
    UnknownScope,
    PackageIntegrity,
    EmptyDocument,
    InvalidPage,
    RenderError,
    RasterizerNotFound,
    InvalidSource,
)

from docx_core.packaging import (
    Page,
    Document,
    Part,
    Relationship,
    PackageResult,
    ContentTypeRegistry,
    RelationshipGraph,
    DocxPackager,
)

from docx_core.wordml import (
    DocumentBodyGenerator,
)

from docx_core.assembler import (
    DocxAssembler,
    build_docx,
    write_docx,
)

from docx_core.validation import (
    PackageValidator,
    ValidationResult,
)

from docx_core.adapters import (
    PageRenderer,
    RenderedPage,
    FitzRenderer,
    InkscapeRenderer,
)

from docx_core.config import (
    PipelineConfig,
    load_config,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "DocxAssemblyError",
    "TypeConflict",
    "NotFinalized",
    "UnknownScope",
    "PackageIntegrity",
    "EmptyDocument",
    "InvalidPage",
    "RenderError",
    "RasterizerNotFound",
    "InvalidSource",
    # Packaging
    "Page",
    "Document",
    "Part",
    "Relationship",
    "PackageResult",
    "ContentTypeRegistry",
    "RelationshipGraph",
    "DocxPackager",
    "DocumentBodyGenerator",
    # Pipeline
    "DocxAssembler",
    "build_docx",
    "write_docx",
    # Validation
    "PackageValidator",
    "ValidationResult",
    # Rendering
    "PageRenderer",
    "RenderedPage",
    "FitzRenderer",
    "InkscapeRenderer",
    # Config
    "PipelineConfig",
    "load_config",
]
