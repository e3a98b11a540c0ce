"""Shared fixtures for the docx_core test suite."""

import io
import sys
import zipfile
from pathlib import Path

import fitz  # PyMuPDF
import pytest
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent))

from docx_core.packaging import Document


SVG_BYTES = b'<svg xmlns="http://www.w3.org/2000/svg" width="100" height="200"/>'


def make_png(width: int, height: int, color=(255, 255, 255)) -> bytes:
    """Encode a solid-colour PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_pdf(path: Path, sizes) -> Path:
    """Write a PDF with one page per (width, height) in points."""
    doc = fitz.open()
    for number, (width, height) in enumerate(sizes, start=1):
        page = doc.new_page(width=width, height=height)
        page.insert_text((10, 20), f"Page {number}")
    doc.save(str(path))
    doc.close()
    return path


def read_zip(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


@pytest.fixture
def png_bytes():
    return make_png(10, 20)


@pytest.fixture
def single_page_document():
    """The one-page scenario: SVG + PNG at 100x200 px."""
    document = Document()
    document.add_page(b"<svg/>", b"\x89PNG\r\n\x1a\nfake", 100, 200)
    return document


@pytest.fixture
def three_page_document():
    """Three pages with identical size and distinct content."""
    document = Document()
    for number in range(1, 4):
        document.add_page(
            f'<svg id="p{number}"/>'.encode(),
            make_png(10, 10, color=(number * 40, 0, 0)),
            120,
            160,
        )
    return document


@pytest.fixture
def sample_pdf(tmp_path):
    """Two-page PDF: 144x72 pt and 72x144 pt (192x96 px and 96x192 px at 96 DPI)."""
    return make_pdf(tmp_path / "sample.pdf", [(144, 72), (72, 144)])
