"""
Renderer adapter tests.

Run with: pytest tests/test_adapters.py -v
"""

import subprocess

import fitz  # PyMuPDF
import pytest

from conftest import make_png
from docx_core.adapters import FitzRenderer, InkscapeRenderer, RenderedPage, count_pdf_pages
from docx_core.adapters import inkscape_renderer
from docx_core.errors import InvalidSource, RasterizerNotFound, RenderError
from docx_core.packaging import Document


class MuPDFFailure(Exception):
    """Stands in for the FzError* exceptions of recent PyMuPDF releases."""


class TestCountPages:

    def test_counts_pages(self, sample_pdf):
        assert count_pdf_pages(sample_pdf) == 2

    def test_broken_pdf(self, tmp_path):
        broken = tmp_path / "broken.pdf"
        broken.write_bytes(b"this is not a pdf at all")
        with pytest.raises(InvalidSource):
            count_pdf_pages(broken)

    def test_open_failure_becomes_invalid_source(self, monkeypatch, sample_pdf):
        def failing_open(*args, **kwargs):
            raise MuPDFFailure("cannot open document")

        monkeypatch.setattr(fitz, "open", failing_open)
        with pytest.raises(InvalidSource):
            count_pdf_pages(sample_pdf)


class TestFitzRenderer:

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidSource):
            FitzRenderer(tmp_path / "missing.pdf")

    def test_render_sizes_follow_96_dpi(self, sample_pdf):
        with FitzRenderer(sample_pdf, dpi=72) as renderer:
            first = renderer.render(0)
            second = renderer.render(1)

        assert (first.width, first.height) == (192, 96)
        assert (second.width, second.height) == (96, 192)

    def test_renditions_are_svg_and_png(self, sample_pdf):
        with FitzRenderer(sample_pdf) as renderer:
            page = renderer.render(0)
        assert b"<svg" in page.vector[:200]
        assert page.raster.startswith(b"\x89PNG\r\n\x1a\n")

    def test_out_of_range(self, sample_pdf):
        with FitzRenderer(sample_pdf) as renderer:
            with pytest.raises(RenderError):
                renderer.render(2)

    def test_library_failure_becomes_render_error(self, monkeypatch, sample_pdf):
        def broken_pixmap(page, *args, **kwargs):
            raise MuPDFFailure("Invalid bandwriter header dimensions/setup")

        monkeypatch.setattr(fitz.Page, "get_pixmap", broken_pixmap)
        with FitzRenderer(sample_pdf) as renderer:
            with pytest.raises(RenderError) as excinfo:
                renderer.render(1)
        assert excinfo.value.page_index == 1
        assert isinstance(excinfo.value.__cause__, MuPDFFailure)

    def test_pages_feed_a_document_in_order(self, sample_pdf):
        with FitzRenderer(sample_pdf) as renderer:
            document = Document.from_tuples(renderer.iter_pages())
        assert [(p.index, p.width) for p in document] == [(0, 192), (1, 96)]


class FakeInkscape:
    """Stands in for the inkscape binary; writes the requested export."""

    def __init__(self, png_size=(300, 150), fail=False):
        self.png_size = png_size
        self.fail = fail
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        if self.fail:
            raise subprocess.CalledProcessError(1, cmd, stderr=b"poppler error")
        target = next(a.split("=", 1)[1] for a in cmd if a.startswith("--export-filename="))
        if target.endswith(".svg"):
            data = b'<svg xmlns="http://www.w3.org/2000/svg"/>'
        else:
            data = make_png(*self.png_size)
        with open(target, "wb") as f:
            f.write(data)
        return subprocess.CompletedProcess(cmd, 0, b"", b"")


@pytest.fixture
def fake_inkscape(monkeypatch):
    fake = FakeInkscape()
    monkeypatch.setattr(inkscape_renderer.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(inkscape_renderer.subprocess, "run", fake)
    return fake


class TestInkscapeRenderer:

    def test_missing_executable(self, monkeypatch, sample_pdf, tmp_path):
        monkeypatch.setattr(inkscape_renderer.shutil, "which", lambda name: None)
        with pytest.raises(RasterizerNotFound):
            InkscapeRenderer(sample_pdf, tmp_path / "work")

    def test_render_runs_svg_then_png_export(self, fake_inkscape, sample_pdf, tmp_path):
        renderer = InkscapeRenderer(sample_pdf, tmp_path / "work", dpi=150)
        page = renderer.render(1)

        svg_cmd, png_cmd = fake_inkscape.calls
        assert "--pdf-page=2" in svg_cmd
        assert "--export-type=svg" in svg_cmd
        assert "--export-type=png" in png_cmd
        assert png_cmd[-1].endswith("page0002.svg")
        assert isinstance(page, RenderedPage)
        assert page.vector.startswith(b"<svg")

    def test_size_is_normalised_to_96_dpi(self, fake_inkscape, sample_pdf, tmp_path):
        renderer = InkscapeRenderer(sample_pdf, tmp_path / "work", dpi=150)
        vector, raster, width, height = renderer.render(0)
        assert (width, height) == (192, 96)
        assert raster.startswith(b"\x89PNG")

    def test_process_failure(self, monkeypatch, sample_pdf, tmp_path):
        monkeypatch.setattr(inkscape_renderer.shutil, "which", lambda name: "/usr/bin/inkscape")
        monkeypatch.setattr(inkscape_renderer.subprocess, "run", FakeInkscape(fail=True))
        renderer = InkscapeRenderer(sample_pdf, tmp_path / "work")
        with pytest.raises(RenderError) as excinfo:
            renderer.render(0)
        assert "poppler error" in str(excinfo.value)
        assert excinfo.value.page_index == 0
