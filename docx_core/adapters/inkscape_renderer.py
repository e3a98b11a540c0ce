"""
Inkscape Renderer
=================

Renders pages out-of-process with the Inkscape command line: the PDF page
is imported through poppler and exported as SVG, and the SVG is then
exported as PNG. Intermediate files live in a caller-owned scratch
directory.
"""

import io
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional
import logging

from PIL import Image

from docx_core.adapters.base import PageRenderer, RenderedPage, count_pdf_pages
from docx_core.errors import RasterizerNotFound, RenderError
from docx_core.units import scale_px_to_reference

logger = logging.getLogger(__name__)


def find_inkscape(executable: str = "inkscape") -> str:
    """
    Locate the Inkscape executable.

    Raises:
        RasterizerNotFound: If it is not installed or not on PATH
    """
    found = shutil.which(executable)
    if not found:
        raise RasterizerNotFound(f"Inkscape not found ('{executable}'). Consider installing inkscape?")
    return found


class InkscapeRenderer(PageRenderer):
    """
    Page renderer backed by the Inkscape CLI (1.x).

    Example:
        with tempfile.TemporaryDirectory() as tmp:
            renderer = InkscapeRenderer(Path("in.pdf"), Path(tmp))
            pages = list(renderer.iter_pages())
    """

    def __init__(self,
                 pdf_path: Path,
                 workdir: Path,
                 executable: str = "inkscape",
                 dpi: int = 150,
                 timeout_seconds: Optional[int] = 120):
        """
        Initialize the renderer.

        Args:
            pdf_path: Source PDF
            workdir: Scratch directory for intermediate SVG/PNG files
            executable: Inkscape command name or path
            dpi: PNG export resolution
            timeout_seconds: Per-command timeout, None for no limit
        """
        super().__init__(pdf_path)
        self.executable = find_inkscape(executable)
        self.workdir = Path(workdir)
        self.workdir.mkdir(parents=True, exist_ok=True)
        self.dpi = dpi
        self.timeout_seconds = timeout_seconds
        self._page_count = count_pdf_pages(self.pdf_path)

    def page_count(self) -> int:
        return self._page_count

    def render(self, page_index: int) -> RenderedPage:
        self._check_index(page_index)
        stem = f"page{page_index + 1:04d}"
        svg_path = self.workdir / f"{stem}.svg"
        png_path = self.workdir / f"{stem}.png"

        self._run([
            self.executable,
            "--pdf-poppler",
            f"--pdf-page={page_index + 1}",
            "--export-type=svg",
            "--export-plain-svg",
            f"--export-filename={svg_path}",
            str(self.pdf_path),
        ], page_index)
        self._run([
            self.executable,
            "--export-type=png",
            f"--export-dpi={self.dpi}",
            "--export-background-opacity=1",
            f"--export-filename={png_path}",
            str(svg_path),
        ], page_index)

        for produced in (svg_path, png_path):
            if not produced.is_file() or produced.stat().st_size == 0:
                raise RenderError(f"Inkscape produced no output at {produced.name}", page_index)

        svg = svg_path.read_bytes()
        png = png_path.read_bytes()
        width, height = self._reference_size(png, page_index)

        logger.debug(f"Rendered page {page_index}: {width}x{height}px via Inkscape")
        return RenderedPage(svg, png, width, height)

    def _reference_size(self, png: bytes, page_index: int) -> tuple:
        try:
            with Image.open(io.BytesIO(png)) as img:
                px_width, px_height = img.size
        except OSError as e:
            raise RenderError(f"Unreadable PNG from Inkscape: {e}", page_index) from e
        return (max(1, scale_px_to_reference(px_width, self.dpi)),
                max(1, scale_px_to_reference(px_height, self.dpi)))

    def _run(self, cmd: List[str], page_index: int) -> None:
        """Run a command and raise a readable error on failure."""
        printable = " ".join(shlex.quote(c) for c in cmd)
        logger.debug(f"Running: {printable}")
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=self.timeout_seconds)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode('utf-8', errors='replace').strip()
            raise RenderError(f"Inkscape exited with status {e.returncode}: {stderr}", page_index) from e
        except subprocess.TimeoutExpired as e:
            raise RenderError(f"Inkscape timed out after {e.timeout}s", page_index) from e
