#!/usr/bin/env python3
"""PDF -> (per-page SVG + PNG) -> image-only DOCX

This orchestrator:
  1) Renders every PDF page twice: an SVG rendition and a PNG fallback.
  2) Embeds each page as a full-page picture, one page per section.
  3) Writes the .docx atomically and validates its package structure.

Usage:
  python pdf_to_docx.py input.pdf output.docx
  python pdf_to_docx.py input.pdf output.docx --renderer inkscape
  python pdf_to_docx.py input.pdf output.docx --dpi 200 --config config.yaml

Exit codes:
  0 success, 1 assembly error, 2 usage error, 3 rasterizer not found,
  4 invalid or missing PDF, 5 rendering failure
"""

from __future__ import annotations

import argparse
import logging
import sys
import tempfile
from dataclasses import replace
from pathlib import Path

from docx_core.adapters import FitzRenderer, InkscapeRenderer, PageRenderer
from docx_core.assembler import DocxAssembler
from docx_core.config import PipelineConfig, get_default_config, load_config
from docx_core.errors import DocxAssemblyError, InvalidSource, RasterizerNotFound, RenderError
from docx_core.packaging import Document

logger = logging.getLogger("pdf_to_docx")

EXIT_OK = 0
EXIT_ASSEMBLY_ERROR = 1
EXIT_RASTERIZER_NOT_FOUND = 3
EXIT_INVALID_PDF = 4
EXIT_RENDER_ERROR = 5


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Convert a PDF into a DOCX made of full-page SVG pictures with PNG fallbacks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Basic usage (PyMuPDF renderer, 150 DPI fallback images):
    python pdf_to_docx.py mybook.pdf mybook.docx

  Render through the Inkscape CLI (poppler import):
    python pdf_to_docx.py mybook.pdf mybook.docx --renderer inkscape

  Sharper PNG fallbacks:
    python pdf_to_docx.py mybook.pdf mybook.docx --dpi 300
        """
    )
    ap.add_argument("pdf", help="Path to input PDF")
    ap.add_argument("output", help="Path of the DOCX file to create")
    ap.add_argument("--config", default=None, help="YAML or JSON configuration file")
    ap.add_argument("--renderer", choices=["fitz", "inkscape"], default=None,
                    help="Page renderer (default: from config, else fitz)")
    ap.add_argument("--dpi", type=int, default=None, help="Resolution of the PNG fallback images")
    ap.add_argument("--inkscape", default=None, help="Inkscape executable (default: inkscape)")
    ap.add_argument("--margin", type=int, default=None, help="Page margin in pixels (default: 0)")
    ap.add_argument("--no-validate", action="store_true", help="Skip structural validation of the output")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def resolve_config(args: argparse.Namespace) -> PipelineConfig:
    """
    Load the config file (if any) and apply command-line overrides.

    Overrides go through ``dataclasses.replace`` so each section is
    validated again.

    Raises:
        ValueError: If an override is out of range
    """
    config = load_config(Path(args.config)) if args.config else get_default_config()

    render_overrides = {
        key: value for key, value in (
            ("renderer", args.renderer),
            ("dpi", args.dpi),
            ("inkscape_path", args.inkscape),
        ) if value is not None
    }
    if render_overrides:
        config.render = replace(config.render, **render_overrides)
    if args.margin is not None:
        config.layout = replace(config.layout, margin_px=args.margin)
    if args.no_validate:
        config.validate_output = False
    if args.verbose:
        config.log_level = "DEBUG"
    return config


def make_renderer(pdf_path: Path, config: PipelineConfig, workdir: Path) -> PageRenderer:
    render = config.render
    if render.renderer == "inkscape":
        return InkscapeRenderer(pdf_path, workdir, executable=render.inkscape_path,
                                dpi=render.dpi, timeout_seconds=render.timeout_seconds)
    return FitzRenderer(pdf_path, dpi=render.dpi)


def convert(pdf_path: Path, output_path: Path, config: PipelineConfig) -> bool:
    """Render every page of ``pdf_path`` and write the DOCX. Returns success."""
    scratch_root = config.temp_dir or None
    with tempfile.TemporaryDirectory(prefix="pdf_to_docx_", dir=scratch_root) as tmpdir:
        renderer = make_renderer(pdf_path, config, Path(tmpdir))
        try:
            document = Document.from_tuples(renderer.iter_pages())
        finally:
            if isinstance(renderer, FitzRenderer):
                renderer.close()

    logger.info(f"Rendered {len(document)} page(s); generating the final result")
    result = DocxAssembler(config).write(document, output_path)
    for line in result.summary().splitlines():
        logger.info(line)
    return result.success


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_ASSEMBLY_ERROR

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    pdf_path = Path(args.pdf).resolve()
    output_path = Path(args.output).resolve()

    try:
        ok = convert(pdf_path, output_path, config)
    except RasterizerNotFound as e:
        logger.error(str(e))
        return EXIT_RASTERIZER_NOT_FOUND
    except InvalidSource as e:
        logger.error(f"Invalid PDF: {e}")
        return EXIT_INVALID_PDF
    except RenderError as e:
        logger.error(f"Something went wrong while processing the images: {e}")
        return EXIT_RENDER_ERROR
    except DocxAssemblyError as e:
        logger.error(f"Could not assemble {output_path.name}: {e}")
        return EXIT_ASSEMBLY_ERROR

    return EXIT_OK if ok else EXIT_ASSEMBLY_ERROR


if __name__ == "__main__":
    sys.exit(main())
