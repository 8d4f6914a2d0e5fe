"""Markdown to DOCX conversion entry points.

``convert_text`` runs the parser and the generator back to back;
``convert_file`` adds file handling around it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from . import markdown_parser, renderer_docx
from .config import RenderConfig
from .utils import MARKDOWN_SUFFIXES, is_markdown_file, read_markdown, resolve_output_path

logger = logging.getLogger(__name__)

MD_TO_DOCX = "md-to-docx"
DOCX_TO_MD = "docx-to-md"
MODES = (MD_TO_DOCX, DOCX_TO_MD)

__all__ = ["DOCX_TO_MD", "MARKDOWN_SUFFIXES", "MD_TO_DOCX", "MODES", "convert_file", "convert_text"]


def convert_text(markdown_text: str, config: RenderConfig | None = None) -> bytes:
    document = markdown_parser.parse_markdown(markdown_text)
    logger.debug("Parsed %d blocks", len(document.blocks))
    data = renderer_docx.build_docx(document.blocks, config)
    logger.debug("Generated %d bytes", len(data))
    return data


def convert_file(
    input_path: str | Path,
    output: str | Path | None = None,
    mode: str = MD_TO_DOCX,
    config: RenderConfig | None = None,
) -> Path:
    """Convert one Markdown file and return the path of the written .docx."""
    if mode == DOCX_TO_MD:
        raise NotImplementedError("DOCX to MD conversion not yet implemented")
    if mode != MD_TO_DOCX:
        raise ValueError(f"Unknown conversion mode: {mode}")

    input_path = Path(input_path).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    if not is_markdown_file(input_path):
        raise ValueError(f"Unsupported file type: {input_path.name} (expected .md or .markdown)")

    output_path = resolve_output_path(input_path, output)
    data = convert_text(read_markdown(input_path), config)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    return output_path
