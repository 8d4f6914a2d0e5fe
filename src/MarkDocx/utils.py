from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

MARKDOWN_SUFFIXES = (".md", ".markdown")

_MARKDOWN_SUFFIX_RE = re.compile(r"\.(md|markdown)$", re.IGNORECASE)


def configure_logging(verbose: bool = False) -> None:
    """Configure a simple console logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )


def is_markdown_file(path: Path) -> bool:
    return path.suffix.lower() in MARKDOWN_SUFFIXES


def output_name(input_path: Path) -> str:
    return f"{_MARKDOWN_SUFFIX_RE.sub('', input_path.name)}.docx"


def resolve_output_path(input_path: Path, output: Optional[str | Path]) -> Path:
    if output:
        out_path = Path(output)
        if out_path.is_dir():
            out_path = out_path / output_name(input_path)
        return out_path
    return input_path.with_name(output_name(input_path))


def read_markdown(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")
