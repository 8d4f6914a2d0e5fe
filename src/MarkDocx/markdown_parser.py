from __future__ import annotations

import logging
import re
from typing import List, Sequence

from .model import Block, Document, Heading, ListBlock, Paragraph, Run, TableBlock

logger = logging.getLogger(__name__)

FENCE = "```"
CODE_PLACEHOLDER = "Code block"
EMBEDDED_IMAGE_PREFIX = "data:image/"
BOM = "\ufeff"

_HEADING_RE = re.compile(r"^(#+)\s+(.+)$")
_BULLET_RE = re.compile(r"^[-*+]\s")
_ORDERED_RE = re.compile(r"^[0-9]+\.\s")
_ORDERED_START_RE = re.compile(r"^[0-9]+\.")
_BULLET_MARKER_RE = re.compile(r"^[-*+]\s*")
_ORDERED_MARKER_RE = re.compile(r"^[0-9]+\.\s*")
_SEPARATOR_RE = re.compile(r"[\s|:-]+")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")


def parse_markdown(text: str) -> Document:
    text = text.removeprefix(BOM)
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    blocks = _parse_blocks(lines)
    logger.debug("Parsed %d blocks from %d lines", len(blocks), len(lines))
    return Document(blocks=blocks)


def _parse_blocks(lines: Sequence[str]) -> List[Block]:
    blocks: List[Block] = []
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        if not line:
            i += 1
        elif line.startswith("#"):
            heading = _parse_heading(line)
            if heading is not None:
                blocks.append(heading)
            else:
                logger.debug("Skipping malformed heading on line %d", i + 1)
            i += 1
        elif _is_table_header(line, lines[i + 1] if i + 1 < len(lines) else None):
            table, i = _parse_table(lines, i)
            blocks.append(table)
        elif line.startswith(FENCE):
            code_block, i = _parse_code_block(lines, i)
            blocks.append(code_block)
        elif is_list_item(line):
            list_block, i = _parse_list(lines, i)
            blocks.append(list_block)
        else:
            paragraph, i = _parse_paragraph(lines, i)
            blocks.append(paragraph)
    return blocks


def _parse_heading(line: str) -> Heading | None:
    match = _HEADING_RE.match(line)
    if not match:
        return None
    level = min(len(match.group(1)), 6)
    return Heading(level=level, text=match.group(2))


def _parse_table(lines: Sequence[str], index: int) -> tuple[TableBlock, int]:
    rows = [_split_row(lines[index].strip())]
    i = index + 2  # header + separator
    while i < len(lines):
        line = lines[i].strip()
        if not line or "|" not in line:
            break
        rows.append(_split_row(line))
        i += 1
    return TableBlock(rows=rows), i


def _split_row(line: str) -> list[str]:
    cells = (cell.strip() for cell in line.split("|"))
    return [cell for cell in cells if cell]


def _parse_code_block(lines: Sequence[str], index: int) -> tuple[Paragraph, int]:
    # language tag after the opening fence is not kept
    code_lines: list[str] = []
    i = index + 1
    while i < len(lines):
        if lines[i].strip() == FENCE:
            i += 1
            break
        code_lines.append(lines[i])
        i += 1
    code = "\n".join(code_lines)
    return Paragraph(runs=[Run(code or CODE_PLACEHOLDER, code=True)]), i


def _parse_list(lines: Sequence[str], index: int) -> tuple[ListBlock, int]:
    ordered = bool(_ORDERED_START_RE.match(lines[index].strip()))
    marker_re = _ORDERED_MARKER_RE if ordered else _BULLET_MARKER_RE
    items: list[str] = []
    i = index
    while i < len(lines):
        line = lines[i].strip()
        if not is_list_item(line):
            break
        items.append(_plain_text(marker_re.sub("", line, count=1)))
        i += 1
    return ListBlock(ordered=ordered, items=items), i


def _parse_paragraph(lines: Sequence[str], index: int) -> tuple[Paragraph, int]:
    parts = [lines[index].strip()]
    i = index + 1
    while i < len(lines):
        line = lines[i].strip()
        if not line or _is_special_line(line):
            break
        parts.append(line)
        i += 1
    return Paragraph(runs=parse_inline(" ".join(parts))), i


def is_list_item(line: str) -> bool:
    return bool(_BULLET_RE.match(line) or _ORDERED_RE.match(line))


def _is_table_header(line: str, next_line: str | None) -> bool:
    if next_line is None or "|" not in line:
        return False
    separator = next_line.strip()
    return "|" in separator and bool(_SEPARATOR_RE.fullmatch(separator))


def _is_special_line(line: str) -> bool:
    return line.startswith("#") or line.startswith(FENCE) or is_list_item(line) or "|" in line


def _plain_text(text: str) -> str:
    return "".join(run.text for run in parse_inline(text))


def parse_inline(text: str) -> List[Run]:
    """Split ``text`` into runs with a single left-to-right toggle scan.

    ``**``, ``*`` and backticks flip bold, italic and code. Links and images
    are emitted as runs of their own. A marker that is never closed stays on
    until the end of the text.
    """
    runs: List[Run] = []
    buffer: list[str] = []
    bold = italic = code = False

    def flush() -> None:
        if buffer:
            runs.append(Run("".join(buffer), bold=bold, italic=italic, code=code))
            buffer.clear()

    i = 0
    while i < len(text):
        char = text[i]
        if text.startswith("**", i):
            flush()
            bold = not bold
            i += 2
        elif char == "*":
            flush()
            italic = not italic
            i += 1
        elif char == "`":
            flush()
            code = not code
            i += 1
        elif char == "[" and not (i > 0 and text[i - 1] == "!") and (match := _LINK_RE.match(text, i)):
            flush()
            runs.append(Run(match.group(1), bold=bold, italic=italic, code=code, link=match.group(2)))
            i = match.end()
        elif char == "!" and (match := _IMAGE_RE.match(text, i)):
            flush()
            runs.append(_image_run(alt=match.group(1), src=match.group(2)))
            i = match.end()
        else:
            buffer.append(char)
            i += 1
    flush()

    return runs or [Run(text)]


def _image_run(alt: str, src: str) -> Run:
    if src.startswith(EMBEDDED_IMAGE_PREFIX):
        return Run(f"[Embedded Image: {alt or 'Image'}]", italic=True, image=src)
    return Run(f"[Image: {alt or src}]", italic=True)
