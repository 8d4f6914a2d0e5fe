from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List


@dataclass(frozen=True)
class Block:
    """Base class for block-level nodes."""


@dataclass
class Document:
    blocks: List[Block] = field(default_factory=list)
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class Heading(Block):
    level: int
    text: str


@dataclass(frozen=True)
class Paragraph(Block):
    runs: List["Run"]


@dataclass(frozen=True)
class ListBlock(Block):
    ordered: bool
    items: List[str]


@dataclass(frozen=True)
class TableBlock(Block):
    """Pipe table; the first row is the header."""

    rows: List[List[str]]


@dataclass(frozen=True)
class Run:
    """Span of paragraph text sharing one formatting state.

    ``link`` holds the target of a ``[text](url)`` link, ``image`` the
    ``data:image/...`` source of an embedded image placeholder. A run never
    carries both.
    """

    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    link: str | None = None
    image: str | None = None
