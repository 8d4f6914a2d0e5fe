from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml
from docx.shared import Inches, Length, Pt

from . import docx_format


@dataclass(frozen=True)
class HeadingStyle:
    font: str
    size: Length
    color: str
    space_before: int
    italic: bool = False


def _default_heading_styles() -> dict[int, HeadingStyle]:
    return {
        1: HeadingStyle(docx_format.HEADING_FONT, Pt(16), "2F5496", 480),
        2: HeadingStyle(docx_format.HEADING_FONT, Pt(13), "2F5496", 200),
        3: HeadingStyle(docx_format.HEADING_FONT, Pt(12), "1F3763", 200),
        4: HeadingStyle(docx_format.HEADING_FONT, Pt(11), "2F5496", 200, italic=True),
        5: HeadingStyle(docx_format.HEADING_FONT, Pt(11), "2F5496", 200),
        6: HeadingStyle(docx_format.HEADING_FONT, Pt(11), "1F3763", 200),
    }


@dataclass
class RenderConfig:
    code_font: str = docx_format.CODE_FONT
    page_width: Length = field(default_factory=lambda: Inches(docx_format.LETTER_WIDTH_IN))
    page_height: Length = field(default_factory=lambda: Inches(docx_format.LETTER_HEIGHT_IN))
    margin: Length = field(default_factory=lambda: Inches(docx_format.MARGIN_IN))
    table_column_width: int = docx_format.TABLE_COLUMN_WIDTH_DXA
    border_size: int = docx_format.BORDER_SIZE
    border_color: str = docx_format.BORDER_COLOR
    heading_styles: dict[int, HeadingStyle] = field(default_factory=_default_heading_styles)


def load_config(path: str | Path) -> RenderConfig:
    """Load render settings from a YAML file, keeping defaults for omitted keys."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping.")

    config = RenderConfig()
    if "code_font" in data:
        config.code_font = str(data["code_font"])

    page = _section(data, "page")
    if "width_in" in page:
        config.page_width = Inches(float(page["width_in"]))
    if "height_in" in page:
        config.page_height = Inches(float(page["height_in"]))
    if "margin_in" in page:
        config.margin = Inches(float(page["margin_in"]))

    table = _section(data, "table")
    if "column_width" in table:
        config.table_column_width = int(table["column_width"])
    if "border_size" in table:
        config.border_size = int(table["border_size"])
    if "border_color" in table:
        config.border_color = str(table["border_color"])

    for key, overrides in _section(data, "headings").items():
        level = _heading_level(key)
        config.heading_styles[level] = _heading_style(config.heading_styles[level], overrides or {})
    return config


def _section(data: dict, key: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a mapping.")
    return value


def _heading_level(value) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Heading level must be an integer, got {value!r}.") from None
    if not 1 <= level <= 6:
        raise ValueError(f"Heading level must be between 1 and 6, got {level}.")
    return level


def _heading_style(base: HeadingStyle, overrides: dict) -> HeadingStyle:
    if not isinstance(overrides, dict):
        raise ValueError("Heading style overrides must be a mapping.")
    changes = {}
    if "font" in overrides:
        changes["font"] = str(overrides["font"])
    if "size_pt" in overrides:
        changes["size"] = Pt(float(overrides["size_pt"]))
    if "color" in overrides:
        changes["color"] = str(overrides["color"])
    if "space_before" in overrides:
        changes["space_before"] = int(overrides["space_before"])
    if "italic" in overrides:
        changes["italic"] = bool(overrides["italic"])
    return replace(base, **changes)
