from __future__ import annotations

import re
from typing import TYPE_CHECKING

from docx.oxml.ns import nsmap

if TYPE_CHECKING:
    from .config import HeadingStyle, RenderConfig

LETTER_WIDTH_IN = 8.5
LETTER_HEIGHT_IN = 11
MARGIN_IN = 1

CODE_FONT = "Courier New"
HEADING_FONT = "Calibri Light"

TABLE_COLUMN_WIDTH_DXA = 2000
BORDER_SIZE = 4
BORDER_COLOR = "000000"
BORDER_SIDES = ("top", "left", "bottom", "right", "insideH", "insideV")

ORDERED_NUM_ID = 1
BULLET_NUM_ID = 2

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
W_NS = nsmap["w"]
R_NS = nsmap["r"]

# C0 controls other than tab, LF and CR are not allowed in XML 1.0
_INVALID_XML_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

_XML_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def escape_xml(text: str) -> str:
    """Escape the five XML special characters for string-built parts.

    Control characters XML cannot carry are dropped.
    """
    text = _INVALID_XML_CHARS_RE.sub("", text)
    for char, entity in _XML_ENTITIES:
        text = text.replace(char, entity)
    return text


def text_element(text: str) -> str:
    return f'<w:t xml:space="preserve">{escape_xml(text)}</w:t>'


def run_properties(bold: bool, italic: bool, code: bool, config: RenderConfig) -> str:
    # CT_RPr order: rFonts before b before i
    properties = ""
    if code:
        font = escape_xml(config.code_font)
        properties += f'<w:rFonts w:ascii="{font}" w:hAnsi="{font}"/>'
    if bold:
        properties += "<w:b/>"
    if italic:
        properties += "<w:i/>"
    return f"<w:rPr>{properties}</w:rPr>" if properties else ""


def section_properties(config: RenderConfig) -> str:
    """US Letter page with equal margins on all sides."""
    margin = config.margin.twips
    return (
        "<w:sectPr>"
        f'<w:pgSz w:w="{config.page_width.twips}" w:h="{config.page_height.twips}"/>'
        f'<w:pgMar w:top="{margin}" w:right="{margin}" w:bottom="{margin}" w:left="{margin}"/>'
        "</w:sectPr>"
    )


def table_borders(config: RenderConfig) -> str:
    borders = "".join(
        f'<w:{side} w:val="single" w:sz="{config.border_size}" w:space="0" w:color="{config.border_color}"/>'
        for side in BORDER_SIDES
    )
    return f"<w:tblBorders>{borders}</w:tblBorders>"


def styles_xml(config: RenderConfig) -> str:
    styles = [
        '<w:style w:type="paragraph" w:default="1" w:styleId="Normal">'
        '<w:name w:val="Normal"/><w:qFormat/>'
        "</w:style>"
    ]
    for level, style in sorted(config.heading_styles.items()):
        styles.append(_heading_style_xml(level, style))
    return f'{XML_DECLARATION}<w:styles xmlns:w="{W_NS}">{"".join(styles)}</w:styles>'


def _heading_style_xml(level: int, style: HeadingStyle) -> str:
    font = escape_xml(style.font)
    italic = "<w:i/>" if style.italic else ""
    return (
        f'<w:style w:type="paragraph" w:styleId="Heading{level}">'
        f'<w:name w:val="heading {level}"/>'
        '<w:basedOn w:val="Normal"/>'
        '<w:next w:val="Normal"/>'
        "<w:qFormat/>"
        f'<w:pPr><w:keepNext/><w:spacing w:before="{style.space_before}" w:after="0"/>'
        f'<w:outlineLvl w:val="{level - 1}"/></w:pPr>'
        f'<w:rPr><w:rFonts w:ascii="{font}" w:hAnsi="{font}"/>{italic}'
        f'<w:color w:val="{escape_xml(style.color)}"/><w:sz w:val="{round(style.size.pt * 2)}"/></w:rPr>'
        "</w:style>"
    )
