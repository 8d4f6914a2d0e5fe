from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import Sequence

from docx.opc.constants import CONTENT_TYPE as CT
from docx.opc.constants import NAMESPACE as NS
from docx.opc.constants import RELATIONSHIP_TYPE as RT

from . import docx_format
from .config import RenderConfig
from .docx_format import R_NS, W_NS, XML_DECLARATION, escape_xml, text_element
from .model import Block, Document, Heading, ListBlock, Paragraph, Run, TableBlock

logger = logging.getLogger(__name__)

CONTENT_TYPES_PATH = "[Content_Types].xml"
PACKAGE_RELS_PATH = "_rels/.rels"
DOCUMENT_PATH = "word/document.xml"
DOCUMENT_RELS_PATH = "word/_rels/document.xml.rels"
STYLES_PATH = "word/styles.xml"

# earliest timestamp a ZIP entry can carry; keeps archives byte-identical
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


def render_document(doc: Document, output_path: str | Path, config: RenderConfig | None = None) -> Path:
    output_path = Path(output_path)
    data = build_docx(doc.blocks, config)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    return output_path


def build_docx(blocks: Sequence[Block], config: RenderConfig | None = None) -> bytes:
    """Serialize ``blocks`` into the bytes of a .docx package."""
    parts = build_parts(blocks, config)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, xml in parts.items():
            info = zipfile.ZipInfo(name, date_time=ZIP_TIMESTAMP)
            info.compress_type = zipfile.ZIP_DEFLATED
            archive.writestr(info, xml.encode("utf-8"))
    data = buffer.getvalue()
    logger.debug("Packed %d parts into %d bytes", len(parts), len(data))
    return data


def build_parts(blocks: Sequence[Block], config: RenderConfig | None = None) -> dict[str, str]:
    """Return the XML text of every package part, keyed by its path in the archive."""
    config = config or RenderConfig()
    return {
        CONTENT_TYPES_PATH: _content_types_xml(),
        PACKAGE_RELS_PATH: _relationships_xml(RT.OFFICE_DOCUMENT, DOCUMENT_PATH),
        DOCUMENT_PATH: _document_xml(blocks, config),
        DOCUMENT_RELS_PATH: _relationships_xml(RT.STYLES, "styles.xml"),
        STYLES_PATH: docx_format.styles_xml(config),
    }


def _document_xml(blocks: Sequence[Block], config: RenderConfig) -> str:
    body = "".join(_dispatch_block(block, config) for block in blocks)
    return (
        f'{XML_DECLARATION}<w:document xmlns:w="{W_NS}" xmlns:r="{R_NS}">'
        f"<w:body>{body}{docx_format.section_properties(config)}</w:body>"
        "</w:document>"
    )


def _dispatch_block(block: Block, config: RenderConfig) -> str:
    if isinstance(block, Heading):
        return _render_heading(block)
    if isinstance(block, Paragraph):
        return _render_paragraph(block, config)
    if isinstance(block, ListBlock):
        return _render_list(block)
    if isinstance(block, TableBlock):
        return _render_table(block, config)
    raise TypeError(f"Unsupported block type: {type(block).__name__}")


def _render_heading(heading: Heading) -> str:
    level = min(max(heading.level, 1), 6)
    return (
        f'<w:p><w:pPr><w:pStyle w:val="Heading{level}"/></w:pPr>'
        f"<w:r>{text_element(heading.text)}</w:r></w:p>"
    )


def _render_paragraph(paragraph: Paragraph, config: RenderConfig) -> str:
    runs = "".join(_render_run(run, config) for run in paragraph.runs)
    return f"<w:p>{runs}</w:p>"


def _render_run(run: Run, config: RenderConfig) -> str:
    properties = docx_format.run_properties(run.bold, run.italic, run.code, config)
    # code fences keep their line structure
    content = "<w:br/>".join(text_element(line) for line in run.text.split("\n"))
    return f"<w:r>{properties}{content}</w:r>"


def _render_list(block: ListBlock) -> str:
    num_id = docx_format.ORDERED_NUM_ID if block.ordered else docx_format.BULLET_NUM_ID
    return "".join(
        f'<w:p><w:pPr><w:numPr><w:ilvl w:val="0"/><w:numId w:val="{num_id}"/></w:numPr></w:pPr>'
        f"<w:r>{text_element(item)}</w:r></w:p>"
        for item in block.items
    )


def _render_table(block: TableBlock, config: RenderConfig) -> str:
    width = config.table_column_width
    col_count = max((len(row) for row in block.rows), default=0) or 1
    grid = "".join(f'<w:gridCol w:w="{width}"/>' for _ in range(col_count))
    rows = "".join(_render_table_row(row, width) for row in block.rows)
    return (
        "<w:tbl>"
        f'<w:tblPr><w:tblW w:w="0" w:type="auto"/>{docx_format.table_borders(config)}</w:tblPr>'
        f"<w:tblGrid>{grid}</w:tblGrid>"
        f"{rows}"
        "</w:tbl>"
    )


def _render_table_row(cells: Sequence[str], width: int) -> str:
    cell_xml = "".join(_render_table_cell(cell, width) for cell in cells) or _render_table_cell(None, width)
    return f"<w:tr>{cell_xml}</w:tr>"


def _render_table_cell(text: str | None, width: int) -> str:
    paragraph = "<w:p/>" if text is None else f"<w:p><w:r>{text_element(text)}</w:r></w:p>"
    return f'<w:tc><w:tcPr><w:tcW w:w="{width}" w:type="dxa"/></w:tcPr>{paragraph}</w:tc>'


def _content_types_xml() -> str:
    return (
        f'{XML_DECLARATION}<Types xmlns="{NS.OPC_CONTENT_TYPES}">'
        f'<Default Extension="rels" ContentType="{CT.OPC_RELATIONSHIPS}"/>'
        f'<Default Extension="xml" ContentType="{CT.XML}"/>'
        f'<Override PartName="/{DOCUMENT_PATH}" ContentType="{CT.WML_DOCUMENT_MAIN}"/>'
        f'<Override PartName="/{STYLES_PATH}" ContentType="{CT.WML_STYLES}"/>'
        "</Types>"
    )


def _relationships_xml(rel_type: str, target: str) -> str:
    return (
        f'{XML_DECLARATION}<Relationships xmlns="{NS.OPC_RELATIONSHIPS}">'
        f'<Relationship Id="rId1" Type="{rel_type}" Target="{escape_xml(target)}"/>'
        "</Relationships>"
    )
