import io
import zipfile
from pathlib import Path

import pytest
from docx import Document as DocxReader

from MarkDocx import renderer_docx
from MarkDocx.docx_format import escape_xml
from MarkDocx.markdown_parser import parse_markdown
from MarkDocx.model import Block, Document, Heading, ListBlock, Paragraph, Run, TableBlock
from MarkDocx.renderer_docx import DOCUMENT_PATH, STYLES_PATH, build_docx, build_parts, render_document

SAMPLE_BLOCKS = [
    Heading(level=1, text="Title"),
    Paragraph(runs=[Run("Some "), Run("bold", bold=True), Run(" text.")]),
    ListBlock(ordered=False, items=["item1", "item2"]),
    TableBlock(rows=[["a", "b"], ["1", "2"]]),
]


def test_archive_contains_exactly_five_parts():
    with zipfile.ZipFile(io.BytesIO(build_docx(SAMPLE_BLOCKS))) as archive:
        names = archive.namelist()
    assert names == [
        "[Content_Types].xml",
        "_rels/.rels",
        "word/document.xml",
        "word/_rels/document.xml.rels",
        "word/styles.xml",
    ]


def test_content_types_manifest():
    xml = build_parts([])["[Content_Types].xml"]
    assert xml == (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        '<Override PartName="/word/document.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
        '<Override PartName="/word/styles.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.styles+xml"/>'
        "</Types>"
    )


def test_relationship_parts():
    parts = build_parts([])
    assert (
        '<Relationship Id="rId1" '
        'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
        'Target="word/document.xml"/>'
    ) in parts["_rels/.rels"]
    doc_rels = parts["word/_rels/document.xml.rels"]
    assert doc_rels.count("<Relationship ") == 1
    assert (
        'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles" Target="styles.xml"'
    ) in doc_rels


def test_section_properties_are_letter_with_inch_margins():
    xml = build_parts([])[DOCUMENT_PATH]
    assert xml.endswith(
        '<w:sectPr><w:pgSz w:w="12240" w:h="15840"/>'
        '<w:pgMar w:top="1440" w:right="1440" w:bottom="1440" w:left="1440"/>'
        "</w:sectPr></w:body></w:document>"
    )


def test_escaping():
    xml = build_parts([Paragraph(runs=[Run("A & B < C > \"D\" 'E'")])])[DOCUMENT_PATH]
    assert '<w:t xml:space="preserve">A &amp; B &lt; C &gt; &quot;D&quot; &#39;E&#39;</w:t>' in xml
    assert escape_xml("&lt;") == "&amp;lt;"


def test_run_properties():
    xml = build_parts([Paragraph(runs=[Run(" x ", bold=True, italic=True, code=True), Run("plain")])])[DOCUMENT_PATH]
    assert (
        "<w:p>"
        '<w:r><w:rPr><w:rFonts w:ascii="Courier New" w:hAnsi="Courier New"/><w:b/><w:i/></w:rPr>'
        '<w:t xml:space="preserve"> x </w:t></w:r>'
        '<w:r><w:t xml:space="preserve">plain</w:t></w:r>'
        "</w:p>"
    ) in xml


def test_code_run_lines_are_separated_by_breaks():
    xml = build_parts([Paragraph(runs=[Run("a\nb", code=True)])])[DOCUMENT_PATH]
    assert '<w:t xml:space="preserve">a</w:t><w:br/><w:t xml:space="preserve">b</w:t>' in xml


@pytest.mark.parametrize("level, style_id", [(1, "Heading1"), (4, "Heading4"), (6, "Heading6"), (9, "Heading6")])
def test_heading_style_reference(level, style_id):
    xml = build_parts([Heading(level=level, text="H")])[DOCUMENT_PATH]
    assert f'<w:pPr><w:pStyle w:val="{style_id}"/></w:pPr>' in xml


def test_every_referenced_heading_style_is_defined():
    styles = build_parts([])[STYLES_PATH]
    assert 'w:styleId="Normal"' in styles
    for level in range(1, 7):
        assert f'w:styleId="Heading{level}"' in styles
    assert '<w:sz w:val="32"/>' in styles
    assert '<w:color w:val="2F5496"/>' in styles


@pytest.mark.parametrize("ordered, num_id", [(True, "1"), (False, "2")])
def test_list_numbering(ordered, num_id):
    xml = build_parts([ListBlock(ordered=ordered, items=["one", "two", "three"])])[DOCUMENT_PATH]
    assert xml.count(f'<w:numPr><w:ilvl w:val="0"/><w:numId w:val="{num_id}"/></w:numPr>') == 3


def test_table_layout():
    xml = build_parts([TableBlock(rows=[["a", "b", "c"], ["1"], []])])[DOCUMENT_PATH]
    assert xml.count('<w:gridCol w:w="2000"/>') == 3
    assert xml.count("<w:tr>") == 3
    assert xml.count('<w:tcW w:w="2000" w:type="dxa"/>') == 5
    assert '<w:tc><w:tcPr><w:tcW w:w="2000" w:type="dxa"/></w:tcPr><w:p/></w:tc>' in xml
    for side in ("top", "left", "bottom", "right", "insideH", "insideV"):
        assert f'<w:{side} w:val="single" w:sz="4" w:space="0" w:color="000000"/>' in xml


def test_generation_is_deterministic():
    assert build_parts(SAMPLE_BLOCKS) == build_parts(SAMPLE_BLOCKS)
    assert build_docx(SAMPLE_BLOCKS) == build_docx(SAMPLE_BLOCKS)


def test_unknown_block_type_is_rejected():
    with pytest.raises(TypeError):
        build_parts([Block()])


def test_output_opens_with_python_docx():
    data = build_docx(parse_markdown("# Title\n\nSome **bold** text.\n\n- item1\n- item2\n\na|b\n-|-\n1|2\n").blocks)
    reader = DocxReader(io.BytesIO(data))
    assert [p.text for p in reader.paragraphs] == ["Title", "Some bold text.", "item1", "item2"]
    assert reader.paragraphs[0].style.name == "Heading 1"
    assert [run.bold for run in reader.paragraphs[1].runs] == [None, True, None]
    assert len(reader.tables) == 1


def test_render_document_writes_file(tmp_path: Path):
    out = tmp_path / "nested" / "report.docx"
    result = render_document(Document(blocks=SAMPLE_BLOCKS), out)
    assert result == out
    assert out.read_bytes() == renderer_docx.build_docx(SAMPLE_BLOCKS)


def test_invalid_xml_control_characters_are_dropped():
    assert escape_xml("a\x00b\x0bc\x0cd\x1fe\tf") == "abcde\tf"
    xml = build_parts([Heading(level=1, text="T\x07itle")])[DOCUMENT_PATH]
    assert '<w:t xml:space="preserve">Title</w:t>' in xml
