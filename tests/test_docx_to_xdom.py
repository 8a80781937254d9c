import logging

import pytest
from lxml import etree

from conversion_errors import DocxParseError, MissingPartError
from docx_package import DocxPackage
from docx_to_xdom import (
    DocxReader,
    FieldRef,
    parse_document,
    read_instruction_text,
    read_properties_styles,
    unresolved_references,
)
from xdom import (
    FIELD_NAME,
    Style,
    XContainer,
    XEndnote,
    XExample,
    XFootnote,
    XPlaceholder,
    XReference,
    XSection,
    XSubsection,
    XSubsubsection,
    XText,
)
from xdom_to_latex import render

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


def props(inner: str):
    return etree.fromstring(f'<w:rPr xmlns:w="{W_NS}">{inner}</w:rPr>')


def text_run(text: str, rpr: str = "") -> str:
    rpr_xml = f"<w:rPr>{rpr}</w:rPr>" if rpr else ""
    return f'<w:r>{rpr_xml}<w:t xml:space="preserve">{text}</w:t></w:r>'


def fld(kind: str) -> str:
    return f'<w:r><w:fldChar w:fldCharType="{kind}"/></w:r>'


def instr(text: str) -> str:
    return f'<w:r><w:instrText xml:space="preserve">{text}</w:instrText></w:r>'


def ref_field(code: str, shown: str) -> str:
    return fld("begin") + instr(f" REF {code} \\h ") + fld("separate") + text_run(shown) + fld("end")


@pytest.fixture
def parse(make_docx):
    def _parse(body: str, **kwargs):
        return parse_document(DocxPackage(make_docx(body=body, **kwargs)))
    return _parse


class TestReadPropertiesStyles:
    def test_bold_italic(self):
        assert read_properties_styles(props("<w:b/><w:i/>")) == Style.BOLD | Style.ITALIC

    def test_toggle_values(self):
        assert read_properties_styles(props('<w:b w:val="1"/>')) == Style.BOLD
        assert read_properties_styles(props('<w:b w:val="0"/>')) == 0
        assert read_properties_styles(props('<w:i w:val="false"/>')) == 0

    def test_underline_single_only(self):
        assert read_properties_styles(props('<w:u w:val="single"/>')) == Style.UNDERLINE
        assert read_properties_styles(props('<w:u w:val="double"/>')) == 0

    def test_vertical_alignment(self):
        assert read_properties_styles(props('<w:vertAlign w:val="subscript"/>')) == Style.SUBSCRIPT
        assert read_properties_styles(props('<w:vertAlign w:val="superscript"/>')) == Style.SUPERSCRIPT
        assert read_properties_styles(props('<w:position w:val="-4"/>')) == Style.SUBSCRIPT
        assert read_properties_styles(props('<w:position w:val="6"/>')) == Style.SUPERSCRIPT

    def test_other_properties_ignored(self):
        assert read_properties_styles(props('<w:sz w:val="24"/><w:rFonts w:ascii="Times"/>')) == 0


class TestReadInstructionText:
    @pytest.mark.parametrize("text, expected", [
        (" REF _Ref226606793 \\r \\h ", FieldRef("REF", "_Ref226606793", "\\r \\h")),
        (" NOTEREF _Ref1 \\h ", FieldRef("NOTEREF", "_Ref1", "\\h")),
        (" PAGEREF _Toc297721081 \\h ", FieldRef("PAGEREF", "_Toc297721081", "\\h")),
        ("REF _Ref2", FieldRef("REF", "_Ref2", "")),
    ])
    def test_reference_family(self, text, expected):
        assert read_instruction_text(text) == expected

    @pytest.mark.parametrize("text", [
        ' HYPERLINK "http://example.com" \\t "_blank" ',
        " LISTNUM Example ",
        " TOC \\o \"1-3\" ",
    ])
    def test_other_instructions(self, text):
        assert read_instruction_text(text) is None


class TestParagraphs:
    def test_runs_and_styles(self, parse):
        doc = parse("<w:p>" + text_run("Hello ") + text_run("World", "<w:b/>") + "</w:p>")
        para = doc.children[0]
        assert type(para) is XContainer
        assert para.children == [XText("Hello ", 0), XText("World", Style.BOLD)]
        assert render(doc) == r"Hello \textbf{World}"

    def test_paragraph_styles_reach_runs_and_end_with_paragraph(self, parse):
        doc = parse(
            "<w:p><w:pPr><w:i/></w:pPr>" + text_run("x", "<w:b/>") + "</w:p>"
            + "<w:p>" + text_run("y") + "</w:p>"
        )
        assert doc.children[0].children == [XText("x", Style.BOLD | Style.ITALIC)]
        assert doc.children[1].children == [XText("y", 0)]

    @pytest.mark.parametrize("style, cls", [
        ("Heading1", XSection),
        ("Heading2", XSubsection),
        ("Heading3", XSubsubsection),
        ("ListNumber", XExample),
        ("Example", XExample),
        ("Normal", XContainer),
    ])
    def test_paragraph_kinds(self, parse, style, cls):
        doc = parse(f'<w:p><w:pPr><w:pStyle w:val="{style}"/></w:pPr>' + text_run("t") + "</w:p>")
        assert type(doc.children[0]) is cls
        assert doc.children[0].children == [XText("t")]

    def test_tab_break_and_symbol(self, parse):
        doc = parse(
            '<w:p><w:r><w:t>a</w:t><w:tab/><w:t>b</w:t><w:br/>'
            '<w:sym w:font="Symbol" w:char="F061"/></w:r></w:p>'
        )
        assert [t.data for t in doc.children[0].children] == ["a", "\t", "b", "\n", "α"]
        assert render(doc) == "a\\tab{}b\n$\\alpha$"

    def test_hyperlink_keeps_text(self, make_docx):
        data = make_docx(
            body='<w:p><w:hyperlink r:id="rId5">' + text_run("link text") + "</w:hyperlink></w:p>",
            rels={"rId5": "http://example.com"},
        )
        reader = DocxReader(DocxPackage(data))
        doc = reader.read_document()
        assert doc.children[0].children == [XText("link text")]
        assert dict(reader.parts.relationships) == {"rId5": "http://example.com"}

    def test_unknown_markup_skipped(self, parse, caplog):
        caplog.set_level(logging.WARNING)
        doc = parse(
            "<w:p><w:ins>" + text_run("x") + "</w:ins><w:proofErr/>" + text_run("y") + "</w:p>"
            + "<w:tbl/><w:sectPr/>"
        )
        assert len(doc.children) == 1
        assert doc.children[0].children == [XText("y")]
        assert "p > ins ignored" in caplog.text


class TestFields:
    def test_bookmark_and_reference(self, parse):
        doc = parse(
            '<w:p><w:pPr><w:pStyle w:val="ListNumber"/></w:pPr>'
            '<w:bookmarkStart w:id="0" w:name="_Ref1"/>' + text_run("Colorless green ideas.")
            + '<w:bookmarkEnd w:id="0"/></w:p>'
            + "<w:p>" + text_run("As in ") + ref_field("_Ref1", "(1)") + text_run(".") + "</w:p>"
        )
        example, para = doc.children
        assert isinstance(example, XExample)
        assert example.labels == ["_Ref1"]
        assert para.children == [
            XText("As in "),
            XReference(code="_Ref1", children=[XText("(1)")]),
            XText("."),
        ]
        assert unresolved_references(doc) == []
        assert render(doc) == (
            "\\begin{exe}\n  \\ex Colorless green ideas.\\label{Ref1}\n\\end{exe}"
            "\n\nAs in \\Cref{Ref1}."
        )

    def test_field_inside_one_run(self, parse):
        doc = parse(
            '<w:p><w:r><w:fldChar w:fldCharType="begin"/><w:instrText> REF _Ref1 </w:instrText>'
            '<w:fldChar w:fldCharType="separate"/><w:t>(1)</w:t><w:fldChar w:fldCharType="end"/></w:r></w:p>'
        )
        assert doc.children[0].children == [XReference(code="_Ref1", children=[XText("(1)")])]

    def test_split_instruction(self, parse):
        doc = parse(
            "<w:p>" + fld("begin") + instr(" REF ") + instr("_Ref7 \\h ") + fld("separate")
            + text_run("(7)") + fld("end") + "</w:p>"
        )
        assert doc.children[0].children[0].code == "_Ref7"

    def test_non_reference_field_is_plain_container(self, parse):
        doc = parse(
            "<w:p>" + fld("begin") + instr(' HYPERLINK "http://example.com" ') + fld("separate")
            + text_run("site") + fld("end") + "</w:p>"
        )
        node = doc.children[0].children[0]
        assert type(node) is XContainer
        assert node.name == FIELD_NAME
        assert node.children == [XText("site")]
        assert render(doc) == "site"

    def test_adjacent_field_results_stay_inline(self, parse):
        def link(text):
            return (
                fld("begin") + instr(' HYPERLINK "http://example.com" ') + fld("separate")
                + text_run(text) + fld("end")
            )

        doc = parse("<w:p>" + text_run("See ") + link("A") + link("B") + text_run(".") + "</w:p>")
        assert render(doc) == "See AB."

    def test_nested_fields(self, parse):
        doc = parse(
            "<w:p>" + fld("begin") + instr(' HYPERLINK \\l "_Toc1" ') + fld("separate")
            + fld("begin") + instr(" PAGEREF _Toc1 \\h ") + fld("separate") + text_run("3") + fld("end")
            + fld("end") + "</w:p>"
        )
        outer = doc.children[0].children[0]
        assert type(outer) is XContainer
        assert outer.name == FIELD_NAME
        assert outer.children == [XReference(code="_Toc1", children=[XText("3")])]

    def test_content_before_separator_dropped(self, parse):
        doc = parse(
            "<w:p>" + fld("begin") + instr(" REF _Ref1 ") + text_run("junk") + fld("separate")
            + text_run("(1)") + fld("end") + "</w:p>"
        )
        assert doc.children[0].children[0].children == [XText("(1)")]

    def test_unclosed_field_flattened_at_paragraph_end(self, parse, caplog):
        caplog.set_level(logging.WARNING)
        doc = parse(
            "<w:p>" + fld("begin") + instr(" REF _Ref1 ") + fld("separate") + text_run("x") + "</w:p>"
            + "<w:p>" + text_run("y") + fld("end") + "</w:p>"
        )
        assert doc.children[0].children == [XContainer(children=[XText("x")], name=FIELD_NAME)]
        assert doc.children[1].children == [XText("y")]
        assert "still open at paragraph end" in caplog.text
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_instruction_without_field(self, parse, caplog):
        caplog.set_level(logging.WARNING)
        doc = parse("<w:p>" + instr(" REF _Ref1 ") + text_run("z") + "</w:p>")
        assert doc.children[0].children == [XText("z")]
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_unknown_field_char_type_is_fatal(self, parse):
        with pytest.raises(DocxParseError) as excinfo:
            parse("<w:p>" + fld("middle") + "</w:p>")
        assert excinfo.value.part == "word/document.xml"
        assert "fldChar" in excinfo.value.path

    def test_reference_to_missing_bookmark(self, make_docx, caplog):
        caplog.set_level(logging.WARNING)
        reader = DocxReader(DocxPackage(make_docx(body="<w:p>" + ref_field("_Ref404", "(?)") + "</w:p>")))
        doc = reader.read_document()
        assert unresolved_references(doc) == ["_Ref404"]
        assert reader.summary()["unresolved_references"] == 1
        assert "_Ref404" in caplog.text


class TestNotes:
    SEPARATORS = {
        "-1": "<w:p><w:r><w:separator/></w:r></w:p>",
        "0": "<w:p><w:r><w:continuationSeparator/></w:r></w:p>",
    }

    def test_shared_footnote(self, make_docx):
        footnotes = dict(self.SEPARATORS)
        footnotes["1"] = "<w:p><w:r><w:footnoteRef/></w:r>" + text_run(" A note.") + "</w:p>"
        cite = '<w:r><w:footnoteReference w:id="1"/></w:r>'
        data = make_docx(body="<w:p>" + text_run("a") + cite + text_run("b") + cite + "</w:p>", footnotes=footnotes)
        reader = DocxReader(DocxPackage(data))
        doc = reader.read_document()

        assert sorted(reader.parts.footnotes) == ["-1", "0", "1"]
        first, second = doc.children[0].children[1], doc.children[0].children[3]
        assert isinstance(first, XFootnote)
        assert first is second
        assert first is reader.parts.footnotes["1"]
        assert render(doc) == r"a\footnote{A note.}b\footnote{A note.}"

    def test_endnote(self, parse):
        doc = parse(
            '<w:p>' + text_run("x") + '<w:r><w:endnoteReference w:id="2"/></w:r></w:p>',
            endnotes={"2": "<w:p>" + text_run("later", "<w:i/>") + "</w:p>"},
        )
        note = doc.children[0].children[1]
        assert isinstance(note, XEndnote)
        assert render(doc) == r"x\endnote{\textit{later}}"

    def test_missing_footnotes_part(self, make_docx, caplog):
        caplog.set_level(logging.WARNING)
        reader = DocxReader(DocxPackage(make_docx(body='<w:p><w:r><w:footnoteReference w:id="2"/></w:r></w:p>')))
        doc = reader.read_document()
        assert dict(reader.parts.footnotes) == {}
        assert doc.children[0].children == [XPlaceholder("footnote", "2")]
        assert reader.summary()["placeholders"] == 1
        assert "footnote #2" in caplog.text

    def test_note_styles_do_not_leak(self, parse):
        doc = parse(
            '<w:p><w:r><w:footnoteReference w:id="1"/></w:r>' + text_run("after") + "</w:p>",
            footnotes={"1": "<w:p><w:pPr><w:b/></w:pPr>" + text_run("bold note") + "</w:p>"},
        )
        note, after = doc.children[0].children
        assert note.children[0].children == [XText("bold note", Style.BOLD)]
        assert after == XText("after", 0)


class TestDocumentParts:
    def test_metadata(self, parse):
        doc = parse("<w:p/>", core={"title": "X", "creator": "A. Author"})
        assert doc.metadata["title"] == "X"
        assert doc.metadata["creator"] == "A. Author"

    def test_parts_are_read_only(self, make_docx):
        reader = DocxReader(DocxPackage(make_docx(body="<w:p/>", core={"title": "X"})))
        with pytest.raises(TypeError):
            reader.parts.metadata["title"] = "Y"

    def test_missing_document_part(self, make_docx):
        with pytest.raises(MissingPartError) as excinfo:
            DocxReader(DocxPackage(make_docx(body=None)))
        assert excinfo.value.part == "word/document.xml"

    def test_malformed_document(self, make_docx):
        data = make_docx(parts={"word/document.xml": "<w:document"})
        with pytest.raises(DocxParseError):
            parse_document(DocxPackage(data))

    def test_summary(self, make_docx):
        body = (
            '<w:p><w:pPr><w:pStyle w:val="Heading1"/></w:pPr>' + text_run("Intro") + "</w:p>"
            + '<w:p><w:pPr><w:pStyle w:val="Example"/></w:pPr><w:bookmarkStart w:id="1" w:name="_Ref1"/>'
            + text_run("ex") + "</w:p>"
            + "<w:p>" + ref_field("_Ref1", "(1)") + '<w:r><w:footnoteReference w:id="1"/></w:r></w:p>'
        )
        reader = DocxReader(DocxPackage(make_docx(body=body, footnotes={"1": "<w:p>" + text_run("n") + "</w:p>"})))
        summary = reader.summary()
        assert summary["paragraphs"] == 3
        assert summary["sections"] == 1
        assert summary["examples"] == 1
        assert summary["references"] == 1
        assert summary["footnotes"] == 1
        assert summary["endnotes"] == 0
        assert summary["unresolved_references"] == 0
        assert summary["placeholders"] == 0
