import io
import zipfile
from typing import Dict, Optional

import pytest

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CP_NS = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
DC_NS = "http://purl.org/dc/elements/1.1/"

XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'


def document_xml(body: str) -> str:
    return f'{XML_DECL}<w:document xmlns:w="{W_NS}" xmlns:r="{R_NS}"><w:body>{body}</w:body></w:document>'


def notes_xml(tag: str, notes: Dict[str, str]) -> str:
    """tag is "footnote" or "endnote"; notes maps w:id -> inner paragraphs."""
    items = "".join(f'<w:{tag} w:id="{note_id}">{inner}</w:{tag}>' for note_id, inner in notes.items())
    return f'{XML_DECL}<w:{tag}s xmlns:w="{W_NS}">{items}</w:{tag}s>'


def core_xml(fields: Dict[str, str]) -> str:
    inner = "".join(f"<dc:{k}>{v}</dc:{k}>" for k, v in fields.items())
    return f'{XML_DECL}<cp:coreProperties xmlns:cp="{CP_NS}" xmlns:dc="{DC_NS}">{inner}</cp:coreProperties>'


def rels_xml(targets: Dict[str, str]) -> str:
    inner = "".join(
        f'<Relationship Id="{rid}" Type="{R_NS}/hyperlink" Target="{target}" TargetMode="External"/>'
        for rid, target in targets.items()
    )
    return f'{XML_DECL}<Relationships xmlns="{PKG_REL_NS}">{inner}</Relationships>'


def build_docx(
    body: Optional[str] = None,
    footnotes: Optional[Dict[str, str]] = None,
    endnotes: Optional[Dict[str, str]] = None,
    core: Optional[Dict[str, str]] = None,
    rels: Optional[Dict[str, str]] = None,
    parts: Optional[Dict[str, str]] = None,
) -> bytes:
    """In-memory .docx with only the parts asked for (body=None -> no document.xml)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("[Content_Types].xml", "<Types></Types>")
        if body is not None:
            zf.writestr("word/document.xml", document_xml(body))
        if footnotes is not None:
            zf.writestr("word/footnotes.xml", notes_xml("footnote", footnotes))
        if endnotes is not None:
            zf.writestr("word/endnotes.xml", notes_xml("endnote", endnotes))
        if core is not None:
            zf.writestr("docProps/core.xml", core_xml(core))
        if rels is not None:
            zf.writestr("word/_rels/document.xml.rels", rels_xml(rels))
        for name, data in (parts or {}).items():
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def make_docx():
    return build_docx


@pytest.fixture
def docx_path(tmp_path):
    """Write a package to disk and return its path."""
    def _write(name: str = "paper.docx", **kwargs) -> str:
        path = tmp_path / name
        path.write_bytes(build_docx(**kwargs))
        return str(path)
    return _write


@pytest.fixture
def restore_style_rules(monkeypatch):
    import style_rules

    monkeypatch.delenv("STYLE_RULES_PATH", raising=False)
    yield style_rules
    monkeypatch.undo()
    style_rules.load_style_rules()
