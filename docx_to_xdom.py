# -*- coding: utf-8 -*-
"""
DOCX -> XDOM reader

Walks word/document.xml paragraph by paragraph and run by run, producing a
typed XDOM tree (xdom.py).

- Inline styles (bold/italic/underline/sub/superscript) accumulate through
  paragraph and run scopes
- Paragraph styles (ListNumber/Example/Heading1-3 by default, see style_rules)
  turn paragraphs into examples and sections
- Footnotes/endnotes are parsed once per package and shared by every citation
- Complex fields (fldChar begin/separate/end + instrText) become XReference
  nodes for REF/NOTEREF/PAGEREF instructions
- Bookmarks become labels on the paragraph they start in
- Unknown markup is skipped and logged; only an unrecognized fldCharType or a
  missing/malformed required part aborts
"""
import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Type

from docx.oxml.ns import qn
from lxml import etree

import style_rules
from conversion_errors import DocxParseError, MissingPartError
from docx_characters import translate_symbol
from docx_package import (
    CORE_PROPS_PART,
    DOCUMENT_PART,
    DOCUMENT_RELS_PART,
    ENDNOTES_PART,
    FOOTNOTES_PART,
    DocxPackage,
)
from xdom import (
    FIELD_NAME,
    XContainer,
    XDocument,
    XEndnote,
    XExample,
    XFootnote,
    XNode,
    XPlaceholder,
    XReference,
    XSection,
    XSubsection,
    XSubsubsection,
    XText,
    Style,
    collect_labels,
    iter_nodes,
    merge_styles,
)

logger = logging.getLogger(__name__)

PARAGRAPH_CLASSES: Dict[str, Type[XContainer]] = {
    "paragraph": XContainer,
    "example": XExample,
    "section": XSection,
    "subsection": XSubsection,
    "subsubsection": XSubsubsection,
}

# w:i / w:b with one of these values switch the style off
TOGGLE_OFF_VALUES = {"0", "false", "off"}

# run children with no meaning for the model
IGNORED_RUN_TAGS = {
    "separator",              # footnote separator line
    "continuationSeparator",  # full-width footnote separator line
    "footnoteRef",            # where the number goes inside a footnote
    "endnoteRef",
    "lastRenderedPageBreak",
    "softHyphen",
}
IGNORED_PARAGRAPH_TAGS = {"proofErr", "bookmarkEnd"}

HYPERLINK_RE = re.compile(r'HYPERLINK\s+"([^"]*)"')
REF_RE = re.compile(r"^\s*(REF|NOTEREF|PAGEREF)\s+(\S+)(?:\s+(.*?))?\s*$", re.DOTALL)
LISTNUM_RE = re.compile(r"LISTNUM\b\s*(.*?)\s*$", re.DOTALL)


class FieldRef(NamedTuple):
    field_type: str
    code: str
    flags: str


@dataclass
class ComplexField:
    """
    Content between fldChar begin and end. instrText before "separate" is the
    instruction; runs after it are the field's displayed result.
    """
    instr_texts: List[str] = field(default_factory=list)
    separated: bool = False
    children: List[XNode] = field(default_factory=list)

    @property
    def instruction(self) -> str:
        return "".join(self.instr_texts)


@dataclass(frozen=True)
class DocumentParts:
    """Everything besides the body, read once per package."""
    footnotes: Mapping[str, XFootnote] = field(default_factory=lambda: MappingProxyType({}))
    endnotes: Mapping[str, XEndnote] = field(default_factory=lambda: MappingProxyType({}))
    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    relationships: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


EMPTY_PARTS = DocumentParts()


class Context:
    """
    Mutable parse state for one part (document body, or a single note).
    Scopes push/pop in finally blocks so every exit path restores the stacks.
    """

    def __init__(self, part: str = DOCUMENT_PART):
        self.part = part
        self.styles_stack: List[int] = []
        self.field_stack: List[ComplexField] = []

    def current_styles(self) -> int:
        return merge_styles(*self.styles_stack)

    def add_styles(self, styles: int):
        self.styles_stack[-1] |= styles

    def open_field(self) -> Optional[ComplexField]:
        return self.field_stack[-1] if self.field_stack else None

    def capture(self, node: XNode) -> bool:
        """Route a node into the innermost open field. False when no field is open."""
        top = self.open_field()
        if top is None:
            return False
        if top.separated:
            top.children.append(node)
        else:
            logger.debug(f"{self.part}: {type(node).__name__} inside field instruction dropped")
        return True

    @contextmanager
    def style_scope(self) -> Iterator["Context"]:
        self.styles_stack.append(0)
        try:
            yield self
        finally:
            self.styles_stack.pop()

    @contextmanager
    def paragraph_scope(self, sink: List[XNode]) -> Iterator["Context"]:
        """
        Style scope that also closes any field opened inside it; the field's
        collected content is kept as a plain container.
        """
        depth = len(self.field_stack)
        self.styles_stack.append(0)
        try:
            yield self
        finally:
            self.styles_stack.pop()
            while len(self.field_stack) > depth:
                unclosed = self.field_stack.pop()
                logger.warning(
                    f"{self.part}: field \"{unclosed.instruction.strip()}\" still open at paragraph end; flattened"
                )
                node = XContainer(children=unclosed.children, name=FIELD_NAME)
                if not self.capture(node):
                    sink.append(node)


# ---------- XML helpers ----------

def _xml_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)


def parse_part(package: DocxPackage, part: str) -> etree._Element:
    try:
        return etree.fromstring(package.read_bytes(part), parser=_xml_parser())
    except etree.XMLSyntaxError as e:
        raise DocxParseError(part, f"XML syntax error: {e}")


def child_elements(node: etree._Element) -> List[etree._Element]:
    # comments and processing instructions have non-string tags
    return [c for c in node if isinstance(c.tag, str)]


def local_name(el: etree._Element) -> str:
    return etree.QName(el).localname


def text_content(el: etree._Element) -> str:
    return "".join(el.itertext())


def element_path(el: etree._Element) -> str:
    return el.getroottree().getpath(el)


# ---------- Instructions and properties ----------

def read_instruction_text(text: str) -> Optional[FieldRef]:
    """
    Parse a complex-field instruction. Only the REF family yields a result:

        ' REF _Ref226606793 \\r \\h '    list/example reference
        ' NOTEREF _Ref226606793 \\h '    footnote reference
        ' PAGEREF _Toc297721081 \\h '    page reference
        ' HYPERLINK "http://..." \\t "_blank" '  ignored
        ' LISTNUM Example '              ignored
    """
    m = REF_RE.match(text)
    if m:
        return FieldRef(m.group(1), m.group(2), (m.group(3) or "").strip())
    m = HYPERLINK_RE.search(text)
    if m:
        logger.info(f"Ignoring r > instrText hyperlink: \"{m.group(1)}\"")
        return None
    m = LISTNUM_RE.search(text)
    if m:
        logger.info(f"Ignoring r > instrText counter: \"{m.group(1)}\"")
        return None
    logger.warning(f"Unrecognized field instruction: \"{text.strip()}\"")
    return None


def read_properties_styles(properties: etree._Element) -> int:
    """
    `properties` is a w:rPr or w:pPr element; returns the OR of the Style flags
    its immediate children switch on.
    """
    styles = 0
    for child in child_elements(properties):
        tag = local_name(child)
        val = child.get(qn("w:val"))
        # <w:i/> and <w:i w:val="1"/> are on, <w:i w:val="0"/> is off
        if tag == "i" and val not in TOGGLE_OFF_VALUES:
            styles |= Style.ITALIC
        elif tag == "b" and val not in TOGGLE_OFF_VALUES:
            styles |= Style.BOLD
        elif tag == "u" and val == "single":
            styles |= Style.UNDERLINE
        elif tag == "vertAlign" and val == "subscript":
            styles |= Style.SUBSCRIPT
        elif tag == "vertAlign" and val == "superscript":
            styles |= Style.SUPERSCRIPT
        elif tag == "position" and val == "-4":
            styles |= Style.SUBSCRIPT
        elif tag == "position" and val == "6":
            styles |= Style.SUPERSCRIPT
        else:
            logger.debug(f"Ignoring {local_name(properties)} > {tag}[val={val}]")
    return int(styles)


def _paragraph_kind(ppr: etree._Element) -> Optional[str]:
    style_el = ppr.find(qn("w:pStyle"))
    if style_el is None:
        return None
    val = style_el.get(qn("w:val"))
    kind = style_rules.paragraph_kind(val)
    if kind is None:
        logger.debug(f"ignoring pPr > pStyle {val}")
    return kind


# ---------- Body / paragraph / run ----------

def read_body(body: etree._Element, context: Context, parts: DocumentParts) -> List[XContainer]:
    """
    `body` is a w:body, w:footnote or w:endnote element; each w:p child becomes
    one container.
    """
    paragraphs: List[XContainer] = []
    for child in child_elements(body):
        tag = local_name(child)
        if tag == "p":
            paragraphs.append(read_paragraph(child, context, parts))
        else:
            logger.debug(f"{context.part}: {local_name(body)} > {tag} skipped")
    return paragraphs


def read_paragraph(paragraph_element: etree._Element, context: Context, parts: DocumentParts) -> XContainer:
    children: List[XNode] = []
    labels: List[str] = []
    kind = "paragraph"

    with context.paragraph_scope(children):
        for child in child_elements(paragraph_element):
            tag = local_name(child)
            if tag == "pPr":
                context.add_styles(read_properties_styles(child))
                kind = _paragraph_kind(child) or kind
            elif tag == "r":
                children.extend(read_run(child, context, parts))
            elif tag == "hyperlink":
                # only the link text is kept
                rid = child.get(qn("r:id"))
                if rid:
                    logger.debug(f"hyperlink {rid} -> {parts.relationships.get(rid)} (target dropped)")
                for link_child in child_elements(child):
                    link_tag = local_name(link_child)
                    if link_tag == "r":
                        children.extend(read_run(link_child, context, parts))
                    elif link_tag == "bookmarkStart" and link_child.get(qn("w:name")):
                        labels.append(link_child.get(qn("w:name")))
                    elif link_tag not in IGNORED_PARAGRAPH_TAGS:
                        logger.debug(f"hyperlink > {link_tag} ignored")
            elif tag == "bookmarkStart":
                # a bookmark labels the whole paragraph it starts in
                name = child.get(qn("w:name"))
                if name:
                    labels.append(name)
            elif tag in IGNORED_PARAGRAPH_TAGS:
                pass
            else:
                logger.warning(f"p > {tag} ignored")

    return PARAGRAPH_CLASSES[kind](children=children, labels=labels)


def _note_node(kind: str, note_id: Optional[str], notes: Mapping[str, XContainer]) -> XNode:
    node = notes.get(note_id or "")
    if node is None:
        logger.warning(f"{kind} #{note_id} referenced but not defined; placeholder inserted")
        return XPlaceholder(kind, note_id or "")
    return node


def _close_field(closed: ComplexField) -> XContainer:
    ref = read_instruction_text(closed.instruction)
    if ref is None:
        logger.debug(f"field \"{closed.instruction.strip()}\" kept as plain container")
        return XContainer(children=closed.children, name=FIELD_NAME)
    logger.debug(f"{ref.field_type} {ref.code} (ignoring flags: {ref.flags})")
    return XReference(children=closed.children, code=ref.code)


def read_run(run: etree._Element, context: Context, parts: DocumentParts) -> List[XNode]:
    """
    Read one w:r. Nodes produced while a field is open go to that field; the
    rest are returned in document order (usually zero or one node).
    """
    nodes: List[XNode] = []

    def emit(node: XNode):
        if not context.capture(node):
            nodes.append(node)

    with context.style_scope():
        for child in child_elements(run):
            tag = local_name(child)
            if tag == "rPr":
                context.add_styles(read_properties_styles(child))
            elif tag == "t":
                emit(XText(text_content(child), context.current_styles()))
            elif tag == "tab":
                emit(XText("\t", context.current_styles()))
            elif tag == "br":
                emit(XText("\n", context.current_styles()))
            elif tag == "sym":
                text = translate_symbol(child.get(qn("w:char")), child.get(qn("w:font")))
                emit(XText(text, context.current_styles()))
            elif tag == "footnoteReference":
                emit(_note_node("footnote", child.get(qn("w:id")), parts.footnotes))
            elif tag == "endnoteReference":
                emit(_note_node("endnote", child.get(qn("w:id")), parts.endnotes))
            elif tag == "instrText":
                # the instruction may be split over several instrText elements
                top = context.open_field()
                if top is None:
                    logger.error(
                        f"{context.part}: instrText \"{text_content(child)}\" without an open field at {element_path(child)}"
                    )
                elif top.separated:
                    logger.warning(f"{context.part}: instrText after field separator ignored")
                else:
                    top.instr_texts.append(text_content(child))
            elif tag == "fldChar":
                fld_type = child.get(qn("w:fldCharType"))
                if fld_type == "begin":
                    context.field_stack.append(ComplexField())
                elif fld_type == "separate":
                    top = context.open_field()
                    if top is None:
                        logger.error(f"{context.part}: field separator without an open field at {element_path(child)}")
                    else:
                        top.separated = True
                elif fld_type == "end":
                    if not context.field_stack:
                        logger.error(f"{context.part}: field end without an open field at {element_path(child)}")
                    else:
                        emit(_close_field(context.field_stack.pop()))
                else:
                    raise DocxParseError(
                        context.part, f"r > fldChar: Unrecognized fldCharType: {fld_type}", path=element_path(child)
                    )
            elif tag in IGNORED_RUN_TAGS:
                pass
            else:
                logger.warning(f"r > {tag} ignored")

    return nodes


# ---------- Auxiliary parts ----------

def read_notes(package: DocxPackage, part: str, note_cls: Type[XContainer]) -> Dict[str, XContainer]:
    """
    Parse word/footnotes.xml or word/endnotes.xml into {w:id: note node}.
    Each note gets a fresh Context. A missing part yields an empty map.
    """
    notes: Dict[str, XContainer] = {}
    if not package.exists(part):
        logger.info(f"No {part} found.")
        return notes
    root = parse_part(package, part)
    for child in child_elements(root):
        note_id = child.get(qn("w:id"))
        if note_id is None:
            logger.debug(f"{part}: {local_name(child)} without w:id skipped")
            continue
        context = Context(part)
        notes[note_id] = note_cls(children=read_body(child, context, EMPTY_PARTS))
    logger.info(f"{part} parsed: {len(notes)} notes")
    return notes


def read_metadata(package: DocxPackage) -> Dict[str, str]:
    """
    docProps/core.xml flattened to {local name: text}: title, creator,
    keywords, revision, created, modified, ...
    """
    metadata: Dict[str, str] = {}
    if not package.exists(CORE_PROPS_PART):
        logger.info(f"No {CORE_PROPS_PART} found.")
        return metadata
    root = parse_part(package, CORE_PROPS_PART)
    for child in child_elements(root):
        metadata[local_name(child)] = text_content(child)
    return metadata


def read_relationships(package: DocxPackage) -> Dict[str, str]:
    """word/_rels/document.xml.rels as {Id: Target}."""
    relationships: Dict[str, str] = {}
    if not package.exists(DOCUMENT_RELS_PART):
        logger.info(f"No {DOCUMENT_RELS_PART} found.")
        return relationships
    root = parse_part(package, DOCUMENT_RELS_PART)
    for child in child_elements(root):
        rel_id = child.get("Id")
        if rel_id:
            relationships[rel_id] = child.get("Target") or ""
    return relationships


def read_parts(package: DocxPackage) -> DocumentParts:
    return DocumentParts(
        footnotes=MappingProxyType(read_notes(package, FOOTNOTES_PART, XFootnote)),
        endnotes=MappingProxyType(read_notes(package, ENDNOTES_PART, XEndnote)),
        metadata=MappingProxyType(read_metadata(package)),
        relationships=MappingProxyType(read_relationships(package)),
    )


def unresolved_references(document: XNode) -> List[str]:
    """Reference codes with no matching bookmark label anywhere in the tree."""
    labels = set(collect_labels(document))
    missing: List[str] = []
    for node in iter_nodes(document):
        if isinstance(node, XReference) and node.code not in labels and node.code not in missing:
            missing.append(node.code)
    return missing


class DocxReader:
    """
    One reader per package. Notes, metadata and relationships are read eagerly
    in the constructor; read_document() then walks the body.
    """

    def __init__(self, package: DocxPackage):
        if not package.exists(DOCUMENT_PART):
            raise MissingPartError(DOCUMENT_PART)
        self.package = package
        self.parts = read_parts(package)
        self.document: Optional[XDocument] = None
        self._unresolved: List[str] = []

    def read_document(self) -> XDocument:
        # w:document has a single w:body whose children are mostly w:p
        root = parse_part(self.package, DOCUMENT_PART)
        body = root.find(qn("w:body"))
        if body is None:
            raise DocxParseError(DOCUMENT_PART, "w:body not found", path=element_path(root))
        context = Context(DOCUMENT_PART)
        children: List[XNode] = list(read_body(body, context, self.parts))
        document = XDocument(children=children, metadata=dict(self.parts.metadata))
        self._unresolved = unresolved_references(document)
        for code in self._unresolved:
            logger.warning(f"Reference to unknown bookmark {code}")
        self.document = document
        logger.info(f"Document parsed: {len(children)} paragraphs")
        return document

    def summary(self) -> Dict[str, Any]:
        document = self.document if self.document is not None else self.read_document()
        counts = {
            "paragraphs": 0,
            "sections": 0,
            "examples": 0,
            "references": 0,
            "placeholders": 0,
        }
        for node in iter_nodes(document):
            if isinstance(node, XExample):
                counts["examples"] += 1
            elif isinstance(node, (XSection, XSubsection, XSubsubsection)):
                counts["sections"] += 1
            elif isinstance(node, XReference):
                counts["references"] += 1
            elif isinstance(node, XPlaceholder):
                counts["placeholders"] += 1
        counts["paragraphs"] = len(document.children)
        counts["footnotes"] = len(self.parts.footnotes)
        counts["endnotes"] = len(self.parts.endnotes)
        counts["unresolved_references"] = len(self._unresolved)
        return counts


def parse_document(package: DocxPackage) -> XDocument:
    """Read a whole package into an XDocument (raises MissingPartError without word/document.xml)."""
    return DocxReader(package).read_document()
