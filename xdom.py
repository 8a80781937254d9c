# -*- coding: utf-8 -*-
"""
XDOM: the typed document tree produced by the DOCX reader and consumed by the
LaTeX renderer.

- XText is the only leaf carrying text; its `styles` is an OR of Style flags
- every other node is an XContainer (paragraph, section, example, note, ...)
- XPlaceholder stands in for a footnote/endnote id the package does not define
- to_dict / from_dict give a JSON-friendly form keyed by an explicit `kind`
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Union


class Style(enum.IntFlag):
    """Character formatting flags. Bit order is also the command nesting order."""
    BOLD = 1
    ITALIC = 2
    UNDERLINE = 4
    SUBSCRIPT = 8
    SUPERSCRIPT = 16


STYLE_NAMES = {
    Style.BOLD: "bold",
    Style.ITALIC: "italic",
    Style.UNDERLINE: "underline",
    Style.SUBSCRIPT: "subscript",
    Style.SUPERSCRIPT: "superscript",
}

# 29 usable bits, same ceiling as the flag decomposition below
MAX_STYLE_BITS = 29


def merge_styles(*styles: int) -> int:
    merged = 0
    for s in styles:
        merged |= int(s)
    return merged


def calculate_flags(styles: int) -> List[int]:
    """Split a bitmask into its set flags, low bit first: 4|16 -> [4, 16]."""
    flags: List[int] = []
    for power in range(MAX_STYLE_BITS):
        flag = 1 << power
        if styles & flag:
            flags.append(flag)
    return flags


@dataclass
class XText:
    data: str
    styles: int = 0


@dataclass
class XContainer:
    """
    Generic grouping node. `name` doubles as the LaTeX command for named
    containers; "paragraph", "document" and "field" (a field's displayed
    result) render without a wrapper.
    `labels` holds bookmark names anchored to this node.
    """
    children: List["XNode"] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    name: str = "paragraph"


@dataclass
class XSection(XContainer):
    name: str = "section"


@dataclass
class XSubsection(XContainer):
    name: str = "subsection"


@dataclass
class XSubsubsection(XContainer):
    name: str = "subsubsection"


@dataclass
class XExample(XContainer):
    name: str = "example"


@dataclass
class XFootnote(XContainer):
    name: str = "footnote"


@dataclass
class XEndnote(XContainer):
    name: str = "endnote"


@dataclass
class XReference(XContainer):
    name: str = "reference"
    code: str = ""


@dataclass
class XDocument(XContainer):
    name: str = "document"
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class XPlaceholder:
    """Visible stand-in for a note id that could not be resolved."""
    kind: str
    code: str


XNode = Union[XText, XContainer, XPlaceholder]

# node kinds that sit inside running text rather than forming their own block
INLINE_CONTAINERS = (XFootnote, XEndnote, XReference)
# plain container holding the displayed result of a non-reference field
FIELD_NAME = "field"


def is_block(node: Any) -> bool:
    if not isinstance(node, XContainer) or isinstance(node, INLINE_CONTAINERS):
        return False
    return node.name != FIELD_NAME


def iter_nodes(node: XNode) -> Iterator[XNode]:
    """Depth-first walk, shared footnote/endnote nodes are visited at each citation."""
    yield node
    if isinstance(node, XContainer):
        for child in node.children:
            yield from iter_nodes(child)


def collect_labels(node: XNode) -> List[str]:
    labels: List[str] = []
    for n in iter_nodes(node):
        if isinstance(n, XContainer):
            labels.extend(n.labels)
    return labels


# ---------- JSON form ----------

_CONTAINER_KINDS = {
    "section": XSection,
    "subsection": XSubsection,
    "subsubsection": XSubsubsection,
    "example": XExample,
    "footnote": XFootnote,
    "endnote": XEndnote,
    "reference": XReference,
    "document": XDocument,
}


def to_dict(node: XNode) -> Dict[str, Any]:
    """
    JSON-friendly form. A footnote/endnote shared by several citations is
    written out in full at each one, so from_dict gives every citation its
    own (equal) copy.
    """
    if isinstance(node, XText):
        return {"kind": "text", "data": node.data, "styles": int(node.styles)}
    if isinstance(node, XPlaceholder):
        return {"kind": "placeholder", "note": node.kind, "code": node.code}
    if isinstance(node, XContainer):
        out: Dict[str, Any] = {
            "kind": "container" if type(node) is XContainer else node.name,
            "children": [to_dict(c) for c in node.children],
            "labels": list(node.labels),
        }
        if type(node) is XContainer:
            out["name"] = node.name
        if isinstance(node, XReference):
            out["code"] = node.code
        if isinstance(node, XDocument):
            out["metadata"] = dict(node.metadata)
        return out
    raise TypeError(f"not an XDOM node: {type(node).__name__}")


def from_dict(data: Dict[str, Any]) -> XNode:
    kind = data.get("kind")
    if kind == "text":
        return XText(data.get("data", ""), int(data.get("styles", 0)))
    if kind == "placeholder":
        return XPlaceholder(data.get("note", ""), data.get("code", ""))
    children = [from_dict(c) for c in data.get("children", [])]
    labels = list(data.get("labels", []))
    if kind == "container":
        return XContainer(children=children, labels=labels, name=data.get("name", "paragraph"))
    cls = _CONTAINER_KINDS.get(kind)
    if cls is None:
        raise ValueError(f"unknown XDOM node kind: {kind!r}")
    if cls is XReference:
        return XReference(children=children, labels=labels, code=data.get("code", ""))
    if cls is XDocument:
        return XDocument(children=children, labels=labels, metadata=dict(data.get("metadata", {})))
    return cls(children=children, labels=labels)
