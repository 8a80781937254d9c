# -*- coding: utf-8 -*-
"""
XDOM -> LaTeX renderer

render(node) turns any XDOM node into LaTeX body text:

- contiguous XText siblings are rendered together so identically styled runs
  share one command, and nested styles nest (\\textbf{a \\textit{b}})
- sections/subsections -> \\section{...}\\label{...}
- examples -> gb4e exe environment
- footnotes/endnotes -> \\footnote{...} / \\endnote{...}
- references -> \\Cref{...}
- two adjacent block containers are separated by a blank line
"""
import logging
import re
from typing import List, Optional, Union

import style_rules
from conversion_errors import RenderError
from latex_characters import escape_text
from tex_builders import example_block, text_block
from xdom import (
    FIELD_NAME,
    XContainer,
    XEndnote,
    XExample,
    XFootnote,
    XNode,
    XPlaceholder,
    XReference,
    XText,
    calculate_flags,
    is_block,
)

logger = logging.getLogger(__name__)

# Word prefixes bookmark names with "_", which gb4e's automath subscripts choke on
MARKER_RE = re.compile(r"[^A-Za-z0-9-]")
EDGE_WHITESPACE_RE = re.compile(r"(\s+)?(.*?)(\s+)?", re.DOTALL)

# containers that render their children without a wrapping command
UNWRAPPED_CONTAINERS = ("paragraph", "document", FIELD_NAME)
BLOCK_SEPARATOR = "\n\n"

XNodeGroup = Union[XNode, List[XText]]


def clean_marker(marker: str) -> str:
    return MARKER_RE.sub("", marker)


def group_nodes(nodes: List[XNode]) -> List[XNodeGroup]:
    """
    Collect each run of contiguous XText siblings into a list. Line breaks
    ("\\n" texts) are never grouped.
    """
    groups: List[XNodeGroup] = []
    for node in nodes:
        if isinstance(node, XText) and node.data != "\n":
            if groups and isinstance(groups[-1], list):
                groups[-1].append(node)
            else:
                groups.append([node])
        else:
            groups.append(node)
    return groups


class TeXString:
    def __init__(self, data: str):
        self.data = data

    def __str__(self) -> str:
        return escape_text(self.data)


class TeXNode:
    """Style command node; only the root has command None."""

    def __init__(self, command: Optional[str] = None, parent: Optional["TeXNode"] = None):
        self.command = command
        self.parent = parent
        self.children: List[Union["TeXNode", TeXString]] = []

    def push(self, child: Union["TeXNode", TeXString]):
        self.children.append(child)

    def __str__(self) -> str:
        content = "".join(str(c) for c in self.children)
        if self.command is None:
            return content
        return text_block.command(self.command, content)


def split_edge_whitespace(nodes: List[XText]) -> List[XText]:
    """
    Hanging whitespace becomes its own unstyled token so it never forces a
    style command open. Input nodes are left untouched (notes are shared).
    """
    queue: List[XText] = []
    for node in nodes:
        m = EDGE_WHITESPACE_RE.fullmatch(node.data)
        left, core, right = m.group(1), m.group(2), m.group(3)
        if left:
            queue.append(XText(left, 0))
        if core:
            queue.append(XText(core, node.styles))
        if right:
            queue.append(XText(right, 0))
    return queue


def render_text_list(nodes: List[XText]) -> str:
    """
    Arrange a flat list of styled texts into a tree of nested style commands
    and serialize it.

    `cursor_styles` holds the total styles represented at each depth of the
    cursor, e.g. [0, 1, 3] is root > bold > bold|italic.
    """
    tree = TeXNode()
    cursor = tree
    cursor_styles: List[int] = [0]
    whitespace = ""

    for token in split_edge_whitespace(nodes):
        # pure whitespace fits any style
        if token.data.isspace():
            whitespace += token.data
            continue
        styles = int(token.styles)
        # climb until the cursor's styles are a subset of the token's; never past root (0)
        while (styles & cursor_styles[-1]) != cursor_styles[-1]:
            cursor_styles.pop()
            cursor = cursor.parent
        if whitespace:
            cursor.push(TeXString(whitespace))
            whitespace = ""
        for flag in calculate_flags(styles ^ cursor_styles[-1]):
            child = TeXNode(style_rules.style_command(flag), parent=cursor)
            cursor.push(child)
            cursor = child
            cursor_styles.append(cursor_styles[-1] | flag)
        cursor.push(TeXString(token.data))

    if whitespace:
        cursor.push(TeXString(whitespace))
    return str(tree)


def _labels(node: XContainer) -> List[str]:
    return [clean_marker(label) for label in node.labels]


def render_container(node: XContainer) -> str:
    parts = [render_node_list(node.children)]
    text_block.append_labels(parts, _labels(node))
    return "".join(parts)


def render_node_list(nodes: List[XNode]) -> str:
    parts: List[str] = []
    previous: Optional[XNodeGroup] = None
    for group in group_nodes(nodes):
        if previous is not None and is_block(previous) and is_block(group):
            parts.append(BLOCK_SEPARATOR)
        parts.append(render(group))
        previous = group
    return "".join(parts)


def render(node: XNodeGroup) -> str:
    parts: List[str] = []
    if isinstance(node, list):
        return render_text_list(node)
    if isinstance(node, XText):
        # only line breaks reach here through grouping
        if node.data == "\n":
            return node.data
        return render_text_list([node])
    if isinstance(node, XPlaceholder):
        return text_block.command("textbf", escape_text(f"[unresolved {node.kind} {node.code}]"))
    if isinstance(node, XReference):
        return text_block.command("Cref", clean_marker(node.code))
    if isinstance(node, XExample):
        example_block.append_example(parts, render_container(node))
        return "".join(parts)
    if isinstance(node, XFootnote):
        text_block.append_note(parts, "footnote", render_container(node))
        return "".join(parts)
    if isinstance(node, XEndnote):
        text_block.append_note(parts, "endnote", render_container(node))
        return "".join(parts)
    if isinstance(node, XContainer):
        # sections, subsections, subsubsections and any other named container
        if node.name in UNWRAPPED_CONTAINERS:
            return render_container(node)
        text_block.append_command_block(parts, node.name, render_node_list(node.children), _labels(node))
        return "".join(parts)
    raise RenderError(f"Cannot render {type(node).__name__}")
