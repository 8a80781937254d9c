# -*- coding: utf-8 -*-
"""
Document wrappers around a rendered LaTeX body.

plain: article preamble with gb4e examples and cleveref formats for the example
counters, plus \\title / \\author when the package metadata has them.
semprag: Semantics & Pragmatics journal class (sp.cls) with gb4e-emulate; title,
authors, keywords and abstract come from the package metadata.
body: the rendered body alone, for pasting into an existing document.
"""
from datetime import datetime
from string import Template
from typing import Callable, Dict, List, Optional

from latex_characters import escape_text
from tex_builders import text_block
from xdom import XDocument
from xdom_to_latex import render

PLAIN_TEMPLATE = Template(r"""\documentclass{article}

% Converted by docx2latex on $timestamp

\usepackage{hyperref}
\usepackage{fixltx2e}
\usepackage{times}

\usepackage{gb4e}
\newcommand{\example}[1]{
  \begin{exe}
    \ex{#1}
  \end{exe}
}

\usepackage{cleveref}
\crefformat{xnumi}{(#2#1#3)}
\crefformat{xnumii}{(#2#1#3)}
\crefformat{xnumiii}{(#2#1#3)}
$title_block
\begin{document}
$maketitle$body
\end{document}
""")

SEMPRAG_TEMPLATE = Template(r"""\documentclass[lucida,biblatex]{sp}

% Converted by docx2latex on $timestamp

\usepackage{gb4e-emulate}

%\addbibresource{paper.bib}

\usepackage{cleveref}
\crefformat{xnumi}{(#2#1#3)}
\crefformat{xnumii}{(#2#1#3)}
\crefformat{xnumiii}{(#2#1#3)}
\crefformat{exei}{(#2#1#3)}
\crefformat{exeii}{(#2#1#3)}
\crefformat{exeiii}{(#2#1#3)}
$front_matter
\begin{document}

$maketitle$abstract$keywords$body

\printbibliography
$addresses
\end{document}
""")

# core.xml keeps several authors in one dc:creator, separated by semicolons
AUTHOR_SEPARATOR = ";"


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def plain(document: XDocument, body: Optional[str] = None, timestamp: Optional[str] = None) -> str:
    if body is None:
        body = render(document)
    title = (document.metadata.get("title") or "").strip()
    creator = (document.metadata.get("creator") or "").strip()
    title_lines: List[str] = []
    if title:
        title_lines.append(text_block.command("title", escape_text(title)))
    if creator:
        title_lines.append(text_block.command("author", escape_text(creator)))
    title_block = "\n" + "\n".join(title_lines) + "\n" if title_lines else ""
    return PLAIN_TEMPLATE.substitute(
        timestamp=timestamp or _timestamp(),
        title_block=title_block,
        maketitle="\\maketitle\n\n" if title else "",
        body=body,
    )


def _environment(name: str, content: str) -> str:
    return f"\\begin{{{name}}}\n  {content}\n\\end{{{name}}}\n\n"


def semprag(document: XDocument, body: Optional[str] = None, timestamp: Optional[str] = None) -> str:
    """
    Only metadata that exists is written out: no \\maketitle without a title,
    no abstract/keywords/addresses environments when they would be empty.
    """
    if body is None:
        body = render(document)
    metadata = document.metadata
    title = (metadata.get("title") or "").strip()
    keywords = (metadata.get("keywords") or "").strip()
    abstract = (metadata.get("description") or "").strip()
    authors = [
        escape_text(name.strip())
        for name in (metadata.get("creator") or "").split(AUTHOR_SEPARATOR)
        if name.strip()
    ]

    front: List[str] = []
    if authors:
        front.append(text_block.command("pdfauthor", ", ".join(authors)))
    if title:
        front.append(text_block.command("pdftitle", escape_text(title)))
    if keywords:
        front.append(text_block.command("pdfkeywords", escape_text(keywords)))
    if authors:
        sp_authors = "\\AND\n  ".join(text_block.command("spauthor", name) for name in authors)
        front.append(f"\\author[{', '.join(authors)}]{{\n  {sp_authors}\n}}")
    if title:
        short_title = title.split(":")[0].strip() or title
        front.append(f"\\title[{escape_text(short_title)}]{{{escape_text(title)}}}")
    front_matter = "\n" + "\n".join(front) + "\n" if front else ""

    addresses = ""
    if authors:
        entries = "\n  ".join(f"\\begin{{address}}\n    {name}\n  \\end{{address}}" for name in authors)
        addresses = "\n\\begin{addresses}\n  " + entries + "\n\\end{addresses}\n"

    return SEMPRAG_TEMPLATE.substitute(
        timestamp=timestamp or _timestamp(),
        front_matter=front_matter,
        maketitle="\\maketitle\n\n" if title else "",
        abstract=_environment("abstract", escape_text(abstract)) if abstract else "",
        keywords=_environment("keywords", escape_text(keywords)) if keywords else "",
        body=body,
        addresses=addresses,
    )


def body(document: XDocument, body: Optional[str] = None, timestamp: Optional[str] = None) -> str:
    if body is None:
        body = render(document)
    return body if body.endswith("\n") else body + "\n"


LAYOUTS: Dict[str, Callable[..., str]] = {
    "plain": plain,
    "body": body,
    "semprag": semprag,
}
