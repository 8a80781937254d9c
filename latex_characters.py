# -*- coding: utf-8 -*-
"""
Text -> LaTeX escaping.

REPLACEMENTS is applied as a single alternation regex, so every character is
rewritten at most once (the backslash/brace entries never see their own output).
Keys longer than one character are tried first.
http://en.wikibooks.org/wiki/LaTeX/Special_Characters#Escaped_codes
"""
import re
from typing import Dict

# blank fill-in lines: each underscore becomes this many points of underline
UNDERSCORE_PT = 3
# straight quotes are only paired within this many characters
QUOTE_SPAN = 200

REPLACEMENTS: Dict[str, str] = {
    # must stay ahead of everything that emits braces or dollars
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "$": r"\$",
    "#": r"\#",

    # acute
    "á": r"\'a",
    "é": r"\'e",
    "í": r"\'i",
    "ó": r"\'o",
    "ú": r"\'u",
    # double acute
    "ő": r"\H{o}",
    "ű": r"\H{u}",
    # grave
    "ò": r"\`{o}",
    # umlaut
    "ö": r"\"o",
    "ü": r"\"u",
    # circumflex
    "ô": r"\^{o}",
    # breve
    "ŏ": r"\u{o}",
    # caron
    "č": r"\v{c}",
    # combining diaeresis / acute
    "\u0308": r"\"",
    "\u0301": r"\'",

    "ø": r"\o",
    "Ø": r"\O",

    "∧": r"$\wedge$",
    "∨": r"$\vee$",
    "∀": r"$\forall$",
    "\uf022": r"$\forall$",
    "∃": r"$\exists$",
    "\uf024": r"$\exists$",

    "¬": r"$\neg$",
    "≠": r"$\neq$",
    "≤": r"$\leq$",
    "\uf03c": r"$<$",
    "<": r"\textless{}",
    ">": r"\textgreater{}",

    "∈": r"$\in$",
    "\uf0ce": r"$\in$",
    "∅": r"$\emptyset$",
    "\uf0c7": r"$\cap$",
    "−": r"$-$",
    "⊑": r"$\sqsubseteq$",
    "⊃": r"$\supset$",
    "⊂": r"$\subset$",
    "≡": r"$\equiv$",
    "⊆": r"$\subseteq$",
    "⊇": r"$\supseteq$",
    "≥": r"$\ge$",
    "×": r"$\times$",
    "∪": r"$\cup$",

    "‘": "`",
    "’": "'",
    "“": "``",
    "”": "''",

    "…": r"\dots{}",

    # greek
    "α": r"$\alpha$",
    "\uf061": r"$\alpha$",
    "λ": r"$\lambda$",
    "\uf06c": r"$\lambda$",
    "δ": r"$\delta$",
    "ε": r"$\epsilon$",
    "ι": r"$\iota$",
    "Π": r"$\Pi$",
    "π": r"$\pi$",
    "ϕ": r"$\phi$",
    "\uf066": r"$\phi$",
    "θ": r"$\theta$",
    "Θ": r"$\Theta$",
    "β": r"$\beta$",
    "\uf062": r"$\beta$",
    "\uf020": " ",
    "\uf070": r"$\pi$",
    "\uf02c": ",",
    "µ": r"$\mu$",
    "μ": r"$\mu$",
    "τ": r"$\tau$",

    "◊": r"$\lozenge$",

    "\t": r"\tab{}",
    "⇐": r"$\Leftarrow$",
    "⇔": r"$\Leftrightarrow$",
    "⇒": r"$\Rightarrow$",
    "→": r"$\to$",

    "&": r"\&",
    "—": "---",
    "–": "--",
    "∞": r"$\infty$",
    "☐": r"$\square$",
    "\u00a0": "~",
    # ligatures
    "ﬁ": "fi",

    "\uf07b": r"\{",
    "\uf07c": "|",
    "\uf03e": r"$>$",
    "%": r"\%",

    # ascii arrows
    "==>": r"$\Rightarrow$",
    "=>": r"$\Rightarrow$",
    "||": r"\textbardbl{}",

    # LEFT-TO-RIGHT MARK
    "\u200e": "",
}


def _build_pattern(table: Dict[str, str]) -> "re.Pattern[str]":
    # stable sort: multi-character keys first, table order otherwise
    keys = sorted(table, key=len, reverse=True)
    return re.compile("|".join(re.escape(k) for k in keys))


REPLACEMENT_RE = _build_pattern(REPLACEMENTS)
UNDERSCORES_RE = re.compile(r"_+")
SINGLE_QUOTES_RE = re.compile(
    r"(^|\(|\[| )'(\S[^']{1,%d}\S)'($|\.|,|;|\?|\)|\]| )" % QUOTE_SPAN
)
DOUBLE_QUOTES_RE = re.compile(
    r'(^|\(|\[| )"(\S[^"]{1,%d}\S)"($|\.|,|;|\?|\)|\]| )' % QUOTE_SPAN
)


def apply_replacements(raw: str) -> str:
    return REPLACEMENT_RE.sub(lambda m: REPLACEMENTS[m.group(0)], raw)


def _underline_blank(m: "re.Match[str]") -> str:
    pt = len(m.group(0)) * UNDERSCORE_PT
    return rf"\underline{{\hspace{{{pt}pt}}}}"


def escape_text(raw: str) -> str:
    """Table substitution, then blank fill-ins, then straight-quote pairing."""
    tex = apply_replacements(raw)
    tex = UNDERSCORES_RE.sub(_underline_blank, tex)
    tex = SINGLE_QUOTES_RE.sub(r"\1`\2'\3", tex)
    tex = DOUBLE_QUOTES_RE.sub(r"\1``\2''\3", tex)
    return tex
