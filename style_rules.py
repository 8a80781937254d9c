# -*- coding: utf-8 -*-
"""
Paragraph-style and inline-style rules shared by the reader and the renderer.

Defaults live here; an external style_rules.json (explicit path, STYLE_RULES_PATH,
cwd, or next to this file) can override either table:

    {
      "paragraph_styles": {"Beispiel": "example", "Titel1": "section"},
      "style_commands": {"underline": "uline"}
    }
"""
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from xdom import STYLE_NAMES

logger = logging.getLogger(__name__)

# pStyle/@val -> XDOM node kind
DEFAULT_PARAGRAPH_STYLES: Dict[str, str] = {
    "ListNumber": "example",
    "Example": "example",
    "Heading1": "section",
    "Heading2": "subsection",
    "Heading3": "subsubsection",
}

# Style flag name -> LaTeX command
DEFAULT_STYLE_COMMANDS: Dict[str, str] = {
    "bold": "textbf",
    "italic": "textit",
    "underline": "underline",
    "subscript": "textsubscript",
    "superscript": "textsuperscript",
}

PARAGRAPH_KINDS = ("paragraph", "example", "section", "subsection", "subsubsection")

PARAGRAPH_STYLES: Dict[str, str] = dict(DEFAULT_PARAGRAPH_STYLES)
STYLE_COMMANDS: Dict[str, str] = dict(DEFAULT_STYLE_COMMANDS)
ACTIVE_STYLE_RULES_PATH: Optional[str] = None


def _iter_rules_config_paths(explicit_path: Optional[str] = None) -> List[str]:
    """Return possible rules config paths, ordered by priority."""
    paths: List[str] = []
    for cand in (explicit_path, os.environ.get("STYLE_RULES_PATH")):
        if cand:
            paths.append(os.path.abspath(cand))
    base_dirs = []
    if getattr(sys, "frozen", False):
        base_dirs.append(os.path.dirname(sys.executable))
    base_dirs.extend([os.getcwd(), os.path.dirname(os.path.abspath(__file__))])
    for d in base_dirs:
        paths.append(os.path.join(d, "style_rules.json"))
    out: List[str] = []
    for p in paths:
        if p not in out:
            out.append(p)
    return out


def _load_rules_from_json(path: str):
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError("top-level JSON value must be an object")
    para = data.get("paragraph_styles")
    commands = data.get("style_commands")
    for key, val in (("paragraph_styles", para), ("style_commands", commands)):
        if val is not None and not isinstance(val, dict):
            raise ValueError(f"{key} must be an object")
    return para, commands


def _merge_paragraph_styles(overrides: Dict[str, str]) -> Dict[str, str]:
    merged = dict(DEFAULT_PARAGRAPH_STYLES)
    for style_id, kind in overrides.items():
        if kind not in PARAGRAPH_KINDS:
            logger.warning(f"Unknown paragraph kind {kind!r} for style {style_id!r}; skipped")
            continue
        merged[style_id] = kind
    return merged


def _merge_style_commands(overrides: Dict[str, str]) -> Dict[str, str]:
    merged = dict(DEFAULT_STYLE_COMMANDS)
    for name, command in overrides.items():
        if name not in DEFAULT_STYLE_COMMANDS:
            logger.warning(f"Unknown inline style {name!r} in style_commands; skipped")
            continue
        merged[name] = str(command).lstrip("\\")
    return merged


def load_style_rules(config_path: Optional[str] = None) -> Optional[str]:
    """
    Load style rules from the first readable style_rules.json.
    Falls back to the bundled defaults when no override is present.
    """
    global PARAGRAPH_STYLES, STYLE_COMMANDS, ACTIVE_STYLE_RULES_PATH
    chosen_path: Optional[str] = None
    for candidate in _iter_rules_config_paths(config_path):
        if not os.path.exists(candidate):
            continue
        try:
            para, commands = _load_rules_from_json(candidate)
            if para is None and commands is None:
                continue
            PARAGRAPH_STYLES = _merge_paragraph_styles(para or {})
            STYLE_COMMANDS = _merge_style_commands(commands or {})
            chosen_path = candidate
            logger.info(f"Style rules loaded from {candidate}")
            break
        except (OSError, ValueError) as exc:
            logger.warning(f"Failed to load style rules from {candidate}: {exc}")
    if chosen_path is None:
        PARAGRAPH_STYLES = dict(DEFAULT_PARAGRAPH_STYLES)
        STYLE_COMMANDS = dict(DEFAULT_STYLE_COMMANDS)
    ACTIVE_STYLE_RULES_PATH = chosen_path
    return chosen_path


def paragraph_kind(style_id: Optional[str]) -> Optional[str]:
    """Node kind for a pStyle value, or None when the style carries no structure."""
    if not style_id:
        return None
    return PARAGRAPH_STYLES.get(style_id)


def style_command(flag: int) -> str:
    name = STYLE_NAMES.get(flag)
    if name is None:
        raise ValueError(f"Invalid style: {flag}")
    return STYLE_COMMANDS[name]


load_style_rules()
