"""Helpers for composing LaTeX command snippets."""
from __future__ import annotations


def command(name: str, content: str) -> str:
    return f"\\{name}{{{content}}}"


def append_labels(parts: list[str], labels: list[str]) -> None:
    """Append one \\label{...} per (already sanitized) bookmark name."""
    for label in labels:
        parts.append(command("label", label))


def append_command_block(parts: list[str], name: str, content: str, labels: list[str]) -> None:
    parts.append(command(name, content))
    append_labels(parts, labels)


def append_note(parts: list[str], name: str, content: str) -> None:
    # people like to start their notes with a space; drop it after the mark
    parts.append(command(name, content.lstrip()))
