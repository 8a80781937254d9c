"""Helpers that emit gb4e example environments."""
from __future__ import annotations

from string import Template

EXAMPLE_TEMPLATE = Template(r"""\begin{exe}
  \ex $content
\end{exe}""")


def append_example(parts: list[str], content: str) -> None:
    parts.append(EXAMPLE_TEMPLATE.substitute(content=content))
