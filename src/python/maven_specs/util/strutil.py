# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import re
import textwrap
from typing import Iterable


def pluralize(count: int, item_type: str, include_count: bool = True) -> str:
    """`pluralize(1, "artifact")` is "1 artifact", `pluralize(0, "repository")` is "0
    repositories"."""
    if count == 1:
        word = item_type
    elif item_type.endswith("s"):
        word = f"{item_type}es"
    elif item_type.endswith("y"):
        word = f"{item_type[:-1]}ies"
    else:
        word = f"{item_type}s"
    return f"{count} {word}" if include_count else word


def bullet_list(elements: Iterable[str]) -> str:
    """Formats one indented `* ` row per element.

    Callers should normally put `\n\n` before it so the bullets read as their own section.
    """
    return "\n".join(f"  * {element}" for element in elements)


_runs_of_spaces = re.compile(r"(\S)  +(\S)")


def softwrap(text: str) -> str:
    """Dedents a triple-quoted message and joins each paragraph onto one line.

    Blank lines separate paragraphs and are kept, collapsed to a single blank line. Indented lines
    (such as `  * ` bullets) keep their own line and indentation.
    """
    paragraphs: list[str] = []
    current: list[str] = []
    for line in textwrap.dedent(text).strip("\n").splitlines():
        if not line.strip():
            if current:
                paragraphs.append(" ".join(current))
                current = []
        elif line.startswith(" "):
            if current:
                paragraphs.append(" ".join(current))
                current = []
            paragraphs.append(line.rstrip())
        else:
            current.append(_runs_of_spaces.sub(r"\1 \2", line.strip()))
    if current:
        paragraphs.append(" ".join(current))

    result = ""
    for i, paragraph in enumerate(paragraphs):
        if i:
            bullet_follows_bullet = paragraph.startswith(" ") and paragraphs[i - 1].startswith(" ")
            result += "\n" if bullet_follows_bullet else "\n\n"
        result += paragraph
    return result
