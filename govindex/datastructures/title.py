"""Proposal title extraction from markdown descriptions."""

from __future__ import annotations

DEFAULT_TITLE = "Untitled"


def _is_setext_underline(line: str) -> bool:
    return bool(line) and set(line) == {"="}


def extract_title(description: str) -> str:
    """
    Pull the first top-level markdown heading out of a proposal description.

    Both ATX (``# Title``) and setext (``Title`` followed by a line of ``=``)
    headings are recognised. Bold and italic markers are stripped from the
    result. Descriptions without a heading are titled ``"Untitled"``.
    """
    title = DEFAULT_TITLE
    lines = description.split("\n")

    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if line.startswith("# "):
            title = line[2:].lstrip()
            break
        if index < len(lines) - 1 and _is_setext_underline(lines[index + 1].strip()):
            title = line
            break

    return title.replace("**", "").replace("__", "")
