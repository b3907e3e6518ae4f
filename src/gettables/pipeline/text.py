"""Text clean-up shared by table titles, captions and entry cells."""

import re
from typing import Optional

from gettables.errors import MalformedSpanError
from gettables.pipeline.cells import read_cell

WHITESPACE_PATTERN = re.compile(r"\s+")
STRAIGHT_QUOTES_PATTERN = re.compile(r'"([^"]*)"')
TEX_QUOTES_PATTERN = re.compile(r"``(.*?)''", re.DOTALL)
SMALL_FONT_PATTERN = re.compile(r"\\(?:small|footnotesize|scriptsize)(?![A-Za-z])\s*")
ISSUE_REFERENCE_PATTERN = re.compile(r"\s*\((?:Bug|Issue|bug|issue)\s*#?\d+\)")

# Change markers: \added{X} keeps X; \bugfix{X} keeps X and drops "(Bug N)"
CHANGE_MARKERS = ("added", "bugfix")
ISSUE_MARKERS = ("bugfix",)

ABSENT_MARKERS = ("-", "--")


def _remove_change_markers(text: str) -> str:
    for marker in CHANGE_MARKERS:
        prefix = f"\\{marker}"
        start = text.find(prefix)
        while start != -1:
            after = start + len(prefix)
            if after < len(text) and text[after].isalpha():
                start = text.find(prefix, after)
                continue
            try:
                inner, end = read_cell(text, after)
            except MalformedSpanError:
                start = text.find(prefix, after)
                continue
            if marker in ISSUE_MARKERS:
                issue = ISSUE_REFERENCE_PATTERN.match(text, end)
                if issue:
                    end = issue.end()
            text = text[:start] + inner + text[end:]
            start = text.find(prefix, start)
    return text


def unescape_text(text: str) -> str:
    """Reduce table markup in a cell to plain readable text.

    Order: change markers, whitespace, escaped underscores, hyphenation
    hints, quotes, font size switches.
    """
    text = _remove_change_markers(text)
    text = WHITESPACE_PATTERN.sub(" ", text).strip()
    text = text.replace("\\_", "_")
    text = text.replace("\\-", "")
    text = TEX_QUOTES_PATTERN.sub("\u201c\\1\u201d", text)
    text = STRAIGHT_QUOTES_PATTERN.sub("\u201c\\1\u201d", text)
    text = SMALL_FONT_PATTERN.sub("", text)
    return text.strip()


def optional_field(text: str) -> Optional[str]:
    """A lone dash means the field does not apply."""
    if text in ABSENT_MARKERS:
        return None
    return text
