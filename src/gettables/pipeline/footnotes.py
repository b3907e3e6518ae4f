"""Table footnote definitions and references.

A table has at most two footnotes, referenced as ``\\dag`` (slot 0) and
``\\ddag`` (slot 1). They are defined either in the table caption or, for
tables without a caption, by a ``\\footnote{...}`` in an entry description.
"""

import re
from typing import Optional

from gettables.errors import FootnoteError
from gettables.pipeline.cells import read_cell

FOOTNOTE_MARKS = ("dag", "ddag")

# Reference at the very end of a field: "$^{\dag}$", "$\dag$" or bare "\dag"
TRAILING_REFERENCE = re.compile(r"\s*(?:\$\^?\{?\\(d?dag)\}?\$|\\(d?dag)(?:\{\})?)\s*$")
# Reference as the last superscript inside inline math: "$Z^{\dag}$"
TRAILING_MATH_REFERENCE = re.compile(r"\s*(?:\^\{?)?\\(d?dag)\}?(?=\s*\$\s*$)")

# Definition markers in captions; only the first two slots are supported
CAPTION_MARKER = re.compile(r"\$\^\{?\\(dag|ddag|S|P|\|)\}?\$")

DEFINITION_MACRO = "\\footnote"


def split_reference(text: str) -> tuple[str, str]:
    """Detach a trailing reference written outside math, keeping its markup.

    Returns:
        Tuple of (text without the reference, reference markup or "").
    """
    match = TRAILING_REFERENCE.search(text)
    if match is None:
        return text, ""
    return text[:match.start()], match.group(0).strip()


def extract_reference(text: str) -> tuple[str, Optional[int]]:
    """Strip a trailing footnote reference.

    Returns:
        Tuple of (text without the reference, slot or None).
    """
    match = TRAILING_REFERENCE.search(text)
    if match is None:
        match = TRAILING_MATH_REFERENCE.search(text)
    if match is None:
        return text, None
    mark = next(group for group in match.groups() if group)
    return text[:match.start()] + text[match.end():], FOOTNOTE_MARKS.index(mark)


def split_caption_footnotes(caption: str) -> list[str]:
    """Extract footnote bodies from a caption.

    Each body runs from its marker to the next marker or the end of the
    caption.

    Raises:
        FootnoteError: For a third footnote or markers out of order.
    """
    markers = list(CAPTION_MARKER.finditer(caption))
    bodies = []
    for slot, marker in enumerate(markers):
        mark = marker.group(1)
        if mark not in FOOTNOTE_MARKS:
            raise FootnoteError(f"Footnote marker \\{mark} is not supported")
        if FOOTNOTE_MARKS.index(mark) != slot:
            raise FootnoteError(f"Footnote \\{mark} defined out of order in caption")
        end = markers[slot + 1].start() if slot + 1 < len(markers) else len(caption)
        bodies.append(caption[marker.end():end].strip())
    return bodies


def extract_definition(text: str) -> tuple[str, Optional[str]]:
    """Pull a ``\\footnote{body}`` out of a description.

    Returns:
        Tuple of (text without the definition, body or None).
    """
    start = text.find(DEFINITION_MACRO)
    while start != -1:
        after = start + len(DEFINITION_MACRO)
        if after < len(text) and text[after].isalpha():
            start = text.find(DEFINITION_MACRO, after)
            continue
        body, end = read_cell(text, after)
        return (text[:start] + text[end:]).strip(), body
    return text, None
