"""Document Source Stage - Read a table source into its regions.

The table sources are LaTeX fragments laid out as:

1. An attribution header
2. A divider line
3. Macro definitions
4. A divider line
5. The tables proper

Comments are stripped per line, lines are trimmed and blank lines dropped.
"""

import logging
import re
from pathlib import Path

from gettables.errors import DocumentFormatError
from gettables.models import SourceDocument

logger = logging.getLogger(__name__)

DIVIDER = "%" * 80

# A comment starts at the first % not escaped by a backslash
COMMENT_PATTERN = re.compile(r"(?<!\\)%.*$")


def strip_comment(line: str) -> str:
    """Remove a trailing comment and surrounding whitespace."""
    return COMMENT_PATTERN.sub("", line).strip()


def clean_lines(lines: list[str]) -> str:
    """Strip comments and blank lines, joining what is left with newlines."""
    kept = []
    for line in lines:
        line = strip_comment(line)
        if line:
            kept.append(line)
    return "\n".join(kept)


def split_document(text: str, source_path: str = None) -> SourceDocument:
    """Split raw source text into header, defs and body regions.

    Args:
        text: Full text of the table source.
        source_path: Where the text came from, for diagnostics.

    Returns:
        SourceDocument with cleaned regions.

    Raises:
        DocumentFormatError: If no divider line is present.
    """
    regions: list[list[str]] = [[]]
    for line in text.splitlines():
        # The divider is itself a comment, so check before stripping
        if line.rstrip() == DIVIDER:
            regions.append([])
        else:
            regions[-1].append(line)

    if len(regions) == 1:
        raise DocumentFormatError(f"No divider line found in {source_path or 'document'}")

    if len(regions) == 2:
        header, defs, body = [], regions[0], regions[1]
    else:
        header, defs = regions[0], regions[1]
        # Later dividers are only decoration inside the body
        body = [line for region in regions[2:] for line in region]

    document = SourceDocument(
        header=clean_lines(header),
        defs=clean_lines(defs),
        body=clean_lines(body),
        source_path=source_path,
    )
    logger.debug(
        "Split %s: %d header, %d defs, %d body characters",
        source_path or "document",
        len(document.header),
        len(document.defs),
        len(document.body),
    )
    return document


def read_document(path: Path) -> SourceDocument:
    """Read a table source from disk.

    Raises:
        FileNotFoundError: If the source does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table source not found: {path}")
    text = path.read_text(encoding="utf-8")
    return split_document(text, source_path=str(path))
