"""Table Directory - Open a new table from a table-opening macro.

Three spellings exist, with different argument orders:

- ``\\statetable{title}{label}`` (gl, es)
- ``\\statetablecap{title}{caption}{label}`` (gl, es)
- ``\\settable{label}{title \\\\ caption}`` (es11)
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from gettables.models import Table
from gettables.pipeline.cells import read_cells
from gettables.pipeline.footnotes import split_caption_footnotes
from gettables.pipeline.text import unescape_text

logger = logging.getLogger(__name__)

# Macro name → argument roles, in source order
TABLE_MACROS = {
    "statetable": ("title", "label"),
    "statetablecap": ("title", "caption", "label"),
    "settable": ("label", "title"),
}

LINE_BREAK_PATTERN = re.compile(r"\s*\\\\\s*")


@dataclass
class OpenedTable:
    """A freshly opened table and where its arguments end."""

    table: Table
    end: int
    caption_footnotes: bool = False  # Footnotes came from the caption


def is_table_macro(name: str) -> bool:
    return name in TABLE_MACROS


def split_title(title: str) -> tuple[str, Optional[str]]:
    """Split a combined "title \\\\ caption" span."""
    parts = LINE_BREAK_PATTERN.split(title, maxsplit=1)
    if len(parts) == 2:
        return parts[0], parts[1] or None
    return title, None


def open_table(name: str, text: str, pos: int) -> OpenedTable:
    """Read the arguments of a table-opening macro.

    Args:
        name: Macro name without backslash.
        text: Document body.
        pos: Offset just after the macro name.

    Returns:
        OpenedTable with footnotes extracted from the caption.
    """
    roles = TABLE_MACROS[name]
    cells, end = read_cells(text, len(roles), pos)
    args = dict(zip(roles, cells))

    title = args["title"]
    caption = args.get("caption")
    if caption is None:
        title, caption = split_title(title)

    table = Table(
        title=unescape_text(title),
        caption=caption,
        label=args["label"],
    )

    caption_footnotes = False
    if caption:
        bodies = split_caption_footnotes(caption)
        if bodies:
            for body in bodies:
                table.add_footnote(unescape_text(body))
            # The caption only existed to carry the footnotes
            table.caption = None
            caption_footnotes = True
        else:
            table.caption = unescape_text(caption)

    logger.debug(
        "Opened table %r (%s) with %d caption footnotes",
        table.label,
        table.title,
        len(table.footnotes),
    )
    return OpenedTable(table=table, end=end, caption_footnotes=caption_footnotes)
