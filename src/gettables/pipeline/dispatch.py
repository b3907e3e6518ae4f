"""Entry Dispatcher - Scan a document body for tables, entries and conditionals.

The body is scanned left to right for macros. Table-opening macros start a
new table, conditional macros drive the ConditionTracker, and entry macros
read their cells into a RawRow tagged with the applicable condition.
Everything else is skipped.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from gettables.errors import ConditionalRegionError
from gettables.models import Condition, Variant
from gettables.pipeline.cells import read_cells
from gettables.pipeline.conditions import ConditionTracker
from gettables.pipeline.directory import OpenedTable, is_table_macro, open_table

logger = logging.getLogger(__name__)

MACRO_PATTERN = re.compile(r"\\([A-Za-z]+)")
SPECDEP_TEST = re.compile(r"\s*\\specdep\s*=\s*1(?![0-9])")

# Entry macro → forced condition (None: use the tracker's)
ENTRY_MACROS = {
    "doentry": None,
    "depentry": Condition.COMPATIBILITY,
    "imgentry": Condition.IMAGING,
}


@dataclass(frozen=True)
class ColumnLayout:
    """Positions of the meaningful cells among an entry macro's arguments."""

    count: int
    get_value: int
    value_type: int
    get_command: int
    initial_value: int
    description: int
    section: int
    attribute: int


COLUMN_LAYOUTS = {
    Variant.GL: ColumnLayout(7, 0, 1, 2, 3, 4, 5, 6),
    Variant.ES: ColumnLayout(7, 0, 1, 2, 3, 4, 5, 6),
    # ES 1.1 has an extra leading cell and a permuted order
    Variant.ES11: ColumnLayout(8, 4, 1, 3, 2, 5, 6, 7),
}


@dataclass(frozen=True)
class RawRow:
    """Cells of one entry macro, before expansion and normalization."""

    condition: Optional[Condition]
    get_value: str
    value_type: str
    get_command: str
    initial_value: str
    description: str
    section: str
    attribute: str

    @classmethod
    def from_cells(
        cls,
        cells: list[str],
        layout: ColumnLayout,
        condition: Optional[Condition],
    ) -> "RawRow":
        return cls(
            condition=condition,
            get_value=cells[layout.get_value],
            value_type=cells[layout.value_type],
            get_command=cells[layout.get_command],
            initial_value=cells[layout.initial_value],
            description=cells[layout.description],
            section=cells[layout.section],
            attribute=cells[layout.attribute],
        )


ScanEvent = Union[OpenedTable, RawRow]


def scan_body(
    body: str,
    variant: Variant,
    tracker: Optional[ConditionTracker] = None,
) -> Iterator[ScanEvent]:
    """Scan a body region, yielding opened tables and raw rows in order.

    Args:
        body: Cleaned body region.
        variant: Document variant, selecting the column layout.
        tracker: Condition tracker; a fresh one is used if omitted.

    Yields:
        OpenedTable for each table-opening macro, RawRow for each entry.

    Raises:
        ConditionalRegionError: On conditional misuse or an unterminated region.
        MalformedSpanError: If an argument span is malformed.
    """
    tracker = tracker or ConditionTracker()
    layout = COLUMN_LAYOUTS[variant]
    pos = 0

    while True:
        match = MACRO_PATTERN.search(body, pos)
        if match is None:
            break
        name = match.group(1)
        pos = match.end()

        if name in ENTRY_MACROS:
            condition = ENTRY_MACROS[name] or tracker.current
            cells, pos = read_cells(body, layout.count, pos)
            yield RawRow.from_cells(cells, layout, condition)
        elif is_table_macro(name):
            opened = open_table(name, body, pos)
            pos = opened.end
            yield opened
        elif name == "ifnum":
            test = SPECDEP_TEST.match(body, pos)
            if test is None:
                snippet = body[pos:pos + 30].split("\n")[0]
                raise ConditionalRegionError(f"Unsupported conditional \\ifnum{snippet}")
            pos = test.end()
            tracker.begin()
        elif name == "else":
            tracker.switch()
        elif name == "fi":
            tracker.end()

    if tracker.active:
        raise ConditionalRegionError(
            f"Conditional region ({tracker.current.value}) not closed before end of body"
        )
