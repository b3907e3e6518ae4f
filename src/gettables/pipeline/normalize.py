"""Entry Normalizer - Turn one concrete raw row into an Entry.

The steps run in a fixed order; later steps rely on the earlier ones:

1. Un-escape all cells
2. Dashes become absent fields
3. ``NAME (ALT)`` alternate names
4. ``NAME$i$`` indexed series
5. Get-command clean-up
6. Constant substitution in the initial value
7. Description footnote reference; an embedded footnote definition is
   registered once per source row by take_footnote_definition, before
   expansion, so every row expanded from it shares the slot
8. Initial value and type footnote references
9. Type parsing
"""

import logging
import re
from dataclasses import replace
from typing import Optional, Union

from gettables.errors import FootnoteError, ParseError
from gettables.models import Entry, QuantityTerm, StateType, Table, Variant
from gettables.pipeline.cells import strip_wrapper
from gettables.pipeline.constants import substitute_constants
from gettables.pipeline.dispatch import RawRow
from gettables.pipeline.footnotes import extract_definition, extract_reference
from gettables.pipeline.text import optional_field, unescape_text
from gettables.pipeline.type_grammar import parse_quantity_term, parse_type, pop_leading_term

logger = logging.getLogger(__name__)

ALTERNATE_PATTERN = re.compile(r"^(?P<name>[^\s()]+)\s*\((?P<alternate>[^()]+)\)$")
SERIES_SUFFIX = "$i$"

# ES 1.1 lists both typed queries where the others name the generic one
GET_COMMAND_ANOMALIES = {
    Variant.ES11: {
        "GetTexParameteriv, GetTexParameterfv": "GetTexParameter",
    },
}


def split_alternate(get_value: str) -> tuple[str, Optional[str]]:
    """Split ``NAME (ALT)`` into its two names."""
    match = ALTERNATE_PATTERN.match(get_value)
    if match is None:
        return get_value, None
    return match.group("name"), match.group("alternate").strip()


def split_series(
    get_value: str,
    value_type: Optional[str],
) -> tuple[str, Optional[QuantityTerm], Optional[str]]:
    """Turn ``NAME$i$`` into its first element and a series count.

    The count is the type's leading quantity term, which is removed from
    the type.

    Raises:
        ParseError: If the type has no leading term to take the count from.
    """
    if not get_value.endswith(SERIES_SUFFIX):
        return get_value, None, value_type
    first = get_value[:-len(SERIES_SUFFIX)] + "0"
    term = None
    if value_type is not None:
        term, value_type = pop_leading_term(value_type)
    if term is None:
        raise ParseError(f"Series {get_value!r} has no count in its type {value_type!r}")
    return first, parse_quantity_term(term), value_type


def normalize_get_command(get_command: Optional[str], variant: Variant) -> Optional[str]:
    if get_command is None:
        return None
    if variant != Variant.ES11:
        get_command = strip_wrapper(get_command, "glr")
    return GET_COMMAND_ANOMALIES.get(variant, {}).get(get_command, get_command)


def take_footnote_definition(
    row: RawRow,
    table: Table,
    caption_footnotes: bool = False,
) -> tuple[RawRow, Optional[int]]:
    """Register a description's ``\\footnote{...}`` with the table.

    Returns:
        Tuple of (row without the definition, new slot or None).

    Raises:
        FootnoteError: If the table's footnotes already came from its
            caption, or the table is full.
    """
    description, definition = extract_definition(row.description)
    if definition is None:
        return row, None
    if caption_footnotes:
        raise FootnoteError(
            f"Table {table.label!r} defines footnotes in both caption and description"
        )
    slot = table.add_footnote(unescape_text(definition))
    return replace(row, description=description), slot


def normalize_row(
    row: RawRow,
    variant: Variant,
    table: Table,
    constants: dict[str, str],
    caption_footnotes: bool = False,
    diagnostics: Optional[list[str]] = None,
    footnote: Optional[int] = None,
) -> Entry:
    """Normalize a fully expanded row.

    Args:
        row: Concrete row from the expander.
        variant: Document variant.
        table: Table the entry will belong to; may gain a footnote.
        constants: Constant table from the defs region.
        caption_footnotes: The table's footnotes came from its caption.
        diagnostics: Collects non-fatal problems.
        footnote: Slot already defined by the source row's description.

    Returns:
        The normalized Entry.

    Raises:
        FootnoteError: On conflicting footnote definitions.
        ParseError: On a malformed series.
    """
    row, defined = take_footnote_definition(row, table, caption_footnotes)
    if defined is not None:
        footnote = defined

    get_value = optional_field(unescape_text(row.get_value))
    value_type = optional_field(unescape_text(row.value_type))
    get_command = optional_field(unescape_text(row.get_command))
    initial_value = optional_field(unescape_text(row.initial_value))
    attribute = optional_field(unescape_text(row.attribute))
    description = unescape_text(row.description)

    # In ES 1.1 the whole type cell is implicitly inline math
    if value_type is not None and variant == Variant.ES11:
        value_type = f"${value_type}$"

    alternate = None
    series = None
    if get_value is not None:
        get_value, alternate = split_alternate(get_value)
        get_value, series, value_type = split_series(get_value, value_type)
        if alternate is not None and series is not None:
            raise ParseError(f"{get_value!r} is both a series and has an alternate name")

    get_command = normalize_get_command(get_command, variant)

    if initial_value is not None:
        initial_value = substitute_constants(initial_value, constants)

    description, description_footnote = extract_reference(description)
    if footnote is not None:
        if description_footnote is not None:
            raise FootnoteError(f"Description of {get_value!r} both defines and references a footnote")
        description_footnote = footnote

    initial_value_footnote = None
    if initial_value is not None:
        initial_value, initial_value_footnote = extract_reference(initial_value)
    type_footnote = None
    if value_type is not None:
        value_type, type_footnote = extract_reference(value_type)

    parsed_type: Optional[Union[StateType, str]] = value_type
    if value_type is not None:
        parsed_type = parse_type(value_type, diagnostics) or value_type

    return Entry(
        get_value=get_value,
        alternate_get_value=alternate,
        series=series,
        value_type=parsed_type,
        type_footnote=type_footnote,
        get_command=get_command,
        initial_value=initial_value.strip() if initial_value is not None else None,
        initial_value_footnote=initial_value_footnote,
        description=description.strip(),
        description_footnote=description_footnote,
        attribute=attribute,
        condition=row.condition,
    )
