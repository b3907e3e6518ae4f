"""State table models: one Table per table-opening macro, one Entry per state variable."""

from typing import Optional, Union

from pydantic import Field, model_validator

from gettables.errors import FootnoteError

from .base import BaseStateModel, Condition
from .value_type import QuantityTerm, StateType

MAX_FOOTNOTES = 2


class Entry(BaseStateModel):
    """
    A single state variable row.

    Fields mirror the table columns. ``None`` means the cell was a dash
    ("not applicable"), except for ``description`` which is always present.
    """

    condition: Optional[Condition] = Field(
        None, description="Profile restriction; None applies unconditionally"
    )

    # Get value
    get_value: Optional[str] = Field(None, description="Symbolic constant passed to get_command")
    alternate_get_value: Optional[str] = Field(None, description="Alias written as NAME (ALT)")
    series: Optional[QuantityTerm] = Field(
        None, description="Minimum count of an indexed family starting at get_value"
    )

    # Type
    value_type: Optional[Union[StateType, str]] = Field(
        None, description="Parsed type, or raw text when parsing failed"
    )
    type_footnote: Optional[int] = Field(None, ge=0, lt=MAX_FOOTNOTES)

    # Query
    get_command: Optional[str] = Field(
        None, description="Query function; None means not independently queryable"
    )

    initial_value: Optional[str] = None
    initial_value_footnote: Optional[int] = Field(None, ge=0, lt=MAX_FOOTNOTES)

    description: str
    description_footnote: Optional[int] = Field(None, ge=0, lt=MAX_FOOTNOTES)

    attribute: Optional[str] = Field(None, description="Attribute group for PushAttrib")

    @model_validator(mode="after")
    def _series_excludes_alternate(self) -> "Entry":
        if self.series is not None and self.alternate_get_value is not None:
            raise ValueError("An entry cannot be both a series and have an alternate name")
        return self

    @property
    def is_conditional(self) -> bool:
        return self.condition is not None

    @property
    def has_parsed_type(self) -> bool:
        return isinstance(self.value_type, StateType)

    def footnote_indices(self) -> list[int]:
        """All footnote slots this entry refers to."""
        return [
            index
            for index in (
                self.type_footnote,
                self.initial_value_footnote,
                self.description_footnote,
            )
            if index is not None
        ]

    def same_content(self, other: "Entry") -> bool:
        """Check whether everything but condition and get value matches."""
        return (
            self.value_type == other.value_type
            and self.type_footnote == other.type_footnote
            and self.get_command == other.get_command
            and self.initial_value == other.initial_value
            and self.initial_value_footnote == other.initial_value_footnote
            and self.description == other.description
            and self.description_footnote == other.description_footnote
            and self.attribute == other.attribute
        )


class Table(BaseStateModel):
    """
    One state table of the document.

    Entries are kept in document order; the deduplicator depends on it.
    """

    title: str
    caption: Optional[str] = Field(
        None, description="Cleared once its footnotes have been extracted"
    )
    label: str = Field(..., description="Cross-reference label inside the document")
    footnotes: list[str] = Field(default_factory=list, max_length=MAX_FOOTNOTES)
    entries: list[Entry] = Field(default_factory=list)

    def add_footnote(self, text: str) -> int:
        """Append a footnote and return its slot."""
        if len(self.footnotes) >= MAX_FOOTNOTES:
            raise FootnoteError(
                f"Table {self.label!r} would have more than {MAX_FOOTNOTES} footnotes"
            )
        self.footnotes.append(text)
        return len(self.footnotes) - 1

    def check_entry(self, entry: Entry) -> None:
        """Ensure every footnote the entry refers to exists."""
        for index in entry.footnote_indices():
            if index >= len(self.footnotes):
                raise FootnoteError(
                    f"Entry {entry.get_value!r} in table {self.label!r} refers to "
                    f"footnote {index} but only {len(self.footnotes)} are defined"
                )

    def add_entry(self, entry: Entry) -> None:
        """Append an entry after checking its footnote references."""
        self.check_entry(entry)
        self.entries.append(entry)

    def get_entries(self, get_value: str) -> list[Entry]:
        """All entries with the given get value."""
        return [e for e in self.entries if e.get_value == get_value]

    @property
    def conditional_entry_count(self) -> int:
        return sum(1 for e in self.entries if e.is_conditional)
