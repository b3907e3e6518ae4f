"""Fatal error taxonomy for the extraction engine.

Every error here aborts extraction of the affected document. The inputs are
fixed reference documents, so none of them is retried or recovered from.
"""


class GetTablesError(ValueError):
    """Base class for all extraction failures."""


class DocumentFormatError(GetTablesError):
    """The document framing (dividers, regions) is not what we expect."""


class MalformedSpanError(GetTablesError):
    """A brace-delimited span does not open where expected or never closes."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (at offset {offset})")
        self.offset = offset


class ConditionalRegionError(GetTablesError):
    """Nested, mismatched or unsupported conditional region."""


class UnsupportedConditionError(GetTablesError):
    """A condition combination that has never been observed in the sources."""


class FootnoteError(GetTablesError):
    """Conflicting, excess or dangling table footnotes."""


class DuplicateConditionError(GetTablesError):
    """Two merge candidates that are not a Core/Compatibility pair."""


class ParseError(GetTablesError):
    """Any other construct the engine does not understand."""
