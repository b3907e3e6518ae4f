"""Balanced brace reader for macro arguments."""

from gettables.errors import MalformedSpanError

OPEN = "{"
CLOSE = "}"
ESCAPE = "\\"


def _is_escaped(text: str, offset: int) -> bool:
    """An odd run of backslashes before offset escapes the character there."""
    run = 0
    while offset - run > 0 and text[offset - run - 1] == ESCAPE:
        run += 1
    return run % 2 == 1


def read_cell(text: str, pos: int = 0) -> tuple[str, int]:
    """Read one brace-delimited argument starting at ``pos``.

    The next non-whitespace character must open the span. Braces escaped by
    a backslash are literal and do not count towards nesting; a brace after
    a line break ``\\\\`` is not escaped.

    Args:
        text: Text containing the span.
        pos: Offset to start scanning from.

    Returns:
        Tuple of (trimmed inner content, offset just past the closing brace).
        ``text[offset:]`` is the remainder.

    Raises:
        MalformedSpanError: If no span opens at ``pos`` or it never closes.
    """
    start = pos
    while start < len(text) and text[start].isspace():
        start += 1
    if start >= len(text) or text[start] != OPEN:
        raise MalformedSpanError("Expected '{' to open a cell", start)

    depth = 0
    offset = start
    while offset < len(text):
        char = text[offset]
        if char in (OPEN, CLOSE) and _is_escaped(text, offset):
            offset += 1
            continue
        if char == OPEN:
            depth += 1
        elif char == CLOSE:
            depth -= 1
            if depth == 0:
                return text[start + 1:offset].strip(), offset + 1
        offset += 1

    raise MalformedSpanError("Unbalanced '{' never closed", start)


def read_cells(text: str, count: int, pos: int = 0) -> tuple[list[str], int]:
    """Read ``count`` consecutive cells, returning them and the end offset."""
    cells = []
    for _ in range(count):
        cell, pos = read_cell(text, pos)
        cells.append(cell)
    return cells, pos


def strip_wrapper(text: str, macro: str) -> str:
    """Remove a ``\\macro{...}`` wrapper if it encloses the whole text."""
    prefix = f"\\{macro}"
    if not text.startswith(prefix):
        return text
    try:
        inner, end = read_cell(text, len(prefix))
    except MalformedSpanError:
        return text
    if text[end:].strip():
        return text
    return inner
