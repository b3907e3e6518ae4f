"""Deduplicator - Fold Core/Compatibility twins back into one entry.

Conditional regions combined with row expansion can produce the same state
variable twice, once per profile, with nothing else differing. Such a pair
is really one unconditional entry.
"""

import logging
from typing import Optional, Sequence

from gettables.errors import DuplicateConditionError
from gettables.models import Condition, Entry, Table

logger = logging.getLogger(__name__)

COMPLEMENTARY = {Condition.CORE, Condition.COMPATIBILITY}


def find_merge_target(entries: Sequence[Entry], new: Entry) -> Optional[int]:
    """Find an earlier entry that ``new`` is the other-profile twin of.

    Scans backwards over the run of conditional entries whose content
    matches ``new`` (everything but condition and get value), stopping at
    the first entry that breaks the run.

    Args:
        entries: Entries already in the table, in document order.
        new: Entry about to be inserted.

    Returns:
        Index of the twin, or None if ``new`` should be appended.

    Raises:
        DuplicateConditionError: If the twins are not a Core/Compatibility pair.
    """
    if new.condition is None:
        return None
    for index in range(len(entries) - 1, -1, -1):
        existing = entries[index]
        if existing.condition is None or not existing.same_content(new):
            break
        if (
            existing.get_value == new.get_value
            and existing.alternate_get_value == new.alternate_get_value
            and existing.series == new.series
        ):
            # A twin is always one Core and one Compatibility entry
            if {existing.condition, new.condition} != COMPLEMENTARY:
                raise DuplicateConditionError(
                    f"Duplicate entry {new.get_value!r} with conditions "
                    f"{existing.condition.value} and {new.condition.value}"
                )
            return index
    return None


def merge_into(entries: list[Entry], new: Entry) -> bool:
    """Insert ``new`` into ``entries``, merging it with its twin if there is one.

    Returns:
        True if ``new`` was merged rather than appended.
    """
    target = find_merge_target(entries, new)
    if target is None:
        entries.append(new)
        return False
    logger.debug("Merged %s twins of %r", new.condition.value, new.get_value)
    entries[target] = entries[target].model_copy(update={"condition": None})
    return True


def insert_entry(table: Table, entry: Entry) -> bool:
    """Add an entry to a table, deduplicating against earlier entries."""
    table.check_entry(entry)
    return merge_into(table.entries, entry)


def deduplicate(entries: Sequence[Entry]) -> list[Entry]:
    """Deduplicate a whole entry sequence, returning a new list."""
    result: list[Entry] = []
    for entry in entries:
        merge_into(result, entry)
    return result
