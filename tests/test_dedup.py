"""Tests for merging Core/Compatibility twins."""

import pytest

from gettables.errors import DuplicateConditionError, FootnoteError
from gettables.models import Condition, Entry
from gettables.pipeline.dedup import deduplicate, find_merge_target, insert_entry, merge_into

CORE = Condition.CORE
COMPAT = Condition.COMPATIBILITY


def entry(get_value, condition=None, description="Texture object bound", **kwargs):
    return Entry(get_value=get_value, condition=condition, description=description, **kwargs)


class TestFindMergeTarget:
    """Tests for the backward twin search."""

    def test_unconditioned_entry_never_merges(self):
        entries = [entry("A", COMPAT)]
        assert find_merge_target(entries, entry("A")) is None

    def test_immediate_twin(self):
        entries = [entry("A", COMPAT)]
        assert find_merge_target(entries, entry("A", CORE)) == 0

    def test_twin_across_run(self):
        entries = [entry("A", COMPAT), entry("B", COMPAT), entry("C", COMPAT)]
        assert find_merge_target(entries, entry("A", CORE)) == 0

    def test_run_broken_by_other_content(self):
        entries = [entry("A", COMPAT), entry("B", COMPAT, description="Other")]
        assert find_merge_target(entries, entry("A", CORE)) is None

    def test_run_broken_by_unconditioned_entry(self):
        entries = [entry("A", COMPAT), entry("B")]
        assert find_merge_target(entries, entry("A", CORE)) is None

    def test_different_alternate_is_not_a_twin(self):
        entries = [entry("A", COMPAT, alternate_get_value="A_EXT")]
        assert find_merge_target(entries, entry("A", CORE)) is None

    def test_same_condition_twice(self):
        entries = [entry("A", COMPAT)]
        with pytest.raises(DuplicateConditionError):
            find_merge_target(entries, entry("A", COMPAT))

    def test_imaging_twin(self):
        entries = [entry("A", Condition.IMAGING)]
        with pytest.raises(DuplicateConditionError):
            find_merge_target(entries, entry("A", CORE))


class TestMerging:
    """Tests for applying merges."""

    def test_merge_clears_condition(self):
        entries = [entry("A", COMPAT)]

        assert merge_into(entries, entry("A", CORE)) is True
        assert entries == [entry("A")]

    def test_append_without_twin(self):
        entries = [entry("A", COMPAT)]

        assert merge_into(entries, entry("B", CORE)) is False
        assert [e.get_value for e in entries] == ["A", "B"]

    def test_region_pair_collapses(self):
        entries = [
            entry("B1", COMPAT),
            entry("B2", COMPAT),
            entry("B3", COMPAT),
            entry("B1", CORE),
            entry("B2", CORE),
            entry("B3", CORE),
        ]

        result = deduplicate(entries)

        assert result == [entry("B1"), entry("B2"), entry("B3")]

    def test_distinct_content_kept(self):
        entries = [
            entry("T1", COMPAT, description="Enabled (fixed-function)"),
            entry("T1", CORE, description="Enabled"),
        ]
        assert deduplicate(entries) == entries

    def test_deduplicate_is_idempotent(self):
        entries = [
            entry("A", COMPAT),
            entry("A", CORE),
            entry("B", COMPAT, description="Other"),
            entry("C"),
        ]

        once = deduplicate(entries)

        assert deduplicate(once) == once
        assert [e.condition for e in once] == [None, COMPAT, None]

    def test_input_not_modified(self):
        entries = [entry("A", COMPAT), entry("A", CORE)]
        deduplicate(entries)
        assert entries[0].condition == COMPAT


class TestInsertEntry:
    """Tests for inserting into a table."""

    def test_inserts_and_merges(self, table):
        insert_entry(table, entry("A", COMPAT))
        insert_entry(table, entry("A", CORE))

        assert table.entries == [entry("A")]

    def test_undefined_footnote(self, table):
        with pytest.raises(FootnoteError):
            insert_entry(table, entry("A", description_footnote=0))
