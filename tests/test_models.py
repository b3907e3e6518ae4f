"""Tests for the Pydantic models."""

import pytest
from pydantic import ValidationError

from gettables.errors import FootnoteError
from gettables.models import (
    BasicType,
    Condition,
    Entry,
    ExtractionResult,
    NamedLimit,
    Quantity,
    QuantityTerm,
    StateType,
    Table,
    Variant,
)


class TestQuantity:
    """Tests for Quantity and QuantityTerm."""

    def test_needs_exactly_one_form(self):
        with pytest.raises(ValidationError):
            Quantity()
        with pytest.raises(ValidationError):
            Quantity(count=2, limit=NamedLimit.MAX_LIGHTS)

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            Quantity.literal(-1)

    def test_named_compact(self):
        assert Quantity.named(NamedLimit.MAX_LIGHTS).to_compact() == r"\glr{MAX_LIGHTS}"
        assert str(Quantity.named(NamedLimit.MAX_LIGHTS)) == "MAX_LIGHTS"

    def test_minimum_term(self):
        term = QuantityTerm(quantity=Quantity.literal(8), minimum=True)
        assert str(term) == "8*"
        assert term.is_parsed is True


class TestStateType:
    """Tests for StateType."""

    def test_k_required_for_k_valued_types(self):
        with pytest.raises(ValidationError):
            StateType(basic=BasicType.K_VALUED_INTEGER)

    def test_k_rejected_for_plain_types(self):
        with pytest.raises(ValidationError):
            StateType(basic=BasicType.BOOLEAN, k=2)

    def test_minimum_only_for_integers(self):
        with pytest.raises(ValidationError):
            StateType(basic=BasicType.FLOAT_TUPLE, k=3, k_minimum=True)

    def test_basic_title(self):
        state_type = StateType(basic=BasicType.K_VALUED_INTEGER, k=4, k_minimum=True)
        assert state_type.basic_title == "4-valued integer (4 is a minimum)"

    def test_compact_and_str(self):
        state_type = StateType(
            basic=BasicType.COLOR,
            quantities=[QuantityTerm(quantity=Quantity.literal(2))],
        )
        assert state_type.to_compact() == r"$2 \times C$"
        assert str(state_type) == "2 × C"


class TestEntry:
    """Tests for Entry."""

    def test_description_required(self):
        with pytest.raises(ValidationError):
            Entry(get_value="LIGHTING")

    def test_series_excludes_alternate(self):
        with pytest.raises(ValidationError):
            Entry(
                get_value="LIGHT0",
                alternate_get_value="LIGHT0_EXT",
                series=QuantityTerm(quantity=Quantity.literal(8)),
                description="Light enabled",
            )

    def test_footnote_index_bounds(self):
        with pytest.raises(ValidationError):
            Entry(description="x", type_footnote=2)

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            Entry(description="x", colour="red")

    def test_has_parsed_type(self):
        assert Entry(description="x", value_type=StateType(basic=BasicType.BOOLEAN)).has_parsed_type
        assert not Entry(description="x", value_type=r"$4 \times Q$").has_parsed_type
        assert not Entry(description="x").has_parsed_type

    def test_footnote_indices(self):
        entry = Entry(description="x", type_footnote=1, description_footnote=0)
        assert entry.footnote_indices() == [1, 0]

    def test_same_content_ignores_condition_and_name(self):
        a = Entry(get_value="A", condition=Condition.CORE, description="x")
        b = Entry(get_value="B", condition=Condition.COMPATIBILITY, description="x")
        assert a.same_content(b)
        assert not a.same_content(Entry(get_value="A", description="y"))


class TestTable:
    """Tests for Table footnote bookkeeping."""

    def test_add_footnote_returns_slot(self, table):
        assert table.add_footnote("First.") == 0
        assert table.add_footnote("Second.") == 1

    def test_third_footnote(self, table):
        table.add_footnote("First.")
        table.add_footnote("Second.")
        with pytest.raises(FootnoteError):
            table.add_footnote("Third.")

    def test_footnote_limit_validated(self):
        with pytest.raises(ValidationError):
            Table(title="T", label="tab:t", footnotes=["a", "b", "c"])

    def test_add_entry_checks_footnotes(self, table):
        table.add_footnote("Only one.")
        table.add_entry(Entry(description="x", description_footnote=0))
        with pytest.raises(FootnoteError):
            table.add_entry(Entry(description="y", initial_value_footnote=1))
        assert len(table.entries) == 1

    def test_get_entries(self, table):
        table.add_entry(Entry(get_value="A", condition=Condition.CORE, description="x"))
        table.add_entry(Entry(get_value="A", condition=Condition.COMPATIBILITY, description="y"))
        assert len(table.get_entries("A")) == 2
        assert table.conditional_entry_count == 2


class TestExtractionResult:
    """Tests for ExtractionResult."""

    def test_lookup_and_counts(self, table):
        table.add_entry(Entry(get_value="A", description="x"))
        result = ExtractionResult(variant=Variant.GL, tables=[table])

        assert result.get_table("tab:state") == table
        assert result.get_table("tab:missing") is None
        assert result.entry_count == 1

    def test_json_round_trip(self, table):
        table.add_entry(
            Entry(
                get_value="LIGHT0",
                series=QuantityTerm(quantity=Quantity.named(NamedLimit.MAX_LIGHTS), minimum=True),
                value_type=StateType(basic=BasicType.BOOLEAN),
                description="Light enabled",
            )
        )
        result = ExtractionResult(variant=Variant.GL, tables=[table])

        assert ExtractionResult.model_validate_json(result.model_dump_json()) == result
