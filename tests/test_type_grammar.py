"""Tests for the type expression grammar."""

import pytest

from gettables.models import BasicType, NamedLimit, Quantity
from gettables.pipeline.type_grammar import (
    divide_leading_term,
    parse_basic_type,
    parse_quantity,
    parse_quantity_term,
    parse_type,
    pop_leading_term,
    split_type,
)


class TestSplitting:
    """Tests for raw type manipulation."""

    def test_split_type(self):
        assert split_type(r"$2 \times 3 \times B$") == (["2", "3"], "B", True)

    def test_split_type_unwrapped(self):
        assert split_type("Z^+") == ([], "Z^+", False)

    def test_pop_leading_term(self):
        assert pop_leading_term(r"$\maxlights* \times B$") == (r"\maxlights*", "$B$")

    def test_pop_without_terms(self):
        assert pop_leading_term("$B$") == (None, "$B$")

    @pytest.mark.parametrize(
        "raw,divisor,expected",
        [
            (r"$3 \times B$", 3, "$B$"),
            (r"$6 \times Z^+$", 3, r"$2 \times Z^+$"),
            (r"$4 \times 2 \times R$", 2, r"$2 \times 2 \times R$"),
            (r"$3 \times B$", 2, r"$3 \times B$"),
            (r"$n \times B$", 3, r"$n \times B$"),
            ("$B$", 3, "$B$"),
        ],
    )
    def test_divide_leading_term(self, raw, divisor, expected):
        assert divide_leading_term(raw, divisor) == expected


class TestQuantities:
    """Tests for quantity term parsing."""

    def test_literal(self):
        assert parse_quantity("16") == Quantity.literal(16)

    def test_braced_literal(self):
        assert parse_quantity("{4}") == Quantity.literal(4)

    def test_limit_macro(self):
        assert parse_quantity(r"\maxlights") == Quantity.named(NamedLimit.MAX_LIGHTS)

    def test_limit_reference(self):
        assert parse_quantity(r"\glr{MAX_VIEWPORTS}") == Quantity.named(NamedLimit.MAX_VIEWPORTS)

    def test_unknown_limit(self):
        assert parse_quantity("MAX_WIDGETS") is None

    def test_minimum_term(self):
        term = parse_quantity_term("8*")
        assert term.minimum is True
        assert term.quantity == Quantity.literal(8)

    def test_unparsed_term_kept_as_text(self):
        term = parse_quantity_term("n")
        assert term.quantity == "n"
        assert term.is_parsed is False


class TestBasicTypes:
    """Tests for basic-type codes."""

    @pytest.mark.parametrize(
        "code,basic",
        [
            ("B", BasicType.BOOLEAN),
            (r"\Enum", BasicType.ENUM),
            ("Z^+", BasicType.NON_NEGATIVE_INTEGER),
            ("Z^{+}", BasicType.NON_NEGATIVE_INTEGER),
            ("R^{[0,1]}", BasicType.ZERO_ONE_FLOAT),
            ("M^4", BasicType.MATRIX),
            (r"\glt{char}", BasicType.CHAR),
        ],
    )
    def test_plain_codes(self, code, basic):
        assert parse_basic_type(code).basic == basic

    def test_k_valued_integer(self):
        state_type = parse_basic_type("Z_{3*}")
        assert state_type.basic == BasicType.K_VALUED_INTEGER
        assert state_type.k == 3
        assert state_type.k_minimum is True

    def test_float_tuple(self):
        state_type = parse_basic_type("R^{3}")
        assert state_type.basic == BasicType.FLOAT_TUPLE
        assert state_type.k == 3

    def test_k_valued_float(self):
        state_type = parse_basic_type("R_2")
        assert state_type.basic == BasicType.K_VALUED_FLOAT
        assert state_type.k == 2

    def test_unknown_code(self):
        assert parse_basic_type("Q") is None


class TestParseType:
    """Tests for whole type expressions."""

    def test_nested_quantities(self):
        state_type = parse_type(r"$2 \times \maxlights* \times R^{3}$")

        assert state_type.basic == BasicType.FLOAT_TUPLE
        assert [str(term) for term in state_type.quantities] == ["2", "MAX_LIGHTS*"]

    def test_unknown_code_reports_diagnostic(self):
        diagnostics = []

        assert parse_type(r"$4 \times Q$", diagnostics) is None
        assert len(diagnostics) == 1
        assert "'Q'" in diagnostics[0]

    @pytest.mark.parametrize(
        "raw",
        [
            "$B$",
            r"$\Enum$",
            r"$4 \times Z^{+}$",
            r"$\glr{MAX_LIGHTS}* \times B$",
            r"$2 \times n \times R$",
            r"$Z_{3*}$",
            r"$16* \times R^{4}$",
            r"$M^{4}$",
        ],
    )
    def test_compact_form_reparses(self, raw):
        state_type = parse_type(raw)

        assert state_type.to_compact() == raw
        assert parse_type(state_type.to_compact()) == state_type
