"""
Tests for tag substitution, number formatting and operator normalization.
"""

import pytest

from formula_tag_engine.converters.normalizer import normalize
from formula_tag_engine.converters.substitutor import (
    format_number,
    format_operand,
    substitute,
)
from formula_tag_engine.converters.tag_tokenizer import tokenize
from formula_tag_engine.models.evaluation_result import ErrorKind
from formula_tag_engine.models.variable_models import VariableTable


@pytest.fixture
def table():
    return VariableTable.from_mapping(
        {"price": 2.5, "qty": 4, "discount": -3, "rate": 1e-07}
    )


class TestSubstitute:
    """Test class for replacing tags with values."""

    def test_tags_replaced_with_values(self, table):
        result = substitute(tokenize("[price] * [qty]"), table)

        assert result.success
        assert result.expression == "2.5 * 4"
        assert result.error is None

    def test_literals_kept_verbatim(self, table):
        result = substitute(tokenize("( [qty] ^ 2 )  /  [price]"), table)

        assert result.expression == "( 4 ^ 2 )  /  2.5"

    def test_negative_values_are_parenthesised(self, table):
        result = substitute(tokenize("10 - [discount]"), table)

        assert result.expression == "10 - (-3)"

    def test_exponent_notation_values(self, table):
        result = substitute(tokenize("[rate] * 2"), table)

        assert result.expression == "1e-07 * 2"

    def test_missing_variable_fails_whole_substitution(self, table):
        result = substitute(tokenize("[price] + [missing] + [qty]"), table)

        assert not result.success
        assert result.expression is None
        assert result.error.kind == ErrorKind.UNKNOWN_VARIABLE
        assert result.error.variable_name == "missing"

    def test_lookup_is_case_sensitive(self, table):
        result = substitute(tokenize("[Price]"), table)

        assert not result.success
        assert result.error.variable_name == "Price"

    def test_no_tags(self, table):
        result = substitute(tokenize("1 + 2"), table)

        assert result.success
        assert result.expression == "1 + 2"


class TestFormatNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (5.0, "5"),
            (5, "5"),
            (2.5, "2.5"),
            (0.1, "0.1"),
            (-3.0, "-3"),
            (123456789012.0, "123456789012"),
            (1e20, "1e+20"),
            (1e-07, "1e-07"),
            (0.30000000000000004, "0.30000000000000004"),
        ],
    )
    def test_canonical_form(self, value, expected):
        assert format_number(value) == expected

    def test_operand_wraps_negatives_only(self):
        assert format_operand(-1.5) == "(-1.5)"
        assert format_operand(1.5) == "1.5"


class TestNormalize:
    def test_power_rewritten(self):
        assert normalize("2^3") == "2**3"
        assert normalize("(1 + 2) ^ [x] ^ 2") == "(1 + 2) ** [x] ** 2"

    def test_nothing_else_rewritten(self):
        assert normalize("1 + 2 * 3 / 4 - 5") == "1 + 2 * 3 / 4 - 5"
        assert normalize("2**3") == "2**3"

    @pytest.mark.parametrize("expression", ["", "2^3", "a^^b", "^", "**", "1 + 2", "x^y^z"])
    def test_idempotent(self, expression):
        assert normalize(normalize(expression)) == normalize(expression)
