#!/usr/bin/env python3
"""
Tests for the arithmetic parser and evaluator.

Covers precedence, associativity, IEEE-754 edge cases and the failure kinds
reported for malformed or non-finite expressions.
"""

import math

import pytest

from formula_tag_engine import config
from formula_tag_engine.config import DEFAULT_MAX_NESTING_DEPTH, EngineSettings
from formula_tag_engine.converters.formula_parser import (
    ArithmeticEvaluator,
    ArithmeticLexer,
    ArithmeticParser,
    evaluate,
)
from formula_tag_engine.converters.normalizer import normalize
from formula_tag_engine.models.ast_schema import NodeType
from formula_tag_engine.models.evaluation_result import ErrorKind
from formula_tag_engine.models.parser_models import TokenType


class TestArithmeticLexer:
    @pytest.fixture
    def lexer(self):
        return ArithmeticLexer()

    def test_token_types(self, lexer):
        tokens = lexer.tokenize("(1.5 + 2) ** -3 / 4 * .5")

        assert [token.type for token in tokens] == [
            TokenType.LEFT_PAREN,
            TokenType.NUMBER,
            TokenType.PLUS,
            TokenType.NUMBER,
            TokenType.RIGHT_PAREN,
            TokenType.POWER,
            TokenType.MINUS,
            TokenType.NUMBER,
            TokenType.DIVIDE,
            TokenType.NUMBER,
            TokenType.MULTIPLY,
            TokenType.NUMBER,
            TokenType.EOF,
        ]

    def test_exponent_numbers_are_single_tokens(self, lexer):
        tokens = lexer.tokenize("1e+20 2.5E-3")

        assert [token.value for token in tokens[:-1]] == ["1e+20", "2.5E-3"]

    def test_unknown_characters_keep_position(self, lexer):
        tokens = lexer.tokenize("1 ^ 2")

        assert tokens[1].type == TokenType.UNKNOWN
        assert tokens[1].value == "^"
        assert tokens[1].position == 2


class TestArithmeticParser:
    """Test class for AST construction."""

    @pytest.fixture
    def parser(self):
        return ArithmeticParser()

    def test_multiplication_binds_tighter_than_addition(self, parser):
        outcome = parser.parse("1 + 2 * 3")

        assert outcome.success
        root = outcome.ast_root
        assert root.node_type == NodeType.ARITHMETIC
        assert root.operator == "+"
        assert root.left.value == 1.0
        assert root.right.operator == "*"
        assert outcome.tokens_count == 5

    def test_power_is_right_associative(self, parser):
        root = parser.parse("2 ** 3 ** 2").ast_root

        assert root.operator == "**"
        assert root.left.value == 2.0
        assert root.right.operator == "**"

    def test_unary_minus_applies_after_power(self, parser):
        root = parser.parse("-2 ** 2").ast_root

        assert root.node_type == NodeType.UNARY
        assert root.operand.operator == "**"

    def test_errors_are_collected_not_raised(self, parser):
        outcome = parser.parse("(1 + 2")

        assert not outcome.success
        assert outcome.ast_root is None
        assert outcome.first_error.expected == ")"
        assert outcome.first_error.position == 6

    def test_parser_can_be_reused(self, parser):
        assert not parser.parse("1 +").success
        assert parser.parse("1 + 1").success


class TestEvaluate:
    """Test class for numeric evaluation."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("(1+2)*3", 9),
            ("1 + 2 * 3", 7),
            ("10 - 4 - 3", 3),
            ("64 / 4 / 2", 8),
            ("2 ** 3 ** 2", 512),
            ("-2 ** 2", -4),
            ("(-2) ** 2", 4),
            ("2 ** -1", 0.5),
            ("--3", 3),
            ("+4", 4),
            ("2 * -3", -6),
            ("10 - -2", 12),
            ("10 - (-3)", 13),
            ("1.5 * 2", 3),
            (".5 + .25", 0.75),
            ("1.", 1),
            ("1e3 + 1", 1001),
            ("2.5e-1", 0.25),
            ("  7  ", 7),
            ("\t(\n2 )", 2),
            ("7 / 2", 3.5),
            ("((((((1))))))", 1),
        ],
    )
    def test_valid_expressions(self, expression, expected):
        result = evaluate(expression)

        assert result.success, f"Failed for {expression!r}: {result.error}"
        assert result.value == pytest.approx(expected)
        assert result.expression == expression

    def test_power_after_normalization(self):
        result = evaluate(normalize("2^3"))

        assert result.success
        assert result.value == 8

    def test_floating_point_matches_ieee(self):
        assert evaluate("0.1 + 0.2").value == 0.1 + 0.2

    @pytest.mark.parametrize(
        "expression",
        [
            "1/0",
            "-1/0",
            "0/0",
            "10 ** 400",
            "(-10) ** 401",
            "1e308 * 10",
            "1e400",
            "(-8) ** (1/3)",
            "0 ** -1",
            "1 ** (0/0)",
        ],
    )
    def test_non_finite_results(self, expression):
        result = evaluate(expression)

        assert not result.success
        assert result.value is None
        assert result.error_kind == ErrorKind.NON_FINITE_RESULT

    def test_division_by_infinity_is_finite(self):
        result = evaluate("1 / (1/0)")

        assert result.success
        assert result.value == 0

    @pytest.mark.parametrize(
        "expression",
        [
            "2+",
            "",
            "   ",
            "(1+2",
            "1+2)",
            "2 3",
            "2 ^ 3",
            "abc",
            "2 * * 3",
            "2 ** ** 3",
            "()",
            "1 +* 2",
            "[x] + 1",
            "1e",
            "__import__('os').system('echo hi')",
            "(lambda: 1)()",
        ],
    )
    def test_syntax_errors(self, expression):
        result = evaluate(expression)

        assert not result.success
        assert result.value is None
        assert result.error_kind == ErrorKind.SYNTAX_ERROR, (
            f"Failed for {expression!r}: got {result.error}"
        )

    def test_syntax_error_reports_position(self):
        result = evaluate("1 + @")

        assert result.error.position == 4
        assert "@" in result.error.message

    def test_empty_expression_message(self):
        assert evaluate("").error.message == "Empty expression"

    def test_deep_nesting_is_rejected(self):
        expression = "(" * 150 + "1" + ")" * 150
        result = evaluate(expression)

        assert result.error_kind == ErrorKind.SYNTAX_ERROR
        assert "nested too deeply" in result.error.message

    def test_nesting_just_under_the_default_limit_parses(self):
        expression = "(" * 98 + "1" + ")" * 98

        assert evaluate(expression, max_nesting_depth=DEFAULT_MAX_NESTING_DEPTH).success

    def test_nesting_limit_is_configurable(self):
        assert evaluate("((1))", max_nesting_depth=3).success
        assert not evaluate("((1))", max_nesting_depth=2).success

    def test_nesting_limit_defaults_to_configured_setting(self, monkeypatch):
        monkeypatch.setattr(config, "_settings", EngineSettings(max_nesting_depth=2))

        result = evaluate("((1))")

        assert result.error_kind == ErrorKind.SYNTAX_ERROR
        assert evaluate("(1)").success

    def test_long_flat_expressions(self):
        result = evaluate("+".join(["1"] * 5000))

        assert result.success
        assert result.value == 5000


class TestArithmeticEvaluator:
    @pytest.fixture
    def evaluator(self):
        return ArithmeticEvaluator()

    def test_division_by_zero_follows_ieee(self, evaluator):
        parser = ArithmeticParser()

        assert evaluator.evaluate(parser.parse("1/0").ast_root) == math.inf
        assert evaluator.evaluate(parser.parse("-1/0").ast_root) == -math.inf
        assert math.isnan(evaluator.evaluate(parser.parse("0/0").ast_root))

    def test_overflowing_power_keeps_sign(self, evaluator):
        root = ArithmeticParser().parse("(-10) ** 401").ast_root

        assert evaluator.evaluate(root) == -math.inf
