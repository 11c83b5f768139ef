"""
Unit tests for the condition algebra.

Tests cover:
- Expression nodes and their string form
- Tokenizer and parser (precedence, literals, syntax errors)
- Evaluator (loose/strict equality, relational comparison, short-circuit)
- Column references and resolve_column
"""

import pytest

from gridquery.algebra import (
    BinaryOp,
    ByIndex,
    ByLetter,
    ByName,
    Literal,
    UnaryOp,
    as_column_ref,
    evaluate_expression,
    is_truthy,
    parse_condition,
    resolve_column,
    tokenize,
)
from gridquery.exceptions import ConditionSyntaxError, InvalidCondition, UnknownColumnReference


def _eval(text):
    return evaluate_expression(parse_condition(text))


class TestExpressions:
    """Test suite for expression nodes."""

    def test_literal_str(self):
        assert str(Literal(None)) == "null"
        assert str(Literal(True)) == "true"
        assert str(Literal("West")) == '"West"'
        assert str(Literal(2.5)) == "2.5"

    def test_binary_op_str(self):
        expr = BinaryOp(op=">", left=Literal(2), right=Literal(1))
        assert str(expr) == "(2 > 1)"

    def test_unknown_binary_op(self):
        with pytest.raises(ValueError, match="Unknown binary operator"):
            BinaryOp(op="+", left=Literal(1), right=Literal(2))

    def test_unknown_unary_op(self):
        with pytest.raises(ValueError, match="Unknown unary operator"):
            UnaryOp(op="~", operand=Literal(1))


class TestParser:
    """Test suite for tokenize / parse_condition."""

    def test_tokenize_kinds(self):
        kinds = [t.kind for t in tokenize('(1500 >= 1000) && "a" !== null')]
        assert kinds == ["lparen", "number", "op", "number", "rparen", "op", "string", "op", "word", "eof"]

    def test_precedence(self):
        expr = parse_condition('"West" == "West" && 2000 > 1000 || false')
        assert str(expr) == '((("West" == "West") && (2000 > 1000)) || false)'

    def test_parentheses_override_precedence(self):
        expr = parse_condition("true && (false || true)")
        assert str(expr) == "(true && (false || true))"

    def test_number_literals(self):
        assert parse_condition("42").value == 42
        assert isinstance(parse_condition("42").value, int)
        assert parse_condition("1.5e2").value == 150.0

    def test_single_quoted_string(self):
        assert parse_condition("'East'").value == "East"

    def test_negative_number(self):
        expr = parse_condition("-5 < 0")
        assert str(expr) == "((-5) < 0)"

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "Amount > 5", "1 >", "(1 > 0", "1 > 0)", "1 = 1", "import os", "__import__('os')", "1 2"],
    )
    def test_syntax_errors(self, text):
        with pytest.raises(ConditionSyntaxError):
            parse_condition(text)

    def test_syntax_error_is_invalid_condition(self):
        with pytest.raises(InvalidCondition):
            parse_condition("x")

    def test_syntax_error_position(self):
        with pytest.raises(ConditionSyntaxError) as exc_info:
            parse_condition("1 > 0 @")
        assert exc_info.value.position == 6

    def test_non_string_input(self):
        with pytest.raises(ConditionSyntaxError):
            parse_condition(42)


class TestEvaluator:
    """Test suite for evaluate_expression."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1500 > 1000", True),
            ("500 >= 1000", False),
            ('"West" == "West"', True),
            ('"West" != "East"', True),
            ('"10" == 10', True),
            ('"10" === 10', False),
            ("10 === 10.0", True),
            ("true === 1", False),
            ("null == null", True),
            ('null == ""', False),
            ('"" == 0', False),
            ('"apple" < "banana"', True),
            ('"abc" > 5', False),
            ("null > -1", False),
            ("!false", True),
            ("!(1 > 0)", False),
            ("-(3) == -3", True),
        ],
    )
    def test_comparisons(self, text, expected):
        assert _eval(text) is expected

    def test_and_returns_deciding_operand(self):
        assert _eval("0 && true") == 0
        assert _eval("1 && 7") == 7

    def test_or_returns_deciding_operand(self):
        assert _eval('"" || "fallback"') == "fallback"
        assert _eval("3 || false") == 3

    def test_negating_text_fails(self):
        with pytest.raises(InvalidCondition, match="Cannot negate"):
            _eval('-"abc"')

    def test_unknown_node(self):
        with pytest.raises(TypeError):
            evaluate_expression(object())

    @pytest.mark.parametrize("value,expected", [(None, False), (0, False), ("", False), (float("nan"), False), ("x", True), (-1, True)])
    def test_truthiness(self, value, expected):
        assert is_truthy(value) is expected


class TestColumnRefs:
    """Test suite for as_column_ref / resolve_column."""

    HEADERS = ("Region", "Product", "Amount", "Quantity")

    def test_classification_order(self):
        assert as_column_ref(2) == ByIndex(2)
        assert as_column_ref("Amount", self.HEADERS) == ByName("Amount")
        assert as_column_ref("C", self.HEADERS) == ByLetter("C")

    def test_header_beats_letters(self):
        assert as_column_ref("ID", ("ID", "Name")) == ByName("ID")

    @pytest.mark.parametrize("bad", [-1, True, 1.5, None, "Amount Paid", "A1"])
    def test_unclassifiable(self, bad):
        with pytest.raises(UnknownColumnReference):
            as_column_ref(bad, self.HEADERS)

    def test_resolve_each_form(self):
        assert resolve_column(0, self.HEADERS, 1, 4) == 0
        assert resolve_column("Quantity", self.HEADERS, 1, 4) == 3
        assert resolve_column("C", self.HEADERS, 1, 4) == 2
        assert resolve_column(ByLetter("c"), None, 1, 4) == 2

    def test_letters_are_relative_to_start_column(self):
        assert resolve_column("D", None, start_column=3, width=2) == 1

    def test_letter_left_of_range(self):
        with pytest.raises(UnknownColumnReference):
            resolve_column("A", None, start_column=3, width=2)

    def test_out_of_range_offsets(self):
        with pytest.raises(UnknownColumnReference):
            resolve_column(4, self.HEADERS, 1, 4)
        with pytest.raises(UnknownColumnReference):
            resolve_column("E", self.HEADERS, 1, 4)

    def test_tagged_name_without_headers(self):
        with pytest.raises(UnknownColumnReference, match="no such header"):
            resolve_column(ByName("Amount"), None, 1, 4)

    def test_bypass_mode_defaults_start_to_a(self):
        assert resolve_column("B", None, None, 3) == 1
