"""Tests for the arithmetic to JSON Logic transpiler."""

import pytest
from json_logic import jsonLogic

from form_builder.utils.json_logic_transpiler import TranspileError, arithmetic_to_json_logic


class TestTranspile:
    def test_constant(self):
        assert arithmetic_to_json_logic("42") == 42

    def test_precedence(self):
        assert arithmetic_to_json_logic("3 + 4 * 2") == {"+": [3, {"*": [4, 2]}]}

    def test_parentheses(self):
        assert arithmetic_to_json_logic("(3 + 4) * 2") == {"*": [{"+": [3, 4]}, 2]}

    def test_unary_minus(self):
        assert arithmetic_to_json_logic("-3 - -4") == {"-": [{"-": [3]}, {"-": [4]}]}

    def test_surrounding_whitespace(self):
        assert arithmetic_to_json_logic("  1.5 / 3 ") == {"/": [1.5, 3]}


class TestRejections:
    @pytest.mark.parametrize(
        "expression",
        ["2 ** 3", "7 // 2", "7 % 2", "a + 1", "'x' + 1", "f(1)", "True + 1", "[1] * 2"],
    )
    def test_unsupported_syntax(self, expression):
        with pytest.raises(TranspileError):
            arithmetic_to_json_logic(expression)

    @pytest.mark.parametrize("expression", ["", "3 +", "(1 + 2", "1 2"])
    def test_invalid_text(self, expression):
        with pytest.raises(TranspileError, match="Invalid arithmetic expression"):
            arithmetic_to_json_logic(expression)

    def test_transpile_error_is_value_error(self):
        assert issubclass(TranspileError, ValueError)


class TestExecution:
    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("3 + 4", 7),
            ("(3 + 4) * 2 - 3 / 3", 13),
            ("-3 - -4", 1),
            ("10 / 4", 2.5),
        ],
    )
    def test_runs_through_json_logic(self, expression, expected):
        assert jsonLogic(arithmetic_to_json_logic(expression), {}) == expected
