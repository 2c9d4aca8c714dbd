"""
Utility to transpile plain arithmetic text to standard JSON Logic format.

Converts an infix expression that has already been reduced to numbers and
operators:
    "(3 + 4) * 2"

To the standard JSON Logic format:
    {"*": [{"+": [3, 4]}, 2]}

The result runs through the json-logic interpreter, so formula text is
never handed to eval(). Only + - * / on numeric literals and parentheses
are accepted.
"""

import ast
import logging
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

_BINARY_OPERATORS = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
}

_UNARY_OPERATORS = {
    ast.UAdd: "+",
    ast.USub: "-",
}

JsonLogic = Union[Dict[str, Any], int, float]


class TranspileError(ValueError):
    """Raised when arithmetic text uses anything beyond numbers and + - * /."""

    pass


def _convert(node: ast.AST) -> JsonLogic:
    if isinstance(node, ast.Expression):
        return _convert(node.body)

    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise TranspileError(f"Unsupported literal: {node.value!r}")
        return node.value

    if isinstance(node, ast.BinOp):
        op = _BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise TranspileError(f"Unsupported operator: {type(node.op).__name__}")
        return {op: [_convert(node.left), _convert(node.right)]}

    if isinstance(node, ast.UnaryOp):
        op = _UNARY_OPERATORS.get(type(node.op))
        if op is None:
            raise TranspileError(f"Unsupported operator: {type(node.op).__name__}")
        return {op: [_convert(node.operand)]}

    raise TranspileError(f"Unsupported syntax: {type(node).__name__}")


def arithmetic_to_json_logic(expression: str) -> JsonLogic:
    """
    Convert an arithmetic expression to standard JSON Logic.

    Args:
        expression: Text made of numeric literals, + - * /, parentheses
                    and spaces

    Returns:
        JSON Logic object, or a bare number for a constant expression

    Raises:
        TranspileError: If the text is not a supported arithmetic expression

    Example:
        >>> arithmetic_to_json_logic("3 + 4 * 2")
        {"+": [3, {"*": [4, 2]}]}
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise TranspileError(f"Invalid arithmetic expression {expression!r}: {e.msg}") from e

    logic = _convert(tree)
    logger.debug(f"Transpiled {expression!r} -> {logic}")
    return logic
