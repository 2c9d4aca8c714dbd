"""
Derived-field evaluator.

Responsibility: compute one derived field's value from the current values
of the fields it depends on.

Formulas are a small fixed vocabulary, not a general expression language.
The expression text is dispatched through ordered pattern checks:

    a. age(<name>)            -> age of a dependency's date value
    b. text with + - * /      -> numeric-only arithmetic after substituting
                                 dependency values; anything else is refused
    c. <function>(<args>)     -> call a built-in function
    d. <name>                 -> a dependency's value as-is

A branch that yields nothing lets dispatch continue with the next one.
Failures are logged and surface as None ("not yet computable"), never as
an exception.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging
import re

try:
    from json_logic import jsonLogic
except ImportError:
    raise ImportError(
        "json-logic library not found. Install with: pip install json-logic-qubit"
    )

from form_builder.runtime.functions import build_function_table
from form_builder.schemas.form import DerivedFieldFormula, FormField, FormValueMap
from form_builder.utils.json_logic_transpiler import (
    TranspileError,
    arithmetic_to_json_logic,
)

logger = logging.getLogger(__name__)

ARITHMETIC_OPERATORS = ("+", "-", "*", "/")

# Text allowed through to the arithmetic engine after substitution
SAFE_ARITHMETIC = re.compile(r"[0-9+\-*/.() ]*")

AGE_CALL = re.compile(r"age\((\w+)\)")
FUNCTION_CALL = re.compile(r"(\w+)\((.*)\)")

# Leading numeric literal, read the way parseFloat() reads it ("3px" -> 3)
NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_WHITESPACE = re.compile(r"\s+")

# Sentinel for "this branch produced nothing"
_NO_RESULT = object()


def normalize_label(label: str) -> str:
    """Reference name of a field inside formulas: "Birth Date" -> "birth_date"."""
    return _WHITESPACE.sub("_", label.lower())


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: Any) -> str:
    """Plain decimal text for a number, never exponent notation (5e-05)."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    return str(value)


class IFormulaEvaluator(ABC):
    """
    Abstract interface for derived-field evaluation.

    Stateless: accepts (Formula + Values + Fields) and returns a value.
    """

    @abstractmethod
    def evaluate(
        self,
        formula: DerivedFieldFormula,
        values: FormValueMap,
        fields: Iterable[FormField],
        now: Optional[datetime] = None,
    ) -> Any:
        """
        Compute a derived field's value.

        Args:
            formula: The derived field's formula
            values: Current value map (field id -> value)
            fields: All fields of the form, used to resolve dependency labels
            now: Evaluation instant for today()/age(); defaults to the clock

        Returns:
            Computed value, or None when it cannot be computed
        """
        pass


class PatternFormulaEvaluator(IFormulaEvaluator):
    """
    Concrete implementation using ordered pattern dispatch.

    Arithmetic is transpiled to JSON Logic and executed by the json-logic
    interpreter.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock

    def evaluate(
        self,
        formula: DerivedFieldFormula,
        values: FormValueMap,
        fields: Iterable[FormField],
        now: Optional[datetime] = None,
    ) -> Any:
        if not formula.depends_on:
            return None

        try:
            context = self.build_context(formula, values, fields, now or self._clock())
            return self.evaluate_expression(formula.expression, context)
        except Exception as e:
            logger.error(
                f"Error evaluating derived field formula {formula.expression!r}: {e}",
                exc_info=True,
            )
            return None

    def build_context(
        self,
        formula: DerivedFieldFormula,
        values: FormValueMap,
        fields: Iterable[FormField],
        now: datetime,
    ) -> Dict[str, Any]:
        """
        Map reference names to dependency values, then add the built-ins.

        Dependencies whose labels normalize to the same name collide and
        the last one listed in depends_on wins. Built-ins are added last,
        so a field labelled like a function is shadowed by it.
        """
        fields_by_id = {field.id: field for field in fields}
        context: Dict[str, Any] = {}

        for field_id in formula.depends_on:
            field = fields_by_id.get(field_id)
            if field is None:
                logger.debug(f"Formula dependency '{field_id}' is not a field of this form")
                continue
            name = normalize_label(field.label)
            if name in context:
                logger.debug(f"Reference name '{name}' is shared by several dependencies; '{field_id}' wins")
            context[name] = values.get(field_id)

        context.update(build_function_table(now))
        return context

    def evaluate_expression(self, expression: str, context: Dict[str, Any]) -> Any:
        """Run the ordered dispatch over an expression string."""
        for branch in (
            self._evaluate_age,
            self._evaluate_arithmetic,
            self._evaluate_function_call,
            self._evaluate_reference,
        ):
            result = branch(expression, context)
            if result is not _NO_RESULT:
                return result
        return None

    def _evaluate_age(self, expression: str, context: Dict[str, Any]) -> Any:
        if "age(" not in expression:
            return _NO_RESULT
        match = AGE_CALL.search(expression)
        if not match:
            return _NO_RESULT
        birth_date = context.get(match.group(1))
        if not birth_date or callable(birth_date):
            return _NO_RESULT
        return context["age"](birth_date)

    def _evaluate_arithmetic(self, expression: str, context: Dict[str, Any]) -> Any:
        if not any(op in expression for op in ARITHMETIC_OPERATORS):
            return _NO_RESULT

        evaluable = expression
        for key, value in context.items():
            if _is_number(value):
                literal = _format_number(value)
                evaluable = re.sub(rf"\b{re.escape(key)}\b", lambda _m: literal, evaluable)

        if not SAFE_ARITHMETIC.fullmatch(evaluable):
            logger.debug(f"Refusing non-numeric arithmetic expression {evaluable!r}")
            return _NO_RESULT

        try:
            result = jsonLogic(arithmetic_to_json_logic(evaluable), {})
        except (TranspileError, ArithmeticError) as e:
            logger.error(f"Error evaluating arithmetic expression {evaluable!r}: {e}")
            return _NO_RESULT

        if isinstance(result, float) and result.is_integer():
            return int(result)
        return result

    def _evaluate_function_call(self, expression: str, context: Dict[str, Any]) -> Any:
        match = FUNCTION_CALL.search(expression)
        if not match:
            return _NO_RESULT

        func = context.get(match.group(1))
        if not callable(func):
            return _NO_RESULT

        raw_args = match.group(2)
        args: List[Any] = []
        if raw_args.strip():
            args = [self._resolve_argument(arg, context) for arg in raw_args.split(",")]
        return func(*args)

    def _resolve_argument(self, arg: str, context: Dict[str, Any]) -> Any:
        """Context reference, else numeric literal, else unquoted string."""
        trimmed = arg.strip()
        if trimmed in context:
            return context[trimmed]
        number = NUMBER_PREFIX.match(trimmed)
        if number:
            return float(number.group(0))
        return trimmed.strip("'\"")

    def _evaluate_reference(self, expression: str, context: Dict[str, Any]) -> Any:
        if expression in context and not callable(context[expression]):
            return context[expression]
        return _NO_RESULT


_default_evaluator = PatternFormulaEvaluator()


def evaluate_derived_field(
    formula: DerivedFieldFormula,
    values: FormValueMap,
    fields: Iterable[FormField],
    now: Optional[datetime] = None,
) -> Any:
    """Compute one derived field's value with the default evaluator."""
    return _default_evaluator.evaluate(formula, values, fields, now=now)
