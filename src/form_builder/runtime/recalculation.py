"""
Form recalculation loop.

A recalculation pass is one synchronous sweep over every derived field,
evaluated against a single value snapshot. Derived fields do not see each
other's freshly computed values within a pass.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from form_builder.runtime.evaluator import IFormulaEvaluator, evaluate_derived_field
from form_builder.schemas.form import FormField, FormValueMap

logger = logging.getLogger(__name__)


def initialize_values(fields: Iterable[FormField]) -> FormValueMap:
    """Build a fresh value map from each field's default value (or "")."""
    return {
        field.id: field.default_value if field.default_value is not None else ""
        for field in fields
    }


def update_derived_fields(
    fields: Iterable[FormField],
    values: FormValueMap,
    now: Optional[datetime] = None,
    evaluator: Optional[IFormulaEvaluator] = None,
) -> FormValueMap:
    """
    Recompute every derived field from the current values.

    Pure: the input map is copied, never mutated. Non-None results replace
    the field's entry; None results leave the previous value in place.
    Callers compare the result with the input (==) to skip redundant work.

    Args:
        fields: All fields of the form
        values: Current value map (field id -> value)
        now: Evaluation instant for today()/age()
        evaluator: Evaluator to use instead of the default one

    Returns:
        New value map
    """
    all_fields: List[FormField] = list(fields)
    updated = dict(values)

    for field in all_fields:
        if not field.is_derived or field.formula is None:
            continue

        if evaluator is not None:
            value = evaluator.evaluate(field.formula, values, all_fields, now=now)
        else:
            value = evaluate_derived_field(field.formula, values, all_fields, now=now)

        if value is not None:
            updated[field.id] = value
        else:
            logger.debug(f"Derived field '{field.id}' is not computable yet")

    return updated
