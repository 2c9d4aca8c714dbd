"""
Runtime components for filling out forms.

1. Validation Engine - validators
2. Derived-Field Evaluator - evaluator, functions
3. Recalculation Loop - recalculation
4. Form Session (value/error/touched state) - session
"""

from form_builder.runtime.evaluator import (
    IFormulaEvaluator,
    PatternFormulaEvaluator,
    evaluate_derived_field,
    normalize_label,
)
from form_builder.runtime.recalculation import initialize_values, update_derived_fields
from form_builder.runtime.schema_loader import load_form_file, load_values_file
from form_builder.runtime.session import FormSession
from form_builder.runtime.validators import validate_field, validate_form

__all__ = [
    "IFormulaEvaluator",
    "PatternFormulaEvaluator",
    "evaluate_derived_field",
    "normalize_label",
    "initialize_values",
    "update_derived_fields",
    "load_form_file",
    "load_values_file",
    "FormSession",
    "validate_field",
    "validate_form",
]
