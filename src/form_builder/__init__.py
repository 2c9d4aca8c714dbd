"""
Form Builder - schema-driven forms with validation and derived fields.

This package provides the validation engine and the derived-field
evaluator behind a dynamic form builder, plus a file-backed form store
and a command-line interface.
"""

__version__ = "0.1.0"

from form_builder.runtime import (
    FormSession,
    evaluate_derived_field,
    update_derived_fields,
    validate_field,
    validate_form,
)
from form_builder.schemas import FormField, FormSchema

__all__ = [
    "FormField",
    "FormSchema",
    "FormSession",
    "evaluate_derived_field",
    "update_derived_fields",
    "validate_field",
    "validate_form",
]
