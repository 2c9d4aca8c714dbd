"""Pydantic schemas for form definitions and results."""

from form_builder.schemas.form import (
    CHOICE_FIELD_TYPES,
    NUMERIC_RULE_TYPES,
    DerivedFieldFormula,
    FieldError,
    FieldOption,
    FieldType,
    FieldValue,
    FormField,
    FormSchema,
    FormSubmission,
    FormValidationResult,
    FormValueMap,
    RuleType,
    ValidationRule,
    utc_timestamp,
)

__all__ = [
    "CHOICE_FIELD_TYPES",
    "NUMERIC_RULE_TYPES",
    "DerivedFieldFormula",
    "FieldError",
    "FieldOption",
    "FieldType",
    "FieldValue",
    "FormField",
    "FormSchema",
    "FormSubmission",
    "FormValidationResult",
    "FormValueMap",
    "RuleType",
    "ValidationRule",
    "utc_timestamp",
]
