"""
Rule-based validation for form values.

Validation failures are returned as FieldError data, never raised:
- A required field with an empty value yields exactly one error and
  no other rule is checked
- An empty optional field yields no errors
- Otherwise every rule runs in declaration order and all errors are kept
- Derived fields are never validated by validate_form()
"""

import logging
import re
from typing import Any, Iterable, List, Optional

from form_builder.schemas.form import (
    FieldError,
    FormField,
    FormValidationResult,
    FormValueMap,
    ValidationRule,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# At least 8 chars, one lowercase, one uppercase, one digit
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")


def is_empty(value: Any) -> bool:
    """None and the empty string count as "no value"."""
    return value is None or value == ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _numeric_param(rule: ValidationRule) -> Optional[float]:
    if _is_number(rule.value):
        return rule.value
    return None


def apply_validation_rule(field: FormField, value: Any, rule: ValidationRule) -> Optional[FieldError]:
    """
    Apply a single rule to a non-empty value.

    Rules that do not apply to the value's kind (e.g. minLength on a
    number) pass silently.

    Args:
        field: Field the value belongs to
        value: Candidate value
        rule: Rule to check

    Returns:
        FieldError carrying the rule's message, or None if the rule passes
    """
    failed = False

    if rule.type == "required":
        failed = is_empty(value)

    elif rule.type in ("minLength", "maxLength"):
        limit = _numeric_param(rule)
        if isinstance(value, str) and limit is not None:
            if rule.type == "minLength":
                failed = len(value) < limit
            else:
                failed = len(value) > limit

    elif rule.type == "email":
        failed = isinstance(value, str) and not EMAIL_PATTERN.fullmatch(value)

    elif rule.type == "password":
        failed = isinstance(value, str) and not PASSWORD_PATTERN.fullmatch(value)

    elif rule.type in ("min", "max"):
        limit = _numeric_param(rule)
        if _is_number(value) and limit is not None:
            if rule.type == "min":
                failed = value < limit
            else:
                failed = value > limit

    elif rule.type == "custom":
        if rule.value and isinstance(rule.value, str) and isinstance(value, str):
            try:
                pattern = re.compile(rule.value)
            except re.error as e:
                logger.error(f"Invalid custom validation regex {rule.value!r}: {e}")
            else:
                failed = pattern.search(value) is None

    if failed:
        return FieldError(field_id=field.id, message=rule.message)
    return None


def validate_field(field: FormField, value: Any) -> List[FieldError]:
    """
    Validate one field's value against its rule set.

    Args:
        field: Field definition
        value: Current value of the field

    Returns:
        List of errors (empty if valid)
    """
    if field.required and is_empty(value):
        return [FieldError(field_id=field.id, message=f"{field.label} is required")]

    if is_empty(value):
        return []

    errors = []
    for rule in field.validations:
        error = apply_validation_rule(field, value, rule)
        if error:
            errors.append(error)

    return errors


def validate_form(fields: Iterable[FormField], values: FormValueMap) -> FormValidationResult:
    """
    Validate every user-editable field of a form.

    Args:
        fields: Field definitions
        values: Current value map (field id -> value)

    Returns:
        FormValidationResult with is_valid and the collected errors
    """
    errors: List[FieldError] = []

    for field in fields:
        if field.is_derived:
            continue
        errors.extend(validate_field(field, values.get(field.id)))

    return FormValidationResult(is_valid=not errors, errors=errors)
