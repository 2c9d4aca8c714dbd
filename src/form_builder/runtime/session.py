"""State for filling out one form.

A FormSession owns the value map of a form being filled in. Every value
change runs, in order: value update, derived-field pass, validation of the
changed field. Errors are only shown for fields the user has touched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from form_builder.runtime.recalculation import initialize_values, update_derived_fields
from form_builder.runtime.validators import validate_form
from form_builder.schemas.form import (
    FieldError,
    FormSchema,
    FormSubmission,
    FormValueMap,
    utc_timestamp,
)

logger = logging.getLogger(__name__)


class FormSession:
    """Values, errors and touched state of an in-progress form.

    Attributes
    ----------
    form:
        The form being filled in.
    values:
        Mapping of field ids to current values, derived fields included.
    errors:
        Current validation errors.
    touched:
        Ids of fields the user has edited (or all fields after submit()).
    """

    def __init__(self, form: FormSchema, clock: Callable[[], datetime] = datetime.now):
        self.form = form
        self._clock = clock
        self.values: FormValueMap = {}
        self.errors: List[FieldError] = []
        self.touched: Dict[str, bool] = {}
        self.reset()

    def reset(self) -> None:
        """Back to default values with no errors and nothing touched."""
        self.values = self._recalculate(initialize_values(self.form.fields))
        self.errors = []
        self.touched = {}

    def _recalculate(self, values: FormValueMap) -> FormValueMap:
        updated = update_derived_fields(self.form.fields, values, now=self._clock())
        if updated == values:
            return values
        return updated

    def set_value(self, field_id: str, value: Any) -> List[FieldError]:
        """
        Apply a user edit.

        Args:
            field_id: Id of the edited field
            value: New value

        Returns:
            The edited field's errors after the change

        Raises:
            KeyError: If the form has no field with that id
        """
        field = self.form.get_field(field_id)
        if field is None:
            raise KeyError(f"Form '{self.form.id}' has no field '{field_id}'")
        if field.is_derived:
            logger.warning(f"Ignoring edit of derived field '{field_id}'")
            return []

        self.values = self._recalculate({**self.values, field_id: value})
        self.touched[field_id] = True

        field_errors = validate_form([field], self.values).errors
        self.errors = [e for e in self.errors if e.field_id != field_id] + field_errors
        return field_errors

    def set_values(self, updates: Dict[str, Any]) -> None:
        for field_id, value in updates.items():
            self.set_value(field_id, value)

    def visible_error(self, field_id: str) -> Optional[str]:
        """First error message of a field, only once the field is touched."""
        if not self.touched.get(field_id):
            return None
        for error in self.errors:
            if error.field_id == field_id:
                return error.message
        return None

    def submit(self) -> Optional[FormSubmission]:
        """
        Validate the whole form and mark every field touched.

        Returns:
            FormSubmission if the form is valid, None otherwise
        """
        result = validate_form(self.form.fields, self.values)
        self.errors = list(result.errors)
        self.touched = {field.id: True for field in self.form.fields}

        if not result.is_valid:
            logger.info(f"Form '{self.form.id}' has {len(result.errors)} validation error(s)")
            return None

        return FormSubmission(
            form_id=self.form.id,
            data=dict(self.values),
            submitted_at=utc_timestamp(),
        )
