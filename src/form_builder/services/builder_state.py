"""Form builder state.

Holds the form being edited and the list of saved forms. The caller owns
the instance and passes it around explicitly; nothing here is global.

Every field operation leaves ``order`` as a dense 0..n-1 sequence.
Operations that need a current form are no-ops when there is none.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Optional

from form_builder.schemas.form import FormField, FormSchema, utc_timestamp
from form_builder.storage.protocol import FormStore

logger = logging.getLogger(__name__)


def _renumber(fields: List[FormField]) -> List[FormField]:
    return [f.model_copy(update={"order": index}) for index, f in enumerate(fields)]


@dataclass
class FormBuilderState:
    """State of the form builder.

    Attributes:
        current_form: Form being edited, if any.
        saved_forms: Forms saved so far (mirrors the store).
        is_loading: UI hint while forms are loading.
        error: Last user-facing error message.
    """

    current_form: Optional[FormSchema] = None
    saved_forms: List[FormSchema] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None

    # -------------------------------------------------------------------------
    # Form management
    # -------------------------------------------------------------------------

    def create_new_form(self, name: str, description: Optional[str] = None) -> FormSchema:
        """Start editing a new, empty form."""
        now = utc_timestamp()
        self.current_form = FormSchema(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            fields=[],
            created_at=now,
            updated_at=now,
        )
        logger.debug(f"Created form {self.current_form.id} ({name!r})")
        return self.current_form

    def load_form(self, form_id: str) -> Optional[FormSchema]:
        """Make a copy of a saved form the current form."""
        for form in self.saved_forms:
            if form.id == form_id:
                self.current_form = form.model_copy(deep=True)
                return self.current_form
        logger.debug(f"No saved form with id {form_id}")
        return None

    def save_current_form(self) -> Optional[FormSchema]:
        """Stamp updatedAt and upsert the current form into saved_forms."""
        if self.current_form is None:
            return None

        updated = self.current_form.model_copy(update={"updated_at": utc_timestamp()})
        for index, form in enumerate(self.saved_forms):
            if form.id == updated.id:
                self.saved_forms[index] = updated
                break
        else:
            self.saved_forms.append(updated)

        # Further edits must not leak into the saved copy
        self.current_form = updated.model_copy(deep=True)
        return updated

    def load_saved_forms(self, forms: List[FormSchema]) -> None:
        self.saved_forms = list(forms)

    def delete_form(self, form_id: str) -> None:
        self.saved_forms = [form for form in self.saved_forms if form.id != form_id]
        if self.current_form is not None and self.current_form.id == form_id:
            self.current_form = None

    # -------------------------------------------------------------------------
    # Field management
    # -------------------------------------------------------------------------

    def add_field(self, new_field: FormField) -> Optional[FormField]:
        """Append a field with a fresh id at the end of the form."""
        if self.current_form is None:
            return None

        added = new_field.model_copy(
            update={"id": str(uuid.uuid4()), "order": len(self.current_form.fields)}
        )
        self.current_form.fields = self.current_form.fields + [added]
        return added

    def update_field(self, field_id: str, **updates: Any) -> Optional[FormField]:
        """Merge ``updates`` (snake_case attribute names) into a field.

        The merged field is re-validated, so an update that breaks a field
        invariant (e.g. a derived field without formula) raises
        pydantic.ValidationError and leaves the form unchanged.
        An ``order`` update moves the field to that position; orders stay
        dense either way.
        """
        if self.current_form is None:
            return None

        fields = list(self.current_form.fields)
        for index, existing in enumerate(fields):
            if existing.id == field_id:
                merged = FormField.model_validate({**existing.model_dump(), **updates})
                if "order" in updates:
                    fields.pop(index)
                    index = min(max(merged.order, 0), len(fields))
                    fields.insert(index, merged)
                else:
                    fields[index] = merged
                self.current_form.fields = _renumber(fields)
                return self.current_form.fields[index]
        return None

    def delete_field(self, field_id: str) -> None:
        if self.current_form is None:
            return
        remaining = [f for f in self.current_form.fields if f.id != field_id]
        self.current_form.fields = _renumber(remaining)

    def reorder_fields(self, from_index: int, to_index: int) -> None:
        """Move the field at from_index to to_index."""
        if self.current_form is None:
            return
        fields = list(self.current_form.fields)
        if not 0 <= from_index < len(fields):
            logger.debug(f"Ignoring reorder from out-of-range index {from_index}")
            return
        moved = fields.pop(from_index)
        fields.insert(to_index, moved)
        self.current_form.fields = _renumber(fields)

    # -------------------------------------------------------------------------
    # Form metadata / UI state
    # -------------------------------------------------------------------------

    def update_form_metadata(self, name: Optional[str] = None, description: Optional[str] = None) -> None:
        if self.current_form is None:
            return
        if name is not None:
            self.current_form.name = name
        if description is not None:
            self.current_form.description = description
        self.current_form.updated_at = utc_timestamp()

    def set_loading(self, is_loading: bool) -> None:
        self.is_loading = is_loading

    def set_error(self, error: Optional[str]) -> None:
        self.error = error

    def clear_current_form(self) -> None:
        self.current_form = None

    # -------------------------------------------------------------------------
    # Store synchronisation
    # -------------------------------------------------------------------------

    def load_from_store(self, store: FormStore) -> None:
        self.set_loading(True)
        try:
            self.load_saved_forms(store.load_forms())
        finally:
            self.set_loading(False)

    def persist(self, store: FormStore) -> None:
        store.save_forms(self.saved_forms)
