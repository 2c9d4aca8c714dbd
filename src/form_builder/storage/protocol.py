"""Storage protocol for saved forms.

The engine treats persistence as an opaque load/save interface. The
primary implementation is FileFormStore; anything that provides these
methods can stand in for it.
"""

from typing import List, Protocol, runtime_checkable

from form_builder.schemas.form import FormSchema


@runtime_checkable
class FormStore(Protocol):
    """Durable storage for the list of saved forms.

    Implementations never raise on I/O problems: they log, return an empty
    list from load_forms(), and turn writes into no-ops.
    """

    def load_forms(self) -> List[FormSchema]:
        """Load all saved forms (empty list on failure)."""
        ...

    def save_forms(self, forms: List[FormSchema]) -> None:
        """Replace the saved forms with ``forms``."""
        ...

    def save_form(self, form: FormSchema) -> None:
        """Insert a form, or replace the saved form with the same id."""
        ...

    def delete_form(self, form_id: str) -> None:
        """Remove the form with this id (no-op if absent)."""
        ...

    def clear_forms(self) -> None:
        """Remove every saved form."""
        ...
