"""Exception hierarchy for the form builder.

Validation failures and formula failures are not exceptions: they are
returned as data (FieldError lists, None results). These types cover the
cases where a caller handed us something we cannot work with at all.
"""


class FormBuilderError(Exception):
    """Base class for form builder errors."""

    pass


class SchemaLoadError(FormBuilderError):
    """Raised when a form schema or values file cannot be loaded or is invalid."""

    pass


class ConfigurationError(FormBuilderError):
    """Raised when settings cannot be loaded or contain invalid values."""

    pass


class FormNotFoundError(FormBuilderError):
    """Raised when a form id is not present in the store."""

    def __init__(self, form_id: str):
        self.form_id = form_id
        super().__init__(f"Form not found: {form_id}")
