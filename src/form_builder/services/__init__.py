"""Application services."""

from form_builder.services.builder_state import FormBuilderState

__all__ = ["FormBuilderState"]
