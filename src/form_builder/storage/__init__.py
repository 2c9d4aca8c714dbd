"""Persistence for saved forms.

Usage:
    from form_builder.storage import FileFormStore, FormStore

    store: FormStore = FileFormStore(Path(".formbuilder"))
    forms = store.load_forms()
"""

from form_builder.storage.file_store import DEFAULT_STORAGE_KEY, FileFormStore
from form_builder.storage.protocol import FormStore

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "FileFormStore",
    "FormStore",
]
