"""Filesystem-backed form store.

All saved forms live in one JSON document, ``{storage_dir}/{storage_key}.json``,
holding a list of forms with camelCase keys. Failures are logged and
degrade to an empty list (load) or a no-op (writes).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError

from form_builder.schemas.form import FormSchema

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "formBuilder_savedForms"


class FileFormStore:
    """Stores saved forms in a single JSON file keyed by a fixed namespace."""

    def __init__(self, storage_dir: Path, storage_key: str = DEFAULT_STORAGE_KEY):
        self.storage_dir = Path(storage_dir)
        self.storage_key = storage_key

    @property
    def path(self) -> Path:
        return self.storage_dir / f"{self.storage_key}.json"

    def load_forms(self) -> List[FormSchema]:
        """Load all saved forms.

        Entries that are not valid forms are skipped with a warning so one
        bad form does not hide the others.
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.error(f"Failed to load forms from {self.path}: {exc}")
            return []

        if not isinstance(data, list):
            logger.error(f"Failed to load forms from {self.path}: expected a list, got {type(data).__name__}")
            return []

        forms = []
        for index, item in enumerate(data):
            try:
                forms.append(FormSchema.model_validate(item))
            except ValidationError as exc:
                logger.warning(f"Skipping invalid saved form #{index} in {self.path}: {exc}")
        return forms

    def save_forms(self, forms: List[FormSchema]) -> None:
        """Replace the saved forms (atomic write)."""
        payload = [form.to_json_dict() for form in forms]
        tmp_path = self.path.with_suffix(".json.tmp")

        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.path)
        except OSError as exc:
            logger.error(f"Failed to save forms to {self.path}: {exc}")
            if tmp_path.exists():
                tmp_path.unlink()
            return

        logger.debug(f"Saved {len(forms)} form(s) to {self.path}")

    def save_form(self, form: FormSchema) -> None:
        forms = self.load_forms()
        for index, existing in enumerate(forms):
            if existing.id == form.id:
                forms[index] = form
                break
        else:
            forms.append(form)
        self.save_forms(forms)

    def delete_form(self, form_id: str) -> None:
        forms = self.load_forms()
        self.save_forms([form for form in forms if form.id != form_id])

    def clear_forms(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error(f"Failed to clear forms at {self.path}: {exc}")
