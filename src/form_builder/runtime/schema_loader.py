"""
Utility module for loading form schema and value JSON files.

Used by the CLI to read forms that are not (yet) in the store and the
values to fill them with.
"""

import json
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from form_builder.errors import SchemaLoadError
from form_builder.schemas.form import FormSchema


def _read_json(file_path: str | Path, kind: str) -> Any:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise SchemaLoadError(f"{kind} file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in {kind.lower()} file: {e}")


def load_form_file(file_path: str | Path) -> FormSchema:
    """
    Load and validate a form schema JSON file.

    Args:
        file_path: Path to the schema JSON file (camelCase keys, as saved
                   by the store)

    Returns:
        The validated FormSchema

    Raises:
        SchemaLoadError: If the file cannot be read or is not a valid form
    """
    data = _read_json(file_path, "Schema")

    if not isinstance(data, dict):
        raise SchemaLoadError("Schema file must contain a JSON object")

    try:
        return FormSchema.model_validate(data)
    except ValidationError as e:
        raise SchemaLoadError(f"Invalid form schema in {file_path}: {e}")


def load_values_file(file_path: str | Path) -> Dict[str, Any]:
    """
    Load a values JSON file (field id -> value).

    Raises:
        SchemaLoadError: If the file cannot be read or is not a JSON object
    """
    data = _read_json(file_path, "Values")

    if not isinstance(data, dict):
        raise SchemaLoadError("Values file must contain a JSON object mapping field ids to values")

    return data
