"""Settings schema and loader.

Settings are loaded from {project}/.formbuilder/settings.yaml (or an
explicit path) and may be overridden by environment variables:

    FORM_BUILDER_STORAGE_DIR   directory of the form store
    FORM_BUILDER_STORAGE_KEY   namespace key (file name) of the form store
"""

import logging
import os
import re
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from form_builder.errors import ConfigurationError
from form_builder.storage.file_store import DEFAULT_STORAGE_KEY

logger = logging.getLogger(__name__)

SETTINGS_DIR_NAME = ".formbuilder"
SETTINGS_FILE_NAME = "settings.yaml"

ENV_STORAGE_DIR = "FORM_BUILDER_STORAGE_DIR"
ENV_STORAGE_KEY = "FORM_BUILDER_STORAGE_KEY"


class FormBuilderSettings(BaseModel):
    """Settings for the form store and logging.

    Attributes:
        storage_dir: Directory holding the saved-forms file.
        storage_key: Namespace key of the saved-forms file.
        log_level: Default log level for the CLI.
    """

    storage_dir: Path = Field(
        default=Path(SETTINGS_DIR_NAME),
        description="Directory holding the saved-forms file",
    )
    storage_key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        description="Namespace key of the saved-forms file",
        min_length=1,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Default log level for the CLI",
    )

    @field_validator("storage_key")
    @classmethod
    def validate_storage_key(cls, v: str) -> str:
        """Storage key becomes a file name, so keep it path-safe."""
        if not re.match(r"^[A-Za-z0-9_.-]+$", v):
            raise ValueError(
                "storage_key must contain only alphanumeric characters, dots, hyphens, and underscores"
            )
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


def _apply_env_overrides(data: dict) -> dict:
    storage_dir = os.getenv(ENV_STORAGE_DIR)
    if storage_dir:
        data["storage_dir"] = storage_dir
    storage_key = os.getenv(ENV_STORAGE_KEY)
    if storage_key:
        data["storage_key"] = storage_key
    return data


def load_settings(config_path: Optional[Path] = None) -> FormBuilderSettings:
    """Load settings from YAML, then apply environment overrides.

    Args:
        config_path: Optional explicit path to settings.yaml.
            If not provided, uses ./.formbuilder/settings.yaml.

    Returns:
        FormBuilderSettings (defaults when no file exists).

    Raises:
        ConfigurationError: If the file exists but is not valid YAML or
            contains invalid values.
    """
    if config_path is None:
        config_path = Path.cwd() / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME

    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in settings {config_path}: {e}")

        if loaded is None:
            logger.warning(f"Empty settings file at {config_path}")
        elif not isinstance(loaded, dict):
            raise ConfigurationError(f"Settings file {config_path} must contain a mapping")
        else:
            data = loaded
            logger.debug(f"Loaded settings from {config_path}")
    else:
        logger.debug(f"No settings file found at {config_path}")

    try:
        return FormBuilderSettings.model_validate(_apply_env_overrides(data))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}")


# Cached settings (loaded once per session)
_cached_settings: Optional[FormBuilderSettings] = None


def get_settings(force_reload: bool = False) -> FormBuilderSettings:
    """Get the current settings (cached).

    Args:
        force_reload: If True, reload from disk even if cached.
    """
    global _cached_settings

    if force_reload or _cached_settings is None:
        _cached_settings = load_settings()

    return _cached_settings


def reset_settings_cache() -> None:
    """Reset the settings cache."""
    global _cached_settings
    _cached_settings = None
