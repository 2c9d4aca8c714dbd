"""Centralized initialization for form_builder entry points.

Loads the project .env (so FORM_BUILDER_* overrides can live there) before
settings are read. Entry points call ensure_initialized() once.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from form_builder.config.settings import SETTINGS_DIR_NAME, reset_settings_cache

logger = logging.getLogger(__name__)

# Module-level state
_initialized: bool = False


def _find_project_root(start_path: Optional[Path] = None) -> Path:
    """Find project root by looking for .formbuilder or pyproject.toml.

    Args:
        start_path: Starting path for search. Defaults to the working directory.

    Returns:
        Project root directory.
    """
    current = start_path or Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / SETTINGS_DIR_NAME).is_dir():
            return parent
        if (parent / "pyproject.toml").exists():
            return parent
    return current


def ensure_initialized(start_path: Optional[Path] = None) -> bool:
    """Load .env from the project root once per process.

    Returns:
        True if a .env file was loaded.
    """
    global _initialized

    if _initialized:
        return False
    _initialized = True

    env_path = _find_project_root(start_path) / ".env"
    if not env_path.exists():
        logger.debug(f".env not found at {env_path}")
        return False

    load_dotenv(env_path)
    reset_settings_cache()
    logger.debug(f"Loaded .env from {env_path}")
    return True


def reset_initialization() -> None:
    """Allow ensure_initialized() to run again (used by tests)."""
    global _initialized
    _initialized = False
