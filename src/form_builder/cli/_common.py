"""Shared CLI utilities."""

import logging

from rich.logging import RichHandler

from form_builder.cli._console import console
from form_builder.config.settings import get_settings
from form_builder.errors import ConfigurationError
from form_builder.startup import ensure_initialized as _ensure_initialized
from form_builder.storage.file_store import FileFormStore


logger = logging.getLogger(__name__)


def ensure_initialized() -> None:
    """Load the project environment."""
    _ensure_initialized()


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler.

    Without --verbose/--quiet the level comes from settings (INFO by default).
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        try:
            level = getattr(logging, get_settings().log_level)
        except ConfigurationError:
            level = logging.INFO

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_store() -> FileFormStore:
    """Form store configured by settings.

    Raises:
        ConfigurationError: If settings are invalid.
    """
    settings = get_settings()
    return FileFormStore(settings.storage_dir, settings.storage_key)
