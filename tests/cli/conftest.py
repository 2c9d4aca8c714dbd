"""Fixtures for CLI tests: an isolated project directory and store."""

import json
import logging

import pytest
from typer.testing import CliRunner

from form_builder.storage.file_store import FileFormStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def store(tmp_path, monkeypatch):
    """Run in an empty project with the store under tmp_path/store."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FORM_BUILDER_STORAGE_DIR", str(tmp_path / "store"))
    return FileFormStore(tmp_path / "store")


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def json_output():
    """Parse the JSON document printed to stdout, skipping any stderr lines."""

    def _parse(result):
        text = result.stdout
        offset = 0
        for line in text.splitlines(keepends=True):
            if line.startswith(("{", "[")):
                data, _ = json.JSONDecoder().raw_decode(text[offset:])
                return data
            offset += len(line)
        raise AssertionError(f"No JSON in output:\n{result.output}")

    return _parse
