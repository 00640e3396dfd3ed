"""Shared fixtures for langstrings tests."""

import json

import pytest


@pytest.fixture
def nested_strings():
    return {
        "menu": {
            "file": {"open": "Open", "save": "Save"},
            "help": "Help",
        },
        "greeting": "Hello {{name}}",
    }


@pytest.fixture
def flat_strings():
    return {
        "menu.file.open": "Open",
        "menu.file.save": "Save",
        "menu.help": "Help",
        "greeting": "Hello {{name}}",
    }


@pytest.fixture
def locales_dir(tmp_path, nested_strings):
    """A folder with a nested en.json and a partial, flat fr.json."""
    folder = tmp_path / "locales"
    folder.mkdir()
    (folder / "en.json").write_text(json.dumps(nested_strings), encoding="utf-8")
    (folder / "fr.json").write_text(
        json.dumps({"menu.file.open": "Ouvrir", "menu.help": "Aide", "obsolete": "Vieux"}),
        encoding="utf-8",
    )
    return folder
