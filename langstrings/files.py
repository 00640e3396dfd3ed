"""
Reading, writing and validating translation files.

JSON is read and written whole; there is no streaming and no atomic rename.
Output is UTF-8 with two-space indentation and non-ASCII characters kept
as-is, which is what translation tools expect to diff against.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from langstrings.config import JSON_INDENT
from langstrings.errors import ConflictError, MalformedInputError, NotFoundError

logger = logging.getLogger("langstrings.files")


def require_file(path: Path) -> Path:
    """Raise ``NotFoundError`` unless ``path`` is an existing file."""
    if not path.exists():
        raise NotFoundError(f'cannot access input file "{path}", unable to continue.')
    if not path.is_file():
        raise NotFoundError(f'"{path}" is not a file, unable to continue.')
    return path


def require_directory(path: Path) -> Path:
    """Raise ``NotFoundError`` unless ``path`` is an existing directory."""
    if not path.is_dir():
        raise NotFoundError(
            f'"{path}" does not seem to be a valid directory, unable to continue.'
        )
    return path


def check_output(path: Path, force: bool, hint: str = "--force") -> Path:
    """Refuse to replace an existing output file unless forced."""
    if path.exists() and not force:
        raise ConflictError(
            f'output file "{path}" already exists, "{hint}" must be specified to overwrite.'
        )
    return path


def dumps_json(data: Any) -> str:
    """Serialize ``data`` the way translation files are written."""
    return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False)


def load_json(path: Path) -> Any:
    """Read and parse a JSON file.

    Raises:
        NotFoundError: If the file does not exist
        MalformedInputError: If the file is not valid UTF-8 encoded JSON
    """
    require_file(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedInputError(f'"{path}" is not valid UTF-8: {e}') from e
    except json.JSONDecodeError as e:
        raise MalformedInputError(f'"{path}" is not valid JSON: {e}') from e
    logger.debug("loaded %s", path)
    return data


def load_json_object(path: Path) -> dict:
    """Read a JSON file whose top level must be an object."""
    data = load_json(path)
    if not isinstance(data, dict):
        raise MalformedInputError(
            f'"{path}" must contain a JSON object, found {type(data).__name__}'
        )
    return data


def write_json(path: Path, data: Any) -> Path:
    """Write ``data`` to ``path`` as formatted JSON with a trailing newline."""
    path.write_text(dumps_json(data) + "\n", encoding="utf-8")
    logger.debug("wrote %s", path)
    return path
