"""
Exception hierarchy for langstrings.

Library code raises these; only the CLI catches them, prints the message
and exits with status 1.
"""

from __future__ import annotations


class LangStringsError(Exception):
    """Base class for every error raised by langstrings."""


class InvalidArgumentError(LangStringsError):
    """A required option is missing or the requested action is ambiguous."""


class NotFoundError(LangStringsError):
    """An input path does not exist or is not the expected kind of entry."""


class ConflictError(LangStringsError):
    """An output path already exists and overwriting was not requested."""


class MalformedInputError(LangStringsError):
    """Input data does not have the shape an operation requires."""


class KeyConflictError(MalformedInputError):
    """Two flattened keys imply incompatible structure at the same path."""

    def __init__(self, key: str, path: str):
        self.key = key
        self.path = path
        super().__init__(
            f'key "{key}" conflicts with an existing entry at "{path}"'
        )
