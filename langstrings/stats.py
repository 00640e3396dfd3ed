"""
Statistics over flattened translation maps.

- Duplicate detection: keys sharing an identical string value
- Word counts and character counts, ignoring ``{{name}}`` placeholders

All scanners expect a flattened map whose values are all strings and raise
``MalformedInputError`` on the first value that is not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from langstrings.config import PLACEHOLDER_PATTERN
from langstrings.errors import MalformedInputError
from langstrings.models import FlattenedMap

WHITESPACE_PATTERN = re.compile(r"\s+")

# A fragment counts as a word only if it has at least one letter or digit
WORD_CHAR_PATTERN = re.compile(r"\w")


@dataclass
class DuplicateGroup:
    """A string value shared by two or more keys."""
    value: str
    keys: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.keys)


def _iter_strings(flat: FlattenedMap):
    for key, value in flat.items():
        if not isinstance(value, str):
            raise MalformedInputError(
                f'key "{key}" has value of type "{type(value).__name__}", '
                "expected flattened json file with only string values"
            )
        yield key, value


def normalize_text(text: str) -> str:
    """Remove placeholder tokens and collapse runs of whitespace."""
    text = PLACEHOLDER_PATTERN.sub("", text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def find_duplicates(flat: FlattenedMap) -> list[DuplicateGroup]:
    """Group keys by identical value.

    Returns:
        Groups with at least two keys, in order of first occurrence

    Example:
        >>> find_duplicates({"a": "hi", "b": "hi", "c": "bye"})
        [DuplicateGroup(value='hi', keys=['a', 'b'])]
    """
    groups: dict[str, DuplicateGroup] = {}
    for key, value in _iter_strings(flat):
        groups.setdefault(value, DuplicateGroup(value)).keys.append(key)
    return [group for group in groups.values() if len(group) > 1]


def count_words(flat: FlattenedMap) -> int:
    """Count words across all values, excluding placeholders."""
    total = 0
    for _, value in _iter_strings(flat):
        fragments = normalize_text(value).split(" ")
        total += sum(1 for f in fragments if WORD_CHAR_PATTERN.search(f))
    return total


def count_chars(flat: FlattenedMap, include_spaces: bool = True) -> int:
    """Count characters across all values, excluding placeholders.

    Args:
        flat: Flattened map of string values
        include_spaces: Count the (collapsed) whitespace between words
    """
    total = 0
    for _, value in _iter_strings(flat):
        text = normalize_text(value)
        if not include_spaces:
            text = WHITESPACE_PATTERN.sub("", text)
        total += len(text)
    return total
