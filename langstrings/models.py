"""
Core data models for langstrings.

Two families of models live here:

- The value tree: JSON input is converted once into ``Scalar`` leaves and
  ``Branch`` nodes, so the transcoder dispatches on node type instead of
  re-inspecting raw JSON values.
- The translation table: a base-language map joined with a target-language
  map on key, one ``TranslationEntry`` per base key.

Design Philosophy:
- Plain dataclasses, created fresh per run and discarded at exit
- Absence of a translation (``None``) is distinct from an empty string
- Serializable: every model converts back to plain JSON-compatible data
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union


# Shapes of JSON data as loaded from disk
FlattenedMap = dict[str, Any]
NestedMap = dict[str, Any]


@dataclass(frozen=True)
class Scalar:
    """A leaf value: string, number, boolean, null or array."""
    value: Any

    def to_json(self) -> Any:
        return self.value


@dataclass
class Branch:
    """A JSON object whose children are further nodes."""
    children: dict[str, Node] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.children)

    def to_json(self) -> NestedMap:
        return {key: node.to_json() for key, node in self.children.items()}


Node = Union[Scalar, Branch]


@dataclass
class TranslationEntry:
    """One key with its base string and, if present, its translation.

    ``target_value`` is ``None`` when the target map lacks the key; an
    empty string means the key exists but is still blank.
    """
    key: str
    base_value: Any
    target_value: Optional[str] = None

    @property
    def is_missing(self) -> bool:
        """Whether the target map had no entry for this key."""
        return self.target_value is None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "base": self.base_value,
            "target": self.target_value,
        }


@dataclass
class TranslationTable:
    """Ordered translation entries for a base/target language pair.

    Built by ``langstrings.table.join``; the base map decides which keys
    appear and in what order.
    """
    base_lang: str
    target_lang: str
    entries: list[TranslationEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[TranslationEntry]:
        return iter(self.entries)

    @property
    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]

    @property
    def missing_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_missing)

    def missing(self) -> TranslationTable:
        """Return a copy holding only entries without a translation."""
        return TranslationTable(
            base_lang=self.base_lang,
            target_lang=self.target_lang,
            entries=[entry for entry in self.entries if entry.is_missing],
        )

    def to_dict(self) -> dict:
        return {
            "base_lang": self.base_lang,
            "target_lang": self.target_lang,
            "entries": [entry.to_dict() for entry in self.entries],
        }
