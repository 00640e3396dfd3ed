"""
Translation table model: join a base and a target map on key.

The base language drives the set of entries. Keys found only in the target
map are dropped; keys missing from the target map produce entries whose
``target_value`` is ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass

from langstrings.models import FlattenedMap, TranslationEntry, TranslationTable


@dataclass
class ExportSummary:
    """Counts reported before a table is written to a document."""
    base_count: int
    target_count: int
    missing_count: int
    exported_count: int
    missing_only: bool = False

    def describe(self) -> str:
        scope = f"{self.missing_count} missing" if self.missing_only else "all"
        return f"output will include {scope} entries."

    def to_dict(self) -> dict:
        return {
            "base_entries": self.base_count,
            "target_entries": self.target_count,
            "missing_entries": self.missing_count,
            "exported_entries": self.exported_count,
        }


def join(
    base: FlattenedMap,
    target: FlattenedMap,
    base_lang: str,
    target_lang: str,
    missing_only: bool = False,
) -> TranslationTable:
    """Pair every base key with its target translation.

    Args:
        base: Flattened base-language map
        target: Flattened target-language map
        base_lang: Base language id
        target_lang: Target language id
        missing_only: Keep only entries the target map lacks

    Returns:
        TranslationTable with one entry per base key, in base order
    """
    # JSON null in the target file counts as absent
    entries = [
        TranslationEntry(key=key, base_value=base_value, target_value=target.get(key))
        for key, base_value in base.items()
    ]
    table = TranslationTable(base_lang=base_lang, target_lang=target_lang, entries=entries)
    if missing_only:
        table = table.missing()
    return table


def summarize(
    base: FlattenedMap,
    target: FlattenedMap,
    table: TranslationTable,
    missing_only: bool = False,
) -> ExportSummary:
    """Collect the entry counts for an export run."""
    full = join(base, target, table.base_lang, table.target_lang)
    return ExportSummary(
        base_count=len(base),
        target_count=len(target),
        missing_count=full.missing_count,
        exported_count=len(table),
        missing_only=missing_only,
    )
