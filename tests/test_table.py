"""
Tests for joining base and target maps into a translation table.
"""

from langstrings.models import TranslationEntry
from langstrings.table import join, summarize


BASE = {"a": "Apple", "b": "Banana", "c": "Cherry"}
TARGET = {"a": "Pomme", "c": "", "z": "Only in target"}


class TestJoin:
    """Tests for join()."""

    def test_one_entry_per_base_key(self):
        table = join(BASE, TARGET, "en", "fr")

        assert len(table) == len(BASE)
        assert table.keys == ["a", "b", "c"]
        assert table.base_lang == "en"
        assert table.target_lang == "fr"

    def test_target_presence(self):
        table = join(BASE, TARGET, "en", "fr")
        entries = {entry.key: entry for entry in table}

        assert entries["a"].target_value == "Pomme"
        assert entries["b"].is_missing
        # an empty string is present, not missing
        assert entries["c"].target_value == ""
        assert not entries["c"].is_missing

    def test_target_only_keys_dropped(self):
        table = join(BASE, TARGET, "en", "fr")

        assert "z" not in table.keys

    def test_missing_only(self):
        table = join(BASE, TARGET, "en", "fr", missing_only=True)

        assert table.entries == [TranslationEntry("b", "Banana", None)]

    def test_missing_filter_matches_missing_only(self):
        full = join(BASE, TARGET, "en", "fr")

        assert full.missing().entries == join(BASE, TARGET, "en", "fr", missing_only=True).entries
        assert full.missing_count == 1

    def test_null_target_counts_as_missing(self):
        table = join({"a": "Apple"}, {"a": None}, "en", "fr")

        assert table.entries[0].is_missing

    def test_to_dict(self):
        data = join({"a": "Apple"}, {}, "en", "de").to_dict()

        assert data == {
            "base_lang": "en",
            "target_lang": "de",
            "entries": [{"key": "a", "base": "Apple", "target": None}],
        }


class TestSummary:
    """Tests for summarize()."""

    def test_counts(self):
        table = join(BASE, TARGET, "en", "fr", missing_only=True)
        summary = summarize(BASE, TARGET, table, missing_only=True)

        assert summary.base_count == 3
        assert summary.target_count == 3
        assert summary.missing_count == 1
        assert summary.exported_count == 1
        assert summary.describe() == "output will include 1 missing entries."

    def test_describe_all(self):
        table = join(BASE, TARGET, "en", "fr")

        assert summarize(BASE, TARGET, table).describe() == "output will include all entries."

    def test_missing_count_ignores_export_filter(self):
        table = join(BASE, TARGET, "en", "fr")
        summary = summarize(BASE, TARGET, table)

        assert summary.missing_count == 1
        assert summary.exported_count == 3
