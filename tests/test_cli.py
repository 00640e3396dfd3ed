"""
Tests for the langstrings command-line interface.

Exit code 0 means success or a deliberate no-op, 1 any validation failure.
"""

import json

import pytest
from typer.testing import CliRunner

from langstrings.cli import app
from langstrings.docx_codec import encode, extract_text, save_document
from langstrings.table import join

runner = CliRunner()


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def nested_file(tmp_path, nested_strings):
    path = tmp_path / "en.json"
    path.write_text(json.dumps(nested_strings), encoding="utf-8")
    return path


@pytest.fixture
def flat_file(tmp_path, flat_strings):
    path = tmp_path / "flat.json"
    path.write_text(json.dumps(flat_strings), encoding="utf-8")
    return path


class TestGeneral:
    """Version and info output."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "langstrings v" in result.output

    def test_info(self):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "convert" in result.output


class TestKeysCommand:
    """Tests for `langstrings keys`."""

    def test_flatten_in_place(self, nested_file, flat_strings):
        result = runner.invoke(app, ["keys", str(nested_file), "--flatten", "--force"])

        assert result.exit_code == 0
        assert read_json(nested_file) == flat_strings

    def test_nest_to_new_file(self, flat_file, nested_strings, tmp_path):
        out = tmp_path / "nested.json"

        result = runner.invoke(app, ["keys", str(flat_file), str(out), "--nest", "--force"])

        assert result.exit_code == 0
        assert read_json(out) == nested_strings

    def test_confirmation_declined(self, nested_file, nested_strings):
        result = runner.invoke(app, ["keys", str(nested_file), "--flatten"], input="n\n")

        assert result.exit_code == 0
        assert read_json(nested_file) == nested_strings

    def test_confirmation_accepted(self, nested_file, flat_strings):
        result = runner.invoke(app, ["keys", str(nested_file), "-f"], input="y\n")

        assert result.exit_code == 0
        assert read_json(nested_file) == flat_strings

    def test_dry_run_does_not_write(self, nested_file, nested_strings):
        result = runner.invoke(app, ["keys", str(nested_file), "-f", "-N", "-F"])

        assert result.exit_code == 0
        assert read_json(nested_file) == nested_strings
        assert "menu.file.open" in result.output

    def test_no_change_is_not_written(self, flat_file):
        before = flat_file.read_text(encoding="utf-8")

        result = runner.invoke(app, ["keys", str(flat_file), "--flatten", "--force"])

        assert result.exit_code == 0
        assert flat_file.read_text(encoding="utf-8") == before

    def test_existing_output_requires_force(self, nested_file, flat_file):
        result = runner.invoke(app, ["keys", str(nested_file), str(flat_file), "-f"])

        assert result.exit_code == 1

    def test_missing_input(self, tmp_path):
        result = runner.invoke(app, ["keys", str(tmp_path / "nope.json"), "-f", "-F"])

        assert result.exit_code == 1

    def test_no_input(self):
        result = runner.invoke(app, ["keys", "--flatten"])

        assert result.exit_code == 1

    def test_no_action(self, nested_file):
        result = runner.invoke(app, ["keys", str(nested_file), "--force"])

        assert result.exit_code == 1

    def test_both_actions(self, nested_file):
        result = runner.invoke(app, ["keys", str(nested_file), "-f", "-n", "-F"])

        assert result.exit_code == 1

    def test_nest_conflict(self, tmp_path):
        path = tmp_path / "conflict.json"
        path.write_text(json.dumps({"a": "leaf", "a.b": "child"}), encoding="utf-8")

        result = runner.invoke(app, ["keys", str(path), "--nest", "--force"])

        assert result.exit_code == 1

    def test_nest_conflict_overwrite(self, tmp_path):
        path = tmp_path / "conflict.json"
        path.write_text(json.dumps({"a": "leaf", "a.b": "child"}), encoding="utf-8")

        result = runner.invoke(
            app, ["keys", str(path), "--nest", "--force", "--on-conflict", "overwrite"],
        )

        assert result.exit_code == 0
        assert read_json(path) == {"a": {"b": "child"}}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["keys", str(path), "-f", "-F"])

        assert result.exit_code == 1

    def test_non_utf8_input(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b"\xff")

        result = runner.invoke(app, ["keys", str(path), "-f", "-F"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)


class TestModCommand:
    """Tests for `langstrings mod`."""

    def test_overwrite_input(self, nested_file, flat_strings):
        result = runner.invoke(app, ["mod", str(nested_file), "--flatten", "--overwrite"])

        assert result.exit_code == 0
        assert read_json(nested_file) == flat_strings

    def test_output_file(self, nested_file, flat_strings, tmp_path):
        out = tmp_path / "out.json"

        result = runner.invoke(app, ["mod", str(nested_file), str(out), "-f"])

        assert result.exit_code == 0
        assert read_json(out) == flat_strings

    def test_existing_output_without_force(self, nested_file, flat_file):
        result = runner.invoke(app, ["mod", str(nested_file), str(flat_file), "-f"])

        assert result.exit_code == 1

    def test_existing_output_with_force(self, flat_file, nested_strings, tmp_path):
        out = tmp_path / "existing.json"
        out.write_text("{}", encoding="utf-8")

        result = runner.invoke(app, ["mod", str(flat_file), str(out), "-n", "-F"])

        assert result.exit_code == 0
        assert read_json(out) == nested_strings

    def test_no_output(self, nested_file):
        result = runner.invoke(app, ["mod", str(nested_file), "-f"])

        assert result.exit_code == 1


class TestConvertCommand:
    """Tests for `langstrings convert`."""

    def test_export(self, locales_dir):
        result = runner.invoke(app, ["convert", str(locales_dir), "--export", "-t", "fr"])

        assert result.exit_code == 0
        doc_path = locales_dir / "project-en-fr.docx"
        assert doc_path.exists()
        text = extract_text(doc_path)
        assert "menu.file.save" in text
        assert "obsolete" not in text

    def test_export_missing_only(self, locales_dir, tmp_path):
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        result = runner.invoke(app, [
            "convert", str(locales_dir), str(out_dir),
            "-e", "-t", "fr", "-p", "shop", "--missing",
        ])

        assert result.exit_code == 0
        text = extract_text(out_dir / "shop-en-fr.docx")
        assert "menu.file.save" in text
        assert "menu.file.open" not in text

    def test_export_refuses_existing_document(self, locales_dir):
        (locales_dir / "project-en-fr.docx").write_bytes(b"")

        result = runner.invoke(app, ["convert", str(locales_dir), "-e", "-t", "fr"])

        assert result.exit_code == 1

    def test_import(self, locales_dir):
        table = join({"a": "Apple", "b": "Banana"}, {}, "en", "fr")
        document = encode(table)
        document.tables[0].rows[2].cells[1].text = "Pomme"
        save_document(document, locales_dir / "project-en-fr.docx")

        result = runner.invoke(app, ["convert", str(locales_dir), "--import", "-t", "fr"])

        assert result.exit_code == 0
        assert read_json(locales_dir / "new-fr.json") == {"a": "Pomme"}

    def test_export_then_import(self, locales_dir):
        export = runner.invoke(app, ["convert", str(locales_dir), "-e", "-t", "fr"])
        imported = runner.invoke(app, ["convert", str(locales_dir), "-i", "-t", "fr"])

        assert export.exit_code == 0
        assert imported.exit_code == 0
        assert read_json(locales_dir / "new-fr.json") == {
            "menu.file.open": "Ouvrir",
            "menu.help": "Aide",
        }

    def test_base_lang_from_environment(self, locales_dir):
        (locales_dir / "de.json").write_text(json.dumps({"x": "Hallo"}), encoding="utf-8")

        result = runner.invoke(
            app, ["convert", str(locales_dir), "-e", "-t", "fr"],
            env={"LANGSTRINGS_BASE_LANG": "de"},
        )

        assert result.exit_code == 0
        assert (locales_dir / "project-de-fr.docx").exists()

    @pytest.mark.parametrize("args", [
        ["-t", "fr"],
        ["-e", "-i", "-t", "fr"],
        ["-e"],
    ])
    def test_invalid_arguments(self, locales_dir, args):
        result = runner.invoke(app, ["convert", str(locales_dir), *args])

        assert result.exit_code == 1

    def test_missing_folder(self, tmp_path):
        result = runner.invoke(app, ["convert", str(tmp_path / "nope"), "-e", "-t", "fr"])

        assert result.exit_code == 1

    def test_missing_target_file(self, locales_dir):
        result = runner.invoke(app, ["convert", str(locales_dir), "-e", "-t", "es"])

        assert result.exit_code == 1


class TestStringsCommand:
    """Tests for `langstrings strings`."""

    def test_duplicates(self, tmp_path):
        path = tmp_path / "dupes.json"
        path.write_text(
            json.dumps({"a.greeting": "hi", "a.hello": "hi", "a.bye": "bye"}),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["strings", str(path), "--duplicates"])

        assert result.exit_code == 0
        assert "strings found with multiple keys: 1" in result.output
        assert "a.greeting" in result.output
        assert "a.bye" not in result.output

    def test_counts(self, flat_file):
        result = runner.invoke(app, ["strings", str(flat_file), "-w", "-c"])

        assert result.exit_code == 0
        assert "Words" in result.output

    def test_non_string_value(self, tmp_path):
        path = tmp_path / "numbers.json"
        path.write_text(json.dumps({"a": 42}), encoding="utf-8")

        result = runner.invoke(app, ["strings", str(path), "-d"])

        assert result.exit_code == 1

    def test_nested_needs_flatten_first(self, nested_file):
        assert runner.invoke(app, ["strings", str(nested_file), "-w"]).exit_code == 1
        assert runner.invoke(
            app, ["strings", str(nested_file), "-w", "--flatten-first"],
        ).exit_code == 0

    def test_no_statistic(self, flat_file):
        result = runner.invoke(app, ["strings", str(flat_file)])

        assert result.exit_code == 1

    def test_no_spaces_requires_chars(self, flat_file):
        result = runner.invoke(app, ["strings", str(flat_file), "-w", "--no-spaces"])

        assert result.exit_code == 1

    def test_no_spaces_with_chars(self, flat_file):
        result = runner.invoke(app, ["strings", str(flat_file), "-c", "--no-spaces"])

        assert result.exit_code == 0
        assert "no spaces" in result.output
