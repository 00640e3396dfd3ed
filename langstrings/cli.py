"""
Command-line interface for langstrings.

Provides commands for:
- Flattening and nesting JSON translation keys
- Exporting translation tables to Word documents and importing them back
- Reporting duplicate strings, word counts and character counts

Usage:
    langstrings keys en.json --flatten
    langstrings mod en.json en.flat.json --flatten --force
    langstrings convert locales/ --export --target-lang fr
    langstrings convert locales/ --import --target-lang fr
    langstrings strings en.json --duplicates --words --chars
"""

from __future__ import annotations

import logging
from importlib import metadata
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from langstrings import __version__
from langstrings.config import (
    APP_NAME,
    BASE_LANG_ENVVAR,
    DEFAULT_BASE_LANG,
    DEFAULT_PROJECT,
    PROJECT_ENVVAR,
    document_filename,
    import_filename,
    lang_filename,
)
from langstrings.docx_codec import export_document, import_document
from langstrings.errors import InvalidArgumentError, LangStringsError
from langstrings.files import (
    check_output,
    dumps_json,
    load_json_object,
    require_directory,
    require_file,
    write_json,
)
from langstrings.stats import count_chars, count_words, find_duplicates
from langstrings.table import join, summarize
from langstrings.transcode import (
    CONFLICT_POLICIES,
    SHAPE_FLAT,
    SHAPE_NESTED,
    detect_shape,
    flatten,
    nest,
)

app = typer.Typer(
    name=APP_NAME,
    help="langstrings: utilities for maintaining JSON translation files",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("langstrings.cli")


def version_callback(value: bool):
    if value:
        console.print(f"{APP_NAME} v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _abort(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/] {escape(message)}")
    raise typer.Exit(1)


def _print_json(text: str) -> None:
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose",
        help="Show debug logging",
    ),
):
    """langstrings: utilities for maintaining JSON translation files."""
    _configure_logging(verbose)


# ============================================================================
# Key restructuring
# ============================================================================

def _restructure(data: dict, flatten_keys: bool, nest_keys: bool, on_conflict: str) -> dict:
    if flatten_keys and nest_keys:
        raise InvalidArgumentError(
            "both --flatten and --nest specified, please choose only one."
        )
    if not flatten_keys and not nest_keys:
        raise InvalidArgumentError(
            "no action specified, please specify either --flatten or --nest to continue."
        )
    if on_conflict not in CONFLICT_POLICIES:
        raise InvalidArgumentError(
            f"unknown --on-conflict value \"{on_conflict}\", "
            f"expected one of: {', '.join(CONFLICT_POLICIES)}"
        )

    shape = detect_shape(data)
    if flatten_keys:
        if shape == SHAPE_FLAT:
            logger.info("input already has flat keys")
        logger.info("flattening JSON keys...")
        return flatten(data)

    if shape == SHAPE_NESTED:
        logger.info("input already has nested keys")
    logger.info("nesting JSON keys...")
    return nest(data, on_conflict=on_conflict)


def _write_changes(in_data: dict, out_data: dict, out_path: Path, dry_run: bool) -> None:
    in_text = dumps_json(in_data)
    out_text = dumps_json(out_data)
    _print_json(out_text)

    if in_text == out_text:
        logger.info("process resulted in no structural changes, nothing more to do here...")
        return
    if dry_run:
        logger.info("performed a dry run, skipping file write...")
        return

    logger.info("file structure updated, writing to output file...")
    write_json(out_path, out_data)


@app.command()
def keys(
    input_file: Optional[Path] = typer.Argument(
        None, help="JSON file to restructure",
    ),
    output_file: Optional[Path] = typer.Argument(
        None, help="Output file (defaults to the input file)",
    ),
    flatten_keys: bool = typer.Option(
        False, "--flatten", "-f",
        help="Flatten nested objects into dot-joined keys",
    ),
    nest_keys: bool = typer.Option(
        False, "--nest", "-n",
        help="Expand dot-joined keys into nested objects",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-N",
        help="Show the result without writing it",
    ),
    force: bool = typer.Option(
        False, "--force", "-F",
        help="Overwrite an existing output file and skip confirmation",
    ),
    on_conflict: str = typer.Option(
        "error", "--on-conflict",
        help="How --nest handles conflicting keys: error or overwrite",
    ),
):
    """Flatten or nest the keys of a JSON file."""
    try:
        if input_file is None:
            raise InvalidArgumentError("no input file path provided, unable to continue.")
        require_file(input_file)

        if not flatten_keys and not nest_keys:
            raise InvalidArgumentError(
                "no action specified, please specify either --flatten or --nest to continue."
            )

        out_path = output_file or input_file
        if out_path != input_file:
            check_output(out_path, force)
        else:
            logger.warning("no output file specified, this will overwrite input file...")

        if not force and not typer.confirm("would you like to apply these changes?"):
            console.print("process aborted, nothing more to do here...")
            return

        in_data = load_json_object(input_file)
        out_data = _restructure(in_data, flatten_keys, nest_keys, on_conflict)
        _write_changes(in_data, out_data, out_path, dry_run)
    except LangStringsError as e:
        _abort(str(e))


@app.command()
def mod(
    input_file: Optional[Path] = typer.Argument(
        None, help="JSON file to modify",
    ),
    output_file: Optional[Path] = typer.Argument(
        None, help="Output file",
    ),
    flatten_keys: bool = typer.Option(
        False, "--flatten", "-f",
        help="Flatten nested objects into dot-joined keys",
    ),
    nest_keys: bool = typer.Option(
        False, "--nest", "-n",
        help="Expand dot-joined keys into nested objects",
    ),
    overwrite: bool = typer.Option(
        False, "--overwrite", "-O",
        help="Write changes directly to the input file",
    ),
    force: bool = typer.Option(
        False, "--force", "-F",
        help="Replace an existing output file",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-N",
        help="Show the result without writing it",
    ),
    on_conflict: str = typer.Option(
        "error", "--on-conflict",
        help="How --nest handles conflicting keys: error or overwrite",
    ),
):
    """Modify a JSON file without prompting (for scripts)."""
    try:
        if input_file is None:
            raise InvalidArgumentError("no input file path provided, unable to continue.")
        require_file(input_file)

        if overwrite:
            logger.warning(
                "--overwrite specified, this will write changes directly to the input file..."
            )
            out_path = input_file
        elif output_file is None:
            raise InvalidArgumentError(
                "no output file provided, specify one or use --overwrite."
            )
        else:
            out_path = check_output(output_file, force)

        in_data = load_json_object(input_file)
        out_data = _restructure(in_data, flatten_keys, nest_keys, on_conflict)
        _write_changes(in_data, out_data, out_path, dry_run)
    except LangStringsError as e:
        _abort(str(e))


# ============================================================================
# Document export / import
# ============================================================================

def _export(
    src_folder: Path,
    dest_folder: Path,
    base_lang: str,
    target_lang: str,
    project: str,
    missing_only: bool,
    force: bool,
) -> None:
    logger.info("exporting translations from JSON to DOCX...")

    base_path = require_file(src_folder / lang_filename(base_lang))
    target_path = require_file(src_folder / lang_filename(target_lang))
    doc_path = check_output(dest_folder / document_filename(project, base_lang, target_lang), force)

    base = flatten(load_json_object(base_path))
    target = flatten(load_json_object(target_path))
    table = join(base, target, base_lang, target_lang, missing_only=missing_only)
    summary = summarize(base, target, table, missing_only=missing_only)

    logger.info("found %d base language entries", summary.base_count)
    logger.info("found %d target language entries", summary.target_count)
    logger.info(summary.describe())

    export_document(table, doc_path)
    console.print(f"[green]Saved document to:[/] {escape(str(doc_path))}")


def _import(
    src_folder: Path,
    dest_folder: Path,
    base_lang: str,
    target_lang: str,
    project: str,
    force: bool,
) -> None:
    logger.info("importing translations from DOCX to JSON...")

    doc_path = require_file(src_folder / document_filename(project, base_lang, target_lang))
    out_path = check_output(dest_folder / import_filename(target_lang), force)

    result = import_document(doc_path, target_lang, base_lang)

    table = Table(title="Import Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Translated", str(len(result.translations)))
    table.add_row("Missing", str(len(result.missing)))
    table.add_row("Skipped", str(len(result.skipped)))
    console.print(table)

    logger.info("writing new translations to output file: %s", out_path)
    write_json(out_path, result.translations)


@app.command()
def convert(
    src_folder: Optional[Path] = typer.Argument(
        None, help="Folder holding <lang>.json files",
    ),
    dest_folder: Optional[Path] = typer.Argument(
        None, help="Output folder (defaults to the source folder)",
    ),
    do_export: bool = typer.Option(
        False, "--export", "-e",
        help="Export translations from JSON to DOCX",
    ),
    do_import: bool = typer.Option(
        False, "--import", "-i",
        help="Import translations from DOCX to JSON",
    ),
    base_lang: str = typer.Option(
        DEFAULT_BASE_LANG, "--base-lang", "-b",
        envvar=BASE_LANG_ENVVAR,
        help="Base language id",
    ),
    target_lang: Optional[str] = typer.Option(
        None, "--target-lang", "-t",
        help="Target language id",
    ),
    project: str = typer.Option(
        DEFAULT_PROJECT, "--project", "-p",
        envvar=PROJECT_ENVVAR,
        help="Project name used in the document file name",
    ),
    missing_only: bool = typer.Option(
        False, "--missing", "-m",
        help="Export only entries missing from the target language",
    ),
    force: bool = typer.Option(
        False, "--force", "-F",
        help="Replace an existing output file",
    ),
):
    """Export translations to a Word document, or import them back."""
    try:
        if do_import == do_export:
            raise InvalidArgumentError(
                "unable to determine target action, please specify either --import or --export."
            )
        if src_folder is None:
            raise InvalidArgumentError("no language folder path provided, unable to continue.")
        require_directory(src_folder)
        if not target_lang:
            raise InvalidArgumentError(
                "no target language selected, please specify this with --target-lang."
            )

        dest = dest_folder or src_folder
        require_directory(dest)

        if do_export:
            _export(src_folder, dest, base_lang, target_lang, project, missing_only, force)
        else:
            _import(src_folder, dest, base_lang, target_lang, project, force)
    except LangStringsError as e:
        _abort(str(e))


# ============================================================================
# String statistics
# ============================================================================

@app.command()
def strings(
    input_file: Optional[Path] = typer.Argument(
        None, help="Flattened JSON translation file",
    ),
    duplicates: bool = typer.Option(
        False, "--duplicates", "-d",
        help="List strings used by more than one key",
    ),
    words: bool = typer.Option(
        False, "--words", "-w",
        help="Count words, ignoring {{placeholders}}",
    ),
    chars: bool = typer.Option(
        False, "--chars", "-c",
        help="Count characters, ignoring {{placeholders}}",
    ),
    no_spaces: bool = typer.Option(
        False, "--no-spaces",
        help="Exclude whitespace from the character count",
    ),
    flatten_first: bool = typer.Option(
        False, "--flatten-first",
        help="Flatten nested input before scanning",
    ),
):
    """Report duplicate strings, word counts and character counts."""
    try:
        if input_file is None:
            raise InvalidArgumentError("no input file path provided, unable to continue.")
        if not (duplicates or words or chars):
            raise InvalidArgumentError(
                "no statistic selected, please specify --duplicates, --words or --chars."
            )
        if no_spaces and not chars:
            raise InvalidArgumentError("--no-spaces only applies together with --chars.")

        data = load_json_object(input_file)
        if flatten_first:
            data = flatten(data)

        if duplicates:
            groups = find_duplicates(data)
            console.print(f"strings found with multiple keys: {len(groups)}")
            for group in groups:
                console.print("---------------------------------")
                console.print(f' string: "{escape(group.value)}":')
                for key in group.keys:
                    console.print(f'  key: "{escape(key)}"')

        if words or chars:
            table = Table(title="String Statistics")
            table.add_column("Metric", style="cyan")
            table.add_column("Value", style="green")
            table.add_row("Entries", str(len(data)))
            if words:
                table.add_row("Words", str(count_words(data)))
            if chars:
                label = "Characters (no spaces)" if no_spaces else "Characters"
                table.add_row(label, str(count_chars(data, include_spaces=not no_spaces)))
            console.print(table)
    except LangStringsError as e:
        _abort(str(e))


@app.command()
def info():
    """Show version, defaults and document support."""
    console.print(f"[bold]{APP_NAME} v{__version__}[/]\n")

    table = Table(title="Commands")
    table.add_column("Command", style="cyan")
    table.add_column("Purpose")
    table.add_row("keys", "Flatten or nest keys (interactive)")
    table.add_row("mod", "Flatten or nest keys (non-interactive)")
    table.add_row("convert", "Export to / import from .docx")
    table.add_row("strings", "Duplicates, word and character counts")
    console.print(table)

    console.print("\n[bold]Defaults:[/]")
    console.print(f"  base language: {DEFAULT_BASE_LANG} (override with {BASE_LANG_ENVVAR})")
    console.print(f"  project name: {DEFAULT_PROJECT} (override with {PROJECT_ENVVAR})")

    console.print("\n[bold]Document Support:[/]")
    try:
        console.print(f"  [green]✓[/] python-docx {metadata.version('python-docx')}")
    except metadata.PackageNotFoundError:
        console.print("  [yellow]✗[/] python-docx not installed (pip install python-docx)")


if __name__ == "__main__":
    app()
