"""
Project-wide defaults and file-naming conventions.

Translation files live in a single folder and are named ``<langId>.json``.
Documents exported for translators are named
``<project>-<base>-<target>.docx``, and imported translations are written
next to them as ``new-<target>.json`` so they can be merged by hand or by a
translation management tool.

Module Contents:
    APP_NAME: Application name for display purposes
    DEFAULT_BASE_LANG: Base language used when none is given
    DEFAULT_PROJECT: Project name used in document file names
    JSON_INDENT: Indentation used when writing JSON files
    KEY_SEPARATOR: Separator joining nested keys into flattened keys
    MAX_DEPTH: Deepest object nesting accepted when walking JSON input
    PLACEHOLDER_PATTERN: Matches ``{{name}}`` substitution markers

Example:
    >>> from langstrings.config import document_filename
    >>> document_filename("shop", "en", "fr")
    'shop-en-fr.docx'
"""

from __future__ import annotations

import re

# Application name for display and identification
APP_NAME = "langstrings"

# Environment variables that override CLI defaults
BASE_LANG_ENVVAR = "LANGSTRINGS_BASE_LANG"
PROJECT_ENVVAR = "LANGSTRINGS_PROJECT"

DEFAULT_BASE_LANG = "en"
DEFAULT_PROJECT = "project"

JSON_INDENT = 2
KEY_SEPARATOR = "."
MAX_DEPTH = 100

# First row label of every exported entry table
KEY_LABEL = "key"

# Prefix of the JSON file written by a document import
IMPORT_PREFIX = "new-"

PLACEHOLDER_PATTERN = re.compile(r"\{\{.*?\}\}")


def lang_filename(lang: str) -> str:
    """Return the translation file name for a language id."""
    return f"{lang}.json"


def document_filename(project: str, base_lang: str, target_lang: str) -> str:
    """Return the exported document file name."""
    return f"{project}-{base_lang}-{target_lang}.docx"


def import_filename(target_lang: str) -> str:
    """Return the file name imported translations are written to."""
    return f"{IMPORT_PREFIX}{target_lang}.json"
