"""
langstrings: utilities for maintaining JSON translation files

- Flatten and nest translation keys
- Round-trip translation tables through Word documents for translators
- Duplicate detection and word/character counts

License: MIT
"""

__version__ = "0.1.0"

from langstrings.models import TranslationEntry, TranslationTable
from langstrings.table import join
from langstrings.transcode import flatten, nest

__all__ = [
    "TranslationEntry",
    "TranslationTable",
    "join",
    "flatten",
    "nest",
]
