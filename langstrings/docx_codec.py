"""
Word document export and import of translation tables.

Every translation entry becomes a 3-row, 2-column table followed by an empty
paragraph:

    | key | menu.file.open |
    | en  | Open           |
    | fr  | Ouvrir         |

Translators fill in the last row and send the document back. On import the
document is reduced to plain text, one block per cell, blocks separated by
a blank line, and an extra blank line after each table. Line breaks inside a
cell are escaped so multi-paragraph strings survive the round trip:

    key\\n\\nmenu.file.open\\n\\nen\\n\\nOpen\\n\\nfr\\n\\nOuvrir\\n\\n\\n\\nkey...

The empty paragraph after each table produces that extra blank line and
stops Word from merging adjacent tables into one.

Decoding is a line-by-line state machine. Text that does not follow the
expected row order (rows deleted or reordered by a translator) causes only
the affected entry to be skipped and reported; decoding never raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, Optional, Union

import docx
from docx.document import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Length
from docx.table import Table

from langstrings.config import KEY_LABEL
from langstrings.errors import MalformedInputError
from langstrings.models import TranslationTable

logger = logging.getLogger("langstrings.docx")

# Language ids such as "en", "fr", "pt-BR" or "zh_Hant"
LANG_ID_PATTERN = re.compile(r"^[\w-]+$")

PARAGRAPH_SEPARATOR = "\n\n"

# Line breaks inside one cell are carried as U+2028 so a blank line within a
# value cannot be mistaken for a paragraph separator.
CELL_LINE_BREAK = "\u2028"


def _escape_breaks(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\n", CELL_LINE_BREAK)


def _restore_breaks(text: str) -> str:
    return text.replace(CELL_LINE_BREAK, "\n")


# ============================================================================
# Export
# ============================================================================

@dataclass
class ExportConfig:
    """Cosmetic layout of exported documents.

    None of these settings affect what the importer reads back.
    """
    label_width: Length = Inches(0.8)
    value_width: Length = Inches(5.7)
    cell_margin: Length = Inches(0.1)
    table_style: Optional[str] = "Table Grid"
    title_template: str = "Language Strings - {base}-{target}"


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _set_cell_margins(table: Table, margin: Length) -> None:
    tbl_pr = table._tbl.tblPr
    margins = OxmlElement("w:tblCellMar")
    for side in ("top", "left", "bottom", "right"):
        edge = OxmlElement(f"w:{side}")
        edge.set(qn("w:w"), str(margin.twips))
        edge.set(qn("w:type"), "dxa")
        margins.append(edge)
    # tblLook must remain the last child of tblPr
    look = tbl_pr.find(qn("w:tblLook"))
    if look is not None:
        look.addprevious(margins)
    else:
        tbl_pr.append(margins)


def _keep_row_together(row) -> None:
    tr_pr = row._tr.get_or_add_trPr()
    tr_pr.append(OxmlElement("w:cantSplit"))


def _add_entry_table(
    document: DocxDocument,
    rows: list[tuple[str, str]],
    config: ExportConfig,
) -> Table:
    table = document.add_table(rows=len(rows), cols=2)
    if config.table_style:
        table.style = config.table_style
    table.autofit = False
    _set_cell_margins(table, config.cell_margin)

    for row, (label, value) in zip(table.rows, rows):
        _keep_row_together(row)
        label_cell, value_cell = row.cells
        label_cell.width = config.label_width
        value_cell.width = config.value_width
        for cell, text in ((label_cell, label), (value_cell, value)):
            cell.text = text
            cell.paragraphs[0].paragraph_format.keep_with_next = True
    return table


def encode(
    table: TranslationTable,
    base_lang: Optional[str] = None,
    target_lang: Optional[str] = None,
    config: Optional[ExportConfig] = None,
) -> DocxDocument:
    """Build a Word document with one 3-row table per translation entry.

    Args:
        table: Entries to export
        base_lang: Label of the base row (defaults to ``table.base_lang``)
        target_lang: Label of the target row (defaults to ``table.target_lang``)
        config: Optional layout settings

    Returns:
        In-memory python-docx Document
    """
    if config is None:
        config = ExportConfig()
    base_lang = base_lang or table.base_lang
    target_lang = target_lang or table.target_lang

    document = docx.Document()
    document.core_properties.title = config.title_template.format(
        base=base_lang, target=target_lang,
    )

    for entry in table:
        _add_entry_table(document, [
            (KEY_LABEL, entry.key),
            (base_lang, _cell_text(entry.base_value)),
            (target_lang, _cell_text(entry.target_value)),
        ], config)
        spacer = document.add_paragraph("")
        spacer.paragraph_format.keep_with_next = True

    logger.debug("encoded %d entries", len(table))
    return document


def save_document(document: DocxDocument, path: Union[str, Path]) -> Path:
    """Write a document to disk and return its path."""
    path = Path(path)
    document.save(str(path))
    logger.info("wrote document: %s", path)
    return path


def export_document(
    table: TranslationTable,
    path: Union[str, Path],
    config: Optional[ExportConfig] = None,
) -> Path:
    """Encode ``table`` and save it to ``path``."""
    return save_document(encode(table, config=config), path)


# ============================================================================
# Text extraction
# ============================================================================

def extract_text(source: Union[str, Path, DocxDocument]) -> str:
    """Reduce a document to plain text in reading order.

    Each top-level paragraph and each table cell becomes one block of text;
    blocks are separated by a blank line. Line breaks and paragraphs inside
    a block are written as ``CELL_LINE_BREAK``.

    Raises:
        MalformedInputError: If the file is not a readable Word document
    """
    if isinstance(source, (str, Path)):
        try:
            document = docx.Document(str(source))
        except PackageNotFoundError as e:
            raise MalformedInputError(f'"{source}" is not a readable .docx file') from e
    else:
        document = source

    paragraphs: list[str] = []
    for item in document.iter_inner_content():
        if isinstance(item, Table):
            for row in item.rows:
                for cell in row.cells:
                    text = "\n".join(p.text for p in cell.paragraphs)
                    paragraphs.append(_escape_breaks(text))
        else:
            paragraphs.append(_escape_breaks(item.text))
    return PARAGRAPH_SEPARATOR.join(paragraphs)


# ============================================================================
# Import
# ============================================================================

class _Expect(Enum):
    """Next paragraph the decoder is waiting for."""
    KEY_LABEL = auto()
    KEY = auto()
    BASE_LANG = auto()
    BASE_VALUE = auto()
    TARGET_LANG = auto()
    TARGET_VALUE = auto()
    SEPARATOR = auto()


@dataclass
class SkippedEntry:
    """An entry abandoned because the text broke the expected row order."""
    key: Optional[str]
    reason: str

    def __str__(self) -> str:
        label = f'"{self.key}"' if self.key else "<unknown key>"
        return f"{label}: {self.reason}"


@dataclass
class DecodeResult:
    """Translations recovered from document text.

    ``translations`` maps keys to non-empty target strings, ready to be
    merged into the target-language file. ``missing`` lists keys whose
    target row was left blank, ``skipped`` the entries that could not be
    parsed.
    """
    translations: dict[str, str] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    @property
    def entry_count(self) -> int:
        return len(self.translations) + len(self.missing) + len(self.skipped)


class TableTextDecoder:
    """State machine reading exported entry tables back from plain text.

    Feed paragraphs one at a time with ``feed`` and call ``finish`` at the
    end of the text. The expected sequence per entry is::

        key, <key>, <base lang>, <base value>, <target lang>, <target value>, ""

    Any paragraph that breaks the sequence abandons the current entry. A
    ``key`` label always starts a new entry, so decoding resynchronises on
    the next table.
    """

    def __init__(self, target_lang: str, base_lang: Optional[str] = None):
        self.target_lang = target_lang
        self.base_lang = base_lang
        self.result = DecodeResult()
        self._reset()

    def _reset(self) -> None:
        self._expect = _Expect.KEY_LABEL
        self._key: Optional[str] = None
        self._target: str = ""

    def _matches_lang(self, line: str, expected: Optional[str]) -> bool:
        if expected:
            return line == expected
        return bool(LANG_ID_PATTERN.match(line))

    def _skip(self, reason: str, line: str) -> None:
        skipped = SkippedEntry(key=self._key, reason=reason)
        self.result.skipped.append(skipped)
        logger.warning("skipping entry %s", skipped)
        self._reset()
        if line == KEY_LABEL:
            self._expect = _Expect.KEY

    def _commit(self) -> None:
        key = self._key
        if self._target.strip():
            if key in self.result.translations:
                logger.warning('duplicate entry for "%s", keeping the later one', key)
            logger.info('found translation for "%s"', key)
            self.result.translations[key] = self._target
        else:
            logger.warning('missing translation for "%s"', key)
            self.result.missing.append(key)
        self._reset()

    def feed(self, paragraph: str) -> None:
        # labels and language ids are compared stripped, values are kept as-is
        line = paragraph.strip()
        value = _restore_breaks(paragraph)
        expect = self._expect

        if expect is _Expect.KEY_LABEL:
            if line == KEY_LABEL:
                self._expect = _Expect.KEY
            elif line:
                logger.debug("ignoring stray paragraph: %r", line)

        elif expect is _Expect.KEY:
            if not line:
                self._skip("empty key cell", line)
            else:
                self._key = line
                self._expect = _Expect.BASE_LANG

        elif expect is _Expect.BASE_LANG:
            if self._matches_lang(line, self.base_lang):
                self._expect = _Expect.BASE_VALUE
            else:
                self._skip(f"expected base language id, found {line!r}", line)

        elif expect is _Expect.BASE_VALUE:
            self._expect = _Expect.TARGET_LANG

        elif expect is _Expect.TARGET_LANG:
            if self._matches_lang(line, self.target_lang):
                self._expect = _Expect.TARGET_VALUE
            else:
                self._skip(f"expected target language id, found {line!r}", line)

        elif expect is _Expect.TARGET_VALUE:
            self._target = value
            self._expect = _Expect.SEPARATOR

        elif expect is _Expect.SEPARATOR:
            if not line:
                self._commit()
            elif line == KEY_LABEL:
                # adjacent tables merged by the extractor
                self._commit()
                self._expect = _Expect.KEY
            else:
                self._skip(f"unexpected content after target value: {line!r}", line)

    def finish(self) -> DecodeResult:
        """Close the last entry and return the result."""
        if self._expect is _Expect.SEPARATOR:
            self._commit()
        elif self._expect is not _Expect.KEY_LABEL:
            self._skip("document ended in the middle of an entry", "")
        return self.result


def decode(text: str, target_lang: str, base_lang: Optional[str] = None) -> DecodeResult:
    """Recover target-language strings from extracted document text.

    Args:
        text: Plain text as produced by ``extract_text``
        target_lang: Language id expected on the target row
        base_lang: Language id expected on the base row; any id-like
            label is accepted when omitted

    Returns:
        DecodeResult with translations, missing keys and skipped entries
    """
    decoder = TableTextDecoder(target_lang, base_lang)
    normalized = text.replace("\r\n", "\n")
    for paragraph in normalized.split(PARAGRAPH_SEPARATOR):
        decoder.feed(paragraph)
    return decoder.finish()


def import_document(
    path: Union[str, Path],
    target_lang: str,
    base_lang: Optional[str] = None,
) -> DecodeResult:
    """Extract text from the document at ``path`` and decode it."""
    return decode(extract_text(path), target_lang, base_lang)
