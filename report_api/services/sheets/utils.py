"""Utility functions for Google Sheets interactions."""

import re
import unicodedata
from typing import Any

import gspread

_NON_ALNUM_RUN = re.compile(r'[^a-z0-9]+')
# Letters that carry no combining mark under NFKD decomposition
_EXTRA_FOLDS = str.maketrans({'đ': 'd', 'Đ': 'D', 'ø': 'o', 'Ø': 'O', 'ł': 'l', 'Ł': 'L'})


def column_letter(n: int) -> str:
    """Converts a 1-based column number into its A1 label (1 -> 'A', 27 -> 'AA')."""
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise ValueError(f"Column number must be a positive integer, got {n!r}")
    # rowcol_to_a1 returns e.g. 'AA1'; drop the row part
    return gspread.utils.rowcol_to_a1(1, n)[:-1]


def normalize_header(name: Any) -> str:
    """Canonical form of a header or field name used for fuzzy matching.

    Lowercases, strips diacritics and collapses every run of non-alphanumeric
    characters into a single underscore ('Số Bill ' -> 'so_bill').
    """
    text = '' if name is None else str(name)
    decomposed = unicodedata.normalize('NFKD', text.translate(_EXTRA_FOLDS))
    stripped = ''.join(c for c in decomposed if not unicodedata.combining(c))
    return _NON_ALNUM_RUN.sub('_', stripped.lower()).strip('_')


def a1_range(sheet_name: str, range_name: str | None = None) -> str:
    """Builds a quoted A1 range for a tab, e.g. "'Orders'!A:A"."""
    return gspread.utils.absolute_range_name(str(sheet_name), range_name)


def cell_text(value: Any) -> str:
    """String form of a cell value as read from the sheet (None -> '')."""
    return '' if value is None else str(value)


def same_identifier(cell_value: Any, identifier: Any) -> bool:
    """Case-insensitive, whitespace-trimmed identifier comparison."""
    return cell_text(cell_value).strip().lower() == cell_text(identifier).strip().lower()
