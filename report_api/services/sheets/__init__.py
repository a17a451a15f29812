"""Module for interacting with Google Sheets.

Provides:
- Credential parsing and client authorization.
- The SheetStore abstraction and its gspread implementation.
- Header-driven row lookup and merge helpers.
"""

# Public API for the sheets service

from .utils import column_letter, normalize_header, a1_range
from .records import HeaderIndex, FieldResolver, build_new_row, merge_row, find_row_by_id, find_row_by_value
from .client import get_gspread_client
from .store import SheetStore, GspreadSheetStore

__all__ = [
    'column_letter',
    'normalize_header',
    'a1_range',
    'HeaderIndex',
    'FieldResolver',
    'build_new_row',
    'merge_row',
    'find_row_by_id',
    'find_row_by_value',
    'get_gspread_client',
    'SheetStore',
    'GspreadSheetStore',
]
