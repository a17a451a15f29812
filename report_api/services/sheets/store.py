"""Spreadsheet store abstraction over the Google Sheets values API."""

import abc
import logging
from typing import Any, Dict, List, Optional, Sequence

import gspread

from report_api.config.config import VALUE_INPUT_OPTION

from .utils import a1_range

logger = logging.getLogger(__name__)


class SheetStore(abc.ABC):
    """Remote operations the report handler needs from a spreadsheet backend.

    Ranges are A1 strings including the tab name ("'Orders'!A:A").
    Row indices are 0-based.
    """

    @abc.abstractmethod
    def read_range(self, sheet_id: str, range_name: str) -> List[List[Any]]:
        """Returns the value grid of a range; trailing empty rows/cells are omitted."""

    @abc.abstractmethod
    def append_row(self, sheet_id: str, sheet_name: str, row: Sequence[Any]) -> None:
        """Appends one row after the last data row of the tab."""

    @abc.abstractmethod
    def update_range(self, sheet_id: str, range_name: str, rows: Sequence[Sequence[Any]]) -> None:
        """Overwrites a range with the given rows."""

    @abc.abstractmethod
    def batch_update_values(self, sheet_id: str, updates: Sequence[Dict[str, Any]]) -> None:
        """Writes several independent ranges in one call.

        Each update is {'range': <A1>, 'values': [[...]]}.
        """

    @abc.abstractmethod
    def sheet_gid(self, sheet_id: str, sheet_name: str) -> Optional[int]:
        """Returns the numeric id of a tab, or None when no tab has that title."""

    @abc.abstractmethod
    def delete_row(self, sheet_id: str, gid: int, row_idx: int) -> None:
        """Physically removes a single row from the tab identified by `gid`."""


class GspreadSheetStore(SheetStore):
    """SheetStore backed by an authorized gspread client."""

    def __init__(self, client: gspread.Client):
        self.client = client
        self._spreadsheets: Dict[str, gspread.Spreadsheet] = {}

    def _spreadsheet(self, sheet_id: str) -> gspread.Spreadsheet:
        spreadsheet = self._spreadsheets.get(sheet_id)
        if spreadsheet is None:
            logger.debug(f"Opening spreadsheet {sheet_id}...")
            spreadsheet = self.client.open_by_key(sheet_id)
            self._spreadsheets[sheet_id] = spreadsheet
        return spreadsheet

    def read_range(self, sheet_id: str, range_name: str) -> List[List[Any]]:
        logger.debug(f"Reading range {range_name} from {sheet_id}")
        response = self._spreadsheet(sheet_id).values_get(range_name)
        return response.get('values', [])

    def append_row(self, sheet_id: str, sheet_name: str, row: Sequence[Any]) -> None:
        logger.debug(f"Appending row to {sheet_id}/{sheet_name}: {row}")
        self._spreadsheet(sheet_id).values_append(
            a1_range(sheet_name),
            params={'valueInputOption': VALUE_INPUT_OPTION},
            body={'values': [list(row)]},
        )

    def update_range(self, sheet_id: str, range_name: str, rows: Sequence[Sequence[Any]]) -> None:
        logger.debug(f"Updating range {range_name} in {sheet_id}")
        self._spreadsheet(sheet_id).values_update(
            range_name,
            params={'valueInputOption': VALUE_INPUT_OPTION},
            body={'values': [list(r) for r in rows]},
        )

    def batch_update_values(self, sheet_id: str, updates: Sequence[Dict[str, Any]]) -> None:
        logger.debug(f"Batch updating {len(updates)} range(s) in {sheet_id}")
        self._spreadsheet(sheet_id).values_batch_update(
            body={'valueInputOption': VALUE_INPUT_OPTION, 'data': list(updates)},
        )

    def sheet_gid(self, sheet_id: str, sheet_name: str) -> Optional[int]:
        metadata = self._spreadsheet(sheet_id).fetch_sheet_metadata()
        for sheet in metadata.get('sheets', []):
            properties = sheet.get('properties', {})
            if properties.get('title') == sheet_name:
                return properties.get('sheetId')
        return None

    def delete_row(self, sheet_id: str, gid: int, row_idx: int) -> None:
        logger.debug(f"Deleting row index {row_idx} from tab {gid} in {sheet_id}")
        body = {
            'requests': [{
                'deleteDimension': {
                    'range': {
                        'sheetId': gid,
                        'dimension': 'ROWS',
                        'startIndex': row_idx,
                        'endIndex': row_idx + 1,
                    }
                }
            }]
        }
        self._spreadsheet(sheet_id).batch_update(body)
