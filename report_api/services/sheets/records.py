"""Row matching and merge logic for header-addressed records.

Everything here is pure: it works on header lists, payload dicts and raw
cell grids as returned by the Sheets values API, and never touches the network.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from report_api.config.config import (
    ID_COL_IDX,
    HEADER_ROW_IDX,
    STATUS_HEADER_KEY,
    BILL_HEADER_KEY,
    BILL_HEADER_FRAGMENT,
)
from report_api.utils.error_utils import BadRequestError

from .utils import normalize_header, cell_text, same_identifier

logger = logging.getLogger(__name__)

# Marker for "payload has no value for this header" (None is a valid value)
MISSING = object()


class HeaderIndex:
    """Ordered header row plus a normalized-name -> column index lookup."""

    def __init__(self, headers: Sequence[Any]):
        self.headers: List[str] = [cell_text(h) for h in headers]
        self._by_key: Dict[str, int] = {}
        for idx, header in enumerate(self.headers):
            key = normalize_header(header)
            if key and key not in self._by_key:  # First occurrence wins
                self._by_key[key] = idx

    @property
    def width(self) -> int:
        """Number of columns a full row write covers (at least column A)."""
        return max(len(self.headers), ID_COL_IDX + 1)

    def index_of(self, normalized_key: str) -> Optional[int]:
        return self._by_key.get(normalized_key)

    def matching(self, fragment: str) -> List[int]:
        """Column indices whose normalized header contains `fragment`."""
        return [idx for idx, h in enumerate(self.headers) if fragment in normalize_header(h)]


class FieldResolver:
    """Resolves a header name to a payload value.

    Resolution order: exact key, then normalized key. The normalized payload
    index is built once per payload.
    """

    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload
        self._by_key: Dict[str, str] = {}
        for key in payload:
            norm = normalize_header(key)
            if norm and norm not in self._by_key:
                self._by_key[norm] = key

    def resolve(self, header: str) -> Any:
        """Returns the payload value for `header`, or MISSING."""
        if header in self.payload:
            return self.payload[header]
        key = self._by_key.get(normalize_header(header))
        if key is None:
            return MISSING
        return self.payload[key]


def _as_cell(value: Any) -> Any:
    return '' if value is MISSING or value is None else value


def _force_identifier(row: List[Any], identifier: Any) -> List[Any]:
    if not row:
        return [identifier]
    row[ID_COL_IDX] = identifier
    return row


def build_new_row(header_index: HeaderIndex, payload: Dict[str, Any], identifier: Any) -> List[Any]:
    """Builds a row for an unseen identifier; unmatched headers become ''."""
    resolver = FieldResolver(payload)
    row = [_as_cell(resolver.resolve(h)) for h in header_index.headers]
    return _force_identifier(row, identifier)


def merge_row(header_index: HeaderIndex, existing: Sequence[Any], payload: Dict[str, Any], identifier: Any) -> List[Any]:
    """Overlays payload values onto an existing row.

    Only headers matched by a payload key are overwritten; every other cell
    keeps its current value.
    """
    width = len(header_index.headers)
    row = list(existing[:width]) + [''] * max(0, width - len(existing))
    resolver = FieldResolver(payload)
    for idx, header in enumerate(header_index.headers):
        value = resolver.resolve(header)
        if value is not MISSING:
            row[idx] = _as_cell(value)
    return _force_identifier(row, identifier)


def _first_cell(row: Sequence[Any], col_idx: int = 0) -> Any:
    return row[col_idx] if len(row) > col_idx else None


def find_row_by_id(column_values: Sequence[Sequence[Any]], identifier: Any) -> Optional[int]:
    """Finds the 0-based row index of `identifier` in a column-A read.

    `column_values` is the `values` grid of an `A:A` read. Neither the header
    row nor an empty cell is ever matched.
    """
    if not cell_text(identifier).strip():
        return None
    for row_idx, row in enumerate(column_values):
        if row_idx == HEADER_ROW_IDX or not cell_text(_first_cell(row)).strip():
            continue
        if same_identifier(_first_cell(row), identifier):
            return row_idx
    return None


def find_row_by_value(rows: Sequence[Sequence[Any]], col_idx: int, value: Any) -> Optional[int]:
    """Finds the first data row whose cell at `col_idx` equals `value`.

    Both sides are trimmed; the comparison is case-sensitive. A blank value
    never matches.
    """
    target = cell_text(value).strip()
    if not target:
        return None
    for row_idx, row in enumerate(rows):
        if row_idx == HEADER_ROW_IDX:
            continue
        if cell_text(_first_cell(row, col_idx)).strip() == target:
            return row_idx
    return None


def resolve_bill_columns(header_index: HeaderIndex) -> Tuple[int, int]:
    """Locates the (bill, status) column indices.

    The status column is the header normalizing to 'stt'. The bill column is
    the header normalizing to 'so_bill' if present, otherwise the single
    header whose normalized name contains 'bill'.

    Raises:
        BadRequestError: If a column is missing or the bill column is ambiguous.
    """
    status_idx = header_index.index_of(STATUS_HEADER_KEY)
    bill_idx = header_index.index_of(BILL_HEADER_KEY)
    if bill_idx is None:
        candidates = header_index.matching(BILL_HEADER_FRAGMENT)
        if len(candidates) > 1:
            names = ', '.join(header_index.headers[i] for i in candidates)
            logger.warning(f"Several headers look like the bill column: {names}")
            raise BadRequestError(f"Ambiguous bill column: {names}")
        bill_idx = candidates[0] if candidates else None

    if bill_idx is None or status_idx is None:
        logger.warning(f"Bill/STT column lookup failed. Headers: {header_index.headers}")
        raise BadRequestError("Missing bill/STT column")
    return bill_idx, status_idx
