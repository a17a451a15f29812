"""Request handling for the sheet report endpoint.

Translates an `action` + payload into calls against a SheetStore:

- update:        upsert a record keyed by column A (read-merge on existing rows)
- delete:        remove the row holding an identifier
- updateBillSTT: set the status cell of one bill
- updateAllSTT:  set the status cells of many bills in one batch write
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

import gspread

from report_api.config.config import (
    CORS_ALLOW_ORIGIN,
    CORS_PREFLIGHT_HEADERS,
    BILL_FIELD,
    STATUS_FIELD,
)
from report_api.config.config_loader import AppConfig, load_config
from report_api.services.sheets.client import get_gspread_client
from report_api.services.sheets.records import (
    MISSING,
    HeaderIndex,
    FieldResolver,
    build_new_row,
    merge_row,
    find_row_by_id,
    find_row_by_value,
    resolve_bill_columns,
)
from report_api.services.sheets.store import SheetStore, GspreadSheetStore
from report_api.services.sheets.utils import a1_range, column_letter
from report_api.utils.error_utils import (
    ReportError,
    BadRequestError,
    NotFoundError,
    log_error,
)

logger = logging.getLogger(__name__)

StoreFactory = Callable[[AppConfig], SheetStore]


@dataclass
class ReportResponse:
    """Framework-neutral HTTP response: status, JSON body (or None) and headers."""
    status_code: int
    body: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_ALLOW_ORIGIN))


def default_store_factory(config: AppConfig) -> SheetStore:
    return GspreadSheetStore(get_gspread_client(config))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(payload: Dict[str, Any], *fields: str) -> None:
    if any(_is_blank(payload.get(f)) for f in fields):
        raise BadRequestError(f"Missing {'/'.join(fields)}")


def _sheet_target(payload: Dict[str, Any]) -> Tuple[str, str]:
    """(sheetId, sheetName) as strings; a tab named 2024 may arrive as a JSON number."""
    return str(payload['sheetId']), str(payload['sheetName'])


def _resolve_identifier(payload: Dict[str, Any]) -> Any:
    """Identifier precedence: data.id, data.ID, then top-level id."""
    data = payload.get('data') or {}
    for candidate in (data.get('id'), data.get('ID'), payload.get('id')):
        if not _is_blank(candidate):
            return candidate
    return None


def _read_header(store: SheetStore, sheet_id: str, sheet_name: str) -> HeaderIndex:
    header_rows = store.read_range(sheet_id, a1_range(sheet_name, '1:1'))
    return HeaderIndex(header_rows[0] if header_rows else [])


def _locate_id_row(store: SheetStore, sheet_id: str, sheet_name: str, identifier: Any) -> Optional[int]:
    column_a = store.read_range(sheet_id, a1_range(sheet_name, 'A:A'))
    return find_row_by_id(column_a, identifier)


# --- Actions --- #

def upsert_record(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Appends a new row for an unseen identifier or merges into the existing one.

    Args:
        store: The spreadsheet store to operate on.
        payload: Request body with sheetId, sheetName, data and optionally id.
    Returns:
        {'ok': True, 'created': True} or {'ok': True, 'updated': True}.
    """
    data = payload.get('data')
    if _is_blank(payload.get('sheetId')) or _is_blank(payload.get('sheetName')) or not isinstance(data, dict):
        raise BadRequestError("Missing sheetId/sheetName/data.id")
    identifier = _resolve_identifier(payload)
    if identifier is None:
        raise BadRequestError("Missing sheetId/sheetName/data.id")

    sheet_id, sheet_name = _sheet_target(payload)
    header_index = _read_header(store, sheet_id, sheet_name)
    row_idx = _locate_id_row(store, sheet_id, sheet_name, identifier)

    if row_idx is None:
        row = build_new_row(header_index, data, identifier)
        store.append_row(sheet_id, sheet_name, row)
        logger.info(f"Created record '{identifier}' in {sheet_id}/{sheet_name}.")
        return {'ok': True, 'created': True}

    row_num = row_idx + 1
    row_range = a1_range(sheet_name, f"A{row_num}:{column_letter(header_index.width)}{row_num}")
    existing = store.read_range(sheet_id, row_range)
    row = merge_row(header_index, existing[0] if existing else [], data, identifier)
    store.update_range(sheet_id, row_range, [row])
    logger.info(f"Updated record '{identifier}' at row {row_num} in {sheet_id}/{sheet_name}.")
    return {'ok': True, 'updated': True}


def delete_record(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Removes the row whose column A matches `id`."""
    _require(payload, 'sheetId', 'sheetName', 'id')
    sheet_id, sheet_name = _sheet_target(payload)
    identifier = payload['id']

    row_idx = _locate_id_row(store, sheet_id, sheet_name, identifier)
    if row_idx is None:
        raise NotFoundError("ID not found")

    gid = store.sheet_gid(sheet_id, sheet_name)
    if gid is None:
        raise NotFoundError("Sheet not found")

    store.delete_row(sheet_id, gid, row_idx)
    logger.info(f"Deleted record '{identifier}' (row {row_idx + 1}) from {sheet_id}/{sheet_name}.")
    return {'ok': True, 'deleted': True}


def update_bill_status(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Writes `stt` into the status cell of the row holding `billNumber`."""
    _require(payload, 'sheetId', 'sheetName', 'billNumber', 'stt')
    sheet_id, sheet_name = _sheet_target(payload)

    header_index = _read_header(store, sheet_id, sheet_name)
    bill_idx, status_idx = resolve_bill_columns(header_index)

    bill_letter = column_letter(bill_idx + 1)
    bill_column = store.read_range(sheet_id, a1_range(sheet_name, f"{bill_letter}:{bill_letter}"))
    row_idx = find_row_by_value(bill_column, 0, payload['billNumber'])
    if row_idx is None:
        raise NotFoundError("Bill not found")

    cell = a1_range(sheet_name, gspread.utils.rowcol_to_a1(row_idx + 1, status_idx + 1))
    store.update_range(sheet_id, cell, [[payload['stt']]])
    logger.info(f"Set STT of bill '{payload['billNumber']}' at {cell} in {sheet_id}.")
    return {'ok': True, 'updated': True}


def update_all_statuses(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Writes the status of every listed bill in a single batch update.

    Bills without a matching row are skipped silently; the response reports
    how many cells were written.
    """
    _require(payload, 'sheetId', 'sheetName')
    bills = payload.get('bills')
    if not isinstance(bills, list):
        raise BadRequestError("Missing bills")
    sheet_id, sheet_name = _sheet_target(payload)

    rows = store.read_range(sheet_id, a1_range(sheet_name))
    header_index = HeaderIndex(rows[0] if rows else [])
    bill_idx, status_idx = resolve_bill_columns(header_index)

    updates = []
    for item in bills:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object bill entry: {item!r}")
            continue
        resolver = FieldResolver(item)
        bill_number = resolver.resolve(BILL_FIELD)
        status = resolver.resolve(STATUS_FIELD)
        if bill_number is MISSING or _is_blank(bill_number) or status is MISSING:
            logger.debug(f"Skipping bill entry without bill number or status: {item}")
            continue
        row_idx = find_row_by_value(rows, bill_idx, bill_number)
        if row_idx is None:
            logger.debug(f"Bill '{bill_number}' not found in {sheet_id}/{sheet_name}, skipping.")
            continue
        updates.append({
            'range': a1_range(sheet_name, gspread.utils.rowcol_to_a1(row_idx + 1, status_idx + 1)),
            'values': [['' if status is None else status]],
        })

    if updates:
        store.batch_update_values(sheet_id, updates)
    logger.info(f"Updated STT for {len(updates)} of {len(bills)} bill(s) in {sheet_id}/{sheet_name}.")
    return {'ok': True, 'updated': len(updates)}


ACTIONS: Dict[str, Callable[[SheetStore, Dict[str, Any]], Dict[str, Any]]] = {
    'update': upsert_record,
    'delete': delete_record,
    'updateBillSTT': update_bill_status,
    'updateAllSTT': update_all_statuses,
}


# --- Entry point --- #

def handle_request(method: str, body: Any, store_factory: Optional[StoreFactory] = None) -> ReportResponse:
    """Handles one report request end to end.

    Args:
        method: The HTTP method.
        body: The decoded JSON body; anything that is not an object counts as empty.
        store_factory: Builds the SheetStore from the loaded config. Defaults to
            an authorized gspread-backed store.
    Returns:
        A ReportResponse; every response carries the CORS allow-origin header.
    """
    if (method or '').upper() == 'OPTIONS':
        return ReportResponse(200, None, dict(CORS_PREFLIGHT_HEADERS))

    payload = body if isinstance(body, dict) else {}
    action = payload.get('action')
    if _is_blank(action):
        return ReportResponse(400, {'ok': False, 'error': 'Missing action'})
    handler = ACTIONS.get(action) if isinstance(action, str) else None
    if handler is None:
        logger.warning(f"Unknown action requested: {action!r}")
        return ReportResponse(400, {'ok': False, 'error': 'Unknown action'})

    try:
        config = load_config()
        store = (store_factory or default_store_factory)(config)
        result = handler(store, payload)
        return ReportResponse(200, result)
    except ReportError as e:
        if e.status_code >= 500:
            log_error(e.message, action=action, sheet_id=payload.get('sheetId'))
        else:
            logger.info(f"Action '{action}' rejected with {e.status_code}: {e.message}")
        return ReportResponse(e.status_code, {'ok': False, 'error': e.message})
    except Exception as e:
        log_error(f"Unhandled error while processing '{action}': {e}", action=action,
                  sheet_id=payload.get('sheetId'), exc_info=True)
        return ReportResponse(500, {'ok': False, 'error': str(e)})
