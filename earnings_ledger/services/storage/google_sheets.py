"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets can back the ledger because:
1. The user can look at their raw data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each key is one row of a worksheet:

    key | updated_at | chunk_count | value_json | value_json (cont.) | ...

A list of a few hundred records serializes past the per-cell limit, so
the JSON text is split across consecutive cells and joined on read.

TRADEOFFS:
- No transactions: save_many writes keys one by one, in order
  (supports_atomic_writes is False, the ledger orders its writes)
- Every read fetches the whole sheet (fine for a handful of keys)
- Rows widen as values grow; the sheet gains columns on demand
"""

import json
from datetime import datetime
from typing import Any, Optional

import gspread
from gspread.utils import rowcol_to_a1
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from earnings_ledger.config import GoogleSheetsSettings, get_settings
from earnings_ledger.services.storage.interface import (
    ConnectionError,
    CorruptDataError,
    KeyValueStoreInterface,
    Scalar,
    StorageError,
)


# Column layout of the key/value worksheet. The JSON text of a value is
# split across value_json and as many cells to its right as it needs.
STORE_COLUMNS = [
    "key",
    "updated_at",
    "chunk_count",
    "value_json",
]
VALUE_START_COLUMN = STORE_COLUMNS.index("value_json")

# Google Sheets rejects cells longer than 50,000 characters
CELL_CHAR_LIMIT = 50_000
CHUNK_SIZE = 45_000


def split_value(text: str, size: int = CHUNK_SIZE) -> list[str]:
    """Cut serialized JSON into cell-sized pieces (at least one)."""
    return [text[i:i + size] for i in range(0, len(text), size)] or [""]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_store_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.store_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.store_sheet_name,
                rows=100,
                cols=len(STORE_COLUMNS),
            )
            sheet.append_row(STORE_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStoreInterface):
    """
    Google Sheets implementation of the key-value store.

    Values are JSON-serialized and split across the value cells of a row.
    """

    supports_atomic_writes = False

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> tuple[Optional[int], Optional[list]]:
        """Return (1-based row number, row values) for `key`, skipping the header."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == key:
                return idx, row
        return None, None

    def _load(self, key: str) -> Any:
        try:
            sheet = self._client.get_store_sheet()
            _, row = self._find_row(sheet, key)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read '{key}': {e}")

        if row is None or len(row) <= VALUE_START_COLUMN:
            return None
        try:
            chunk_count = int(row[VALUE_START_COLUMN - 1])
        except ValueError:
            raise CorruptDataError(f"Row for '{key}' has no valid chunk count")

        chunks = row[VALUE_START_COLUMN:VALUE_START_COLUMN + chunk_count]
        if len(chunks) < chunk_count:
            raise CorruptDataError(f"Row for '{key}' is missing value cells")
        text = "".join(chunks)
        if text == "":
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Value under '{key}' is not valid JSON: {e}")

    def _save(self, key: str, value: Any) -> bool:
        try:
            sheet = self._client.get_store_sheet()
            row_idx, old_row = self._find_row(sheet, key)

            chunks = split_value(json.dumps(value, ensure_ascii=False))
            new_row = [key, datetime.utcnow().isoformat(), str(len(chunks))] + chunks
            if old_row is not None and len(old_row) > len(new_row):
                # Blank the cells a longer previous value used
                new_row += [""] * (len(old_row) - len(new_row))

            if sheet.col_count < len(new_row):
                sheet.add_cols(len(new_row) - sheet.col_count)

            if row_idx is None:
                sheet.append_row(new_row, value_input_option="RAW")
            else:
                end = rowcol_to_a1(row_idx, len(new_row))
                sheet.update(
                    range_name=f"A{row_idx}:{end}",
                    values=[new_row],
                    value_input_option="RAW",
                )
            return True
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save '{key}': {e}")

    def load_list(self, key: str) -> list:
        value = self._load(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise CorruptDataError(f"Value under '{key}' is not a list")
        return value

    def save_list(self, key: str, records: list) -> bool:
        return self._save(key, list(records))

    def load_scalar(self, key: str) -> Optional[Scalar]:
        return self._load(key)

    def save_scalar(self, key: str, value: Scalar) -> bool:
        return self._save(key, value)

    def remove(self, key: str) -> bool:
        try:
            sheet = self._client.get_store_sheet()
            row_idx, _ = self._find_row(sheet, key)
            if row_idx is None:
                return False
            sheet.delete_rows(row_idx)
            return True
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to remove '{key}': {e}")
