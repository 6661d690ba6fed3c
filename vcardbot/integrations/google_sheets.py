"""Google Sheets values API, wrapped as an async range-addressable store.

The API client is blocking, so every call runs in a worker thread. A lock
keeps calls one-at-a-time: the httplib2 transport underneath is not
thread-safe.
"""

import json
import asyncio
import logging
import threading

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from vcardbot.core.errors import RemoteStoreFailure

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

log = logging.getLogger(__name__)


def column_range(sheet, column):
    """Whole column, e.g. `'DB CUAN'!A:A`."""
    return f"{quote_sheet(sheet)}!{column}:{column}"


def cell(sheet, column, row):
    return f"{quote_sheet(sheet)}!{column}{row}"


def row_range(sheet, row, first_column="A", last_column="C"):
    return f"{quote_sheet(sheet)}!{first_column}{row}:{last_column}{row}"


def open_range(sheet, first_column, first_row, last_column):
    """From a starting row down to the last row with data, e.g. `REPORT!A2:C`."""
    return f"{quote_sheet(sheet)}!{first_column}{first_row}:{last_column}"


def quote_sheet(sheet):
    if sheet.replace("_", "").isalnum():
        return sheet
    return "'" + sheet.replace("'", "''") + "'"


def load_credentials(credentials_json="", credentials_path=""):
    """Service-account credentials from an inline JSON string or a key file."""
    if credentials_json:
        info = json.loads(credentials_json)
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    if credentials_path:
        return service_account.Credentials.from_service_account_file(credentials_path, scopes=SCOPES)
    raise ValueError("Set GOOGLE_CREDENTIALS or GOOGLE_CREDENTIALS_PATH")


class GoogleSheetsStore:
    def __init__(self, spreadsheet_id, credentials):
        self.spreadsheet_id = spreadsheet_id
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        self._values = service.spreadsheets().values()
        self._lock = threading.Lock()

    async def read_range(self, range_spec):
        response = await self._call(
            "get",
            self._values.get(spreadsheetId=self.spreadsheet_id, range=range_spec),
        )
        return response.get("values", [])

    async def clear_range(self, range_spec):
        await self._call(
            "clear",
            self._values.clear(spreadsheetId=self.spreadsheet_id, range=range_spec, body={}),
        )

    async def append_rows(self, range_spec, rows):
        await self._call(
            "append",
            self._values.append(
                spreadsheetId=self.spreadsheet_id,
                range=range_spec,
                valueInputOption="RAW",
                body={"values": rows},
            ),
        )

    async def update_range(self, range_spec, rows):
        await self._call(
            "update",
            self._values.update(
                spreadsheetId=self.spreadsheet_id,
                range=range_spec,
                valueInputOption="RAW",
                body={"values": rows},
            ),
        )

    async def _call(self, op, request):
        try:
            return await asyncio.to_thread(self._execute, request)
        except (HttpError, GoogleAuthError, OSError) as e:
            log.error(f"[sheets] {op} failed: {e}")
            raise RemoteStoreFailure(f"sheets {op} failed: {e}") from e

    def _execute(self, request):
        with self._lock:
            return request.execute()
