"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a storage backend because:
1. Small-business owners can see that their books exist and are backed up
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each tenant occupies one row: tenant id, version, last update and the
dataset serialized as JSON.

TRADEOFFS:
- A cell holds at most 50,000 characters, so this suits small ledgers only
- The version check is read-then-write, which narrows but does not fully
  close the race between two writers in different processes
"""

from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_core.config import get_settings
from finance_core.models.common import utc_now
from finance_core.models.tenant import TenantFinanceData
from finance_core.services.storage.interface import (
    ConcurrentModificationError,
    FinanceStoreInterface,
    StorageError,
    StoreConnectionError,
    new_tenant_finance,
)


# Column mappings for the tenant finance sheet
FINANCE_COLUMNS = [
    "tenant_id",
    "version",
    "updated_at",
    "data_json",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

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
                raise StoreConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StoreConnectionError(f"Failed to connect to Google Sheets: {e}")

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
                raise StoreConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_finance_sheet(self) -> gspread.Worksheet:
        """Get or create the tenant finance worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.finance_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.finance_sheet_name,
                rows=1000,
                cols=len(FINANCE_COLUMNS),
            )
            sheet.append_row(FINANCE_COLUMNS)
        return sheet


class GoogleSheetsFinanceStore(FinanceStoreInterface):
    """
    Google Sheets implementation of the tenant dataset store.

    Transient API failures are retried here, at the storage boundary.
    Version conflicts are never retried: the caller must reload.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, rows: list[list[str]], tenant_id: str) -> tuple[Optional[int], Optional[list[str]]]:
        """Return (sheet row number, row values) for a tenant, skipping the header."""
        for idx, row in enumerate(rows[1:], start=2):  # Row 1 is the header
            if row and row[0] == tenant_id:
                return idx, row
        return None, None

    @retry(
        retry=retry_if_exception_type(StorageError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def load_tenant_finance(self, tenant_id: str) -> TenantFinanceData:
        try:
            sheet = self._client.get_finance_sheet()
            _, row = self._find_row(sheet.get_all_values(), tenant_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to load tenant finance: {e}")

        if row is None or len(row) < 4 or not row[3]:
            return new_tenant_finance(tenant_id)

        data = TenantFinanceData.model_validate_json(row[3])
        # The version column is authoritative
        return data.model_copy(update={"version": int(row[1] or 0)})

    @retry(
        retry=(
            retry_if_exception_type(StorageError)
            & retry_if_not_exception_type(ConcurrentModificationError)
        ),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def save_tenant_finance(self, tenant_id: str, data: TenantFinanceData) -> None:
        try:
            sheet = self._client.get_finance_sheet()
            row_number, row = self._find_row(sheet.get_all_values(), tenant_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read tenant finance before save: {e}")

        stored_version = int(row[1] or 0) if row else 0
        if data.version != stored_version:
            raise ConcurrentModificationError(tenant_id, data.version, stored_version)

        new_version = stored_version + 1
        saved = data.model_copy(update={"version": new_version})
        new_row = [
            tenant_id,
            str(new_version),
            utc_now().isoformat(),
            saved.model_dump_json(),
        ]

        try:
            if row_number is None:
                sheet.append_row(new_row, value_input_option="RAW")
            else:
                # One range write so the version and data never diverge
                sheet.update(
                    range_name=f"A{row_number}:D{row_number}",
                    values=[new_row],
                    value_input_option="RAW",
                )
        except Exception as e:
            raise StorageError(f"Failed to save tenant finance: {e}")
