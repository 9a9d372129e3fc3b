import asyncio
from collections.abc import Callable
from typing import Protocol

import gspread
from google.auth.exceptions import GoogleAuthError
from loguru import logger

from expense_bot.models.schemas import (
    LEDGER_COLUMNS,
    AppendResult,
    AppendStatus,
    ExpenseRecord,
)

SHEET_URL = "https://docs.google.com/spreadsheets/d/{}/edit?usp=sharing"
HEADER_RANGE = f"A1:{chr(ord('A') + len(LEDGER_COLUMNS) - 1)}1"
DATA_RANGE = f"A2:{chr(ord('A') + len(LEDGER_COLUMNS) - 1)}"
HEADER_FORMAT = {
    "textFormat": {"bold": True},
    "backgroundColor": {"red": 0.8, "green": 0.9, "blue": 1.0},
}

AUTH_ERRORS = (OSError, ValueError, GoogleAuthError)


class LedgerGateway(Protocol):
    async def initialize(self) -> bool: ...

    async def append(self, record: ExpenseRecord) -> AppendResult: ...


class LedgerAuthError(Exception):
    """Raised internally when service-account credentials cannot be used."""


class SheetsLedger:
    """Google Sheets ledger, one row per expense.

    gspread is synchronous, so every call is pushed to a worker thread.
    Authorization happens on first use and is retried until it succeeds.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_path: str = "credentials.json",
        sheet_name: str = "Expenses",
        client_factory: Callable[..., gspread.Client] = gspread.service_account,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_path = credentials_path
        self.sheet_name = sheet_name
        self._client_factory = client_factory
        self._client: gspread.Client | None = None

    @property
    def sheet_url(self) -> str | None:
        if not self.spreadsheet_id:
            return None
        return SHEET_URL.format(self.spreadsheet_id)

    def _authorize(self) -> gspread.Client:
        if self._client is None:
            try:
                self._client = self._client_factory(filename=self.credentials_path)
            except AUTH_ERRORS as e:
                raise LedgerAuthError(str(e)) from e
        return self._client

    def _spreadsheet(self) -> gspread.Spreadsheet:
        return self._authorize().open_by_key(self.spreadsheet_id)

    def _initialize(self) -> None:
        spreadsheet = self._spreadsheet()
        titles = [ws.title for ws in spreadsheet.worksheets()]
        if self.sheet_name in titles:
            worksheet = spreadsheet.worksheet(self.sheet_name)
        else:
            worksheet = spreadsheet.add_worksheet(
                title=self.sheet_name, rows=1000, cols=len(LEDGER_COLUMNS)
            )
            logger.info("Created new sheet: {}", self.sheet_name)

        worksheet.update(
            values=[LEDGER_COLUMNS],
            range_name=HEADER_RANGE,
            value_input_option="USER_ENTERED",
        )
        worksheet.format(HEADER_RANGE, HEADER_FORMAT)

    def _append(self, row: list) -> str | None:
        worksheet = self._spreadsheet().worksheet(self.sheet_name)
        response = worksheet.append_row(
            row,
            value_input_option="USER_ENTERED",
            insert_data_option="INSERT_ROWS",
            table_range=DATA_RANGE,
        )
        return (response or {}).get("updates", {}).get("updatedRange")

    async def initialize(self) -> bool:
        """Make sure the worksheet exists and carries the header row."""
        try:
            await asyncio.to_thread(self._initialize)
        except (LedgerAuthError, GoogleAuthError, gspread.exceptions.GSpreadException, OSError) as e:
            logger.error("Error initializing sheet: {}", e)
            return False
        logger.info("Sheet initialized with headers")
        return True

    async def append(self, record: ExpenseRecord) -> AppendResult:
        try:
            updated_range = await asyncio.to_thread(self._append, record.to_row())
        except (LedgerAuthError, GoogleAuthError) as e:
            logger.error("Ledger authorization failed: {}", e)
            return AppendResult(status=AppendStatus.AUTH_FAILED, error=str(e))
        except (gspread.exceptions.GSpreadException, OSError) as e:
            logger.error("Error appending to sheet: {}", e)
            return AppendResult(status=AppendStatus.APPEND_FAILED, error=str(e))

        logger.info("Data appended: {}", updated_range)
        return AppendResult(status=AppendStatus.OK, updated_range=updated_range)
