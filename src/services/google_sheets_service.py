# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportMissingTypeStubs=false
"""
Google Sheets service: the tabular document store.

Every patient and the Master Index live in their own spreadsheet. This module
wraps the few Sheets API v4 operations the application needs: create a
spreadsheet, read and write ranges, append a row after the last used row,
install formulas and apply formatting requests.
"""

import logging
from typing import Any, Dict, List

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.exceptions import ExternalServiceError
from utils.google_errors import http_error_message, http_error_status
from utils.sheet_links import row_range_a1

logger = logging.getLogger(__name__)


class GoogleSheetsError(ExternalServiceError):
    """Custom exception for Google Sheets API errors."""
    pass


class GoogleSheetsService:
    """
    Service for Google Sheets API operations.

    Reads return formulas rather than their rendered values, and date cells
    as serial numbers, so that stored representations round-trip unchanged.
    """

    SPREADSHEET_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"

    def __init__(self, credentials: Any) -> None:
        try:
            self.service = build('sheets', 'v4', credentials=credentials, cache_discovery=False)
        except Exception as e:
            raise GoogleSheetsError(f"Failed to initialize Google Sheets service: {e}")

    def spreadsheet_url(self, spreadsheet_id: str) -> str:
        return self.SPREADSHEET_URL_TEMPLATE.format(spreadsheet_id=spreadsheet_id)

    def create_spreadsheet(self, title: str) -> str:
        """
        Create an empty spreadsheet.

        Args:
            title: Spreadsheet title

        Returns:
            The new spreadsheet's id

        Raises:
            GoogleSheetsError: If creation fails
        """
        try:
            spreadsheet = self.service.spreadsheets().create(
                body={'properties': {'title': title}},
                fields='spreadsheetId',
            ).execute()
        except HttpError as e:
            raise GoogleSheetsError(f"Failed to create spreadsheet '{title}': {http_error_message(e)}")
        except Exception as e:
            raise GoogleSheetsError(f"Unexpected error creating spreadsheet '{title}': {e}")

        spreadsheet_id = spreadsheet['spreadsheetId']
        logger.info(f"Created spreadsheet {spreadsheet_id} ('{title}')")
        return spreadsheet_id

    def get_values(self, spreadsheet_id: str, range_a1: str) -> List[List[Any]]:
        """
        Read a range.

        Returns:
            Rows of cell values; trailing blank rows and cells are omitted

        Raises:
            GoogleSheetsError: If the read fails
        """
        try:
            response = self.service.spreadsheets().values().get(
                spreadsheetId=spreadsheet_id,
                range=range_a1,
                valueRenderOption='FORMULA',
                dateTimeRenderOption='SERIAL_NUMBER',
            ).execute()
        except HttpError as e:
            if http_error_status(e) == 404:
                raise GoogleSheetsError(f"Spreadsheet {spreadsheet_id} not found")
            raise GoogleSheetsError(f"Failed to read {range_a1} of {spreadsheet_id}: {http_error_message(e)}")
        except Exception as e:
            raise GoogleSheetsError(f"Unexpected error reading {range_a1} of {spreadsheet_id}: {e}")

        return response.get('values', [])

    def update_values(
        self,
        spreadsheet_id: str,
        range_a1: str,
        rows: List[List[Any]],
        user_entered: bool = False,
    ) -> None:
        """
        Write rows into a range.

        Args:
            spreadsheet_id: Target spreadsheet
            range_a1: Target range
            rows: Cell values
            user_entered: Parse values as if typed (needed for formulas);
                otherwise they are stored as given

        Raises:
            GoogleSheetsError: If the write fails
        """
        try:
            self.service.spreadsheets().values().update(
                spreadsheetId=spreadsheet_id,
                range=range_a1,
                valueInputOption='USER_ENTERED' if user_entered else 'RAW',
                body={'values': rows},
            ).execute()
        except HttpError as e:
            raise GoogleSheetsError(f"Failed to write {range_a1} of {spreadsheet_id}: {http_error_message(e)}")
        except Exception as e:
            raise GoogleSheetsError(f"Unexpected error writing {range_a1} of {spreadsheet_id}: {e}")

    def get_last_row(self, spreadsheet_id: str, first_column: str, last_column: str) -> int:
        """Number of the last row holding any value in the given columns (0 if none)."""
        values = self.get_values(spreadsheet_id, f"{first_column}:{last_column}")
        return len(values)

    def append_row(
        self,
        spreadsheet_id: str,
        row: List[Any],
        first_column: str,
        last_column: str,
        min_row: int = 1,
    ) -> int:
        """
        Write a row immediately after the last used row.

        Args:
            spreadsheet_id: Target spreadsheet
            row: Cell values
            first_column: First column of the row
            last_column: Last column of the row
            min_row: Lowest row number the row may be written to

        Returns:
            The row number written
        """
        target_row = max(self.get_last_row(spreadsheet_id, first_column, last_column) + 1, min_row)
        self.update_values(spreadsheet_id, row_range_a1(first_column, last_column, target_row), [row])
        logger.debug(f"Appended row {target_row} to {spreadsheet_id}")
        return target_row

    def set_formula(self, spreadsheet_id: str, cell_a1: str, formula: str) -> None:
        """Install a formula into a single cell."""
        self.update_values(spreadsheet_id, cell_a1, [[formula]], user_entered=True)

    def batch_update(self, spreadsheet_id: str, requests: List[Dict[str, Any]]) -> None:
        """
        Apply formatting/structure requests (spreadsheets.batchUpdate).

        Raises:
            GoogleSheetsError: If the update fails
        """
        if not requests:
            return
        try:
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=spreadsheet_id,
                body={'requests': requests},
            ).execute()
        except HttpError as e:
            raise GoogleSheetsError(f"Failed to update spreadsheet {spreadsheet_id}: {http_error_message(e)}")
        except Exception as e:
            raise GoogleSheetsError(f"Unexpected error updating spreadsheet {spreadsheet_id}: {e}")
