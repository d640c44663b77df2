"""Read-only Google Sheets access for the installation sync."""
import logging
from typing import Any, Dict, List

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from jdc_portal.errors import SheetsFetchError, SheetsNotFoundError, SheetsPermissionError

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


def _http_status(exc: HttpError) -> int:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(getattr(exc, "resp", None), "status", 0)
    try:
        return int(status)
    except (TypeError, ValueError):
        return 0


def row_values(row_data: Dict[str, Any]) -> List[str]:
    """Flatten a grid-data row into its cells' formatted values."""
    return [cell.get("formattedValue") or "" for cell in row_data.get("values") or []]


class SheetsClient:
    """Thin wrapper over the Sheets v4 API"""

    def __init__(self, credentials=None, service=None, use_grid_data: bool = True):
        if service is None:
            service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        self.service = service
        self.use_grid_data = use_grid_data

    def _translate(self, exc: HttpError, spreadsheet_id: str, range_spec: str) -> SheetsFetchError:
        status = _http_status(exc)
        if status == 403:
            return SheetsPermissionError(
                f"Permission denied for spreadsheet {spreadsheet_id}.",
                spreadsheet_id=spreadsheet_id, status=status,
            )
        if status == 404:
            return SheetsNotFoundError(
                f"Spreadsheet not found (ID: {spreadsheet_id}, Range: {range_spec}).",
                spreadsheet_id=spreadsheet_id, status=status,
            )
        return SheetsFetchError(
            f"Failed to read Google Sheet data: {exc}",
            spreadsheet_id=spreadsheet_id, status=status,
        )

    def get_values(self, spreadsheet_id: str, range_spec: str) -> List[List[str]]:
        """Cell values of a range as display strings, one list per row"""
        logger.info(f"Reading sheet {spreadsheet_id} range {range_spec}")
        try:
            response = self.service.spreadsheets().values().get(
                spreadsheetId=spreadsheet_id,
                range=range_spec,
                valueRenderOption="FORMATTED_VALUE",
            ).execute()
        except HttpError as exc:
            raise self._translate(exc, spreadsheet_id, range_spec) from exc
        return response.get("values", [])

    def get_row_data(self, spreadsheet_id: str, range_spec: str) -> List[Dict[str, Any]]:
        """Grid data rows of a range, with per-cell formatted and effective values"""
        logger.info(f"Reading grid data of sheet {spreadsheet_id} range {range_spec}")
        try:
            response = self.service.spreadsheets().get(
                spreadsheetId=spreadsheet_id,
                ranges=[range_spec],
                includeGridData=True,
            ).execute()
        except HttpError as exc:
            raise self._translate(exc, spreadsheet_id, range_spec) from exc

        sheets = response.get("sheets") or []
        if not sheets or not sheets[0].get("data"):
            logger.warning(f"No row data in the response for spreadsheet {spreadsheet_id}")
            return []
        return sheets[0]["data"][0].get("rowData") or []

    def fetch(self, spreadsheet_id: str, range_spec: str) -> List[List[str]]:
        """Rows used by the sync: formatted strings per cell"""
        if self.use_grid_data:
            return [row_values(row) for row in self.get_row_data(spreadsheet_id, range_spec)]
        return self.get_values(spreadsheet_id, range_spec)
