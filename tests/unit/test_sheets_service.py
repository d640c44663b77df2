"""Unit tests for jdc_portal/services/sheets_service.py"""
from unittest.mock import Mock, patch

import pytest
from googleapiclient.errors import HttpError

from jdc_portal.errors import SheetsFetchError, SheetsNotFoundError, SheetsPermissionError
from jdc_portal.services.sheets_service import SheetsClient, row_values


def http_error(status, reason="error"):
    content = b'{"error": {"message": "%s"}}' % reason.encode()
    return HttpError(Mock(status=status, reason=reason), content)


@pytest.fixture
def service():
    return Mock()


def values_request(service):
    return service.spreadsheets.return_value.values.return_value.get.return_value


def grid_request(service):
    return service.spreadsheets.return_value.get.return_value


class TestGetValues:

    def test_returns_rows(self, service):
        values_request(service).execute.return_value = {"values": [["a", "b"], ["c"]]}

        rows = SheetsClient(service=service).get_values("sheet-id", "EN COURS!A2:Z")

        assert rows == [["a", "b"], ["c"]]
        service.spreadsheets.return_value.values.return_value.get.assert_called_once_with(
            spreadsheetId="sheet-id",
            range="EN COURS!A2:Z",
            valueRenderOption="FORMATTED_VALUE",
        )

    def test_empty_range(self, service):
        values_request(service).execute.return_value = {"range": "EN COURS!A2:Z1000"}
        assert SheetsClient(service=service).get_values("sheet-id", "EN COURS!A2:Z") == []

    def test_permission_denied(self, service):
        values_request(service).execute.side_effect = http_error(403, "Forbidden")

        with pytest.raises(SheetsPermissionError) as exc:
            SheetsClient(service=service).get_values("sheet-id", "EN COURS!A2:Z")

        assert str(exc.value) == "Permission denied for spreadsheet sheet-id."
        assert exc.value.status == 403
        assert exc.value.spreadsheet_id == "sheet-id"

    def test_not_found(self, service):
        values_request(service).execute.side_effect = http_error(404, "Not Found")

        with pytest.raises(SheetsNotFoundError) as exc:
            SheetsClient(service=service).get_values("sheet-id", "EN COURS!A2:Z")

        assert str(exc.value) == "Spreadsheet not found (ID: sheet-id, Range: EN COURS!A2:Z)."

    def test_other_http_errors(self, service):
        values_request(service).execute.side_effect = http_error(500, "Backend Error")

        with pytest.raises(SheetsFetchError) as exc:
            SheetsClient(service=service).get_values("sheet-id", "EN COURS!A2:Z")

        assert not isinstance(exc.value, (SheetsPermissionError, SheetsNotFoundError))
        assert exc.value.status == 500
        assert str(exc.value).startswith("Failed to read Google Sheet data")


class TestGetRowData:

    def test_returns_row_data(self, service):
        row = {"values": [{"formattedValue": "C1"}, {}]}
        grid_request(service).execute.return_value = {"sheets": [{"data": [{"rowData": [row]}]}]}

        rows = SheetsClient(service=service).get_row_data("sheet-id", "EN COURS!A2:Z")

        assert rows == [row]
        service.spreadsheets.return_value.get.assert_called_once_with(
            spreadsheetId="sheet-id", ranges=["EN COURS!A2:Z"], includeGridData=True,
        )

    @pytest.mark.parametrize("response", [{}, {"sheets": []}, {"sheets": [{"data": []}]}, {"sheets": [{"data": [{}]}]}])
    def test_empty_responses(self, service, response):
        grid_request(service).execute.return_value = response
        assert SheetsClient(service=service).get_row_data("sheet-id", "EN COURS!A2:Z") == []

    def test_errors_translated(self, service):
        grid_request(service).execute.side_effect = http_error(403, "Forbidden")
        with pytest.raises(SheetsPermissionError):
            SheetsClient(service=service).get_row_data("sheet-id", "EN COURS!A2:Z")


class TestFetch:

    def test_reads_grid_data_by_default(self, service):
        grid_request(service).execute.return_value = {"sheets": [{"data": [{"rowData": [
            {"values": [{"formattedValue": "05/03/2024"}, {}, {"formattedValue": "C1"}]},
            {},
        ]}]}]}

        rows = SheetsClient(service=service).fetch("sheet-id", "EN COURS!A2:Z")

        assert rows == [["05/03/2024", "", "C1"], []]
        service.spreadsheets.return_value.values.assert_not_called()

    def test_values_api_when_grid_data_disabled(self, service):
        values_request(service).execute.return_value = {"values": [["a"]]}

        rows = SheetsClient(service=service, use_grid_data=False).fetch("sheet-id", "EN COURS!A2:Z")

        assert rows == [["a"]]
        service.spreadsheets.return_value.get.assert_not_called()

    def test_errors_translated(self, service):
        grid_request(service).execute.side_effect = http_error(404, "Not Found")
        with pytest.raises(SheetsNotFoundError):
            SheetsClient(service=service).fetch("sheet-id", "EN COURS!A2:Z")


class TestHelpers:

    def test_row_values_uses_formatted_value(self):
        row = {"values": [{"formattedValue": "C1"}, {"effectiveValue": {"numberValue": 4}}, {"formattedValue": "12/06"}]}
        assert row_values(row) == ["C1", "", "12/06"]

    def test_row_values_empty_row(self):
        assert row_values({}) == []

    @patch("jdc_portal.services.sheets_service.build")
    def test_builds_service_from_credentials(self, mock_build):
        creds = Mock()
        client = SheetsClient(credentials=creds)

        mock_build.assert_called_once_with("sheets", "v4", credentials=creds, cache_discovery=False)
        assert client.service is mock_build.return_value
