"""Tests for the /api/installations read endpoints"""
from unittest.mock import patch

import pytest

from jdc_portal.models.sectors import STATUS_AWAITING, STATUS_SCHEDULED


@pytest.fixture
def mock_model():
    with patch("jdc_portal.api.installations.firestore"), \
         patch("jdc_portal.api.installations.InstallationModel") as model_cls:
        yield model_cls.return_value


class TestListSectorInstallations:

    def test_list(self, client, mock_model):
        mock_model.list_by_sector.return_value = [
            {"id": "a", "codeClient": "C1", "secteur": "chr", "status": STATUS_AWAITING},
        ]

        response = client.get("/api/installations/chr")

        assert response.status_code == 200
        data = response.get_json()
        assert data["secteur"] == "chr"
        assert data["count"] == 1
        assert data["installations"][0]["codeClient"] == "C1"
        mock_model.list_by_sector.assert_called_once_with("chr", status=None)

    def test_sector_is_case_insensitive(self, client, mock_model):
        mock_model.list_by_sector.return_value = []
        response = client.get("/api/installations/HACCP")
        assert response.status_code == 200
        assert response.get_json()["secteur"] == "haccp"

    def test_status_filter(self, client, mock_model):
        mock_model.list_by_sector.return_value = []

        response = client.get("/api/installations/tabac", query_string={"status": STATUS_SCHEDULED})

        assert response.status_code == 200
        mock_model.list_by_sector.assert_called_once_with("tabac", status=STATUS_SCHEDULED)

    def test_invalid_status(self, client, mock_model):
        response = client.get("/api/installations/tabac?status=done")

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_ERROR"
        mock_model.list_by_sector.assert_not_called()

    def test_unknown_sector(self, client, mock_model):
        response = client.get("/api/installations/boulangerie")

        assert response.status_code == 404
        data = response.get_json()
        assert data["code"] == "NOT_FOUND"
        assert data["error"] == "Sector 'boulangerie' not found"


class TestSnapshot:

    def test_all_sectors(self, client, mock_model):
        mock_model.snapshot.return_value = {"total": 0, "byStatus": {}, "bySector": {}}

        response = client.get("/api/installations/snapshot")

        assert response.status_code == 200
        assert response.get_json()["total"] == 0
        mock_model.snapshot.assert_called_once_with(None)

    def test_selected_sectors(self, client, mock_model):
        mock_model.snapshot.return_value = {"total": 0, "byStatus": {}, "bySector": {}}

        client.get("/api/installations/snapshot?sectors=chr,Kezia")

        mock_model.snapshot.assert_called_once_with(["chr", "kezia"])

    def test_unknown_sector(self, client, mock_model):
        response = client.get("/api/installations/snapshot?sectors=chr,bakery")

        assert response.status_code == 404
        assert response.get_json()["error"] == "Sector 'bakery' not found"
        mock_model.snapshot.assert_not_called()
