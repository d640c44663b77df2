"""Shared pytest configuration for unit tests."""
from unittest.mock import Mock, patch

import pytest

from jdc_portal.models.installation_model import CommitResult
from jdc_portal.models.sectors import TERMINAL_STATUS


def make_doc(doc_id, data):
    """Mock Firestore document snapshot."""
    doc = Mock()
    doc.id = doc_id
    doc.exists = True
    doc.to_dict = Mock(return_value=dict(data))
    return doc


def chr_row(code_client="", nom="", ville="", telephone="", commercial="", tech="", date_install="", **extra):
    """Build a chr sheet row using the chr column layout."""
    row = [""] * 22
    row[3] = code_client
    row[4] = nom
    row[5] = ville
    row[6] = telephone
    row[7] = commercial
    row[12] = tech
    row[13] = date_install
    for index, value in extra.get("cells", {}).items():
        row[index] = value
    return row


class FakeStore:
    """In-memory stand-in for InstallationModel."""

    def __init__(self, records=None):
        self.records = {}
        self.created = []
        self.commits = []
        self.fail_commit = None
        self._next_id = 1
        for record in records or []:
            self.records[record["id"]] = dict(record)

    def get_by_sector(self, sector):
        installations = {}
        for record in self.records.values():
            if record.get("secteur") == sector and record.get("codeClient") not in installations:
                installations[record["codeClient"]] = dict(record)
        return installations

    def create(self, data):
        doc_id = f"new{self._next_id}"
        self._next_id += 1
        self.records[doc_id] = dict(data, id=doc_id)
        self.created.append(doc_id)
        return doc_id

    def commit(self, updates, terminations, max_operations=490):
        if self.fail_commit is not None:
            raise self.fail_commit
        self.commits.append((list(updates), list(terminations)))
        for op in updates:
            self.records[op["id"]].update(op["patch"])
        for op in terminations:
            self.records[op["id"]]["status"] = TERMINAL_STATUS
        return CommitResult(updated=len(updates), terminated=len(terminations))


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def mock_db():
    """Create a fresh mock Firestore database for each test.

    Tests override behaviour by setting return values directly, e.g.
        mock_db.collection.return_value.stream.return_value = [make_doc(...)]
    """
    mock_db = Mock()

    mock_collection = Mock()
    mock_doc_ref = Mock()
    mock_doc_ref.id = "mock_doc_id"

    mock_collection.document = Mock(return_value=mock_doc_ref)
    mock_collection.add = Mock(return_value=(None, mock_doc_ref))
    mock_collection.stream = Mock(return_value=[])

    # where() returns the collection itself to allow chaining
    mock_collection.where = Mock(return_value=mock_collection)

    mock_db.collection = Mock(return_value=mock_collection)
    mock_db.batch = Mock(return_value=Mock())

    return mock_db


@pytest.fixture
def app():
    """Flask app with Firebase initialisation disabled."""
    from jdc_portal import app as app_module

    with patch.object(app_module, "init_firebase", return_value=False):
        test_app = app_module.create_app()
    test_app.config["TESTING"] = True
    return test_app


@pytest.fixture
def client(app):
    return app.test_client()
