# tests/conftest.py
from typing import Dict, List, Mapping, Tuple

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_row_source
from sheetsdash.settings import Settings, get_settings


ALERTS_SHEET = "alerts-sheet"
ISSUES_SHEET = "issues-sheet"


class FakeRowSource:
    """In-memory stand-in for SheetsClient keyed by (spreadsheet_id, range)."""

    def __init__(self, sources: Dict[Tuple[str, str], object]):
        self.sources = sources
        self.calls: List[Tuple[str, str]] = []

    def fetch(self, spreadsheet_id: str, range_name: str) -> List[Mapping[str, str]]:
        self.calls.append((spreadsheet_id, range_name))
        result = self.sources.get((spreadsheet_id, range_name), [])
        if isinstance(result, Exception):
            raise result
        return result


def make_settings(**overrides) -> Settings:
    base = {
        "google_sheets_api_key": "test-key",
        "alerts_spreadsheet_id": ALERTS_SHEET,
        "issues_spreadsheet_id": ISSUES_SHEET,
        "max_retries": 1,
        "backoff_initial_seconds": 0.0,
    }
    base.update(overrides)
    return Settings(**base)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def sample_sources():
    return {
        (ALERTS_SHEET, "Alert_Tracking!A:Z"): [
            {"Date": "2024-01-05", "Client Name": "Acme", "Alert Type": "L2"},
            {"Date": "2024-01-20", "Client Name": "Acme", "Alert Type": "L2"},
            {"Date": "2024-02-01", "Client Name": "Globex", "Alert Type": "L1"},
            {"Date": "2024-02-03", "Client Name": "Globex", "Alert Type": "No L2 alerts found"},
            {"Date": "2024-02-04", "Client Name": "Globex", "Alert Type": ""},
        ],
        (ALERTS_SHEET, "Misalignment_Tracking!A:Z"): [
            {"Date": "2024-01-02", "Client Name": "Acme", "Count": "3"},
            {"Date": "2024-01-09", "Client Name": "", "Count": "2"},
            {"Date": "2024-03-01", "Client Name": "Globex", "Count": "n/a"},
            {"Date": "", "Client Name": "Globex", "Count": "7"},
        ],
        (ISSUES_SHEET, "Issues- Realtime!A:Z"): [
            {
                "Timestamp Issues Raised": "2024-01-01T00:00:00Z",
                "Timestamp Issues Resolved": "2024-01-01T05:30:00Z",
                "Clients": "Acme",
                "Sub-request": "Historical Video Request",
            },
            {
                "Timestamp Issues Raised": "2024-01-10T00:00:00Z",
                "Timestamp Issues Resolved": "2024-02-02T00:00:00Z",
                "Clients": "Globex",
                "Sub-request": "Live feed",
            },
            {
                "Timestamp Issues Raised": "2024-01-15T00:00:00Z",
                "Timestamp Issues Resolved": "",
                "Clients": "",
                "Sub-request": "Historical Video Request - urgent",
            },
        ],
    }


@pytest.fixture
def row_source(sample_sources):
    return FakeRowSource(sample_sources)


@pytest.fixture
def client(row_source, settings):
    app.dependency_overrides[get_row_source] = lambda: row_source
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
