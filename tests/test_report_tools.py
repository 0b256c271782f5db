# Salesforce Reports MCP Server
# File: tests/test_report_tools.py
# Version: v1

"""Tests for the report handlers in tools.reports.

These tests patch `_make_metadata_client` so that we never talk to a real
Salesforce org. All behaviour is verified against simple fake clients.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Optional

import pytest

from salesforce_reports_mcp.connection import SalesforceConnection
from salesforce_reports_mcp.errors import MetadataError
from salesforce_reports_mcp.tools import reports


CONN = SalesforceConnection(instance_url="https://example.my.salesforce.com", access_token="TOKEN")


def _run(coro):
    """Helper to run async coroutines in plain pytest tests."""
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# salesforce_read_report
# ---------------------------------------------------------------------------


class _FakeReadClient:
    """Fake client that only implements retrieve_metadata."""

    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload
        self.calls: List[tuple] = []

    async def retrieve_metadata(self, metadata_type: str, full_name: str) -> Dict[str, Any]:
        self.calls.append((metadata_type, full_name))
        return self.payload


def test_read_report_returns_metadata_unchanged(monkeypatch) -> None:
    payload = {
        "fullName": "unfiled$public/Pipeline",
        "format": "Summary",
        "columns": [{"field": "AMOUNT", "aggregateTypes": "Sum"}, {"field": "STAGE_NAME"}],
        "groupingsDown": {"field": "STAGE_NAME", "sortOrder": "Asc"},
        "chart": {"chartType": "Donut"},
    }
    fake_client = _FakeReadClient(payload)
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.read_report(CONN, "unfiled$public/Pipeline"))

    assert result == {"success": True, "metadata": payload}
    assert "error" not in result
    assert fake_client.calls == [("Report", "unfiled$public/Pipeline")]

    # Pass-through: JSON round trip leaves the record untouched.
    assert json.loads(json.dumps(result["metadata"])) == payload


def test_read_report_converts_fault_to_error(monkeypatch) -> None:
    class _FailingClient:
        async def retrieve_metadata(self, metadata_type: str, full_name: str):
            raise MetadataError("INVALID_SESSION_ID: Session expired or invalid")

    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: _FailingClient())

    result = _run(reports.read_report(CONN, "Missing_Report"))

    assert result == {
        "success": False,
        "error": "INVALID_SESSION_ID: Session expired or invalid",
    }


def test_read_report_error_never_empty(monkeypatch) -> None:
    class _SilentFailure:
        async def retrieve_metadata(self, metadata_type: str, full_name: str):
            raise ValueError()

    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: _SilentFailure())

    result = _run(reports.read_report(CONN, "Anything"))

    assert result["success"] is False
    assert result["error"] == "ValueError"


# ---------------------------------------------------------------------------
# salesforce_list_reports
# ---------------------------------------------------------------------------


class _FakeListClient:
    """Fake client answering list_metadata per folder."""

    def __init__(self, by_folder: Dict[str, Any]):
        self.by_folder = by_folder
        self.calls: List[tuple] = []

    async def list_metadata(self, metadata_type: str, folder: Optional[str] = None):
        self.calls.append((metadata_type, folder))
        value = self.by_folder[folder]
        if isinstance(value, Exception):
            raise value
        return value


def test_list_reports_defaults_to_common_folders_in_order(monkeypatch) -> None:
    fake_client = _FakeListClient(
        {
            "unfiled$public": [{"fullName": "unfiled$public/A"}],
            "Private Reports": [{"fullName": "Private Reports/B"}],
        }
    )
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_reports(CONN))

    assert fake_client.calls == [("Report", "unfiled$public"), ("Report", "Private Reports")]
    assert result["success"] is True
    assert [r["fullName"] for r in result["reports"]] == ["unfiled$public/A", "Private Reports/B"]
    assert "error" not in result


def test_list_reports_single_folder_only(monkeypatch) -> None:
    fake_client = _FakeListClient({"Sales": [{"fullName": "Sales/Q1"}]})
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_reports(CONN, folder="Sales"))

    assert fake_client.calls == [("Report", "Sales")]
    assert result["reports"] == [{"fullName": "Sales/Q1"}]


def test_list_reports_drops_missing_entries(monkeypatch) -> None:
    fake_client = _FakeListClient(
        {
            "unfiled$public": [None, {"fullName": "unfiled$public/A"}, None],
            "Private Reports": None,
        }
    )
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_reports(CONN))

    assert result["success"] is True
    assert result["reports"] == [{"fullName": "unfiled$public/A"}]


def test_list_reports_partial_folder_failure(monkeypatch) -> None:
    fake_client = _FakeListClient(
        {
            "unfiled$public": [{"fullName": "unfiled$public/A"}],
            "Private Reports": MetadataError("INVALID_FOLDER: no such folder"),
        }
    )
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_reports(CONN))

    assert result["success"] is True
    assert result["reports"] == [{"fullName": "unfiled$public/A"}]
    assert result["error"] == (
        "Some folders failed: Private Reports: INVALID_FOLDER: no such folder"
    )


def test_list_reports_all_folders_failing_is_still_success(monkeypatch) -> None:
    fake_client = _FakeListClient(
        {
            "unfiled$public": MetadataError("boom 1"),
            "Private Reports": MetadataError("boom 2"),
        }
    )
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_reports(CONN))

    assert result["success"] is True
    assert result["reports"] == []
    assert "unfiled$public: boom 1" in result["error"]
    assert "Private Reports: boom 2" in result["error"]


@pytest.mark.parametrize("pattern", ["myreport", "REPORT", "MyRep"])
def test_list_reports_search_is_case_insensitive(monkeypatch, pattern) -> None:
    fake_client = _FakeListClient(
        {"Sales": [{"fullName": "Sales/MyReport"}, {"fullName": "Sales/Dashboard_Feed"}]}
    )
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_reports(CONN, folder="Sales", search_pattern=pattern))

    assert [r["fullName"] for r in result["reports"]] == ["Sales/MyReport"]


def test_list_reports_search_matches_namespace_prefix(monkeypatch) -> None:
    fake_client = _FakeListClient(
        {
            "Sales": [
                {"fullName": "Sales/Forecast", "namespacePrefix": "AcmeFC"},
                {"fullName": "Sales/Pipeline", "namespacePrefix": ""},
                {"fullName": "Sales/Other"},
            ]
        }
    )
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_reports(CONN, folder="Sales", search_pattern="acme"))

    assert [r["fullName"] for r in result["reports"]] == ["Sales/Forecast"]


def test_list_reports_helper_construction_failure(monkeypatch) -> None:
    def _boom(conn):
        raise MetadataError("Salesforce connection has no instance URL.")

    monkeypatch.setattr(reports, "_make_metadata_client", _boom)

    result = _run(reports.list_reports(CONN))

    assert result == {"success": False, "error": "Salesforce connection has no instance URL."}


# ---------------------------------------------------------------------------
# salesforce_list_report_folders
# ---------------------------------------------------------------------------


class _FakeFoldersClient:
    def __init__(self, folders: Any):
        self.folders = folders

    async def list_report_folders(self):
        if isinstance(self.folders, Exception):
            raise self.folders
        return self.folders


def test_list_report_folders_drops_missing_entries(monkeypatch) -> None:
    fake_client = _FakeFoldersClient([{"fullName": "Sales"}, None, {"fullName": "Service"}])
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_report_folders(CONN))

    assert result == {"success": True, "folders": [{"fullName": "Sales"}, {"fullName": "Service"}]}


def test_list_report_folders_converts_fault(monkeypatch) -> None:
    fake_client = _FakeFoldersClient(RuntimeError("Error calling Salesforce Metadata API"))
    monkeypatch.setattr(reports, "_make_metadata_client", lambda conn: fake_client)

    result = _run(reports.list_report_folders(CONN))

    assert result["success"] is False
    assert result["error"] == "Error calling Salesforce Metadata API"


@pytest.mark.parametrize(
    "call",
    [
        lambda: reports.read_report(CONN, "X"),
        lambda: reports.list_reports(CONN, folder="F", search_pattern="s"),
        lambda: reports.list_report_folders(CONN),
    ],
)
def test_helper_construction_failure_for_every_tool(monkeypatch, call) -> None:
    def _boom(conn):
        raise MetadataError("invalid connection")

    monkeypatch.setattr(reports, "_make_metadata_client", _boom)

    result = _run(call())

    assert result == {"success": False, "error": "invalid connection"}


# ---------------------------------------------------------------------------
# Mock mode (no patching, in-memory client)
# ---------------------------------------------------------------------------


MOCK_CONN = SalesforceConnection(
    instance_url="https://mock.my.salesforce.com",
    access_token="MOCK_SESSION",
    mock_mode=True,
)


@pytest.mark.asyncio
async def test_mock_mode_end_to_end() -> None:
    folders = await reports.list_report_folders(MOCK_CONN)
    assert folders["success"] is True
    assert {f["fullName"] for f in folders["folders"]} == {"Sales_Reports", "Service_Reports"}

    listed = await reports.list_reports(MOCK_CONN)
    assert listed["success"] is True
    assert "error" not in listed
    assert "unfiled$public/Open_Opportunities" in {r["fullName"] for r in listed["reports"]}

    read = await reports.read_report(MOCK_CONN, "unfiled$public/Open_Opportunities")
    assert read["success"] is True
    assert read["metadata"]["format"] == "Summary"


@pytest.mark.asyncio
async def test_mock_mode_unknown_folder_reported_as_advisory() -> None:
    listed = await reports.list_reports(MOCK_CONN, folder="Nope")

    assert listed["success"] is True
    assert listed["reports"] == []
    assert listed["error"].startswith("Some folders failed: Nope: INVALID_FOLDER")


@pytest.mark.asyncio
async def test_mock_mode_unknown_report() -> None:
    read = await reports.read_report(MOCK_CONN, "Does_Not_Exist")

    assert read == {"success": False, "error": "Report 'Does_Not_Exist' not found."}
