# Salesforce Reports MCP Server
# File: tools/reports.py
# Version: v1
#
# Report metadata tools. Every handler returns a {"success": ...} envelope
# and never raises; the MCP layer in tools/__init__.py only forwards them.

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..connection import SalesforceConnection
from ..errors import describe_error
from ..metadata import MetadataClient
from ..mock import MockMetadataClient
from ..models import ToolDefinition

logger = logging.getLogger(__name__)

REPORT_TYPE = "Report"

# The Metadata API cannot list reports across all folders in one call, so
# without an explicit folder we check the two folders every org has.
DEFAULT_REPORT_FOLDERS: tuple[str, ...] = ("unfiled$public", "Private Reports")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _make_metadata_client(conn: SalesforceConnection) -> MetadataClient:
    """Create the metadata helper bound to ``conn``.

    Tests replace this with a lambda returning a fake client.
    """
    if getattr(conn, "mock_mode", False):
        return MockMetadataClient(connection=conn)  # type: ignore[return-value]
    return MetadataClient(connection=conn)


def _failure(exc: BaseException) -> Dict[str, Any]:
    return {"success": False, "error": describe_error(exc)}


def _drop_missing(entries: Optional[Iterable[Any]]) -> List[Any]:
    return [e for e in (entries or []) if e is not None]


def _matches(entry: Dict[str, Any], needle: str) -> bool:
    """Case-insensitive substring match on fullName or namespacePrefix."""
    full_name = str(entry.get("fullName") or "").lower()
    if needle in full_name:
        return True
    namespace = entry.get("namespacePrefix")
    return bool(namespace) and needle in str(namespace).lower()


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def read_report(conn: SalesforceConnection, report_name: str) -> Dict[str, Any]:
    """Read the full metadata of one report (columns, filters, groupings, chart)."""
    try:
        client = _make_metadata_client(conn)
        metadata = await client.retrieve_metadata(REPORT_TYPE, report_name)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to read report '%s': %s", report_name, exc)
        return _failure(exc)

    return {"success": True, "metadata": metadata}


async def list_reports(
    conn: SalesforceConnection,
    folder: Optional[str] = None,
    search_pattern: Optional[str] = None,
) -> Dict[str, Any]:
    """List reports in ``folder`` (or the default folders), optionally filtered.

    A failing folder does not fail the call: its error is reported in the
    ``error`` field next to the reports collected from the other folders.
    """
    try:
        client = _make_metadata_client(conn)

        folders: Sequence[str] = [folder] if folder else DEFAULT_REPORT_FOLDERS
        reports: List[Dict[str, Any]] = []
        errors: List[str] = []

        for folder_name in folders:
            try:
                results = await client.list_metadata(REPORT_TYPE, folder_name)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Listing reports in folder '%s' failed: %s", folder_name, exc)
                errors.append(f"{folder_name}: {describe_error(exc)}")
                continue
            reports.extend(_drop_missing(results))

        if search_pattern:
            needle = search_pattern.lower()
            reports = [r for r in reports if _matches(r, needle)]
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to list reports: %s", exc)
        return _failure(exc)

    out: Dict[str, Any] = {"success": True, "reports": reports}
    if errors:
        out["error"] = f"Some folders failed: {'; '.join(errors)}"
    return out


async def list_report_folders(conn: SalesforceConnection) -> Dict[str, Any]:
    """List all report folders visible to the connected user."""
    try:
        client = _make_metadata_client(conn)
        folders = await client.list_report_folders()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to list report folders: %s", exc)
        return _failure(exc)

    return {"success": True, "folders": _drop_missing(folders)}


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------


READ_REPORT_TOOL = ToolDefinition(
    name="salesforce_read_report",
    description=(
        "Read detailed metadata for a Salesforce report including columns, filters, "
        "groupings, and chart configuration. Use this to inspect existing reports and "
        "understand their structure."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "reportName": {
                "type": "string",
                "description": (
                    'Full name of the report (e.g., "unfiled$public/Report_Name" '
                    'or just "Report_Name")'
                ),
            },
        },
        "required": ["reportName"],
    },
)

LIST_REPORTS_TOOL = ToolDefinition(
    name="salesforce_list_reports",
    description="""List reports in Salesforce folders.

IMPORTANT: Reports in Salesforce are organized in folders. This tool will:
- If folder is specified: List reports in that specific folder
- If no folder specified: Check common folders ("unfiled$public" and "Private Reports")
- Cannot list ALL reports across all folders in one call (Salesforce API limitation)

TIP: Use salesforce_list_report_folders first to discover available folders, then call this tool with specific folder names.""",
    input_schema={
        "type": "object",
        "properties": {
            "folder": {
                "type": "string",
                "description": (
                    'Folder name to list reports from (e.g., "unfiled$public", '
                    '"Private Reports"). If not specified, will check common folders.'
                ),
            },
            "searchPattern": {
                "type": "string",
                "description": "Optional search pattern to filter reports by name",
            },
        },
    },
)

LIST_REPORT_FOLDERS_TOOL = ToolDefinition(
    name="salesforce_list_report_folders",
    description="""List all report folders in Salesforce. Use this to discover available folders before listing reports.

NOTE: You may only see folders that you created and the "unfiled$public" folder. Standard folders like "Activity Reports" may not appear depending on permissions.""",
    input_schema={
        "type": "object",
        "properties": {},
    },
)

REPORT_TOOLS: tuple[ToolDefinition, ...] = (
    READ_REPORT_TOOL,
    LIST_REPORTS_TOOL,
    LIST_REPORT_FOLDERS_TOOL,
)
