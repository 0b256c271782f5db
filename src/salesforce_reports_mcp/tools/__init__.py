# Salesforce Reports MCP Server
# File: tools/__init__.py
# Version: v2

"""Helpers for registering MCP tools."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Awaitable, Callable, Dict, List, Optional

from pydantic import Field

from ..connection import SalesforceConnection
from ..errors import describe_error
from ..models import ToolDefinition
from . import reports

logger = logging.getLogger(__name__)

ConnectionProviderFn = Callable[[], Awaitable[SalesforceConnection]]

# Faults after which the cached session must not be reused.
SESSION_FAULT_CODES = ("INVALID_SESSION_ID",)


def list_tool_definitions() -> List[Dict[str, Any]]:
    """Return the discovery records of every tool exposed by this server."""
    return [tool.to_dict() for tool in reports.REPORT_TOOLS]


def get_tool_definition(name: str) -> Optional[ToolDefinition]:
    for tool in reports.REPORT_TOOLS:
        if tool.name == name:
            return tool
    return None


def _describe_param(tool: ToolDefinition, name: str) -> Any:
    """Pydantic field carrying the descriptor's text for parameter ``name``."""
    return Field(description=tool.input_schema["properties"][name]["description"])


# Module-level aliases so FastMCP can resolve them when building schemas.
ReportNameParam = Annotated[str, _describe_param(reports.READ_REPORT_TOOL, "reportName")]
FolderParam = Annotated[str, _describe_param(reports.LIST_REPORTS_TOOL, "folder")]
SearchPatternParam = Annotated[str, _describe_param(reports.LIST_REPORTS_TOOL, "searchPattern")]


def _is_session_fault(result: Dict[str, Any]) -> bool:
    error = result.get("error") or ""
    return any(code in error for code in SESSION_FAULT_CODES)


def register_all_tools(server: Any, connection_provider: ConnectionProviderFn) -> None:
    """Register all MCP tools exposed by this server.

    ``connection_provider`` is awaited on every call; a failure to obtain a
    connection is reported through the usual error envelope. Providers with
    an ``invalidate()`` method are told to drop their session after a
    session fault so the next call authenticates again.
    """
    if server is None or not hasattr(server, "tool"):
        raise ValueError(
            "register_all_tools(server, ...) expects an MCP Server-like object "
            "that exposes a .tool() decorator."
        )

    read_def = reports.READ_REPORT_TOOL
    list_def = reports.LIST_REPORTS_TOOL
    folders_def = reports.LIST_REPORT_FOLDERS_TOOL

    def _after(result: Dict[str, Any]) -> Dict[str, Any]:
        invalidate = getattr(connection_provider, "invalidate", None)
        if callable(invalidate) and _is_session_fault(result):
            logger.warning("Salesforce session rejected; reconnecting on next call.")
            invalidate()
        return result

    # Parameter names mirror the camelCase properties of the input schemas.

    @server.tool(name=read_def.name, description=read_def.description)
    async def mcp_read_report(reportName: ReportNameParam) -> Dict[str, Any]:  # noqa: N803
        try:
            conn = await connection_provider()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not connect to Salesforce: %s", exc)
            return {"success": False, "error": describe_error(exc)}
        return _after(await reports.read_report(conn, reportName))

    @server.tool(name=list_def.name, description=list_def.description)
    async def mcp_list_reports(
        folder: FolderParam = "",
        searchPattern: SearchPatternParam = "",  # noqa: N803
    ) -> Dict[str, Any]:
        try:
            conn = await connection_provider()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not connect to Salesforce: %s", exc)
            return {"success": False, "error": describe_error(exc)}
        return _after(
            await reports.list_reports(
                conn, folder=folder or None, search_pattern=searchPattern or None
            )
        )

    @server.tool(name=folders_def.name, description=folders_def.description)
    async def mcp_list_report_folders() -> Dict[str, Any]:
        try:
            conn = await connection_provider()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not connect to Salesforce: %s", exc)
            return {"success": False, "error": describe_error(exc)}
        return _after(await reports.list_report_folders(conn))
