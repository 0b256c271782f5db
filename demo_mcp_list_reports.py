# demo_mcp_list_reports.py
# Version: v1
#
# Demo: list report folders, then the reports in one folder.
#
# Usage (bash):
#
#   export SALESFORCE_MOCK_MODE=1            # or real credentials
#   export SALESFORCE_TEST_FOLDER="Sales_Reports"
#   export SALESFORCE_TEST_SEARCH="forecast" # optional
#   python demo_mcp_list_reports.py

import asyncio
import os
from typing import Any, Dict, List

from salesforce_reports_mcp.connection import connect
from salesforce_reports_mcp.tools import reports


TEST_FOLDER = os.environ.get("SALESFORCE_TEST_FOLDER") or None
TEST_SEARCH = os.environ.get("SALESFORCE_TEST_SEARCH") or None


async def main() -> None:
    conn = await connect()

    print("Calling MCP task: list_report_folders()")
    folders_result: Dict[str, Any] = await reports.list_report_folders(conn)
    if not folders_result["success"]:
        print("Error:", folders_result["error"])
        return

    folders: List[Dict[str, Any]] = folders_result["folders"]
    print(f"Folders returned: {len(folders)}")
    for f in folders:
        print(f"- {f.get('fullName')}")
    print()

    print("Calling MCP task: list_reports()")
    print(f"Folder: {TEST_FOLDER or '<default folders>'}  search: {TEST_SEARCH!r}")
    result: Dict[str, Any] = await reports.list_reports(
        conn, folder=TEST_FOLDER, search_pattern=TEST_SEARCH
    )

    if not result["success"]:
        print("Error:", result["error"])
        return

    if result.get("error"):
        print("Warning:", result["error"])

    items: List[Dict[str, Any]] = result["reports"]
    print(f"Reports returned: {len(items)}")
    for r in items[:20]:  # just show the first 20 to keep output readable
        ns = r.get("namespacePrefix")
        print(f"- {r.get('fullName')}" + (f"  (namespace={ns})" if ns else ""))


if __name__ == "__main__":
    asyncio.run(main())
