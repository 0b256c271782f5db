# demo_mcp_read_report.py
# Version: v1
#
# Demo: read one report's metadata and print a short summary.
#
# Usage (bash):
#
#   export SALESFORCE_MOCK_MODE=1
#   export SALESFORCE_TEST_REPORT="unfiled\$public/Open_Opportunities"
#   python demo_mcp_read_report.py

import asyncio
import json
import os
from typing import Any, Dict

from salesforce_reports_mcp.connection import connect
from salesforce_reports_mcp.tools import reports


TEST_REPORT = os.environ.get("SALESFORCE_TEST_REPORT", "unfiled$public/Open_Opportunities")


async def main() -> None:
    conn = await connect()

    print("Calling MCP task: read_report()")
    print(f"Report: {TEST_REPORT}")
    print()

    result: Dict[str, Any] = await reports.read_report(conn, TEST_REPORT)
    if not result["success"]:
        print("Error:", result["error"])
        return

    metadata: Dict[str, Any] = result["metadata"]
    columns = metadata.get("columns") or []
    if isinstance(columns, dict):
        columns = [columns]

    print(f"Name:        {metadata.get('name')}")
    print(f"Format:      {metadata.get('format')}")
    print(f"Report type: {metadata.get('reportType')}")
    print(f"Columns:     {[c.get('field') for c in columns]}")
    print()
    print("Raw metadata:")
    print(json.dumps(metadata, indent=2)[:2000])


if __name__ == "__main__":
    asyncio.run(main())
