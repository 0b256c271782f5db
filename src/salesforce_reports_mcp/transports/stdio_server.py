# Salesforce Reports MCP Server
# File: transports/stdio_server.py
# Version: v1

"""STDIO entrypoint for the Salesforce Reports MCP server.

This is the script behind the ``salesforce-reports-mcp`` console command.

It:

- configures logging on stderr (stdout carries the MCP protocol),
- creates a FastMCP server,
- registers the report tools against a lazily created Salesforce connection,
- runs the built-in stdio transport.
"""

from __future__ import annotations

import logging
import os
import sys

from mcp.server.fastmcp import FastMCP

from ..config import SalesforceConfig
from ..connection import ConnectionProvider
from ..tools import register_all_tools


def _configure_logging() -> None:
    level_name = (os.getenv("SALESFORCE_LOG_LEVEL") or "WARNING").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_server(config: SalesforceConfig | None = None) -> FastMCP:
    """Create the FastMCP server with all report tools registered."""
    mcp = FastMCP("salesforce-reports-mcp")
    register_all_tools(mcp, ConnectionProvider(config or SalesforceConfig.from_env()))
    return mcp


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    _configure_logging()

    # Let FastMCP handle stdio + event loop setup.
    build_server().run()


if __name__ == "__main__":
    main()
