# Salesforce Reports MCP Server
# File: transports/__init__.py
# Version: v1

"""MCP transports (stdio) for the Salesforce Reports MCP Server."""
