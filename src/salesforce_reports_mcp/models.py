# Salesforce Reports MCP Server
# File: models.py
# Version: v1

"""Domain models used by the Salesforce Reports MCP server."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and JSON input schema of one callable tool."""

    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=dict)

    @property
    def required(self) -> List[str]:
        return list(self.input_schema.get("required", []))

    def to_dict(self) -> Dict[str, Any]:
        """Return the ``{name, description, inputSchema}`` discovery shape."""
        return {
            "name": self.name,
            "description": self.description,
            # Copy so callers cannot mutate the module-level definitions.
            "inputSchema": copy.deepcopy(self.input_schema),
        }
