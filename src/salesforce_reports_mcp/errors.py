# Salesforce Reports MCP Server
# File: errors.py
# Version: v1

"""Error type raised by the metadata layer and its tool-facing conversion."""

from __future__ import annotations


class MetadataError(RuntimeError):
    """A Salesforce Metadata API call failed.

    Covers auth failures, missing components, SOAP faults, malformed
    responses and transport errors alike; tool callers only ever see the
    message.
    """


def describe_error(exc: BaseException) -> str:
    """Return a non-empty, human readable message for ``exc``."""
    message = str(exc).strip()
    return message or type(exc).__name__
