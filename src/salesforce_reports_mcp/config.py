# Salesforce Reports MCP Server
# File: config.py
# Version: v1

"""Configuration loading for the Salesforce Reports MCP Server."""

from __future__ import annotations

from dataclasses import dataclass
import os

DEFAULT_LOGIN_URL = "https://login.salesforce.com"
DEFAULT_API_VERSION = "59.0"


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean-like environment variable.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_float_env(
    name: str,
    default: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """Parse a float environment variable with clamping and safe fallback."""
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        value = float(default)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            value = float(default)

    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value

    return value


def _parse_str_env(name: str, default: str | None = None) -> str | None:
    """Return a stripped env value, treating blank strings as unset."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


@dataclass
class SalesforceConfig:
    """Configuration values required to talk to a Salesforce org.

    Either ``access_token`` + ``instance_url`` are supplied directly, or the
    OAuth client-credentials flow is used with ``client_id`` /
    ``client_secret`` against ``login_url``.
    """

    instance_url: str | None
    access_token: str | None
    login_url: str
    client_id: str | None
    client_secret: str | None
    mock_mode: bool

    api_version: str = DEFAULT_API_VERSION
    verify_tls: bool = True
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "SalesforceConfig":
        """Create configuration from environment variables."""
        return cls(
            instance_url=_parse_str_env("SALESFORCE_INSTANCE_URL"),
            access_token=_parse_str_env("SALESFORCE_ACCESS_TOKEN"),
            login_url=_parse_str_env("SALESFORCE_LOGIN_URL") or DEFAULT_LOGIN_URL,
            client_id=_parse_str_env("SALESFORCE_CLIENT_ID"),
            client_secret=_parse_str_env("SALESFORCE_CLIENT_SECRET"),
            mock_mode=_parse_bool_env("SALESFORCE_MOCK_MODE", default=False),
            api_version=_parse_str_env("SALESFORCE_API_VERSION") or DEFAULT_API_VERSION,
            verify_tls=_parse_bool_env("SALESFORCE_VERIFY_TLS", default=True),
            timeout_seconds=_parse_float_env(
                "SALESFORCE_TIMEOUT_SECONDS", default=30.0, min_value=1.0, max_value=600.0
            ),
        )
