# Salesforce Reports MCP Server
# File: connection.py
# Version: v2

"""Connection handle passed into every report tool."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .auth import OAuthClient
from .config import DEFAULT_API_VERSION, SalesforceConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalesforceConnection:
    """Authenticated session context for one Salesforce org.

    Tools only read through the handle; they never refresh or close it.
    """

    instance_url: str
    access_token: str
    api_version: str = DEFAULT_API_VERSION
    verify_tls: bool = True
    timeout: float = 30.0
    mock_mode: bool = False

    @property
    def metadata_url(self) -> str:
        """SOAP endpoint of the Metadata API for this org."""
        return f"{self.instance_url.rstrip('/')}/services/Soap/m/{self.api_version}"


async def connect(
    config: Optional[SalesforceConfig] = None,
    oauth: Optional[OAuthClient] = None,
) -> SalesforceConnection:
    """Build a connection handle from configuration.

    - mock mode: no network, placeholder credentials
    - access token + instance URL configured: used as-is
    - otherwise: OAuth client-credentials flow
    """
    cfg = config or SalesforceConfig.from_env()

    if cfg.mock_mode:
        return SalesforceConnection(
            instance_url=cfg.instance_url or "https://mock.my.salesforce.com",
            access_token="MOCK_SESSION",
            api_version=cfg.api_version,
            verify_tls=cfg.verify_tls,
            timeout=cfg.timeout_seconds,
            mock_mode=True,
        )

    if cfg.access_token and cfg.instance_url:
        token, instance_url = cfg.access_token, cfg.instance_url
    else:
        oauth = oauth or OAuthClient(config=cfg)
        token, instance_url = await oauth.get_session()

    logger.info("Connected to Salesforce instance %s (API v%s)", instance_url, cfg.api_version)
    return SalesforceConnection(
        instance_url=instance_url,
        access_token=token,
        api_version=cfg.api_version,
        verify_tls=cfg.verify_tls,
        timeout=cfg.timeout_seconds,
    )


class ConnectionProvider:
    """Lazily create and reuse a single connection for the server process."""

    def __init__(self, config: Optional[SalesforceConfig] = None) -> None:
        self._config = config
        self._connection: Optional[SalesforceConnection] = None
        self._lock = asyncio.Lock()

    async def __call__(self) -> SalesforceConnection:
        async with self._lock:
            if self._connection is None:
                self._connection = await connect(self._config)
            return self._connection

    def invalidate(self) -> None:
        """Drop the cached handle so the next call authenticates again."""
        if self._connection is not None:
            logger.info("Discarding cached Salesforce session for %s", self._connection.instance_url)
        self._connection = None
