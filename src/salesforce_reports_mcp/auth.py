# Salesforce Reports MCP Server
# File: auth.py
# Version: v1

"""OAuth2 client for obtaining Salesforce access tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import httpx

from .config import SalesforceConfig


@dataclass
class OAuthClient:
    """Simple OAuth2 client using the client-credentials flow.

    Salesforce connected apps with the client-credentials flow enabled accept
    ``client_id`` / ``client_secret`` in the form body and answer with both
    an access token and the org's ``instance_url``.
    """

    config: SalesforceConfig
    transport: Optional[httpx.AsyncBaseTransport] = None
    _cached_session: Optional[Tuple[str, str]] = None

    async def get_session(self) -> Tuple[str, str]:
        """Return ``(access_token, instance_url)``.

        The session is cached in-memory until the process restarts.
        """
        if self._cached_session:
            return self._cached_session

        if not self.config.client_id or not self.config.client_secret:
            raise RuntimeError(
                "OAuth configuration is incomplete. "
                "Set SALESFORCE_ACCESS_TOKEN and SALESFORCE_INSTANCE_URL, or "
                "SALESFORCE_CLIENT_ID and SALESFORCE_CLIENT_SECRET."
            )

        token_url = f"{self.config.login_url.rstrip('/')}/services/oauth2/token"

        async with httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_tls,
            transport=self.transport,
        ) as client:
            try:
                response = await client.post(
                    token_url,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self.config.client_id,
                        "client_secret": self.config.client_secret,
                    },
                    headers={"Accept": "application/json"},
                )
            except httpx.RequestError as exc:
                raise RuntimeError(
                    f"Error calling Salesforce token endpoint '{token_url}': {exc}"
                ) from exc

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            body_preview = exc.response.text[:500]
            raise RuntimeError(
                f"Failed to obtain access token from '{token_url}' "
                f"(HTTP {status}). Check SALESFORCE_LOGIN_URL, "
                "SALESFORCE_CLIENT_ID and SALESFORCE_CLIENT_SECRET. "
                f"Response snippet: {body_preview}"
            ) from exc

        data: dict[str, Any] = response.json()
        token = data.get("access_token")
        if not token:
            raise RuntimeError("OAuth token response did not contain 'access_token'")

        # A configured instance URL (e.g. a My Domain) wins over the response.
        instance_url = self.config.instance_url or data.get("instance_url")
        if not instance_url:
            raise RuntimeError(
                "OAuth token response did not contain 'instance_url' and "
                "SALESFORCE_INSTANCE_URL is not set."
            )

        self._cached_session = (token, instance_url)
        return self._cached_session
