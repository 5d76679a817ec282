"""Client-credentials token acquisition for Microsoft Graph.

Tokens are short-lived; callers fetch a fresh one for every Graph call
rather than caching it.
"""

from __future__ import annotations

import logging

import httpx

from booking.errors import GraphAuthError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"


class GraphCredential:
    """Azure AD app-only credential (tenant id / client id / client secret)."""

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not (tenant_id and client_id and client_secret):
            raise ValueError("tenant_id, client_id and client_secret are all required")
        self._token_url = TOKEN_URL.format(tenant_id=tenant_id)
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._transport = transport

    async def get_token(self) -> str:
        """Request a bearer token for the Graph ``.default`` scope."""
        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "scope": GRAPH_SCOPE,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(self._token_url, data=form)
        except httpx.HTTPError as exc:
            raise GraphAuthError(f"Token request failed: {exc}") from exc

        if resp.status_code != 200:
            raise GraphAuthError(
                f"Token endpoint returned {resp.status_code}: {graph_error_text(resp)}"
            )

        try:
            body = resp.json()
        except ValueError:
            raise GraphAuthError("Token endpoint returned a non-JSON body") from None
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise GraphAuthError("Token endpoint response had no access_token")
        return token


def graph_error_text(resp: httpx.Response) -> str:
    """Best-effort extraction of an AAD/Graph error description."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if not isinstance(body, dict):
        return resp.text[:200]
    if isinstance(body.get("error"), dict):
        return body["error"].get("message", "")
    return body.get("error_description") or str(body.get("error", ""))
