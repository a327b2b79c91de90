# =============================================================================
# core/client.py  —  Lcontext Backend Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One authenticated GET-and-decode operation against the analytics API,
#   with every failure translated into a typed ApiError subclass.
#
# HOW IT WORKS:
#   1. Refuse to run without an API key (AuthError, no network)
#   2. Build headers: JSON content type, caller extras, then X-API-Key last
#   3. GET {base_url}{endpoint} with httpx.AsyncClient
#   4. Non-2xx  -> HttpError(status, body)
#      Not JSON -> DecodeError(first 200 chars of body)
#
# The client holds only the frozen Settings and an optional transport.  Each
# fetch opens its own httpx.AsyncClient, so concurrent tool calls share no
# connection state.
# =============================================================================

import json
import logging
from typing import Any, Mapping, Optional

import httpx

from core.config import Settings
from core.errors import AuthError, DecodeError, HttpError, TransportError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
USER_AGENT = "lcontext-mcp"


class AnalyticsClient:
    """Read-only client for the /api/mcp/* endpoints."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def build_headers(self, extra: Optional[Mapping[str, str]] = None) -> httpx.Headers:
        """Outbound headers.  Caller extras never replace the API key."""
        headers = httpx.Headers(
            {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        )
        if extra:
            headers.update(extra)
        headers[API_KEY_HEADER] = self._settings.api_key
        return headers

    async def fetch(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """GET an endpoint and return the decoded JSON body.

        Args:
            endpoint: Path plus optional query string, e.g. "/api/mcp/pages?limit=5".
            headers: Extra request headers.

        Raises:
            AuthError: No API key configured.
            TransportError: The request did not complete.
            HttpError: The backend returned a non-success status.
            DecodeError: The body is not valid JSON.
        """
        if not self._settings.api_key:
            raise AuthError("LCONTEXT_API_KEY environment variable is required")

        url = f"{self._settings.base_url}{endpoint}"
        request_headers = self.build_headers(headers)

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as http:
                response = await http.get(url, headers=request_headers)
        except httpx.TimeoutException as exc:
            raise TransportError(f"API request timed out: {url}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"API request could not be completed: {exc}") from exc

        logger.debug("GET %s -> %s", endpoint, response.status_code)

        if not response.is_success:
            raise HttpError(response.status_code, response.text)

        text = response.text
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError(text) from exc
