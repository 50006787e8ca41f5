"""Bugzilla REST API client for bugzilla-widget.

This module provides an async HTTP client for the Bugzilla bug search
endpoint used to populate the bug lists.
"""

from __future__ import annotations

from typing import Any

import httpx

from .exceptions import (
    BugzillaAPIError,
    BugzillaAuthenticationError,
    BugzillaTimeoutError,
)

USER_AGENT = "bugzilla-widget/1.0"


class BugzillaClient:
    """Async client for the Bugzilla REST API."""

    BASE_URL = "https://bugzilla.mozilla.org/rest"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str = "",
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Bugzilla client.

        Args:
            base_url: REST root of the Bugzilla instance
            api_key: Optional Bugzilla API key
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> BugzillaClient:
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._get_headers(),
                transport=self._transport,
            )
        return self._client

    def _get_headers(self) -> dict:
        """Get request headers, with the API key when one is set."""
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.api_key:
            headers["X-BUGZILLA-API-KEY"] = self.api_key
        return headers

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, endpoint: str, params: dict | None = None) -> dict:
        """Make a GET request and decode the JSON body.

        Args:
            endpoint: API endpoint (relative to base_url)
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            BugzillaAuthenticationError: When the API key is rejected
            BugzillaTimeoutError: When the request times out
            BugzillaAPIError: For other API and transport errors
        """
        client = await self._get_client()
        url = f"{self.base_url}{endpoint}"

        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise BugzillaTimeoutError(
                f"Request timeout: {e}",
                details={"endpoint": endpoint},
            ) from e
        except httpx.RequestError as e:
            raise BugzillaAPIError(
                f"Request failed: {e}",
                details={"endpoint": endpoint, "error": str(e)},
            ) from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> dict:
        """Decode a response, raising for error statuses and error bodies.

        Bugzilla reports some failures with a 200 status and an
        ``"error": true`` body, so both are checked.
        """
        status_code = response.status_code

        if status_code == 401:
            raise BugzillaAuthenticationError()

        try:
            data = response.json() if response.content else {}
        except ValueError as e:
            raise BugzillaAPIError(
                "Invalid JSON in Bugzilla response",
                status_code=status_code,
            ) from e

        if not isinstance(data, dict):
            raise BugzillaAPIError(
                "Unexpected Bugzilla response shape",
                status_code=status_code,
            )

        if status_code != 200 or data.get("error"):
            message = data.get("message", "Unknown error")
            raise BugzillaAPIError(
                f"Bugzilla API error: {message}",
                status_code=status_code,
                error_code=data.get("code"),
                details=data,
            )

        return data

    async def search_bugs(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Search for bugs.

        Args:
            params: Bugzilla search parameters, forwarded unmodified

        Returns:
            List of bug records
        """
        result = await self._request("/bug", params=params)
        bugs = result.get("bugs", [])
        if not isinstance(bugs, list):
            raise BugzillaAPIError("Unexpected 'bugs' field in Bugzilla response")
        return bugs

    def bug_url(self, bug_id: int) -> str:
        """Return the web URL of a bug on this instance."""
        root = self.base_url
        if root.endswith("/rest"):
            root = root[: -len("/rest")]
        return f"{root}/show_bug.cgi?id={bug_id}"
