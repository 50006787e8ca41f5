"""Tests for the Bugzilla API client."""

import asyncio

import httpx
import pytest

from bugzilla_widget.client import BugzillaClient
from bugzilla_widget.exceptions import (
    BugzillaAPIError,
    BugzillaAuthenticationError,
    BugzillaTimeoutError,
)


def make_client(handler, **kwargs) -> BugzillaClient:
    return BugzillaClient(
        base_url="https://bugzilla.example.com/rest",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def search(client: BugzillaClient, params: dict) -> list:
    async def go():
        async with client:
            return await client.search_bugs(params)

    return asyncio.run(go())


class TestSearchBugs:
    """Tests for BugzillaClient.search_bugs."""

    def test_returns_bug_records(self):
        """Should return the 'bugs' list of the response."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"bugs": [{"id": 1}, {"id": 2}]})

        bugs = search(make_client(handler), {})

        assert bugs == [{"id": 1}, {"id": 2}]

    def test_sends_parameters_as_query(self):
        """Should GET /bug with the parameters in the query string."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"bugs": []})

        search(make_client(handler), {"value0-0-0": "a@example.com", "resolution": "---"})

        assert seen["method"] == "GET"
        assert seen["path"] == "/rest/bug"
        assert seen["params"] == {"value0-0-0": "a@example.com", "resolution": "---"}

    def test_sends_api_key_header(self):
        """Should authenticate with the API key header when set."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers.get("X-BUGZILLA-API-KEY")
            return httpx.Response(200, json={"bugs": []})

        search(make_client(handler, api_key="secret"), {})

        assert seen["key"] == "secret"

    def test_omits_api_key_header_without_key(self):
        """Should not send an empty API key."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            return httpx.Response(200, json={"bugs": []})

        search(make_client(handler), {})

        assert "X-BUGZILLA-API-KEY" not in seen["headers"]

    def test_missing_bugs_field_is_empty(self):
        """Should treat a response without bugs as empty."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        assert search(make_client(handler), {}) == []

    def test_error_body_raises(self):
        """Should raise for Bugzilla error bodies."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400, json={"error": True, "code": 108, "message": "Invalid field"}
            )

        with pytest.raises(BugzillaAPIError) as exc_info:
            search(make_client(handler), {})

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == 108
        assert "Invalid field" in str(exc_info.value)

    def test_error_flag_with_200_raises(self):
        """Should raise for error bodies sent with status 200."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": True, "message": "Nope"})

        with pytest.raises(BugzillaAPIError):
            search(make_client(handler), {})

    def test_unauthorized_raises_authentication_error(self):
        """Should raise BugzillaAuthenticationError on 401."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": True, "message": "bad key"})

        with pytest.raises(BugzillaAuthenticationError):
            search(make_client(handler), {})

    def test_invalid_json_raises(self):
        """Should raise for non-JSON bodies."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(BugzillaAPIError):
            search(make_client(handler), {})

    def test_timeout_raises_timeout_error(self):
        """Should map httpx timeouts to BugzillaTimeoutError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(BugzillaTimeoutError) as exc_info:
            search(make_client(handler), {})

        assert exc_info.value.status_code == 408

    def test_connection_error_raises_api_error(self):
        """Should map transport errors to BugzillaAPIError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(BugzillaAPIError) as exc_info:
            search(make_client(handler), {})

        assert not isinstance(exc_info.value, BugzillaTimeoutError)


class TestClientSettings:
    """Tests for client configuration."""

    def test_default_timeout_is_thirty_seconds(self):
        """Should time out after 30 seconds by default."""
        assert BugzillaClient().timeout == 30

    def test_bug_url(self):
        """Should link to show_bug.cgi on the web root."""
        client = BugzillaClient(base_url="https://bugzilla.example.com/rest/")

        assert client.bug_url(5) == "https://bugzilla.example.com/show_bug.cgi?id=5"

    def test_close_is_idempotent(self):
        """Should allow closing an unused client."""
        client = BugzillaClient()

        asyncio.run(client.close())
        asyncio.run(client.close())
