"""Pytest configuration and fixtures for bug list tests."""

from __future__ import annotations

import io
from typing import Any

import pytest

from bugzilla_widget.manager import BugListManager
from bugzilla_widget.preferences import MemoryPreferences
from bugzilla_widget.reporter import StderrReporter
from bugzilla_widget.surface import TreeSurface


class FakeClient:
    """Stand-in for BugzillaClient returning canned results."""

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self.records = records or []
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def search_bugs(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return list(self.records)

    def bug_url(self, bug_id: int) -> str:
        return f"https://bugzilla.example.com/show_bug.cgi?id={bug_id}"

    async def close(self) -> None:
        self.closed = True


def make_bug(bug_id: int, summary: str = "", **fields: Any) -> dict[str, Any]:
    """Build a bug record."""
    record = {"id": bug_id, "summary": summary or f"Bug {bug_id}", "status": "NEW"}
    record.update(fields)
    return record


def accept_all(bug: dict[str, Any]) -> bool:
    return True


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def preferences() -> MemoryPreferences:
    return MemoryPreferences()


@pytest.fixture
def stderr() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def manager(client: FakeClient, preferences: MemoryPreferences, stderr: io.StringIO) -> BugListManager:
    return BugListManager(
        client,
        preferences,
        namespace="test-widget",
        reporter=StderrReporter(stderr=stderr),
    )


@pytest.fixture
def surface() -> TreeSurface:
    surface = TreeSurface()
    surface.add_category("assigned", "Assigned to me")
    surface.add_category("reported", "Reported by me")
    return surface
