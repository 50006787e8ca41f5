"""Bug list manager.

Owns the bug lists shown in the widget and keeps at most one of them
expanded.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .bug_list import BugFilter, BugList
from .categories import Category
from .preferences import DEFAULT_NAMESPACE, PreferenceStore
from .reporter import StderrReporter
from .surface import TreeSurface

if TYPE_CHECKING:
    from .activity import ActivityLogger
    from .client import BugzillaClient
    from .surface import Surface


class BugListManager:
    """Coordinates the widget's bug lists."""

    def __init__(
        self,
        client: BugzillaClient,
        preferences: PreferenceStore,
        namespace: str = DEFAULT_NAMESPACE,
        reporter: StderrReporter | None = None,
        activity_log: ActivityLogger | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            client: API client shared by all lists.
            preferences: Preference store shared by all lists.
            namespace: Prefix of the lists' preference keys.
            reporter: Diagnostic reporter (defaults to stderr).
            activity_log: Optional activity log.
        """
        self.client = client
        self.preferences = preferences
        self.namespace = namespace
        self.reporter = reporter or StderrReporter()
        self.activity_log = activity_log

        self.bug_lists: dict[str, BugList] = {}
        self.surface: Surface | None = None
        self.user_email: str | None = None

    def add_list(
        self,
        category_name: str,
        query_parameters: dict[str, Any],
        is_in_list: BugFilter,
    ) -> BugList:
        """Create and register a bug list.

        Raises:
            ValueError: If a list with this category name already exists.
        """
        if category_name in self.bug_lists:
            raise ValueError(f"Duplicate bug list: {category_name}")

        bug_list = BugList(self, category_name, query_parameters, is_in_list)
        self.bug_lists[category_name] = bug_list
        return bug_list

    def add_category(self, category: Category) -> BugList:
        """Create a bug list for a built-in category."""
        return self.add_list(category.name, category.query_parameters(), category.is_in_list)

    @property
    def expanded(self) -> BugList | None:
        """The currently expanded list, if any."""
        for bug_list in self.bug_lists.values():
            if bug_list.is_expanded:
                return bug_list
        return None

    def collapse_all_except(self, keep: BugList | None = None) -> None:
        """Collapse every expanded list other than keep."""
        for bug_list in self.bug_lists.values():
            if bug_list is not keep and bug_list.is_expanded:
                bug_list.collapse()

    def attach(self, surface: Surface) -> None:
        """Bind every list to surface."""
        self.surface = surface
        for bug_list in self.bug_lists.values():
            bug_list.attach(surface)

    def draw(self) -> None:
        """Redraw every list."""
        for bug_list in self.bug_lists.values():
            bug_list.draw()

    async def set_user_email(self, user_email: str) -> None:
        """Track another user in every list and refresh them."""
        self.user_email = user_email
        await asyncio.gather(
            *(bug_list.set_user_email(user_email) for bug_list in self.bug_lists.values())
        )

    async def refresh_all(self) -> None:
        """Refresh every list."""
        await asyncio.gather(*(bug_list.update() for bug_list in self.bug_lists.values()))

    async def close(self) -> None:
        """Release the API client and the activity log."""
        await self.client.close()
        if self.activity_log:
            self.activity_log.close()


def build_surface(categories: Iterable[Category]) -> TreeSurface:
    """Create a TreeSurface with a box for each category."""
    surface = TreeSurface()
    for category in categories:
        surface.add_category(category.name, category.title)
    return surface
