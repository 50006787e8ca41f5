"""Bug list for one category.

A bug list fetches bugs matching its query, keeps the ones accepted by
its filter, and draws them into its category box on a render surface.
It also remembers which bugs the user has viewed so that unseen bugs can
be flagged as new.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .bug import Bug
from .exceptions import BugzillaAPIError, SurfaceError
from .preferences import format_id_list, parse_id_list, viewed_bugs_key
from .surface import BUG_LIST, CATEGORY_COUNT, CATEGORY_HEAD, CATEGORY_NEW_COUNT

if TYPE_CHECKING:
    from .manager import BugListManager
    from .surface import Surface

# Query parameters holding the tracked user's email
USER_EMAIL_PARAMETERS = ("value0-0-0", "email1", "value0-0-1")

BugFilter = Callable[[dict[str, Any]], bool]


class BugList:
    """Manages the bugs of one category."""

    def __init__(
        self,
        manager: BugListManager,
        category_name: str,
        query_parameters: dict[str, Any],
        is_in_list: BugFilter,
    ) -> None:
        """Initialize the list and load its viewed bug IDs.

        Args:
            manager: Owning manager. Provides the API client, preference
                store, preference namespace, reporter and activity log.
            category_name: Identifier of the category.
            query_parameters: Bugzilla search parameters. Updated in place
                by ``set_user_email``.
            is_in_list: Filter deciding whether a returned bug belongs here.
        """
        self.manager = manager
        self.client = manager.client
        self.preferences = manager.preferences
        self.reporter = manager.reporter
        self.activity_log = manager.activity_log

        self._category_name = category_name
        self.query_parameters = query_parameters
        self.is_in_list = is_in_list

        self.bugs: list[Bug] = []
        self.viewed_bugs_pref = viewed_bugs_key(manager.namespace, category_name)
        self.viewed_bugs: list[int] = self._load_viewed_bugs()

        self.is_expanded = False
        self._generation = 0

        self.surface: Surface | None = None
        self.box_region: Any = None
        self.head_region: Any = None
        self.count_region: Any = None
        self.new_count_region: Any = None
        self.list_region: Any = None
        self._wired_head: Any = None

    @property
    def category_name(self) -> str:
        return self._category_name

    def _load_viewed_bugs(self) -> list[int]:
        if not self.preferences.has(self.viewed_bugs_pref):
            return []
        return parse_id_list(self.preferences.get(self.viewed_bugs_pref) or "")

    def bug_url(self, bug_id: int) -> str:
        """Return the web URL of a bug."""
        return self.client.bug_url(bug_id)

    # -------------------------------------------------------------------------
    # Surface binding
    # -------------------------------------------------------------------------

    def attach(self, surface: Surface) -> None:
        """Bind the list to a render surface.

        Looks up the category's regions, attaches the current bugs, and
        wires the head's click handler. No fetch is started.

        Args:
            surface: Surface containing a box named after the category.

        Raises:
            RegionNotFoundError: If any region of the box is missing.
        """
        name = self.category_name
        box_region = surface.region(name)
        head_region = surface.region(name, CATEGORY_HEAD)
        count_region = surface.region(name, CATEGORY_COUNT)
        new_count_region = surface.region(name, CATEGORY_NEW_COUNT)
        list_region = surface.region(name, BUG_LIST)

        self.surface = surface
        self.box_region = box_region
        self.head_region = head_region
        self.count_region = count_region
        self.new_count_region = new_count_region
        self.list_region = list_region

        for bug in self.bugs:
            bug.attach(surface)

        # Re-attaching to the same head must not stack handlers
        if head_region is not self._wired_head:
            surface.on_click(head_region, self.on_click)
            self._wired_head = head_region

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def set_user_email(self, user_email: str) -> None:
        """Track another user's bugs and refresh.

        Only the email parameters already present in the query are
        rewritten.
        """
        params = self.query_parameters
        for key in USER_EMAIL_PARAMETERS:
            if key in params:
                params[key] = user_email

        await self.update()

    async def update(self) -> None:
        """Refresh the list from the API.

        Only the response to the most recent call is applied; an older
        response arriving later is dropped.
        """
        self._generation += 1
        generation = self._generation

        error: BugzillaAPIError | None = None
        records: list[dict[str, Any]] | None = None
        try:
            records = await self.client.search_bugs(dict(self.query_parameters))
        except BugzillaAPIError as e:
            error = e

        if generation != self._generation:
            self.reporter.log(
                f"{self.category_name}: dropping response {generation}, "
                f"newer request {self._generation} pending"
            )
            if self.activity_log:
                self.activity_log.log_stale_response(
                    self.category_name, generation, self._generation
                )
            return

        self.on_bugs_received(error, records)

    def on_bugs_received(
        self,
        error: BaseException | None,
        records: list[dict[str, Any]] | None,
    ) -> None:
        """Apply a search result.

        On error the previous bugs are kept. On success they are replaced
        by the returned records accepted by the filter, in response order.
        Either way the list is redrawn when attached.
        """
        if error is not None:
            self.reporter.log(f"{self.category_name}: fetch failed: {error}")
            if self.activity_log:
                self.activity_log.log_fetch_error(self.category_name, error)
        else:
            records = records or []
            self.bugs = []

            for record in records:
                if not self.is_in_list(record):
                    continue

                bug = Bug(self, record)
                bug.attach(self.surface)
                if bug.id not in self.viewed_bugs:
                    bug.is_new = True
                self.bugs.append(bug)

            if self.activity_log:
                self.activity_log.log_fetch(
                    self.category_name, self.query_parameters, len(records), len(self.bugs)
                )

        if self.surface is not None:
            self.draw()

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    @property
    def new_bug_count(self) -> int:
        """Count shown in the new-bug badge.

        This is the number of listed bugs minus the number of viewed IDs,
        not the number of bugs flagged new.
        """
        return max(0, len(self.bugs) - len(self.viewed_bugs))

    def draw(self) -> None:
        """Display the bugs on the attached surface.

        Raises:
            SurfaceError: If the list is not attached.
        """
        surface = self._require_surface()

        surface.set_text(self.count_region, str(len(self.bugs)))
        surface.set_text(self.new_count_region, f"({self.new_bug_count})")

        surface.clear_children(self.list_region)
        for bug in self.bugs:
            bug.draw(self.list_region)

        # A redraw leaves the box in its default collapsed state
        if self.is_expanded:
            self.expand()

    def _require_surface(self) -> Surface:
        if self.surface is None:
            raise SurfaceError(f"Bug list not attached: {self.category_name}")
        return self.surface

    # -------------------------------------------------------------------------
    # Expand / collapse
    # -------------------------------------------------------------------------

    def expand(self) -> None:
        """Open the category's bug list."""
        if self.surface is not None:
            self.surface.set_visible(self.list_region, True)
        self.is_expanded = True

    def collapse(self) -> None:
        """Close the category's bug list."""
        if self.surface is not None:
            self.surface.set_visible(self.list_region, False)
        self.is_expanded = False

    def on_click(self) -> None:
        """Toggle the list, collapsing any other open list first."""
        if self.is_expanded:
            self.collapse()
        else:
            self.manager.collapse_all_except(self)
            self.expand()

    # -------------------------------------------------------------------------
    # Viewed bugs
    # -------------------------------------------------------------------------

    def mark_as_viewed(self, bug_id: int) -> None:
        """Record a bug as viewed and persist the viewed IDs."""
        if bug_id not in self.viewed_bugs:
            self.viewed_bugs.append(bug_id)
            if self.activity_log:
                self.activity_log.log_viewed(self.category_name, bug_id)

        self.preferences.set(self.viewed_bugs_pref, format_id_list(self.viewed_bugs))
