"""A single bug shown in a bug list."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .bug_list import BugList
    from .surface import Surface

BUG_CLASS = "bug"
NEW_BUG_CLASS = "new"


class Bug:
    """Wraps one Bugzilla bug record.

    A bug knows the list it belongs to so that opening it can mark it as
    viewed and redraw the list.
    """

    def __init__(self, bug_list: BugList, data: dict[str, Any]) -> None:
        """Wrap a bug record.

        Args:
            bug_list: Owning bug list.
            data: Bug record as returned by the search API.

        Raises:
            ValueError: If the record has no integer ``id``.
        """
        bug_id = data.get("id")
        if isinstance(bug_id, bool) or not isinstance(bug_id, int):
            raise ValueError(f"Bug record has no integer id: {bug_id!r}")

        self.bug_list = bug_list
        self.data = data
        self.is_new = False
        self.surface: Surface | None = None
        self.node: Any = None

    @property
    def id(self) -> int:
        return self.data["id"]

    @property
    def summary(self) -> str:
        return self.data.get("summary", "")

    @property
    def status(self) -> str:
        return self.data.get("status", "")

    @property
    def url(self) -> str:
        return self.bug_list.bug_url(self.id)

    @property
    def label(self) -> str:
        """Text shown for the bug in the list."""
        return f"{self.id} - {self.summary}" if self.summary else str(self.id)

    def attach(self, surface: Surface | None) -> None:
        """Set the surface this bug is drawn on."""
        self.surface = surface

    def draw(self, container: Any) -> None:
        """Append this bug's node to container.

        New bugs carry an extra class marker so the surface can badge them.
        """
        if self.surface is None:
            return

        classes = (BUG_CLASS, NEW_BUG_CLASS) if self.is_new else (BUG_CLASS,)
        self.node = self.surface.create_node(self.label, classes)
        self.surface.append_child(container, self.node)
        self.surface.on_click(self.node, self.open)

    def open(self) -> None:
        """Handle the user opening this bug."""
        self.bug_list.mark_as_viewed(self.id)
        self.is_new = False
        if self.bug_list.surface is not None:
            self.bug_list.draw()
