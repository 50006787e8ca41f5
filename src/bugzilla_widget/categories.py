"""Built-in bug categories.

Each category pairs a Bugzilla search with a client-side filter. The
search narrows results on the server; the filter drops records the
search language cannot express precisely (open state, pending flags).
The user email slots are left empty and filled in by
``BugList.set_user_email``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigurationError

INCLUDE_FIELDS = "id,summary,status,resolution,assigned_to,creator,flags,last_change_time"

OPEN_STATUSES = ("UNCONFIRMED", "NEW", "ASSIGNED", "REOPENED")
DONE_STATUSES = ("RESOLVED", "VERIFIED", "CLOSED")


def is_open(bug: dict[str, Any]) -> bool:
    """Return True for bugs that are not resolved."""
    return bug.get("status") not in DONE_STATUSES and not bug.get("resolution")


def is_fixed(bug: dict[str, Any]) -> bool:
    """Return True for bugs resolved as fixed."""
    return bug.get("status") in DONE_STATUSES and bug.get("resolution") == "FIXED"


def has_pending_needinfo(bug: dict[str, Any]) -> bool:
    """Return True if a needinfo request on the bug is still open."""
    return any(
        flag.get("name") == "needinfo" and flag.get("status") == "?"
        for flag in bug.get("flags") or []
    )


@dataclass(frozen=True)
class Category:
    """A named bug search with its filter."""

    name: str
    title: str
    parameters: Callable[[], dict[str, Any]]
    is_in_list: Callable[[dict[str, Any]], bool]

    def query_parameters(self) -> dict[str, Any]:
        """Return a fresh copy of the category's search parameters."""
        params = self.parameters()
        params.setdefault("include_fields", INCLUDE_FIELDS)
        return params


def _assigned_parameters() -> dict[str, Any]:
    return {
        "email1": "",
        "emailtype1": "exact",
        "emailassigned_to1": "1",
        "resolution": "---",
    }


def _reported_parameters() -> dict[str, Any]:
    return {
        "email1": "",
        "emailtype1": "exact",
        "emailreporter1": "1",
        "resolution": "---",
    }


def _needinfo_parameters() -> dict[str, Any]:
    return {
        "field0-0-0": "requestees.login_name",
        "type0-0-0": "equals",
        "value0-0-0": "",
        "f1": "flagtypes.name",
        "o1": "equals",
        "v1": "needinfo?",
    }


def _cc_parameters() -> dict[str, Any]:
    return {
        "email1": "",
        "emailtype1": "exact",
        "emailcc1": "1",
        "resolution": "---",
    }


def _fixed_parameters() -> dict[str, Any]:
    return {
        "email1": "",
        "emailtype1": "exact",
        "emailassigned_to1": "1",
        "resolution": "FIXED",
        "chfield": "resolution",
        "chfieldfrom": "-7d",
    }


DEFAULT_CATEGORIES: dict[str, Category] = {
    category.name: category
    for category in (
        Category("assigned", "Assigned to me", _assigned_parameters, is_open),
        Category("reported", "Reported by me", _reported_parameters, is_open),
        Category("needinfo", "Needinfo requests", _needinfo_parameters, has_pending_needinfo),
        Category("cc", "CC'd on", _cc_parameters, is_open),
        Category("fixed", "Fixed this week", _fixed_parameters, is_fixed),
    )
}


def get_category(name: str) -> Category:
    """Return a built-in category.

    Raises:
        ConfigurationError: If there is no category with that name.
    """
    try:
        return DEFAULT_CATEGORIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown category: {name}",
            details={"available": sorted(DEFAULT_CATEGORIES)},
        ) from None
