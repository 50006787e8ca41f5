"""Bugzilla bug list widget.

Fetches a user's bugs from Bugzilla and renders them as collapsible,
categorized lists.
"""

__version__ = "1.0.0"

from bugzilla_widget.bug import Bug
from bugzilla_widget.bug_list import BugList
from bugzilla_widget.client import BugzillaClient
from bugzilla_widget.manager import BugListManager
from bugzilla_widget.preferences import MemoryPreferences, PreferenceStore, YamlPreferences
from bugzilla_widget.surface import Surface, TreeSurface

__all__ = [
    "Bug",
    "BugList",
    "BugListManager",
    "BugzillaClient",
    "MemoryPreferences",
    "PreferenceStore",
    "Surface",
    "TreeSurface",
    "YamlPreferences",
    "__version__",
]
