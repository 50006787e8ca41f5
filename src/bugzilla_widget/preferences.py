"""Preference stores for persisted widget state.

The widget only needs a string key/value store. Two stores are provided:
an in-memory one and a YAML file that is rewritten on every change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import yaml

from .exceptions import PreferenceError

DEFAULT_NAMESPACE = "australis-bugzilla-widget"


def viewed_bugs_key(namespace: str, category_name: str) -> str:
    """Return the preference key holding a category's viewed bug IDs."""
    return f"{namespace}.list.{category_name}.viewedBugs"


def parse_id_list(value: str) -> list[int]:
    """Parse a comma-separated list of bug IDs.

    Entries that are not decimal integers are skipped, as are duplicates.
    """
    ids: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            bug_id = int(part)
        except ValueError:
            continue
        if bug_id not in ids:
            ids.append(bug_id)
    return ids


def format_id_list(ids: list[int]) -> str:
    """Serialize bug IDs as a comma-separated string."""
    return ",".join(str(bug_id) for bug_id in ids)


class PreferenceStore(ABC):
    """String key/value preference store."""

    @abstractmethod
    def has(self, key: str) -> bool:
        """Return True if the key has a value."""
        pass

    @abstractmethod
    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value stored under key, or default."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key."""
        pass


class MemoryPreferences(PreferenceStore):
    """Preference store kept in a dict."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    def has(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)


class YamlPreferences(PreferenceStore):
    """Preference store persisted to a flat YAML mapping.

    The whole file is written back after each ``set`` so that state
    survives an abrupt exit.
    """

    def __init__(self, path: Path) -> None:
        """Load preferences from path.

        Args:
            path: YAML file location. A missing file is an empty store.

        Raises:
            PreferenceError: If the file exists but is not a YAML mapping.
        """
        self._path = Path(path).expanduser()
        self._values = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise PreferenceError(
                f"Cannot read preferences: {self._path}",
                details={"error": str(e)},
            ) from e

        if not isinstance(raw, dict):
            raise PreferenceError(f"Preferences file is not a mapping: {self._path}")

        return {str(k): str(v) for k, v in raw.items() if v is not None}

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                yaml.safe_dump(self._values, f, default_flow_style=False, sort_keys=True)
        except OSError as e:
            raise PreferenceError(
                f"Cannot write preferences: {self._path}",
                details={"error": str(e)},
            ) from e

    def has(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)
        self._save()
