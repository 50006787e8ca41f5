"""Activity logging for bug list operations.

Provides an append-only activity log in JSON Lines format recording
fetches, fetch errors, discarded responses and viewed bugs.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Patterns for sensitive keys
SENSITIVE_PATTERNS = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"credential", re.IGNORECASE),
]


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    return any(pattern.search(key) for pattern in SENSITIVE_PATTERNS)


def _sanitize(details: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of details with sensitive values redacted."""
    sanitized = {}
    for key, value in details.items():
        if _is_sensitive_key(key):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = _sanitize(value)
        else:
            sanitized[key] = value
    return sanitized


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass
class ActivityEvent:
    """A single activity log record."""

    timestamp: str
    event_type: str
    category: str
    details: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "timestamp": self.timestamp,
            "event_type": self.event_type,
            "category": self.category,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())


class ActivityLogger:
    """Append-only activity logger with JSON Lines format.

    The log file is flushed after each write.
    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the activity logger.

        Args:
            log_path: Path to the activity log file.
        """
        self._log_path = Path(log_path).expanduser()
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._log_path, "a", encoding="utf-8")  # noqa: SIM115

    def _write(self, event_type: str, category: str, details: dict[str, Any]) -> None:
        event = ActivityEvent(
            timestamp=_get_timestamp(),
            event_type=event_type,
            category=category,
            details=_sanitize(details),
        )
        self._file.write(event.to_json() + "\n")
        self._file.flush()

    def log_fetch(self, category: str, params: dict[str, Any], received: int, kept: int) -> None:
        """Log a completed fetch.

        Args:
            category: Category of the list that fetched.
            params: Query parameters sent (sensitive keys are redacted).
            received: Number of records returned by the server.
            kept: Number of records accepted by the category filter.
        """
        self._write(
            "fetch",
            category,
            {"params": dict(params), "received": received, "kept": kept},
        )

    def log_fetch_error(self, category: str, error: BaseException) -> None:
        """Log a failed fetch."""
        details: dict[str, Any] = {"error": str(error), "error_type": type(error).__name__}
        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            details["status_code"] = status_code
        self._write("fetch_error", category, details)

    def log_stale_response(self, category: str, generation: int, latest: int) -> None:
        """Log a response discarded because a newer fetch was issued."""
        self._write("stale_response", category, {"generation": generation, "latest": latest})

    def log_viewed(self, category: str, bug_id: int) -> None:
        """Log a bug marked as viewed."""
        self._write("viewed", category, {"bug_id": bug_id})

    def close(self) -> None:
        """Close the log file."""
        if self._file and not self._file.closed:
            self._file.close()

    def __enter__(self) -> ActivityLogger:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
