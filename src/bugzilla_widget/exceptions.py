"""Custom exceptions for bugzilla-widget.

This module defines custom exception classes for error handling
throughout the widget.
"""

from __future__ import annotations


class WidgetError(Exception):
    """Base exception for bugzilla-widget."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(WidgetError):
    """Raised when configuration is invalid or missing."""

    pass


class BugzillaAPIError(WidgetError):
    """Raised when a Bugzilla API request fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.error_code = error_code


class BugzillaAuthenticationError(BugzillaAPIError):
    """Raised when Bugzilla rejects the API key."""

    def __init__(self, message: str = "Bugzilla authentication failed"):
        super().__init__(message, status_code=401, error_code="authentication_failed")


class BugzillaTimeoutError(BugzillaAPIError):
    """Raised when a Bugzilla request exceeds the client timeout."""

    def __init__(self, message: str = "Bugzilla request timed out", details: dict | None = None):
        super().__init__(message, status_code=408, error_code="timeout", details=details)


class SurfaceError(WidgetError):
    """Raised when a render surface does not have the expected structure."""

    pass


class RegionNotFoundError(SurfaceError):
    """Raised when a region is missing from the render surface."""

    def __init__(self, key: str, marker: str | None = None):
        where = f"{key}/{marker}" if marker else key
        super().__init__(
            f"Region not found: {where}",
            details={"key": key, "marker": marker},
        )
        self.key = key
        self.marker = marker


class PreferenceError(WidgetError):
    """Raised when the preference file cannot be read or written."""

    pass
