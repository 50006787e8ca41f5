"""Diagnostic reporting to stderr.

Fetch failures and other non-fatal problems are written as prefixed lines
so they stay out of the rendered output on stdout.
"""

from __future__ import annotations

import sys
from typing import TextIO

PREFIX = "[bugzilla-widget]"


class StderrReporter:
    """Writes diagnostic lines to stderr."""

    def __init__(self, stderr: TextIO | None = None) -> None:
        """Initialize the reporter.

        Args:
            stderr: Log stream (defaults to sys.stderr).
        """
        self._stderr = stderr or sys.stderr

    def log(self, message: str) -> None:
        """Write a log message to stderr.

        Args:
            message: Log message.
        """
        self._stderr.write(f"{PREFIX} {message}\n")
        self._stderr.flush()
