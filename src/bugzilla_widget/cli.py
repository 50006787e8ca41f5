"""Command line front end.

Fetches every configured category for a user and prints the widget as
text. A category can be expanded to list its bugs.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from . import __version__
from .activity import ActivityLogger
from .categories import get_category
from .client import BugzillaClient
from .config import WidgetConfig, load_config
from .exceptions import ConfigurationError, WidgetError
from .manager import BugListManager, build_surface
from .preferences import YamlPreferences
from .reporter import StderrReporter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bugzilla-widget",
        description="Show a user's Bugzilla bugs grouped by category",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration YAML file (default: ~/.bugzilla-widget/config.yaml)",
    )
    parser.add_argument(
        "--email",
        "-e",
        default=None,
        help="Email of the user whose bugs are listed (overrides configuration)",
    )
    parser.add_argument(
        "--expand",
        "-x",
        metavar="CATEGORY",
        default=None,
        help="Category whose bugs are listed",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"bugzilla-widget {__version__}",
    )
    return parser


async def run(config: WidgetConfig, email: str, expand: str | None, reporter: StderrReporter) -> str:
    """Fetch and render the widget.

    Returns:
        The rendered surface as text.
    """
    categories = [get_category(name) for name in config.categories]

    client = BugzillaClient(
        base_url=config.bugzilla.url,
        api_key=config.bugzilla.api_key,
        timeout=config.bugzilla.timeout,
    )
    activity_log: ActivityLogger | None = None

    try:
        preferences = YamlPreferences(config.preferences.path)
        if config.activity_log:
            activity_log = ActivityLogger(config.activity_log)
        manager = BugListManager(
            client,
            preferences,
            namespace=config.preferences.namespace,
            reporter=reporter,
            activity_log=activity_log,
        )

        for category in categories:
            manager.add_category(category)

        surface = build_surface(categories)
        manager.attach(surface)
        manager.draw()

        await manager.set_user_email(email)

        if expand:
            bug_list = manager.bug_lists[expand]
            surface.click(bug_list.head_region)

        return surface.render_text()
    finally:
        await client.close()
        if activity_log:
            activity_log.close()


def main(argv: list[str] | None = None) -> int:
    """Run the command line front end.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)
    reporter = StderrReporter()

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    email = args.email or config.user_email
    if not email:
        print("Error: no user email; pass --email or set user.email", file=sys.stderr)
        return 1

    if args.expand and args.expand not in config.categories:
        print(f"Error: category not configured: {args.expand}", file=sys.stderr)
        return 1

    try:
        output = asyncio.run(run(config, email, args.expand, reporter))
    except KeyboardInterrupt:
        reporter.log("Interrupted, shutting down")
        return 130
    except WidgetError as e:
        reporter.log(f"Error: {e}")
        return 1

    print(output)
    return 0
