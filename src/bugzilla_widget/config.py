"""Configuration management for bugzilla-widget.

This module handles loading and validation of configuration from
YAML files and environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .categories import DEFAULT_CATEGORIES
from .exceptions import ConfigurationError
from .preferences import DEFAULT_NAMESPACE

DEFAULT_CONFIG_PATH = Path("~/.bugzilla-widget/config.yaml")
DEFAULT_PREFS_PATH = Path("~/.bugzilla-widget/prefs.yaml")
DEFAULT_CATEGORY_NAMES = ["assigned", "reported", "needinfo"]


@dataclass
class BugzillaConfig:
    """Bugzilla API settings."""

    url: str = "https://bugzilla.mozilla.org/rest"
    api_key: str = ""
    timeout: float = 30

    def validate(self) -> None:
        """Validate API settings."""
        if not self.url:
            raise ConfigurationError("Bugzilla URL is required")
        if not self.url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Bugzilla URL must be http(s): {self.url}")
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive: {self.timeout}")


@dataclass
class PreferencesConfig:
    """Preference storage settings."""

    path: Path = DEFAULT_PREFS_PATH
    namespace: str = DEFAULT_NAMESPACE


@dataclass
class WidgetConfig:
    """Main configuration for bugzilla-widget."""

    bugzilla: BugzillaConfig = field(default_factory=BugzillaConfig)
    preferences: PreferencesConfig = field(default_factory=PreferencesConfig)
    user_email: str = ""
    activity_log: Path | None = None
    categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORY_NAMES))

    @classmethod
    def load_from_file(cls, config_path: Path) -> WidgetConfig:
        """Load configuration from YAML file."""
        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {config_path}",
                details={"error": str(e)},
            ) from e

        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"Configuration must be a mapping: {config_path}")

        return cls._parse_config(raw_config)

    @classmethod
    def _parse_config(cls, raw_config: dict) -> WidgetConfig:
        """Parse raw configuration dictionary."""
        bugzilla_config = raw_config.get("bugzilla") or {}
        user_config = raw_config.get("user") or {}
        prefs_config = raw_config.get("preferences") or {}
        logging_config = raw_config.get("logging") or {}

        bugzilla = BugzillaConfig(
            url=cls._resolve_env_var(bugzilla_config.get("url", BugzillaConfig.url)),
            api_key=cls._resolve_env_var(bugzilla_config.get("api_key", "")),
            timeout=cls._parse_timeout(bugzilla_config.get("timeout", 30)),
        )

        preferences = PreferencesConfig(
            path=Path(cls._resolve_env_var(prefs_config.get("path", str(DEFAULT_PREFS_PATH)))),
            namespace=prefs_config.get("namespace", DEFAULT_NAMESPACE),
        )

        activity_log = cls._resolve_env_var(logging_config.get("activity_log", ""))

        categories = raw_config.get("categories")
        if categories is None:
            categories = list(DEFAULT_CATEGORY_NAMES)

        return cls(
            bugzilla=bugzilla,
            preferences=preferences,
            user_email=cls._resolve_env_var(user_config.get("email", "")),
            activity_log=Path(activity_log) if activity_log else None,
            categories=list(categories),
        )

    @classmethod
    def _parse_timeout(cls, value: str | float) -> float:
        """Convert a timeout setting, resolving ${VAR} references first."""
        value = cls._resolve_env_var(value)
        if value == "":
            return BugzillaConfig.timeout
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Timeout must be a number: {value!r}") from e

    @staticmethod
    def _resolve_env_var(value: str) -> str:
        """Resolve environment variable references in config values.

        Supports ${VAR_NAME} syntax for environment variables.
        """
        if not isinstance(value, str):
            return value

        if value.startswith("${") and value.endswith("}"):
            var_name = value[2:-1]
            return os.environ.get(var_name, "")

        return value

    def validate(self) -> None:
        """Validate configuration."""
        self.bugzilla.validate()

        if not self.categories:
            raise ConfigurationError("At least one category is required")

        unknown = [name for name in self.categories if name not in DEFAULT_CATEGORIES]
        if unknown:
            raise ConfigurationError(
                f"Unknown categories: {', '.join(unknown)}",
                details={"available": sorted(DEFAULT_CATEGORIES)},
            )

    @classmethod
    def from_environment(cls) -> WidgetConfig:
        """Create configuration from environment variables only."""
        try:
            timeout = float(os.environ.get("BUGZILLA_TIMEOUT", "30"))
        except ValueError as e:
            raise ConfigurationError("BUGZILLA_TIMEOUT must be a number") from e

        return cls(
            bugzilla=BugzillaConfig(
                url=os.environ.get("BUGZILLA_URL", BugzillaConfig.url),
                api_key=os.environ.get("BUGZILLA_API_KEY", ""),
                timeout=timeout,
            ),
            preferences=PreferencesConfig(
                path=Path(os.environ.get("BUGZILLA_WIDGET_PREFS", str(DEFAULT_PREFS_PATH))),
            ),
            user_email=os.environ.get("BUGZILLA_EMAIL", ""),
        )


def load_config(config_path: Path | None = None) -> WidgetConfig:
    """Load configuration with fallback to environment variables.

    Args:
        config_path: Optional path to config file. Defaults to
                     ~/.bugzilla-widget/config.yaml.

    Returns:
        Validated WidgetConfig instance.

    Raises:
        ConfigurationError: If the configuration is invalid, or if an
            explicitly given config_path does not exist.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH.expanduser()
    else:
        config_path = Path(config_path).expanduser()
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

    if config_path.exists():
        config = WidgetConfig.load_from_file(config_path)
    else:
        config = WidgetConfig.from_environment()

    config.validate()
    return config
