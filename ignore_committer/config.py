"""
Configuration loading and validation for Ignore Committer.

This module handles:
- Loading ignore-committer.yaml (or an explicit path)
- Environment variable resolution (${VAR} syntax)
- Validation of field types
- Default values for optional fields
- Caching of the loaded configuration
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ignore_committer.models import Policy

DEFAULT_CONFIG_FILE = "ignore-committer.yaml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class StrategyConfig:
    """Fields of the build strategy form."""
    ignored_authors: str = ""                       # Comma-separated author emails
    allow_build_if_not_excluded_author: bool = False  # One non-ignored author is enough
    check_only_head: bool = False                   # Only look at the branch tip

    def to_policy(self) -> Policy:
        """Build the immutable policy used by the strategy."""
        return Policy(
            ignored_authors=self.ignored_authors,
            allow_build_if_not_excluded_author=self.allow_build_if_not_excluded_author,
            check_only_head=self.check_only_head,
        )


@dataclass
class GitConfig:
    """Git changeset provider configuration."""
    binary: str = "git"                        # Path to git binary
    timeout_seconds: int = 60                  # Timeout for git commands


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"                        # Root log level


@dataclass
class IgnoreCommitterConfig:
    """
    Main configuration for Ignore Committer.

    This is the top-level config loaded from ignore-committer.yaml.
    """
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    git: GitConfig = field(default_factory=GitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Module-level cache for the loaded configuration
_config_cache: Optional[IgnoreCommitterConfig] = None


def _resolve_env_vars(value: Any) -> Any:
    """
    Resolve environment variables in a value.

    Supports ${VAR} syntax for environment variable substitution.
    Returns the original value if it's not a string.
    """
    if isinstance(value, str):
        pattern = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

        def replace(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable ${{{var_name}}} is not set")
            return env_value

        return pattern.sub(replace, value)

    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]

    return value


def _require_bool(data: dict[str, Any], key: str, section: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{section}.{key} must be a boolean, got {value!r}")
    return value


def _parse_ignored_authors(value: Any) -> str:
    """Accept either a comma-separated string or a list of emails."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join(str(item) for item in value)
    raise ConfigError(f"strategy.ignored_authors must be a string or a list, got {value!r}")


def _parse_strategy_config(data: dict[str, Any]) -> StrategyConfig:
    """Parse strategy configuration from dict."""
    return StrategyConfig(
        ignored_authors=_parse_ignored_authors(data.get("ignored_authors", "")),
        allow_build_if_not_excluded_author=_require_bool(
            data, "allow_build_if_not_excluded_author", "strategy", False
        ),
        check_only_head=_require_bool(data, "check_only_head", "strategy", False),
    )


def _parse_git_config(data: dict[str, Any]) -> GitConfig:
    """Parse git configuration from dict."""
    timeout = data.get("timeout_seconds", 60)
    if not isinstance(timeout, int) or isinstance(timeout, bool) or timeout <= 0:
        raise ConfigError(f"git.timeout_seconds must be a positive integer, got {timeout!r}")
    return GitConfig(
        binary=data.get("binary", "git"),
        timeout_seconds=timeout,
    )


def _parse_logging_config(data: dict[str, Any]) -> LoggingConfig:
    """Parse logging configuration from dict."""
    level = str(data.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    return LoggingConfig(level=level)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def load_config(config_path: Optional[str] = None) -> IgnoreCommitterConfig:
    """
    Load configuration from ignore-committer.yaml.

    Args:
        config_path: Optional path to config file. If not provided,
                     looks for ignore-committer.yaml in current directory.

    Returns:
        IgnoreCommitterConfig: Loaded and validated configuration.

    Raises:
        ConfigError: If config is invalid or cannot be loaded.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r") as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if not raw_data:
        raise ConfigError("Configuration file is empty")
    if not isinstance(raw_data, dict):
        raise ConfigError("Configuration file must contain a mapping")

    # Resolve environment variables
    data = _resolve_env_vars(raw_data)

    return IgnoreCommitterConfig(
        strategy=_parse_strategy_config(_section(data, "strategy")),
        git=_parse_git_config(_section(data, "git")),
        logging=_parse_logging_config(_section(data, "logging")),
    )


def get_config(config_path: Optional[str] = None, force_reload: bool = False) -> IgnoreCommitterConfig:
    """
    Get the cached configuration, loading it if necessary.

    Args:
        config_path: Optional path to config file.
        force_reload: If True, reload configuration even if cached.

    Returns:
        IgnoreCommitterConfig: The loaded configuration.

    Raises:
        ConfigError: If config is invalid or cannot be loaded.
    """
    global _config_cache

    if _config_cache is None or force_reload:
        _config_cache = load_config(config_path)

    return _config_cache


def clear_config_cache() -> None:
    """Clear the configuration cache. Useful for testing."""
    global _config_cache
    _config_cache = None
