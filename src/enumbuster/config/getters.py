"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from .env_loader import load_global_config

CONFIG_KEYS = (
    "ENUMBUSTER_THREADS",
    "ENUMBUSTER_TIMEOUT",
    "ENUMBUSTER_USER_AGENT",
    "ENUMBUSTER_VERBOSE",
    "ENUMBUSTER_DEBUG",
    "ENUMBUSTER_OUTPUT",
)

_TRUTHY = {"1", "true", "yes", "on"}


def get_config(key: str, default: Any = None, config_path: Path | None = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Global config file
    3. Default value

    Args:
        key: Configuration key
        default: Default value if not found
        config_path: Optional override for the global config file

    Returns:
        Configuration value or default
    """
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    global_config = load_global_config(config_path)
    if key in global_config and global_config[key] is not None:
        return global_config[key]

    return default


def get_bool(key: str, default: bool = False) -> bool:
    """Interpret a config value as a boolean flag."""
    value = get_config(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _get_number(key: str, default: float, cast: type) -> Any:
    value = get_config(key)
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


def get_default_threads() -> int:
    """Default concurrency (10)."""
    return max(1, _get_number("ENUMBUSTER_THREADS", 10, int))


def get_default_timeout(default: float = 10.0) -> float:
    """Default per-request timeout in seconds."""
    value = _get_number("ENUMBUSTER_TIMEOUT", default, float)
    return value if value > 0 else default


def get_user_agent(version: str) -> str:
    """User-Agent sent by HTTP modes unless overridden with -a."""
    return str(get_config("ENUMBUSTER_USER_AGENT", default=f"enumbuster/{version}"))


def get_default_output() -> Path | None:
    """Result file used when -o is not given."""
    value = get_config("ENUMBUSTER_OUTPUT")
    return Path(value) if value else None


def is_verbose_enabled() -> bool:
    """Resolve verbose mode from ENUMBUSTER_VERBOSE."""
    return get_bool("ENUMBUSTER_VERBOSE")


def is_debug_enabled() -> bool:
    """Resolve debug logging from ENUMBUSTER_DEBUG."""
    return get_bool("ENUMBUSTER_DEBUG")
