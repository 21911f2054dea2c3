"""
Configuration defaults for enumbuster.

Command-line flags always win. Defaults are resolved in order of priority:
1. Environment variables (highest priority)
2. Global config file (~/.enumbuster/config.yml)
3. Built-in default values (lowest priority)
"""

from .env_loader import get_global_config_path, load_global_config
from .getters import (
    CONFIG_KEYS,
    get_bool,
    get_config,
    get_default_output,
    get_default_threads,
    get_default_timeout,
    get_user_agent,
    is_debug_enabled,
    is_verbose_enabled,
)

__all__ = [
    # env_loader
    "get_global_config_path",
    "load_global_config",
    # getters
    "CONFIG_KEYS",
    "get_bool",
    "get_config",
    "get_default_output",
    "get_default_threads",
    "get_default_timeout",
    "get_user_agent",
    "is_debug_enabled",
    "is_verbose_enabled",
]
