"""Global configuration file loading."""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def get_global_config_path() -> Path:
    """Return the path of the global ~/.enumbuster/config.yml file."""
    return Path.home() / ".enumbuster" / "config.yml"


def load_global_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load global configuration from ~/.enumbuster/config.yml."""
    path = config_path or get_global_config_path()
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a mapping", path)
        return {}
    return data
