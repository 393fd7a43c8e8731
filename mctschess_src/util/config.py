"""Utility file for parsing yaml configuration file."""
from pathlib import Path
from typing import Any

import yaml

BASE = Path(__file__).resolve().parent.parent
CONFIG_PATH = BASE.parent / "config.yaml"

config: dict = (yaml.safe_load(CONFIG_PATH.read_text()) or {}) if CONFIG_PATH.exists() else {}


def get_key(key: str, default: Any = None) -> Any:  # noqa: ANN401
    """
    Get a configuration value by key. Search through nested keys using dot notation.

    Args:
        key (str): The key to look up in the configuration, e.g. "mcts.max_playouts".
        default: The default value to return if the key is not found.

    Returns:
        The value associated with the key, or the default value if the key is not found.
    """
    value = config
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default
    return value


def is_verbose(section: str | None = None) -> bool:
    """
    Return the verbose flag of a config section, e.g. "mcts.verbose".

    A section without its own flag, or no section at all, falls back to "logging.verbose".
    """
    fallback = bool(get_key("logging.verbose", False))
    if section is None:
        return fallback
    return bool(get_key(f"{section}.verbose", fallback))
