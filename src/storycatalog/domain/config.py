from __future__ import annotations

"""
Configuration Domain Management.

Loads and saves the user configuration (config.json in the user data
directory). Missing keys are filled from the defaults, and a corrupt file
falls back to the defaults instead of failing.
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

from storycatalog.core.hierarchy.merge import deep_merge
from storycatalog.domain.catalog_models import MergeAnomaly
from storycatalog.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_GROUP_SEPARATOR,
    DEFAULT_GROUP_SEPARATOR_SOURCE,
    DEFAULT_ROOT_SEPARATOR,
    DEFAULT_ROOT_SEPARATOR_SOURCE,
    DEFAULT_VIEW_MODE,
)
from storycatalog.infra.fs import get_user_data_dir, read_json, write_json

logger = logging.getLogger(__name__)

# Overridable location (tests point it at a temporary file)
CONFIG_FILE: Optional[str] = None

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "hierarchy": {
            "root_separator": DEFAULT_ROOT_SEPARATOR_SOURCE,
            "group_separator": DEFAULT_GROUP_SEPARATOR_SOURCE,
        },
        "navigation": {
            "default_view_mode": DEFAULT_VIEW_MODE,
        },
        "logging": {
            "level": "INFO",
            "log_to_file": False,
        },
    }


def get_config_path() -> str:
    return CONFIG_FILE or os.path.join(get_user_data_dir(), "config.json")

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the configuration from disk.

    User values take precedence; keys absent from the file come from the
    defaults.

    Returns:
        Dict[str, Any]: The effective configuration.
    """
    defaults = get_default_config()
    path = get_config_path()

    if not os.path.exists(path):
        logger.debug("Config file not found. Returning defaults.")
        return defaults

    try:
        data = read_json(path)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return defaults

    anomalies: List[MergeAnomaly] = []
    config = deep_merge(data, defaults, anomalies)
    for anomaly in anomalies:
        logger.warning(f"Config key '{anomaly.path}' has an unexpected type.")

    config["version"] = CURRENT_CONFIG_VERSION
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    path = get_config_path()
    try:
        write_json(path, dict(config, version=CURRENT_CONFIG_VERSION))
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")

# -----------------------------------------------------------------------------
# Derived Settings
# -----------------------------------------------------------------------------
def compile_separators(config: Dict[str, Any]) -> Tuple[re.Pattern, re.Pattern]:
    """
    Compile the default separator pair from the configuration.

    Invalid expressions are reported and replaced by the built-in defaults.

    Returns:
        Tuple[re.Pattern, re.Pattern]: (root_separator, group_separator).
    """
    hierarchy = config.get("hierarchy", {})
    root = _compile(hierarchy.get("root_separator"), DEFAULT_ROOT_SEPARATOR, "root_separator")
    group = _compile(hierarchy.get("group_separator"), DEFAULT_GROUP_SEPARATOR, "group_separator")
    return root, group


def _compile(source: Any, fallback: re.Pattern, key: str) -> re.Pattern:
    if not isinstance(source, str) or not source:
        return fallback
    try:
        return re.compile(source)
    except re.error as e:
        logger.warning(f"Invalid {key} pattern {source!r}: {e}. Using default.")
        return fallback
