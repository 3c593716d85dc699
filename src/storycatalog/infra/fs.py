from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the OS-specific application data directory and the JSON readers
used to load configuration files and story batches.
"""

import json
import os
from typing import Any

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "StoryCatalog"
UNIX_APP_DIR_NAME = ".storycatalog"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/StoryCatalog
    - Linux/Mac: ~/.storycatalog

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: str) -> str:
    """Expand '~' and environment variables, then make the path absolute."""
    return os.path.abspath(os.path.expandvars(os.path.expanduser(path.strip())))

# -----------------------------------------------------------------------------
# JSON I/O
# -----------------------------------------------------------------------------

def read_json(path: str) -> Any:
    """
    Load a UTF-8 JSON document.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not valid JSON.
    """
    with open(normalize_path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: str, data: Any) -> None:
    """Persist 'data' as indented UTF-8 JSON, creating parent directories."""
    target = normalize_path(path)
    os.makedirs(os.path.dirname(target), exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=4)
