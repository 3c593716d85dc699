from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared story batches, store and router fixtures.
"""

import os
import sys
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from storycatalog.infra.routing import MemoryRouter  # noqa: E402
from storycatalog.infra.store import Store  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_story() -> Callable[..., Dict[str, Any]]:
    """
    Factory for wire-format story records.

    Separators go under parameters["options"], as the registration
    subsystem sends them.
    """
    def _make(
            story_id: str,
            name: str,
            kind: str,
            root_separator: Any = "|",
            group_separator: Any = "/",
            **extra_parameters: Any,
    ) -> Dict[str, Any]:
        return {
            "id": story_id,
            "name": name,
            "kind": kind,
            "parameters": {
                "fileName": f"./src/{kind.lower()}.stories.js",
                "options": {
                    "hierarchyRootSeparator": root_separator,
                    "hierarchySeparator": group_separator,
                },
                **extra_parameters,
            },
        }

    return _make


@pytest.fixture
def ui_batch(make_story) -> Dict[str, Dict[str, Any]]:
    """Two stories under a single 'UI' component."""
    return {
        "ui--button": make_story("ui--button", "Button", "UI"),
        "ui--input": make_story("ui--input", "Input", "UI"),
    }


@pytest.fixture
def library_batch(make_story) -> Dict[str, Dict[str, Any]]:
    """
    A rooted two-level catalog.

    Structure:
    Lib (root)
      Forms
        Button: primary, secondary
        Input: empty
      Layout
        Grid: basic
    """
    return {
        "lib-forms-button--primary": make_story("lib-forms-button--primary", "Primary", "Lib|Forms/Button"),
        "lib-forms-button--secondary": make_story("lib-forms-button--secondary", "Secondary", "Lib|Forms/Button"),
        "lib-forms-input--empty": make_story("lib-forms-input--empty", "Empty", "Lib|Forms/Input"),
        "lib-layout-grid--basic": make_story("lib-layout-grid--basic", "Basic", "Lib|Layout/Grid"),
    }


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def router(store: Store) -> MemoryRouter:
    return MemoryRouter(store)
