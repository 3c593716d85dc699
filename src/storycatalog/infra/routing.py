from __future__ import annotations

"""
Location Routing.

Minimal router standing in for the host application's location handling.
Navigating to "/<view_mode>/<story_id>" records the location and writes the
new selection into the store.
"""

import logging
from typing import Any, List, Mapping, Optional, Tuple

from storycatalog.domain.constants import STORY_ID_KEY, VIEW_MODE_KEY
from storycatalog.infra.store import Store

logger = logging.getLogger(__name__)


class MemoryRouter:
    """Records navigation history and keeps the store selection in sync."""

    def __init__(self, store: Store) -> None:
        self._store = store
        self.history: List[str] = []

    @property
    def location(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def navigate(self, path: str, options: Optional[Mapping[str, Any]] = None) -> None:
        """
        Move to 'path' and update the selected story and view mode.

        Args:
            path: Target location, "/<view_mode>/<story_id>".
            options: Routing options; {"replace": True} overwrites the
                current history entry instead of pushing a new one.
        """
        if options and options.get("replace") and self.history:
            self.history[-1] = path
        else:
            self.history.append(path)

        view_mode, story_id = parse_story_path(path)
        logger.debug(f"Router: Navigated to {path}")
        self._store.set_state({VIEW_MODE_KEY: view_mode, STORY_ID_KEY: story_id})


def parse_story_path(path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract (view_mode, story_id) from a location path.

    Missing parts come back as None.
    """
    parts = [p for p in path.split("/") if p]
    view_mode = parts[0] if parts else None
    story_id = "/".join(parts[1:]) or None
    return view_mode, story_id
