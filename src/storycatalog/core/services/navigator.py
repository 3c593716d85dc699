from __future__ import annotations

"""
Story Navigator.

Read-only operations over the published hierarchy mapping: stepping to the
previous/next story or component, resolving selection requests into
navigation calls, and looking up story data and parameters.

The current selection is always passed in explicitly; the navigator keeps
no cursor of its own.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, List, Optional

from storycatalog.core.hierarchy.ids import kind_prefix, to_id
from storycatalog.domain.catalog_models import (
    Entry,
    Group,
    Navigate,
    Selection,
    StoriesHash,
    is_leaf,
)
from storycatalog.domain.constants import DEFAULT_VIEW_MODE, STORIES_HASH_KEY
from storycatalog.infra.store import Store

logger = logging.getLogger(__name__)

ToId = Callable[[str, str], str]

_DIRECTIONS = (-1, 1)


class StoryNavigator:
    """Sequential navigation and selection over the catalog."""

    def __init__(
            self,
            store: Store,
            navigate: Navigate,
            to_id: ToId = to_id,
            default_view_mode: str = DEFAULT_VIEW_MODE,
    ) -> None:
        self._store = store
        self._navigate = navigate
        self._to_id = to_id
        self._default_view_mode = default_view_mode

    # -------------------------------------------------------------------------
    # Sequential navigation
    # -------------------------------------------------------------------------

    def jump_to_story(self, direction: int, selection: Selection) -> Optional[str]:
        """
        Move to the previous (-1) or next (+1) story in catalog order.

        Does nothing without a current story, when the current id is not a
        story of the catalog, at either end of the list, or without a view
        mode.

        Returns:
            Optional[str]: The path navigated to, or None.
        """
        _check_direction(direction)
        stories_hash = self._stories_hash()

        if not selection.story_id or selection.story_id not in stories_hash:
            return None

        leaves = [key for key, entry in stories_hash.items() if is_leaf(entry)]
        if selection.story_id not in leaves:
            return None

        target = _step(leaves, leaves.index(selection.story_id), direction)
        if target is None or not selection.view_mode:
            return None

        return self._go(f"/{selection.view_mode}/{target}")

    def jump_to_component(self, direction: int, selection: Selection) -> Optional[str]:
        """
        Move to the first story of the previous (-1) or next (+1) component.

        Returns:
            Optional[str]: The path navigated to, or None.
        """
        _check_direction(direction)
        stories_hash = self._stories_hash()

        if not selection.story_id or selection.story_id not in stories_hash:
            return None

        # A component may also hold sub-groups; only its stories are targets
        components: List[List[str]] = []
        for entry in stories_hash.values():
            if not (isinstance(entry, Group) and entry.is_component):
                continue
            stories = [c for c in entry.children if is_leaf(stories_hash.get(c))]
            if stories:
                components.append(stories)

        index = next(
            (i for i, children in enumerate(components) if selection.story_id in children),
            None,
        )
        if index is None:
            return None

        target = _step(components, index, direction)
        if not target:
            return None

        view_mode = selection.view_mode or self._default_view_mode
        return self._go(f"/{view_mode}/{target[0]}")

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_story(
            self,
            kind_or_id: Optional[str],
            name: Optional[str] = None,
            selection: Selection = Selection(),
    ) -> Optional[str]:
        """
        Navigate to a story given its id, or its kind and name.

        - name omitted: 'kind_or_id' is a full story id;
        - kind omitted: the kind is taken from the current story id;
        - both given: the id is synthesized from them.

        Returns:
            Optional[str]: The path navigated to, or None.
        """
        view_mode = selection.view_mode or self._default_view_mode

        if not name:
            if not kind_or_id:
                logger.debug("Navigator: select_story called without a target.")
                return None
            return self._go(f"/{view_mode}/{kind_or_id}")

        if not kind_or_id:
            if not selection.story_id:
                logger.debug(f"Navigator: Cannot resolve story '{name}' without a current story.")
                return None
            # to_id is idempotent, so the already sanitized kind is fine here
            kind_or_id = kind_prefix(selection.story_id)

        try:
            story_id = self._to_id(kind_or_id, name)
        except ValueError as e:
            logger.warning(f"Navigator: {e}")
            return None

        return self.select_story(story_id, selection=selection)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_data(self, story_id: str) -> Optional[Entry]:
        return self._stories_hash().get(story_id)

    def get_parameters(self, story_id: str, parameter_name: Optional[str] = None) -> Any:
        """
        Return the parameters of a story, or one of them.

        Returns None for groups and unknown ids, and for a parameter the
        story does not define.
        """
        data = self.get_data(story_id)
        if not is_leaf(data):
            return None

        parameters = data.parameters
        if parameter_name:
            return parameters.get(parameter_name)
        return parameters

    def get_options(self, story_id: str) -> Any:
        return self.get_parameters(story_id, "options")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _stories_hash(self) -> StoriesHash:
        return self._store.get_state().get(STORIES_HASH_KEY) or MappingProxyType({})

    def _go(self, path: str) -> str:
        self._navigate(path)
        return path

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _check_direction(direction: int) -> None:
    if direction not in _DIRECTIONS:
        raise ValueError(f"Direction must be -1 or 1, got {direction!r}")


def _step(items: List[Any], index: int, direction: int) -> Any:
    """Return the neighbour of items[index], or None past either end."""
    target = index + direction
    if target < 0 or target >= len(items):
        return None
    return items[target]
