from __future__ import annotations

"""
Stories API Facade.

Wires the catalog (writer) and the navigator (reader) to a store and a
navigate function, and reads the externally owned selection from the store
before handing it explicitly to the navigator.
"""

import logging
from typing import Any, Dict, Optional

from storycatalog.core.hierarchy.ids import to_id
from storycatalog.core.services.catalog import RawBatch, StoryCatalog
from storycatalog.core.services.navigator import StoryNavigator
from storycatalog.domain.catalog_models import (
    Entry,
    Navigate,
    RegistrationResult,
    Selection,
    StoriesHash,
)
from storycatalog.domain.config import compile_separators, get_default_config
from storycatalog.domain.constants import (
    DEFAULT_VIEW_MODE,
    STORIES_HASH_KEY,
    STORY_ID_KEY,
    VIEW_MODE_KEY,
)
from storycatalog.infra.routing import MemoryRouter
from storycatalog.infra.store import Store

logger = logging.getLogger(__name__)


class StoriesApi:
    """Public surface used by hosts to register and browse stories."""

    def __init__(
            self,
            store: Store,
            navigate: Navigate,
            catalog: StoryCatalog,
            navigator: StoryNavigator,
            initial_selection: Optional[Selection] = None,
    ) -> None:
        self.store = store
        self.navigate = navigate
        self.catalog = catalog
        self.navigator = navigator

        initial = initial_selection or Selection()
        self.store.set_state({
            STORIES_HASH_KEY: self.catalog.get_stories_hash(),
            STORY_ID_KEY: initial.story_id,
            VIEW_MODE_KEY: initial.view_mode,
        })

    @classmethod
    def create(
            cls,
            config: Optional[Dict[str, Any]] = None,
            store: Optional[Store] = None,
            navigate: Optional[Navigate] = None,
            initial_selection: Optional[Selection] = None,
    ) -> "StoriesApi":
        """
        Build the API from a configuration dictionary.

        Args:
            config: Effective configuration (defaults when omitted).
            store: State store; a fresh one when omitted.
            navigate: Routing primitive; a MemoryRouter over the store when
                omitted.
            initial_selection: Selection to start from.

        Returns:
            StoriesApi: Ready-to-use facade.
        """
        config = config or get_default_config()
        store = store or Store()
        if navigate is None:
            navigate = MemoryRouter(store).navigate

        root_separator, group_separator = compile_separators(config)
        view_mode = config.get("navigation", {}).get("default_view_mode") or DEFAULT_VIEW_MODE

        catalog = StoryCatalog(store, navigate, root_separator, group_separator)
        navigator = StoryNavigator(store, navigate, default_view_mode=view_mode)
        return cls(store, navigate, catalog, navigator, initial_selection)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def selection(self) -> Selection:
        state = self.store.get_state()
        return Selection(story_id=state.get(STORY_ID_KEY), view_mode=state.get(VIEW_MODE_KEY))

    @property
    def stories_hash(self) -> StoriesHash:
        return self.catalog.get_stories_hash()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def set_stories(self, batch: RawBatch) -> RegistrationResult:
        return self.catalog.set_stories(batch, self.selection)

    def select_story(self, kind_or_id: Optional[str], name: Optional[str] = None) -> Optional[str]:
        return self.navigator.select_story(kind_or_id, name, self.selection)

    def jump_to_story(self, direction: int) -> Optional[str]:
        return self.navigator.jump_to_story(direction, self.selection)

    def jump_to_component(self, direction: int) -> Optional[str]:
        return self.navigator.jump_to_component(direction, self.selection)

    def get_data(self, story_id: str) -> Optional[Entry]:
        return self.navigator.get_data(story_id)

    def get_parameters(self, story_id: str, parameter_name: Optional[str] = None) -> Any:
        return self.navigator.get_parameters(story_id, parameter_name)

    def get_options(self, story_id: str) -> Any:
        return self.navigator.get_options(story_id)

    @staticmethod
    def story_id(kind: str, name: str) -> str:
        return to_id(kind, name)
