from __future__ import annotations

"""
Story Catalog Service.

Owns the hierarchy mapping. Each registration batch is folded into the
current mapping: every story path is split into its group chain, the
chain is merged into the existing groups (so siblings accumulate children
instead of overwriting each other), and the story itself is attached under
its component group. The resulting mapping is published read-only through
the store.
"""

import logging
import threading
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from storycatalog.core.hierarchy.group_builder import IdOf, build_chain, link_chain
from storycatalog.core.hierarchy.ids import group_id
from storycatalog.core.hierarchy.merge import deep_merge
from storycatalog.core.hierarchy.path_splitter import Separator, resolve_separators, split_path
from storycatalog.domain.catalog_models import (
    Entry,
    Group,
    Leaf,
    LeafRecord,
    MergeAnomaly,
    Navigate,
    RegistrationResult,
    Selection,
    StoriesHash,
    is_leaf,
)
from storycatalog.domain.constants import (
    DEFAULT_GROUP_SEPARATOR,
    DEFAULT_ROOT_SEPARATOR,
    FALLBACK_GROUP_NAME,
    STORIES_HASH_KEY,
    STORY_ID_KEY,
    VIEW_MODE_KEY,
)
from storycatalog.infra.store import Store

logger = logging.getLogger(__name__)

RawBatch = Mapping[str, Union[LeafRecord, Mapping[str, Any]]]


class StoryCatalog:
    """
    Single writer of the hierarchy mapping.

    Registration batches are serialized by an internal lock; readers only
    ever see complete, published mappings.
    """

    def __init__(
            self,
            store: Store,
            navigate: Navigate,
            root_separator: Separator = DEFAULT_ROOT_SEPARATOR,
            group_separator: Separator = DEFAULT_GROUP_SEPARATOR,
            id_of: IdOf = group_id,
    ) -> None:
        """
        Args:
            store: State store the mapping is published to.
            navigate: Routing primitive used by the selection recovery rule.
            root_separator: Default root separator for stories without one.
            group_separator: Default group separator for stories without one.
            id_of: Group id synthesis for a (parent id, name) pair.
        """
        self._store = store
        self._navigate = navigate
        self._root_separator = root_separator
        self._group_separator = group_separator
        self._id_of = id_of
        self._lock = threading.Lock()

    def get_stories_hash(self) -> StoriesHash:
        """Return the last published mapping (empty before any batch)."""
        return self._store.get_state().get(STORIES_HASH_KEY) or MappingProxyType({})

    def set_stories(
            self,
            batch: RawBatch,
            selection: Optional[Selection] = None,
    ) -> RegistrationResult:
        """
        Register a batch of stories.

        Args:
            batch: Story id -> LeafRecord (or its wire dictionary).
            selection: Current selection; read from the store when omitted.

        Returns:
            RegistrationResult: Counts, new story ids, merge anomalies and the
            recovery navigation, if one was issued.

        Raises:
            ValueError: If a wire record lacks a required field.
        """
        records = [_as_record(item) for item in batch.values()]

        with self._lock:
            stories_hash: Dict[str, Entry] = dict(self.get_stories_hash())
            anomalies: List[MergeAnomaly] = []
            added: List[str] = []

            for record in records:
                known = is_leaf(stories_hash.get(record.id))
                if self._register(stories_hash, record, anomalies) and not known:
                    added.append(record.id)

            self._store.set_state({STORIES_HASH_KEY: MappingProxyType(stories_hash)})

            if selection is None:
                state = self._store.get_state()
                selection = Selection(state.get(STORY_ID_KEY), state.get(VIEW_MODE_KEY))
            navigated_to = self._recover_selection(stories_hash, selection)

        groups_count = sum(1 for entry in stories_hash.values() if not is_leaf(entry))
        result = RegistrationResult(
            stories_count=len(stories_hash) - groups_count,
            groups_count=groups_count,
            added_stories=added,
            anomalies=anomalies,
            navigated_to=navigated_to,
        )
        logger.info(
            f"Catalog: Registered {len(records)} stories "
            f"({result.stories_count} stories, {groups_count} groups in catalog)."
        )
        return result

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _register(
            self,
            stories_hash: Dict[str, Entry],
            record: LeafRecord,
            anomalies: List[MergeAnomaly],
    ) -> bool:
        """
        Fold one story and its group chain into the mapping.

        Returns:
            bool: False when the story id is held by a group and the story
            was not stored.
        """
        root_sep, group_sep = resolve_separators(
            record.parameters, self._root_separator, self._group_separator
        )
        root, groups = split_path(record.kind, root_sep, group_sep)
        chain = build_chain(root, groups, self._id_of)

        if not chain:
            logger.warning(
                f"Catalog: Story '{record.id}' has no usable path segments, "
                f"filing it under '{FALLBACK_GROUP_NAME}'."
            )
            chain = build_chain(None, [FALLBACK_GROUP_NAME], self._id_of)

        # A story id already taken by a group (stored or in its own chain)
        # leaves the mapping untouched
        leaf = Leaf.from_record(record, parent=chain[-1].id)
        clash = stories_hash.get(record.id)
        if clash is None:
            clash = next((group for group in chain if group.id == record.id), None)
        if clash is not None and not is_leaf(clash):
            _report_collision(record.id, clash, leaf, anomalies)
            return False

        last_index = len(chain) - 1
        for index, group in enumerate(link_chain(chain, record.id)):
            existing = stories_hash.get(group.id)

            if is_leaf(existing):
                _report_collision(group.id, existing, group, anomalies)
                continue

            base = existing.to_dict() if existing is not None else {}
            merged = Group.from_dict(deep_merge(base, group.to_dict(), anomalies))

            # A group that directly holds a story is a component, whatever
            # an earlier, deeper path said about it
            if index == last_index and not merged.is_component:
                merged = replace(merged, is_component=True)

            stories_hash[group.id] = merged

        stories_hash[record.id] = leaf
        return True

    def _recover_selection(
            self,
            stories_hash: Mapping[str, Entry],
            selection: Selection,
    ) -> Optional[str]:
        """Select the first story when the current one is gone."""
        if selection.story_id and selection.story_id in stories_hash:
            return None

        first_leaf = next((entry for entry in stories_hash.values() if is_leaf(entry)), None)
        if not selection.view_mode or first_leaf is None:
            return None

        path = f"/{selection.view_mode}/{first_leaf.id}"
        logger.debug(f"Catalog: Selection '{selection.story_id}' unavailable, moving to {path}")
        self._navigate(path)
        return path

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _as_record(item: Union[LeafRecord, Mapping[str, Any]]) -> LeafRecord:
    if isinstance(item, LeafRecord):
        return item
    return LeafRecord.from_dict(item)


def _report_collision(
        entry_id: str,
        kept: Entry,
        discarded: Entry,
        anomalies: List[MergeAnomaly],
) -> None:
    logger.warning(
        f"Catalog: Id '{entry_id}' is used by both a group and a story, "
        f"keeping the existing {kept.node_type.value}."
    )
    anomalies.append(MergeAnomaly(path=entry_id, kept=kept, discarded=discarded))
