from __future__ import annotations

"""
Unit tests for the Story Catalog Service.

Verifies hierarchy synthesis from story paths, accumulation across
batches, leaf replacement, the selection recovery rule and the
reference integrity of the published mapping.
"""

from dataclasses import FrozenInstanceError
from types import MappingProxyType

import pytest

from storycatalog.core.services.catalog import StoryCatalog
from storycatalog.domain.catalog_models import Group, Leaf, LeafRecord, Selection, is_leaf
from storycatalog.domain.constants import STORIES_HASH_KEY, STORY_ID_KEY, VIEW_MODE_KEY
from storycatalog.infra.store import Store


@pytest.fixture
def navigations():
    return []


@pytest.fixture
def catalog(store, navigations):
    def navigate(path, options=None):
        navigations.append(path)

    return StoryCatalog(store, navigate)


def _assert_no_dangling_references(stories_hash):
    for entry in stories_hash.values():
        if entry.parent is not None:
            assert entry.parent in stories_hash
        if not is_leaf(entry):
            for child in entry.children:
                assert child in stories_hash


# -----------------------------------------------------------------------------
# 1. Hierarchy Synthesis
# -----------------------------------------------------------------------------

def test_single_component_without_root(catalog, ui_batch):
    catalog.set_stories(ui_batch)
    stories_hash = catalog.get_stories_hash()

    assert list(stories_hash) == ["ui", "ui--button", "ui--input"]

    group = stories_hash["ui"]
    assert isinstance(group, Group)
    assert group.is_component is True
    assert group.is_root is False
    assert group.children == ("ui--button", "ui--input")

    for story_id in ("ui--button", "ui--input"):
        leaf = stories_hash[story_id]
        assert isinstance(leaf, Leaf)
        assert leaf.parent == "ui"


def test_rooted_hierarchy(catalog, library_batch):
    catalog.set_stories(library_batch)
    stories_hash = catalog.get_stories_hash()

    lib = stories_hash["lib"]
    assert lib.is_root is True
    assert lib.depth == 0
    assert lib.children == ("lib-forms", "lib-layout")

    forms = stories_hash["lib-forms"]
    assert forms.parent == "lib"
    assert forms.depth == 1
    assert forms.is_component is False
    assert forms.children == ("lib-forms-button", "lib-forms-input")

    button = stories_hash["lib-forms-button"]
    assert button.is_component is True
    assert button.children == ("lib-forms-button--primary", "lib-forms-button--secondary")

    _assert_no_dangling_references(stories_hash)


def test_component_groups_only_hold_stories(catalog, library_batch):
    catalog.set_stories(library_batch)
    stories_hash = catalog.get_stories_hash()

    for entry in stories_hash.values():
        if isinstance(entry, Group) and any(is_leaf(stories_hash[c]) for c in entry.children):
            assert entry.is_component


def test_parameters_are_kept_verbatim(catalog, make_story):
    marker = object()
    record = make_story("a--b", "B", "A", custom=marker)

    catalog.set_stories({"a--b": record})

    leaf = catalog.get_stories_hash()["a--b"]
    assert leaf.parameters is record["parameters"]
    assert leaf.parameters["custom"] is marker


def test_accepts_leaf_record_instances(catalog):
    record = LeafRecord(id="x--y", name="Y", kind="X", parameters={})
    catalog.set_stories({"x--y": record})

    assert catalog.get_stories_hash()["x--y"].parent == "x"


def test_missing_separators_use_defaults(catalog):
    """Default separators are '|' for the root and '/' or '.' for groups."""
    catalog.set_stories({"s": {"id": "s", "name": "S", "kind": "Lib|Forms.Input"}})
    stories_hash = catalog.get_stories_hash()

    assert list(stories_hash) == ["lib", "lib-forms", "lib-forms-input", "s"]
    assert stories_hash["s"].parent == "lib-forms-input"


def test_empty_path_is_filed_under_fallback_group(catalog):
    catalog.set_stories({"lost": {"id": "lost", "name": "Lost", "kind": ""}})
    stories_hash = catalog.get_stories_hash()

    assert stories_hash["lost"].parent == "other"
    assert stories_hash["other"].children == ("lost",)


def test_malformed_record_raises_value_error(catalog):
    with pytest.raises(ValueError):
        catalog.set_stories({"bad": {"name": "No id", "kind": "A"}})


def test_published_mapping_is_read_only(catalog, ui_batch, store):
    catalog.set_stories(ui_batch)
    published = store.get_state()[STORIES_HASH_KEY]

    assert isinstance(published, MappingProxyType)
    with pytest.raises(TypeError):
        published["ui"] = None


def test_published_entries_are_immutable(catalog, ui_batch):
    catalog.set_stories(ui_batch)
    group = catalog.get_stories_hash()["ui"]

    assert isinstance(group.children, tuple)
    with pytest.raises(AttributeError):
        group.children.append("bogus")
    with pytest.raises(FrozenInstanceError):
        group.children = ()

    assert catalog.get_stories_hash()["ui"].children == ("ui--button", "ui--input")


def test_unusable_segment_does_not_create_self_child(catalog, make_story):
    catalog.set_stories({"ui--odd": make_story("ui--odd", "Odd", "UI/???")})
    stories_hash = catalog.get_stories_hash()

    assert list(stories_hash) == ["ui", "ui--odd"]
    assert stories_hash["ui"].children == ("ui--odd",)
    assert stories_hash["ui"].is_component is True
    assert stories_hash["ui--odd"].parent == "ui"


def test_path_of_unusable_segments_uses_fallback_group(catalog, make_story):
    catalog.set_stories({"odd": make_story("odd", "Odd", "???")})

    assert catalog.get_stories_hash()["odd"].parent == "other"


# -----------------------------------------------------------------------------
# 2. Incremental Registration
# -----------------------------------------------------------------------------

def test_batches_accumulate_children(catalog, make_story):
    catalog.set_stories({"ui--button": make_story("ui--button", "Button", "UI")})
    catalog.set_stories({"ui--input": make_story("ui--input", "Input", "UI")})

    assert catalog.get_stories_hash()["ui"].children == ("ui--button", "ui--input")


def test_sequential_batches_match_combined_batch(store, library_batch):
    items = list(library_batch.items())
    first, second = dict(items[:2]), dict(items[2:])

    sequential = StoryCatalog(store, lambda *a, **k: None)
    sequential.set_stories(first)
    sequential.set_stories(second)

    combined = StoryCatalog(Store(), lambda *a, **k: None)
    combined.set_stories(library_batch)

    seq_hash, comb_hash = sequential.get_stories_hash(), combined.get_stories_hash()
    assert set(seq_hash) == set(comb_hash)
    for key, entry in comb_hash.items():
        if isinstance(entry, Group):
            assert set(seq_hash[key].children) == set(entry.children)


def test_reregistering_is_idempotent_for_groups(catalog, library_batch):
    catalog.set_stories(library_batch)
    before = dict(catalog.get_stories_hash())

    result = catalog.set_stories(library_batch)
    after = catalog.get_stories_hash()

    assert result.added_stories == []
    assert list(after) == list(before)
    for key, entry in before.items():
        assert after[key] == entry


def test_reregistered_story_is_replaced_in_place(catalog, ui_batch, make_story):
    catalog.set_stories(ui_batch)

    updated = make_story("ui--button", "Big Button", "UI", size="large")
    catalog.set_stories({"ui--button": updated})
    stories_hash = catalog.get_stories_hash()

    assert stories_hash["ui--button"].name == "Big Button"
    assert stories_hash["ui--button"].parameters["size"] == "large"
    assert list(stories_hash).index("ui--button") == 1


def test_deeper_path_does_not_demote_component(catalog, make_story):
    """A group first seen as an intermediate level becomes a component once it holds a story."""
    catalog.set_stories({"a-b-c--x": make_story("a-b-c--x", "X", "A/B/C")})
    assert catalog.get_stories_hash()["a-b"].is_component is False

    catalog.set_stories({"a-b--y": make_story("a-b--y", "Y", "A/B")})
    group = catalog.get_stories_hash()["a-b"]

    assert group.is_component is True
    assert group.children == ("a-b-c", "a-b--y")


def test_result_reports_counts_and_new_stories(catalog, ui_batch, make_story):
    first = catalog.set_stories(ui_batch)
    assert first.stories_count == 2
    assert first.groups_count == 1
    assert first.added_stories == ["ui--button", "ui--input"]

    second = catalog.set_stories({"ui--select": make_story("ui--select", "Select", "UI")})
    assert second.added_stories == ["ui--select"]
    assert second.stories_count == 3


def test_group_story_id_collision_is_reported(catalog, make_story):
    catalog.set_stories({"ui": make_story("ui", "Odd", "Misc")})
    result = catalog.set_stories({"ui--button": make_story("ui--button", "Button", "UI")})

    assert is_leaf(catalog.get_stories_hash()["ui"])
    assert [a.path for a in result.anomalies] == ["ui"]


def test_story_id_held_by_group_is_rejected(catalog, ui_batch, make_story):
    catalog.set_stories(ui_batch)
    result = catalog.set_stories({"ui": make_story("ui", "Odd", "Misc")})
    stories_hash = catalog.get_stories_hash()

    assert result.added_stories == []
    assert result.stories_count == 2
    assert [a.path for a in result.anomalies] == ["ui"]
    assert isinstance(stories_hash["ui"], Group)
    assert "misc" not in stories_hash


def test_story_id_equal_to_own_group_is_rejected(catalog, make_story):
    result = catalog.set_stories({"ui": make_story("ui", "Odd", "UI")})

    assert result.added_stories == []
    assert dict(catalog.get_stories_hash()) == {}


# -----------------------------------------------------------------------------
# 3. Selection Recovery
# -----------------------------------------------------------------------------

def test_missing_selection_navigates_to_first_story(catalog, ui_batch, navigations):
    result = catalog.set_stories(ui_batch, Selection(story_id="gone--story", view_mode="story"))

    assert navigations == ["/story/ui--button"]
    assert result.navigated_to == "/story/ui--button"


def test_no_navigation_when_selection_still_exists(catalog, ui_batch, navigations):
    result = catalog.set_stories(ui_batch, Selection(story_id="ui--input", view_mode="story"))

    assert navigations == []
    assert result.navigated_to is None


def test_no_navigation_without_view_mode(catalog, ui_batch, navigations):
    catalog.set_stories(ui_batch, Selection(story_id=None, view_mode=None))
    assert navigations == []


def test_selection_is_read_from_store_when_omitted(store, catalog, ui_batch, navigations):
    store.set_state({STORY_ID_KEY: None, VIEW_MODE_KEY: "info"})

    catalog.set_stories(ui_batch)

    assert navigations == ["/info/ui--button"]
