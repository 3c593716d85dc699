from __future__ import annotations

"""
Group Chain Builder.

Synthesizes the root-to-parent chain of groups implied by one story path
and wires the one-step child links between consecutive levels.
"""

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from storycatalog.core.hierarchy.ids import group_id
from storycatalog.domain.catalog_models import Group

logger = logging.getLogger(__name__)

# (parent id, display name) -> group id
IdOf = Callable[[Optional[str], str], str]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_chain(root: Optional[str], groups: List[str], id_of: IdOf = group_id) -> List[Group]:
    """
    Build the ordered chain of groups for one story, root first.

    The last element is the component (the story's immediate parent). A root
    with no groups below it still yields a one-element chain. Segments whose
    id comes out empty or equal to their parent's id (e.g. "???") are
    skipped, so a group never lists itself as a child.

    Args:
        root: Root segment, or None when the path had no root.
        groups: Group names below the root.
        id_of: Id synthesis for a (parent id, name) pair.

    Returns:
        List[Group]: Groups with empty children tuples.
    """
    segments = ([(root, True)] if root is not None else []) + [(name, False) for name in groups]

    # (id, name, parent, is_root)
    resolved: List[Tuple[str, str, Optional[str], bool]] = []
    for name, from_root in segments:
        parent = resolved[-1][0] if resolved else None
        node_id = id_of(parent, name)
        if not node_id or node_id == parent:
            logger.warning(f"Skipping path segment {name!r}: it yields no identifier of its own.")
            continue
        resolved.append((node_id, name, parent, from_root))

    last_index = len(resolved) - 1
    return [
        Group(
            id=node_id,
            name=name,
            children=(),
            parent=parent,
            depth=index,
            is_root=from_root,
            is_component=index == last_index,
        )
        for index, (node_id, name, parent, from_root) in enumerate(resolved)
    ]


def link_chain(chain: List[Group], leaf_id: str) -> List[Group]:
    """
    Point each group at the next chain element, and the last one at the leaf.

    Args:
        chain: Output of build_chain.
        leaf_id: Id of the story attached under the last group.

    Returns:
        List[Group]: New groups, each with a one-element children tuple.
    """
    path = [group.id for group in chain] + [leaf_id]
    return [replace(group, children=(path[index + 1],)) for index, group in enumerate(chain)]
