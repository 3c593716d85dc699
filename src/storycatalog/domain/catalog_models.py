from __future__ import annotations

"""
Story Catalog Data Models.

Provides the tagged node types (Group / Leaf) that make up the hierarchy
mapping, the wire-level LeafRecord accepted at registration time, and the
small value objects exchanged between the catalog, the navigator and the
interface layers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

# -----------------------------------------------------------------------------
# NODE TAGS
# -----------------------------------------------------------------------------

class NodeType(str, Enum):
    """Discriminator for entries of the hierarchy mapping."""
    GROUP = "group"
    LEAF = "leaf"


# -----------------------------------------------------------------------------
# INPUT RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LeafRecord:
    """
    A story as delivered by the registration subsystem.

    Attributes:
        id: Unique story identifier.
        name: Display name of the story.
        kind: Raw hierarchy path (e.g. "Design System|Forms/Input").
        children: Child identifiers attached to the record (usually empty).
        parameters: Opaque parameter mapping, kept verbatim.
    """
    id: str
    name: str
    kind: str
    children: Tuple[str, ...] = ()
    parameters: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "LeafRecord":
        """
        Parse the wire representation of a story.

        Args:
            raw: Mapping with at least 'id', 'name' and 'kind'.

        Returns:
            LeafRecord: The parsed record.

        Raises:
            ValueError: If a required field is missing or not a string.
        """
        if not isinstance(raw, Mapping):
            raise ValueError(f"Story record must be an object, got {type(raw).__name__}")

        for key in ("id", "name", "kind"):
            if not isinstance(raw.get(key), str):
                raise ValueError(f"Story record is missing required field '{key}': {raw!r}")

        parameters = raw.get("parameters")
        children = raw.get("children")

        return cls(
            id=raw["id"],
            name=raw["name"],
            kind=raw["kind"],
            children=tuple(children) if isinstance(children, list) else (),
            parameters=parameters if isinstance(parameters, Mapping) else {},
        )


class PathParts(NamedTuple):
    """Result of splitting a raw story path."""
    root: Optional[str]
    groups: List[str]


# -----------------------------------------------------------------------------
# HIERARCHY NODES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Group:
    """
    Non-terminal node of the hierarchy.

    A group whose children are stories is a "component".
    """
    id: str
    name: str
    children: Tuple[str, ...] = ()
    parent: Optional[str] = None
    depth: int = 0
    is_root: bool = False
    is_component: bool = False

    @property
    def node_type(self) -> NodeType:
        return NodeType.GROUP

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "children": list(self.children),
            "parent": self.parent,
            "depth": self.depth,
            "is_root": self.is_root,
            "is_component": self.is_component,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Group":
        return cls(
            id=data["id"],
            name=data["name"],
            children=tuple(data.get("children", ())),
            parent=data.get("parent"),
            depth=int(data.get("depth", 0)),
            is_root=bool(data.get("is_root", False)),
            is_component=bool(data.get("is_component", False)),
        )


@dataclass(frozen=True)
class Leaf:
    """
    Terminal, directly selectable story.

    Carries every LeafRecord field plus the id of its enclosing group.
    """
    id: str
    name: str
    kind: str
    parent: str
    children: Tuple[str, ...] = ()
    parameters: Mapping[str, Any] = field(default_factory=dict)

    @property
    def node_type(self) -> NodeType:
        return NodeType.LEAF

    @classmethod
    def from_record(cls, record: LeafRecord, parent: str) -> "Leaf":
        return cls(
            id=record.id,
            name=record.name,
            kind=record.kind,
            parent=parent,
            children=tuple(record.children),
            parameters=record.parameters,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "parent": self.parent,
            "children": list(self.children),
            "parameters": dict(self.parameters),
        }


Entry = Union[Group, Leaf]

# Identifier -> node, in first-insertion order
StoriesHash = Mapping[str, Entry]


# Routing primitive: navigate(path, options=None)
Navigate = Callable[..., None]


def is_leaf(entry: Optional[Entry]) -> bool:
    """Return True when the entry is a story (not a group, not missing)."""
    return entry is not None and entry.node_type is NodeType.LEAF


# -----------------------------------------------------------------------------
# NAVIGATION AND DIAGNOSTICS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Selection:
    """
    The externally owned cursor: current story and view mode.

    Attributes:
        story_id: Currently selected story, if any.
        view_mode: Active view mode (e.g. "story", "info"), if any.
    """
    story_id: Optional[str] = None
    view_mode: Optional[str] = None


@dataclass(frozen=True)
class MergeAnomaly:
    """
    A recoverable conflict found while merging two structures.

    Attributes:
        path: Dotted key where the conflict happened.
        kept: Value that was kept (the existing one).
        discarded: Incoming value that was dropped.
    """
    path: str
    kept: Any
    discarded: Any


@dataclass(frozen=True)
class RegistrationResult:
    """
    Summary of one set_stories call.

    Attributes:
        stories_count: Number of stories in the mapping after the batch.
        groups_count: Number of groups in the mapping after the batch.
        added_stories: Story ids that were not registered before this batch.
        anomalies: Merge conflicts recorded while folding the batch.
        navigated_to: Path issued by the selection recovery rule, if any.
    """
    stories_count: int
    groups_count: int
    added_stories: List[str] = field(default_factory=list)
    anomalies: List[MergeAnomaly] = field(default_factory=list)
    navigated_to: Optional[str] = None
