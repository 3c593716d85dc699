from __future__ import annotations

"""
Story Path Splitter.

Turns a raw story kind such as "Design System|Forms/Input" into an optional
root segment and the ordered list of group names below it. Splitting is
total: malformed or separator-less paths degrade to a single group instead
of raising.
"""

import logging
import re
from typing import Any, List, Mapping, Tuple, Union

from storycatalog.domain.catalog_models import PathParts
from storycatalog.domain.constants import (
    DEFAULT_GROUP_SEPARATOR,
    DEFAULT_ROOT_SEPARATOR,
    GROUP_SEPARATOR_PARAM,
    OPTIONS_PARAM,
    ROOT_SEPARATOR_PARAM,
)

logger = logging.getLogger(__name__)

# A separator is either a compiled regex or a literal string
Separator = Union[str, re.Pattern]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def split_path(path: str, root_separator: Separator, group_separator: Separator) -> PathParts:
    """
    Split a story path into its root and group segments.

    Only the first two pieces produced by the root separator are considered.
    When a non-empty second piece exists the first one becomes the root and
    the second is split into groups; otherwise the whole path is split into
    groups and there is no root. Empty segments are discarded.

    Args:
        path: Raw story kind.
        root_separator: Pattern separating the root from the rest.
        group_separator: Pattern separating group levels.

    Returns:
        PathParts: (root or None, list of group names).
    """
    pieces = _split(path, root_separator)
    root = pieces[0] if pieces else None
    remainder = pieces[1] if len(pieces) > 1 else None

    if remainder:
        groups = _non_empty(_split(remainder, group_separator))
        return PathParts(root=root or None, groups=groups)

    groups = _non_empty(_split(path, group_separator))

    # Path made only of separators: keep it whole so the story gets a group
    if not groups and path:
        groups = [path]

    return PathParts(root=None, groups=groups)


def resolve_separators(
        parameters: Mapping[str, Any],
        default_root: Separator = DEFAULT_ROOT_SEPARATOR,
        default_group: Separator = DEFAULT_GROUP_SEPARATOR,
) -> Tuple[Separator, Separator]:
    """
    Read the separator pair configured for a story.

    Looks under parameters["options"] first, then at the top level of the
    parameters. Missing or irregular values fall back to the defaults.

    Args:
        parameters: Story parameters.
        default_root: Root separator used when none is configured.
        default_group: Group separator used when none is configured.

    Returns:
        Tuple[Separator, Separator]: (root_separator, group_separator).
    """
    options = parameters.get(OPTIONS_PARAM)
    sources: List[Mapping[str, Any]] = [options] if isinstance(options, Mapping) else []
    sources.append(parameters)

    root = _lookup(sources, ROOT_SEPARATOR_PARAM)
    group = _lookup(sources, GROUP_SEPARATOR_PARAM)

    if root is None:
        root = default_root
    if group is None:
        group = default_group

    return root, group

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _split(value: str, separator: Separator) -> List[str]:
    """Split on a regex or on a literal string."""
    if isinstance(separator, re.Pattern):
        return separator.split(value)
    if separator == "":
        return list(value)
    return value.split(separator)


def _non_empty(segments: List[str]) -> List[str]:
    # re.split yields None for unmatched capture groups
    return [s for s in segments if s]


def _lookup(sources: List[Mapping[str, Any]], key: str) -> Any:
    for source in sources:
        if key not in source:
            continue
        value = source[key]
        if isinstance(value, (str, re.Pattern)):
            return value
        logger.debug(f"Ignoring irregular separator {key}={value!r}, using default.")
    return None
