from __future__ import annotations

"""
Structural Deep Merge.

Recursive merge used to fold group definitions into the hierarchy mapping
(and configuration files into their defaults). Existing values always win;
lists are unioned in first-seen order so repeated merges of overlapping data
are idempotent.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from storycatalog.domain.catalog_models import MergeAnomaly

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def deep_merge(
        existing: Mapping[str, Any],
        incoming: Mapping[str, Any],
        anomalies: Optional[List[MergeAnomaly]] = None,
) -> Dict[str, Any]:
    """
    Merge 'incoming' into a copy of 'existing' without mutating either.

    Rules per key present on both sides:
    - two mappings are merged recursively;
    - two lists are unioned (see union_preserving_order);
    - a list facing a non-list is a conflict: the existing value is kept,
      the conflict is logged and reported through 'anomalies';
    - anything else keeps the existing value.
    Keys only present in 'incoming' are copied over.

    Args:
        existing: Lower-level structure whose values take precedence.
        incoming: Structure providing new keys and list elements.
        anomalies: Optional collector for recoverable conflicts.

    Returns:
        Dict[str, Any]: The merged structure.
    """
    return _merge_mapping(existing, incoming, anomalies, [])


def union_preserving_order(existing: Sequence[Any], incoming: Sequence[Any]) -> List[Any]:
    """
    Append the incoming elements that are not already present.

    Presence is checked by identity or equality against the result built so
    far, so duplicates inside 'incoming' are dropped too.

    Args:
        existing: Elements kept first, in their original order.
        incoming: Candidate elements.

    Returns:
        List[Any]: New list with the union.
    """
    result = list(existing)
    for item in incoming:
        if not any(current is item or current == item for current in result):
            result.append(item)
    return result

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _merge_mapping(
        existing: Mapping[str, Any],
        incoming: Mapping[str, Any],
        anomalies: Optional[List[MergeAnomaly]],
        segments: List[str],
) -> Dict[str, Any]:
    result: Dict[str, Any] = dict(existing)

    for key, value in incoming.items():
        if key not in result:
            result[key] = value
            continue
        result[key] = _merge_value(result[key], value, anomalies, segments + [str(key)])

    return result


def _merge_value(
        current: Any,
        value: Any,
        anomalies: Optional[List[MergeAnomaly]],
        segments: List[str],
) -> Any:
    if isinstance(current, list) and isinstance(value, list):
        return union_preserving_order(current, value)

    if isinstance(current, list) or isinstance(value, list):
        dotted = ".".join(segments)
        logger.warning(f"Merge type mismatch at '{dotted}', keeping {current!r}")
        if anomalies is not None:
            anomalies.append(MergeAnomaly(path=dotted, kept=current, discarded=value))
        return current

    if isinstance(current, Mapping) and isinstance(value, Mapping):
        return _merge_mapping(current, value, anomalies, segments)

    return current
