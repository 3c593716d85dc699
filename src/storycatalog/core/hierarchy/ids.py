from __future__ import annotations

"""
Identifier Synthesis.

Builds stable, URL-safe identifiers for groups and stories. All functions
are deterministic and idempotent: feeding an already-synthesized id back in
yields the same result as the original raw input.
"""

import re
from typing import Final, Optional

from storycatalog.domain.constants import ID_SEPARATOR

# -----------------------------------------------------------------------------
# PATTERNS
# -----------------------------------------------------------------------------

_UNSAFE_CHARS: Final[re.Pattern] = re.compile(
    r"[\s’–—―′¿'`~!@#$%^&*()_|+\-=?;:\",.<>{}\[\]\\/]"
)
_DASH_RUNS: Final[re.Pattern] = re.compile(r"-+")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def sanitize(value: str) -> str:
    """
    Reduce a display string to the restricted identifier charset.

    Lowercases the input, turns punctuation and whitespace into single
    dashes and trims leading/trailing dashes.

    Args:
        value: Raw display string.

    Returns:
        str: Sanitized fragment (may be empty).
    """
    lowered = value.lower()
    dashed = _DASH_RUNS.sub("-", _UNSAFE_CHARS.sub("-", lowered))
    return dashed.strip("-")


def to_id(kind: str, name: str) -> str:
    """
    Synthesize a story id from its kind and story name.

    Args:
        kind: Raw kind path or an already sanitized kind prefix.
        name: Story display name.

    Returns:
        str: "<kind>--<name>" with both parts sanitized.

    Raises:
        ValueError: If either part has no alphanumeric characters.
    """
    return f"{_sanitize_safe(kind, 'kind')}{ID_SEPARATOR}{_sanitize_safe(name, 'name')}"


def group_id(parent: Optional[str], name: str) -> str:
    """
    Synthesize a group id from its parent group id and display name.

    Args:
        parent: Id of the enclosing group, None for top-level groups.
        name: Group display name.

    Returns:
        str: Sanitized id, unique per (parent, name) pair.
    """
    return sanitize(f"{parent}-{name}" if parent else name)


def kind_prefix(story_id: str) -> str:
    """Return the kind part of a story id produced by to_id."""
    return story_id.split(ID_SEPARATOR, 1)[0]

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _sanitize_safe(value: str, part: str) -> str:
    sanitized = sanitize(value)
    if not sanitized:
        raise ValueError(f"Invalid {part} '{value}', must include alphanumeric characters")
    return sanitized
