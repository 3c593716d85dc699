from __future__ import annotations

"""
Domain Constants.

Centralizes the defaults shared by the hierarchy builder, the navigator and
the configuration layer: separator patterns, view modes, parameter keys and
the identifier contract between id synthesis and story selection.
"""

import re
from typing import Final

CURRENT_CONFIG_VERSION: Final[str] = "1.0.0"

# -----------------------------------------------------------------------------
# HIERARCHY SEPARATORS
# -----------------------------------------------------------------------------

DEFAULT_ROOT_SEPARATOR_SOURCE: Final[str] = r"\|"
DEFAULT_GROUP_SEPARATOR_SOURCE: Final[str] = r"/|\."

DEFAULT_ROOT_SEPARATOR: Final[re.Pattern] = re.compile(DEFAULT_ROOT_SEPARATOR_SOURCE)
DEFAULT_GROUP_SEPARATOR: Final[re.Pattern] = re.compile(DEFAULT_GROUP_SEPARATOR_SOURCE)

# Parameter keys carried by every registered story
ROOT_SEPARATOR_PARAM: Final[str] = "hierarchyRootSeparator"
GROUP_SEPARATOR_PARAM: Final[str] = "hierarchySeparator"
OPTIONS_PARAM: Final[str] = "options"

# Group used when a story path yields no segment at all
FALLBACK_GROUP_NAME: Final[str] = "Other"

# -----------------------------------------------------------------------------
# IDENTIFIERS AND NAVIGATION
# -----------------------------------------------------------------------------

# Marker between the kind and the story part of a story id. select_story
# relies on to_id embedding it verbatim.
ID_SEPARATOR: Final[str] = "--"

DEFAULT_VIEW_MODE: Final[str] = "story"

# Store keys
STORIES_HASH_KEY: Final[str] = "stories_hash"
STORY_ID_KEY: Final[str] = "story_id"
VIEW_MODE_KEY: Final[str] = "view_mode"
