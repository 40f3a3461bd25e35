from __future__ import annotations

"""Project-wide constants used across modules.

This module isolates public constants to reduce cross-module coupling.
"""

# Marker lead character: `#1`, `#/pat/sub/1`.
DEFAULT_LEAD: str = '#'

# A lead preceded by this character is literal text.
DEFAULT_ESCAPE: str = '\\'

# Separator of the pattern-rewrite form.
REWRITE_DELIM: str = '/'

ENV_PREFIX: str = 'LIVETPL_'
