from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from livetpl.constants import DEFAULT_ESCAPE, DEFAULT_LEAD, ENV_PREFIX

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off', ''}


def _env_bool(raw: str, name: str) -> bool:
    val = raw.strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    raise ValueError(f'{name} must be a boolean flag, got {raw!r}')


@dataclass(frozen=True)
class TemplateConfig:
    """Immutable settings of a templating session.

    lead:               marker lead character (``#`` in ``#1``).
    escape:             character that makes a following lead literal; empty disables escaping.
    max_matches:        cap on occurrences per variable index (None = unbounded).
    incremental_commit: write the document after each accepted variable instead of once at the end.
    unescape_literals:  turn ``\\#`` back into ``#`` when the session commits.
    """
    lead: str = DEFAULT_LEAD
    escape: str = DEFAULT_ESCAPE
    max_matches: Optional[int] = None
    incremental_commit: bool = False
    unescape_literals: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.lead, str) or len(self.lead) != 1:
            raise ValueError('lead must be a single character string')
        if self.lead.isdigit() or self.lead == '/':
            raise ValueError(f'lead cannot be {self.lead!r}')
        if not isinstance(self.escape, str) or len(self.escape) > 1:
            raise ValueError('escape must be empty or a single character string')
        if self.escape == self.lead:
            raise ValueError('escape and lead must differ')
        if self.max_matches is not None and self.max_matches < 0:
            raise ValueError('max_matches must be >= 0')

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'TemplateConfig':
        """Build a config from ``LIVETPL_*`` variables, defaults for the rest."""
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if f'{ENV_PREFIX}LEAD' in env:
            kwargs['lead'] = env[f'{ENV_PREFIX}LEAD']
        if f'{ENV_PREFIX}ESCAPE' in env:
            kwargs['escape'] = env[f'{ENV_PREFIX}ESCAPE']
        raw_max = env.get(f'{ENV_PREFIX}MAX_MATCHES')
        if raw_max:
            try:
                kwargs['max_matches'] = int(raw_max)
            except ValueError:
                raise ValueError(f'{ENV_PREFIX}MAX_MATCHES must be an integer, got {raw_max!r}') from None
        if f'{ENV_PREFIX}INCREMENTAL' in env:
            kwargs['incremental_commit'] = _env_bool(env[f'{ENV_PREFIX}INCREMENTAL'], f'{ENV_PREFIX}INCREMENTAL')
        if f'{ENV_PREFIX}UNESCAPE' in env:
            kwargs['unescape_literals'] = _env_bool(env[f'{ENV_PREFIX}UNESCAPE'], f'{ENV_PREFIX}UNESCAPE')
        return cls(**kwargs)
