"""
variables – Marker classification and value rendering.

A marker is one of:

  • ``#N``            → PlainMarker(N): the typed value is inserted verbatim
  • ``#/PAT/SUB/N``   → PatternRewriteMarker(N, PAT, SUB): every match of PAT
                        in the typed value is replaced by SUB (``re.sub``)
  • anything else     → InvalidMarker: applying it raises TemplateSyntaxError

Separators of the rewrite form are matched non-greedily, so ``#/a/b/c/2``
reads as pattern ``a`` and substitution ``b/c``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Sequence, Union

from livetpl.constants import DEFAULT_ESCAPE, DEFAULT_LEAD, REWRITE_DELIM
from livetpl.core.models import Occurrence
from livetpl.errors import InvariantViolation, TemplateSyntaxError


@dataclass(frozen=True)
class PlainMarker:
    index: int


@dataclass(frozen=True)
class PatternRewriteMarker:
    index: int
    pattern: str
    substitution: str
    text: str = field(default='', compare=False, repr=False)


@dataclass(frozen=True)
class InvalidMarker:
    text: str
    reason: str = 'unrecognized marker syntax'


Marker = Union[PlainMarker, PatternRewriteMarker, InvalidMarker]


@lru_cache(maxsize=32)
def _classifiers(lead: str) -> tuple[Pattern[str], Pattern[str]]:
    ld = re.escape(lead)
    d = re.escape(REWRITE_DELIM)
    plain = re.compile(rf'{ld}(\d+)')
    rewrite = re.compile(rf'{ld}{d}(.*?){d}(.*?){d}(\d+)', re.DOTALL)
    return plain, rewrite


def classify(marker_text: str, lead: str = DEFAULT_LEAD) -> Marker:
    """Classify *marker_text* syntactically.

    A rewrite marker whose pattern does not compile is Invalid.
    """
    plain_rx, rewrite_rx = _classifiers(lead)

    m = plain_rx.fullmatch(marker_text)
    if m:
        return PlainMarker(int(m.group(1)))

    m = rewrite_rx.fullmatch(marker_text)
    if m:
        pattern, substitution, index = m.group(1), m.group(2), int(m.group(3))
        try:
            re.compile(pattern)
        except re.error as exc:
            return InvalidMarker(marker_text, f'bad pattern {pattern!r}: {exc}')
        return PatternRewriteMarker(index, pattern, substitution, text=marker_text)

    return InvalidMarker(marker_text)


def apply(kind: Marker, user_input: str) -> str:
    """Render *user_input* through the marker *kind*."""
    if isinstance(kind, PlainMarker):
        return user_input
    if isinstance(kind, PatternRewriteMarker):
        try:
            return re.sub(kind.pattern, kind.substitution, user_input)
        except re.error as exc:
            raise TemplateSyntaxError(kind.text or kind.pattern, f'bad substitution {kind.substitution!r}: {exc}') from exc
    raise TemplateSyntaxError(kind.text, kind.reason)


def _marker_rx(index_rx: str, lead: str, escape: str) -> Pattern[str]:
    ld = re.escape(lead)
    d = re.escape(REWRITE_DELIM)
    guard = rf'(?<!{re.escape(escape)})' if escape else ''
    return re.compile(rf'{guard}{ld}(?:{d}[^\n]*?{d}[^\n]*?{d})?{index_rx}(?!\d)')


def marker_pattern(index: int, lead: str = DEFAULT_LEAD, escape: str = DEFAULT_ESCAPE) -> Pattern[str]:
    """Return the scan pattern for every marker of variable *index*.

    Both forms are matched, a lead preceded by *escape* is skipped and
    ``#1`` never matches the start of ``#12``.
    """
    if index < 1:
        raise ValueError(f'variable index must be >= 1, got {index}')
    return _marker_rx(str(index), lead, escape)


def any_marker_pattern(lead: str = DEFAULT_LEAD, escape: str = DEFAULT_ESCAPE) -> Pattern[str]:
    """Scan pattern for markers of any index."""
    return _marker_rx(r'\d+', lead, escape)


def escape_pattern(lead: str = DEFAULT_LEAD, escape: str = DEFAULT_ESCAPE) -> Optional[Pattern[str]]:
    """Pattern of an escaped lead (``\\#``), or None when escaping is off."""
    if not escape:
        return None
    return re.compile(re.escape(escape + lead))


def unescape_literals(
    lines: Sequence[str],
    escapes: Iterable[Occurrence],
    lead: str = DEFAULT_LEAD,
    escape: str = DEFAULT_ESCAPE,
) -> List[str]:
    """Turn the escaped leads at *escapes* back into literal leads.

    Only the listed positions change, so text typed by the user or lying
    outside the templated columns keeps its escapes.
    """
    out = list(lines)
    token = escape + lead
    for occ in sorted(escapes, key=lambda o: (o.line, o.column), reverse=True):
        idx, start = occ.line - 1, occ.column - 1
        if not 0 <= idx < len(out) or start < 0 or out[idx][start:start + len(token)] != token:
            raise InvariantViolation(f'escaped lead {occ.key} lost its position {occ.line}:{occ.column}')
        out[idx] = out[idx][:start] + lead + out[idx][start + len(token):]
    return out
