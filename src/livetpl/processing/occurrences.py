"""
occurrences – Occurrence registry and offset propagation.

Resolving one occurrence rewrites exactly one line of the working sequence,
possibly into several lines. Every occurrence not yet resolved must then be
corrected so that ``line``/``column`` keep pointing at its marker text:

  • same line, after it, no split  → column shifts by the length difference
  • later line, split              → line shifts by the inserted line count
  • same line, after it, split     → moves to the last rendered line, column
                                     measured from that line's new head

`propagate` computes those corrections for the whole pending set from one
snapshot and returns new records; nothing is mutated in place.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from livetpl.constants import DEFAULT_LEAD
from livetpl.core.models import ApplyResult, Match, Occurrence
from livetpl.errors import InvariantViolation, TemplateSyntaxError
from livetpl.logging.helpers import get_logger, trace_offsets
from livetpl.processing import variables

_LINE_BREAK = re.compile(r'\r\n|\r|\n')


@dataclass(frozen=True)
class Splice:
    """Geometry of one resolved occurrence.

    `head_length` is the length of the last rendered line up to the end of
    the replacement, i.e. where the untouched remainder of the line starts.
    """
    line: int
    column: int
    length: int
    replace_len: int
    line_delta: int
    head_length: int


class OccurrenceRegistry:
    """Occurrences of one variable index keyed by (line, column)."""

    def __init__(self, *, lead: str = DEFAULT_LEAD, logger: Optional[logging.Logger] = None) -> None:
        self._by_line: Dict[int, Dict[int, Occurrence]] = {}
        self._lead = lead
        self._log = logger or get_logger('processing.occurrences')

    @classmethod
    def from_matches(
        cls,
        matches: Iterable[Match],
        *,
        lead: str = DEFAULT_LEAD,
        logger: Optional[logging.Logger] = None,
    ) -> 'OccurrenceRegistry':
        reg = cls(lead=lead, logger=logger)
        for m in matches:
            reg.add(Occurrence.from_match(m))
        return reg

    def add(self, occurrence: Occurrence) -> bool:
        """Register *occurrence*; return False if its position is taken."""
        row = self._by_line.setdefault(occurrence.real_line, {})
        if occurrence.real_column in row:
            return False
        row[occurrence.real_column] = occurrence
        return True

    def get(self, line: int, column: int) -> Optional[Occurrence]:
        return self._by_line.get(line, {}).get(column)

    def on_line(self, line: int) -> List[Occurrence]:
        row = self._by_line.get(line, {})
        return [row[c] for c in sorted(row)]

    def lines(self) -> List[int]:
        return sorted(ln for ln, row in self._by_line.items() if row)

    def __iter__(self) -> Iterator[Occurrence]:
        for ln in sorted(self._by_line):
            row = self._by_line[ln]
            for col in sorted(row):
                yield row[col]

    def __len__(self) -> int:
        return sum(len(row) for row in self._by_line.values())

    def snapshot(self) -> List[Occurrence]:
        """Independent copies in resolution order."""
        return [replace(o) for o in self]

    def validate(self) -> None:
        """Raise TemplateSyntaxError for the first marker that is not usable."""
        for occ in self:
            kind = variables.classify(occ.match_text, self._lead)
            if isinstance(kind, variables.InvalidMarker):
                raise TemplateSyntaxError(kind.text, kind.reason)

    def apply(self, lines: Sequence[str], value: str, carried: Iterable[Occurrence] = ()) -> ApplyResult:
        """Render *value* at every occurrence; *lines* is left untouched."""
        return apply_value(self.snapshot(), lines, value, lead=self._lead, carried=carried, logger=self._log)


def propagate(pending: Sequence[Occurrence], resolved: Occurrence, splice: Splice,
              logger: Optional[logging.Logger] = None) -> List[Occurrence]:
    """Return *pending* corrected for the resolution described by *splice*.

    Every correction reads the pre-pass state of *resolved* and of the
    occurrence being corrected.
    """
    log = logger or get_logger('processing.occurrences')
    out: List[Occurrence] = []
    for o in pending:
        if o.line == resolved.line and o.column == resolved.column:
            out.append(o)
            continue

        trailing = o.line == resolved.line and o.column > resolved.column
        line_off, col_off = o.offset_line, o.offset_column

        if splice.line_delta == 0:
            if trailing:
                col_off += splice.replace_len
        elif o.line > resolved.line:
            line_off += splice.line_delta
        elif trailing:
            line_off += splice.line_delta
            gap = o.column - (resolved.column + resolved.length)
            col_off = (splice.head_length + gap + 1) - o.real_column

        if (line_off, col_off) == (o.offset_line, o.offset_column):
            out.append(o)
            continue
        moved = replace(o, offset_line=line_off, offset_column=col_off)
        trace_offsets(
            log,
            'occurrence moved',
            key=o.key,
            before=(o.line, o.column),
            after=(moved.line, moved.column),
        )
        out.append(moved)
    return out


def apply_value(
    occurrences: Iterable[Occurrence],
    lines: Sequence[str],
    value: str,
    *,
    lead: str = DEFAULT_LEAD,
    carried: Iterable[Occurrence] = (),
    logger: Optional[logging.Logger] = None,
) -> ApplyResult:
    """Substitute *value* at every occurrence and return the new lines.

    Occurrences are resolved in ascending (line, column) order. *carried*
    positions (escaped leads, say) are not substituted but follow every
    splice and come back in `ApplyResult.carried`. The input records and
    *lines* are not modified.
    """
    log = logger or get_logger('processing.occurrences')
    work = list(lines)
    pending = sorted((replace(o) for o in occurrences), key=lambda o: (o.line, o.column))
    held = [replace(o) for o in carried]
    changed: set[int] = set()

    while pending:
        cur = pending.pop(0)
        idx = cur.line - 1
        if not 0 <= idx < len(work):
            raise InvariantViolation(f'occurrence {cur.key} points at line {cur.line} of {len(work)}')
        text = work[idx]
        start = cur.column - 1
        if start < 0 or text[start:start + cur.length] != cur.match_text:
            raise InvariantViolation(
                f'occurrence {cur.key} expected {cur.match_text!r} at {cur.line}:{cur.column}, '
                f'found {text[max(start, 0):max(start, 0) + cur.length]!r}'
            )

        replacement = variables.apply(variables.classify(cur.match_text, lead), value)
        prefix, suffix = text[:start], text[start + cur.length:]
        # only the replacement may break lines; the rest of the line is kept byte for byte
        parts = _LINE_BREAK.split(replacement)
        if len(parts) == 1:
            head = prefix + replacement
            rendered = [head + suffix]
        else:
            head = parts[-1]
            rendered = [prefix + parts[0], *parts[1:-1], head + suffix]
        line_delta = len(rendered) - 1
        if line_delta < 0:
            raise InvariantViolation(f'negative line delta {line_delta} at {cur.key}')

        work[idx:idx + 1] = rendered
        changed.update(range(cur.line, cur.line + line_delta + 1))

        splice = Splice(
            line=cur.line,
            column=cur.column,
            length=cur.length,
            replace_len=len(replacement) - cur.length,
            line_delta=line_delta,
            head_length=len(head),
        )
        pending = propagate(pending, cur, splice, logger=log)
        held = propagate(held, cur, splice, logger=log)

    return ApplyResult(lines=work, changed=sorted(changed), carried=held)
