# src/livetpl/processing/matcher.py
import bisect
import re
from typing import List, Optional, Pattern, Sequence, Union

from livetpl.core.models import Match


def _compile(pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def find_all(
    lines: Sequence[str],
    pattern: Union[str, Pattern[str]],
    max_matches: Optional[int] = None,
) -> List[Match]:
    """Return every non-overlapping match of *pattern* inside *lines*.

    The lines are scanned as one ``\\n``-joined stream, leftmost first, and
    each hit is reported on the physical line where it starts. A hit that
    runs into the next line gets `end_column_index` clamped to the end of
    its start line, so column bounds compare within one line. A falsy
    *max_matches* means unbounded.
    """
    if not lines:
        return []
    rx = _compile(pattern)
    stream = '\n'.join(lines)

    # stream offset of the first character of every line
    starts: List[int] = []
    pos = 0
    for ln in lines:
        starts.append(pos)
        pos += len(ln) + 1

    out: List[Match] = []
    for m in rx.finditer(stream):
        if m.start() == m.end():
            continue
        line_index = bisect.bisect_right(starts, m.start()) - 1
        column = m.start() - starts[line_index]
        out.append(
            Match(
                text=m.group(0),
                line_index=line_index,
                column_index=column,
                end_column_index=min(column + (m.end() - m.start()), len(lines[line_index])),
            )
        )
        if max_matches and len(out) >= max_matches:
            break
    return out


def within_bounds(
    matches: Sequence[Match],
    *,
    first_column: Optional[int] = None,
    last_line: Optional[int] = None,
    last_column: Optional[int] = None,
) -> List[Match]:
    """Keep matches inside column bounds of a region.

    Bounds are 0-based: matches on line 0 must start at or after
    *first_column*; matches on *last_line* must end at or before
    *last_column* (exclusive end).
    """
    kept: List[Match] = []
    for m in matches:
        if first_column is not None and m.line_index == 0 and m.column_index < first_column:
            continue
        if (
            last_column is not None
            and last_line is not None
            and m.line_index == last_line
            and m.end_column_index > last_column
        ):
            continue
        kept.append(m)
    return kept
