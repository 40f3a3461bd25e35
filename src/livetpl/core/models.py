from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Match:
    """One pattern hit; indices are 0-based and `end_column_index` is exclusive."""
    text: str
    line_index: int
    column_index: int
    end_column_index: int


@dataclass
class Occurrence:
    """A located marker of the variable being resolved.

    `real_line`/`real_column` are 1-based and fixed at scan time; the offsets
    accumulate while earlier occurrences are resolved.
    """
    real_line: int
    real_column: int
    length: int
    match_text: str
    offset_line: int = 0
    offset_column: int = 0

    @property
    def line(self) -> int:
        return self.real_line + self.offset_line

    @property
    def column(self) -> int:
        return self.real_column + self.offset_column

    @property
    def key(self) -> Tuple[int, int]:
        return (self.real_line, self.real_column)

    @classmethod
    def from_match(cls, match: Match) -> 'Occurrence':
        return cls(
            real_line=match.line_index + 1,
            real_column=match.column_index + 1,
            length=len(match.text),
            match_text=match.text,
        )


@dataclass(frozen=True)
class LineRegion:
    """1-based inclusive line range of a document."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1:
            raise ValueError(f'region start must be >= 1, got {self.start}')
        if self.end < self.start - 1:
            raise ValueError(f'region end {self.end} precedes start {self.start}')

    def __len__(self) -> int:
        return self.end - self.start + 1

    def resized(self, line_count: int) -> 'LineRegion':
        return LineRegion(self.start, self.start + line_count - 1)


@dataclass(frozen=True)
class ApplyResult:
    lines: List[str]
    changed: List[int] = field(default_factory=list)
    # positions that followed the pass without being substituted
    carried: List[Occurrence] = field(default_factory=list)


class SessionOutcome(enum.Enum):
    SUCCESS = 'success'
    ABORTED = 'aborted'

    def __bool__(self) -> bool:
        return self is SessionOutcome.SUCCESS
