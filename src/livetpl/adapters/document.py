"""
adapters.document – In-memory document fulfilling DocumentProtocol.

Used by headless callers and the test-suite. Hosts with a real buffer wrap
it in their own adapter exposing the same two methods.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from livetpl.core.interfaces.document import DocumentProtocol
from livetpl.core.models import LineRegion


@dataclass
class InMemoryDocument(DocumentProtocol):
    """A plain list of lines addressed by 1-based inclusive regions."""

    lines: List[str] = field(default_factory=list)
    writes: int = 0

    @classmethod
    def from_text(cls, text: str) -> 'InMemoryDocument':
        return cls(lines=text.split('\n'))

    @property
    def text(self) -> str:
        return '\n'.join(self.lines)

    def _check(self, region: LineRegion) -> None:
        if region.end > len(self.lines):
            raise IndexError(f'region {region.start}-{region.end} outside document of {len(self.lines)} lines')

    def get_lines(self, region: LineRegion) -> List[str]:  # type: ignore[override]
        self._check(region)
        return list(self.lines[region.start - 1:region.end])

    def set_lines(self, region: LineRegion, lines: Sequence[str]) -> None:  # type: ignore[override]
        self._check(region)
        self.lines[region.start - 1:region.end] = list(lines)
        self.writes += 1
