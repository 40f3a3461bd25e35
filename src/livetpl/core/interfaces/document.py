from __future__ import annotations
from typing import List, Protocol, Sequence, runtime_checkable

from livetpl.core.models import LineRegion


@runtime_checkable
class DocumentProtocol(Protocol):
    """Line-oriented access to the document being templated."""

    def get_lines(self, region: LineRegion) -> List[str]:
        """Return the lines of *region*, without trailing newlines."""
        ...

    def set_lines(self, region: LineRegion, lines: Sequence[str]) -> None:
        """Replace the lines of *region* with *lines* (counts may differ)."""
        ...
