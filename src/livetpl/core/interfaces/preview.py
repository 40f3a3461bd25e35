from __future__ import annotations
from typing import Protocol, runtime_checkable


@runtime_checkable
class PreviewProtocol(Protocol):
    """Best-effort sink for live previews of the lines being edited.

    Line numbers are 1-based document line numbers.
    """

    def preview_changed(self, line_number: int, text: str) -> None:
        ...

    def preview_closed(self, line_number: int) -> None:
        ...
