from __future__ import annotations
from typing import Protocol, runtime_checkable

from prompt_toolkit.key_binding.key_processor import KeyPress


@runtime_checkable
class InputSourceProtocol(Protocol):
    """Blocking keystroke source."""

    def next_input_event(self) -> KeyPress:
        ...
