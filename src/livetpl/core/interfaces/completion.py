from __future__ import annotations
from typing import Callable, Sequence

# (stub, full_line, cursor_pos) -> candidate values
CompletionProvider = Callable[[str, str, int], Sequence[str]]
