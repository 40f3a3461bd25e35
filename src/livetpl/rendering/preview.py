"""
preview – Per-session bookkeeping of open live previews.

A `PreviewManager` is created by `TemplateSession.run` for one templating
call and torn down when that call commits or aborts. It translates the
changed lines of an `ApplyResult` (1-based, relative to the templated
region) into document line numbers, forwards only what actually changed to
the preview collaborator and closes previews that are no longer affected.

The collaborator is best-effort: its failures are logged and never reach the
engine.
"""

import logging
from typing import Dict, List, Optional

from livetpl.core.interfaces.preview import PreviewProtocol
from livetpl.core.models import ApplyResult
from livetpl.logging.helpers import get_logger


class PreviewManager:
    def __init__(
        self,
        sink: Optional[PreviewProtocol] = None,
        *,
        line_base: int = 1,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._sink = sink
        self._base = line_base
        self._open: Dict[int, str] = {}
        self._log = logger or get_logger('preview')

    @property
    def open_previews(self) -> Dict[int, str]:
        return dict(self._open)

    def show(self, result: ApplyResult) -> List[int]:
        """Publish the changed lines of *result*; return their document line numbers."""
        wanted = {self._base + ln - 1: result.lines[ln - 1] for ln in result.changed}

        for doc_line in sorted(set(self._open) - set(wanted)):
            self._close(doc_line)

        for doc_line in sorted(wanted):
            text = wanted[doc_line]
            if self._open.get(doc_line) == text:
                continue
            self._open[doc_line] = text
            self._notify('preview_changed', doc_line, text)

        return sorted(wanted)

    def close_all(self) -> None:
        for doc_line in sorted(self._open):
            self._close(doc_line)

    def _close(self, doc_line: int) -> None:
        self._open.pop(doc_line, None)
        self._notify('preview_closed', doc_line)

    def _notify(self, method: str, *args) -> None:
        if self._sink is None:
            return
        try:
            getattr(self._sink, method)(*args)
        except Exception as exc:  # noqa: BLE001
            # Previews are a side channel; the session keeps going.
            self._log.warning('⚠  %s(%s) failed: %s', method, args[0], exc)

    def __enter__(self) -> 'PreviewManager':
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close_all()
        return False
