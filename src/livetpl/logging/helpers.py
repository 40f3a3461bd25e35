from __future__ import annotations

"""Logger naming, configuration and offset tracing for livetpl.

Every component logs through `get_logger('<component>')`, i.e. under the
``livetpl`` namespace. Hosts that want output call `configure_logging` (or
let `DefaultLoggerFactory` do it); otherwise records simply propagate to
whatever the host application configured.

Environment:
    LIVETPL_LOG_LEVEL      level name or number for the ``livetpl`` logger.
    LIVETPL_JSON_LOGS      ``1`` switches the stream handler to JSON lines.
    LIVETPL_TRACE_OFFSETS  ``1`` emits a debug record per occurrence move.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO, Union

BASE_LOGGER = "livetpl"
_PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"
# marks the handler installed by configure_logging so it can be found again
_HANDLER_TAG = "_livetpl_handler"


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ts (UTC, millisecond precision), level, module (logger name), msg,
    version, plus ctx when the record carries a ``context`` dict and exc
    when it carries exception info.
    """

    def __init__(self) -> None:
        super().__init__()
        self._version = self._resolve_version()

    @staticmethod
    def _resolve_version() -> str:
        # imported late: livetpl/__init__ imports this module
        from livetpl import __version__
        return str(__version__)

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "ts": ts.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
            "version": self._version,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict) and ctx:
            payload["ctx"] = ctx
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=repr)


def parse_level(value: Union[str, int, None], default: int = logging.WARNING) -> int:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a logging level."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {value!r}")
    return level


def configure_logging(
    *, json_logs: bool = False, level: int = logging.WARNING, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Attach (or update) the single livetpl stream handler and return the base logger.

    Calling it again swaps the formatter and level of that handler instead of
    stacking a second one. Handlers added by the host are left alone.
    """
    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(level)

    handler = next((h for h in base.handlers if getattr(h, _HANDLER_TAG, False)), None)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        setattr(handler, _HANDLER_TAG, True)
        base.addHandler(handler)
        base.propagate = False
    elif stream is not None and isinstance(handler, logging.StreamHandler):
        handler.setStream(stream)

    handler.setFormatter(JsonLogFormatter() if json_logs else logging.Formatter(_PLAIN_FORMAT))
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under 'livetpl'."""
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(BASE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")


def is_trace_offsets_enabled() -> bool:
    return os.getenv("LIVETPL_TRACE_OFFSETS") == "1"


def trace_offsets(logger: logging.Logger, message: str, **ctx) -> None:
    """Debug record for one offset correction, emitted only when tracing is on."""
    if not is_trace_offsets_enabled():
        return
    if ctx:
        logger.debug("%s | ctx=%r", message, ctx, extra={"context": ctx})
    else:
        logger.debug("%s", message)
