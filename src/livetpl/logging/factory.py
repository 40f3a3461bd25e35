from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, TextIO

from livetpl.logging.helpers import configure_logging, get_logger, parse_level


class DefaultLoggerFactory:
    """Hands out ``livetpl.*`` loggers, configuring output on first use.

    `TemplateSession` asks its factory for the session, editor, preview and
    occurrence loggers. With ``configure=False`` the factory only namespaces
    names and leaves handler setup to the host application.
    """

    def __init__(
        self,
        *,
        json_logs: bool = False,
        level: int = logging.WARNING,
        stream: Optional[TextIO] = None,
        configure: bool = True,
    ) -> None:
        self._json = bool(json_logs)
        self._level = int(level)
        self._stream = stream
        self._pending = configure

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DefaultLoggerFactory':
        """Read ``LIVETPL_LOG_LEVEL`` / ``LIVETPL_JSON_LOGS``.

        Output is configured only when one of them is set.
        """
        env = os.environ if environ is None else environ
        raw_level = env.get('LIVETPL_LOG_LEVEL', '')
        json_logs = env.get('LIVETPL_JSON_LOGS', '') == '1'
        return cls(
            json_logs=json_logs,
            level=parse_level(raw_level),
            configure=bool(raw_level) or json_logs,
        )

    def get_logger(self, name: str) -> logging.Logger:
        if self._pending:
            configure_logging(json_logs=self._json, level=self._level, stream=self._stream)
            self._pending = False
        return get_logger(name)
