from __future__ import annotations

"""
session – Drives one complete templating call.

For each variable index in turn the session scans the working copy of the
region, registers the occurrences, runs a `LineEditor` whose keystrokes
re-render every occurrence into a live preview, and on acceptance applies
the value for real. The document only ever sees either the fully resolved
region or its original lines.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from livetpl.core.interfaces.document import DocumentProtocol
from livetpl.core.interfaces.input import InputSourceProtocol
from livetpl.core.interfaces.logging import LoggerFactoryProtocol
from livetpl.core.interfaces.preview import PreviewProtocol
from livetpl.core.models import ApplyResult, LineRegion, Occurrence, SessionOutcome
from livetpl.core.report import SessionReport, StageTimer
from livetpl.editing.completion import CompletionSource, as_completion_provider
from livetpl.editing.line_editor import LineEditor
from livetpl.errors import NoMatchWarning, SessionBusyError
from livetpl.logging.factory import DefaultLoggerFactory
from livetpl.processing.matcher import find_all, within_bounds
from livetpl.processing.occurrences import OccurrenceRegistry
from livetpl.processing.variables import any_marker_pattern, escape_pattern, marker_pattern, unescape_literals
from livetpl.rendering.preview import PreviewManager
from livetpl.runtime.config import TemplateConfig


@dataclass(frozen=True)
class _Bounds:
    """Column limits of the region, 0-based.

    `tail` counts the characters after the region end on the last line;
    it stays constant while the lines inside the region change.
    """
    first_column: Optional[int]
    tail: Optional[int]

    def last_column(self, lines: Sequence[str]) -> Optional[int]:
        if self.tail is None or not lines:
            return None
        return len(lines[-1]) - self.tail


def _pick(seq: Sequence, index: int, default=None):
    return seq[index - 1] if 0 < index <= len(seq) and seq[index - 1] is not None else default


class TemplateSession:
    """One templating operation at a time over a document.

    `run` returns `SessionOutcome.SUCCESS` once every variable is resolved and
    written, or `SessionOutcome.ABORTED` when the user pressed Escape. Any
    exception (syntax error, completion failure, invariant violation)
    restores the document before it propagates.
    """

    def __init__(
        self,
        document: DocumentProtocol,
        input_source: InputSourceProtocol,
        *,
        preview: Optional[PreviewProtocol] = None,
        config: Optional[TemplateConfig] = None,
        logger: Optional[logging.Logger] = None,
        logger_factory: Optional[LoggerFactoryProtocol] = None,
    ) -> None:
        self._document = document
        self._input = input_source
        self._preview = preview
        self._cfg = config or TemplateConfig()
        self._loggers = logger_factory or DefaultLoggerFactory.from_env()
        self._log = logger or self._loggers.get_logger('session')
        self._active = False
        self.report = SessionReport()

    @property
    def active(self) -> bool:
        return self._active

    def run(
        self,
        region_start: int,
        region_end: int,
        col_start: Optional[int] = None,
        col_end: Optional[int] = None,
        variable_count: int = 0,
        names: Sequence[Optional[str]] = (),
        defaults: Sequence[Optional[str]] = (),
        completions: Sequence[CompletionSource] = (),
    ) -> SessionOutcome:
        """Resolve variables ``1..variable_count`` inside the region.

        Args:
            region_start: First document line (1-based).
            region_end: Last document line (1-based, inclusive).
            col_start: First column (1-based) on the first line; None for the whole line.
            col_end: Last column (1-based, inclusive) on the last line; None for the whole line.
            variable_count: Number of variable indices to resolve.
            names: Prompt label per index (``names[0]`` is variable 1).
            defaults: Initial input per index.
            completions: Completion source per index (callable, Completer or word list).

        Returns:
            The session outcome.
        """
        if self._active:
            raise SessionBusyError('a templating session is already running')
        if variable_count < 0:
            raise ValueError(f'variable_count must be >= 0, got {variable_count}')

        self._active = True
        self.report = SessionReport(variable_count=variable_count)
        try:
            if variable_count == 0:
                self.report.finish(SessionOutcome.SUCCESS.value)
                return SessionOutcome.SUCCESS
            region = LineRegion(region_start, region_end)
            bounds = _Bounds(
                first_column=col_start - 1 if col_start else None,
                tail=None,
            )
            original = self._document.get_lines(region)
            if col_end and original:
                bounds = _Bounds(bounds.first_column, max(0, len(original[-1]) - col_end))
            return self._run(region, bounds, original, variable_count, names, defaults, completions)
        finally:
            self._active = False

    def _run(
        self,
        region: LineRegion,
        bounds: _Bounds,
        original: List[str],
        variable_count: int,
        names: Sequence[Optional[str]],
        defaults: Sequence[Optional[str]],
        completions: Sequence[CompletionSource],
    ) -> SessionOutcome:
        working = list(original)
        escapes = self._scan_escapes(working, bounds) if self._cfg.unescape_literals else []
        written = region
        dirty = False

        with PreviewManager(self._preview, line_base=region.start, logger=self._loggers.get_logger('preview')) as previews:
            try:
                for index in range(1, variable_count + 1):
                    result = self._resolve(
                        index,
                        working,
                        escapes,
                        bounds,
                        previews,
                        name=_pick(names, index, f'{self._cfg.lead}{index}'),
                        default=_pick(defaults, index, ''),
                        completion=_pick(completions, index),
                    )
                    if result is None:
                        self._log.info('templating aborted at variable #%d', index)
                        self._rollback(written, original, dirty)
                        self.report.finish(SessionOutcome.ABORTED.value)
                        return SessionOutcome.ABORTED
                    working, escapes = result.lines, result.carried
                    if self._cfg.incremental_commit:
                        self._document.set_lines(written, working)
                        written = written.resized(len(working))
                        dirty = True

                final = working
                if escapes:
                    final = unescape_literals(working, escapes, self._cfg.lead, self._cfg.escape)
                if dirty or final != original:
                    with StageTimer(self.report, 'commit'):
                        self._document.set_lines(written, final)
            except Exception as exc:
                self.report.add_error(f'{type(exc).__name__}: {exc}')
                self._log.error('templating failed: %s', exc)
                self._rollback(written, original, dirty)
                self.report.finish('failed')
                raise

        self.report.finish(SessionOutcome.SUCCESS.value)
        return SessionOutcome.SUCCESS

    def _scan_escapes(self, lines: List[str], bounds: _Bounds) -> List[Occurrence]:
        """Escaped leads of the template inside the region columns.

        Escapes that are part of a marker (``#/\\#/x/1``) belong to that
        marker and are left alone.
        """
        rx = escape_pattern(self._cfg.lead, self._cfg.escape)
        if rx is None:
            return []
        in_markers = {
            (m.line_index, col)
            for m in find_all(lines, any_marker_pattern(self._cfg.lead, self._cfg.escape))
            for col in range(m.column_index, m.end_column_index)
        }
        hits = within_bounds(
            find_all(lines, rx),
            first_column=bounds.first_column,
            last_line=len(lines) - 1,
            last_column=bounds.last_column(lines),
        )
        return [Occurrence.from_match(m) for m in hits if (m.line_index, m.column_index) not in in_markers]

    def _resolve(
        self,
        index: int,
        working: List[str],
        escapes: List[Occurrence],
        bounds: _Bounds,
        previews: PreviewManager,
        *,
        name: str,
        default: str,
        completion: CompletionSource,
    ) -> Optional[ApplyResult]:
        """Resolve variable *index*; return the applied pass or None on abort."""
        with StageTimer(self.report, 'scan'):
            matches = find_all(
                working,
                marker_pattern(index, self._cfg.lead, self._cfg.escape),
                max_matches=self._cfg.max_matches,
            )
            matches = within_bounds(
                matches,
                first_column=bounds.first_column,
                last_line=len(working) - 1,
                last_column=bounds.last_column(working),
            )
        if not matches:
            warning = NoMatchWarning(index)
            self._log.warning('⚠  %s', warning)
            self.report.add_warning(warning)
            return ApplyResult(lines=working, carried=escapes)

        registry = OccurrenceRegistry.from_matches(
            matches,
            lead=self._cfg.lead,
            logger=self._loggers.get_logger('processing.occurrences'),
        )
        registry.validate()
        self._log.debug('variable #%d (%s): %d occurrence(s)', index, name, len(registry))

        editor = LineEditor(
            default,
            prompt=f'{name}: ',
            completion_provider=as_completion_provider(completion),
            logger=self._loggers.get_logger('editor'),
        )
        self._log.debug('prompting %r', editor.render())
        previews.show(registry.apply(working, editor.buffer))

        def _on_key(buffer: str, _key) -> bool:
            self.report.keystrokes += 1
            with StageTimer(self.report, 'preview'):
                previews.show(registry.apply(working, buffer))
            return False

        with StageTimer(self.report, 'input'):
            value = editor.run(self._input, on_key=_on_key)
        previews.close_all()
        if value is None:
            return None

        with StageTimer(self.report, 'commit'):
            result = registry.apply(working, value, carried=escapes)
        self.report.mark_resolved(index, value, len(registry))
        return result

    def _rollback(self, written: LineRegion, original: List[str], dirty: bool) -> None:
        self.report.rolled_back = True
        if dirty:
            self._document.set_lines(written, original)


def run_template(
    document: DocumentProtocol,
    input_source: InputSourceProtocol,
    region_start: int,
    region_end: int,
    col_start: Optional[int] = None,
    col_end: Optional[int] = None,
    variable_count: int = 0,
    names: Sequence[Optional[str]] = (),
    defaults: Sequence[Optional[str]] = (),
    completions: Sequence[CompletionSource] = (),
    *,
    preview: Optional[PreviewProtocol] = None,
    config: Optional[TemplateConfig] = None,
    logger_factory: Optional[LoggerFactoryProtocol] = None,
) -> SessionOutcome:
    """One-shot helper around `TemplateSession.run`."""
    session = TemplateSession(
        document, input_source, preview=preview, config=config, logger_factory=logger_factory,
    )
    return session.run(region_start, region_end, col_start, col_end, variable_count, names, defaults, completions)
