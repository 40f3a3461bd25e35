from __future__ import annotations

from livetpl.adapters.document import InMemoryDocument
from livetpl.core.models import ApplyResult, LineRegion, Match, Occurrence, SessionOutcome
from livetpl.core.report import SessionReport
from livetpl.editing.completion import CompleterProvider, as_completion_provider
from livetpl.editing.keys import ScriptedInput, parse_keys
from livetpl.editing.line_editor import EditorMode, LineEditor
from livetpl.errors import (
    CompletionProviderError,
    InvariantViolation,
    NoMatchWarning,
    SessionBusyError,
    TemplateError,
    TemplateSyntaxError,
)
from livetpl.logging.helpers import get_logger
from livetpl.processing.matcher import find_all
from livetpl.processing.occurrences import OccurrenceRegistry, apply_value, propagate
from livetpl.processing.variables import (
    InvalidMarker,
    PatternRewriteMarker,
    PlainMarker,
    apply,
    classify,
    marker_pattern,
)
from livetpl.rendering.preview import PreviewManager
from livetpl.runtime.config import TemplateConfig
from livetpl.runtime.session import TemplateSession, run_template

__version__ = '0.3.0'

__all__ = [
    'ApplyResult',
    'CompleterProvider',
    'CompletionProviderError',
    'EditorMode',
    'InMemoryDocument',
    'InvalidMarker',
    'InvariantViolation',
    'LineEditor',
    'LineRegion',
    'Match',
    'NoMatchWarning',
    'Occurrence',
    'OccurrenceRegistry',
    'PatternRewriteMarker',
    'PlainMarker',
    'PreviewManager',
    'ScriptedInput',
    'SessionBusyError',
    'SessionOutcome',
    'SessionReport',
    'TemplateConfig',
    'TemplateError',
    'TemplateSession',
    'TemplateSyntaxError',
    'apply',
    'apply_value',
    'as_completion_provider',
    'classify',
    'find_all',
    'get_logger',
    'marker_pattern',
    'parse_keys',
    'propagate',
    'run_template',
]
