from livetpl.core.models import ApplyResult, LineRegion, Match, Occurrence, SessionOutcome
from livetpl.core.report import SessionReport, StageTimer

__all__ = [
    'ApplyResult',
    'LineRegion',
    'Match',
    'Occurrence',
    'SessionOutcome',
    'SessionReport',
    'StageTimer',
]
