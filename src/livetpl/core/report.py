from __future__ import annotations

"""
Session report.

Collected by `TemplateSession` while a templating call runs and kept on the
session afterwards (`session.report`). Hosts use it for status lines and
tests use it to check what was resolved, skipped or rolled back.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from livetpl.errors import NoMatchWarning


@dataclass
class SessionReport:
    started_at: float = field(default_factory=time.perf_counter)
    finished_at: float | None = None
    duration_s: float | None = None

    variable_count: int = 0
    outcome: Optional[str] = None

    # index -> accepted value
    resolved: Dict[int, str] = field(default_factory=dict)
    # index -> number of occurrences replaced
    occurrences: Dict[int, int] = field(default_factory=dict)
    keystrokes: int = 0

    warnings: List[NoMatchWarning] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    rolled_back: bool = False

    time_by_stage: Dict[str, float] = field(
        default_factory=lambda: {
            "scan": 0.0,
            "input": 0.0,
            "preview": 0.0,
            "commit": 0.0,
        }
    )

    @property
    def skipped(self) -> List[int]:
        return [w.index for w in self.warnings]

    def add_time(self, stage: str, seconds: float) -> None:
        self.time_by_stage[stage] = self.time_by_stage.get(stage, 0.0) + seconds

    def add_warning(self, warning: NoMatchWarning) -> None:
        self.warnings.append(warning)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def mark_resolved(self, index: int, value: str, occurrences: int) -> None:
        self.resolved[index] = value
        self.occurrences[index] = occurrences

    def finish(self, outcome: str) -> None:
        self.outcome = outcome
        self.finished_at = time.perf_counter()
        self.duration_s = self.finished_at - self.started_at

    def to_json(self, *, indent: int = 2) -> str:
        return json.dumps(
            {
                "started_at": self.started_at,
                "finished_at": self.finished_at,
                "duration_s": self.duration_s,
                "variable_count": self.variable_count,
                "outcome": self.outcome,
                "resolved": {str(k): v for k, v in self.resolved.items()},
                "occurrences": {str(k): v for k, v in self.occurrences.items()},
                "keystrokes": self.keystrokes,
                "skipped": self.skipped,
                "errors": self.errors,
                "rolled_back": self.rolled_back,
                "time_by_stage": self.time_by_stage,
            },
            indent=indent,
        )


class StageTimer:
    def __init__(self, report: SessionReport, stage: str):
        self._report = report
        self._stage = stage
        self._t0: float | None = None

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._t0 is not None:
            self._report.add_time(self._stage, time.perf_counter() - self._t0)
        return False
