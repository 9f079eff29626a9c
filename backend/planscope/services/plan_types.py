"""Data shapes shared by the scoring, selection and assembly steps."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

EFFORT_LEVELS = ("small", "medium", "large")
URGENCY_LEVELS = ("low", "medium", "high")
TIME_LEVELS = ("low", "medium", "high")
ENERGY_LEVELS = ("drained", "ok", "fired_up")
PLAN_MODES = ("today", "week")


@dataclass(frozen=True)
class CandidateTask:
    """One actionable item extracted from a brain dump."""

    id: str
    title: str
    effort: str
    urgency: str
    deadline: Optional[date] = None
    category: str = "other"


@dataclass(frozen=True)
class Constraints:
    """Planning context supplied with a single plan request."""

    time_available: str
    energy_level: str
    focus_area: str
    mode: str = "week"


@dataclass(frozen=True)
class ScoredTask(CandidateTask):
    """A candidate task with its priority score and original input position."""

    score: int = 0
    idx: int = 0


@dataclass
class SelectionResult:
    selected: List[ScoredTask] = field(default_factory=list)
    rejected: List[ScoredTask] = field(default_factory=list)
    max_minutes: int = 0
    max_tasks: int = 0
    total_minutes: int = 0


@dataclass
class PlanPartition:
    """Ranked view of a plan: ``do_first`` is always a prefix of ``this_week``."""

    do_first: List[ScoredTask] = field(default_factory=list)
    this_week: List[ScoredTask] = field(default_factory=list)
    not_this_week: List[ScoredTask] = field(default_factory=list)

    @property
    def task_count(self) -> int:
        return len(self.this_week) + len(self.not_this_week)
