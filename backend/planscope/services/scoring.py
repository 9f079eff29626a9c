"""Multi-factor priority scoring for candidate tasks.

The score is the sum of five components:

* urgency (5-35): high 35, medium 20, anything else 5
* deadline proximity (0-30): only when a deadline is set; due within a day 30,
  within three days 25, within a week 15, later 5
* effort fit (8-20): small 20, medium 15, anything else 8
* energy fit (5-15): 15 when the stated energy matches the task size
  (fired up + large, drained + small), 10 for "ok" energy, 5 otherwise
* focus bonus (0 or 5): the task category equals the requested focus area

Scores are not normalized. Callers must only use them to rank tasks.
"""
from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timezone
from typing import Dict, Optional, Tuple

from planscope.services.plan_types import ENERGY_LEVELS, CandidateTask, Constraints

logger = logging.getLogger(__name__)

# Unrecognized effort/urgency/energy values score through the lowest branch
# instead of raising. Pass strict=True (or set STRICT_TASK_ENUMS) to reject them.
LENIENT_ENUM_FALLBACK = True

URGENCY_POINTS: Dict[str, int] = {"high": 35, "medium": 20, "low": 5}
URGENCY_FALLBACK_POINTS = 5

# (max days until deadline, points), checked in order.
DEADLINE_WINDOWS: Tuple[Tuple[int, int], ...] = ((1, 30), (3, 25), (7, 15))
DEADLINE_FAR_POINTS = 5

EFFORT_POINTS: Dict[str, int] = {"small": 20, "medium": 15, "large": 8}
EFFORT_FALLBACK_POINTS = 8

ENERGY_MATCH_POINTS = 15
ENERGY_OK_POINTS = 10
ENERGY_MISMATCH_POINTS = 5
ENERGY_MATCHES = {("fired_up", "large"), ("drained", "small")}

FOCUS_BONUS_POINTS = 5

SECONDS_PER_DAY = 24 * 60 * 60


class UnknownEnumValueError(ValueError):
    """Raised in strict mode when a task or constraint carries an unrecognized value."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"Unrecognized {field} value: {value!r}")
        self.field = field
        self.value = value


def score_task(
    task: CandidateTask,
    constraints: Constraints,
    *,
    now: Optional[datetime] = None,
    strict: Optional[bool] = None,
) -> int:
    """Return the priority score of ``task`` under ``constraints``."""
    strict_mode = (not LENIENT_ENUM_FALLBACK) if strict is None else strict
    _check_enums(task, constraints, strict_mode)

    score = URGENCY_POINTS.get(task.urgency, URGENCY_FALLBACK_POINTS)
    score += deadline_points(task.deadline, now=now)
    score += EFFORT_POINTS.get(task.effort, EFFORT_FALLBACK_POINTS)
    score += energy_points(task.effort, constraints.energy_level)
    if task.category == constraints.focus_area:
        score += FOCUS_BONUS_POINTS
    return score


def days_until(deadline: date, now: Optional[datetime] = None) -> int:
    """Whole days from ``now`` to midnight UTC of ``deadline``, floored (negative when overdue)."""
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    due = datetime.combine(deadline, time.min, tzinfo=timezone.utc)
    return math.floor((due - current).total_seconds() / SECONDS_PER_DAY)


def deadline_points(deadline: Optional[date], *, now: Optional[datetime] = None) -> int:
    if deadline is None:
        return 0
    remaining = days_until(deadline, now)
    for max_days, points in DEADLINE_WINDOWS:
        if remaining <= max_days:
            return points
    return DEADLINE_FAR_POINTS


def energy_points(effort: str, energy_level: str) -> int:
    if (energy_level, effort) in ENERGY_MATCHES:
        return ENERGY_MATCH_POINTS
    if energy_level == "ok":
        return ENERGY_OK_POINTS
    return ENERGY_MISMATCH_POINTS


def _check_enums(task: CandidateTask, constraints: Constraints, strict: bool) -> None:
    checks = (
        ("urgency", task.urgency, URGENCY_POINTS),
        ("effort", task.effort, EFFORT_POINTS),
        ("energy_level", constraints.energy_level, ENERGY_LEVELS),
    )
    for field, value, allowed in checks:
        if value in allowed:
            continue
        if strict:
            raise UnknownEnumValueError(field, value)
        logger.warning("Task %s has unrecognized %s %r; scoring with the lowest tier", task.id, field, value)
