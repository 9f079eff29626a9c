"""Capacity-constrained task selection and plan partitioning."""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable, List, Optional

from planscope.services.capacity import estimate_minutes, max_minutes, max_task_count, plan_mode
from planscope.services.plan_types import (
    CandidateTask,
    Constraints,
    PlanPartition,
    ScoredTask,
    SelectionResult,
)
from planscope.services.scoring import score_task

logger = logging.getLogger(__name__)

DO_FIRST_SHARE = 0.35
DO_FIRST_MAX_WEEK = 3
DO_FIRST_MAX_TODAY = 1


def rank_tasks(
    tasks: Iterable[CandidateTask],
    constraints: Constraints,
    *,
    now: Optional[datetime] = None,
    strict: Optional[bool] = None,
) -> List[ScoredTask]:
    """Score every task and sort by score descending; ties keep input order."""
    scored = [
        ScoredTask(
            id=task.id,
            title=task.title,
            effort=task.effort,
            urgency=task.urgency,
            deadline=task.deadline,
            category=task.category,
            score=score_task(task, constraints, now=now, strict=strict),
            idx=idx,
        )
        for idx, task in enumerate(tasks)
    ]
    # sorted() is stable, so equal scores stay in idx order.
    return sorted(scored, key=lambda item: item.score, reverse=True)


def select_tasks(
    tasks: Iterable[CandidateTask],
    constraints: Constraints,
    *,
    now: Optional[datetime] = None,
    strict: Optional[bool] = None,
) -> SelectionResult:
    """
    Greedily admit ranked tasks while both the minute budget and the item cap hold.

    The walk never backtracks: an expensive high-scoring task that fits is kept even
    when several cheaper tasks would have used the budget better.
    """
    budget = max_minutes(constraints.mode, constraints.time_available)
    cap = max_task_count(constraints.mode)
    result = SelectionResult(max_minutes=budget, max_tasks=cap)

    for task in rank_tasks(tasks, constraints, now=now, strict=strict):
        minutes = estimate_minutes(task.effort)
        if result.total_minutes + minutes <= budget and len(result.selected) < cap:
            result.selected.append(task)
            result.total_minutes += minutes
        else:
            result.rejected.append(task)

    logger.debug(
        "Selected %d/%d tasks using %d of %d minutes",
        len(result.selected),
        len(result.selected) + len(result.rejected),
        result.total_minutes,
        budget,
    )
    return result


def do_first_count(selected_count: int, mode: str | None) -> int:
    if plan_mode(mode) == "today":
        return min(DO_FIRST_MAX_TODAY, selected_count)
    return min(DO_FIRST_MAX_WEEK, math.ceil(selected_count * DO_FIRST_SHARE))


def partition_plan(selection: SelectionResult, mode: str | None) -> PlanPartition:
    """Split a selection into the ranked do-first / this-week / not-this-week view."""
    this_week = list(selection.selected)
    return PlanPartition(
        do_first=this_week[: do_first_count(len(this_week), mode)],
        this_week=this_week,
        not_this_week=list(selection.rejected),
    )


def select_and_partition_plan(
    tasks: Iterable[CandidateTask],
    constraints: Constraints,
    *,
    now: Optional[datetime] = None,
    strict: Optional[bool] = None,
) -> PlanPartition:
    """Score, select and partition ``tasks`` in one pass."""
    selection = select_tasks(tasks, constraints, now=now, strict=strict)
    return partition_plan(selection, constraints.mode)
