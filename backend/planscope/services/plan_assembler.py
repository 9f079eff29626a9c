"""Assemble a storable plan record from the ranked partition and its display copy."""
from __future__ import annotations

import re
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from planscope.api.schemas.plan import PlanCopy, PlanMeta, PlanRecord, PlanTaskRecord, TaskCopy
from planscope.services.capacity import estimate_minutes, plan_mode
from planscope.services.plan_sections import (
    SECTION_DO_FIRST,
    SECTION_NOT_THIS_WEEK,
    SECTION_THIS_WEEK,
    SectionedTask,
    to_sections,
)
from planscope.services.plan_types import Constraints, PlanPartition, ScoredTask
from planscope.services.time_estimates import format_minutes, parse_time_estimate
from planscope.services.week_dates import format_week_label, get_target_week

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalise_title(text: str) -> str:
    return _NON_ALNUM.sub("", text.lower())


def find_task_copy(copies: Iterable[TaskCopy], task: ScoredTask) -> Optional[TaskCopy]:
    """
    Find the copy written for ``task``.

    An exact ``task_id`` wins. Otherwise titles are compared after normalisation and
    either containing the other counts as a match, since the writer tends to reword.
    """
    candidates = list(copies)
    for copy in candidates:
        if copy.task_id and copy.task_id == task.id:
            return copy

    wanted = normalise_title(task.title)
    if not wanted:
        return None
    for copy in candidates:
        if copy.task_id and copy.task_id != task.id:
            continue
        written = normalise_title(copy.title)
        if written and (written == wanted or wanted in written or written in wanted):
            return copy
    return None


def assemble_plan(
    partition: PlanPartition,
    constraints: Constraints,
    copy: PlanCopy,
    *,
    today: Optional[date] = None,
    label: Optional[str] = None,
) -> PlanRecord:
    """Merge copy into the partition and label every task with one section."""
    week_start, week_end, is_next_week = get_target_week(today)
    copies_by_section: Dict[str, List[TaskCopy]] = {
        SECTION_DO_FIRST: copy.do_first,
        SECTION_THIS_WEEK: copy.this_week,
        SECTION_NOT_THIS_WEEK: copy.not_this_week,
    }
    all_copies = copy.do_first + copy.this_week + copy.not_this_week

    tasks: List[PlanTaskRecord] = []
    for item in to_sections(partition):
        matched = find_task_copy(copies_by_section[item.section], item.task)
        if matched is None:
            matched = find_task_copy(all_copies, item.task)
        tasks.append(_task_record(item, matched))

    return PlanRecord(
        mode=plan_mode(constraints.mode),
        label=label or None,
        week_start=week_start,
        week_end=week_end,
        week_label=format_week_label(week_start, week_end),
        is_next_week=is_next_week,
        constraints={key: str(value) for key, value in asdict(constraints).items()},
        status="review",
        meta=PlanMeta(
            headline=copy.headline,
            burnout_alert=copy.burnout_alert,
            reality_check=copy.reality_check,
            real_talk=copy.real_talk,
            next_week_preview=copy.next_week_preview,
        ),
        tasks=tasks,
    )


def serialize_plan(record: PlanRecord) -> Dict[str, Any]:
    """JSON-ready representation for the document store."""
    return record.model_dump(mode="json")


def _task_record(item: SectionedTask, copy: Optional[TaskCopy]) -> PlanTaskRecord:
    task = item.task
    parked = item.section == SECTION_NOT_THIS_WEEK
    time_estimate = None
    if not parked:
        time_estimate = (copy.time_estimate if copy else None) or format_minutes(estimate_minutes(task.effort))

    return PlanTaskRecord(
        task_id=task.id,
        title=(copy.title.strip() if copy and copy.title.strip() else task.title),
        section=item.section,
        time_estimate=time_estimate,
        focus_seconds=None if parked else parse_time_estimate(time_estimate),
        effort=task.effort,
        urgency=task.urgency,
        category=task.category or "other",
        deadline=task.deadline,
        context=_context_for(item.section, copy),
        score=task.score,
        status="pending",
        sort_order=item.sort_order,
    )


def _context_for(section: str, copy: Optional[TaskCopy]) -> Optional[str]:
    if copy is None:
        return None
    if section == SECTION_DO_FIRST:
        parts = [copy.why, copy.context]
    elif section == SECTION_THIS_WEEK:
        parts = [copy.notes]
    else:
        parts = [copy.reason, copy.validation]
    joined = " | ".join(part for part in parts if part)
    return joined or None
