"""Mapping between the ranked plan view and mutually exclusive stored sections."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from planscope.services.plan_types import PlanPartition, ScoredTask

SECTION_DO_FIRST = "do_first"
SECTION_THIS_WEEK = "this_week"
SECTION_NOT_THIS_WEEK = "not_this_week"
SECTIONS = (SECTION_DO_FIRST, SECTION_THIS_WEEK, SECTION_NOT_THIS_WEEK)

# Parked tasks sort after any realistic number of active tasks.
NOT_THIS_WEEK_SORT_OFFSET = 100


@dataclass(frozen=True)
class SectionedTask:
    task: ScoredTask
    section: str
    sort_order: int


def to_sections(partition: PlanPartition) -> List[SectionedTask]:
    """Label each task with exactly one section; do-first tasks leave the this-week bucket."""
    do_first_count = len(partition.do_first)
    items = [
        SectionedTask(task=task, section=SECTION_DO_FIRST, sort_order=index)
        for index, task in enumerate(partition.do_first)
    ]
    items.extend(
        SectionedTask(task=task, section=SECTION_THIS_WEEK, sort_order=do_first_count + index)
        for index, task in enumerate(partition.this_week[do_first_count:])
    )
    items.extend(
        SectionedTask(task=task, section=SECTION_NOT_THIS_WEEK, sort_order=NOT_THIS_WEEK_SORT_OFFSET + index)
        for index, task in enumerate(partition.not_this_week)
    )
    return items


def from_sections(items: Iterable[SectionedTask]) -> PlanPartition:
    """Rebuild the ranked view from sectioned tasks."""
    ordered = sorted(items, key=lambda item: item.sort_order)
    do_first = [item.task for item in ordered if item.section == SECTION_DO_FIRST]
    rest = [item.task for item in ordered if item.section == SECTION_THIS_WEEK]
    parked = [item.task for item in ordered if item.section == SECTION_NOT_THIS_WEEK]
    return PlanPartition(do_first=do_first, this_week=do_first + rest, not_this_week=parked)
