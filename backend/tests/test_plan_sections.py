"""Tests for mapping ranked plans to mutually exclusive sections."""
from __future__ import annotations

from datetime import datetime, timezone

from planscope.services.plan_sections import (
    SECTION_DO_FIRST,
    SECTION_NOT_THIS_WEEK,
    SECTION_THIS_WEEK,
    from_sections,
    to_sections,
)
from planscope.services.plan_types import CandidateTask, Constraints, PlanPartition
from planscope.services.task_selection import select_and_partition_plan

NOW = datetime(2026, 3, 4, 15, 0, tzinfo=timezone.utc)


def _partition() -> PlanPartition:
    tasks = [
        CandidateTask(id=f"t{i}", title=f"Task {i}", effort=effort, urgency=urgency)
        for i, (effort, urgency) in enumerate(
            [
                ("small", "high"),
                ("medium", "high"),
                ("large", "low"),
                ("small", "medium"),
                ("medium", "low"),
                ("large", "high"),
                ("small", "low"),
                ("medium", "medium"),
                ("small", "high"),
            ]
        )
    ]
    constraints = Constraints(time_available="medium", energy_level="ok", focus_area="work", mode="week")
    return select_and_partition_plan(tasks, constraints, now=NOW)


def test_each_task_gets_exactly_one_section() -> None:
    partition = _partition()

    items = to_sections(partition)

    assert len(items) == partition.task_count
    assert len({item.task.id for item in items}) == len(items)
    do_first = [item for item in items if item.section == SECTION_DO_FIRST]
    this_week = [item for item in items if item.section == SECTION_THIS_WEEK]
    parked = [item for item in items if item.section == SECTION_NOT_THIS_WEEK]
    assert [item.task for item in do_first] == partition.do_first
    assert [item.task for item in do_first + this_week] == partition.this_week
    assert [item.task for item in parked] == partition.not_this_week


def test_sort_orders_are_contiguous_for_active_tasks() -> None:
    partition = _partition()

    items = to_sections(partition)

    active = [item.sort_order for item in items if item.section != SECTION_NOT_THIS_WEEK]
    parked = [item.sort_order for item in items if item.section == SECTION_NOT_THIS_WEEK]
    assert active == list(range(len(partition.this_week)))
    assert parked == list(range(100, 100 + len(partition.not_this_week)))


def test_sections_map_back_to_the_ranked_view() -> None:
    partition = _partition()

    restored = from_sections(reversed(to_sections(partition)))

    assert restored == partition


def test_empty_partition_has_no_sections() -> None:
    assert to_sections(PlanPartition()) == []
    assert from_sections([]) == PlanPartition()
