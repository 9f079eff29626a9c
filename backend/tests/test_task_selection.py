"""Tests for greedy task selection and partitioning."""
from __future__ import annotations

import itertools
import math
from datetime import date, datetime, timedelta, timezone

import pytest

from planscope.services.capacity import estimate_minutes, max_minutes, max_task_count
from planscope.services.plan_types import CandidateTask, Constraints
from planscope.services.scoring import UnknownEnumValueError
from planscope.services.task_selection import (
    do_first_count,
    partition_plan,
    rank_tasks,
    select_and_partition_plan,
    select_tasks,
)

NOW = datetime(2026, 3, 4, 15, 0, tzinfo=timezone.utc)
TOMORROW = date(2026, 3, 5)


def _task(task_id: str, **overrides) -> CandidateTask:
    fields = {
        "id": task_id,
        "title": f"Task {task_id}",
        "effort": "medium",
        "urgency": "medium",
        "deadline": None,
        "category": "other",
    }
    fields.update(overrides)
    return CandidateTask(**fields)


def _constraints(**overrides) -> Constraints:
    fields = {"time_available": "medium", "energy_level": "ok", "focus_area": "work", "mode": "week"}
    fields.update(overrides)
    return Constraints(**fields)


def _mixed_batch() -> list[CandidateTask]:
    return [
        _task("t1", effort="large", urgency="high", category="work"),
        _task("t2", effort="small", urgency="low", category="home"),
        _task("t3", effort="medium", urgency="medium", deadline=TOMORROW, category="money"),
        _task("t4", effort="small", urgency="medium", category="health"),
        _task("t5", effort="large", urgency="low", category="work"),
        _task("t6", effort="small", urgency="medium", category="health"),
        _task("t7", effort="medium", urgency="high", deadline=date(2026, 3, 20), category="work"),
        _task("t8", effort="small", urgency="high", category="other"),
        _task("t9", effort="medium", urgency="low", category="home"),
        _task("t10", effort="large", urgency="medium", deadline=date(2026, 3, 8), category="money"),
        _task("t11", effort="small", urgency="low", category="other"),
        _task("t12", effort="medium", urgency="medium", category="health"),
    ]


def test_empty_batch_yields_empty_plan() -> None:
    partition = select_and_partition_plan([], _constraints(), now=NOW)

    assert partition.do_first == []
    assert partition.this_week == []
    assert partition.not_this_week == []


def test_oversized_tasks_never_fit_a_small_budget() -> None:
    tasks = [_task(f"big{i}", effort="large", urgency="high") for i in range(5)]
    constraints = _constraints(mode="today", time_available="low")

    partition = select_and_partition_plan(tasks, constraints, now=NOW)

    assert partition.this_week == []
    assert partition.do_first == []
    assert [task.id for task in partition.not_this_week] == [f"big{i}" for i in range(5)]


def test_item_cap_binds_before_minute_budget() -> None:
    tasks = [_task(f"s{i}", effort="small") for i in range(10)]
    constraints = _constraints(mode="week", time_available="high")

    partition = select_and_partition_plan(tasks, constraints, now=NOW)

    assert [task.id for task in partition.this_week] == [f"s{i}" for i in range(7)]
    assert [task.id for task in partition.not_this_week] == ["s7", "s8", "s9"]
    assert len(partition.do_first) == 3
    assert partition.do_first == partition.this_week[:3]


def test_single_task_for_today_is_done_first() -> None:
    partition = select_and_partition_plan([_task("only", effort="small")], _constraints(mode="today"), now=NOW)

    assert len(partition.do_first) == len(partition.this_week) == 1
    assert partition.not_this_week == []


def test_urgent_focused_task_due_tomorrow_ranks_first() -> None:
    star = _task("star", effort="small", urgency="high", deadline=TOMORROW, category="work")
    tasks = _mixed_batch() + [star]

    ranked = rank_tasks(tasks, _constraints(energy_level="drained"), now=NOW)

    assert ranked[0].id == "star"
    assert ranked[0].score == 105
    assert ranked[0].idx == len(tasks) - 1


def test_greedy_walk_skips_what_does_not_fit_and_keeps_going() -> None:
    tasks = [
        _task("large_high", effort="large", urgency="high"),
        _task("medium_high", effort="medium", urgency="high"),
        _task("small_low", effort="small", urgency="low"),
    ]
    constraints = _constraints(mode="today", time_available="medium")

    selection = select_tasks(tasks, constraints, now=NOW)

    assert [task.id for task in selection.selected] == ["medium_high", "small_low"]
    assert [task.id for task in selection.rejected] == ["large_high"]
    assert selection.total_minutes == 100
    assert selection.max_minutes == 180
    assert selection.max_tasks == 3


def test_expensive_high_score_task_can_crowd_out_cheaper_ones() -> None:
    tasks = [
        _task("big", effort="large", urgency="high", deadline=TOMORROW),
        _task("a", effort="small", urgency="medium"),
        _task("b", effort="small", urgency="medium"),
    ]
    constraints = _constraints(mode="today", time_available="low")

    selection = select_tasks(tasks, constraints, now=NOW)

    # 150 minutes never fits 90, so both small tasks still make it.
    assert [task.id for task in selection.selected] == ["a", "b"]

    constraints = _constraints(mode="today", time_available="medium")
    selection = select_tasks(tasks, constraints, now=NOW)

    # 150 fits 180 and is admitted first, leaving room for only one small task.
    assert [task.id for task in selection.selected] == ["big", "a"]
    assert [task.id for task in selection.rejected] == ["b"]


def test_ties_keep_input_order_in_both_lists() -> None:
    tasks = [_task(f"tie{i}", effort="medium") for i in range(12)]
    constraints = _constraints(mode="week", time_available="low")

    partition = select_and_partition_plan(tasks, constraints, now=NOW)

    assert [task.idx for task in partition.this_week] == list(range(7))
    assert [task.idx for task in partition.not_this_week] == list(range(7, 12))


def test_rejected_tasks_stay_in_score_order() -> None:
    partition = select_and_partition_plan(_mixed_batch(), _constraints(mode="today", time_available="low"), now=NOW)

    scores = [task.score for task in partition.not_this_week]
    assert scores == sorted(scores, reverse=True)


def test_repeated_runs_are_identical() -> None:
    constraints = _constraints(energy_level="fired_up", focus_area="money")
    first = select_and_partition_plan(_mixed_batch(), constraints, now=NOW)
    second = select_and_partition_plan(_mixed_batch(), constraints, now=NOW)

    assert first == second


@pytest.mark.parametrize(
    ("mode", "time_available", "energy_level"),
    list(itertools.product(("today", "week"), ("low", "medium", "high"), ("drained", "ok", "fired_up"))),
)
def test_partition_invariants_hold_for_every_constraint_combination(mode, time_available, energy_level) -> None:
    tasks = _mixed_batch()
    constraints = _constraints(mode=mode, time_available=time_available, energy_level=energy_level)

    partition = select_and_partition_plan(tasks, constraints, now=NOW)

    assert len(partition.this_week) <= max_task_count(mode)
    assert sum(estimate_minutes(task.effort) for task in partition.this_week) <= max_minutes(mode, time_available)

    active_ids = [task.id for task in partition.this_week]
    parked_ids = [task.id for task in partition.not_this_week]
    assert sorted(active_ids + parked_ids) == sorted(task.id for task in tasks)
    assert not set(active_ids) & set(parked_ids)

    expected_do_first = (
        min(1, len(partition.this_week))
        if mode == "today"
        else min(3, math.ceil(len(partition.this_week) * 0.35))
    )
    assert len(partition.do_first) == expected_do_first
    assert partition.do_first == partition.this_week[: len(partition.do_first)]

    for earlier, later in zip(partition.this_week, partition.this_week[1:]):
        assert earlier.score >= later.score
        if earlier.score == later.score:
            assert earlier.idx < later.idx


@pytest.mark.parametrize(
    ("count", "mode", "expected"),
    [
        (0, "week", 0),
        (1, "week", 1),
        (2, "week", 1),
        (3, "week", 2),
        (5, "week", 2),
        (6, "week", 3),
        (7, "week", 3),
        (0, "today", 0),
        (1, "today", 1),
        (3, "today", 1),
    ],
)
def test_do_first_count(count: int, mode: str, expected: int) -> None:
    assert do_first_count(count, mode) == expected


def test_partition_uses_selection_order() -> None:
    selection = select_tasks(_mixed_batch(), _constraints(time_available="high"), now=NOW)

    partition = partition_plan(selection, "week")

    assert partition.this_week == selection.selected
    assert partition.not_this_week == selection.rejected
    assert partition.task_count == 12


def test_unknown_time_level_selects_nothing() -> None:
    partition = select_and_partition_plan(_mixed_batch(), _constraints(time_available="plenty"), now=NOW)

    assert partition.this_week == []
    assert len(partition.not_this_week) == 12


def test_strict_selection_propagates_enum_errors() -> None:
    tasks = [_task("ok"), _task("bad", urgency="someday")]

    with pytest.raises(UnknownEnumValueError):
        select_tasks(tasks, _constraints(), now=NOW, strict=True)


def test_week_budget_example() -> None:
    tasks = [_task(f"m{i}", effort="medium", urgency="high") for i in range(4)]
    tasks.append(_task("late", effort="small", urgency="low", deadline=NOW.date() + timedelta(days=30)))

    selection = select_tasks(tasks, _constraints(mode="week", time_available="low"), now=NOW)

    assert [task.id for task in selection.selected] == ["m0", "m1", "m2", "m3", "late"]
    assert selection.total_minutes == 4 * 75 + 25
