"""Capacity model: effort durations, minute budgets and item caps."""
from __future__ import annotations

from typing import Dict

EFFORT_MINUTES: Dict[str, int] = {"small": 25, "medium": 75, "large": 150}
DEFAULT_EFFORT_MINUTES = 60

MINUTE_BUDGETS: Dict[str, Dict[str, int]] = {
    "today": {"low": 90, "medium": 180, "high": 300},
    "week": {"low": 600, "medium": 900, "high": 1500},
}

MAX_TASKS: Dict[str, int] = {"today": 3, "week": 7}

TIME_BUDGET_LABELS: Dict[str, Dict[str, str]] = {
    "today": {"low": "2-3 hours", "medium": "4-6 hours", "high": "8+ hours"},
    "week": {"low": "5-10 hours", "medium": "10-20 hours", "high": "20+ hours"},
}


def plan_mode(mode: str | None) -> str:
    """Anything other than "today" plans a week."""
    return "today" if mode == "today" else "week"


def estimate_minutes(effort: str | None) -> int:
    return EFFORT_MINUTES.get(effort or "", DEFAULT_EFFORT_MINUTES)


def max_minutes(mode: str | None, time_available: str | None) -> int:
    """Minute budget for a plan; an unrecognized time level yields an empty budget."""
    return MINUTE_BUDGETS[plan_mode(mode)].get(time_available or "", 0)


def max_task_count(mode: str | None) -> int:
    return MAX_TASKS[plan_mode(mode)]


def time_budget_label(mode: str | None, time_available: str | None) -> str:
    """Human-readable hours range for prompts, e.g. "10-20 hours"."""
    labels = TIME_BUDGET_LABELS[plan_mode(mode)]
    return labels.get(time_available or "", labels["medium"])
