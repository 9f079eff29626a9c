"""Week window helpers for new plans (Sunday-Saturday weeks, UTC)."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Tuple

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def get_target_week(today: date | None = None) -> Tuple[date, date, bool]:
    """
    Return (week_start, week_end, is_next_week) for a plan created on ``today``.

    A plan started on Saturday targets the following week.
    """
    current = today or datetime.now(timezone.utc).date()
    days_since_sunday = (current.weekday() + 1) % 7
    is_next_week = days_since_sunday == 6
    if is_next_week:
        week_start = current + timedelta(days=1)
    else:
        week_start = current - timedelta(days=days_since_sunday)
    return week_start, week_start + timedelta(days=6), is_next_week


def format_week_label(week_start: date, week_end: date) -> str:
    """Format as "3 – 9 Mar", or "28 Feb – 6 Mar" when the week spans two months."""
    start_month = MONTH_ABBREVIATIONS[week_start.month - 1]
    end_month = MONTH_ABBREVIATIONS[week_end.month - 1]
    if start_month == end_month:
        return f"{week_start.day} – {week_end.day} {start_month}"
    return f"{week_start.day} {start_month} – {week_end.day} {end_month}"
