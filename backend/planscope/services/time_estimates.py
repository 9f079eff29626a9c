"""Parsing and formatting of human time estimates such as "30-60 min"."""
from __future__ import annotations

import re

DEFAULT_ESTIMATE_SECONDS = 25 * 60

_LEADING_NUMBER = re.compile(r"^(\d+)")


def parse_time_estimate(estimate: str | None) -> int:
    """
    Convert a time estimate into seconds for a focus timer.

    "15 min" -> 900, "30-60 min" -> 1800 (lower bound), "1-2 hours" -> 3600,
    anything without a leading number -> 25 minutes.
    """
    if not estimate:
        return DEFAULT_ESTIMATE_SECONDS

    normalized = estimate.lower().strip()
    match = _LEADING_NUMBER.match(normalized)
    if not match:
        return DEFAULT_ESTIMATE_SECONDS

    value = int(match.group(1))
    if "hour" in normalized:
        return value * 60 * 60
    return value * 60


def format_minutes(minutes: int) -> str:
    if minutes >= 60 and minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} min"
