"""
Check that a generated activity plan fills the available instructional time.

Step titles carry their duration, e.g. "1 สำรวจ (15 นาที)" or "Explore (15 min)".
Only the innermost timed steps are summed, so a main step's own total is not
counted twice.
"""

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_MINUTES = re.compile(r"\(\s*(\d+(?:\.\d+)?)\s*(?:นาที|min(?:ute)?s?)\s*\)", re.IGNORECASE)


def _minutes_in(key: str) -> float | None:
    match = _MINUTES.search(key)
    return float(match.group(1)) if match else None


def _has_timed_descendant(value: Any) -> bool:
    if isinstance(value, dict):
        return any(_minutes_in(str(k)) is not None or _has_timed_descendant(v) for k, v in value.items())
    if isinstance(value, list):
        return any(_has_timed_descendant(item) for item in value)
    return False


def sum_leaf_minutes(plan: Any) -> float:
    total = 0.0
    if isinstance(plan, dict):
        for key, value in plan.items():
            minutes = _minutes_in(str(key))
            if minutes is not None and not _has_timed_descendant(value):
                total += minutes
            else:
                total += sum_leaf_minutes(value)
    elif isinstance(plan, list):
        for item in plan:
            total += sum_leaf_minutes(item)
    return total


def check_activity_minutes(plan: Any, expected_minutes: int) -> dict[str, Any]:
    """Report planned vs. available minutes. Mismatches are logged, not repaired."""
    planned = sum_leaf_minutes(plan)
    planned_value: int | float = int(planned) if planned.is_integer() else planned
    balanced = planned == expected_minutes

    if not balanced:
        logger.warning(
            f"⚠️  Activity plan covers {planned_value} of {expected_minutes} available minutes"
        )

    return {
        "expectedMinutes": expected_minutes,
        "plannedMinutes": planned_value,
        "balanced": balanced,
    }
