"""
Daily goal completion and bonus XP.

A plan day counts as done at 90% of its target. The bonus is added to the
workout XP as-is, without the difficulty/variation multiplier.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from ..catalog import DIFFICULTY_MULTIPLIERS

COMPLETION_THRESHOLD = 0.9
BONUS_BASE = 100
BONUS_PER_STREAK_DAY = 10
MAX_STREAK_BONUS = 100


def _field(plan_day: Any, name: str) -> Any:
    # Akzeptiert sqlite3.Row / dict (DB) und PlanDay (Generator)
    if isinstance(plan_day, Mapping) or hasattr(plan_day, "keys"):
        return plan_day[name]
    return getattr(plan_day, name)


def check_daily_goal_completion(total_reps: int, plan_day: Optional[Any]) -> bool:
    if plan_day is None or _field(plan_day, "is_rest_day"):
        return False
    return total_reps >= _field(plan_day, "target_total_reps") * COMPLETION_THRESHOLD


def calculate_daily_goal_bonus(difficulty: str, current_streak: int, plan_day: Optional[Any]) -> int:
    if plan_day is None or _field(plan_day, "is_rest_day"):
        return 0
    if difficulty not in DIFFICULTY_MULTIPLIERS:
        raise ValueError(f"unknown difficulty: {difficulty!r}")
    streak_bonus = min(current_streak * BONUS_PER_STREAK_DAY, MAX_STREAK_BONUS)
    return math.floor(BONUS_BASE * DIFFICULTY_MULTIPLIERS[difficulty]) + streak_bonus
