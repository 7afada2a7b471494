"""
XP & level system.

calculate_xp() scores a single workout; the level table maps cumulative XP
to a level and title.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..catalog import DIFFICULTY_MULTIPLIERS, build_variation_multipliers

XP_PER_REP = 5
SPEED_BONUS_CAP = 75
STREAK_BONUS_PER_DAY = 3
STREAK_BONUS_CAP = 30

# Lookup über den gesamten Katalog, nicht nur die gewählte Stufe
VARIATION_MULTIPLIERS: Dict[str, float] = build_variation_multipliers()

# (level, cumulative xp, title), aufsteigend
LEVEL_THRESHOLDS: Tuple[Tuple[int, int, str], ...] = (
    (1, 0, "Rookie"),
    (2, 500, "Beginner"),
    (3, 1200, "Amateur"),
    (4, 2500, "Regular"),
    (5, 4500, "Dedicated"),
    (6, 7000, "Committed"),
    (7, 10000, "Warrior"),
    (8, 14000, "Fighter"),
    (9, 19000, "Athlete"),
    (10, 25000, "Champion"),
    (15, 60000, "Elite"),
    (20, 120000, "Master"),
    (25, 200000, "Grandmaster"),
    (30, 300000, "Legend"),
    (40, 500000, "Mythic"),
    (50, 750000, "Immortal"),
)


@dataclass
class XPCalculation:
    base_xp: int
    speed_bonus: int
    difficulty_multiplier: float
    variation_multiplier: float
    combined_multiplier: float
    streak_bonus: int
    total_xp: int
    daily_goal_bonus: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LevelInfo:
    level: int
    title: str
    current_xp: int
    xp_for_current_level: int
    xp_for_next_level: int
    progress: float  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_xp(
    total_reps: int,
    reps_per_minute: float,
    difficulty: str,
    current_streak: int,
    variation_id: str = "standard",
) -> XPCalculation:
    """
    XP for one workout.

    total = floor((base + speed) * difficulty * variation) + streak bonus.
    Unknown variation ids score with a multiplier of 1.0.
    """
    if difficulty not in DIFFICULTY_MULTIPLIERS:
        raise ValueError(f"unknown difficulty: {difficulty!r}")

    base_xp = total_reps * XP_PER_REP
    # 20 Wdh./min = 40 Bonus, gedeckelt bei 75
    speed_bonus = min(math.floor(reps_per_minute / 20 * 40), SPEED_BONUS_CAP)

    difficulty_multiplier = DIFFICULTY_MULTIPLIERS[difficulty]
    variation_multiplier = VARIATION_MULTIPLIERS.get(variation_id) or 1.0
    combined_multiplier = difficulty_multiplier * variation_multiplier

    streak_bonus = min(current_streak * STREAK_BONUS_PER_DAY, STREAK_BONUS_CAP)
    total_xp = math.floor((base_xp + speed_bonus) * combined_multiplier) + streak_bonus

    return XPCalculation(
        base_xp=base_xp,
        speed_bonus=speed_bonus,
        difficulty_multiplier=difficulty_multiplier,
        variation_multiplier=variation_multiplier,
        combined_multiplier=combined_multiplier,
        streak_bonus=streak_bonus,
        total_xp=total_xp,
    )


def get_level_from_xp(xp: int) -> int:
    level = 1
    for threshold_level, threshold_xp, _ in LEVEL_THRESHOLDS:
        if xp < threshold_xp:
            break
        level = threshold_level
    return level


def _threshold(level: int) -> Optional[Tuple[int, int, str]]:
    for entry in LEVEL_THRESHOLDS:
        if entry[0] == level:
            return entry
    return None


def get_level_info(xp: int) -> LevelInfo:
    level = get_level_from_xp(xp)
    current = _threshold(level) or LEVEL_THRESHOLDS[0]
    upcoming = [t for t in LEVEL_THRESHOLDS if t[0] > level]

    xp_for_current = current[1]
    if not upcoming:
        # Höchste Stufe erreicht
        return LevelInfo(level, current[2], xp, xp_for_current, xp_for_current, 0.0)

    xp_for_next = upcoming[0][1]
    needed = xp_for_next - xp_for_current
    progress = min((xp - xp_for_current) / needed * 100, 100.0)
    return LevelInfo(level, current[2], xp, xp_for_current, xp_for_next, progress)


def get_level_title(level: int) -> str:
    """Titles of unlisted levels come from the closest lower table entry."""
    title = "Rookie"
    for threshold_level, _, threshold_title in LEVEL_THRESHOLDS:
        if threshold_level > level:
            break
        title = threshold_title
    return title


def get_xp_for_level(level: int) -> int:
    """Cumulative XP for a level; unlisted levels are interpolated linearly."""
    exact = _threshold(level)
    if exact:
        return exact[1]

    lower = [t for t in LEVEL_THRESHOLDS if t[0] < level]
    upper = [t for t in LEVEL_THRESHOLDS if t[0] > level]
    if not lower:
        return 0
    if not upper:
        return LEVEL_THRESHOLDS[-1][1]

    lo_level, lo_xp, _ = lower[-1]
    hi_level, hi_xp, _ = upper[0]
    return math.floor(lo_xp + (hi_xp - lo_xp) / (hi_level - lo_level) * (level - lo_level))


def list_levels() -> List[Dict[str, Any]]:
    return [{"level": lvl, "xp_required": xp, "title": title} for lvl, xp, title in LEVEL_THRESHOLDS]


def format_xp(xp: int) -> str:
    if xp >= 1_000_000:
        return f"{xp / 1_000_000:.1f}M"
    if xp >= 1000:
        return f"{xp / 1000:.1f}K"
    return str(xp)


def format_multiplier(multiplier: float) -> str:
    return f"{multiplier:.2f}x"
