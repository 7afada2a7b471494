"""
Workout plan generator.

Turns a goal configuration (exercise, intensity, timeline, optional baseline)
into a day-by-day schedule of rest and workout days. Pure and deterministic:
no randomness, no clock, no I/O.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from ..catalog import EXERCISE_TYPES, get_exercise_goal

INTENSITIES: Tuple[str, ...] = ("beginner", "intermediate", "advanced")
TIMELINES: Tuple[int, ...] = (1, 3, 6, 12)
FITNESS_LEVELS: Tuple[str, ...] = ("beginner", "some_experience", "intermediate", "advanced")

DAYS_PER_MONTH = 30
MIN_DAILY_REPS = 10
LIGHT_DAY_EVERY = 4
LIGHT_DAY_FACTOR = 0.8

REST_DAY_NOTE = "Rest day - recover and prepare for tomorrow!"
FIRST_DAY_NOTE = "Day 1 - Let's begin your journey!"
LIGHT_DAY_NOTE = "Light day - focus on form and recovery"
GOAL_REACHED_NOTE = "You've reached your goal! Keep pushing!"


@dataclass(frozen=True)
class IntensityConfig:
    rest_days_per_week: int
    progression_rate: float
    starting_percentage: float
    max_reps_multiplier: float
    # 7 Einträge, True = Ruhetag (Index 0 = erster Tag der Woche)
    week_pattern: Tuple[bool, ...]
    max_reps_per_set: int
    set_divisor: int


INTENSITY_CONFIG: Dict[str, IntensityConfig] = {
    "beginner": IntensityConfig(
        rest_days_per_week=3,
        progression_rate=0.03,
        starting_percentage=0.3,
        max_reps_multiplier=2.0,
        week_pattern=(False, True, False, True, False, True, True),
        max_reps_per_set=15,
        set_divisor=6,
    ),
    "intermediate": IntensityConfig(
        rest_days_per_week=2,
        progression_rate=0.05,
        starting_percentage=0.5,
        max_reps_multiplier=2.5,
        week_pattern=(False, False, False, True, False, False, True),
        max_reps_per_set=20,
        set_divisor=5,
    ),
    "advanced": IntensityConfig(
        rest_days_per_week=1,
        progression_rate=0.07,
        starting_percentage=0.7,
        max_reps_multiplier=3.0,
        week_pattern=(False, False, False, False, False, False, True),
        max_reps_per_set=25,
        set_divisor=4,
    ),
}

FITNESS_LEVEL_FRACTIONS: Dict[str, float] = {
    "beginner": 0.25,
    "some_experience": 0.4,
    "intermediate": 0.55,
    "advanced": 0.7,
}


class PlanInputError(ValueError):
    """Raised for generator input outside the supported domain."""


@dataclass(frozen=True)
class PlanGeneratorInput:
    exercise_type: str
    intensity: str
    timeline_months: int
    max_reps: Optional[int] = None
    fitness_level: Optional[str] = None


@dataclass(frozen=True)
class PlanDay:
    day_number: int
    is_rest_day: bool
    target_total_reps: int
    recommended_sets: List[int] = field(default_factory=list)
    notes: Optional[str] = None


@dataclass(frozen=True)
class WorkoutPlan:
    exercise_type: str
    intensity: str
    timeline_months: int
    target_goal: int
    starting_max_reps: Optional[int]
    total_days: int
    days: List[PlanDay]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def round_half_up(value: float) -> int:
    """Rounds .5 upwards (2.5 -> 3), unlike the built-in banker's round()."""
    return int(math.floor(value + 0.5))


def validate_input(data: PlanGeneratorInput) -> None:
    if data.exercise_type not in EXERCISE_TYPES:
        raise PlanInputError(f"unknown exercise type: {data.exercise_type!r}")
    if data.intensity not in INTENSITY_CONFIG:
        raise PlanInputError(f"unknown intensity: {data.intensity!r}")
    if data.timeline_months not in TIMELINES:
        raise PlanInputError(
            f"timeline_months must be one of {TIMELINES}, got {data.timeline_months!r}"
        )
    if data.max_reps is not None:
        if isinstance(data.max_reps, bool) or not isinstance(data.max_reps, int):
            raise PlanInputError(f"max_reps must be an integer, got {data.max_reps!r}")
        if data.max_reps < 0:
            raise PlanInputError("max_reps must not be negative")
    if data.fitness_level is not None and data.fitness_level not in FITNESS_LEVEL_FRACTIONS:
        raise PlanInputError(f"unknown fitness level: {data.fitness_level!r}")


def distribute_reps_into_sets(total_reps: int, intensity: str) -> List[int]:
    """
    Splits a daily target into sets.

    The set *count* comes from a greedy pass with an intensity-dependent
    per-set ceiling; the set *sizes* are then evened out so they differ by
    at most one rep (larger sets first).
    """
    if total_reps <= 0:
        return []
    config = INTENSITY_CONFIG[intensity]
    per_set = min(config.max_reps_per_set, math.ceil(total_reps / config.set_divisor))
    per_set = max(5, per_set)

    sets: List[int] = []
    remaining = total_reps
    while remaining > 0:
        reps = min(per_set, remaining)
        if reps >= 3 or not sets:
            sets.append(reps)
        else:
            # Rest unter 3 Wdh. kommt auf den letzten Satz
            sets[-1] += reps
        remaining -= reps

    if len(sets) > 1:
        base, extra = divmod(total_reps, len(sets))
        sets = [base + (1 if i < extra else 0) for i in range(len(sets))]
    return sets


def calculate_starting_reps(data: PlanGeneratorInput) -> int:
    """
    Starting daily target. Precedence:
    max_reps (> 0)  >  fitness_level  >  intensity default.
    """
    goal = get_exercise_goal(data.exercise_type)
    config = INTENSITY_CONFIG[data.intensity]

    if data.max_reps:
        return min(
            math.floor(data.max_reps * config.max_reps_multiplier),
            math.floor(goal * 0.8),
        )
    if data.fitness_level is not None:
        return math.floor(goal * FITNESS_LEVEL_FRACTIONS[data.fitness_level])
    return math.floor(goal * config.starting_percentage)


def _day_note(day: int, is_light_day: bool, target: int, goal: int) -> Optional[str]:
    week_number = math.ceil(day / 7)
    progress_pct = round_half_up(target / goal * 100)
    if day == 1:
        return FIRST_DAY_NOTE
    if is_light_day:
        return LIGHT_DAY_NOTE
    if progress_pct >= 100:
        return GOAL_REACHED_NOTE
    if week_number % 4 == 0 and (day - 1) % 7 == 0:
        return f"Week {week_number} - Great progress! {progress_pct}% to goal"
    return None


def generate_workout_plan(data: PlanGeneratorInput) -> WorkoutPlan:
    validate_input(data)

    goal = get_exercise_goal(data.exercise_type)
    config = INTENSITY_CONFIG[data.intensity]
    total_days = data.timeline_months * DAYS_PER_MONTH

    starting_reps = calculate_starting_reps(data)
    reps_to_gain = goal - starting_reps
    workout_days = math.floor(total_days * (7 - config.rest_days_per_week) / 7)
    if workout_days <= 0:
        raise PlanInputError("timeline too short to contain a workout day")
    increment = reps_to_gain / workout_days

    days: List[PlanDay] = []
    running_target = float(starting_reps)
    workout_count = 0

    for day in range(1, total_days + 1):
        if config.week_pattern[(day - 1) % 7]:
            days.append(PlanDay(day, True, 0, [], REST_DAY_NOTE))
            continue

        workout_count += 1
        is_light_day = workout_count % LIGHT_DAY_EVERY == 0

        target = round_half_up(running_target)
        if is_light_day:
            target = round_half_up(target * LIGHT_DAY_FACTOR)
        target = min(max(target, MIN_DAILY_REPS), goal)

        days.append(
            PlanDay(
                day_number=day,
                is_rest_day=False,
                target_total_reps=target,
                recommended_sets=distribute_reps_into_sets(target, data.intensity),
                notes=_day_note(day, is_light_day, target, goal),
            )
        )

        if not is_light_day:
            running_target += increment

    return WorkoutPlan(
        exercise_type=data.exercise_type,
        intensity=data.intensity,
        timeline_months=data.timeline_months,
        target_goal=goal,
        starting_max_reps=data.max_reps or None,
        total_days=total_days,
        days=days,
    )


def generate_week_preview(data: PlanGeneratorInput) -> List[PlanDay]:
    """First seven days, shown during onboarding."""
    return generate_workout_plan(data).days[:7]


def get_plan_summary(plan: WorkoutPlan) -> Dict[str, int]:
    workout_days = [d for d in plan.days if not d.is_rest_day]
    rest_days = len(plan.days) - len(workout_days)
    total_reps = sum(d.target_total_reps for d in workout_days)

    return {
        "total_workout_days": len(workout_days),
        "total_rest_days": rest_days,
        "average_reps_per_day": round_half_up(total_reps / len(workout_days)) if workout_days else 0,
        "starting_daily_reps": workout_days[0].target_total_reps if workout_days else 0,
        "ending_daily_reps": workout_days[-1].target_total_reps if workout_days else plan.target_goal,
    }


def get_plan_day(plan: WorkoutPlan, day_number: int) -> Optional[PlanDay]:
    for day in plan.days:
        if day.day_number == day_number:
            return day
    return None


def get_day_label(day_number: int) -> str:
    week = math.ceil(day_number / 7)
    day_of_week = (day_number - 1) % 7 + 1
    return f"Week {week}, Day {day_of_week}"


def calculate_plan_progress(
    plan_total_days: int,
    current_day: int,
    completed_workouts: int,
    expected_workouts_per_week: int,
) -> Dict[str, Any]:
    """
    Elapsed-days percentage and workouts done vs. expected so far.
    workouts_progress is capped at 100 for display; is_on_track uses the raw value.
    """
    days_progress = round_half_up(current_day / plan_total_days * 100)
    expected = math.floor(current_day / 7 * expected_workouts_per_week)
    if expected > 0:
        workouts_progress = round_half_up(completed_workouts / expected * 100)
    else:
        workouts_progress = 100

    return {
        "days_progress": days_progress,
        "workouts_progress": min(workouts_progress, 100),
        "is_on_track": workouts_progress >= 80,
        "days_remaining": plan_total_days - current_day,
    }


def adjust_plan_difficulty(plan: WorkoutPlan, current_day: int, adjustment: str) -> WorkoutPlan:
    """Rescales future workout days by -15% / +15%; past and rest days stay as they are."""
    if adjustment not in ("easier", "harder"):
        raise ValueError(f"adjustment must be 'easier' or 'harder', got {adjustment!r}")
    factor = 0.85 if adjustment == "easier" else 1.15

    adjusted: List[PlanDay] = []
    for day in plan.days:
        if day.day_number <= current_day or day.is_rest_day:
            adjusted.append(day)
            continue
        target = round_half_up(day.target_total_reps * factor)
        target = max(MIN_DAILY_REPS, min(target, plan.target_goal))
        adjusted.append(
            replace(
                day,
                target_total_reps=target,
                recommended_sets=distribute_reps_into_sets(target, plan.intensity),
            )
        )
    return replace(plan, days=adjusted)


def suggest_plan_adjustment(recent_completion_rates: List[float]) -> str:
    """'harder' / 'easier' / 'keep' from recent completion percentages."""
    if len(recent_completion_rates) < 3:
        return "keep"
    average = sum(recent_completion_rates) / len(recent_completion_rates)
    if average >= 110:
        return "harder"
    if average < 70:
        return "easier"
    return "keep"
