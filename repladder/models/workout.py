"""
Saving finished workouts and reading workout history.

save_workout() is the only place that mutates a profile's XP, level,
streak and totals.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..db import get_db, utcnow_iso
from ..services.daily_goal import calculate_daily_goal_bonus, check_daily_goal_completion
from ..services.gamification import calculate_xp, get_level_from_xp
from ..services.last_session import get_last_session
from ..services.metrics import summarize_sets
from ..services.streak import next_streak
from .plan import plan_day_to_dict
from .profile import _ensure_profile, profile_to_dict

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _parse_date(val: Optional[str]) -> Optional[date]:
    if not val:
        return None
    try:
        return date.fromisoformat(val[:10])
    except ValueError:
        return None


def _todays_plan_day(db: sqlite3.Connection, profile: sqlite3.Row, exercise_type: str) -> Optional[sqlite3.Row]:
    """Plan-Tag, auf den der Zeiger zeigt – nur wenn der aktive Plan zur Übung passt."""
    if profile["current_plan_id"] is None:
        return None
    return db.execute(
        """
        SELECT pd.*, wp.total_days
          FROM plan_days pd
          JOIN workout_plans wp ON wp.id = pd.plan_id
         WHERE wp.id = ?
           AND wp.is_active = 1
           AND wp.exercise_type = ?
           AND pd.day_number = ?
        """,
        (profile["current_plan_id"], exercise_type, profile["current_plan_day"] or 1),
    ).fetchone()


def save_workout(
    user_id: str,
    sets: Sequence[Mapping[str, int]],
    exercise_type: str,
    difficulty: str = "normal",
    variation: str = "standard",
    total_time_seconds: Optional[int] = None,
    today: Optional[date] = None,
) -> Optional[Dict[str, Any]]:
    """
    Stores a finished workout with its sets and updates the profile.

    XP = calculate_xp() + daily goal bonus (when today's plan day is met).
    Meeting the daily goal also advances the plan pointer by one day.
    Returns workout row, xp breakdown and the updated profile, or None if
    the write failed (rolled back, nothing stored).
    """
    today = today or _utc_today()
    summary = summarize_sets(sets)
    total_reps = summary["total_reps"]

    db = get_db()
    try:
        profile = _ensure_profile(db, user_id)
        current_streak = profile["current_streak"] or 0

        xp = calculate_xp(
            total_reps, summary["reps_per_minute"], difficulty, current_streak, variation
        )

        plan_day = _todays_plan_day(db, profile, exercise_type)
        goal_completed = check_daily_goal_completion(total_reps, plan_day)
        bonus = 0
        if goal_completed:
            bonus = calculate_daily_goal_bonus(difficulty, current_streak, plan_day)
            xp.daily_goal_bonus = bonus
        xp_earned = xp.total_xp + bonus

        now = utcnow_iso()
        cur = db.execute(
            """
            INSERT INTO workouts
                (user_id, created_at, exercise_type, total_reps, total_time_seconds,
                 active_time_seconds, rest_time_seconds, reps_per_minute, difficulty,
                 variation, xp_earned, is_daily_goal_completed, daily_goal_bonus_xp, plan_day)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                now,
                exercise_type,
                total_reps,
                total_time_seconds if total_time_seconds is not None
                else summary["active_time_seconds"] + summary["rest_time_seconds"],
                summary["active_time_seconds"],
                summary["rest_time_seconds"],
                round(summary["reps_per_minute"], 1),
                difficulty,
                variation,
                xp_earned,
                int(goal_completed),
                bonus,
                plan_day["day_number"] if plan_day else None,
            ),
        )
        workout_id = cur.lastrowid

        db.executemany(
            """
            INSERT INTO workout_sets (workout_id, set_number, reps, duration_seconds, rest_after_seconds)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                (workout_id, s.get("set_number", i + 1), s["reps"], s["duration_seconds"], s["rest_after_seconds"])
                for i, s in enumerate(sets)
            ],
        )

        new_xp = (profile["xp"] or 0) + xp_earned
        new_streak = next_streak(_parse_date(profile["last_workout_date"]), today, current_streak)
        db.execute(
            """
            UPDATE profiles
               SET xp                = ?,
                   level             = ?,
                   total_reps        = total_reps + ?,
                   total_workouts    = total_workouts + 1,
                   current_streak    = ?,
                   longest_streak    = MAX(longest_streak, ?),
                   last_workout_date = ?,
                   updated_at        = ?
             WHERE id = ?
            """,
            (
                new_xp,
                get_level_from_xp(new_xp),
                total_reps,
                new_streak,
                new_streak,
                today.isoformat(),
                now,
                user_id,
            ),
        )

        if goal_completed:
            db.execute(
                "UPDATE profiles SET current_plan_day = MIN(current_plan_day + 1, ?) WHERE id = ?",
                (plan_day["total_days"], user_id),
            )

        db.commit()
    except sqlite3.Error:
        db.rollback()
        logger.exception("Error saving workout for user %s", user_id)
        return None

    updated = db.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    workout = db.execute("SELECT * FROM workouts WHERE id = ?", (workout_id,)).fetchone()
    level_before = profile["level"] or 1
    logger.info(
        "Workout %s saved for %s: %d reps, +%d XP (goal %s)",
        workout_id, user_id, total_reps, xp_earned, "met" if goal_completed else "not met",
    )
    return {
        "workout": workout_to_dict(workout),
        "xp": xp.to_dict(),
        "xp_earned": xp_earned,
        "daily_goal_completed": goal_completed,
        "level_up": updated["level"] > level_before,
        "profile": profile_to_dict(updated),
        "plan_day": plan_day_to_dict(plan_day) if plan_day else None,
    }


def workout_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
    data = dict(row)
    data["is_daily_goal_completed"] = bool(data["is_daily_goal_completed"])
    return data


def get_workouts(user_id: str) -> List[Dict[str, Any]]:
    """Alle Trainings eines Users, neueste zuerst."""
    db = get_db()
    rows = db.execute(
        "SELECT * FROM workouts WHERE user_id = ? ORDER BY created_at DESC, id DESC",
        (user_id,),
    ).fetchall()
    return [workout_to_dict(r) for r in rows]


def get_workout(workout_id: int) -> Optional[Dict[str, Any]]:
    db = get_db()
    row = db.execute("SELECT * FROM workouts WHERE id = ?", (workout_id,)).fetchone()
    return workout_to_dict(row) if row else None


def get_workout_sets(workout_id: int) -> List[Dict[str, Any]]:
    db = get_db()
    rows = db.execute(
        "SELECT * FROM workout_sets WHERE workout_id = ? ORDER BY set_number",
        (workout_id,),
    ).fetchall()
    return [dict(r) for r in rows]


def get_workout_stats(user_id: str) -> Dict[str, Any]:
    """Aggregates for the profile screen. Set maximum looks at the last 10 workouts only."""
    db = get_db()
    profile = db.execute(
        "SELECT xp, level, current_streak FROM profiles WHERE id = ?", (user_id,)
    ).fetchone()
    agg = db.execute(
        """
        SELECT COUNT(*)               AS total_workouts,
               COALESCE(MAX(total_reps), 0)        AS best_session,
               COALESCE(AVG(total_reps), 0)        AS avg_reps,
               COALESCE(AVG(rest_time_seconds), 0) AS avg_rest
          FROM workouts
         WHERE user_id = ?
        """,
        (user_id,),
    ).fetchone()
    max_set = db.execute(
        """
        SELECT COALESCE(MAX(ws.reps), 0)
          FROM workout_sets ws
         WHERE ws.workout_id IN (
                SELECT id FROM workouts WHERE user_id = ? ORDER BY created_at DESC, id DESC LIMIT 10
         )
        """,
        (user_id,),
    ).fetchone()[0]

    return {
        "total_workouts": agg["total_workouts"],
        "best_session": agg["best_session"],
        "average_reps": int(agg["avg_reps"] + 0.5),
        "average_rest_time": int(agg["avg_rest"] + 0.5),
        "current_streak": profile["current_streak"] if profile else 0,
        "max_reps_in_one_set": max_set,
        "total_xp": profile["xp"] if profile else 0,
        "level": profile["level"] if profile else 1,
        "last_workout": get_last_session(db, user_id),
    }
