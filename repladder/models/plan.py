"""
Workout plans in the database: plan header, one row per plan day, and the
user's pointer (profiles.current_plan_id / current_plan_day) into the active plan.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from ..db import get_db, utcnow_iso
from ..services.plan_generator import (
    INTENSITY_CONFIG,
    PlanDay,
    PlanGeneratorInput,
    WorkoutPlan,
    adjust_plan_difficulty,
    generate_workout_plan,
    round_half_up,
)
from .profile import _ensure_profile

logger = logging.getLogger(__name__)

UPCOMING_DAYS = 7


# ------------------------------
# Row-Helfer
# ------------------------------
def plan_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
    data = dict(row)
    data["is_active"] = bool(data["is_active"])
    return data


def plan_day_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
    data = dict(row)
    data["is_rest_day"] = bool(data["is_rest_day"])
    data["recommended_sets"] = json.loads(data["recommended_sets"] or "[]")
    return data


def _upsert_plan_days(db: sqlite3.Connection, plan_id: int, days: Iterable[PlanDay]) -> None:
    """Upsert keyed by (plan_id, day_number) – erneutes Schreiben ist idempotent."""
    db.executemany(
        """
        INSERT INTO plan_days (plan_id, day_number, is_rest_day, target_total_reps, recommended_sets, notes)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT(plan_id, day_number) DO UPDATE SET
          is_rest_day       = excluded.is_rest_day,
          target_total_reps = excluded.target_total_reps,
          recommended_sets  = excluded.recommended_sets,
          notes             = excluded.notes
        """,
        [
            (
                plan_id,
                d.day_number,
                int(d.is_rest_day),
                d.target_total_reps,
                json.dumps(d.recommended_sets),
                d.notes,
            )
            for d in days
        ],
    )


# ------------------------------
# Plan anlegen
# ------------------------------
def create_workout_plan(
    user_id: str,
    exercise_type: str,
    intensity: str,
    timeline_months: int,
    max_reps: Optional[int] = None,
    fitness_level: Optional[str] = None,
) -> Optional[int]:
    """
    Generates a plan and stores header + all days, deactivating any previous
    plan and pointing the profile at day 1.

    Everything is written in one transaction. Returns the new plan id, or
    None if the write failed (nothing is kept in that case).
    Invalid generator input raises PlanInputError before anything is written.
    """
    plan = generate_workout_plan(
        PlanGeneratorInput(
            exercise_type=exercise_type,
            intensity=intensity,
            timeline_months=timeline_months,
            max_reps=max_reps,
            fitness_level=fitness_level,
        )
    )

    db = get_db()
    now = utcnow_iso()
    try:
        _ensure_profile(db, user_id)
        db.execute(
            "UPDATE workout_plans SET is_active = 0, updated_at = ? WHERE user_id = ? AND is_active = 1",
            (now, user_id),
        )
        cur = db.execute(
            """
            INSERT INTO workout_plans
                (user_id, exercise_type, intensity, timeline_months, target_goal,
                 starting_max_reps, total_days, is_active, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, 1, ?, ?)
            """,
            (
                user_id,
                plan.exercise_type,
                plan.intensity,
                plan.timeline_months,
                plan.target_goal,
                plan.starting_max_reps,
                plan.total_days,
                now,
                now,
            ),
        )
        plan_id = cur.lastrowid
        _upsert_plan_days(db, plan_id, plan.days)
        db.execute(
            """
            UPDATE profiles
               SET current_plan_id      = ?,
                   current_plan_day     = 1,
                   exercise_type        = ?,
                   onboarding_completed = 1,
                   updated_at           = ?
             WHERE id = ?
            """,
            (plan_id, exercise_type, now, user_id),
        )
        db.commit()
    except sqlite3.Error:
        db.rollback()
        logger.exception("Error creating workout plan for user %s", user_id)
        return None

    logger.info(
        "Created %s/%s plan %s (%d days) for user %s",
        exercise_type, intensity, plan_id, plan.total_days, user_id,
    )
    return plan_id


# ------------------------------
# Lesen
# ------------------------------
def get_active_workout_plan(user_id: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    row = db.execute(
        """
        SELECT * FROM workout_plans
         WHERE user_id = ? AND is_active = 1
         ORDER BY id DESC
         LIMIT 1
        """,
        (user_id,),
    ).fetchone()
    return plan_to_dict(row) if row else None


def get_plan_day_for_user(user_id: str, day_number: int) -> Optional[Dict[str, Any]]:
    plan = get_active_workout_plan(user_id)
    if not plan:
        return None
    db = get_db()
    row = db.execute(
        "SELECT * FROM plan_days WHERE plan_id = ? AND day_number = ?",
        (plan["id"], day_number),
    ).fetchone()
    return plan_day_to_dict(row) if row else None


def get_todays_plan(user_id: str) -> Dict[str, Any]:
    """
    Resolves the profile's day pointer.
    Keys: plan_day, plan, day_number (1 when the user has no plan).
    """
    db = get_db()
    profile = db.execute(
        "SELECT current_plan_id, current_plan_day FROM profiles WHERE id = ?",
        (user_id,),
    ).fetchone()
    if not profile or profile["current_plan_id"] is None:
        return {"plan_day": None, "plan": None, "day_number": 1}

    day_number = profile["current_plan_day"] or 1
    return {
        "plan_day": get_plan_day_for_user(user_id, day_number),
        "plan": get_active_workout_plan(user_id),
        "day_number": day_number,
    }


def get_upcoming_days(user_id: str) -> List[Dict[str, Any]]:
    """Heute + die nächsten 6 Tage."""
    today = get_todays_plan(user_id)
    plan = today["plan"]
    if not plan:
        return []
    db = get_db()
    rows = db.execute(
        """
        SELECT * FROM plan_days
         WHERE plan_id = ?
           AND day_number BETWEEN ? AND ?
         ORDER BY day_number
        """,
        (plan["id"], today["day_number"], today["day_number"] + UPCOMING_DAYS - 1),
    ).fetchall()
    return [plan_day_to_dict(r) for r in rows]


def load_workout_plan(plan_id: int) -> Optional[WorkoutPlan]:
    """Baut aus DB-Zeilen wieder ein WorkoutPlan-Objekt (z. B. für Anpassungen)."""
    db = get_db()
    header = db.execute("SELECT * FROM workout_plans WHERE id = ?", (plan_id,)).fetchone()
    if not header:
        return None
    rows = db.execute(
        "SELECT * FROM plan_days WHERE plan_id = ? ORDER BY day_number", (plan_id,)
    ).fetchall()
    days = [
        PlanDay(
            day_number=d["day_number"],
            is_rest_day=d["is_rest_day"],
            target_total_reps=d["target_total_reps"],
            recommended_sets=d["recommended_sets"],
            notes=d["notes"],
        )
        for d in map(plan_day_to_dict, rows)
    ]
    return WorkoutPlan(
        exercise_type=header["exercise_type"],
        intensity=header["intensity"],
        timeline_months=header["timeline_months"],
        target_goal=header["target_goal"],
        starting_max_reps=header["starting_max_reps"],
        total_days=header["total_days"],
        days=days,
    )


# ------------------------------
# Zeiger bewegen
# ------------------------------
def advance_plan_day(user_id: str) -> int:
    """Moves the pointer forward by one day, never past the plan's last day."""
    plan = get_active_workout_plan(user_id)
    if not plan:
        return 1
    db = get_db()
    try:
        db.execute(
            """
            UPDATE profiles
               SET current_plan_day = MIN(COALESCE(current_plan_day, 1) + 1, ?),
                   updated_at       = ?
             WHERE id = ?
            """,
            (plan["total_days"], utcnow_iso(), user_id),
        )
        db.commit()
    except sqlite3.Error:
        db.rollback()
        logger.exception("Error advancing plan day for user %s", user_id)
    row = db.execute("SELECT current_plan_day FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return row["current_plan_day"] if row else 1


def reset_plan_to_day(user_id: str, day_number: int) -> bool:
    plan = get_active_workout_plan(user_id)
    if not plan or not 1 <= day_number <= plan["total_days"]:
        return False
    db = get_db()
    try:
        db.execute(
            "UPDATE profiles SET current_plan_day = ?, updated_at = ? WHERE id = ?",
            (day_number, utcnow_iso(), user_id),
        )
        db.commit()
    except sqlite3.Error:
        db.rollback()
        logger.exception("Error resetting plan day for user %s", user_id)
        return False
    return True


# ------------------------------
# Fortschritt / Anpassung
# ------------------------------
def get_plan_progress(user_id: str) -> Optional[Dict[str, Any]]:
    today = get_todays_plan(user_id)
    plan = today["plan"]
    if not plan:
        return None
    day_number = today["day_number"]

    db = get_db()
    workouts_completed = db.execute(
        "SELECT COUNT(*) FROM workouts WHERE user_id = ? AND created_at >= ?",
        (user_id, plan["created_at"]),
    ).fetchone()[0]

    per_week = 7 - INTENSITY_CONFIG[plan["intensity"]].rest_days_per_week
    expected = (day_number // 7) * per_week

    return {
        "current_day": day_number,
        "total_days": plan["total_days"],
        "percent_complete": round_half_up(day_number / plan["total_days"] * 100),
        "workouts_completed": workouts_completed,
        "days_remaining": plan["total_days"] - day_number,
        "is_on_track": expected == 0 or workouts_completed >= expected * 0.8,
    }


def apply_plan_adjustment(user_id: str, adjustment: str) -> bool:
    """Persists adjust_plan_difficulty() for all days after the current one."""
    today = get_todays_plan(user_id)
    if not today["plan"]:
        return False
    plan = load_workout_plan(today["plan"]["id"])
    if plan is None:
        return False

    adjusted = adjust_plan_difficulty(plan, today["day_number"], adjustment)
    future = [d for d in adjusted.days if d.day_number > today["day_number"]]

    db = get_db()
    try:
        _upsert_plan_days(db, today["plan"]["id"], future)
        db.execute(
            "UPDATE workout_plans SET updated_at = ? WHERE id = ?",
            (utcnow_iso(), today["plan"]["id"]),
        )
        db.commit()
    except sqlite3.Error:
        db.rollback()
        logger.exception("Error adjusting plan for user %s", user_id)
        return False
    logger.info("Plan %s adjusted (%s) from day %d", today["plan"]["id"], adjustment, today["day_number"] + 1)
    return True
