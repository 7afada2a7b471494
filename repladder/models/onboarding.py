from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Optional

from ..db import get_db, utcnow_iso
from .profile import _ensure_profile

logger = logging.getLogger(__name__)


def save_onboarding_data(
    user_id: str,
    exercise_type: str,
    intensity: str,
    timeline_months: int,
    max_reps: Optional[int] = None,
    fitness_level: Optional[str] = None,
) -> bool:
    """Speichert die Onboarding-Antworten (ein Datensatz pro User, upsert)."""
    db = get_db()
    try:
        _ensure_profile(db, user_id)
        db.execute(
            """
            INSERT INTO user_onboarding
                (user_id, exercise_type, intensity, timeline_months, max_reps, fitness_level, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
              exercise_type   = excluded.exercise_type,
              intensity       = excluded.intensity,
              timeline_months = excluded.timeline_months,
              max_reps        = excluded.max_reps,
              fitness_level   = excluded.fitness_level,
              updated_at      = excluded.updated_at
            """,
            (user_id, exercise_type, intensity, timeline_months, max_reps or None, fitness_level, utcnow_iso()),
        )
        db.commit()
    except sqlite3.Error:
        db.rollback()
        logger.exception("Error saving onboarding data for user %s", user_id)
        return False
    return True


def get_onboarding_data(user_id: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    row = db.execute("SELECT * FROM user_onboarding WHERE user_id = ?", (user_id,)).fetchone()
    if not row:
        return None
    return {
        "exercise_type": row["exercise_type"],
        "intensity": row["intensity"],
        "timeline_months": row["timeline_months"],
        "max_reps": row["max_reps"],
        "fitness_level": row["fitness_level"],
        "completed_at": row["completed_at"],
    }


def complete_onboarding(user_id: str) -> bool:
    db = get_db()
    now = utcnow_iso()
    try:
        db.execute("UPDATE user_onboarding SET completed_at = ? WHERE user_id = ?", (now, user_id))
        cur = db.execute(
            "UPDATE profiles SET onboarding_completed = 1, updated_at = ? WHERE id = ?",
            (now, user_id),
        )
        db.commit()
    except sqlite3.Error:
        db.rollback()
        logger.exception("Error completing onboarding for user %s", user_id)
        return False
    return cur.rowcount > 0


def has_completed_onboarding(user_id: str) -> bool:
    db = get_db()
    row = db.execute("SELECT onboarding_completed FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return bool(row and row["onboarding_completed"])
