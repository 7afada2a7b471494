# -*- coding: utf-8 -*-
"""
Service: Last Session
Zeigt das zuletzt gespeicherte Training eines Users (höchste ID).
Gibt die Keys zurück, die der Client auf der Startseite erwartet:
  - date (YYYY-MM-DD)
  - exercise_type
  - total_reps
  - xp_earned
  - duration_min
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional


def _parse_dt(val: Optional[str]) -> Optional[datetime]:
    if not val:
        return None
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"):
        try:
            return datetime.strptime(val, fmt)
        except ValueError:
            continue
    return None


def get_last_session(db, user_id: str) -> Dict[str, Any]:
    """
    Nimmt das letzte Training per höchster w.id.
    created_at hat nur Sekundenauflösung, die ID ist eindeutig.
    """
    row = db.execute(
        """
        SELECT w.created_at, w.exercise_type, w.total_reps, w.xp_earned, w.total_time_seconds
        FROM workouts w
        WHERE w.user_id = ?
        ORDER BY w.id DESC
        LIMIT 1
        """,
        (user_id,),
    ).fetchone()

    if not row:
        return {"date": "—", "exercise_type": "—", "total_reps": 0, "xp_earned": 0, "duration_min": "—"}

    created = _parse_dt(row["created_at"])
    seconds = row["total_time_seconds"] or 0

    return {
        "date": created.date().isoformat() if created else "—",
        "exercise_type": row["exercise_type"] or "—",
        "total_reps": row["total_reps"],
        "xp_earned": row["xp_earned"],
        "duration_min": max(0, seconds // 60) if seconds else "—",
    }
