from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from ..db import get_db, utcnow_iso


def _ensure_profile(db: sqlite3.Connection, user_id: str) -> sqlite3.Row:
    """Legt das Profil bei Bedarf an (ohne Commit) und gibt die Zeile zurück."""
    now = utcnow_iso()
    db.execute(
        "INSERT OR IGNORE INTO profiles (id, created_at, updated_at) VALUES (?, ?, ?)",
        (user_id, now, now),
    )
    return db.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()


def ensure_profile(user_id: str) -> Dict[str, Any]:
    """Creates an empty profile for a new user id; existing profiles are left untouched."""
    db = get_db()
    row = _ensure_profile(db, user_id)
    db.commit()
    return profile_to_dict(row)


def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    row = db.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return profile_to_dict(row) if row else None


def get_leaderboard(limit: int = 20) -> List[Dict[str, Any]]:
    """Profile nach XP absteigend."""
    db = get_db()
    rows = db.execute(
        """
        SELECT * FROM profiles
         ORDER BY xp DESC, id
         LIMIT ?
        """,
        (limit,),
    ).fetchall()
    return [profile_to_dict(r) for r in rows]


def profile_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
    data = dict(row)
    data["onboarding_completed"] = bool(data["onboarding_completed"])
    return data
