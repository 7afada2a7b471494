from __future__ import annotations

"""
Seed-Skript für RepLadder.

Spiegelt den statischen Katalog (Variationen + Level-Tabelle) in die Tabellen
`exercise_variations` und `levels`, damit Auswertungen per SQL joinen können.
Die Python-Tabellen bleiben die einzige Quelle; das Seeding ist idempotent.

Ausführung:
    flask --app repladder seed-catalog
"""

import logging
import sqlite3

import click
from flask import current_app

from .catalog import EXERCISE_TYPES, get_all_variations
from .db import get_db
from .services.gamification import LEVEL_THRESHOLDS

logger = logging.getLogger(__name__)


def seed_catalog(conn: sqlite3.Connection) -> int:
    """Schreibt Katalog + Level in die DB. Gibt die Anzahl der Variationen zurück."""
    conn.execute("PRAGMA foreign_keys = ON;")

    for exercise_type in EXERCISE_TYPES:
        for v in get_all_variations(exercise_type):
            conn.execute(
                """
                INSERT INTO exercise_variations
                    (id, exercise_type, difficulty, name, description, unlock_level, xp_multiplier)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    exercise_type = excluded.exercise_type,
                    difficulty    = excluded.difficulty,
                    name          = excluded.name,
                    description   = excluded.description,
                    unlock_level  = excluded.unlock_level,
                    xp_multiplier = excluded.xp_multiplier
                """,
                (v.id, exercise_type, v.difficulty, v.name, v.description, v.unlock_level, v.xp_multiplier),
            )

    for level, xp, title in LEVEL_THRESHOLDS:
        conn.execute(
            "INSERT OR REPLACE INTO levels (level, xp_required, title) VALUES (?, ?, ?)",
            (level, xp, title),
        )

    count = conn.execute("SELECT COUNT(*) FROM exercise_variations").fetchone()[0]
    logger.info("Tabelle `exercise_variations` enthält jetzt %d Variationen.", count)
    return count


@click.command("seed-catalog")
def seed_catalog_command() -> None:
    """Load the exercise catalog and level table into the database."""
    db = get_db()
    count = seed_catalog(db)
    db.commit()
    click.echo(f"Seeding abgeschlossen ({count} Variationen) in {current_app.config['DATABASE']}.")
