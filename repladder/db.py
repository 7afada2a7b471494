# repladder/db.py
from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

import click
from flask import Flask, current_app, g


def get_db() -> sqlite3.Connection:
    """
    Returns a cached SQLite connection bound to the current app context.
    Row factory = dict-ähnliche Zugriffe via Spaltennamen, FK enforcement an.
    """
    if "db" not in g:
        db_path = current_app.config.get("DATABASE") or str(
            Path(current_app.instance_path) / "repladder.db"
        )
        g.db = sqlite3.connect(db_path, detect_types=sqlite3.PARSE_DECLTYPES)
        g.db.row_factory = sqlite3.Row
        g.db.execute("PRAGMA foreign_keys = ON;")
    return g.db


def close_db(_: BaseException | None = None) -> None:
    """Closes the connection at the end of the request (if present)."""
    db = g.pop("db", None)
    if db is not None:
        db.close()


def utcnow_iso() -> str:
    """UTC timestamp ISO (seconds)."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat(timespec="seconds")


def init_db() -> None:
    """Legt alle Tabellen an (idempotent, CREATE TABLE IF NOT EXISTS)."""
    db = get_db()
    with current_app.open_resource("schema.sql") as f:
        db.executescript(f.read().decode("utf8"))
    db.commit()


@click.command("init-db")
def init_db_command() -> None:
    """Create the database tables."""
    init_db()
    click.echo(f"Datenbank initialisiert: {current_app.config['DATABASE']}")


def init_app(app: Flask) -> None:
    app.teardown_appcontext(close_db)
    app.cli.add_command(init_db_command)
