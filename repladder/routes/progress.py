# repladder/routes/progress.py
from __future__ import annotations

import io
from datetime import datetime
from typing import List, Tuple

from flask import Blueprint, Response, abort, current_app, request

# Matplotlib im Headless-Mode
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ..catalog import EXERCISE_TYPES, format_exercise_name
from ..db import get_db
from ..models.plan import get_todays_plan

progress_bp = Blueprint("progress", __name__, url_prefix="/progress")


# ---------------------------
# Hilfsfunktionen (SQL, etc.)
# ---------------------------

def _fetch_plan_targets(db, plan_id: int) -> List[Tuple[int, int]]:
    """(day_number, target_total_reps) aller Trainingstage, Ruhetage ausgelassen."""
    rows = db.execute(
        """
        SELECT day_number, target_total_reps
          FROM plan_days
         WHERE plan_id = ? AND is_rest_day = 0
         ORDER BY day_number
        """,
        (plan_id,),
    ).fetchall()
    return [(r["day_number"], r["target_total_reps"]) for r in rows]


def _fetch_workout_history(db, user_id: str, exercise_type: str) -> List[Tuple[str, int]]:
    """(ISO-Datum, Wiederholungen) je Tag, aufsteigend."""
    rows = db.execute(
        """
        SELECT DATE(created_at) AS day, SUM(total_reps) AS reps
          FROM workouts
         WHERE user_id = ? AND exercise_type = ?
         GROUP BY DATE(created_at)
         ORDER BY day
        """,
        (user_id, exercise_type),
    ).fetchall()
    return [(r["day"], int(r["reps"])) for r in rows]


def _png_response(fig, filename: str) -> Response:
    buf = io.BytesIO()
    fig.savefig(buf, format="png")
    plt.close(fig)
    buf.seek(0)

    headers = {}
    if request.args.get("download", type=int) == 1:
        headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return Response(buf.getvalue(), mimetype="image/png", headers=headers)


# ---------------------------
# PNG-Endpoints
# ---------------------------

@progress_bp.get("/users/<user_id>/plan.png")
def plan_png(user_id: str):
    """
    Liniendiagramm: Tagesziel über die Plandauer, aktueller Tag markiert.
    Optional: ?download=1 setzt Attachment-Header.
    """
    today = get_todays_plan(user_id)
    plan = today["plan"]
    if plan is None:
        abort(404, "No active plan")

    targets = _fetch_plan_targets(get_db(), plan["id"])
    days = [d for d, _ in targets]
    reps = [r for _, r in targets]

    fig, ax = plt.subplots(figsize=(7.5, 3.8), dpi=140)
    ax.plot(days, reps, linewidth=1.5)
    ax.axhline(plan["target_goal"], linestyle="--", alpha=0.5, label="Goal")
    ax.axvline(today["day_number"], color="tab:orange", alpha=0.7, label="Today")
    ax.set_title(
        f"Daily target – {format_exercise_name(plan['exercise_type'], 2)} "
        f"({plan['intensity']}, {plan['timeline_months']} mo)"
    )
    ax.set_ylabel("Reps")
    ax.set_xlabel("Plan day")
    ax.grid(True, linestyle=":", alpha=0.4)
    ax.legend(loc="lower right")
    plt.tight_layout()

    return _png_response(fig, f"plan_{plan['id']}.png")


@progress_bp.get("/users/<user_id>/history.png")
def history_png(user_id: str):
    """
    Liniendiagramm: geloggte Wiederholungen pro Tag.
    Optional: ?exercise_type=pullups (Standard: DEFAULT_EXERCISE), ?download=1.
    """
    exercise_type = request.args.get("exercise_type") or current_app.config["DEFAULT_EXERCISE"]
    if exercise_type not in EXERCISE_TYPES:
        abort(400, "Unknown exercise type")
    history = _fetch_workout_history(get_db(), user_id, exercise_type)
    dates = [datetime.strptime(day, "%Y-%m-%d").date() for day, _ in history]
    reps = [r for _, r in history]

    fig, ax = plt.subplots(figsize=(7.5, 3.2), dpi=140)
    if reps:
        ax.plot(dates, reps, marker="o", linewidth=2)
    else:
        ax.text(0.5, 0.5, "No data yet", ha="center", va="center", transform=ax.transAxes)

    ax.set_title(f"Reps per day – {format_exercise_name(exercise_type, 2)}")
    ax.set_ylabel("Reps")
    ax.set_xlabel("Date")
    ax.grid(True, linestyle=":", alpha=0.4)
    fig.autofmt_xdate()
    plt.tight_layout()

    return _png_response(fig, f"history_{exercise_type}.png")
