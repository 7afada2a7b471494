from dataclasses import asdict
from typing import Optional

from flask import Blueprint, abort, current_app, jsonify

from ..models import onboarding as onboarding_model
from ..models import plan as plan_model
from ..services.plan_generator import (
    PlanGeneratorInput,
    PlanInputError,
    generate_week_preview,
    generate_workout_plan,
    get_day_label,
    get_plan_summary,
    suggest_plan_adjustment,
    validate_input,
)
from ..services.record_parser import parse_int, to_int
from . import json_object

bp = Blueprint("plans", __name__)


def _max_reps(value) -> Optional[int]:
    # Leer = nicht angegeben; alles andere muss eine Zahl sein
    if value is None or value == "":
        return None
    try:
        return parse_int(value)
    except ValueError:
        abort(400, description=f"max_reps must be an integer, got {value!r}")


def _generator_input() -> PlanGeneratorInput:
    """Baut die Generator-Eingabe aus dem JSON-Body; Übung fällt auf DEFAULT_EXERCISE zurück."""
    payload = json_object(("exercise_type", "intensity", "fitness_level"))
    data = PlanGeneratorInput(
        exercise_type=payload.get("exercise_type") or current_app.config["DEFAULT_EXERCISE"],
        intensity=payload.get("intensity") or "",
        timeline_months=to_int(payload.get("timeline_months"), default=0),
        max_reps=_max_reps(payload.get("max_reps")),
        fitness_level=payload.get("fitness_level") or None,
    )
    try:
        validate_input(data)
    except PlanInputError as exc:
        abort(400, description=str(exc))
    return data


@bp.post("/plans/preview")
def preview_plan():
    """JSON: erste Woche + Zusammenfassung, ohne zu speichern."""
    data = _generator_input()
    plan = generate_workout_plan(data)
    return jsonify(
        {
            "summary": get_plan_summary(plan),
            "target_goal": plan.target_goal,
            "total_days": plan.total_days,
            "week": [asdict(d) for d in generate_week_preview(data)],
        }
    )


@bp.post("/users/<user_id>/plan")
def create_plan(user_id: str):
    """Neuen Plan generieren und aktivieren (ersetzt einen evtl. vorhandenen)."""
    data = _generator_input()
    plan_id = plan_model.create_workout_plan(
        user_id,
        data.exercise_type,
        data.intensity,
        data.timeline_months,
        max_reps=data.max_reps,
        fitness_level=data.fitness_level,
    )
    if plan_id is None:
        abort(500, description="Plan could not be saved")
    return jsonify({"plan_id": plan_id, "plan": plan_model.get_active_workout_plan(user_id)}), 201


@bp.get("/users/<user_id>/plan/today")
def todays_plan(user_id: str):
    today = plan_model.get_todays_plan(user_id)
    if today["plan"] is None:
        abort(404, description="No active plan")
    today["label"] = get_day_label(today["day_number"])
    return jsonify(today)


@bp.post("/users/<user_id>/plan/advance")
def advance(user_id: str):
    if plan_model.get_active_workout_plan(user_id) is None:
        abort(404, description="No active plan")
    return jsonify({"day_number": plan_model.advance_plan_day(user_id)})


@bp.post("/users/<user_id>/plan/reset")
def reset(user_id: str):
    payload = json_object()
    day_number = to_int(payload.get("day_number"), default=0)
    if not plan_model.reset_plan_to_day(user_id, day_number):
        abort(400, description="Day is outside the active plan")
    return jsonify({"day_number": day_number})


@bp.get("/users/<user_id>/plan/progress")
def progress(user_id: str):
    data = plan_model.get_plan_progress(user_id)
    if data is None:
        abort(404, description="No active plan")
    return jsonify(data)


@bp.get("/users/<user_id>/plan/upcoming")
def upcoming(user_id: str):
    return jsonify(plan_model.get_upcoming_days(user_id))


@bp.post("/users/<user_id>/plan/adjust")
def adjust(user_id: str):
    """
    Body: {"adjustment": "easier"|"harder"} oder {"completion_rates": [..]}.
    Bei completion_rates wird der Vorschlag berechnet und direkt angewendet.
    """
    payload = json_object()
    adjustment = payload.get("adjustment")
    if adjustment is None:
        rates = payload.get("completion_rates")
        if not isinstance(rates, list):
            abort(400, description="adjustment or completion_rates is required")
        try:
            adjustment = suggest_plan_adjustment([float(r) for r in rates])
        except (TypeError, ValueError):
            abort(400, description="completion_rates must be numbers")
    if adjustment not in ("keep", "easier", "harder"):
        abort(400, description=f"unknown adjustment: {adjustment!r}")

    if adjustment != "keep" and not plan_model.apply_plan_adjustment(user_id, adjustment):
        abort(404, description="No active plan")
    return jsonify({"adjustment": adjustment, "upcoming": plan_model.get_upcoming_days(user_id)})


# ------------------------------
# Onboarding
# ------------------------------
@bp.put("/users/<user_id>/onboarding")
def save_onboarding(user_id: str):
    data = _generator_input()
    ok = onboarding_model.save_onboarding_data(
        user_id,
        data.exercise_type,
        data.intensity,
        data.timeline_months,
        max_reps=data.max_reps,
        fitness_level=data.fitness_level,
    )
    if not ok:
        abort(500, description="Onboarding data could not be saved")
    return jsonify(onboarding_model.get_onboarding_data(user_id))


@bp.get("/users/<user_id>/onboarding")
def get_onboarding(user_id: str):
    data = onboarding_model.get_onboarding_data(user_id)
    if data is None:
        abort(404)
    data["completed"] = onboarding_model.has_completed_onboarding(user_id)
    return jsonify(data)


@bp.post("/users/<user_id>/onboarding/complete")
def complete_onboarding(user_id: str):
    if not onboarding_model.complete_onboarding(user_id):
        abort(404)
    return jsonify({"completed": True})
