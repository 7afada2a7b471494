from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, request

from ..catalog import DIFFICULTY_TIERS, EXERCISE_TYPES, get_default_variation
from ..models import profile as profile_model
from ..models import workout as workout_model
from ..services.gamification import get_level_info
from ..services.record_parser import parse_sets_payload, to_int, to_optional_int
from . import json_object

bp = Blueprint("workouts", __name__)


# ------------------------------
# Routen
# ------------------------------
@bp.post("/users/<user_id>/workouts")
def save_workout(user_id: str):
    """
    Training speichern.
    Body: {"sets": [{"reps", "duration_seconds", "rest_after_seconds"}, ...],
           "exercise_type", "difficulty", "variation", "total_time_seconds"}
    """
    payload = json_object(("exercise_type", "difficulty", "variation"))

    exercise_type = payload.get("exercise_type") or current_app.config["DEFAULT_EXERCISE"]
    if exercise_type not in EXERCISE_TYPES:
        abort(400, description=f"unknown exercise type: {exercise_type!r}")

    difficulty = payload.get("difficulty") or "normal"
    if difficulty not in DIFFICULTY_TIERS:
        abort(400, description=f"unknown difficulty: {difficulty!r}")

    variation = payload.get("variation") or get_default_variation(exercise_type).id

    sets = parse_sets_payload(payload.get("sets"))
    if not sets:
        abort(400, description="Complete at least one set before finishing")

    result = workout_model.save_workout(
        user_id,
        sets,
        exercise_type,
        difficulty=difficulty,
        variation=variation,
        total_time_seconds=to_optional_int(payload.get("total_time_seconds")),
    )
    if result is None:
        abort(500, description="Workout could not be saved")
    return jsonify(result), 201


@bp.get("/users/<user_id>/workouts")
def list_workouts(user_id: str):
    """JSON: alle Trainings, neueste zuerst."""
    return jsonify(workout_model.get_workouts(user_id))


@bp.get("/workouts/<int:workout_id>/sets")
def workout_sets(workout_id: int):
    if workout_model.get_workout(workout_id) is None:
        abort(404)
    return jsonify(workout_model.get_workout_sets(workout_id))


@bp.get("/users/<user_id>/stats")
def stats(user_id: str):
    return jsonify(workout_model.get_workout_stats(user_id))


@bp.get("/users/<user_id>/profile")
def profile(user_id: str):
    data = profile_model.get_profile(user_id)
    if data is None:
        abort(404)
    data["level_info"] = get_level_info(data["xp"]).to_dict()
    return jsonify(data)


@bp.get("/leaderboard")
def leaderboard():
    limit = min(to_int(request.args.get("limit"), default=20, minimum=1), 100)
    return jsonify(profile_model.get_leaderboard(limit))
