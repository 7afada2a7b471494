from flask import Blueprint, abort, jsonify, request

from ..catalog import EXERCISES, catalog_as_dict, get_unlocked_variations
from ..services.gamification import get_level_info, list_levels

bp = Blueprint("catalog", __name__)


@bp.get("/catalog/<exercise_type>")
def exercise_catalog(exercise_type: str):
    """JSON: Übung mit allen Stufen; ?level=N markiert freigeschaltete Variationen."""
    if exercise_type not in EXERCISES:
        abort(404)
    data = catalog_as_dict(exercise_type)
    level = request.args.get("level", type=int)
    if level is not None:
        data["unlocked"] = [v.id for v in get_unlocked_variations(exercise_type, level)]
    return jsonify(data)


@bp.get("/levels")
def levels():
    return jsonify(list_levels())


@bp.get("/levels/<int:xp>")
def level_for_xp(xp: int):
    return jsonify(get_level_info(xp).to_dict())
