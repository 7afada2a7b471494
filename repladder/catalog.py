"""
Exercise catalog
----------------
Static exercise/difficulty/variation tables. Ids, names, unlock levels and
multipliers are referenced by id from stored workouts and must not change.

Everything here is built once at import time and is read-only afterwards
(frozen dataclasses + MappingProxyType).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

EXERCISE_TYPES: Tuple[str, ...] = ("pushups", "pullups")
DIFFICULTY_TIERS: Tuple[str, ...] = ("easy", "normal", "hard", "extreme")


@dataclass(frozen=True)
class ExerciseVariation:
    id: str
    name: str
    description: str
    difficulty: str
    unlock_level: int
    xp_multiplier: float


@dataclass(frozen=True)
class DifficultyConfig:
    name: str
    multiplier: float
    description: str
    color: str
    variations: Tuple[ExerciseVariation, ...]


@dataclass(frozen=True)
class ExerciseConfig:
    id: str
    name: str
    name_plural: str
    goal: int
    description: str
    accent_color: str
    difficulties: Mapping[str, DifficultyConfig]


# Tier-Multiplikatoren (gelten für beide Übungen gleich)
DIFFICULTY_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    "easy": 0.75,
    "normal": 1.0,
    "hard": 1.5,
    "extreme": 2.0,
})

_TIER_COLORS = {
    "easy": "#4ADE80",
    "normal": "#3B82F6",
    "hard": "#F59E0B",
    "extreme": "#EF4444",
}


def _tier(difficulty: str, description: str, rows: List[tuple]) -> DifficultyConfig:
    """rows: (id, name, description, unlock_level, xp_multiplier)"""
    variations = tuple(
        ExerciseVariation(
            id=vid,
            name=name,
            description=desc,
            difficulty=difficulty,
            unlock_level=unlock,
            xp_multiplier=mult,
        )
        for vid, name, desc, unlock, mult in rows
    )
    return DifficultyConfig(
        name=difficulty.capitalize(),
        multiplier=DIFFICULTY_MULTIPLIERS[difficulty],
        description=description,
        color=_TIER_COLORS[difficulty],
        variations=variations,
    )


_PUSHUP_DIFFICULTIES = MappingProxyType({
    "easy": _tier("easy", "Modified push-ups for beginners", [
        ("wall", "Wall Push-up", "Pushups against a wall", 1, 1.0),
        ("knee", "Knee Push-up", "Pushups on your knees", 1, 1.1),
        ("incline", "Incline Push-up", "Hands on elevated surface", 1, 1.15),
    ]),
    "normal": _tier("normal", "Standard push-up variations", [
        ("standard", "Standard Push-up", "Classic pushup form", 1, 1.0),
        ("wide", "Wide Push-up", "Hands wider than shoulders", 2, 1.1),
        ("diamond", "Diamond Push-up", "Hands form diamond shape", 3, 1.25),
        ("close", "Close-Grip Push-up", "Hands close together", 4, 1.33),
    ]),
    "hard": _tier("hard", "Advanced variations with added challenge", [
        ("decline", "Decline Push-up", "Feet elevated", 6, 1.0),
        ("staggered", "Staggered Push-up", "One hand forward, one back", 8, 1.2),
        ("archer", "Archer Push-up", "One arm extended to side", 10, 1.4),
        ("weighted", "Weighted Push-up", "With added weight", 10, 1.5),
    ]),
    "extreme": _tier("extreme", "Elite-level push-up variations", [
        ("explosive", "Explosive Push-up", "Push off the ground", 12, 1.0),
        ("clap", "Clap Push-up", "Clap hands mid-air", 15, 1.25),
        ("one_arm", "One-Arm Push-up", "Single arm pushup", 25, 1.75),
        ("planche", "Planche Push-up", "Elevated planche position", 30, 2.0),
    ]),
})

_PULLUP_DIFFICULTIES = MappingProxyType({
    "easy": _tier("easy", "Assisted pull-ups for beginners", [
        ("band_assisted", "Band-Assisted Pull-up", "With resistance band support", 1, 1.0),
        ("negative", "Negative Pull-up", "Slow lowering phase only", 1, 1.1),
        ("australian", "Australian Pull-up", "Horizontal body row", 1, 1.15),
    ]),
    "normal": _tier("normal", "Standard pull-up variations", [
        ("standard_pullup", "Standard Pull-up", "Classic overhand grip", 1, 1.0),
        ("wide_grip", "Wide-Grip Pull-up", "Hands wider than shoulders", 2, 1.1),
        ("close_grip_pullup", "Close-Grip Pull-up", "Hands close together", 3, 1.2),
        ("neutral_grip", "Neutral-Grip Pull-up", "Palms facing each other", 4, 1.15),
    ]),
    "hard": _tier("hard", "Advanced pull-up variations", [
        ("weighted_pullup", "Weighted Pull-up", "With added weight", 6, 1.0),
        ("archer_pullup", "Archer Pull-up", "One arm extended to side", 8, 1.3),
        ("typewriter", "Typewriter Pull-up", "Side to side at the top", 10, 1.4),
        ("muscle_up_progression", "Muscle-up Progression", "Transition over the bar", 12, 1.5),
    ]),
    "extreme": _tier("extreme", "Elite-level pull-up variations", [
        ("explosive_pullup", "Explosive Pull-up", "Maximum power pull", 15, 1.0),
        ("clapping_pullup", "Clapping Pull-up", "Clap at the top", 18, 1.25),
        ("one_arm_progression", "One-Arm Progression", "Working toward one-arm", 25, 1.75),
    ]),
})

EXERCISES: Mapping[str, ExerciseConfig] = MappingProxyType({
    "pushups": ExerciseConfig(
        id="pushups",
        name="Push-up",
        name_plural="Push-ups",
        goal=100,
        description="Upper body pushing exercise targeting chest, shoulders, and triceps",
        accent_color="#FF6B35",
        difficulties=_PUSHUP_DIFFICULTIES,
    ),
    "pullups": ExerciseConfig(
        id="pullups",
        name="Pull-up",
        name_plural="Pull-ups",
        goal=50,
        description="Upper body pulling exercise targeting back, biceps, and core",
        accent_color="#8B5CF6",
        difficulties=_PULLUP_DIFFICULTIES,
    ),
})

_DEFAULT_VARIATION_IDS = {"pushups": "standard", "pullups": "standard_pullup"}


def get_exercise_config(exercise_type: str) -> ExerciseConfig:
    try:
        return EXERCISES[exercise_type]
    except KeyError:
        raise ValueError(f"unknown exercise type: {exercise_type!r}") from None


def get_difficulty_config(exercise_type: str, difficulty: str) -> DifficultyConfig:
    difficulties = get_exercise_config(exercise_type).difficulties
    if difficulty not in difficulties:
        raise ValueError(f"unknown difficulty: {difficulty!r}")
    return difficulties[difficulty]


def get_all_variations(exercise_type: str) -> List[ExerciseVariation]:
    """All variations of an exercise, easiest tier first."""
    exercise = get_exercise_config(exercise_type)
    result: List[ExerciseVariation] = []
    for tier in DIFFICULTY_TIERS:
        result.extend(exercise.difficulties[tier].variations)
    return result


def get_unlocked_variations(exercise_type: str, user_level: int) -> List[ExerciseVariation]:
    return [v for v in get_all_variations(exercise_type) if v.unlock_level <= user_level]


def get_unlocked_variations_for_difficulty(
    exercise_type: str, difficulty: str, user_level: int
) -> List[ExerciseVariation]:
    config = get_difficulty_config(exercise_type, difficulty)
    return [v for v in config.variations if v.unlock_level <= user_level]


def get_variation_by_id(
    variation_id: str, exercise_type: Optional[str] = None
) -> Optional[ExerciseVariation]:
    """
    Sucht eine Variation per ID.
    Ohne exercise_type wird der gesamte Katalog durchsucht (IDs sind global eindeutig).
    """
    if exercise_type is not None:
        for variation in get_all_variations(exercise_type):
            if variation.id == variation_id:
                return variation
        return None
    return _VARIATIONS_BY_ID.get(variation_id)


def get_default_variation(exercise_type: str) -> ExerciseVariation:
    get_exercise_config(exercise_type)
    return _VARIATIONS_BY_ID[_DEFAULT_VARIATION_IDS[exercise_type]]


def build_variation_multipliers(exercise_type: Optional[str] = None) -> Dict[str, float]:
    """variation id -> xp multiplier, for one exercise or the whole catalog."""
    types = EXERCISE_TYPES if exercise_type is None else (exercise_type,)
    multipliers: Dict[str, float] = {}
    for ex_type in types:
        for variation in get_all_variations(ex_type):
            multipliers[variation.id] = variation.xp_multiplier
    return multipliers


def calculate_combined_multiplier(exercise_type: str, difficulty: str, variation_id: str) -> float:
    """Difficulty tier multiplier x variation multiplier (1.0 for unknown ids)."""
    difficulty_multiplier = get_difficulty_config(exercise_type, difficulty).multiplier
    variation = get_variation_by_id(variation_id, exercise_type)
    variation_multiplier = variation.xp_multiplier if variation else 1.0
    return difficulty_multiplier * variation_multiplier


def get_exercise_goal(exercise_type: str) -> int:
    return get_exercise_config(exercise_type).goal


def format_exercise_name(exercise_type: str, count: int = 1) -> str:
    exercise = get_exercise_config(exercise_type)
    return exercise.name if count == 1 else exercise.name_plural


def catalog_as_dict(exercise_type: str) -> Dict[str, object]:
    """JSON-taugliche Darstellung einer Übung inkl. aller Stufen."""
    exercise = get_exercise_config(exercise_type)
    return {
        "id": exercise.id,
        "name": exercise.name,
        "name_plural": exercise.name_plural,
        "goal": exercise.goal,
        "description": exercise.description,
        "accent_color": exercise.accent_color,
        "difficulties": {
            tier: {
                "name": cfg.name,
                "multiplier": cfg.multiplier,
                "description": cfg.description,
                "color": cfg.color,
                "variations": [
                    {
                        "id": v.id,
                        "name": v.name,
                        "description": v.description,
                        "unlock_level": v.unlock_level,
                        "xp_multiplier": v.xp_multiplier,
                    }
                    for v in cfg.variations
                ],
            }
            for tier, cfg in exercise.difficulties.items()
        },
    }


_VARIATIONS_BY_ID: Mapping[str, ExerciseVariation] = MappingProxyType({
    v.id: v for ex_type in EXERCISE_TYPES for v in get_all_variations(ex_type)
})
