from __future__ import annotations

from typing import Dict, Iterable, Mapping


def reps_per_minute(total_reps: int, active_seconds: float) -> float:
    """Tempo der aktiven Satzzeit (ohne Pausen); 0 ohne gemessene Zeit."""
    if active_seconds <= 0:
        return 0.0
    return total_reps / active_seconds * 60


def summarize_sets(sets: Iterable[Mapping[str, int]]) -> Dict[str, float]:
    """Totals over a list of set payloads (reps, duration_seconds, rest_after_seconds)."""
    total_reps = 0
    active = 0
    rest = 0
    for s in sets:
        total_reps += s["reps"]
        active += s["duration_seconds"]
        rest += s["rest_after_seconds"]
    return {
        "total_reps": total_reps,
        "active_time_seconds": active,
        "rest_time_seconds": rest,
        "reps_per_minute": reps_per_minute(total_reps, active),
    }
