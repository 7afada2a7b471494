"""
Utilities for parsing workout payloads sent by the client.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


def parse_int(value: Any) -> int:
    """Strict variant: raises ValueError for anything that is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"not a number: {value!r}")
    try:
        return int(float(str(value).replace(",", ".").strip()))
    except OverflowError:
        raise ValueError(f"not a finite number: {value!r}") from None


def to_int(value: Any, default: int = 0, minimum: Optional[int] = 0) -> int:
    """Lenient int conversion; accepts "12", 12.0, " 7 ". Bools are rejected."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        result = parse_int(value)
    except ValueError:
        return default
    if minimum is not None:
        result = max(minimum, result)
    return result


def to_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    result = to_int(value, default=-1, minimum=None)
    return result if result >= 0 else None


def parse_sets_payload(raw_sets: Any) -> List[Dict[str, int]]:
    """
    Normalises the "sets" list of a finished workout.

    Expected per entry:
      { "reps": int, "duration_seconds": int, "rest_after_seconds": int,
        "set_number": int (optional) }

    Entries with 0 reps are dropped; set numbers are reassigned 1..n in the
    order received.
    """
    if not isinstance(raw_sets, list):
        return []

    result: List[Dict[str, int]] = []
    for entry in raw_sets:
        if not isinstance(entry, dict):
            continue
        reps = to_int(entry.get("reps"))
        if reps == 0:
            # Satz ohne Wiederholungen -> ignorieren
            continue
        result.append(
            {
                "set_number": len(result) + 1,
                "reps": reps,
                "duration_seconds": to_int(entry.get("duration_seconds")),
                "rest_after_seconds": to_int(entry.get("rest_after_seconds")),
            }
        )
    return result
