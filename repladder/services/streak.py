from __future__ import annotations

from datetime import date, timedelta
from typing import Optional


def next_streak(last_workout: Optional[date], today: date, current_streak: int) -> int:
    """
    Neuer Streak nach einem Training am Tag `today`:
      - gleicher Kalendertag  -> unverändert
      - direkt am Folgetag    -> +1
      - sonst (Lücke/erstes)  -> 1
    """
    if last_workout is None:
        return 1
    if last_workout == today:
        return current_streak
    if last_workout == today - timedelta(days=1):
        return current_streak + 1
    return 1
