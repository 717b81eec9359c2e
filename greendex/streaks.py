"""
streaks.py – Consecutive-day logging streak, pure functions.

A streak counts calendar days with at least one trip, ending today.  If
today has no trip yet, the streak may end yesterday instead: the user is
still mid-streak until the day is over.  That grace only excuses the
missing day, it is not counted, so [yesterday, day before] is a 2-day
streak.  Only the most recent day may be missing; any other gap ends the
scan.  A trip dated after today also ends the scan, leaving no streak.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Iterable


def calculate_streak(dates: Iterable[dt.date], today: dt.date | None = None) -> int:
    """
    Return the current consecutive-day streak for *dates*.

    Example (today = 2024-05-10):
        [05-10, 05-09, 05-08] -> 3
        [05-09, 05-08]        -> 2
        [05-10, 05-08]        -> 1
        [05-11, 05-10]        -> 0
    """
    cursor = today or dt.date.today()
    unique = sorted(set(dates), reverse=True)

    streak = 0
    for day in unique:
        gap = (cursor - day).days
        # First step: today (gap 0) or yesterday (gap 1). After that every
        # date must be exactly the day before the previous one.
        if gap < 0 or gap > 1:
            break
        streak += 1
        cursor = day
    return streak


def streak_status(streak: int) -> str:
    """Short encouragement label shown next to the streak counter."""
    if streak >= 7:
        return "On fire!"
    if streak >= 3:
        return "Great job!"
    return "Keep going!"
