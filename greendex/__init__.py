"""
greendex – commute emissions and achievement tracking.

Core engines:
    EmissionsCalculator   per-trip emissions and savings vs. driving
    calculate_streak      consecutive-day logging streak
    AchievementEngine     badge catalog evaluation with one-time unlocks
"""
from greendex.achievements import ACHIEVEMENTS, AchievementEngine
from greendex.emissions import EmissionsCalculator
from greendex.streaks import calculate_streak

__all__ = [
    "ACHIEVEMENTS",
    "AchievementEngine",
    "EmissionsCalculator",
    "calculate_streak",
]
