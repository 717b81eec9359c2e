"""
achievements.py – Badge catalog and one-time unlock tracking.

The catalog is a fixed, closed set.  Every badge is one of three rule kinds,
each comparing a single measure of the trip history against a target:

 Kind            Measure                               Badges
 ──────────────────────────────────────────────────────────────────────
 trip_count      number of trips                       first_log
 streak          current consecutive-day streak        streak_3, streak_7
 total_savings   Σ trip.savings (kg CO₂e)              savings_5kg, savings_25kg

Adding a badge is a code change.  Unlocks are permanent: the engine only
ever appends EarnedAchievement records, and only a full data reset (done by
the owner of the persisted records) discards them.

The engine reads the emissions/savings already stored on each trip; it never
recomputes them.
"""
from __future__ import annotations

import datetime as dt
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from greendex.constants import (
    BADGE_FIRST_LOG,
    BADGE_SAVINGS_5KG,
    BADGE_SAVINGS_25KG,
    BADGE_STREAK_3,
    BADGE_STREAK_7,
)
from greendex.schemas import EarnedAchievement
from greendex.streaks import calculate_streak

logger = logging.getLogger(__name__)

RuleKind = Literal["trip_count", "streak", "total_savings"]
Category = Literal["milestone", "streak", "savings"]


class TripLike(Protocol):
    date: dt.date
    savings: float


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    icon: str
    requirement: str
    category: Category
    kind: RuleKind
    target: float


# Evaluation order is the catalog order.
ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id=BADGE_FIRST_LOG,
        name="First Steps",
        description="Logged your first trip",
        icon="🎯",
        requirement="Log 1 trip",
        category="milestone",
        kind="trip_count",
        target=1,
    ),
    AchievementDefinition(
        id=BADGE_STREAK_3,
        name="Getting Started",
        description="3-day logging streak",
        icon="⚡",
        requirement="Log trips for 3 consecutive days",
        category="streak",
        kind="streak",
        target=3,
    ),
    AchievementDefinition(
        id=BADGE_STREAK_7,
        name="Week Warrior",
        description="7-day logging streak",
        icon="🔥",
        requirement="Log trips for 7 consecutive days",
        category="streak",
        kind="streak",
        target=7,
    ),
    AchievementDefinition(
        id=BADGE_SAVINGS_5KG,
        name="Eco Saver",
        description="Saved 5 kg CO₂e vs car",
        icon="🌱",
        requirement="Save 5 kg CO₂e compared to driving",
        category="savings",
        kind="total_savings",
        target=5,
    ),
    AchievementDefinition(
        id=BADGE_SAVINGS_25KG,
        name="Climate Champion",
        description="Saved 25 kg CO₂e vs car",
        icon="🏆",
        requirement="Save 25 kg CO₂e compared to driving",
        category="savings",
        kind="total_savings",
        target=25,
    ),
)

ACHIEVEMENTS_BY_ID: dict[str, AchievementDefinition] = {a.id: a for a in ACHIEVEMENTS}


@dataclass(frozen=True)
class HistoryMeasures:
    """The three measures every rule kind draws from, computed once per call."""
    trip_count: int
    streak: int
    total_savings: float

    @classmethod
    def from_trips(cls, trips: Sequence[TripLike], today: dt.date | None = None) -> "HistoryMeasures":
        return cls(
            trip_count=len(trips),
            streak=calculate_streak((t.date for t in trips), today=today),
            total_savings=sum(t.savings for t in trips),
        )

    def value_for(self, kind: RuleKind) -> float:
        if kind == "trip_count":
            return self.trip_count
        if kind == "streak":
            return self.streak
        return self.total_savings


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class AchievementEngine:
    """
    Evaluates the catalog against a trip history and records unlocks.

    The engine is constructed from the currently persisted records and hands
    back the updated list via ``get_earned``; persisting it is the caller's
    job.  ``unlock`` and ``evaluate`` hold a per-instance lock, so concurrent
    evaluations cannot unlock the same badge twice.
    """

    def __init__(
        self,
        earned: Iterable[EarnedAchievement] | None = None,
        clock: Callable[[], dt.datetime] | None = None,
    ) -> None:
        self._earned: list[EarnedAchievement] = []
        self._clock = clock or _utcnow
        self._lock = threading.RLock()
        for record in earned or []:
            if not self.has_achievement(record.achievement_id):
                self._earned.append(record)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(e.achievement_id == achievement_id for e in self._earned)

    def unlock(self, achievement_id: str) -> bool:
        """Record *achievement_id* as earned now. False if it already was."""
        with self._lock:
            if self.has_achievement(achievement_id):
                return False
            self._earned.append(
                EarnedAchievement(achievement_id=achievement_id, earned_at=self._clock())
            )
        logger.info("Achievement unlocked: %s", achievement_id)
        return True

    def get_earned(self) -> list[EarnedAchievement]:
        return list(self._earned)

    def earned_at(self, achievement_id: str) -> dt.datetime | None:
        for record in self._earned:
            if record.achievement_id == achievement_id:
                return record.earned_at
        return None

    def evaluate(self, trips: Sequence[TripLike], today: dt.date | None = None) -> list[str]:
        """
        Run every rule in catalog order and unlock the ones now satisfied.

        Returns only the ids that went from locked to earned in this call.
        """
        with self._lock:
            measures = HistoryMeasures.from_trips(trips, today=today)
            newly: list[str] = []
            for definition in ACHIEVEMENTS:
                if measures.value_for(definition.kind) >= definition.target:
                    if self.unlock(definition.id):
                        newly.append(definition.id)
        return newly

    def get_progress(
        self,
        achievement_id: str,
        trips: Sequence[TripLike],
        today: dt.date | None = None,
    ) -> float:
        """Current measure for the badge, capped at its target. 0 for unknown ids."""
        definition = ACHIEVEMENTS_BY_ID.get(achievement_id)
        if definition is None:
            return 0
        measures = HistoryMeasures.from_trips(trips, today=today)
        return min(measures.value_for(definition.kind), definition.target)

    def get_progress_percentage(
        self,
        achievement_id: str,
        trips: Sequence[TripLike],
        today: dt.date | None = None,
    ) -> float:
        definition = ACHIEVEMENTS_BY_ID.get(achievement_id)
        if definition is None:
            return 0
        progress = self.get_progress(achievement_id, trips, today=today)
        return progress / definition.target * 100

    def badge_board(
        self,
        trips: Sequence[TripLike],
        today: dt.date | None = None,
    ) -> list[dict[str, Any]]:
        """Catalog rows for display: metadata, earned state, and progress."""
        measures = HistoryMeasures.from_trips(trips, today=today)
        rows = []
        for definition in ACHIEVEMENTS:
            progress = min(measures.value_for(definition.kind), definition.target)
            earned_at = self.earned_at(definition.id)
            rows.append({
                "id": definition.id,
                "name": definition.name,
                "description": definition.description,
                "icon": definition.icon,
                "requirement": definition.requirement,
                "category": definition.category,
                "target": definition.target,
                "earned": earned_at is not None,
                "earned_at": earned_at.isoformat() if earned_at else None,
                "progress": progress,
                "progress_pct": progress / definition.target * 100,
            })
        return rows
