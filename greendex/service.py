"""
service.py – Trip store operations that drive the calculation engines.

TrackerService is the single caller the CLI and the dashboard API talk to.
Every mutation follows the same order:

    validate input → compute (EmissionsCalculator) → store trip
                   → evaluate badges (AchievementEngine) → persist

Trips keep the emissions/savings computed when they were logged; changing
emission settings later never rewrites stored trips.
In-memory state only changes once the store write has succeeded.
"""
from __future__ import annotations

import datetime as dt
import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from greendex import validators
from greendex.achievements import AchievementEngine
from greendex.config import Config
from greendex.emissions import EmissionsCalculator, TripFigures
from greendex.export import ExportSummary, export_summary, export_trips_csv
from greendex.metrics import DashboardSummary, build_dashboard
from greendex.schemas import EmissionSettings, Trip
from greendex.store import JsonStore

log = logging.getLogger(__name__)


class TripValidationError(ValueError):
    """Trip input failed the sanity checks; nothing was stored."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class SettingsValidationError(ValueError):
    """Settings change failed the sanity checks; nothing was changed."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass
class AddTripResult:
    trip: Trip
    new_badges: list[str] = field(default_factory=list)


def _new_trip_id() -> str:
    return uuid.uuid4().hex


class TrackerService:
    """
    Owns the in-memory trip list and the two engines for one data directory.

    Construct with ``TrackerService.from_config(cfg)`` (loads persisted data)
    or directly with a store for tests.  ``today`` and ``clock`` are
    injectable so streaks, dashboards and unlock times are deterministic.
    """

    def __init__(
        self,
        store: JsonStore,
        calculator: EmissionsCalculator | None = None,
        achievements: AchievementEngine | None = None,
        trips: list[Trip] | None = None,
        today: Callable[[], dt.date] | None = None,
        clock: Callable[[], dt.datetime] | None = None,
    ) -> None:
        self.store = store
        self.calculator = calculator or EmissionsCalculator()
        self._clock = clock
        self.achievements = achievements or AchievementEngine(clock=clock)
        self._trips: list[Trip] = list(trips or [])
        self._today = today or dt.date.today
        self._lock = threading.RLock()
        self.warnings: list[str] = []

    @classmethod
    def from_config(cls, cfg: Config, **kwargs: Any) -> "TrackerService":
        service = cls(JsonStore(cfg.data_dir), **kwargs)
        service.load()
        return service

    # ---------- Loading ----------
    def load(self) -> list[str]:
        """Read settings, badges and trips from the store. Returns load warnings."""
        with self._lock:
            settings, w_settings = self.store.load_settings()
            earned, w_badges = self.store.load_badges()
            trips, w_trips = self.store.load_trips()

            self.calculator = EmissionsCalculator(settings)
            self.achievements = AchievementEngine(earned, clock=self._clock)
            self._trips = trips
            self.warnings = [*w_settings, *w_badges, *w_trips]
        log.info(
            "Loaded %d trip(s), %d badge(s) from %s",
            len(trips), len(earned), self.store.data_dir,
        )
        return list(self.warnings)

    # ---------- Trips ----------
    @property
    def trips(self) -> list[Trip]:
        return list(self._trips)

    def get_trip(self, trip_id: str) -> Trip | None:
        return next((t for t in self._trips if t.id == trip_id), None)

    def preview_trip(self, mode: str, distance: Any, unit: str | None = None) -> TripFigures:
        """Figures a trip would get right now, without storing anything."""
        clean = self._check_trip(mode, distance, unit)
        return self.calculator.calculate_trip(clean["mode"], clean["distance"], clean["unit"])

    def add_trip(
        self,
        mode: str,
        distance: Any,
        unit: str | None = None,
        date: Any = None,
        notes: str | None = None,
    ) -> AddTripResult:
        """
        Log a trip for *date* (default today) and evaluate badges.

        Raises
        ------
        TripValidationError
            If mode, distance, unit or date are not acceptable.
        """
        with self._lock:
            clean = self._check_trip(mode, distance, unit)
            if date is None:
                trip_date = self._today()
            else:
                trip_date = validators.to_trip_date(date)
                if trip_date is None:
                    raise TripValidationError([f"Could not parse date '{date}'"])

            figures = self.calculator.calculate_trip(clean["mode"], clean["distance"], clean["unit"])
            trip = Trip(
                id=_new_trip_id(),
                date=trip_date,
                mode=clean["mode"],
                distance=clean["distance"],
                unit=clean["unit"],
                emissions=figures.emissions,
                savings=figures.savings,
                notes=(notes or "").strip() or None,
            )
            new_trips = [trip, *self._trips]
            self.store.save_trips(new_trips)
            self._trips = new_trips
            log.info(
                "Logged trip %s: %s %.2f %s (%.3f kg emitted, %.3f kg saved)",
                trip.id, trip.mode, trip.distance, trip.unit, trip.emissions, trip.savings,
            )
            new_badges = self._evaluate()
        return AddTripResult(trip=trip, new_badges=new_badges)

    def delete_trip(self, trip_id: str) -> bool:
        """Remove a trip. Earned badges are kept. False if the id is unknown."""
        with self._lock:
            remaining = [t for t in self._trips if t.id != trip_id]
            if len(remaining) == len(self._trips):
                return False
            self.store.save_trips(remaining)
            self._trips = remaining
            log.info("Deleted trip %s", trip_id)
            self._evaluate()
        return True

    # ---------- Settings ----------
    def get_settings(self) -> EmissionSettings:
        return self.calculator.get_settings()

    def update_settings(
        self,
        factors: dict[str, Any] | None = None,
        rideshare_occupancy: Any = None,
        default_unit: str | None = None,
    ) -> EmissionSettings:
        """
        Validate and apply a partial settings change.

        ``factors`` may name a subset of modes; the rest keep their values.

        Raises
        ------
        SettingsValidationError
            If any supplied value is out of range; nothing is applied.
        """
        clean, errors = validators.check_settings_update(
            factors=factors,
            rideshare_occupancy=rideshare_occupancy,
            default_unit=default_unit,
        )
        if errors:
            raise SettingsValidationError(errors)

        with self._lock:
            if "factors" in clean:
                merged = self.calculator.get_settings().factors.model_dump()
                merged.update(clean["factors"])
                clean["factors"] = merged
            candidate = EmissionsCalculator(self.calculator.get_settings())
            candidate.update_settings(clean)
            settings = candidate.get_settings()
            self.store.save_settings(settings)
            self.calculator = candidate
        log.info("Emission settings updated: %s", ", ".join(sorted(clean)) or "no changes")
        return settings

    def reset_settings(self) -> EmissionSettings:
        with self._lock:
            settings = EmissionSettings()
            self.store.save_settings(settings)
            self.calculator = EmissionsCalculator(settings)
        log.info("Emission settings reset to defaults")
        return settings

    # ---------- Reset ----------
    def reset_all(self) -> None:
        """Discard every trip, badge and setting."""
        with self._lock:
            self.store.clear()
            self._trips = []
            self.calculator = EmissionsCalculator()
            self.achievements = AchievementEngine(clock=self._clock)
            self.warnings = []
        log.info("All data reset")

    # ---------- Read models ----------
    def dashboard(self) -> DashboardSummary:
        return build_dashboard(self._trips, today=self._today())

    def badges(self) -> list[dict[str, Any]]:
        return self.achievements.badge_board(self._trips, today=self._today())

    def export_csv(self) -> str:
        return export_trips_csv(self._trips)

    def export_summary(self) -> ExportSummary:
        return export_summary(self._trips)

    # ---------- Internal ----------
    def _check_trip(self, mode: Any, distance: Any, unit: Any) -> dict[str, Any]:
        if unit is None:
            unit = self.calculator.get_settings().default_unit
        clean, errors = validators.check_trip_input(mode, distance, unit)
        if errors:
            raise TripValidationError(errors)
        return clean

    def _evaluate(self) -> list[str]:
        new_badges = self.achievements.evaluate(self._trips, today=self._today())
        if new_badges:
            self.store.save_badges(self.achievements.get_earned())
        return new_badges
