"""
metrics.py – Derived progress figures for dashboards and reports.

Everything here is read-only over a list of stored trips; emissions and
savings are taken from the trips as recorded.

 Figure              Window / rule
 ─────────────────────────────────────────────────────────────────────────
 today               trip.date == today
 week                trip.date >= today − 7
 previous week       today − 14 <= trip.date < today − 7
 trend %             (week − previous) ÷ previous × 100, 0 if previous == 0
 green share %       trips whose mode != car_gas ÷ all trips × 100
 daily series        last 14 days, oldest first, with cumulative savings
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from greendex.constants import (
    CHART_DAYS,
    KG_DECIMALS,
    MODE_CAR_GAS,
    MODE_LABELS,
    WEEK_DAYS,
    WEEKDAY_NAMES,
)
from greendex.emission_factors import round_half_up
from greendex.schemas import Trip
from greendex.streaks import calculate_streak, streak_status


@dataclass
class PeriodTotals:
    emissions: float = 0.0
    savings: float = 0.0
    trips: int = 0

    def add(self, trip: Trip) -> None:
        self.emissions += trip.emissions
        self.savings += trip.savings
        self.trips += 1


@dataclass
class ModeStats:
    mode: str
    label: str
    count: int = 0
    emissions: float = 0.0
    savings: float = 0.0
    distance: float = 0.0
    percentage: float = 0.0


@dataclass
class WeekdayStats:
    day: str
    count: int = 0
    emissions: float = 0.0
    savings: float = 0.0


@dataclass
class DailyPoint:
    date: str
    day: str
    emissions: float
    savings: float
    trips: int
    cumulative_savings: float


@dataclass
class DashboardSummary:
    """Aggregated payload returned by build_dashboard()."""
    today: PeriodTotals = field(default_factory=PeriodTotals)
    week: PeriodTotals = field(default_factory=PeriodTotals)
    lifetime: PeriodTotals = field(default_factory=PeriodTotals)
    emissions_trend_pct: float = 0.0
    savings_trend_pct: float = 0.0
    streak: int = 0
    streak_status: str = ""
    green_share_pct: float = 0.0
    modes: list[ModeStats] = field(default_factory=list)
    weekdays: list[WeekdayStats] = field(default_factory=list)
    daily: list[DailyPoint] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ─────────────────────────────────────────────────────────────────────────────
# Individual figures
# ─────────────────────────────────────────────────────────────────────────────

def period_totals(trips: Sequence[Trip], start: dt.date, end: dt.date | None = None) -> PeriodTotals:
    """Totals for trips with start <= date (< end when given)."""
    totals = PeriodTotals()
    for trip in trips:
        if trip.date >= start and (end is None or trip.date < end):
            totals.add(trip)
    return totals


def trend_pct(current: float, previous: float) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def mode_breakdown(trips: Sequence[Trip]) -> list[ModeStats]:
    """Per-mode usage, most used first."""
    stats: dict[str, ModeStats] = {}
    for trip in trips:
        entry = stats.setdefault(
            trip.mode, ModeStats(mode=trip.mode, label=MODE_LABELS.get(trip.mode, trip.mode))
        )
        entry.count += 1
        entry.emissions += trip.emissions
        entry.savings += trip.savings
        entry.distance += trip.distance
    total = len(trips)
    for entry in stats.values():
        entry.percentage = entry.count / total * 100 if total else 0.0
    return sorted(stats.values(), key=lambda s: s.count, reverse=True)


def weekday_pattern(trips: Sequence[Trip]) -> list[WeekdayStats]:
    """Trip activity by day of week, busiest first."""
    stats: dict[str, WeekdayStats] = {}
    for trip in trips:
        name = WEEKDAY_NAMES[trip.date.weekday()]
        entry = stats.setdefault(name, WeekdayStats(day=name))
        entry.count += 1
        entry.emissions += trip.emissions
        entry.savings += trip.savings
    return sorted(stats.values(), key=lambda s: s.count, reverse=True)


def green_share_pct(trips: Sequence[Trip]) -> float:
    if not trips:
        return 0.0
    green = sum(1 for t in trips if t.mode != MODE_CAR_GAS)
    return green / len(trips) * 100


def daily_series(trips: Sequence[Trip], today: dt.date, days: int = CHART_DAYS) -> list[DailyPoint]:
    """One point per day for the last *days* days, oldest first."""
    by_day: dict[dt.date, PeriodTotals] = {}
    for trip in trips:
        by_day.setdefault(trip.date, PeriodTotals()).add(trip)

    points: list[DailyPoint] = []
    cumulative = 0.0
    for offset in range(days - 1, -1, -1):
        day = today - dt.timedelta(days=offset)
        totals = by_day.get(day, PeriodTotals())
        savings = round_half_up(totals.savings, KG_DECIMALS)
        cumulative += savings
        points.append(DailyPoint(
            date=day.isoformat(),
            day=day.strftime("%a"),
            emissions=round_half_up(totals.emissions, KG_DECIMALS),
            savings=savings,
            trips=totals.trips,
            cumulative_savings=round_half_up(cumulative, KG_DECIMALS),
        ))
    return points


# ─────────────────────────────────────────────────────────────────────────────
# Full dashboard
# ─────────────────────────────────────────────────────────────────────────────

def build_dashboard(trips: Sequence[Trip], today: dt.date | None = None) -> DashboardSummary:
    """Compute every dashboard figure in one pass over *trips*."""
    today = today or dt.date.today()
    week_start = today - dt.timedelta(days=WEEK_DAYS)
    previous_start = today - dt.timedelta(days=2 * WEEK_DAYS)

    summary = DashboardSummary()
    summary.today = period_totals(trips, today, today + dt.timedelta(days=1))
    summary.week = period_totals(trips, week_start)
    summary.lifetime = period_totals(trips, dt.date.min)

    previous = period_totals(trips, previous_start, week_start)
    summary.emissions_trend_pct = trend_pct(summary.week.emissions, previous.emissions)
    summary.savings_trend_pct = trend_pct(summary.week.savings, previous.savings)

    summary.streak = calculate_streak((t.date for t in trips), today=today)
    summary.streak_status = streak_status(summary.streak)
    summary.green_share_pct = green_share_pct(trips)
    summary.modes = mode_breakdown(trips)
    summary.weekdays = weekday_pattern(trips)
    summary.daily = daily_series(trips, today)
    return summary
