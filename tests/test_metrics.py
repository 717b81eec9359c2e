"""
Unit tests for greendex/metrics.py – period windows, trends, breakdowns and
the 14-day series.

Fixture history (TODAY = Friday 2024-05-10):
    today       bus      1.8 kg / 2.24 saved
    3 days ago  car_gas  4.04    / 0
    7 days ago  walk     0       / 1.01     (last day inside the week window)
    10 days ago bus      1.8     / 2.24     (previous week)
    20 days ago train    1.4     / 2.64     (lifetime only)
"""
import datetime as dt

import pytest

from greendex.metrics import (
    build_dashboard,
    daily_series,
    green_share_pct,
    mode_breakdown,
    period_totals,
    trend_pct,
    weekday_pattern,
)

from tests.conftest import TODAY, days_ago, make_trip


@pytest.fixture
def history():
    return [
        make_trip(date=TODAY, mode="bus"),
        make_trip(date=days_ago(3), mode="car_gas", emissions=4.04, savings=0.0),
        make_trip(date=days_ago(7), mode="walk", distance=2.5, emissions=0.0, savings=1.01),
        make_trip(date=days_ago(10), mode="bus"),
        make_trip(date=days_ago(20), mode="train_commuter", emissions=1.4, savings=2.64),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# 1. Individual figures
# ─────────────────────────────────────────────────────────────────────────────

class TestFigures:

    def test_period_end_is_exclusive(self, history):
        totals = period_totals(history, days_ago(10), days_ago(3))
        assert totals.trips == 2
        assert totals.savings == pytest.approx(3.25)

    def test_open_ended_period(self, history):
        assert period_totals(history, days_ago(7)).trips == 3

    def test_trend(self):
        assert trend_pct(15, 10) == pytest.approx(50.0)
        assert trend_pct(5, 10) == pytest.approx(-50.0)

    def test_trend_without_previous_is_zero(self):
        assert trend_pct(5, 0) == 0.0

    def test_green_share(self, history):
        assert green_share_pct(history) == pytest.approx(80.0)
        assert green_share_pct([]) == 0.0

    def test_mode_breakdown(self, history):
        modes = mode_breakdown(history)
        assert modes[0].mode == "bus"
        assert modes[0].label == "Bus"
        assert modes[0].count == 2
        assert modes[0].percentage == pytest.approx(40.0)
        assert modes[0].distance == pytest.approx(20.0)
        assert sum(m.count for m in modes) == 5

    def test_weekday_pattern(self, history):
        days = {w.day: w.count for w in weekday_pattern(history)}
        assert days == {"Friday": 2, "Tuesday": 2, "Saturday": 1}


# ─────────────────────────────────────────────────────────────────────────────
# 2. Daily series
# ─────────────────────────────────────────────────────────────────────────────

class TestDailySeries:

    def test_fourteen_days_oldest_first(self, history):
        points = daily_series(history, TODAY)
        assert len(points) == 14
        assert points[0].date == days_ago(13).isoformat()
        assert points[-1].date == TODAY.isoformat()
        assert points[-1].day == "Fri"

    def test_empty_days_are_zero(self, history):
        points = daily_series(history, TODAY)
        assert points[-2].trips == 0
        assert points[-2].savings == 0.0

    def test_cumulative_savings(self, history):
        points = daily_series(history, TODAY)
        # trip from 20 days ago is outside the window
        assert points[-1].cumulative_savings == pytest.approx(5.49)
        assert points[0].cumulative_savings == 0.0

    def test_custom_length(self):
        assert len(daily_series([], TODAY, days=3)) == 3


# ─────────────────────────────────────────────────────────────────────────────
# 3. Full dashboard
# ─────────────────────────────────────────────────────────────────────────────

class TestBuildDashboard:

    def test_windows(self, history):
        summary = build_dashboard(history, today=TODAY)
        assert summary.today.trips == 1
        assert summary.today.emissions == pytest.approx(1.8)
        assert summary.week.trips == 3
        assert summary.week.emissions == pytest.approx(5.84)
        assert summary.week.savings == pytest.approx(3.25)
        assert summary.lifetime.trips == 5

    def test_trends_against_previous_week(self, history):
        summary = build_dashboard(history, today=TODAY)
        assert summary.emissions_trend_pct == pytest.approx((5.84 - 1.8) / 1.8 * 100)
        assert summary.savings_trend_pct == pytest.approx((3.25 - 2.24) / 2.24 * 100)

    def test_streak(self, history):
        summary = build_dashboard(history, today=TODAY)
        assert summary.streak == 1
        assert summary.streak_status == "Keep going!"

    def test_empty_history(self):
        summary = build_dashboard([], today=TODAY)
        assert summary.lifetime.trips == 0
        assert summary.streak == 0
        assert summary.modes == []
        assert len(summary.daily) == 14

    def test_to_dict_is_plain_data(self, history):
        data = build_dashboard(history, today=TODAY).to_dict()
        assert data["week"]["trips"] == 3
        assert data["modes"][0]["mode"] == "bus"
        assert isinstance(data["daily"][0], dict)

    def test_defaults_to_real_today(self):
        today = dt.date.today()
        summary = build_dashboard([make_trip(date=today)])
        assert summary.today.trips == 1
