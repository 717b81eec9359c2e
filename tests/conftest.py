"""
Shared fixtures: a fixed "today", a trip builder, and a service backed by a
temporary JSON store.
"""
import datetime as dt
import itertools

import pytest

from greendex.schemas import Trip
from greendex.service import TrackerService
from greendex.store import JsonStore

TODAY = dt.date(2024, 5, 10)            # a Friday

_ids = itertools.count(1)


def days_ago(n: int) -> dt.date:
    return TODAY - dt.timedelta(days=n)


def make_trip(
    date=TODAY,
    mode="bus",
    distance=10.0,
    unit="mi",
    emissions=1.8,
    savings=2.24,
    notes=None,
) -> Trip:
    """Build a stored-looking Trip without going through the calculator."""
    return Trip(
        id=f"t{next(_ids)}",
        date=date,
        mode=mode,
        distance=distance,
        unit=unit,
        emissions=emissions,
        savings=savings,
        notes=notes,
    )


def fixed_clock():
    """Clock returning 2024-05-10 08:00, 08:01, ... UTC on successive calls."""
    start = dt.datetime(2024, 5, 10, 8, 0, tzinfo=dt.timezone.utc)
    ticks = itertools.count()
    return lambda: start + dt.timedelta(minutes=next(ticks))


@pytest.fixture
def store(tmp_path):
    return JsonStore(tmp_path / "data")


@pytest.fixture
def service(store):
    svc = TrackerService(store, today=lambda: TODAY, clock=fixed_clock())
    svc.load()
    return svc
