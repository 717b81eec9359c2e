"""
queries.py – JSON payload builders for the Dashboard API.

Each function takes a TrackerService and returns plain dicts/lists ready
for FastAPI to serialise.  No computation happens here beyond shaping;
figures come from greendex.metrics, greendex.achievements and
greendex.export.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Any

from greendex.constants import MODE_LABELS, TRANSPORT_MODES
from greendex.schemas import Trip
from greendex.service import TrackerService


def trip_payload(trip: Trip) -> dict[str, Any]:
    data = trip.model_dump(mode="json")
    data["mode_label"] = MODE_LABELS.get(trip.mode, trip.mode)
    return data


def get_trips(service: TrackerService, limit: int | None = None) -> list[dict[str, Any]]:
    """Trips newest first, optionally limited."""
    trips = sorted(service.trips, key=lambda t: t.date, reverse=True)
    if limit is not None:
        trips = trips[:limit]
    return [trip_payload(t) for t in trips]


def get_settings(service: TrackerService) -> dict[str, Any]:
    """Stored settings plus the effective per-mode factors actually applied."""
    settings = service.get_settings()
    return {
        **settings.model_dump(mode="json"),
        "effective_factors": {
            mode: service.calculator.effective_factor(mode) for mode in TRANSPORT_MODES
        },
    }


def get_badges(service: TrackerService) -> list[dict[str, Any]]:
    return service.badges()


def get_dashboard(service: TrackerService) -> dict[str, Any]:
    """
    Full dashboard payload: period totals, trends, streak, mode and weekday
    breakdowns, 14-day series, and badge board.
    """
    payload = service.dashboard().to_dict()
    payload["badges"] = service.badges()
    return payload


def get_export_summary(service: TrackerService) -> dict[str, Any]:
    return asdict(service.export_summary())
