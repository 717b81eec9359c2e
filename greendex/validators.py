"""
validators.py – Input sanity predicates and normalisation for user data.

The ``validate_*`` predicates never raise; they return ``True`` when a value
is inside the accepted range.  Bounds block obvious data-entry mistakes
(e.g. a 100,000-mile commute) and are not physical limits.

``check_trip_input`` and ``check_settings_update`` follow the same shape:
they accept raw values and return ``(normalised, errors)``.  The caller
decides whether to reject the input; nothing here mutates state.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Any

from dateutil import parser as dateutil_parser

from greendex.constants import (
    ALLOWED_UNITS,
    MAX_DISTANCE,
    MAX_EMISSION_FACTOR,
    MAX_OCCUPANCY,
    TRANSPORT_MODES,
)


# ─────────────────────────────────────────────────────────────
# Predicates
# ─────────────────────────────────────────────────────────────

def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def validate_distance(distance: Any) -> bool:
    """True iff 0 < distance <= 10,000."""
    return _is_number(distance) and 0 < distance <= MAX_DISTANCE


def validate_emission_factor(factor: Any) -> bool:
    """True iff 0 <= factor <= 10 kg CO₂e per mile."""
    return _is_number(factor) and 0 <= factor <= MAX_EMISSION_FACTOR


def validate_occupancy(occupancy: Any) -> bool:
    """True iff 0 < occupancy <= 10 passengers."""
    return _is_number(occupancy) and 0 < occupancy <= MAX_OCCUPANCY


def validate_mode(mode: Any) -> bool:
    return mode in TRANSPORT_MODES


def validate_unit(unit: Any) -> bool:
    return unit in ALLOWED_UNITS


# ─────────────────────────────────────────────────────────────
# Parsing helpers
# ─────────────────────────────────────────────────────────────

def to_trip_date(value: Any) -> dt.date | None:
    """
    Parse *value* as a calendar date.

    Accepts ``date``/``datetime`` objects, ISO strings, and common formats
    such as ``MM/DD/YYYY``.  Returns None on failure.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", text):
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            return None
    try:
        return dateutil_parser.parse(text, dayfirst=False).date()
    except (ValueError, OverflowError):
        return None


def to_float(value: Any) -> float | None:
    """Convert *value* to float, stripping thousands separators. None on failure."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = re.sub(r"[,\s]", "", value)
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


# ─────────────────────────────────────────────────────────────
# Composite checks
# ─────────────────────────────────────────────────────────────

def check_trip_input(
    mode: Any,
    distance: Any,
    unit: Any,
) -> tuple[dict[str, Any], list[str]]:
    """
    Normalise and check the computed fields of a new trip.

    Returns
    -------
    (normalised_dict, errors)
    """
    errors: list[str] = []
    d: dict[str, Any] = {
        "mode": mode.strip().lower() if isinstance(mode, str) else mode,
        "distance": to_float(distance),
        "unit": unit.strip().lower() if isinstance(unit, str) else unit,
    }

    if not validate_mode(d["mode"]):
        errors.append(
            f"Unknown transport mode '{mode}'. Expected one of: {', '.join(TRANSPORT_MODES)}"
        )
    if not validate_distance(d["distance"]):
        errors.append(f"Please enter a valid distance between 0 and {MAX_DISTANCE:,.0f}")
    if not validate_unit(d["unit"]):
        errors.append(f"Unknown distance unit '{unit}'. Expected 'mi' or 'km'")

    return d, errors


def check_settings_update(
    factors: dict[str, Any] | None = None,
    rideshare_occupancy: Any = None,
    default_unit: Any = None,
) -> tuple[dict[str, Any], list[str]]:
    """
    Normalise and check a partial settings change.

    Only the keys that were supplied appear in the normalised dict.
    ``factors`` may hold any subset of the transport modes.

    Returns
    -------
    (normalised_dict, errors)
    """
    errors: list[str] = []
    d: dict[str, Any] = {}

    if factors is not None:
        clean: dict[str, float] = {}
        for mode, raw in factors.items():
            value = to_float(raw)
            if not validate_mode(mode):
                errors.append(f"Unknown transport mode '{mode}'")
            elif value is None or not validate_emission_factor(value):
                errors.append(
                    f"Emission factor for {mode} must be between 0 and {MAX_EMISSION_FACTOR:g}"
                )
            else:
                clean[mode] = value
        d["factors"] = clean

    if rideshare_occupancy is not None:
        value = to_float(rideshare_occupancy)
        if value is None or not validate_occupancy(value):
            errors.append(
                f"Rideshare occupancy must be greater than 0 and at most {MAX_OCCUPANCY:g}"
            )
        else:
            d["rideshare_occupancy"] = value

    if default_unit is not None:
        if not validate_unit(default_unit):
            errors.append(f"Unknown distance unit '{default_unit}'. Expected 'mi' or 'km'")
        else:
            d["default_unit"] = default_unit

    return d, errors
