"""
emission_factors.py – Default commute emission factors and unit helpers.

All factors are in kg CO₂e per passenger-mile.  The rideshare factor is the
whole-vehicle figure; it is divided by the configured occupancy at use time.
"""
from __future__ import annotations

import math

from greendex.constants import (
    MODE_BIKE,
    MODE_BUS,
    MODE_CAR_GAS,
    MODE_RIDESHARE,
    MODE_SUBWAY_METRO,
    MODE_TRAIN_COMMUTER,
    MODE_WALK,
    UNIT_KM,
)

# ─────────────────────────────────────────────────────────────
# Per-mode factors (kg CO₂e / mile)
# ─────────────────────────────────────────────────────────────
DEFAULT_EMISSION_FACTORS: dict[str, float] = {
    MODE_CAR_GAS:        0.404,   # average gasoline passenger car
    MODE_RIDESHARE:      0.404,   # same vehicle, shared by occupancy
    MODE_BUS:            0.18,
    MODE_SUBWAY_METRO:   0.09,
    MODE_TRAIN_COMMUTER: 0.14,
    MODE_BIKE:           0.0,
    MODE_WALK:           0.0,
}

DEFAULT_RIDESHARE_OCCUPANCY: float = 1.5   # average passengers per rideshare trip


# ─────────────────────────────────────────────────────────────
# Unit conversion helpers
# ─────────────────────────────────────────────────────────────
KM_TO_MILES: float = 0.621371
MILES_TO_KM: float = 1.60934


def to_miles(distance: float, unit: str) -> float:
    """Convert a distance in *unit* ('mi' or 'km') to miles."""
    if unit == UNIT_KM:
        return distance * KM_TO_MILES
    return distance


def round_half_up(value: float, places: int = 3) -> float:
    """
    Round *value* to *places* decimals, halves away from zero.

    Equivalent to ``round(x * 10**n) / 10**n`` with half-up rounding on the
    magnitude; the built-in ``round`` rounds halves to even.
    """
    scale = 10 ** places
    return math.copysign(math.floor(abs(value) * scale + 0.5), value) / scale
