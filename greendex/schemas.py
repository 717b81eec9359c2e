"""
schemas.py – Pydantic models for trips, emission settings, and badges.

All dates use ISO 8601 (YYYY-MM-DD) when serialised; timestamps are
timezone-aware UTC datetimes.  Emissions and savings are kg CO₂e.
"""
from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from greendex.constants import DEFAULT_UNIT
from greendex.emission_factors import (
    DEFAULT_EMISSION_FACTORS,
    DEFAULT_RIDESHARE_OCCUPANCY,
)

TransportMode = Literal[
    "car_gas",
    "rideshare",
    "bus",
    "subway_metro",
    "train_commuter",
    "bike",
    "walk",
]
DistanceUnit = Literal["mi", "km"]


# ─────────────────────────────────────────────────────────────
# Emission settings
# ─────────────────────────────────────────────────────────────

class EmissionFactors(BaseModel):
    """Per-mode factors in kg CO₂e per mile. Rideshare is pre-occupancy."""

    car_gas: float = Field(DEFAULT_EMISSION_FACTORS["car_gas"], description="Gasoline car")
    rideshare: float = Field(DEFAULT_EMISSION_FACTORS["rideshare"], description="Rideshare vehicle, before occupancy")
    bus: float = Field(DEFAULT_EMISSION_FACTORS["bus"], description="Bus")
    subway_metro: float = Field(DEFAULT_EMISSION_FACTORS["subway_metro"], description="Subway / metro")
    train_commuter: float = Field(DEFAULT_EMISSION_FACTORS["train_commuter"], description="Commuter train")
    bike: float = Field(DEFAULT_EMISSION_FACTORS["bike"], description="Bicycle")
    walk: float = Field(DEFAULT_EMISSION_FACTORS["walk"], description="Walking")

    def factor_for(self, mode: str) -> float:
        return float(getattr(self, mode))


class EmissionSettings(BaseModel):
    """User-adjustable calculation settings."""

    factors: EmissionFactors = Field(default_factory=EmissionFactors)
    rideshare_occupancy: float = Field(
        DEFAULT_RIDESHARE_OCCUPANCY, description="Average passengers per rideshare trip"
    )
    default_unit: DistanceUnit = Field(DEFAULT_UNIT, description="Unit preselected for new trips")


class SettingsUpdate(BaseModel):
    """Partial settings change. ``factors`` may name any subset of modes."""

    factors: Optional[dict[str, float]] = None
    rideshare_occupancy: Optional[float] = None
    default_unit: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Trips
# ─────────────────────────────────────────────────────────────

class Trip(BaseModel):
    """A logged commute. Emissions and savings are fixed at creation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque unique identifier")
    date: dt.date = Field(..., description="Logging day")
    mode: TransportMode
    distance: float = Field(..., gt=0, description="Distance in `unit`")
    unit: DistanceUnit
    emissions: float = Field(..., ge=0, description="kg CO₂e, 3 decimals")
    savings: float = Field(..., ge=0, description="kg CO₂e avoided vs driving, 3 decimals")
    notes: Optional[str] = None


class TripCreate(BaseModel):
    """Raw trip input from the CLI or HTTP layer, validated by the service."""

    date: Optional[dt.date] = None
    mode: str
    distance: float
    unit: Optional[str] = None
    notes: Optional[str] = None


class TripPreview(BaseModel):
    mode: str
    distance: float
    unit: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Achievements
# ─────────────────────────────────────────────────────────────

class EarnedAchievement(BaseModel):
    """One unlocked badge. Created once, never mutated."""

    model_config = ConfigDict(frozen=True)

    achievement_id: str
    earned_at: dt.datetime
    progress: Optional[float] = None
