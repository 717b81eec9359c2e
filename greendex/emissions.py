"""
emissions.py – Per-trip emission and savings calculator.

Formula reference
─────────────────
 distance_mi      = distance × 0.621371 if unit == 'km' else distance
 effective_factor = factors.rideshare ÷ rideshare_occupancy  (rideshare)
                  = factors[mode]                            (all other modes)
 emissions        = distance_mi × effective_factor
 savings          = 0                                        (car_gas)
                  = max(0, distance_mi × (factors.car_gas − effective_factor))

All values are kg CO₂e.  ``calculate_trip`` rounds both figures to three
decimals; the two underlying calculators return raw floats.

The calculator performs no input enforcement.  Callers check distances and
factors with the predicates in ``greendex.validators`` before calling in.

Usage
──────
    from greendex.emissions import EmissionsCalculator

    calc = EmissionsCalculator()
    calc.calculate_trip("bus", 10, "mi")   # TripFigures(emissions=1.8, savings=2.24)
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from greendex.constants import KG_DECIMALS, MODE_CAR_GAS, MODE_RIDESHARE
from greendex import validators
from greendex.emission_factors import round_half_up, to_miles
from greendex.schemas import EmissionFactors, EmissionSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TripFigures:
    """Rounded result of one trip calculation."""
    emissions: float
    savings: float


class EmissionsCalculator:
    """
    Holds the current EmissionSettings and converts trips into figures.

    Construct one per configuration and pass it to whoever needs it; there is
    no module-level instance.
    """

    def __init__(self, settings: EmissionSettings | None = None) -> None:
        self._settings = (
            settings.model_copy(deep=True) if settings is not None else EmissionSettings()
        )

    # ---------- Settings ----------
    def update_settings(self, partial: Mapping[str, Any] | None = None, **fields: Any) -> None:
        """
        Shallow-merge *partial* (and/or keyword fields) into the settings.

        A ``factors`` entry replaces the whole factor table; modes it omits
        take their default.  Values are not range-checked here.

        Raises
        ------
        ValueError
            If a key is not a settings field, or ``factors`` names an
            unknown mode.  Nothing is applied.
        """
        changes = dict(partial or {})
        changes.update(fields)
        unknown = sorted(set(changes) - set(EmissionSettings.model_fields))
        if unknown:
            raise ValueError(f"Unknown emission setting(s): {', '.join(unknown)}")
        factors = changes.get("factors")
        if isinstance(factors, Mapping):
            bad_modes = sorted(set(factors) - set(EmissionFactors.model_fields))
            if bad_modes:
                raise ValueError(f"Unknown transport mode(s): {', '.join(bad_modes)}")
            changes["factors"] = EmissionFactors.model_construct(**factors)
        self._settings = self._settings.model_copy(update=changes)
        logger.debug("Emission settings updated: %s", sorted(changes))

    def get_settings(self) -> EmissionSettings:
        """Return a copy; mutating it does not touch the calculator."""
        return self._settings.model_copy(deep=True)

    def reset_settings(self) -> None:
        self._settings = EmissionSettings()

    # ---------- Factors ----------
    def effective_factor(self, mode: str) -> float:
        """kg CO₂e per mile actually applied to *mode*."""
        factors = self._settings.factors
        if mode == MODE_RIDESHARE:
            return factors.rideshare / self._settings.rideshare_occupancy
        return factors.factor_for(mode)

    # ---------- Calculations ----------
    def calculate_emissions(self, mode: str, distance: float, unit: str) -> float:
        """Raw kg CO₂e for the trip (unrounded)."""
        return to_miles(distance, unit) * self.effective_factor(mode)

    def calculate_savings(self, mode: str, distance: float, unit: str) -> float:
        """Raw kg CO₂e avoided versus driving the same distance alone."""
        if mode == MODE_CAR_GAS:
            return 0.0
        distance_mi = to_miles(distance, unit)
        car_factor = self._settings.factors.car_gas
        return max(0.0, distance_mi * (car_factor - self.effective_factor(mode)))

    def calculate_trip(self, mode: str, distance: float, unit: str) -> TripFigures:
        """Emissions and savings rounded to three decimals."""
        emissions = self.calculate_emissions(mode, distance, unit)
        savings = self.calculate_savings(mode, distance, unit)
        figures = TripFigures(
            emissions=round_half_up(emissions, KG_DECIMALS),
            savings=round_half_up(savings, KG_DECIMALS),
        )
        logger.debug(
            "%s %.3f %s -> %.3f kg emitted, %.3f kg saved",
            mode, distance, unit, figures.emissions, figures.savings,
        )
        return figures

    # ---------- Validation ----------
    @staticmethod
    def validate_distance(distance: float) -> bool:
        return validators.validate_distance(distance)

    @staticmethod
    def validate_emission_factor(factor: float) -> bool:
        return validators.validate_emission_factor(factor)

    @staticmethod
    def validate_occupancy(occupancy: float) -> bool:
        return validators.validate_occupancy(occupancy)
