"""
Unit tests for greendex/emissions.py and the rounding/unit helpers.

Default settings throughout unless a test changes them:
car_gas 0.404, rideshare 0.404 ÷ 1.5, bus 0.18, subway 0.09, train 0.14,
bike 0, walk 0 (kg CO₂e per mile).
"""
import math

import pytest

from greendex.constants import TRANSPORT_MODES
from greendex.emission_factors import KM_TO_MILES, round_half_up, to_miles
from greendex.emissions import EmissionsCalculator, TripFigures
from greendex.schemas import EmissionFactors, EmissionSettings


@pytest.fixture
def calc():
    return EmissionsCalculator()


# ─────────────────────────────────────────────────────────────────────────────
# 1. Helpers
# ─────────────────────────────────────────────────────────────────────────────

class TestHelpers:

    def test_km_converted_to_miles(self):
        assert to_miles(10, "km") == pytest.approx(6.21371)

    def test_miles_unchanged(self):
        assert to_miles(10, "mi") == 10

    def test_round_half_up_rounds_halves_away_from_zero(self):
        assert round_half_up(0.0625, 3) == 0.063
        assert round_half_up(-0.0625, 3) == -0.063
        assert round_half_up(2.5, 0) == 3.0

    def test_round_half_up_keeps_three_decimals(self):
        assert round_half_up(5.386666, 3) == 5.387
        assert round_half_up(2.693333, 3) == 2.693


# ─────────────────────────────────────────────────────────────────────────────
# 2. calculate_trip – concrete scenarios
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculateTrip:

    def test_bus_ten_miles(self, calc):
        # 10 × 0.18 = 1.8 ; 10 × (0.404 − 0.18) = 2.24
        figures = calc.calculate_trip("bus", 10, "mi")
        assert figures == TripFigures(emissions=1.8, savings=2.24)

    def test_rideshare_twenty_miles(self, calc):
        # effective factor 0.404 / 1.5 = 0.269333…
        figures = calc.calculate_trip("rideshare", 20, "mi")
        assert figures.emissions == 5.387
        assert figures.savings == 2.693

    def test_car_gas_has_emissions_but_no_savings(self, calc):
        figures = calc.calculate_trip("car_gas", 10, "mi")
        assert figures.emissions == 4.04
        assert figures.savings == 0

    def test_walk_saves_the_full_car_footprint(self, calc):
        figures = calc.calculate_trip("walk", 2.5, "mi")
        assert figures.emissions == 0
        assert figures.savings == 1.01

    def test_km_trip_is_converted_before_applying_factor(self, calc):
        # 16 km × 0.621371 = 9.941936 mi × 0.09 = 0.894774…
        figures = calc.calculate_trip("subway_metro", 16, "km")
        assert figures.emissions == 0.895


# ─────────────────────────────────────────────────────────────────────────────
# 3. calculate_emissions / calculate_savings – properties
# ─────────────────────────────────────────────────────────────────────────────

class TestRawCalculations:

    @pytest.mark.parametrize("mode", [m for m in TRANSPORT_MODES if m != "car_gas"])
    @pytest.mark.parametrize("distance", [0.5, 12.0, 240.0])
    def test_savings_formula_for_non_car_modes(self, calc, mode, distance):
        expected = max(0.0, distance * (0.404 - calc.effective_factor(mode)))
        assert calc.calculate_savings(mode, distance, "mi") == pytest.approx(expected)

    @pytest.mark.parametrize("distance", [0.5, 12.0, 240.0])
    def test_car_gas_savings_always_zero(self, calc, distance):
        assert calc.calculate_savings("car_gas", distance, "mi") == 0

    @pytest.mark.parametrize("mode", TRANSPORT_MODES)
    def test_km_matches_converted_miles(self, calc, mode):
        km = calc.calculate_emissions(mode, 25, "km")
        mi = calc.calculate_emissions(mode, 25 * KM_TO_MILES, "mi")
        assert km == pytest.approx(mi)

    def test_emissions_are_unrounded(self, calc):
        assert calc.calculate_emissions("rideshare", 20, "mi") == pytest.approx(20 * 0.404 / 1.5)

    def test_mode_dirtier_than_car_saves_nothing(self, calc):
        calc.update_settings(factors={"car_gas": 0.404, "bus": 0.9})
        assert calc.calculate_savings("bus", 10, "mi") == 0


# ─────────────────────────────────────────────────────────────────────────────
# 4. Settings
# ─────────────────────────────────────────────────────────────────────────────

class TestSettings:

    def test_defaults(self, calc):
        settings = calc.get_settings()
        assert settings.factors.car_gas == 0.404
        assert settings.factors.rideshare == 0.404
        assert settings.rideshare_occupancy == 1.5
        assert settings.default_unit == "mi"

    def test_occupancy_applied_on_every_use(self, calc):
        assert calc.effective_factor("rideshare") == pytest.approx(0.404 / 1.5)
        calc.update_settings(rideshare_occupancy=2.0)
        assert calc.effective_factor("rideshare") == pytest.approx(0.202)
        assert calc.calculate_emissions("rideshare", 10, "mi") == pytest.approx(2.02)

    def test_get_settings_returns_copy(self, calc):
        settings = calc.get_settings()
        settings.factors.bus = 5.0
        settings.rideshare_occupancy = 9.0
        assert calc.get_settings().factors.bus == 0.18
        assert calc.get_settings().rideshare_occupancy == 1.5

    def test_constructor_copies_given_settings(self):
        settings = EmissionSettings(rideshare_occupancy=3.0)
        calc = EmissionsCalculator(settings)
        settings.rideshare_occupancy = 1.0
        assert calc.get_settings().rideshare_occupancy == 3.0

    def test_update_is_shallow_merge(self, calc):
        calc.update_settings({"default_unit": "km"})
        settings = calc.get_settings()
        assert settings.default_unit == "km"
        assert settings.rideshare_occupancy == 1.5
        assert settings.factors == EmissionFactors()

    def test_factors_entry_replaces_table(self, calc):
        calc.update_settings(factors={"bus": 0.25})
        factors = calc.get_settings().factors
        assert factors.bus == 0.25
        assert factors.car_gas == 0.404

    def test_update_does_not_validate(self, calc):
        calc.update_settings(rideshare_occupancy=-1.0)
        assert calc.get_settings().rideshare_occupancy == -1.0

    def test_misspelt_setting_rejected(self, calc):
        with pytest.raises(ValueError, match="rideshareOccupancy"):
            calc.update_settings({"rideshareOccupancy": 2, "default_unit": "km"})
        assert calc.get_settings() == EmissionSettings()

    def test_unknown_factor_mode_rejected(self, calc):
        with pytest.raises(ValueError, match="plane"):
            calc.update_settings(factors={"bus": 0.2, "plane": 1.0})
        assert calc.get_settings().factors.bus == 0.18

    def test_reset_restores_defaults(self, calc):
        calc.update_settings(rideshare_occupancy=4.0, factors={"bus": 1.0})
        calc.reset_settings()
        assert calc.get_settings() == EmissionSettings()

    def test_instances_are_independent(self):
        a = EmissionsCalculator()
        b = EmissionsCalculator()
        a.update_settings(factors={"bus": 1.0})
        assert b.effective_factor("bus") == 0.18


# ─────────────────────────────────────────────────────────────────────────────
# 5. Validation predicates exposed on the calculator
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculatorValidation:

    @pytest.mark.parametrize("distance,ok", [
        (0, False), (-1, False), (0.01, True), (10000, True), (10000.01, False), (math.nan, False),
    ])
    def test_validate_distance(self, calc, distance, ok):
        assert calc.validate_distance(distance) is ok

    @pytest.mark.parametrize("factor,ok", [(0, True), (10, True), (10.01, False), (-0.1, False)])
    def test_validate_emission_factor(self, calc, factor, ok):
        assert calc.validate_emission_factor(factor) is ok

    @pytest.mark.parametrize("occupancy,ok", [(0, False), (0.5, True), (10, True), (10.5, False)])
    def test_validate_occupancy(self, calc, occupancy, ok):
        assert calc.validate_occupancy(occupancy) is ok
