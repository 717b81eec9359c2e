"""
Unit tests for greendex/validators.py – predicates, parsing helpers and the
composite trip/settings checks.
"""
import datetime as dt
import math

import pytest

from greendex.validators import (
    check_settings_update,
    check_trip_input,
    to_float,
    to_trip_date,
    validate_distance,
    validate_emission_factor,
    validate_mode,
    validate_occupancy,
    validate_unit,
)


# ─────────────────────────────────────────────────────────────────────────────
# 1. Predicates
# ─────────────────────────────────────────────────────────────────────────────

class TestPredicates:

    @pytest.mark.parametrize("value,ok", [
        (0.1, True), (10000, True), (0, False), (-1, False), (10000.01, False),
    ])
    def test_distance_bounds(self, value, ok):
        assert validate_distance(value) is ok

    @pytest.mark.parametrize("value,ok", [
        (0, True), (10, True), (0.404, True), (-0.01, False), (10.5, False),
    ])
    def test_factor_bounds(self, value, ok):
        assert validate_emission_factor(value) is ok

    @pytest.mark.parametrize("value,ok", [
        (1, True), (10, True), (0, False), (11, False),
    ])
    def test_occupancy_bounds(self, value, ok):
        assert validate_occupancy(value) is ok

    def test_nan_and_non_numbers_rejected(self):
        assert not validate_distance(math.nan)
        assert not validate_emission_factor(math.nan)
        assert not validate_occupancy("2")
        assert not validate_distance(None)
        assert not validate_distance(True)

    def test_mode_and_unit(self):
        assert validate_mode("subway_metro")
        assert not validate_mode("plane")
        assert validate_unit("km")
        assert not validate_unit("ft")


# ─────────────────────────────────────────────────────────────────────────────
# 2. Parsing helpers
# ─────────────────────────────────────────────────────────────────────────────

class TestParsing:

    def test_iso_date(self):
        assert to_trip_date("2024-05-10") == dt.date(2024, 5, 10)

    def test_us_date(self):
        assert to_trip_date("05/10/2024") == dt.date(2024, 5, 10)

    def test_date_objects(self):
        assert to_trip_date(dt.date(2024, 5, 10)) == dt.date(2024, 5, 10)
        assert to_trip_date(dt.datetime(2024, 5, 10, 18, 30)) == dt.date(2024, 5, 10)

    @pytest.mark.parametrize("value", [None, "", "   ", "2024-02-30", "not a date"])
    def test_bad_dates_return_none(self, value):
        assert to_trip_date(value) is None

    def test_to_float(self):
        assert to_float("1,234.5") == 1234.5
        assert to_float(" 12 ") == 12.0
        assert to_float(3) == 3.0
        assert to_float("abc") is None
        assert to_float(None) is None
        assert to_float(False) is None


# ─────────────────────────────────────────────────────────────────────────────
# 3. Composite checks
# ─────────────────────────────────────────────────────────────────────────────

class TestCheckTripInput:

    def test_normalises_case_and_text(self):
        clean, errors = check_trip_input(" Bus ", "12", "MI")
        assert errors == []
        assert clean == {"mode": "bus", "distance": 12.0, "unit": "mi"}

    def test_collects_every_error(self):
        _, errors = check_trip_input("plane", 0, "ft")
        assert len(errors) == 3
        assert any("plane" in e for e in errors)
        assert any("distance" in e for e in errors)

    def test_distance_over_limit(self):
        _, errors = check_trip_input("car_gas", 20000, "mi")
        assert errors == ["Please enter a valid distance between 0 and 10,000"]


class TestCheckSettingsUpdate:

    def test_only_supplied_keys_returned(self):
        clean, errors = check_settings_update(rideshare_occupancy="2")
        assert errors == []
        assert clean == {"rideshare_occupancy": 2.0}

    def test_factor_subset(self):
        clean, errors = check_settings_update(factors={"bus": 0.2, "walk": "0"})
        assert errors == []
        assert clean == {"factors": {"bus": 0.2, "walk": 0.0}}

    def test_bad_values(self):
        _, errors = check_settings_update(
            factors={"bus": 11, "plane": 1},
            rideshare_occupancy=0,
            default_unit="yd",
        )
        assert len(errors) == 4

    def test_nothing_supplied(self):
        assert check_settings_update() == ({}, [])
