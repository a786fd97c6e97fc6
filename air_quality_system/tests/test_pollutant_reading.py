"""
Tests for PollutantReading and the pollutant vocabulary.

Tests cover:
- Equivalence classes: valid readings, invalid readings
- Boundary value analysis: zero and negative values
- Error scenarios: unknown keys, non-numeric and non-finite values
- Form parsing and immutability
"""

import dataclasses
import math

import pytest

from airquality.pollutant_reading import Pollutant, PollutantReading


class TestPollutantReadingValidation:
    """Test suite for PollutantReading validation."""

    # ==================== Equivalence Classes ====================

    def test_valid_reading(self):
        """Equivalence class: All valid values → validation passes."""
        reading = PollutantReading({"pm25": 35.4, "pm10": 50, "co": 2, "humidity": 60})
        valid, reason = reading.validate()
        assert valid is True
        assert reason is None

    def test_empty_reading_is_valid(self):
        """Equivalence class: Empty reading → validation passes."""
        assert PollutantReading().validate() == (True, None)

    def test_negative_pollutant_invalid(self):
        """Error scenario: Negative concentration → validation fails."""
        valid, reason = PollutantReading({"pm25": -1}).validate()
        assert valid is False
        assert "pm25" in reason

    def test_unknown_key_invalid(self):
        """Error scenario: Key outside the vocabulary → validation fails."""
        valid, reason = PollutantReading({"lead": 1.0}).validate()
        assert valid is False
        assert "lead" in reason

    def test_non_numeric_invalid(self):
        """Error scenario: String value → validation fails."""
        valid, reason = PollutantReading({"pm10": "high"}).validate()
        assert valid is False
        assert "pm10" in reason

    def test_nan_invalid(self):
        """Error scenario: NaN → validation fails."""
        valid, reason = PollutantReading({"o3": float("nan")}).validate()
        assert valid is False
        assert "finite" in reason

    def test_infinity_invalid(self):
        """Error scenario: Infinity → validation fails."""
        valid, _ = PollutantReading({"o3": float("inf")}).validate()
        assert valid is False

    # ==================== Boundary Value Analysis ====================

    def test_zero_is_valid(self):
        """Boundary: Zero concentration is allowed."""
        assert PollutantReading({"so2": 0}).validate() == (True, None)

    def test_negative_temperature_is_valid(self):
        """Boundary: Temperature may be below zero."""
        assert PollutantReading({"temperature": -5}).validate() == (True, None)


class TestPollutantReadingMapping:
    """Test suite for mapping behavior and construction."""

    def test_behaves_like_mapping(self):
        reading = PollutantReading({"pm25": 12.0, "pm10": 30.0})
        assert reading["pm25"] == 12.0
        assert "pm10" in reading
        assert "o3" not in reading
        assert len(reading) == 2
        assert dict(reading) == {"pm25": 12.0, "pm10": 30.0}

    def test_enum_keys_normalized(self):
        """Enum members are accepted as keys on construction and lookup."""
        reading = PollutantReading({Pollutant.PM25: 12.0})
        assert list(reading) == ["pm25"]
        assert reading[Pollutant.PM25] == 12.0

    def test_item_assignment_rejected(self):
        reading = PollutantReading({"pm25": 12.0})
        with pytest.raises(TypeError):
            reading["pm25"] = 1.0

    def test_attribute_assignment_rejected(self):
        reading = PollutantReading({"pm25": 12.0})
        with pytest.raises(dataclasses.FrozenInstanceError):
            reading.concentrations = {}

    def test_source_dict_changes_do_not_leak(self):
        source = {"pm25": 12.0}
        reading = PollutantReading(source)
        source["pm25"] = 99.0
        assert reading["pm25"] == 12.0

    def test_to_dict_returns_copy(self):
        reading = PollutantReading({"pm25": 12.0})
        copy = reading.to_dict()
        copy["pm25"] = 0.0
        assert reading["pm25"] == 12.0

    def test_hashable(self):
        a = PollutantReading({"pm25": 12.0, "pm10": 3.0})
        b = PollutantReading({"pm10": 3.0, "pm25": 12.0})
        assert hash(a) == hash(b)


class TestFromForm:
    """Test suite for parsing raw form input."""

    def test_parses_numbers(self):
        reading = PollutantReading.from_form({"pm25": "35.4", "co": " 2 "})
        assert reading.to_dict() == {"pm25": 35.4, "co": 2.0}

    def test_blank_and_garbage_become_zero(self):
        reading = PollutantReading.from_form({"pm25": "", "pm10": "abc"})
        assert reading.to_dict() == {"pm25": 0.0, "pm10": 0.0}

    def test_nan_text_becomes_zero(self):
        reading = PollutantReading.from_form({"o3": "nan"})
        assert reading["o3"] == 0.0
        assert not math.isnan(reading["o3"])


class TestPollutant:
    """Test suite for the pollutant vocabulary."""

    def test_vocabulary(self):
        assert Pollutant.keys() == (
            "pm25", "pm10", "no", "no2", "nox", "nh3", "so2", "co", "o3", "benzene",
            "humidity", "wind_speed", "wind_direction", "solar_radiation", "rainfall", "temperature",
        )

    def test_lookup_by_key(self):
        assert Pollutant("pm25") is Pollutant.PM25

    def test_units(self):
        assert Pollutant.PM25.unit == "µg/m³"
        assert Pollutant.CO.unit == "ppm"
        assert Pollutant.NO2.label == "NO2"
