"""
Pollutant reading module for the Air Quality System.

This module defines the fixed pollutant vocabulary (particulates, gases and
meteorological keys) together with the PollutantReading value type, which maps
pollutant keys to non-negative concentrations. Readings are immutable once
constructed and can be validated before they are handed to the scoring core.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Iterator, Optional


class Pollutant(str, Enum):
    """
    Enumerated pollutant and meteorological keys.

    Each member carries its display label and the unit its values are
    expressed in. Breakpoint tables are defined in these same units, so
    callers must not rescale values.
    """

    PM25 = ("pm25", "PM2.5", "µg/m³")
    PM10 = ("pm10", "PM10", "µg/m³")
    NO = ("no", "NO", "ppb")
    NO2 = ("no2", "NO2", "ppb")
    NOX = ("nox", "NOx", "ppb")
    NH3 = ("nh3", "NH3", "ppb")
    SO2 = ("so2", "SO2", "ppb")
    CO = ("co", "CO", "ppm")
    O3 = ("o3", "O3", "ppb")
    BENZENE = ("benzene", "Benzene", "ppb")
    HUMIDITY = ("humidity", "Humidity", "%")
    WIND_SPEED = ("wind_speed", "Wind Speed", "m/s")
    WIND_DIRECTION = ("wind_direction", "Wind Direction", "°")
    SOLAR_RADIATION = ("solar_radiation", "Solar Radiation", "W/m²")
    RAINFALL = ("rainfall", "Rainfall", "mm")
    TEMPERATURE = ("temperature", "Temperature", "°C")

    def __new__(cls, key: str, label: str, unit: str):
        obj = str.__new__(cls, key)
        obj._value_ = key
        obj.label = label
        obj.unit = unit
        return obj

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        """Returns all pollutant keys in declaration order."""
        return tuple(member.value for member in cls)


# Keys whose values may legitimately be negative
SIGNED_KEYS = frozenset({Pollutant.TEMPERATURE.value})


def _key_of(key) -> str:
    return key.value if isinstance(key, Pollutant) else str(key)


@dataclass(frozen=True)
class PollutantReading(Mapping):
    """
    Immutable mapping from pollutant key to concentration.

    Behaves like a read-only dict keyed by pollutant key strings, so it can be
    passed anywhere the scoring core expects a ``Mapping[str, float]``.
    Pollutant enum members are accepted as keys on construction and lookup.

    Attributes:
        concentrations: The pollutant concentrations, keyed by pollutant key
    """

    concentrations: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {_key_of(key): value for key, value in dict(self.concentrations).items()}
        object.__setattr__(self, "concentrations", MappingProxyType(frozen))

    def __getitem__(self, key) -> float:
        return self.concentrations[_key_of(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self.concentrations)

    def __len__(self) -> int:
        return len(self.concentrations)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.concentrations.items())))

    @classmethod
    def from_form(cls, form_data: Mapping[str, str]) -> "PollutantReading":
        """
        Builds a reading from raw text form input.

        Entries that are blank or cannot be parsed as a number become 0.0,
        matching how the dashboard form has always treated them.

        Args:
            form_data: Mapping of pollutant key to the text the user entered

        Returns:
            A PollutantReading with one float per submitted key
        """
        parsed = {}
        for key, raw in form_data.items():
            try:
                parsed[key] = float(str(raw).strip())
            except ValueError:
                parsed[key] = 0.0
            if math.isnan(parsed[key]):
                parsed[key] = 0.0
        return cls(parsed)

    def validate(self) -> tuple[bool, Optional[str]]:
        """
        Validates the reading before it is scored.

        Checks:
        - every key belongs to the pollutant vocabulary
        - every value is a finite number
        - every value except temperature is non-negative

        Returns:
            A tuple containing:
            - bool: True if all validations pass, False otherwise
            - Optional[str]: None if valid, or a descriptive error message if invalid
        """
        known = set(Pollutant.keys())
        for key, value in self.concentrations.items():
            if key not in known:
                return (False, f"unknown pollutant key: {key}")

            if isinstance(value, bool) or not isinstance(value, Real):
                return (False, f"{key} must be a number")

            if not math.isfinite(value):
                return (False, f"{key} must be a finite number")

            if key not in SIGNED_KEYS and value < 0:
                return (False, f"{key} must be >= 0")

        return (True, None)

    def to_dict(self) -> dict[str, float]:
        """Returns a plain, mutable copy of the concentrations."""
        return dict(self.concentrations)
