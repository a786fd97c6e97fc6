"""
Breakpoint normalizer module for the Air Quality System.

This module holds the EPA-style breakpoint tables and the normalize function
which maps a raw pollutant concentration to a 0-500 sub-index using
piecewise-linear interpolation. Tables are expressed in the units of the
Pollutant vocabulary (µg/m³ for particulates, ppm for the gases listed here).
"""

from types import MappingProxyType
from typing import NamedTuple, Union

from .pollutant_reading import Pollutant


class BreakpointRange(NamedTuple):
    """One band of a breakpoint table: concentration range -> index range."""

    concentration_low: float
    concentration_high: float
    index_low: float
    index_high: float

    def contains(self, value: float) -> bool:
        return self.concentration_low <= value <= self.concentration_high

    def interpolate(self, value: float) -> float:
        span = self.concentration_high - self.concentration_low
        return (
            (value - self.concentration_low) / span * (self.index_high - self.index_low)
            + self.index_low
        )


def _table(*rows: tuple[float, float, float, float]) -> tuple[BreakpointRange, ...]:
    return tuple(BreakpointRange(*row) for row in rows)


# Bands are tried in order; the first one containing the value wins.
BREAKPOINT_TABLES = MappingProxyType({
    Pollutant.PM25.value: _table(
        (0, 12, 0, 50),
        (12.1, 35.4, 51, 100),
        (35.5, 55.4, 101, 150),
        (55.5, 150.4, 151, 200),
        (150.5, 250.4, 201, 300),
        (250.5, 500, 301, 500),
    ),
    Pollutant.PM10.value: _table(
        (0, 54, 0, 50),
        (55, 154, 51, 100),
        (155, 254, 101, 150),
        (255, 354, 151, 200),
        (355, 424, 201, 300),
        (425, 604, 301, 500),
    ),
    Pollutant.O3.value: _table(
        (0, 0.054, 0, 50),
        (0.055, 0.070, 51, 100),
        (0.071, 0.085, 101, 150),
        (0.086, 0.105, 151, 200),
        (0.106, 0.2, 201, 300),
    ),
    Pollutant.NO2.value: _table(
        (0, 0.053, 0, 50),
        (0.054, 0.100, 51, 100),
        (0.101, 0.360, 101, 150),
        (0.361, 0.649, 151, 200),
        (0.65, 1.249, 201, 300),
        (1.25, 2.049, 301, 500),
    ),
    Pollutant.SO2.value: _table(
        (0, 0.035, 0, 50),
        (0.036, 0.075, 51, 100),
        (0.076, 0.185, 101, 150),
        (0.186, 0.304, 151, 200),
        (0.305, 0.604, 201, 300),
        (0.605, 1.004, 301, 500),
    ),
    Pollutant.CO.value: _table(
        (0, 4.4, 0, 50),
        (4.5, 9.4, 51, 100),
        (9.5, 12.4, 101, 150),
        (12.5, 15.4, 151, 200),
        (15.5, 30.4, 201, 300),
        (30.5, 50.4, 301, 500),
    ),
})


def has_breakpoints(pollutant: Union[Pollutant, str]) -> bool:
    key = pollutant.value if isinstance(pollutant, Pollutant) else pollutant
    return key in BREAKPOINT_TABLES


def normalize(pollutant: Union[Pollutant, str], value: float) -> float:
    """
    Maps a raw concentration to its 0-500 sub-index.

    Pollutants without a breakpoint table are passed through unchanged.
    Values that fall in no band (above the last band, or in the small gaps
    between bands) map to 0 rather than being extrapolated or clamped.

    Args:
        pollutant: Pollutant key or enum member
        value: Concentration in the pollutant's unit (callers reject negatives)

    Returns:
        The interpolated sub-index, the raw value for untabled pollutants,
        or 0 when no band contains the value
    """
    key = pollutant.value if isinstance(pollutant, Pollutant) else pollutant
    table = BREAKPOINT_TABLES.get(key)
    if table is None:
        return value

    for band in table:
        if band.contains(value):
            return band.interpolate(value)

    # Outside every band: saturates to zero
    return 0
