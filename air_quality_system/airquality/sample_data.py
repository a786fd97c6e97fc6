"""
Sample data module for the Air Quality System.

Provides the readings the dashboard works with when no live feed is
connected:
- deterministic per-city mock readings (same city and day, same values)
- uniformly random readings
- the fixed reference dataset rows the similarity ranker compares against
- random reference sample sets for the similarity ranker

Random generation goes through a numpy Generator so callers and tests can pass
a seeded generator for reproducible output.
"""

import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Optional

import numpy as np

from .pollutant_reading import Pollutant, PollutantReading


class ValueSpec(NamedTuple):
    """Generation range, seed modifier and rounding for one pollutant."""

    minimum: float
    maximum: float
    modifier: int
    decimals: Optional[int]  # None: floor to an integer


VALUE_SPECS = {
    Pollutant.PM25.value: ValueSpec(5, 50, 1, None),
    Pollutant.PM10.value: ValueSpec(10, 70, 4, None),
    Pollutant.NO.value: ValueSpec(5, 30, 5, None),
    Pollutant.NO2.value: ValueSpec(10, 50, 6, None),
    Pollutant.NOX.value: ValueSpec(15, 60, 7, None),
    Pollutant.NH3.value: ValueSpec(2, 20, 8, None),
    Pollutant.SO2.value: ValueSpec(1, 15, 9, None),
    Pollutant.CO.value: ValueSpec(0.1, 1, 10, 1),
    Pollutant.O3.value: ValueSpec(20, 80, 11, None),
    Pollutant.BENZENE.value: ValueSpec(0.1, 1, 12, 1),
    Pollutant.HUMIDITY.value: ValueSpec(30, 90, 13, None),
    Pollutant.WIND_SPEED.value: ValueSpec(0.5, 10, 14, 1),
    Pollutant.WIND_DIRECTION.value: ValueSpec(0, 359, 15, None),
    Pollutant.SOLAR_RADIATION.value: ValueSpec(50, 800, 16, None),
    Pollutant.RAINFALL.value: ValueSpec(0, 2, 17, 1),
    Pollutant.TEMPERATURE.value: ValueSpec(15, 35, 18, None),
}

REFERENCE_VALUE_MAX = 100
DEFAULT_REFERENCE_COUNT = 10

# Rows taken from the monitoring-station dataset CSV. The dataset calls the
# temperature column "air_temperature"; it is stored under "temperature" so it
# lines up with reading keys. Small negative values are sensor noise in the
# source data and are kept as-is.
REFERENCE_DATASET = (
    PollutantReading({
        "pm25": 12.46271167, "pm10": 16.09739248, "no": 0.134938123,
        "no2": 4.325129228, "nox": 2.679533325, "nh3": 13.4746276,
        "so2": 4.8213016, "co": 0.618234, "o3": 15.06349,
        "benzene": 0.048337, "humidity": 92.01842, "wind_speed": 0.133542005,
        "wind_direction": 205.4919661, "solar_radiation": 65.82197292,
        "rainfall": -0.285760125, "temperature": 30.71,
    }),
    PollutantReading({
        "pm25": 9.5958634, "pm10": 14.95434986, "no": 0.307633056,
        "no2": 4.101504049, "nox": 2.679533325, "nh3": 13.1512858,
        "so2": 3.8579895, "co": 1.133142, "o3": 6.491356,
        "benzene": 0.101746, "humidity": 98.59218, "wind_speed": 0.807967235,
        "wind_direction": 35.00620698, "solar_radiation": 23.60620774,
        "rainfall": 0.236755585, "temperature": 28.9,
    }),
    PollutantReading({
        "pm25": 8.004165864, "pm10": 18.09889557, "no": 0.510150057,
        "no2": 4.569629727, "nox": 2.3922013, "nh3": 15.3249398,
        "so2": 6.0943074, "co": 0.067838, "o3": 6.09275,
        "benzene": -0.21315, "humidity": 98.11887, "wind_speed": 0.566758697,
        "wind_direction": 38.43370969, "solar_radiation": 23.07548791,
        "rainfall": 0.075608194, "temperature": 28.18,
    }),
    PollutantReading({
        "pm25": 7.905082815, "pm10": 14.83185572, "no": 0.817394305,
        "no2": 4.047494492, "nox": 2.93244463, "nh3": 12.675942,
        "so2": 4.0492549, "co": 1.4098, "o3": 3.428227,
        "benzene": -0.0912, "humidity": 98.23993, "wind_speed": 0.238826692,
        "wind_direction": 28.22330325, "solar_radiation": 23.25174385,
        "rainfall": 0.04984412, "temperature": 27.86,
    }),
    PollutantReading({
        "pm25": 8.876984618, "pm10": 19.36906162, "no": 1.089787443,
        "no2": 3.941652695, "nox": 2.93801263, "nh3": 17.5017244,
        "so2": 5.4341126, "co": 1.591742, "o3": 2.684669,
        "benzene": -0.03321, "humidity": 98.53699, "wind_speed": 0.385218868,
        "wind_direction": 27.2697338, "solar_radiation": 22.91497739,
        "rainfall": -0.060809575, "temperature": 27.42,
    }),
)


def city_seed(city: str) -> int:
    """Sum of the character codes of the city name."""
    return sum(ord(char) for char in city)


def _apply_rounding(value: float, decimals: Optional[int]) -> float:
    if decimals is None:
        return float(math.floor(value))
    # Exact halves of the stored binary value round up
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def generate_city_reading(city: str, day: Optional[int] = None) -> PollutantReading:
    """
    Generates a deterministic mock reading for a city.

    Each value is ``min + ((seed + day + modifier) % 100) / 100 * (max - min)``
    where seed is derived from the city name and day is the day of month, so
    a city keeps the same values for a whole day.

    Args:
        city: City name
        day: Day of month (1-31). Defaults to today's.

    Returns:
        A PollutantReading covering every pollutant key
    """
    if day is None:
        day = date.today().day
    seed = city_seed(city)

    values = {}
    for key, spec in VALUE_SPECS.items():
        fraction = ((seed + day + spec.modifier) % 100) / 100
        raw = spec.minimum + fraction * (spec.maximum - spec.minimum)
        values[key] = _apply_rounding(raw, spec.decimals)
    return PollutantReading(values)


def generate_random_reading(rng: Optional[np.random.Generator] = None) -> PollutantReading:
    """
    Generates a random reading within the same ranges as the city readings.

    Integer-valued pollutants are drawn uniformly from [min, max] inclusive;
    one-decimal pollutants are drawn in steps of 0.1.
    """
    rng = rng if rng is not None else np.random.default_rng()

    values = {}
    for key, spec in VALUE_SPECS.items():
        if spec.decimals is None:
            values[key] = float(rng.integers(int(spec.minimum), int(spec.maximum), endpoint=True))
        else:
            scale = 10 ** spec.decimals
            low = int(round(spec.minimum * scale))
            high = int(round(spec.maximum * scale))
            values[key] = float(rng.integers(low, high, endpoint=True)) / scale
    return PollutantReading(values)


def generate_reference_samples(
    count: int = DEFAULT_REFERENCE_COUNT,
    rng: Optional[np.random.Generator] = None,
) -> list[PollutantReading]:
    """
    Generates a random reference sample set for the similarity ranker.

    Every sample carries all pollutant keys with values in [0, 100) rounded
    to two decimals.

    Args:
        count: Number of samples to generate
        rng: Optional numpy Generator; pass a seeded one for reproducible samples

    Returns:
        A list of PollutantReading samples
    """
    rng = rng if rng is not None else np.random.default_rng()
    keys = Pollutant.keys()
    matrix = np.round(rng.random((count, len(keys))) * REFERENCE_VALUE_MAX, 2)
    return [
        PollutantReading({key: float(value) for key, value in zip(keys, row)})
        for row in matrix
    ]
