"""
Composite scorer module for the Air Quality System.

Combines the per-pollutant sub-indices of a reading into a single 0-500 score.
The score is the weighted mean of the sub-indices over the weighted pollutants
actually present, nudged upwards by the two closest reference matches and
scaled by the selected algorithm's multiplier.
"""

import math
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Union

from .algorithms import Algorithm
from .breakpoints import normalize
from .pollutant_reading import Pollutant
from .similarity_ranker import SimilarityRecord


WEIGHTS = MappingProxyType({
    Pollutant.PM25.value: 0.30,
    Pollutant.PM10.value: 0.20,
    Pollutant.O3.value: 0.15,
    Pollutant.NO2.value: 0.10,
    Pollutant.SO2.value: 0.10,
    Pollutant.CO.value: 0.15,
})

MIN_SCORE = 0
MAX_SCORE = 500

# Adjustment contributed by each of the closest reference matches
SIMILARITY_FACTOR = 0.1
SIMILARITY_TOP_N = 2


def base_score(reading: Mapping[str, float]) -> float:
    """
    Weighted mean of the sub-indices of the weighted pollutants in the reading.

    Weights are re-normalized over the pollutants present; returns 0 when no
    weighted pollutant is present.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for pollutant, weight in WEIGHTS.items():
        if pollutant in reading:
            weighted_sum += normalize(pollutant, reading[pollutant]) * weight
            total_weight += weight

    if total_weight == 0:
        return 0.0
    return weighted_sum / total_weight


def similarity_adjustment(similarities: Sequence[SimilarityRecord]) -> float:
    top = sorted(similarities, key=lambda record: record.similarity, reverse=True)
    return sum(record.similarity * SIMILARITY_FACTOR for record in top[:SIMILARITY_TOP_N])


def score(
    reading: Mapping[str, float],
    similarities: Sequence[SimilarityRecord],
    algorithm: Union[Algorithm, str],
) -> int:
    """
    Computes the composite AQI score of a reading.

    final = (base + similarity adjustment) * algorithm multiplier, rounded
    half-up and clamped into [0, 500]. A reading without any weighted
    pollutant scores 0 regardless of the similarities.

    Args:
        reading: Pollutant key -> concentration
        similarities: Ranked similarity records; re-sorted here, so any order works
        algorithm: Algorithm member or tag string

    Returns:
        Integer score in [0, 500]
    """
    multiplier = Algorithm.parse(algorithm).multiplier

    if not any(pollutant in reading for pollutant in WEIGHTS):
        return MIN_SCORE

    final = (base_score(reading) + similarity_adjustment(similarities)) * multiplier
    rounded = math.floor(final + 0.5)
    return int(min(MAX_SCORE, max(MIN_SCORE, rounded)))
