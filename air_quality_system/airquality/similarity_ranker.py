"""
Similarity ranker module for the Air Quality System.

This module compares a current reading against a set of reference samples.
Similarity is the inverse of the root-mean-square difference over the keys
both readings share, so identical vectors score 1 and similarity falls towards
0 as readings diverge. The ranked output feeds the composite scorer's
similarity adjustment and the dashboard's best/worst match display.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


@dataclass(frozen=True)
class SimilarityRecord:
    """
    A ranked comparison between the current reading and one reference.

    Attributes:
        id: 1-based position of the reference in the supplied sequence
        similarity: Similarity in [0, 1], higher is closer
        reference_data: The reference reading that was compared
    """

    id: int
    similarity: float
    reference_data: Mapping[str, Any]


def _as_finite(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def similarity(current: Mapping[str, Any], reference: Mapping[str, Any]) -> float:
    """
    Computes 1 / (1 + RMS difference) over the keys comparable in both readings.

    A key is comparable when it is present on both sides and both values
    convert to finite numbers. Keys missing from either side are skipped, not
    treated as zero. With no comparable keys the similarity is 0.
    """
    current_values = []
    reference_values = []
    for key, value in current.items():
        if key not in reference:
            continue
        a = _as_finite(value)
        b = _as_finite(reference[key])
        if a is None or b is None:
            continue
        current_values.append(a)
        reference_values.append(b)

    if not current_values:
        return 0.0

    diff = np.asarray(current_values) - np.asarray(reference_values)
    distance = float(np.sqrt(np.mean(np.square(diff))))
    return 1.0 / (1.0 + distance)


def rank(
    current: Mapping[str, Any],
    references: Sequence[Mapping[str, Any]],
) -> list[SimilarityRecord]:
    """
    Ranks reference readings by similarity to the current reading.

    Ids are assigned 1, 2, ... in the order the references were supplied so
    each record keeps its source identity after sorting. The sort is stable,
    so references with equal similarity keep their input order.

    Args:
        current: The reading being analysed
        references: Previously observed or synthetic readings

    Returns:
        SimilarityRecords sorted by similarity, highest first
    """
    records = [
        SimilarityRecord(id=index, similarity=similarity(current, reference), reference_data=reference)
        for index, reference in enumerate(references, start=1)
    ]
    return sorted(records, key=lambda record: record.similarity, reverse=True)


def best_and_worst(
    records: Sequence[SimilarityRecord],
) -> tuple[Optional[SimilarityRecord], Optional[SimilarityRecord]]:
    """Returns the first and last record of a ranking, or (None, None) if empty."""
    if not records:
        return (None, None)
    return (records[0], records[-1])
