"""
Analysis result module for the Air Quality System.

This module defines the AnalysisResult dataclass which bundles everything the
presentation layer needs after one analysis run: the composite score, its AQI
category, the ranked similarity records and the best and worst matches.
"""

from dataclasses import dataclass
from typing import Optional

from .algorithms import Algorithm
from .classifier import AQICategory
from .pollutant_reading import PollutantReading
from .similarity_ranker import SimilarityRecord


@dataclass(frozen=True)
class AnalysisResult:
    """
    Represents the outcome of a single analysis run.

    Attributes:
        score: Composite AQI score in [0, 500]
        category: AQI category the score falls into
        similarities: Similarity records, highest similarity first
        best_match: Closest reference sample, or None without references
        worst_match: Furthest reference sample, or None without references
        reading: The reading that was analysed
        algorithm: Algorithm tag the score was computed with
    """

    score: int
    category: AQICategory
    similarities: tuple[SimilarityRecord, ...]
    best_match: Optional[SimilarityRecord]
    worst_match: Optional[SimilarityRecord]
    reading: PollutantReading
    algorithm: Algorithm

    def to_dict(self) -> dict[str, object]:
        """
        Converts the result to a JSON-serializable dictionary.

        Returns:
            A dictionary with the score, category key and label, algorithm tag,
            reading, and similarity records as plain dictionaries
        """
        def record_to_dict(record: Optional[SimilarityRecord]) -> Optional[dict[str, object]]:
            if record is None:
                return None
            return {
                "id": record.id,
                "similarity": record.similarity,
                "data": dict(record.reference_data),
            }

        return {
            "score": self.score,
            "category": self.category.key,
            "label": self.category.label,
            "description": self.category.description,
            "algorithm": self.algorithm.value,
            "reading": self.reading.to_dict(),
            "similarities": [record_to_dict(record) for record in self.similarities],
            "best_match": record_to_dict(self.best_match),
            "worst_match": record_to_dict(self.worst_match),
        }
