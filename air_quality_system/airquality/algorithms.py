"""
Algorithm tag module for the Air Quality System.

The dashboard lets users pick a "model" to run the analysis with. The choice
carries no real algorithmic behavior: each tag only selects a fixed scalar
multiplier applied by the composite scorer, plus display text.
"""

from enum import Enum
from typing import Union


class Algorithm(str, Enum):
    """
    Enumerated analysis algorithm tags.

    Attributes (per member):
        multiplier: Scalar applied to the composite score
        label: Human-readable name
        description: One-line description shown next to the selector
    """

    NAIVE_BAYES = (
        "naive-bayes", 0.95, "Naïve Bayes",
        "Probabilistic classifier based on Bayes' theorem",
    )
    KNN = (
        "knn", 1.05, "K-Nearest Neighbors (KNN)",
        "Uses proximity to make classifications or predictions",
    )
    SVM = (
        "svm", 1.00, "Support Vector Machine (SVM)",
        "Classification algorithm that finds the optimal hyperplane",
    )
    RANDOM_FOREST = (
        "random-forest", 1.02, "Random Forest",
        "Ensemble learning method using multiple decision trees",
    )

    def __new__(cls, tag: str, multiplier: float, label: str, description: str):
        obj = str.__new__(cls, tag)
        obj._value_ = tag
        obj.multiplier = multiplier
        obj.label = label
        obj.description = description
        return obj

    @classmethod
    def parse(cls, tag: Union["Algorithm", str]) -> "Algorithm":
        """
        Resolves a tag in any common spelling to an Algorithm member.

        Accepts members as-is, and strings in any case with either hyphens or
        underscores ("random_forest", "Random-Forest").

        Raises:
            ValueError: If the tag names no known algorithm
        """
        if isinstance(tag, cls):
            return tag
        normalized = str(tag).strip().lower().replace("_", "-").replace(" ", "-")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown algorithm tag: {tag!r}") from None
