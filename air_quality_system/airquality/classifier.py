"""
Classifier module for the Air Quality System.

Maps a composite score to one of six ordered AQI categories. The mapping is
total: negative scores land in GOOD and anything above 300 in HAZARDOUS, so the
classifier does not rely on callers having clamped the score.
"""

from enum import Enum


class AQICategory(Enum):
    """
    Ordered AQI categories.

    Attributes (per member):
        key: Stable identifier
        upper_bound: Highest score (inclusive) belonging to the category
        label: Human-readable name
        description: Health guidance shown with the result
        color: Display color used by the dashboard
    """

    GOOD = ("good", 50, "Good", "Air quality is satisfactory and poses little or no risk.", "#22c55e")
    MODERATE = (
        "moderate", 100, "Moderate",
        "Air quality is acceptable; unusually sensitive people should limit prolonged exertion.",
        "#eab308",
    )
    UNHEALTHY_FOR_SENSITIVE = (
        "unhealthy-for-sensitive", 150, "Unhealthy for Sensitive Groups",
        "Members of sensitive groups may experience health effects.",
        "#f97316",
    )
    UNHEALTHY = (
        "unhealthy", 200, "Unhealthy",
        "Everyone may begin to experience health effects.",
        "#ef4444",
    )
    VERY_UNHEALTHY = (
        "very-unhealthy", 300, "Very Unhealthy",
        "Health alert: the risk of health effects is increased for everyone.",
        "#a855f7",
    )
    HAZARDOUS = (
        "hazardous", 500, "Hazardous",
        "Health warning of emergency conditions: everyone is likely to be affected.",
        "#e11d48",
    )

    def __init__(self, key: str, upper_bound: int, label: str, description: str, color: str):
        self.key = key
        self.upper_bound = upper_bound
        self.label = label
        self.description = description
        self.color = color

    @property
    def lower_bound(self) -> int:
        members = list(type(self))
        index = members.index(self)
        return 0 if index == 0 else members[index - 1].upper_bound + 1

    def __lt__(self, other: "AQICategory") -> bool:
        if not isinstance(other, AQICategory):
            return NotImplemented
        return self.upper_bound < other.upper_bound


def classify(score: float) -> AQICategory:
    """
    Returns the AQI category for a score; upper bounds are inclusive.

    Scores above 300 are HAZARDOUS, including scores above 500.
    """
    for category in AQICategory:
        if category is AQICategory.HAZARDOUS:
            break
        if score <= category.upper_bound:
            return category
    return AQICategory.HAZARDOUS
