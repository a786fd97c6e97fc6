"""
Explanation module for the Air Quality System.

Holds the human-readable explanation produced alongside each analysis.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Explanation:
    """
    Human-readable explanation of an analysis outcome.

    Attributes:
        text: Explanation shown to the user
    """

    text: str
