"""
Log entry module for the Air Quality System.

This module defines the LogEntry dataclass which represents a single log
record for an analysis run. Log entries capture the input reading, the
resulting analysis (if the reading was valid) and free-form details about the
run, for traceability and post-analysis.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .analysis_result import AnalysisResult
from .pollutant_reading import PollutantReading


@dataclass
class LogEntry:
    """
    Represents a single log record for an analysis run.

    Attributes:
        timestamp: When the analysis was made
        reading: The reading that was used as input
        result: The analysis result, or None if the reading was rejected
        details: Additional metadata about the run (e.g. algorithm, reference
                 count, validation errors)
    """

    timestamp: datetime
    reading: PollutantReading
    result: Optional[AnalysisResult]
    details: dict[str, str]

    def to_dict(self) -> dict[str, object]:
        """
        Converts the log entry to a serializable dictionary.

        Returns:
            A dictionary representation of the log entry with all fields
            converted to serializable types
        """
        return {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "reading": self.reading.to_dict(),
            "result": self.result.to_dict() if self.result is not None else None,
            "details": self.details,
        }
