"""
Air quality analyzer module for the Air Quality System.

This module contains the AirQualityAnalyzer class, which orchestrates one
analysis run: it validates the reading, ranks the reference samples by
similarity, computes the composite score, classifies it, and produces the
result together with a human-readable explanation and a log entry. Decisions
can optionally be appended to a persistent log file.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .algorithms import Algorithm
from .analysis_result import AnalysisResult
from .classifier import classify
from .composite_scorer import score
from .explanation import Explanation
from .log_entry import LogEntry
from .pollutant_reading import PollutantReading
from .similarity_ranker import best_and_worst, rank

logger = logging.getLogger(__name__)


class AirQualityAnalyzer:
    """
    Core orchestrator for air quality analysis.

    Coordinates the scoring components: validates readings, runs the
    similarity ranker, the composite scorer and the classifier, and builds
    the explanation and log entry for each run. The scoring components are
    pure; the analyzer's only side effect is the optional persistent log.
    """

    DEFAULT_ALGORITHM = Algorithm.RANDOM_FOREST

    # Logging configuration
    LOG_DIR = Path("logs")
    LOG_FILE_NAME = "analysis_log.log"

    def __init__(self, log_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the analyzer.

        Args:
            log_dir: Directory for the persistent log file. Defaults to LOG_DIR.
                     The directory is only created once something is logged.
        """
        self.log_dir = Path(log_dir) if log_dir is not None else self.LOG_DIR
        self.log_file = self.log_dir / self.LOG_FILE_NAME

    def _ensure_log_file_exists(self) -> None:
        """Create log directory and file header if needed."""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        if not self.log_file.exists():
            with open(self.log_file, 'w', encoding='utf-8') as f:
                f.write("# Air Quality Analysis Log\n")
                f.write("# Format: [TIMESTAMP] SCORE | CATEGORY | ALGORITHM | BEST MATCH | REFERENCES\n")
                f.write("# " + "=" * 80 + "\n\n")

    def _log_analysis(self, log_entry: LogEntry) -> None:
        """
        Append an analysis to the persistent log file.

        Write failures are reported through logging and never interrupt the
        analysis.

        Args:
            log_entry: The log entry describing the run
        """
        timestamp_str = log_entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        result = log_entry.result

        if result is None:
            reason = log_entry.details.get("validation_error", "unknown")
            log_line = f"[{timestamp_str}] REJECTED | {reason}\n"
        else:
            best_str = (
                f"#{result.best_match.id} ({result.best_match.similarity:.4f})"
                if result.best_match is not None else "None"
            )
            log_line = (
                f"[{timestamp_str}] {result.score:3d} | "
                f"{result.category.label:30s} | "
                f"{result.algorithm.value:13s} | "
                f"Best: {best_str:18s} | "
                f"{len(result.similarities)} refs\n"
            )

        try:
            self._ensure_log_file_exists()
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(log_line)
        except OSError as e:
            logger.warning("Could not write analysis log %s: %s", self.log_file, e)

    def analyze(
        self,
        reading: Union[PollutantReading, Mapping[str, float]],
        references: Sequence[Mapping[str, float]] = (),
        algorithm: Union[Algorithm, str] = DEFAULT_ALGORITHM,
        enable_persistent_logging: bool = False
    ) -> tuple[Optional[AnalysisResult], Explanation, LogEntry]:
        """
        Runs a full analysis of a reading.

        Workflow: validation, similarity ranking against the references,
        composite scoring, classification, and result generation.

        Args:
            reading: The pollutant reading to analyse
            references: Reference samples to compare the reading against
            algorithm: Algorithm tag selecting the score multiplier
            enable_persistent_logging: If True, append this run to the log file

        Returns:
            A tuple containing:
            - Optional[AnalysisResult]: The result, or None if the reading is invalid
            - Explanation: Human-readable explanation of the outcome
            - LogEntry: Complete log record of the run

        Raises:
            ValueError: If the algorithm tag is unknown
        """
        algorithm = Algorithm.parse(algorithm)
        if not isinstance(reading, PollutantReading):
            reading = PollutantReading(reading)

        # Step 1: Validate the reading
        valid, reason = reading.validate()
        if not valid:
            explanation = Explanation(f"Input readings invalid: {reason}. No analysis performed.")
            log_entry = LogEntry(
                timestamp=datetime.now(),
                reading=reading,
                result=None,
                details={
                    "validation_error": reason or "unknown",
                    "reason": "Invalid reading",
                    "algorithm": algorithm.value,
                }
            )
            logger.info("Rejected reading: %s", reason)
            if enable_persistent_logging:
                self._log_analysis(log_entry)
            return (None, explanation, log_entry)

        # Step 2: Rank references and score
        similarities = rank(reading, references)
        best_match, worst_match = best_and_worst(similarities)
        aqi_score = score(reading, similarities, algorithm)
        category = classify(aqi_score)

        result = AnalysisResult(
            score=aqi_score,
            category=category,
            similarities=tuple(similarities),
            best_match=best_match,
            worst_match=worst_match,
            reading=reading,
            algorithm=algorithm,
        )

        # Step 3: Build human-readable explanation
        explanation_parts = [
            f"{algorithm.label} analysis scored {aqi_score} ({category.label}).",
            category.description,
        ]
        if best_match is not None:
            explanation_parts.append(
                f"Closest reference sample is #{best_match.id} "
                f"with similarity {best_match.similarity:.4f}."
            )
        else:
            explanation_parts.append("No reference samples were available for comparison.")
        explanation = Explanation(" ".join(explanation_parts))

        log_entry = LogEntry(
            timestamp=datetime.now(),
            reading=reading,
            result=result,
            details={
                "algorithm": algorithm.value,
                "reference_count": str(len(similarities)),
                "best_match_id": str(best_match.id) if best_match is not None else "None",
                "worst_match_id": str(worst_match.id) if worst_match is not None else "None",
            }
        )

        logger.debug("Analysis scored %d (%s) with %s", aqi_score, category.key, algorithm.value)

        if enable_persistent_logging:
            self._log_analysis(log_entry)

        return (result, explanation, log_entry)
