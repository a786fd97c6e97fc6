"""
Prediction service module for the Air Quality System.

This module contains the PredictionService class which returns per-model
"predicted efficiency category" labels for a reading, for display next to the
local analysis. Supports two modes:
- "mock": Deterministic predictions from the local scorer (offline, always available)
- "remote": Forwards the reading as JSON to the external prediction API
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

import requests
from dotenv import load_dotenv

from .algorithms import Algorithm
from .classifier import classify
from .composite_scorer import score
from .metrics_ranking import rerank_metrics

load_dotenv()  # Load environment variables from .env file

logger = logging.getLogger(__name__)

DEFAULT_PREDICTION_URL = "https://air-anlalysis-models.onrender.com/predict"
DEFAULT_TIMEOUT_SECONDS = 30.0

MODES = ("mock", "remote")

# Keys used by the external API payload
MODEL_KEY = "Model"
CATEGORY_KEY = "Predicted Efficiency Category"
ACCURACY_KEY = "Accuracy"


@dataclass(frozen=True)
class ModelPrediction:
    """
    A single model's predicted category.

    Attributes:
        model: Model display name
        predicted_category: Category label predicted by the model
    """

    model: str
    predicted_category: str


@dataclass(frozen=True)
class PredictionReport:
    """
    Predictions and performance metrics returned for one reading.

    Attributes:
        predictions: One prediction per model
        metrics: Model name -> metric name -> value (may be empty)
        source: "mock" or "remote", whichever produced the report
    """

    predictions: tuple[ModelPrediction, ...]
    metrics: dict[str, dict[str, float]] = field(default_factory=dict)
    source: str = "mock"

    def best_model(self) -> Optional[str]:
        """
        Returns the model with the highest accuracy, or None without metrics.

        The first model wins ties.
        """
        best_name = None
        best_accuracy = None
        for model, model_metrics in self.metrics.items():
            accuracy = model_metrics.get(ACCURACY_KEY)
            if accuracy is None:
                continue
            if best_accuracy is None or accuracy > best_accuracy:
                best_name, best_accuracy = model, accuracy
        return best_name


class PredictionServiceError(Exception):
    """Raised when the remote prediction API returns an unusable response."""


class PredictionService:
    """
    Service for obtaining per-model predictions for a reading.

    Supports two operation modes:
    - "mock": Scores the reading locally once per Algorithm (default, offline)
    - "remote": POSTs the reading to the prediction API

    Mode is selected via the AIRQUALITY_PREDICTION_MODE environment variable or
    the constructor parameter. If a remote call fails, the service logs the
    failure and falls back to mock behavior.
    """

    def __init__(
        self,
        mode: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize PredictionService with specified mode or from environment.

        Args:
            mode: Optional mode override ("mock" or "remote"). If None, reads
                  AIRQUALITY_PREDICTION_MODE. Defaults to "mock" if not
                  specified or invalid.
            url: Prediction endpoint. Defaults to AIRQUALITY_PREDICTION_URL or
                 the public endpoint.
            timeout: Request timeout in seconds. Defaults to
                     AIRQUALITY_PREDICTION_TIMEOUT or 30.
            session: Optional requests session (shared connection pool)
        """
        requested = (mode or os.getenv("AIRQUALITY_PREDICTION_MODE", "")).lower()
        if requested and requested not in MODES:
            logger.warning("Unknown prediction mode %r, using mock mode", requested)
        self.mode = requested if requested in MODES else "mock"

        self.url = url or os.getenv("AIRQUALITY_PREDICTION_URL") or DEFAULT_PREDICTION_URL
        self.timeout = timeout if timeout is not None else self._timeout_from_env()
        self._session = session or requests.Session()

    @staticmethod
    def _timeout_from_env() -> float:
        raw = os.getenv("AIRQUALITY_PREDICTION_TIMEOUT")
        if not raw:
            return DEFAULT_TIMEOUT_SECONDS
        try:
            return float(raw)
        except ValueError:
            logger.warning("Invalid AIRQUALITY_PREDICTION_TIMEOUT %r, using %s s", raw, DEFAULT_TIMEOUT_SECONDS)
            return DEFAULT_TIMEOUT_SECONDS

    def get_predictions(
        self,
        reading: Mapping[str, float],
        enhance_metrics: bool = False,
    ) -> PredictionReport:
        """
        Gets per-model predictions for a reading.

        Delegates to mock or remote implementation based on configured mode.
        In remote mode, falls back to mock if the API call fails.

        Args:
            reading: Pollutant key -> concentration
            enhance_metrics: If True, pass returned metrics through rerank_metrics

        Returns:
            A PredictionReport
        """
        if self.mode == "remote":
            try:
                report = self._predict_remote(reading)
            except (requests.RequestException, PredictionServiceError) as e:
                logger.warning("Prediction API call failed, falling back to mock: %s", e)
                report = self._predict_mock(reading)
        else:
            report = self._predict_mock(reading)

        if enhance_metrics and report.metrics:
            report = PredictionReport(
                predictions=report.predictions,
                metrics=rerank_metrics(report.metrics),
                source=report.source,
            )
        return report

    def _predict_mock(self, reading: Mapping[str, float]) -> PredictionReport:
        """
        Mock implementation: one prediction per Algorithm from the local scorer.

        Args:
            reading: Pollutant key -> concentration

        Returns:
            PredictionReport without metrics
        """
        predictions = tuple(
            ModelPrediction(
                model=algorithm.label,
                predicted_category=classify(score(reading, [], algorithm)).label,
            )
            for algorithm in Algorithm
        )
        return PredictionReport(predictions=predictions, source="mock")

    def _predict_remote(self, reading: Mapping[str, float]) -> PredictionReport:
        """
        Remote implementation: forwards the reading to the prediction API.

        Raises:
            requests.RequestException: On transport errors or non-2xx status
            PredictionServiceError: If the response payload is malformed
        """
        payload = {key: float(value) for key, value in reading.items()}
        logger.debug("Sending reading to prediction API %s", self.url)

        response = self._session.post(self.url, json=payload, timeout=self.timeout)
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise PredictionServiceError(f"Response is not JSON: {e}") from e

        return self._parse_report(data)

    @staticmethod
    def _parse_report(data: object) -> PredictionReport:
        """
        Parse the API payload into a PredictionReport.

        Raises:
            PredictionServiceError: If required fields are missing or mistyped
        """
        if not isinstance(data, dict):
            raise PredictionServiceError("Response payload must be a JSON object")

        if "error" in data:
            raise PredictionServiceError(f"API returned error: {data['error']}")

        raw_predictions = data.get("predictions")
        if not isinstance(raw_predictions, list):
            raise PredictionServiceError("Response is missing a 'predictions' list")

        predictions = []
        for item in raw_predictions:
            if not isinstance(item, dict) or MODEL_KEY not in item or CATEGORY_KEY not in item:
                raise PredictionServiceError(f"Malformed prediction entry: {item!r}")
            predictions.append(ModelPrediction(str(item[MODEL_KEY]), str(item[CATEGORY_KEY])))

        raw_metrics = data.get("metrics") or {}
        if not isinstance(raw_metrics, dict):
            raise PredictionServiceError("'metrics' must be a JSON object")
        # Only numeric metric values can be ranked
        metrics = {
            str(model): {
                str(name): value
                for name, value in values.items()
                if isinstance(value, (int, float)) and not isinstance(value, bool)
            }
            for model, values in raw_metrics.items()
            if isinstance(values, dict)
        }

        return PredictionReport(predictions=tuple(predictions), metrics=metrics, source="remote")
