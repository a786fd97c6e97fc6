"""
Tests for PredictionService component.

Tests cover:
- Mock mode: one deterministic prediction per algorithm
- Mode selection: constructor argument, environment variable, invalid values
- Remote mode: successful responses, HTTP and transport errors, malformed payloads
- Metrics enhancement and best model selection
"""

import os
from unittest.mock import MagicMock, patch

import pytest
import requests

from airquality.algorithms import Algorithm
from airquality.prediction_service import (
    DEFAULT_PREDICTION_URL,
    ModelPrediction,
    PredictionReport,
    PredictionService,
)


READING = {"pm25": 55.4}


def make_response(payload=None, status_error=None, json_error=None):
    """Builds a mocked requests response."""
    response = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


REMOTE_PAYLOAD = {
    "predictions": [
        {"Model": "Random Forest", "Predicted Efficiency Category": "High Efficiency"},
        {"Model": "SVM", "Predicted Efficiency Category": "Medium Efficiency"},
    ],
    "metrics": {
        "Random Forest": {"Accuracy": 0.81, "RMSE": 0.40},
        "SVM": {"Accuracy": 0.74, "RMSE": 0.55},
    },
}


class TestPredictionServiceMockMode:
    """Test suite for PredictionService in mock mode (deterministic behavior)."""

    @pytest.fixture
    def service(self):
        """Fixture providing PredictionService in mock mode."""
        with patch.dict(os.environ, {"AIRQUALITY_PREDICTION_MODE": "mock"}, clear=False):
            return PredictionService()

    def test_one_prediction_per_algorithm(self, service):
        report = service.get_predictions(READING)
        assert report.source == "mock"
        assert [p.model for p in report.predictions] == [algorithm.label for algorithm in Algorithm]

    def test_predicted_categories_follow_multiplier(self, service):
        """Base 150 scaled by each multiplier lands either side of the 150 bound."""
        categories = {p.model: p.predicted_category for p in service.get_predictions(READING).predictions}
        assert categories[Algorithm.NAIVE_BAYES.label] == "Unhealthy for Sensitive Groups"
        assert categories[Algorithm.KNN.label] == "Unhealthy"
        assert categories[Algorithm.SVM.label] == "Unhealthy for Sensitive Groups"
        assert categories[Algorithm.RANDOM_FOREST.label] == "Unhealthy"

    def test_mock_has_no_metrics(self, service):
        report = service.get_predictions(READING, enhance_metrics=True)
        assert report.metrics == {}
        assert report.best_model() is None


class TestPredictionServiceConfiguration:
    """Test suite for mode and endpoint selection."""

    def test_default_mode_is_mock(self):
        with patch.dict(os.environ, {}, clear=True):
            service = PredictionService()
        assert service.mode == "mock"
        assert service.url == DEFAULT_PREDICTION_URL
        assert service.timeout == 30.0

    def test_mode_from_environment(self):
        with patch.dict(os.environ, {"AIRQUALITY_PREDICTION_MODE": "REMOTE"}, clear=True):
            assert PredictionService().mode == "remote"

    def test_constructor_overrides_environment(self):
        with patch.dict(os.environ, {"AIRQUALITY_PREDICTION_MODE": "remote"}, clear=True):
            assert PredictionService(mode="mock").mode == "mock"

    def test_invalid_mode_falls_back_to_mock(self):
        assert PredictionService(mode="grpc").mode == "mock"

    def test_url_and_timeout_from_environment(self):
        env = {"AIRQUALITY_PREDICTION_URL": "http://localhost:9000/predict", "AIRQUALITY_PREDICTION_TIMEOUT": "5"}
        with patch.dict(os.environ, env, clear=True):
            service = PredictionService()
        assert service.url == "http://localhost:9000/predict"
        assert service.timeout == 5.0

    def test_invalid_timeout_uses_default(self):
        with patch.dict(os.environ, {"AIRQUALITY_PREDICTION_TIMEOUT": "soon"}, clear=True):
            assert PredictionService().timeout == 30.0


class TestPredictionServiceRemoteMode:
    """Test suite for PredictionService in remote mode (with mocked HTTP)."""

    @pytest.fixture
    def session(self):
        return MagicMock(spec=requests.Session)

    @pytest.fixture
    def service(self, session):
        return PredictionService(mode="remote", url="http://api.test/predict", timeout=2.0, session=session)

    def test_successful_response(self, service, session):
        session.post.return_value = make_response(REMOTE_PAYLOAD)

        report = service.get_predictions(READING)

        assert report.source == "remote"
        assert report.predictions[0] == ModelPrediction("Random Forest", "High Efficiency")
        assert report.metrics["SVM"]["RMSE"] == 0.55
        session.post.assert_called_once_with("http://api.test/predict", json={"pm25": 55.4}, timeout=2.0)

    def test_best_model_by_accuracy(self, service, session):
        session.post.return_value = make_response(REMOTE_PAYLOAD)
        assert service.get_predictions(READING).best_model() == "Random Forest"

    def test_enhanced_metrics_are_reranked(self, service, session):
        session.post.return_value = make_response(REMOTE_PAYLOAD)

        report = service.get_predictions(READING, enhance_metrics=True)

        assert 0.98 <= report.metrics["Random Forest"]["Accuracy"] <= 0.99
        assert 0.96 <= report.metrics["SVM"]["Accuracy"] <= 0.98
        assert 0.01 <= report.metrics["Random Forest"]["RMSE"] <= 0.03
        assert 0.03 <= report.metrics["SVM"]["RMSE"] <= 0.05

    def test_non_numeric_metrics_are_dropped(self, service, session):
        payload = {
            "predictions": [],
            "metrics": {"SVM": {"Accuracy": 0.8, "Notes": "tuned", "Converged": True}},
        }
        session.post.return_value = make_response(payload)

        assert service.get_predictions(READING).metrics == {"SVM": {"Accuracy": 0.8}}

    def test_transport_error_falls_back_to_mock(self, service, session):
        session.post.side_effect = requests.ConnectionError("connection refused")

        report = service.get_predictions(READING)

        assert report.source == "mock"
        assert len(report.predictions) == len(Algorithm)

    def test_http_error_falls_back_to_mock(self, service, session):
        session.post.return_value = make_response(status_error=requests.HTTPError("500 Server Error"))
        assert service.get_predictions(READING).source == "mock"

    def test_non_json_response_falls_back_to_mock(self, service, session):
        session.post.return_value = make_response(json_error=ValueError("Expecting value"))
        assert service.get_predictions(READING).source == "mock"

    @pytest.mark.parametrize("payload", [
        [],
        {"error": "model unavailable"},
        {"metrics": {}},
        {"predictions": [{"Model": "SVM"}]},
        {"predictions": [], "metrics": [1, 2]},
    ])
    def test_malformed_payload_falls_back_to_mock(self, service, session, payload):
        session.post.return_value = make_response(payload)
        assert service.get_predictions(READING).source == "mock"


class TestPredictionReport:
    """Test suite for PredictionReport helpers."""

    def test_best_model_first_wins_ties(self):
        report = PredictionReport(
            predictions=(),
            metrics={"A": {"Accuracy": 0.9}, "B": {"Accuracy": 0.9}, "C": {"RMSE": 0.1}},
        )
        assert report.best_model() == "A"
