"""
Pytest configuration for Air Quality System tests.

Provides shared fixtures.
"""

import pytest

from airquality.air_quality_analyzer import AirQualityAnalyzer


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path, monkeypatch):
    """Point the analyzer's default log directory at a temporary path."""
    monkeypatch.setattr(AirQualityAnalyzer, "LOG_DIR", tmp_path / "default_logs")
