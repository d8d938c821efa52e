"""Pytest fixtures for betterrest tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from betterrest.models import SleepFeatures, SleepPrediction


class ConstantModel:
    """Regression stand-in that always predicts the same duration."""

    def __init__(self, actual_sleep: float):
        self.actual_sleep = actual_sleep
        self.calls: list[SleepFeatures] = []

    def predict(self, features: SleepFeatures) -> SleepPrediction:
        self.calls.append(features)
        return SleepPrediction(actual_sleep=self.actual_sleep)


class GoalModel:
    """Predicts exactly the requested sleep goal."""

    def predict(self, features: SleepFeatures) -> SleepPrediction:
        return SleepPrediction(actual_sleep=features.estimated_sleep * 3600)


class FailingModel:
    """Regression stand-in whose inference always errors."""

    def predict(self, features: SleepFeatures) -> SleepPrediction:
        raise RuntimeError("inference exploded")


@pytest.fixture
def constant_model():
    """Model predicting 8 hours."""
    return ConstantModel(8 * 3600)


@pytest.fixture
def goal_model():
    return GoalModel()


@pytest.fixture
def failing_model():
    return FailingModel()


@pytest.fixture
def linear_artifact(tmp_path: Path) -> Path:
    """Write a simple linear model: actualSleep = 3600 * estimatedSleep + 600 * coffee."""
    path = tmp_path / "model.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "model": "TestCalculator",
                "type": "linear_regression",
                "target": "actualSleep",
                "intercept": 0.0,
                "coefficients": {"wake": 0.0, "estimatedSleep": 3600.0, "coffee": 600.0},
                "metadata": {"rmse_seconds": 120.0},
            }
        )
    )
    return path


@pytest.fixture
def config_file(tmp_path: Path, linear_artifact: Path) -> Path:
    """Config pointing at the test artifact with a 24h clock."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "model": {"backend": "linear", "path": str(linear_artifact)},
                "defaults": {"clock": "24h"},
            }
        )
    )
    return path


@pytest.fixture
def broken_config_file(tmp_path: Path) -> Path:
    """Config pointing at a model artifact that does not exist."""
    path = tmp_path / "broken.yaml"
    path.write_text(
        yaml.safe_dump({"model": {"backend": "linear", "path": str(tmp_path / "missing.yaml")}})
    )
    return path
