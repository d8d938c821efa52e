"""Linear regression backend stored as a YAML artifact.

The artifact holds the fitted intercept and one coefficient per feature:

    model: SleepCalculator
    type: linear_regression
    target: actualSleep
    intercept: 1200.0
    coefficients:
      wake: -0.0125
      estimatedSleep: 3540.0
      coffee: 640.0
    metadata:
      rmse_seconds: 178.0

Prediction is intercept + coefficients . features, in seconds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import numpy as np
import yaml

from betterrest.models import (
    FEATURE_NAMES,
    TARGET_NAME,
    ModelConfigurationError,
    ModelLoadError,
    PredictionError,
    SleepFeatures,
    SleepPrediction,
)


class LinearSleepModel:
    """Evaluate a linear regression over the sleep features."""

    def __init__(
        self,
        intercept: float,
        coefficients: np.ndarray,
        name: str = "SleepCalculator",
        metadata: Optional[dict[str, Any]] = None,
    ):
        coefficients = np.asarray(coefficients, dtype=float)
        if coefficients.shape != (len(FEATURE_NAMES),):
            raise ModelConfigurationError(
                f"Expected {len(FEATURE_NAMES)} coefficients, got shape {coefficients.shape}"
            )
        if not np.isfinite(intercept) or not np.all(np.isfinite(coefficients)):
            raise ModelConfigurationError("Model weights must be finite numbers")

        self.intercept = float(intercept)
        self.coefficients = coefficients
        self.name = name
        self.metadata = metadata or {}

    @classmethod
    def from_dict(cls, data: Any) -> "LinearSleepModel":
        """Build a model from parsed artifact contents.

        Raises:
            ModelConfigurationError: If the artifact is malformed
        """
        if not isinstance(data, dict):
            raise ModelConfigurationError("Model artifact must be a mapping")

        model_type = data.get("type", "linear_regression")
        if model_type != "linear_regression":
            raise ModelConfigurationError(f"Unsupported model type: {model_type}")

        target = data.get("target", TARGET_NAME)
        if target != TARGET_NAME:
            raise ModelConfigurationError(
                f"Model predicts '{target}', expected '{TARGET_NAME}'"
            )

        raw_coefficients = data.get("coefficients")
        if not isinstance(raw_coefficients, dict):
            raise ModelConfigurationError("Model artifact is missing 'coefficients'")

        missing = [name for name in FEATURE_NAMES if name not in raw_coefficients]
        if missing:
            raise ModelConfigurationError(
                f"Model artifact is missing coefficients for: {', '.join(missing)}"
            )
        unknown = sorted(set(raw_coefficients) - set(FEATURE_NAMES))
        if unknown:
            raise ModelConfigurationError(
                f"Model artifact has unknown features: {', '.join(unknown)}"
            )

        try:
            intercept = float(data.get("intercept", 0.0))
            coefficients = np.array(
                [float(raw_coefficients[name]) for name in FEATURE_NAMES]
            )
        except (TypeError, ValueError) as e:
            raise ModelConfigurationError(f"Model weights must be numeric: {e}") from e

        return cls(
            intercept=intercept,
            coefficients=coefficients,
            name=str(data.get("model", "SleepCalculator")),
            metadata=data.get("metadata") or {},
        )

    @classmethod
    def from_file(cls, path: Path) -> "LinearSleepModel":
        """Load a model artifact from YAML.

        Raises:
            ModelLoadError: If the file is missing or unreadable
            ModelConfigurationError: If the contents are malformed
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ModelLoadError(f"Model artifact not found: {path}", path) from e
        except OSError as e:
            raise ModelLoadError(f"Could not read model artifact {path}: {e}", path) from e
        except yaml.YAMLError as e:
            raise ModelConfigurationError(f"Model artifact {path} is not valid YAML: {e}") from e

        return cls.from_dict(data)

    def predict(self, features: SleepFeatures) -> SleepPrediction:
        """Predict actual sleep in seconds."""
        if not features.is_finite():
            raise PredictionError(f"Features must be finite: {features}")

        actual_sleep = self.intercept + float(np.dot(self.coefficients, features.as_array()))
        if not np.isfinite(actual_sleep):
            raise PredictionError("Model produced a non-finite prediction")

        return SleepPrediction(actual_sleep=actual_sleep)

    def describe(self) -> dict[str, Any]:
        """Return a summary of the model for display."""
        return {
            "name": self.name,
            "type": "linear_regression",
            "target": TARGET_NAME,
            "intercept": self.intercept,
            "coefficients": dict(zip(FEATURE_NAMES, self.coefficients.tolist())),
            "metadata": dict(self.metadata),
        }
