"""scikit-learn regressors persisted with joblib."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import joblib
import numpy as np
import pandas as pd

from betterrest.models import (
    FEATURE_NAMES,
    TARGET_NAME,
    ModelConfigurationError,
    ModelLoadError,
    PredictionError,
    SleepFeatures,
    SleepPrediction,
)


class SklearnSleepModel:
    """Wrap a fitted regressor exposing ``predict(X)``.

    The regressor must have been fit on columns named
    wake, estimatedSleep and coffee (in any order).
    """

    def __init__(self, estimator: Any, name: str = "SleepCalculator"):
        if not hasattr(estimator, "predict"):
            raise ModelConfigurationError(
                f"{type(estimator).__name__} has no predict() method"
            )

        fitted_names = getattr(estimator, "feature_names_in_", None)
        if fitted_names is not None:
            fitted = [str(n) for n in fitted_names]
            if sorted(fitted) != sorted(FEATURE_NAMES):
                raise ModelConfigurationError(
                    f"Regressor was fit on {fitted}, expected {list(FEATURE_NAMES)}"
                )
            self.columns = fitted
        else:
            self.columns = list(FEATURE_NAMES)

        self.estimator = estimator
        self.name = name

    @classmethod
    def from_file(cls, path: Path) -> "SklearnSleepModel":
        """Load a joblib-persisted regressor.

        Raises:
            ModelLoadError: If the file is missing or cannot be unpickled
            ModelConfigurationError: If the object is not a usable regressor
        """
        path = Path(path)
        if not path.exists():
            raise ModelLoadError(f"Model artifact not found: {path}", path)

        try:
            estimator = joblib.load(path)
        except Exception as e:
            raise ModelLoadError(f"Could not load model artifact {path}: {e}", path) from e

        return cls(estimator, name=path.stem)

    def predict(self, features: SleepFeatures) -> SleepPrediction:
        """Predict actual sleep in seconds."""
        if not features.is_finite():
            raise PredictionError(f"Features must be finite: {features}")

        row = features.as_dict()
        frame = pd.DataFrame([[row[c] for c in self.columns]], columns=self.columns)

        try:
            output = self.estimator.predict(frame)
        except Exception as e:
            raise PredictionError(f"Regressor failed to predict: {e}") from e

        try:
            actual_sleep = float(np.ravel(output)[0])
        except (TypeError, ValueError, IndexError) as e:
            raise PredictionError(f"Unexpected regressor output: {output!r}") from e

        if not math.isfinite(actual_sleep):
            raise PredictionError("Model produced a non-finite prediction")

        return SleepPrediction(actual_sleep=actual_sleep)

    def describe(self) -> dict[str, Any]:
        """Return a summary of the model for display."""
        return {
            "name": self.name,
            "type": type(self.estimator).__name__,
            "target": TARGET_NAME,
            "features": list(self.columns),
        }
