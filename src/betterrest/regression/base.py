"""Regression model interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from betterrest.models import SleepFeatures, SleepPrediction


@runtime_checkable
class RegressionModel(Protocol):
    """A trained model predicting actual sleep from wake time, goal and caffeine.

    Implementations raise an EstimationFailure subclass when a prediction
    cannot be made. Callers treat any other exception the same way.
    """

    def predict(self, features: SleepFeatures) -> SleepPrediction:
        ...
