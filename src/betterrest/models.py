"""Data models for bedtime estimation requests and results."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

import numpy as np

FAILURE_MESSAGE = "Sorry, there was a problem calculating your bedtime."

# Feature names as the trained SleepCalculator artifact expects them
FEATURE_NAMES = ("wake", "estimatedSleep", "coffee")
TARGET_NAME = "actualSleep"


@dataclass(frozen=True)
class SleepFeatures:
    """Input row for the regression model.

    wake is seconds after midnight, estimated_sleep is hours,
    coffee is a cup count cast to float.
    """

    wake: float
    estimated_sleep: float
    coffee: float

    def as_array(self) -> np.ndarray:
        """Return features in FEATURE_NAMES order."""
        return np.array([self.wake, self.estimated_sleep, self.coffee], dtype=float)

    def as_dict(self) -> dict[str, float]:
        """Return features keyed by their artifact names."""
        return dict(zip(FEATURE_NAMES, self.as_array().tolist()))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.as_array())))


@dataclass(frozen=True)
class SleepPrediction:
    """Model output: predicted actual sleep, in seconds."""

    actual_sleep: float

    @property
    def duration(self) -> timedelta:
        return timedelta(seconds=self.actual_sleep)

    def is_finite(self) -> bool:
        return math.isfinite(self.actual_sleep)


@dataclass(frozen=True)
class BedtimeSuccess:
    """Successful estimation."""

    bedtime: datetime

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class BedtimeFailure:
    """Failed estimation. The reason is the fixed user-facing message."""

    reason: str = FAILURE_MESSAGE

    @property
    def success(self) -> bool:
        return False


EstimationResult = Union[BedtimeSuccess, BedtimeFailure]


# Custom exceptions


class BetterRestError(Exception):
    """Base exception for betterrest errors."""

    pass


class EstimationFailure(BetterRestError):
    """Raised when the model cannot be configured, loaded or evaluated."""

    pass


class ModelConfigurationError(EstimationFailure):
    """Raised when the model configuration or artifact contents are invalid."""

    pass


class ModelLoadError(EstimationFailure):
    """Raised when the model artifact cannot be found or read."""

    def __init__(self, message: str, path: object = None):
        super().__init__(message)
        self.path = path


class PredictionError(EstimationFailure):
    """Raised when inference fails or produces an unusable value."""

    pass


class InvalidInputError(BetterRestError):
    """Raised when a user-supplied input is outside the collector's domain."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field
