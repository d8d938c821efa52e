"""Bedtime estimation from wake time, sleep goal and caffeine intake.

The regression model predicts how long the user will actually sleep
(in seconds) given:

    wake           seconds after midnight of the desired wake time
    estimatedSleep hours of sleep the user wants
    coffee         cups of coffee per day

The recommended bedtime is the wake time minus that prediction:

    bedtime = wake_time - actualSleep

The subtraction is done in absolute time, so the bedtime is exactly
actualSleep seconds before waking even across a daylight saving change.
Crossing midnight lands on the previous day: a 07:00 wake time with a
9 hour prediction gives 22:00 the day before.

Every failure while loading or evaluating the model collapses into a single
BedtimeFailure carrying FAILURE_MESSAGE. Nothing is retried or logged here;
callers that want the cause pass on_error, or use compute_bedtime() and
inspect __cause__.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, Optional, Union

from betterrest.models import (
    FAILURE_MESSAGE,
    BedtimeFailure,
    BedtimeSuccess,
    EstimationFailure,
    EstimationResult,
    ModelConfigurationError,
    PredictionError,
    SleepFeatures,
)
from betterrest.regression.base import RegressionModel

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

ModelSource = Union[RegressionModel, Callable[[], RegressionModel]]
FailureHandler = Callable[[EstimationFailure], None]


def _component(value: Any, name: str) -> int:
    """Read an integer clock component, treating anything unusable as 0."""
    raw = getattr(value, name, None)
    if raw is None:
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError):
        return 0


def wake_seconds(wake_time: Any) -> int:
    """Convert the hour and minute of wake_time to seconds after midnight.

    Seconds and the date portion are ignored. Missing or unparseable
    components count as 0, so this never raises.

    Example:
        >>> wake_seconds(time(7, 0))
        25200
    """
    hour = _component(wake_time, "hour")
    minute = _component(wake_time, "minute")
    return hour * SECONDS_PER_HOUR + minute * SECONDS_PER_MINUTE


def anchor_wake_time(wake_time: Any, reference: Optional[date] = None) -> datetime:
    """Return wake_time as a datetime.

    A datetime is returned unchanged. A time (or anything with hour and
    minute attributes) is placed on the reference date, today by default.
    """
    if isinstance(wake_time, datetime):
        return wake_time

    day = reference if reference is not None else date.today()
    if isinstance(wake_time, time):
        return datetime.combine(day, wake_time)

    seconds = wake_seconds(wake_time)
    return datetime.combine(day, time()) + timedelta(seconds=seconds)


def build_features(
    wake_time: Any,
    sleep_goal_hours: float,
    caffeine_cups: int,
) -> SleepFeatures:
    """Normalize the three user inputs into a model input row."""
    return SleepFeatures(
        wake=float(wake_seconds(wake_time)),
        estimated_sleep=float(sleep_goal_hours),
        coffee=float(caffeine_cups),
    )


def subtract_duration(moment: datetime, duration: timedelta) -> datetime:
    """Return the instant duration before moment, keeping moment's kind.

    Naive datetimes are read as local time. The result is naive local
    time for a naive moment and in moment's zone for an aware one.
    """
    if moment.tzinfo is not None:
        return (moment.astimezone(timezone.utc) - duration).astimezone(moment.tzinfo)
    return (moment.astimezone() - duration).astimezone().replace(tzinfo=None)


def _resolve_model(model: ModelSource) -> RegressionModel:
    if hasattr(model, "predict"):
        return model  # type: ignore[return-value]
    if callable(model):
        return model()
    raise ModelConfigurationError(
        f"Expected a regression model or loader, got {type(model).__name__}"
    )


def compute_bedtime(
    wake_time: Any,
    sleep_goal_hours: float,
    caffeine_cups: int,
    model: ModelSource,
    reference: Optional[date] = None,
) -> datetime:
    """Compute the recommended bedtime, raising on failure.

    Args:
        wake_time: Desired wake time (datetime, time, or hour/minute object)
        sleep_goal_hours: Desired hours of sleep
        caffeine_cups: Cups of coffee per day
        model: A loaded RegressionModel, or a zero-argument loader
               called here so load failures surface as estimation failures
        reference: Date a bare time is placed on (default today)

    Returns:
        Bedtime as a datetime

    Raises:
        EstimationFailure: Model loading, configuration or inference failed.
            The underlying exception is chained as __cause__.
    """
    try:
        features = build_features(wake_time, sleep_goal_hours, caffeine_cups)
        prediction = _resolve_model(model).predict(features)
        if not prediction.is_finite():
            raise PredictionError("Model produced a non-finite prediction")
        return subtract_duration(anchor_wake_time(wake_time, reference), prediction.duration)
    except EstimationFailure:
        raise
    except Exception as e:
        raise EstimationFailure(FAILURE_MESSAGE) from e


def estimate(
    wake_time: Any,
    sleep_goal_hours: float,
    caffeine_cups: int,
    model: ModelSource,
    reference: Optional[date] = None,
    on_error: Optional[FailureHandler] = None,
) -> EstimationResult:
    """Estimate the ideal bedtime.

    Args:
        on_error: Called with the EstimationFailure (cause chained) before
                  the fixed-message result is returned

    Returns:
        BedtimeSuccess with the bedtime, or BedtimeFailure with the fixed
        message. Never raises for model problems.
    """
    try:
        bedtime = compute_bedtime(
            wake_time, sleep_goal_hours, caffeine_cups, model, reference=reference
        )
    except EstimationFailure as e:
        if on_error is not None:
            on_error(e)
        return BedtimeFailure(FAILURE_MESSAGE)
    return BedtimeSuccess(bedtime=bedtime)


class BedtimeEstimator:
    """Bind a model source so the estimator can be called with inputs only.

    With a loader, the model is loaded on every call, so a fixed artifact
    or configuration takes effect on the next estimate.
    """

    def __init__(self, model: ModelSource, on_error: Optional[FailureHandler] = None):
        self.model = model
        self.on_error = on_error

    def estimate(
        self,
        wake_time: Any,
        sleep_goal_hours: float,
        caffeine_cups: int,
        reference: Optional[date] = None,
    ) -> EstimationResult:
        return estimate(
            wake_time,
            sleep_goal_hours,
            caffeine_cups,
            self.model,
            reference=reference,
            on_error=self.on_error,
        )
