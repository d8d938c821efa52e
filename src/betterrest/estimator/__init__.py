"""Bedtime estimation."""

from betterrest.estimator.bedtime import (
    BedtimeEstimator,
    anchor_wake_time,
    build_features,
    compute_bedtime,
    estimate,
    subtract_duration,
    wake_seconds,
)

__all__ = [
    "BedtimeEstimator",
    "anchor_wake_time",
    "build_features",
    "compute_bedtime",
    "estimate",
    "subtract_duration",
    "wake_seconds",
]
