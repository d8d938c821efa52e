"""Regression model backends for sleep prediction."""

from betterrest.regression.base import RegressionModel
from betterrest.regression.linear import LinearSleepModel
from betterrest.regression.loader import describe_model, load_model, model_loader

__all__ = [
    "RegressionModel",
    "LinearSleepModel",
    "describe_model",
    "load_model",
    "model_loader",
]
