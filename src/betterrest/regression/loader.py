"""Select and load the configured regression backend."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from betterrest.config.settings import MODEL_BACKENDS, ModelConfig
from betterrest.models import ModelConfigurationError
from betterrest.regression.base import RegressionModel
from betterrest.regression.linear import LinearSleepModel

logger = logging.getLogger(__name__)


def load_model(config: Optional[ModelConfig] = None) -> RegressionModel:
    """Load the regression model described by config.

    Args:
        config: Model configuration. If None, loads the bundled linear model.

    Returns:
        A model ready for prediction

    Raises:
        ModelConfigurationError: Unknown backend or malformed artifact
        ModelLoadError: Artifact missing or unreadable
    """
    if config is None:
        config = ModelConfig()

    if config.backend not in MODEL_BACKENDS:
        raise ModelConfigurationError(
            f"Unknown model backend '{config.backend}'. "
            f"Expected one of: {', '.join(MODEL_BACKENDS)}"
        )

    path = config.resolved_path()
    logger.debug("Loading %s model from %s", config.backend, path)

    if config.backend == "joblib":
        from betterrest.regression.sklearn_backend import SklearnSleepModel

        return SklearnSleepModel.from_file(path)

    return LinearSleepModel.from_file(path)


def model_loader(config: Optional[ModelConfig] = None) -> Callable[[], RegressionModel]:
    """Return a zero-argument loader bound to config, for call-time loading."""

    def load() -> RegressionModel:
        return load_model(config)

    return load


def describe_model(config: Optional[ModelConfig] = None) -> dict[str, Any]:
    """Load the configured model and summarize it for display."""
    if config is None:
        config = ModelConfig()

    model = load_model(config)
    info: dict[str, Any] = {
        "backend": config.backend,
        "path": str(config.resolved_path()),
        "bundled": config.path is None,
    }
    describe = getattr(model, "describe", None)
    if describe is not None:
        info.update(describe())
    return info
