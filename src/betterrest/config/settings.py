"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

MODEL_BACKENDS = ("linear", "joblib")
CLOCK_FORMATS = ("12h", "24h")
OUTPUT_FORMATS = ("table", "plain", "json")


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".betterrest"


def default_config_path() -> Path:
    """Return the default configuration file path."""
    return _default_config_dir() / "config.yaml"


def bundled_model_path() -> Path:
    """Return the path of the SleepCalculator artifact shipped with the package."""
    return Path(__file__).resolve().parent.parent / "data" / "sleep_calculator.yaml"


@dataclass
class ModelConfig:
    """Regression model configuration."""

    backend: str = "linear"  # "linear" or "joblib"
    path: Optional[Path] = None  # None uses the bundled artifact

    def resolved_path(self) -> Path:
        """Return the artifact path, falling back to the bundled model."""
        return self.path if self.path is not None else bundled_model_path()


@dataclass
class InputLimits:
    """Domain of the values the input collector accepts."""

    sleep_min: float = 4.0
    sleep_max: float = 12.0
    sleep_step: float = 0.25
    coffee_min: int = 1
    coffee_max: int = 20


@dataclass
class DefaultsConfig:
    """Initial form values and output preferences."""

    wake_time: str = "07:00"
    sleep_amount: float = 8.0
    coffee_amount: int = 1
    clock: str = "12h"  # "12h" or "24h"
    output_format: str = "table"  # "table", "plain", "json"


@dataclass
class Settings:
    """Main application settings."""

    model: ModelConfig = field(default_factory=ModelConfig)
    inputs: InputLimits = field(default_factory=InputLimits)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.betterrest/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse model config
        if "model" in data:
            model_data = data["model"] or {}
            if "backend" in model_data:
                settings.model.backend = str(model_data["backend"])
            if model_data.get("path"):
                path = Path(model_data["path"]).expanduser()
                # Relative artifact paths are relative to the config file
                if not path.is_absolute():
                    path = config_path.parent / path
                settings.model.path = path

        # Parse input limits
        if "inputs" in data:
            in_data = data["inputs"] or {}
            if "sleep_min" in in_data:
                settings.inputs.sleep_min = float(in_data["sleep_min"])
            if "sleep_max" in in_data:
                settings.inputs.sleep_max = float(in_data["sleep_max"])
            if "sleep_step" in in_data:
                settings.inputs.sleep_step = float(in_data["sleep_step"])
            if "coffee_min" in in_data:
                settings.inputs.coffee_min = int(in_data["coffee_min"])
            if "coffee_max" in in_data:
                settings.inputs.coffee_max = int(in_data["coffee_max"])

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "wake_time" in def_data:
                settings.defaults.wake_time = str(def_data["wake_time"])
            if "sleep_amount" in def_data:
                settings.defaults.sleep_amount = float(def_data["sleep_amount"])
            if "coffee_amount" in def_data:
                settings.defaults.coffee_amount = int(def_data["coffee_amount"])
            if "clock" in def_data:
                settings.defaults.clock = str(def_data["clock"])
            if "output_format" in def_data:
                settings.defaults.output_format = str(def_data["output_format"])

        return settings

    def to_dict(self) -> dict:
        """Convert to the YAML document layout."""
        return {
            "model": {
                "backend": self.model.backend,
                "path": str(self.model.path) if self.model.path else None,
            },
            "inputs": {
                "sleep_min": self.inputs.sleep_min,
                "sleep_max": self.inputs.sleep_max,
                "sleep_step": self.inputs.sleep_step,
                "coffee_min": self.inputs.coffee_min,
                "coffee_max": self.inputs.coffee_max,
            },
            "defaults": {
                "wake_time": self.defaults.wake_time,
                "sleep_amount": self.defaults.sleep_amount,
                "coffee_amount": self.defaults.coffee_amount,
                "clock": self.defaults.clock,
                "output_format": self.defaults.output_format,
            },
        }

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.betterrest/config.yaml
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
