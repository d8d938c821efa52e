"""BetterRest: bedtime recommendations from a sleep regression model."""

__version__ = "0.1.0"
