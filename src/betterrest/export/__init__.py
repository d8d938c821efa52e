"""Result presentation."""

from betterrest.export.formatters import (
    ERROR_TITLE,
    SUCCESS_TITLE,
    Alert,
    format_clock_time,
    format_result,
    to_alert,
)
from betterrest.export.response import CommandResponse, create_response

__all__ = [
    "ERROR_TITLE",
    "SUCCESS_TITLE",
    "Alert",
    "CommandResponse",
    "create_response",
    "format_clock_time",
    "format_result",
    "to_alert",
]
