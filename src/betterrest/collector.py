"""Parse and validate the three form inputs before estimation."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from typing import Optional

from betterrest.config.settings import InputLimits
from betterrest.models import InvalidInputError

_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp])\.?[Mm]\.?$")


def parse_wake_time(text: str) -> time:
    """Parse a wake time.

    Accepts 24-hour 'HH:MM' (e.g. '07:00', '22:30') or 12-hour
    'H:MM AM/PM' (e.g. '7:00 am', '10:30PM').

    Raises:
        InvalidInputError: If the text is not a valid time of day
    """
    s = text.strip()

    match = _TIME_12H.match(s)
    if match:
        hh, mm = int(match.group(1)), int(match.group(2))
        if not (1 <= hh <= 12) or not (0 <= mm < 60):
            raise InvalidInputError(f"Time '{s}' out of range.", field="wake_time")
        hh = hh % 12
        if match.group(3).lower() == "p":
            hh += 12
        return time(hh, mm)

    match = _TIME_24H.match(s)
    if not match:
        raise InvalidInputError(
            f"Time '{s}' must be in HH:MM or H:MM AM/PM format.", field="wake_time"
        )
    hh, mm = int(match.group(1)), int(match.group(2))
    if not (0 <= hh < 24) or not (0 <= mm < 60):
        raise InvalidInputError(f"Time '{s}' out of range.", field="wake_time")
    return time(hh, mm)


def default_wake_time(
    text: str = "07:00",
    reference: Optional[datetime] = None,
) -> datetime:
    """Return the initial wake time: today at the configured default.

    Falls back to the reference (or current) time if the configured
    default cannot be parsed.
    """
    now = reference if reference is not None else datetime.now()
    try:
        wake = parse_wake_time(text)
    except InvalidInputError:
        return now
    return datetime.combine(now.date(), wake)


def wake_datetime(wake: time, reference: Optional[date] = None) -> datetime:
    """Place a parsed wake time on the reference date (default today)."""
    day = reference if reference is not None else date.today()
    return datetime.combine(day, wake)


def validate_sleep_goal(hours: float, limits: Optional[InputLimits] = None) -> float:
    """Check a sleep goal lies in range and on the stepper's increments.

    Raises:
        InvalidInputError: If the value is out of range or off-step
    """
    if limits is None:
        limits = InputLimits()

    try:
        value = float(hours)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Sleep amount '{hours}' is not a number.", field="sleep")

    if not math.isfinite(value) or not (limits.sleep_min <= value <= limits.sleep_max):
        raise InvalidInputError(
            f"Sleep amount must be between {limits.sleep_min:g} and "
            f"{limits.sleep_max:g} hours, got {hours}.",
            field="sleep",
        )

    if limits.sleep_step > 0:
        steps = (value - limits.sleep_min) / limits.sleep_step
        if not math.isclose(steps, round(steps), abs_tol=1e-9):
            raise InvalidInputError(
                f"Sleep amount must be in steps of {limits.sleep_step:g} hours, got {hours}.",
                field="sleep",
            )

    return value


def validate_caffeine(cups: int, limits: Optional[InputLimits] = None) -> int:
    """Check a caffeine intake is a whole number of cups in range.

    Raises:
        InvalidInputError: If the value is fractional or out of range
    """
    if limits is None:
        limits = InputLimits()

    if isinstance(cups, bool):
        raise InvalidInputError(f"Coffee amount '{cups}' is not a number.", field="coffee")
    try:
        value = float(cups)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Coffee amount '{cups}' is not a number.", field="coffee")

    if not value.is_integer():
        raise InvalidInputError(
            f"Coffee amount must be a whole number of cups, got {cups}.", field="coffee"
        )

    count = int(value)
    if not (limits.coffee_min <= count <= limits.coffee_max):
        raise InvalidInputError(
            f"Coffee amount must be between {limits.coffee_min} and "
            f"{limits.coffee_max} cups, got {cups}.",
            field="coffee",
        )
    return count


def sleep_label(hours: float) -> str:
    """Stepper label, e.g. '8 hours' or '8.25 hours'."""
    return f"{hours:g} hours"


def coffee_label(cups: int) -> str:
    """Stepper label with inflection, e.g. '1 cup' or '3 cups'."""
    return f"{cups} cup" if cups == 1 else f"{cups} cups"
