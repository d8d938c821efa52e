"""Present estimation results as a titled alert."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from betterrest.export.response import create_response
from betterrest.models import BedtimeSuccess, EstimationResult

SUCCESS_TITLE = "Your ideal bedtime is"
ERROR_TITLE = "Error"


@dataclass(frozen=True)
class Alert:
    """A titled message shown once per calculation."""

    title: str
    message: str
    success: bool


def format_clock_time(moment: datetime, clock: str = "12h") -> str:
    """Short time-of-day text, '10:42 PM' (12h) or '22:42' (24h)."""
    if clock == "24h":
        return f"{moment.hour:02d}:{moment.minute:02d}"
    if clock != "12h":
        raise ValueError(f"Unknown clock format: {clock}")

    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def to_alert(result: EstimationResult, clock: str = "12h") -> Alert:
    """Map an estimation result onto the alert the user sees."""
    if isinstance(result, BedtimeSuccess):
        return Alert(
            title=SUCCESS_TITLE,
            message=format_clock_time(result.bedtime, clock),
            success=True,
        )
    return Alert(title=ERROR_TITLE, message=result.reason, success=False)


class TableFormatter:
    """Render the alert as a Rich panel."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(self, alert: Alert, inputs: Optional[dict] = None) -> None:
        """Print the alert panel, with the inputs it was computed from."""
        color = "green" if alert.success else "red"
        body = f"[bold {color}]{alert.message}[/bold {color}]"
        if inputs:
            details = "  ".join(f"{k}: {v}" for k, v in inputs.items())
            body += f"\n[dim]{details}[/dim]"
        self.console.print(Panel(body, title=alert.title, title_align="left", expand=False))


class PlainFormatter:
    """Two lines of plain text: title, then message."""

    def format(self, alert: Alert) -> str:
        return f"{alert.title}\n{alert.message}"


class JSONFormatter:
    """Format results as JSON for programmatic use."""

    def format(
        self,
        result: EstimationResult,
        alert: Alert,
        inputs: Optional[dict] = None,
    ) -> str:
        """Return JSON string.

        Args:
            result: Estimation result
            alert: Alert derived from the result
            inputs: The wake/sleep/coffee values used

        Returns:
            JSON string
        """
        data: dict = {
            "title": alert.title,
            "message": alert.message,
            "inputs": inputs or {},
        }
        if isinstance(result, BedtimeSuccess):
            data["bedtime"] = result.bedtime.isoformat(timespec="seconds")

        response = create_response(
            command="calculate",
            success=alert.success,
            data=data,
            errors=[] if alert.success else [alert.message],
            human_summary=f"{alert.title} {alert.message}" if alert.success else alert.message,
        )
        return response.to_json()


def format_result(
    result: EstimationResult,
    output_format: str = "table",
    clock: str = "12h",
    inputs: Optional[dict] = None,
    console: Optional[Console] = None,
) -> Optional[str]:
    """Format an estimation result in the specified format.

    Args:
        result: Estimation result to format
        output_format: One of 'table', 'plain', 'json'
        clock: '12h' or '24h'
        inputs: Optional inputs to echo alongside the result
        console: Rich console (for table format)

    Returns:
        Formatted string for plain/json, None for table (prints directly)
    """
    alert = to_alert(result, clock)

    if output_format == "table":
        TableFormatter(console).format(alert, inputs)
        return None
    elif output_format == "plain":
        return PlainFormatter().format(alert)
    elif output_format == "json":
        return JSONFormatter().format(result, alert, inputs)
    else:
        raise ValueError(f"Unknown output format: {output_format}")
