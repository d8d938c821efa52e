"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import FloatPrompt, IntPrompt, Prompt
from rich.table import Table

from betterrest.collector import (
    coffee_label,
    default_wake_time,
    parse_wake_time,
    sleep_label,
    validate_caffeine,
    validate_sleep_goal,
    wake_datetime,
)
from betterrest.config import get_settings, reload_settings
from betterrest.config.settings import (
    CLOCK_FORMATS,
    OUTPUT_FORMATS,
    default_config_path,
)
from betterrest.estimator import estimate
from betterrest.export import create_response, format_result
from betterrest.models import EstimationFailure, InvalidInputError
from betterrest.regression import describe_model, model_loader

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="BetterRest: find your ideal bedtime from your wake time, sleep goal and coffee intake",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

model_app = typer.Typer(help="Inspect the sleep regression model")
config_app = typer.Typer(help="Show or create the configuration file")

app.add_typer(model_app, name="model")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2, default=str)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def log_estimation_failure(failure: EstimationFailure) -> None:
    """Log the cause of a failed estimation; the user only sees the fixed message."""
    logger.warning("Bedtime estimation failed: %s", failure.__cause__ or failure)


def resolve_choice(
    value: Optional[str],
    configured: str,
    choices: tuple[str, ...],
    option: str,
    config_key: str,
) -> str:
    """Pick an option value or its configured default, naming the source on error."""
    expected = ", ".join(choices)
    if value is not None:
        if value not in choices:
            raise typer.BadParameter(f"Expected one of: {expected}", param_hint=option)
        return value
    if configured not in choices:
        raise typer.BadParameter(
            f"Config key '{config_key}' is '{configured}'; expected one of: {expected}"
        )
    return configured


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml (default ~/.betterrest/config.yaml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """BetterRest bedtime calculator."""
    configure_logging(verbose)
    reload_settings(config)


def _ask_inputs(
    wake: datetime, sleep: float, coffee: int
) -> tuple[datetime, float, int]:
    """Prompt for each form field, offering the current values as defaults."""
    settings = get_settings()
    limits = settings.inputs

    while True:
        text = Prompt.ask(
            "When do you want to wake up?", default=wake.strftime("%H:%M"), console=console
        )
        try:
            wake = wake_datetime(parse_wake_time(text))
            break
        except InvalidInputError as e:
            console.print(f"[red]{e}[/red]")

    while True:
        value = FloatPrompt.ask(
            f"Desired amount of sleep ({limits.sleep_min:g}-{limits.sleep_max:g} hours, "
            f"steps of {limits.sleep_step:g})",
            default=sleep,
            console=console,
        )
        try:
            sleep = validate_sleep_goal(value, limits)
            break
        except InvalidInputError as e:
            console.print(f"[red]{e}[/red]")

    while True:
        value = IntPrompt.ask(
            f"Daily coffee intake ({limits.coffee_min}-{limits.coffee_max} cups)",
            default=coffee,
            console=console,
        )
        try:
            coffee = validate_caffeine(value, limits)
            break
        except InvalidInputError as e:
            console.print(f"[red]{e}[/red]")

    return wake, sleep, coffee


# ============================================================================
# Commands
# ============================================================================


@app.command()
def calculate(
    wake: Optional[str] = typer.Option(
        None, "--wake", "-w", help="Wake time, HH:MM or H:MM AM/PM (default from config)"
    ),
    sleep: Optional[float] = typer.Option(
        None, "--sleep", "-s", help="Desired hours of sleep (default from config)"
    ),
    coffee: Optional[int] = typer.Option(
        None, "--coffee", "-c", help="Cups of coffee per day (default from config)"
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Prompt for each value"
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: table, plain, json"
    ),
    clock: Optional[str] = typer.Option(
        None, "--clock", help="Clock format: 12h or 24h"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate your ideal bedtime."""
    settings = get_settings()
    limits = settings.inputs

    if json_output:
        output_format = "json"
    output_format = resolve_choice(
        output_format,
        settings.defaults.output_format,
        OUTPUT_FORMATS,
        "--format",
        "defaults.output_format",
    )
    clock = resolve_choice(
        clock, settings.defaults.clock, CLOCK_FORMATS, "--clock", "defaults.clock"
    )

    try:
        if wake is not None:
            wake_time = wake_datetime(parse_wake_time(wake))
        else:
            wake_time = default_wake_time(settings.defaults.wake_time)
        sleep_goal = validate_sleep_goal(
            sleep if sleep is not None else settings.defaults.sleep_amount, limits
        )
        coffee_cups = validate_caffeine(
            coffee if coffee is not None else settings.defaults.coffee_amount, limits
        )
    except InvalidInputError as e:
        hint = {"wake_time": "--wake", "sleep": "--sleep", "coffee": "--coffee"}.get(e.field)
        raise typer.BadParameter(str(e), param_hint=hint) from e

    if interactive:
        wake_time, sleep_goal, coffee_cups = _ask_inputs(wake_time, sleep_goal, coffee_cups)

    inputs = {
        "wake": wake_time.strftime("%H:%M"),
        "sleep": sleep_label(sleep_goal),
        "coffee": coffee_label(coffee_cups),
    }

    result = estimate(
        wake_time,
        sleep_goal,
        coffee_cups,
        model_loader(settings.model),
        on_error=log_estimation_failure,
    )

    output = format_result(
        result, output_format=output_format, clock=clock, inputs=inputs, console=console
    )
    if output is not None:
        print(output)

    if not result.success:
        raise typer.Exit(1)


@model_app.command("info")
def model_info(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the configured model backend, artifact and weights."""
    settings = get_settings()

    try:
        info = describe_model(settings.model)
    except EstimationFailure as e:
        if json_output:
            output_json(
                create_response(
                    command="model info", success=False, errors=[str(e)]
                ).to_dict()
            )
        else:
            console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        output_json(
            create_response(
                command="model info",
                data=info,
                human_summary=f"{info.get('name', 'model')} ({info['backend']})",
            ).to_dict()
        )
        return

    table = Table(title=f"Model: {info.get('name', 'unknown')}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    table.add_row("Backend", info["backend"])
    table.add_row("Artifact", info["path"] + (" (bundled)" if info["bundled"] else ""))
    if "type" in info:
        table.add_row("Type", str(info["type"]))
    if "target" in info:
        table.add_row("Target", str(info["target"]))
    if "intercept" in info:
        table.add_row("Intercept", f"{info['intercept']:g}")
    for feature, weight in info.get("coefficients", {}).items():
        table.add_row(f"  {feature}", f"{weight:g}")
    for key, value in info.get("metadata", {}).items():
        table.add_row(key, str(value))
    console.print(table)


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration as YAML."""
    settings = get_settings()
    print(yaml.dump(settings.to_dict(), default_flow_style=False, sort_keys=False), end="")


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(
        None, "--path", help="Where to write config.yaml (default ~/.betterrest/config.yaml)"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a configuration file with the current settings."""
    target = path or default_config_path()
    if target.exists() and not force:
        console.print(f"[yellow]{target} already exists; use --force to overwrite[/yellow]")
        raise typer.Exit(1)

    get_settings().save(target)
    console.print(f"[green]Wrote {target}[/green]")


if __name__ == "__main__":
    app()
