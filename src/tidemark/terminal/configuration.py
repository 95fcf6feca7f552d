# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from tidemark import configuration
from tidemark.repository.configuration import CONFIGURATION_REPO
from tidemark.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@app.command("show, s")
def show() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("log_level", config["log_level"])
    table.add_row("default_monthly_capacity", str(config["default_monthly_capacity"]))
    table.add_row("fallback_hourly_rate", str(config["fallback_hourly_rate"]))
    table.add_row("report_window_days", str(config["report_window_days"]))
    table.add_row(
        "reconnect_backoff_seconds", str(config["reconnect_backoff_seconds"])
    )
    table.add_row(
        "reconnect_backoff_max_seconds", str(config["reconnect_backoff_max_seconds"])
    )
    table.add_row(
        "refresh_dependent_tasks",
        "✓ Enabled" if config["refresh_dependent_tasks"] else "✗ Disabled",
    )

    console.print(table)
    console.print(f"\nConfig file: {configuration.APP_CONFIG_PATH}")


@app.command("set, st")
def set(
    data_path: Annotated[
        Optional[str],
        typer.Option("--data-path", help="Directory holding the <table>.yaml exports"),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option("--remove-data-path", help="Reset data path to the default"),
    ] = False,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
    default_monthly_capacity: Annotated[
        Optional[int],
        typer.Option(
            "--default-monthly-capacity",
            help="Monthly hours for users without their own capacity",
        ),
    ] = None,
    fallback_hourly_rate: Annotated[
        Optional[int],
        typer.Option(
            "--fallback-hourly-rate",
            help="Hourly cost used for cost-to-finish when a developer has none",
        ),
    ] = None,
    report_window_days: Annotated[
        Optional[int],
        typer.Option(
            "--report-window-days", help="Default rollup range ending today"
        ),
    ] = None,
    reconnect_backoff_seconds: Annotated[
        Optional[float],
        typer.Option("--reconnect-backoff-seconds", help="First reconnect delay"),
    ] = None,
    reconnect_backoff_max_seconds: Annotated[
        Optional[float],
        typer.Option("--reconnect-backoff-max-seconds", help="Longest reconnect delay"),
    ] = None,
    refresh_dependent_tasks: Annotated[
        Optional[bool],
        typer.Option(
            "--refresh-dependent-tasks/--no-refresh-dependent-tasks",
            help="Re-resolve task assignee names when a user changes",
        ),
    ] = None,
) -> None:
    """
    Update configuration settings.
    """
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(f"log level must be one of {', '.join(LOG_LEVELS)}")

    CONFIGURATION_REPO.update_config(
        data_path=data_path,
        remove_data_path=remove_data_path,
        log_level=log_level,
        default_monthly_capacity=default_monthly_capacity,
        fallback_hourly_rate=fallback_hourly_rate,
        report_window_days=report_window_days,
        reconnect_backoff_seconds=reconnect_backoff_seconds,
        reconnect_backoff_max_seconds=reconnect_backoff_max_seconds,
        refresh_dependent_tasks=refresh_dependent_tasks,
    )

    console = Console()
    console.print("[green]Configuration updated successfully![/green]")
