# SPDX-License-Identifier: MIT

from decimal import Decimal
from pathlib import Path
from typing import Annotated, Optional

import typer

from tidemark import time
from tidemark.model.rollup import RollupFilter
from tidemark.repository.configuration import CONFIGURATION_REPO
from tidemark.service.capacity import resource_load, user_monthly_availability
from tidemark.service.performance import portfolio_summary, project_performance
from tidemark.service.rollup import compute_rollup, report_rows
from tidemark.terminal.parse import parse_date, parse_month
from tidemark.terminal.session import open_session
from tidemark.view.view.views.capacity import capacity_report
from tidemark.view.view.views.progress import progress_report
from tidemark.view.view.views.rollup import report_rows_table, rollup_report

DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Directory of <table>.yaml exports"),
]
ChangesOption = Annotated[
    Optional[Path],
    typer.Option("--changes", help="YAML change log to replay after loading"),
]


def rollup(
    start: Annotated[
        Optional[str],
        typer.Option("--start", "-s", help="First day, inclusive (YYYY-MM-DD, today, -7)"),
    ] = None,
    end: Annotated[
        Optional[str],
        typer.Option("--end", "-e", help="Last day, inclusive; defaults to today"),
    ] = None,
    clients: Annotated[
        Optional[list[str]],
        typer.Option("--client", "-c", help="accepts multiple client ids"),
    ] = None,
    projects: Annotated[
        Optional[list[str]],
        typer.Option("--project", "-p", help="accepts multiple project ids"),
    ] = None,
    collaborators: Annotated[
        Optional[list[str]],
        typer.Option("--collaborator", "-u", help="accepts multiple user ids"),
    ] = None,
    flat: Annotated[
        bool, typer.Option("--flat", help="One row per collaborator line")
    ] = False,
    data_dir: DataDirOption = None,
    changes: ChangesOption = None,
) -> None:
    """Hours and value per client, project and collaborator over a date range."""
    config = CONFIGURATION_REPO.get_config()
    end_date = parse_date(end) or time.today_local()
    start_date = parse_date(start) or end_date.subtract(
        days=config["report_window_days"]
    )
    if start_date > end_date:
        raise typer.BadParameter(f"start {start_date} is after end {end_date}")

    rollup_filter: RollupFilter = {
        "start_date": start_date,
        "end_date": end_date,
        "client_ids": clients,
        "project_ids": projects,
        "collaborator_ids": collaborators,
    }

    session, _ = open_session(data_dir, changes)
    with session:
        result = compute_rollup(session.snapshot(), rollup_filter)

    if flat:
        report_rows_table(report_rows(result), result)
    else:
        rollup_report(result)


def progress(
    projects: Annotated[
        Optional[list[str]],
        typer.Option("--project", "-p", help="accepts multiple project ids"),
    ] = None,
    today: Annotated[
        Optional[str],
        typer.Option("--today", "-t", help="Reference day for planned progress"),
    ] = None,
    data_dir: DataDirOption = None,
    changes: ChangesOption = None,
) -> None:
    """Progress, cost and margin per project."""
    config = CONFIGURATION_REPO.get_config()
    reference_day = parse_date(today) or time.today_local()
    fallback_rate = Decimal(config["fallback_hourly_rate"])

    session, _ = open_session(data_dir, changes)
    with session:
        snapshot = session.snapshot()

    project_ids = projects or [project["id"] for project in snapshot.projects]
    performances = [
        performance
        for performance in (
            project_performance(snapshot, project_id, reference_day, fallback_rate)
            for project_id in project_ids
        )
        if performance is not None
    ]
    summary = portfolio_summary(snapshot, project_ids, reference_day, fallback_rate)
    progress_report(performances, summary, reference_day)


def capacity(
    month: Annotated[
        Optional[str],
        typer.Option("--month", "-m", help="YYYY-MM; defaults to the current month"),
    ] = None,
    data_dir: DataDirOption = None,
    changes: ChangesOption = None,
) -> None:
    """Logged and planned hours per active collaborator against capacity."""
    config = CONFIGURATION_REPO.get_config()
    target_month = parse_month(month)
    default_capacity = Decimal(config["default_monthly_capacity"])
    today = time.today_local()

    session, _ = open_session(data_dir, changes)
    with session:
        snapshot = session.snapshot()

    loads = resource_load(snapshot, target_month, default_capacity)
    availability = {
        user["id"]: user_monthly_availability(
            user, target_month, snapshot.tasks, today, default_capacity
        )
        for user in snapshot.users
        if user["active"]
    }
    capacity_report(target_month, loads, availability)
