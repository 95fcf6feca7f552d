# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from tidemark.logging_setup import setup_logging
from tidemark.terminal import configuration
from tidemark.terminal.custom_typer import AliasedTyperGroup
from tidemark.terminal.report import capacity, progress, rollup
from tidemark.terminal.sync import sync
from tidemark.view import state as view_state

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="Tidemark - project hours and value rollups in the CLI",
    no_args_is_help=True,
)
app.add_typer(configuration.app, name="config, c")
app.command(name="sync, s")(sync)
app.command(name="rollup, r")(rollup)
app.command(name="progress, p")(progress)
app.command(name="capacity, cap")(capacity)


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            "-l",
            help="Override the configured log level for this run",
        ),
    ] = None,
) -> None:
    """
    Tidemark - project hours and value rollups in the CLI

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)
    if log_level is not None:
        setup_logging(log_level)


def run() -> None:
    app()
