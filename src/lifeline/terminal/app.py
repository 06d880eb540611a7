# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from lifeline.initialize import initialize
from lifeline.logging_setup import configure_logging
from lifeline.terminal import configuration, entry, remind, view
from lifeline.terminal.custom_typer import AliasedTyperGroup
from lifeline.view import state as view_state

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="Lifeline - Personal health timeline in the CLI",
    no_args_is_help=True,
)
app.add_typer(entry.app, name="entry, e")
app.add_typer(view.app, name="view, v")
app.add_typer(remind.app, name="remind, r")
app.add_typer(configuration.app, name="config, c")


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
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-V",
            help="Log debug output to stderr",
        ),
    ] = False,
) -> None:
    """
    Lifeline - Personal health timeline in the CLI

    Global options that apply to all commands.
    """
    initialize()
    if no_header:
        view_state.set_show_header(False)
    if verbose:
        configure_logging("DEBUG")


def run() -> None:
    app()
