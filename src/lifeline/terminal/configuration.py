# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from lifeline import configuration
from lifeline.repository.configuration import CONFIGURATION_REPO
from lifeline.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _config_table(title: Optional[str] = None) -> Table:
    config = CONFIGURATION_REPO.get_config()

    table = Table(title=title)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row(
        "show_header",
        "✓ Enabled" if config["show_header"] else "✗ Disabled",
    )
    table.add_row(
        "reminder_threshold_minutes", str(config["reminder_threshold_minutes"])
    )
    table.add_row("reminder_interval_seconds", str(config["reminder_interval_seconds"]))
    table.add_row("log_level", config["log_level"])
    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("config_path", str(configuration.APP_CONFIG_PATH))
    return table


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    console = Console()
    console.print(_config_table())

    yaml_library_type = "untested"
    try:
        from yaml import CDumper as Dumper  # noqa: F401
        from yaml import CLoader as Loader  # noqa: F401

        yaml_library_type = "C"
    except ImportError:
        from yaml import Loader  # type: ignore[assignment] # noqa: F401

        yaml_library_type = "Python"

    console.print()
    console.print(f"YAML Library Type: {yaml_library_type}")


@app.command("set, s")
def set(
    show_header: Annotated[
        Optional[bool],
        typer.Option(
            "--show-header/--no-show-header",
            help="Show the header above reports",
        ),
    ] = None,
    reminder_threshold_minutes: Annotated[
        Optional[int],
        typer.Option(
            "--reminder-threshold",
            help="Minutes ahead of an occurrence to send its reminder",
        ),
    ] = None,
    reminder_interval_seconds: Annotated[
        Optional[int],
        typer.Option(
            "--reminder-interval",
            help="Seconds between reminder scans",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING, or ERROR"),
    ] = None,
    data_path: Annotated[
        Optional[str],
        typer.Option(
            "--data-path",
            help="Directory path for storing data files",
        ),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option(
            "--remove-data-path",
            help="Reset data path to the platform default",
        ),
    ] = False,
) -> None:
    """
    Update configuration settings.
    """
    try:
        CONFIGURATION_REPO.update_config(
            show_header=show_header,
            data_path=data_path,
            remove_data_path=remove_data_path,
            reminder_threshold_minutes=reminder_threshold_minutes,
            reminder_interval_seconds=reminder_interval_seconds,
            log_level=log_level,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))

    console = Console()
    console.print("[green]Configuration updated successfully![/green]\n")
    console.print(_config_table("Updated Configuration"))
