# SPDX-License-Identifier: MIT

import json
import logging
from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import pendulum
import typer
from rich.console import Console
from yaml import YAMLError, load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]

from lifeline.errors import LifelineError
from lifeline.model.entry import ENTRY_STATUSES, ENTRY_TYPES, Entry
from lifeline.model.recurrence import RecurrenceRule
from lifeline.repository.entry import ENTRY_REPO
from lifeline.service.entry import create_entry, entry_from_raw, modify_entry
from lifeline.service.occurrence import anchor_date
from lifeline.service.status import record_status, toggle_status
from lifeline.terminal.custom_typer import AliasedTyperGroup
from lifeline.terminal.parse import parse_date, parse_repeat, parse_time
from lifeline.time import date_to_iso_str, today_local
from lifeline.view.views import entry as entry_report
from lifeline.view.views.util import short_id

logger = logging.getLogger(__name__)

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

DATE_HELP = "valid inputs: YYYY-MM-DD, today, yesterday, tomorrow, or day offset like 1, -1"
REPEAT_HELP = "valid inputs: daily, weekly, every:N, every:Nw, days:mon,wed, times:08:00,20:00"


def _fail(message: str) -> NoReturn:
    console = Console()
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


def _resolve_entry(id: str) -> Entry:
    try:
        return ENTRY_REPO.get_entry(ENTRY_REPO.find_entry_id(id))
    except LifelineError as e:
        _fail(str(e))


def _occurrence_date(entry: Entry, date: Optional[pendulum.Date]) -> pendulum.Date:
    """Default to the anchor for one-off entries and to today for recurring ones."""
    if date is not None:
        return date
    if entry["recurrence"] is None:
        return anchor_date(entry)
    return today_local()


@app.command("add, a", no_args_is_help=True)
def add(
    title: Annotated[str, typer.Argument(help="entry title")],
    entry_type: Annotated[
        str,
        typer.Option("--type", "-T", help=f"one of: {', '.join(ENTRY_TYPES)}"),
    ] = "generic",
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-dt", parser=parse_date, help=DATE_HELP),
    ] = None,
    time: Annotated[
        Optional[str],
        typer.Option("--time", "-tm", help="valid inputs: 08:00 AM, 8:00 pm, 18:30"),
    ] = None,
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
    repeat: Annotated[
        Optional[str], typer.Option("--repeat", "-r", help=REPEAT_HELP)
    ] = None,
    status: Annotated[
        str,
        typer.Option("--status", "-s", help=f"one of: {', '.join(ENTRY_STATUSES)}"),
    ] = "upcoming",
    provider: Annotated[Optional[str], typer.Option("--provider")] = None,
    location: Annotated[Optional[str], typer.Option("--location", "-l")] = None,
    lab_value: Annotated[Optional[str], typer.Option("--lab-value")] = None,
    lab_unit: Annotated[Optional[str], typer.Option("--lab-unit")] = None,
    reference_range: Annotated[Optional[str], typer.Option("--reference-range")] = None,
    follow_up_date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--follow-up", parser=parse_date, help=DATE_HELP),
    ] = None,
) -> None:
    """Add a medication, appointment, lab result, or generic entry."""
    recurrence = parse_repeat(repeat)
    display_time = parse_time(time)

    try:
        entry = create_entry(
            entry_type=entry_type,
            title=title,
            date=date_to_iso_str(date or today_local()),
            time=display_time,
            description=description,
            status=status,  # type: ignore[arg-type]
            recurrence=recurrence,
            provider=provider,
            location=location,
            lab_value=lab_value,
            lab_unit=lab_unit,
            reference_range=reference_range,
            follow_up_date=(
                date_to_iso_str(follow_up_date) if follow_up_date is not None else None
            ),
        )
    except LifelineError as e:
        _fail(str(e))

    id = ENTRY_REPO.save_new_entry(entry)
    logger.info("Added entry %s", id)
    entry_report.single_entry_view(ENTRY_REPO.get_entry(id))


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: str,
    title: Annotated[Optional[str], typer.Option("--title", "-t")] = None,
    entry_type: Annotated[
        Optional[str],
        typer.Option("--type", "-T", help=f"one of: {', '.join(ENTRY_TYPES)}"),
    ] = None,
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-dt", parser=parse_date, help=DATE_HELP),
    ] = None,
    time: Annotated[Optional[str], typer.Option("--time", "-tm")] = None,
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
    repeat: Annotated[
        Optional[str], typer.Option("--repeat", "-r", help=REPEAT_HELP)
    ] = None,
    provider: Annotated[Optional[str], typer.Option("--provider")] = None,
    location: Annotated[Optional[str], typer.Option("--location", "-l")] = None,
    lab_value: Annotated[Optional[str], typer.Option("--lab-value")] = None,
    lab_unit: Annotated[Optional[str], typer.Option("--lab-unit")] = None,
    reference_range: Annotated[Optional[str], typer.Option("--reference-range")] = None,
    remove_description: Annotated[
        bool, typer.Option("--remove-description", "-rd")
    ] = False,
    remove_time: Annotated[bool, typer.Option("--remove-time", "-rtm")] = False,
    remove_repeat: Annotated[bool, typer.Option("--remove-repeat", "-rr")] = False,
) -> None:
    entry = _resolve_entry(id)
    recurrence: Optional[RecurrenceRule] = parse_repeat(repeat)
    display_time = parse_time(time)

    try:
        modified = modify_entry(
            entry,
            entry_type=entry_type,
            title=title,
            description=description,
            date=date_to_iso_str(date) if date is not None else None,
            time=display_time,
            recurrence=recurrence,
            remove_description=remove_description,
            remove_time=remove_time,
            remove_recurrence=remove_repeat,
            provider=provider,
            location=location,
            lab_value=lab_value,
            lab_unit=lab_unit,
            reference_range=reference_range,
        )
        ENTRY_REPO.replace_entry(modified)
    except LifelineError as e:
        _fail(str(e))

    entry_report.single_entry_view(ENTRY_REPO.get_entry(entry["id"]))  # type: ignore[arg-type]


@app.command("delete, d", no_args_is_help=True)
def delete(id: str) -> None:
    entry = _resolve_entry(id)
    ENTRY_REPO.delete_entry(entry["id"])  # type: ignore[arg-type]

    console = Console()
    console.print(f"Deleted entry {short_id(entry['id'])}: {entry['title']}")


@app.command("status, st", no_args_is_help=True)
def status(
    id: str,
    new_status: Annotated[
        str, typer.Argument(help=f"one of: {', '.join(ENTRY_STATUSES)}")
    ],
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option(
            "--date",
            "-dt",
            parser=parse_date,
            help=f"occurrence date (defaults to today for repeating entries); {DATE_HELP}",
        ),
    ] = None,
) -> None:
    """Record the status of one occurrence of an entry."""
    entry = _resolve_entry(id)
    occurrence_date = _occurrence_date(entry, date)

    try:
        updated_entry = record_status(entry, occurrence_date, new_status)  # type: ignore[arg-type]
        ENTRY_REPO.replace_entry(updated_entry)
    except LifelineError as e:
        _fail(str(e))

    console = Console()
    console.print(
        f"{entry['title']} on {date_to_iso_str(occurrence_date)}: {new_status}"
    )


@app.command("toggle, tg", no_args_is_help=True)
def toggle(
    id: str,
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option(
            "--date",
            "-dt",
            parser=parse_date,
            help=f"occurrence date (defaults to today for repeating entries); {DATE_HELP}",
        ),
    ] = None,
) -> None:
    """Mark a medication taken or an appointment completed, or undo it."""
    entry = _resolve_entry(id)
    occurrence_date = _occurrence_date(entry, date)

    try:
        updated_entry = toggle_status(entry, occurrence_date)
        ENTRY_REPO.replace_entry(updated_entry)
    except LifelineError as e:
        _fail(str(e))

    entry_report.single_entry_view(ENTRY_REPO.get_entry(entry["id"]))  # type: ignore[arg-type]


@app.command("show, s", no_args_is_help=True)
def show(id: str) -> None:
    entry_report.single_entry_view(_resolve_entry(id))


def _read_import_file(path: Path) -> list[Any]:
    text = path.read_text()
    if path.suffix == ".json":
        document = json.loads(text)
    else:
        document = load(text, Loader=Loader)

    if isinstance(document, dict) and "entries" in document:
        document = document["entries"]
    if not isinstance(document, list):
        raise ValueError("Import file must hold a list of entries")
    return document


@app.command("import, i", no_args_is_help=True)
def import_entries(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            dir_okay=False,
            help="YAML or JSON file with a list of entries",
        ),
    ],
) -> None:
    """Import entries in bulk. Nothing is saved if any entry is invalid."""
    try:
        raw_entries = _read_import_file(path)
    except (YAMLError, json.JSONDecodeError, ValueError) as e:
        _fail(f"Could not read {path}: {e}")

    entries = []
    for index, raw in enumerate(raw_entries):
        try:
            entries.append(entry_from_raw(raw))
        except LifelineError as e:
            _fail(f"Entry {index + 1}: {e}")

    ids = ENTRY_REPO.save_new_entries(entries)
    logger.info("Imported %s entries from %s", len(ids), path)

    console = Console()
    console.print(f"[green]Imported {len(ids)} entries[/green]")
