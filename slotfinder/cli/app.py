"""
Main CLI application using Typer.
"""

import asyncio
import logging
import os
from collections import OrderedDict
from pathlib import Path
from typing import Annotated, Dict, List, Optional

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.google_calendar_client import GoogleCalendarClient
from ..adapters.mock_calendar_client import MockCalendarClient
from ..adapters.schedule_store import InMemoryScheduleStore
from ..config import AppConfig, HostConfig, get_default_config_path
from ..domain.candidates import generate_candidates, round_up_to_step
from ..domain.exceptions import SlotFinderError, SourceUnavailable
from ..domain.models import DayOfWeek
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="slotfinder",
    help="Find bookable meeting times from weekly availability and calendar busy times",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _require_host(config: AppConfig, host_id: str) -> HostConfig:
    host = config.find_host(host_id)
    if host is None:
        console.print(f"[bold red]Error:[/bold red] Unknown host '{host_id}'")
        raise typer.Exit(1)
    return host


def _determine_time_range(
    *,
    tz: str,
    start_option: Optional[str],
    days: int,
    step_minutes: int,
):
    """
    Resolve the search window from an explicit start date or from now.
    Returns (start, end).
    """
    if start_option:
        try:
            start = pendulum.from_format(start_option, "YYYY-MM-DD", tz=tz).start_of("day")
        except ValueError as e:
            console.print(f"[red]Could not parse start date: {e}[/red]")
            raise typer.Exit(1)
    else:
        start = round_up_to_step(pendulum.now(tz), step_minutes)

    end = start.add(days=days).end_of("day")
    return start, end


def _group_by_date(times: List[DateTime]) -> Dict[str, List[DateTime]]:
    grouped: Dict[str, List[DateTime]] = OrderedDict()
    for moment in times:
        grouped.setdefault(moment.format("dddd, YYYY-MM-DD"), []).append(moment)
    return grouped


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show informational log output.")] = False,
):
    _configure_logging(verbose)


@app.command()
def slots(
    host_id: Annotated[str, typer.Argument(help="Host id from the config file")],
    event_id: Annotated[str, typer.Argument(help="Event type id of the host")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD). Defaults to now.")] = None,
    days: Annotated[Optional[int], typer.Option("--days", "-d", help="Number of days to search")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use mock calendar data instead of Google Calendar.")] = False,
    mock_data: Annotated[Optional[Path], typer.Option("--mock-data", help="JSON file with mock calendar events")] = None,
):
    """
    List the times at which a host's event can be booked.

    Examples:

        slotfinder slots alice intro

        slotfinder slots alice intro --start 2026-10-19 --days 3 --mock
    """
    try:
        config = _load_config(config_file)
        host = _require_host(config, host_id)
        event_type = host.find_event(event_id)

        tz = config.timezone
        horizon_days = days if days is not None else config.defaults.horizon_days
        if horizon_days <= 0:
            console.print("[red]--days must be greater than zero[/red]")
            raise typer.Exit(1)

        time_start, time_end = _determine_time_range(
            tz=tz,
            start_option=start,
            days=horizon_days,
            step_minutes=config.defaults.step_minutes,
        )
        candidates = generate_candidates(time_start, time_end, config.defaults.step_minutes)

        calendar_ids = {h.id: config.calendar_id_for(h) for h in config.hosts}
        if mock:
            console.print("[yellow]⚠  Mock mode: using calendar data from JSON[/yellow]\n")
            busy_source = MockCalendarClient(
                data_file=mock_data,
                calendar_ids=calendar_ids,
                timezone=tz,
            )
        else:
            access_token = os.environ.get(config.google.access_token_env)
            if not access_token:
                console.print(
                    f"[bold red]Error:[/bold red] Set {config.google.access_token_env} "
                    "to a Google Calendar access token, or use --mock."
                )
                raise typer.Exit(1)
            busy_source = GoogleCalendarClient(
                access_token=access_token,
                calendar_ids=calendar_ids,
                default_calendar_id=config.google.calendar_id,
            )

        service = AvailabilityService(
            schedule_store=InMemoryScheduleStore.from_config(config),
            busy_source=busy_source,
        )

        console.print(f"[bold cyan]{event_type.name}[/bold cyan] with {host.display_name()}")
        console.print(
            f"   Window: {time_start.format('YYYY-MM-DD HH:mm')} - {time_end.format('YYYY-MM-DD HH:mm')} ({tz})"
        )
        console.print(f"   Duration: {event_type.duration_in_minutes} minutes\n")

        valid_times = asyncio.run(
            service.find_valid_times_for_event(event_type=event_type, candidates=candidates)
        )

        if not valid_times:
            console.print(
                "[yellow]⚠ No bookable times found.[/yellow]\n"
                "Try a longer window or check the host's schedule."
            )
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Day", style="bold yellow")
        table.add_column("Start times")
        for day, times in _group_by_date(valid_times).items():
            table.add_row(day, ", ".join(t.format("HH:mm") for t in times))

        console.print(f"[bold green]✓ {len(valid_times)} bookable time(s) found:[/bold green]")
        console.print(table)

    except SourceUnavailable as e:
        console.print(f"[bold red]Calendar unavailable:[/bold red] {e}\nPlease try again later.")
        raise typer.Exit(1)

    except (FileNotFoundError, SlotFinderError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def hosts(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    List all configured hosts and their event types.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.hosts:
        console.print("[yellow]No hosts defined in the config file.[/yellow]")
        return

    table = Table(title="Configured hosts", show_header=True, header_style="bold cyan")
    table.add_column("Host", style="bold yellow")
    table.add_column("Timezone", style="dim")
    table.add_column("Event types")

    for host in config.hosts:
        events = ", ".join(
            f"{e.id} ({e.duration_minutes} min{'' if e.is_active else ', inactive'})"
            for e in host.events
        )
        timezone = host.schedule.timezone if host.schedule else "no schedule"
        table.add_row(f"{host.display_name()} [dim]({host.id})[/dim]", timezone, events or "-")

    console.print(table)


@app.command()
def schedule(
    host_id: Annotated[str, typer.Argument(help="Host id from the config file")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    Show a host's weekly availability.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    host = _require_host(config, host_id)
    if host.schedule is None:
        console.print(f"[yellow]{host.display_name()} has not published a schedule.[/yellow]")
        return

    table = Table(
        title=f"{host.display_name()} ({host.schedule.timezone})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Windows")

    for day in DayOfWeek:
        windows = sorted(
            f"{a.start_time} - {a.end_time}"
            for a in host.schedule.availabilities
            if a.day_of_week == day
        )
        table.add_row(day.label.capitalize(), ", ".join(windows) or "[dim]unavailable[/dim]")

    console.print(table)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
