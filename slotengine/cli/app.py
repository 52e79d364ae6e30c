"""
Main CLI application using Typer.
"""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Annotated, NoReturn, Optional, Tuple

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.rest_client import RestStoreClient
from ..adapters.snapshot_store import SnapshotStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SlotEngineError
from ..domain.models import ScopingMode
from ..domain.time_arithmetic import format_time, parse_time
from ..services.availability_service import AvailabilityService
from ..services.window_cache import WindowCache

app = typer.Typer(
    name="slotengine",
    help="Compute bookable appointment slots from business hours and existing bookings",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

ResourceArgument = Annotated[str, typer.Argument(help="Resource alias or id. 'shared' selects the business-wide hours.")]
ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
SnapshotOption = Annotated[Optional[Path], typer.Option("--snapshot", "-s", help="Read bookings from a YAML/JSON snapshot instead of the store.")]
DurationOption = Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")]
BufferOption = Annotated[Optional[int], typer.Option("--buffer", "-b", help="Minutes required between bookings")]
ModeOption = Annotated[Optional[ScopingMode], typer.Option("--mode", "-m", help="Which bookings count as busy")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the config; without an explicit path a missing file means defaults."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _build_service(
    config_file: Optional[Path],
    snapshot: Optional[Path],
) -> Tuple[AppConfig, AvailabilityService]:
    config = _load_config(config_file)

    if snapshot is not None:
        store = SnapshotStore.from_file(snapshot)
    else:
        store = RestStoreClient(config.store)

    service = AvailabilityService(store=store, defaults=config.defaults, cache=WindowCache())
    return config, service


def _parse_date(value: Optional[str]) -> date:
    """Parse YYYY-MM-DD, defaulting to today."""
    if not value:
        return pendulum.today().date()
    return pendulum.from_format(value, "YYYY-MM-DD").date()


def _resource_label(resource_id: Optional[str]) -> str:
    return resource_id if resource_id is not None else "shared"


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    raise typer.Exit(1)


@app.command()
def slots(
    resource: ResourceArgument = "shared",
    day: Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD), defaults to today")] = None,
    duration: DurationOption = None,
    buffer: BufferOption = None,
    mode: ModeOption = None,
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    verbose: VerboseOption = False,
):
    """
    List the bookable start times of one day.

    Examples:

        slotengine slots alice --date 2024-11-25 --duration 30

        slotengine slots shared --snapshot snapshot.yaml
    """
    _setup_logging(verbose)

    try:
        config, service = _build_service(config_file, snapshot)
        resource_id = config.resolve_resource(resource)
        target = _parse_date(day)

        found = asyncio.run(
            service.available_slots(
                resource_id,
                target,
                service_duration_minutes=duration,
                buffer_minutes=buffer,
                mode=mode,
            )
        )
    except (SlotEngineError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()
    if not found:
        console.print(
            f"[yellow]⚠ No available slots for {_resource_label(resource_id)} on {target.isoformat()}.[/yellow]"
        )
    else:
        console.print(f"[bold green]✓ {len(found)} slot(s) on {target.isoformat()}:[/bold green]\n")
        for slot in found:
            console.print(f"  {slot.format_display()}")
    console.print()


@app.command()
def days(
    resource: ResourceArgument = "shared",
    start: Annotated[Optional[str], typer.Option("--start", help="First date (YYYY-MM-DD), defaults to today")] = None,
    count: Annotated[Optional[int], typer.Option("--days", "-n", help="Number of days to check")] = None,
    duration: DurationOption = None,
    buffer: BufferOption = None,
    mode: ModeOption = None,
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    verbose: VerboseOption = False,
):
    """
    Show how many slots are left on each day of the horizon.
    """
    _setup_logging(verbose)

    try:
        config, service = _build_service(config_file, snapshot)
        resource_id = config.resolve_resource(resource)
        first = _parse_date(start)

        counts = asyncio.run(
            service.day_availability(
                resource_id,
                first,
                days=count,
                service_duration_minutes=duration,
                buffer_minutes=buffer,
                mode=mode,
            )
        )
    except (SlotEngineError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(
        title=f"Availability for {_resource_label(resource_id)}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold")
    table.add_column("Weekday")
    table.add_column("Open slots", justify="right")

    for day, open_slots in counts.items():
        status = f"[green]{open_slots}[/green]" if open_slots else "[red]fully booked[/red]"
        table.add_row(day.isoformat(), WEEKDAY_NAMES[day.isoweekday() % 7], status)

    console.print()
    console.print(table)
    console.print()


@app.command()
def nearest(
    resource: ResourceArgument = "shared",
    limit: Annotated[Optional[int], typer.Option("--limit", "-l", help="How many slots to show")] = None,
    horizon: Annotated[Optional[int], typer.Option("--horizon", help="Days after today to search")] = None,
    duration: DurationOption = None,
    buffer: BufferOption = None,
    mode: ModeOption = None,
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the nearest open slots from now on.
    """
    _setup_logging(verbose)

    try:
        config, service = _build_service(config_file, snapshot)
        resource_id = config.resolve_resource(resource)

        found = asyncio.run(
            service.nearest_slots(
                resource_id,
                service_duration_minutes=duration,
                buffer_minutes=buffer,
                mode=mode,
                horizon_days=horizon,
                limit=limit,
            )
        )
    except (SlotEngineError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()
    if not found:
        console.print("[yellow]⚠ No open slots in the search horizon.[/yellow]")
    else:
        console.print(f"[bold green]✓ Nearest slots for {_resource_label(resource_id)}:[/bold green]\n")
        for day, slot in found:
            console.print(f"  {WEEKDAY_NAMES[day.isoweekday() % 7]}, {day.isoformat()} | {slot.format_display()}")
    console.print()


@app.command()
def recurring(
    resource: ResourceArgument = "shared",
    weekday: Annotated[int, typer.Option("--weekday", "-w", min=0, max=6, help="Day of week, 0=Sunday")] = 0,
    duration: DurationOption = None,
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    verbose: VerboseOption = False,
):
    """
    List start times free for a new weekly recurring appointment.
    """
    _setup_logging(verbose)

    try:
        config, service = _build_service(config_file, snapshot)
        resource_id = config.resolve_resource(resource)

        found = asyncio.run(
            service.recurring_times(resource_id, weekday, service_duration_minutes=duration)
        )
    except (SlotEngineError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()
    if not found:
        console.print(f"[yellow]⚠ No free recurring times on {WEEKDAY_NAMES[weekday]}.[/yellow]")
    else:
        console.print(f"[bold green]✓ Free weekly times on {WEEKDAY_NAMES[weekday]}:[/bold green]\n")
        console.print("  " + ", ".join(slot.label for slot in found))
    console.print()


@app.command()
def check(
    resource: ResourceArgument = "shared",
    day: Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD), defaults to today")] = None,
    start: Annotated[str, typer.Option("--time", "-t", help="Start time (HH:MM)")] = "09:00",
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    verbose: VerboseOption = False,
):
    """
    Check a start time against the day's blackout constraints.
    """
    _setup_logging(verbose)

    try:
        config, service = _build_service(config_file, snapshot)
        resource_id = config.resolve_resource(resource)
        target = _parse_date(day)

        bookable = asyncio.run(service.check_bookable(resource_id, target, start))
    except (SlotEngineError, FileNotFoundError, ValueError) as e:
        _fail(e)

    label = format_time(parse_time(start))
    if bookable:
        console.print(f"\n[green]✓ {label} on {target.isoformat()} is not blocked.[/green]\n")
    else:
        console.print(f"\n[red]✗ {label} on {target.isoformat()} falls inside a blackout window.[/red]\n")
        raise typer.Exit(1)


@app.command()
def list_resources(
    config_file: ConfigOption = None,
):
    """
    List all configured resources.
    """
    try:
        config = _load_config(config_file)
    except (SlotEngineError, FileNotFoundError) as e:
        _fail(e)

    if not config.resources:
        console.print("[yellow]No resources defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured resources",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Name (Alias)", style="bold yellow")
    table.add_column("Resource id", style="dim")

    for resource in config.resources:
        table.add_row(resource.name, resource.resource_id)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotengine[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
