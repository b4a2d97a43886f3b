"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional, Tuple

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..adapters.file_store import FileScheduleStore
from ..domain.exceptions import SlotPlannerError
from ..domain.schedule_metrics import max_appointments_per_day, total_work_minutes
from ..services.availability_service import AvailabilityService
from ..services.weekly_availability import WeeklyAvailabilityCalculator

app = typer.Typer(
    name="slotplanner",
    help="Compute bookable appointment slots from weekly work schedules",
    add_completion=False
)

console = Console()

EXIT_NOT_AVAILABLE = 2

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", "-d", help="Schedules/bookings file. Overrides the config value."),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(
    config_file: Optional[Path],
    data_file: Optional[Path],
    verbose: bool = False,
) -> Tuple[AppConfig, FileScheduleStore]:
    """Load configuration and the schedule store."""
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path) if config_path.exists() or config_file else AppConfig()

    _configure_logging("DEBUG" if verbose else config.log_level)

    data_path = data_file or config.data_file
    if data_path is None:
        raise ValueError("No data file configured. Pass --data or set data_file in the config.")

    store = FileScheduleStore.from_file(
        data_path,
        timezone=config.timezone,
        defaults=config.defaults,
    )
    return config, store


def _parse_date(value: str, tz: str) -> pendulum.Date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD: {e}") from e


def _parse_instant(value: str, tz: str) -> pendulum.DateTime:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD HH:mm", tz=tz)
    except ValueError as e:
        raise ValueError(f"Invalid time {value!r}, expected 'YYYY-MM-DD HH:mm': {e}") from e


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def week(
    provider: Annotated[str, typer.Argument(help="Provider identifier")],
    location: Annotated[str, typer.Argument(help="Location identifier")],
    week_start: Annotated[Optional[str], typer.Option("--week-start", "-w", help="First day of the week (YYYY-MM-DD). Defaults to this Monday.")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the week's slots for a provider at a location.

    Examples:

        slotplanner week dr-lee main --week-start 2025-01-06
    """
    try:
        config, store = _load(config_file, data_file, verbose)
        start = _parse_date(week_start, config.timezone) if week_start else None

        calculator = WeeklyAvailabilityCalculator(
            schedules=store,
            bookings=store,
            provider_id=provider,
            location_id=location,
            week_start=start,
            timezone=config.timezone,
            default_booking_duration=config.defaults.booking_duration_minutes,
        )
        result = calculator.call()
    except (FileNotFoundError, SlotPlannerError, ValueError) as e:
        _fail(e)

    console.print(
        f"\n[bold cyan]Week {result.week_start.isoformat()} - {result.week_end.isoformat()}[/bold cyan]"
        f"  ({provider} @ {location})\n"
    )

    if not result.schedules:
        console.print("[yellow]No active schedules configured.[/yellow]\n")
        return

    for day in result.days():
        slots = result.slots_for(day)
        if not slots:
            continue

        table = Table(title=day.format("dddd, YYYY-MM-DD"), show_header=True, header_style="bold cyan")
        table.add_column("Time", style="bold")
        table.add_column("Status")
        for slot in slots:
            status = "[green]available[/green]" if slot.is_available else "[red]busy[/red]"
            table.add_row(f"{slot.start.format('HH:mm')} - {slot.end.format('HH:mm')}", status)
        console.print(table)

    console.print(
        f"\n[bold]Total slots:[/bold] {result.total_slots}   "
        f"[bold green]Available:[/bold green] {result.available_slots}   "
        f"[bold red]Busy:[/bold red] {result.busy_slots}\n"
    )


@app.command()
def day(
    provider: Annotated[str, typer.Argument(help="Provider identifier")],
    location: Annotated[str, typer.Argument(help="Location identifier")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the free periods of a single day.
    """
    try:
        config, store = _load(config_file, data_file, verbose)
        service = AvailabilityService.for_provider(
            store,
            store,
            provider_id=provider,
            location_id=location,
            date=_parse_date(date, config.timezone),
            timezone=config.timezone,
            default_booking_duration=config.defaults.booking_duration_minutes,
        )
        periods = service.free_periods()
    except (FileNotFoundError, SlotPlannerError, ValueError) as e:
        _fail(e)

    if not periods:
        console.print("[yellow]No free time on this day.[/yellow]")
        return

    console.print(f"[bold green]{len(periods)} free period(s):[/bold green]")
    for period in periods:
        console.print(f"  {period}")
    console.print(f"[bold]Total free minutes:[/bold] {service.total_free_minutes()}")


@app.command()
def check(
    provider: Annotated[str, typer.Argument(help="Provider identifier")],
    location: Annotated[str, typer.Argument(help="Location identifier")],
    start: Annotated[str, typer.Argument(help="Start ('YYYY-MM-DD HH:mm')")],
    end: Annotated[str, typer.Argument(help="End ('YYYY-MM-DD HH:mm')")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a time range can be booked. Exits with 2 when it cannot.
    """
    try:
        config, store = _load(config_file, data_file, verbose)
        start_time = _parse_instant(start, config.timezone)
        end_time = _parse_instant(end, config.timezone)
        service = AvailabilityService.for_provider(
            store,
            store,
            provider_id=provider,
            location_id=location,
            date=start_time.date(),
            timezone=config.timezone,
            default_booking_duration=config.defaults.booking_duration_minutes,
        )
        available = service.is_available(start_time, end_time)
    except (FileNotFoundError, SlotPlannerError, ValueError) as e:
        _fail(e)

    if available:
        console.print(f"[green]✓ {start} - {end} is available[/green]")
        return

    console.print(f"[red]✗ {start} - {end} is not available[/red]")
    raise typer.Exit(EXIT_NOT_AVAILABLE)


@app.command()
def schedule(
    provider: Annotated[str, typer.Argument(help="Provider identifier")],
    location: Annotated[str, typer.Argument(help="Location identifier")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List the active weekly schedules of a provider at a location.
    """
    try:
        _, store = _load(config_file, data_file)
        schedules = store.find_active_schedules(provider, location)
    except (FileNotFoundError, SlotPlannerError, ValueError) as e:
        _fail(e)

    if not schedules:
        console.print("[yellow]No active schedules configured.[/yellow]")
        return

    table = Table(title=f"Schedules for {provider} @ {location}", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Work periods")
    table.add_column("Slot / buffer", justify="right")
    table.add_column("Work min", justify="right")
    table.add_column("Max appts", justify="right")

    for item in schedules:
        table.add_row(
            item.day_name(),
            ", ".join(f"{p.start}-{p.end}" for p in item.work_periods),
            f"{item.slot_duration_minutes} / {item.slot_buffer_minutes}",
            str(total_work_minutes(item)),
            str(max_appointments_per_day(item)),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotplanner[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
