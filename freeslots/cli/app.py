"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from pendulum import Date
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.json_store import JsonIntervalStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import FreeSlotsError, SeriesConflictError
from ..domain.models import FreeSlotsQuery, FreeSlotsResult
from ..domain.timezones import resolve_timezone
from ..services.free_slots import FreeSlotsService
from ..services.series_booking import SeriesMaterializer

app = typer.Typer(
    name="freeslots",
    help="Compute bookable slots and book recurring series for a resource",
    add_completion=False
)

console = Console()

STATUS_STYLES = {
    "available": "green",
    "partial": "yellow",
    "none": "dim",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Availability and recurrence engine.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _parse_date(value: str, tz: str, label: str) -> Date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse {label} '{value}': {e}[/red]")
        raise typer.Exit(1)


def _render_result(result: FreeSlotsResult) -> None:
    if not result.slots:
        console.print(
            "[yellow]⚠ No bookable slots found.[/yellow]\n"
            "Try a longer date range or check the notice and advance booking settings."
        )
    else:
        table = Table(
            title=f"Free slots ({result.timezone})",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold")
        table.add_column("Time")
        table.add_column("Until", style="dim")
        table.add_column("Time of day", style="dim")
        table.add_column("Recurrences", justify="right")

        for slot in result.slots:
            table.add_row(
                slot.date.isoformat(),
                slot.time,
                slot.end.format("HH:mm"),
                slot.time_of_day,
                str(slot.available_recurrences),
            )

        console.print(table)

    overview = " ".join(
        f"[{STATUS_STYLES[day.status]}]{day.date.day:02d}[/{STATUS_STYLES[day.status]}]"
        for day in result.month.days
    )
    console.print(f"\n[bold]{result.month.year}-{result.month.month:02d}:[/bold] {overview}")
    console.print(
        f"[dim]{result.config.duration} min slots, buffer {result.config.buffer_time} min, "
        f"interval {result.config.interval}, max {result.config.number_max}[/dim]\n"
    )


def _format_windows(windows) -> str:
    return ", ".join(f"{window['start']}-{window['end']}" for window in windows)


@app.command()
def slots(
    config_file: ConfigOption = None,
    start: Annotated[Optional[str], typer.Option("--from", help="First day (YYYY-MM-DD). Defaults to today.")] = None,
    end: Annotated[Optional[str], typer.Option("--to", help="Last day (YYYY-MM-DD). Defaults to 7 days after --from.")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="Override the configured timezone.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw result as JSON.")] = False,
):
    """
    Show bookable slots for a date range.

    Examples:

        freeslots slots
        freeslots slots --from 2026-04-01 --to 2026-04-30
        freeslots slots --timezone Europe/Berlin --json
    """
    try:
        config = _load_config(config_file)
        policy = config.get_policy()
        tz_name = resolve_timezone(timezone or config.timezone).name

        date_from = _parse_date(start, tz_name, "--from") if start else pendulum.today(tz_name).date()
        date_to = _parse_date(end, tz_name, "--to") if end else date_from.add(days=7)

        store = JsonIntervalStore(config.store_file)
        service = FreeSlotsService(store=store)
        result = service.compute_free_slots(
            FreeSlotsQuery(
                resource_id=config.resource_id,
                tenant_id=config.tenant_id,
                date_from=date_from,
                date_to=date_to,
                timezone=timezone,
            ),
            policy,
        )

        if as_json:
            console.print_json(data=result.to_dict())
        else:
            _render_result(result)

    except (FileNotFoundError, ValueError, FreeSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("book-series")
def book_series(
    start: Annotated[str, typer.Option("--start", help="First occurrence (YYYY-MM-DD HH:mm, local time).")],
    cadence: Annotated[str, typer.Option("--cadence", help="weekly, monthly-date, monthly-day, yearly or none.")] = "weekly",
    count: Annotated[int, typer.Option("--count", "-n", help="Number of occurrences to book.")] = 1,
    title: Annotated[str, typer.Option("--title", help="Title stored on the series.")] = "",
    config_file: ConfigOption = None,
):
    """
    Book a recurring series, stopping at the first occupied occurrence.
    """
    try:
        config = _load_config(config_file)
        policy = config.get_policy()
        tz_name = resolve_timezone(config.timezone).name

        try:
            start_time = pendulum.from_format(start, "YYYY-MM-DD HH:mm", tz=tz_name)
        except ValueError as e:
            console.print(f"[red]Could not parse --start '{start}': {e}[/red]")
            raise typer.Exit(1)

        store = JsonIntervalStore(config.store_file)
        materializer = SeriesMaterializer(store=store)
        result = materializer.materialize_series(
            resource_id=config.resource_id,
            tenant_id=config.tenant_id,
            start=start_time,
            end=start_time.add(minutes=policy.slot_duration),
            cadence=cadence,
            requested_count=count,
            policy=policy,
            title=title,
        )

        console.print(f"[green]✓ Series {result.series_id}: {result.created_count} occurrence(s) booked[/green]")
        for interval in result.intervals:
            console.print(
                f"  {interval.position_in_series:>2}. "
                f"{interval.start.format('dddd, YYYY-MM-DD HH:mm')} - {interval.end.format('HH:mm')}"
            )

        if result.truncated:
            console.print(
                f"[yellow]⚠ Stopped after {result.created_count} of {result.planned_count} "
                f"occurrences: the next one is already booked.[/yellow]"
            )

    except SeriesConflictError as e:
        console.print(f"[bold red]Nothing booked:[/bold red] {e}")
        raise typer.Exit(1)

    except (FileNotFoundError, ValueError, FreeSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("show-config")
def show_config(config_file: ConfigOption = None):
    """
    Show the slot policy from the config file.
    """
    try:
        config = _load_config(config_file)
        policy = config.get_policy()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    schedule_lines = "\n".join(
        f"  {day.capitalize()}: {_format_windows(windows)}"
        for day, windows in policy.weekly_availability.to_dict().items()
    ) or "  (none - resource default or all day)"
    cadences = ", ".join(c.value for c in policy.recurrence.allowed_cadences) or "none"

    console.print(Panel.fit(
        f"[bold]Resource:[/bold] {config.resource_id} (tenant {config.tenant_id})\n"
        f"[bold]Timezone:[/bold] {policy.timezone}\n"
        f"[bold]Slot:[/bold] {policy.slot_duration} min, buffer {policy.buffer_time} min\n"
        f"[bold]Window:[/bold] {policy.min_notice_hours} h notice, {policy.advance_booking_days} days ahead\n"
        f"[bold]Start minutes:[/bold] {', '.join(map(str, policy.allowed_start_minutes)) or 'any'}\n"
        f"[bold]Recurrence:[/bold] {cadences} (max {policy.recurrence.max_series_bookings})\n"
        f"[bold]Availability:[/bold]\n{schedule_lines}",
        title="Slot policy"
    ))


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]freeslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
