"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from weightcal import service
from weightcal.config import Settings, default_config_path, get_settings
from weightcal.store import Record
from weightcal.store.models import DELIMITER
from weightcal.sync import SyncErrorKind, SyncResult
from weightcal.tracking import build_chart_series, compute_averages, series_from_records
from weightcal.tracking.averages import format_calories, format_weight_loss
from weightcal.tracking.parsing import parse_date, parse_number

app = typer.Typer(
    help="Personal weight and calorie log with cloud-folder sync",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

sync_app = typer.Typer(help="Export to and import from the sync folder")
config_app = typer.Typer(help="Show or create the configuration file")

app.add_typer(sync_app, name="sync")
app.add_typer(config_app, name="config")

# Subcommands that must not trigger the startup import
_NO_STARTUP_IMPORT = ("sync", "config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def fail(command: str, message: str, json_output: bool) -> None:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def validate_number(command: str, label: str, text: str, json_output: bool) -> str:
    """Return the stripped text if it is a usable number, otherwise exit."""
    value = text.strip()
    if DELIMITER in value:
        fail(command, f"{label} must not contain '{DELIMITER}': {text!r}", json_output)
    if parse_number(value) is None:
        fail(command, f"{label} is not a number: {text!r}", json_output)
    return value


def export_after_change(json_output: bool) -> SyncResult:
    """Export after a mutation. Failures are reported, never fatal."""
    result = service.export_snapshot()
    if not json_output and result.error is not None:
        if result.error.kind != SyncErrorKind.DISABLED:
            console.print(f"[yellow]Export failed: {result.error.message}[/yellow]")
    return result


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Personal weight and calorie log with cloud-folder sync."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.logging.level)

    if settings.sync.import_on_startup and ctx.invoked_subcommand not in _NO_STARTUP_IMPORT:
        if service.import_latest_snapshot():
            logger.info("Imported latest snapshot from %s", settings.sync.folder)


# ============================================================================
# Record Commands
# ============================================================================


@app.command()
def add(
    weight: str = typer.Argument(..., help="Weight"),
    calories: str = typer.Argument(..., help="Calories eaten"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD or M/D/YYYY, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a record and export the store."""
    weight = validate_number("add", "Weight", weight, json_output)
    calories = validate_number("add", "Calories", calories, json_output)

    if date_str:
        parsed = parse_date(date_str)
        if parsed is None:
            fail("add", f"Invalid date: {date_str!r}", json_output)
        record_date = parsed.isoformat()
    else:
        record_date = date.today().isoformat()

    record = Record(date=record_date, weight=weight, calorie=calories)
    service.append_record(record)
    result = export_after_change(json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "add",
            "data": {
                "date": record.date,
                "weight": record.weight,
                "calorie": record.calorie,
                "export": result.to_dict(),
            },
            "human_summary": f"Added {record.weight} / {record.calorie} cal for {record.date}",
        })
    else:
        console.print(
            f"[green]Added[/green] {record.date}: {record.weight}, {record.calorie} cal"
        )


@app.command()
def edit(
    record_date: str = typer.Argument(..., metavar="DATE", help="Date of the record, as stored"),
    weight: str = typer.Argument(..., help="New weight"),
    calories: str = typer.Argument(..., help="New calories"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Change the first record for DATE and export the store."""
    weight = validate_number("edit", "Weight", weight, json_output)
    calories = validate_number("edit", "Calories", calories, json_output)

    if not service.update_record(record_date, weight, calories):
        fail("edit", f"No record for {record_date}", json_output)

    result = export_after_change(json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "edit",
            "data": {
                "date": record_date,
                "weight": weight,
                "calorie": calories,
                "export": result.to_dict(),
            },
            "human_summary": f"Updated {record_date}",
        })
    else:
        console.print(f"[green]Updated[/green] {record_date}: {weight}, {calories} cal")


@app.command()
def delete(
    record_date: str = typer.Argument(..., metavar="DATE", help="Date of the record(s), as stored"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete every record for DATE and export the store."""
    if not yes and not json_output:
        confirm = typer.confirm(f"Delete the record for {record_date}?")
        if not confirm:
            raise typer.Abort()

    removed = service.delete_record(record_date)
    if not removed:
        fail("delete", f"No record for {record_date}", json_output)

    result = export_after_change(json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "delete",
            "data": {"date": record_date, "removed": removed, "export": result.to_dict()},
            "human_summary": f"Deleted {removed} record(s) for {record_date}",
        })
    else:
        console.print(f"[green]Deleted {removed} record(s) for {record_date}[/green]")


@app.command("list")
def list_records(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List records in file order."""
    records = service.load_records()

    if json_output:
        output_json({
            "success": True,
            "command": "list",
            "data": {
                "entries": [
                    {"date": r.date, "weight": r.weight, "calorie": r.calorie}
                    for r in records
                ]
            },
            "human_summary": f"{len(records)} records",
        })
        return

    if not records:
        console.print("No records found")
        return

    table = Table(title="Weight & Calories")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Calories", justify="right", style="green")
    for r in records:
        table.add_row(r.date, r.weight, r.calorie)
    console.print(table)


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show average weight loss per entry and average calories."""
    unit = get_settings().display.weight_unit
    weights, calories = series_from_records(service.load_records())
    averages = compute_averages(weights, calories)

    if json_output:
        output_json({
            "success": True,
            "command": "stats",
            "data": {
                "average_weight_loss": averages.weight_loss,
                "average_calories": averages.calories,
                "weight_unit": unit,
            },
            "human_summary": (
                f"Average weight loss {format_weight_loss(averages.weight_loss, unit)}, "
                f"average calories {format_calories(averages.calories)}"
            ),
        })
    else:
        console.print(f"Average Weight Loss: {format_weight_loss(averages.weight_loss, unit)}")
        console.print(f"Average Calories: {format_calories(averages.calories)}")


@app.command()
def trend(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show weights by date with the linear trend."""
    series = build_chart_series(service.load_records())

    if json_output:
        output_json({
            "success": True,
            "command": "trend",
            "data": {
                "labels": series.labels,
                "weights": series.weights,
                "trend": series.trend,
            },
            "human_summary": f"{len(series)} points",
        })
        return

    if not len(series):
        console.print("No weight entries found")
        return

    table = Table(title="Weight Trend")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Trend", justify="right", style="blue")
    for i, label in enumerate(series.labels):
        trend_value = f"{series.trend[i]:.1f}" if series.trend else "-"
        table.add_row(label, f"{series.weights[i]:.1f}", trend_value)
    console.print(table)


# ============================================================================
# Sync Commands
# ============================================================================


def _report_sync(command: str, result: SyncResult, json_output: bool) -> None:
    if json_output:
        output_json({"success": result.ok, "command": command, "data": result.to_dict()})
        if not result.ok and not result.skipped:
            raise typer.Exit(1)
        return

    if result.ok:
        console.print(f"[green]{command}: {result.path.name if result.path else 'done'}[/green]")
    elif result.error is None:
        console.print(f"[yellow]{command}: nothing to do[/yellow]")
    elif result.error.kind == SyncErrorKind.NOTHING_TO_IMPORT:
        console.print(f"[yellow]{command}: {result.error.message}[/yellow]")
    else:
        console.print(f"[red]{command} failed: {result.error.message}[/red]")
        raise typer.Exit(1)


@sync_app.command("export")
def sync_export(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Export the local store as a new snapshot."""
    _report_sync("sync export", service.export_snapshot(), json_output)


@sync_app.command("import")
def sync_import(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Replace the local store with the newest complete snapshot."""
    _report_sync("sync import", service.get_sync().import_latest(), json_output)


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show() -> None:
    """Print the effective settings as YAML."""
    text = yaml.dump(get_settings().to_dict(), default_flow_style=False, sort_keys=False)
    console.print(text, markup=False, highlight=False)


@config_app.command("init")
def config_init(
    sync_folder: Optional[Path] = typer.Option(
        None, "--sync-folder", help="Cloud-drive folder to sync through"
    ),
    path: Optional[Path] = typer.Option(None, "--path", help="Where to write config.yaml"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a config.yaml with default values."""
    target = path or default_config_path()
    if target.exists() and not force:
        console.print(f"[red]{target} already exists (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    settings = Settings()
    if sync_folder is not None:
        settings.sync.folder = sync_folder.expanduser()
    written = settings.save(target)
    console.print(f"[green]Wrote {written}[/green]")


if __name__ == "__main__":
    app()
