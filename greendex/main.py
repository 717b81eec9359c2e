"""
main.py – CLI entry point for the Greendex commute tracker.

Usage
-----
Log a trip (unit defaults to the configured default unit):
    python -m greendex.main add --mode bus --distance 10
    python -m greendex.main add --mode bike --distance 8 --unit km --date 2024-05-09

Review:
    python -m greendex.main list --limit 20
    python -m greendex.main stats
    python -m greendex.main badges

Settings:
    python -m greendex.main settings show
    python -m greendex.main settings set --factor bus=0.2 --occupancy 2
    python -m greendex.main settings reset

Data:
    python -m greendex.main export --outdir exports/
    python -m greendex.main delete <trip-id>
    python -m greendex.main reset --yes

Common options:
    --data-dir DIR   (overrides GREENDEX_DATA_DIR)
    --verbose        (DEBUG logging)
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from greendex.config import get_config
from greendex.constants import MODE_LABELS, TRANSPORT_MODES
from greendex.export import write_csv
from greendex.service import (
    SettingsValidationError,
    TrackerService,
    TripValidationError,
)

console = Console()


def _service(args: argparse.Namespace) -> TrackerService:
    cfg = get_config(
        data_dir=getattr(args, "data_dir", None),
        log_level="DEBUG" if getattr(args, "verbose", False) else None,
    )
    logging.basicConfig(
        level=cfg.log_level_number,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )
    service = TrackerService.from_config(cfg)
    for warning in service.warnings:
        console.print(f"[yellow]Warning:[/] {warning}")
    args.export_dir = cfg.export_dir
    return service


# ─────────────────────────────────────────────────────────────
# Sub-commands
# ─────────────────────────────────────────────────────────────

def cmd_add(args: argparse.Namespace) -> int:
    """Handle: add. Log one trip and report any badges it unlocked."""
    service = _service(args)
    try:
        result = service.add_trip(
            mode=args.mode,
            distance=args.distance,
            unit=args.unit,
            date=args.date,
            notes=args.notes,
        )
    except TripValidationError as e:
        for err in e.errors:
            console.print(f"[red]Error:[/] {err}")
        return 1

    trip = result.trip
    console.print(
        f"[green]Logged[/] {MODE_LABELS[trip.mode]} {trip.distance:g} {trip.unit} on {trip.date}: "
        f"{trip.emissions:.3f} kg CO₂e emitted, [green]{trip.savings:.3f} kg saved[/]"
    )
    for badge in service.badges():
        if badge["id"] in result.new_badges:
            console.print(f"{badge['icon']}  [bold]Badge unlocked:[/] {badge['name']} – {badge['description']}")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Handle: list. Print the most recent trips."""
    service = _service(args)
    trips = sorted(service.trips, key=lambda t: t.date, reverse=True)[: args.limit]

    table = Table(title=f"Trips (most recent, limit={args.limit})")
    table.add_column("id", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Mode")
    table.add_column("Distance", justify="right")
    table.add_column("kg CO₂e", justify="right")
    table.add_column("Saved", justify="right", style="green")
    table.add_column("Notes", style="dim")
    for t in trips:
        table.add_row(
            t.id,
            t.date.isoformat(),
            MODE_LABELS.get(t.mode, t.mode),
            f"{t.distance:g} {t.unit}",
            f"{t.emissions:.3f}",
            f"{t.savings:.3f}",
            (t.notes or "")[:40],
        )
    console.print(table)
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    """Handle: delete. Remove one trip by id."""
    service = _service(args)
    if not service.delete_trip(args.trip_id):
        console.print(f"[red]Error:[/] no trip with id {args.trip_id}")
        return 1
    console.print(f"[green]Deleted[/] trip {args.trip_id}")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Handle: stats. Print period totals, streak, and mode usage."""
    service = _service(args)
    summary = service.dashboard()

    totals = Table(title="Impact")
    totals.add_column("Period", style="cyan")
    totals.add_column("Trips", justify="right")
    totals.add_column("kg CO₂e", justify="right")
    totals.add_column("Saved", justify="right", style="green")
    for label, period in (("Today", summary.today), ("Last 7 days", summary.week), ("Lifetime", summary.lifetime)):
        totals.add_row(label, str(period.trips), f"{period.emissions:.3f}", f"{period.savings:.3f}")
    console.print(totals)

    console.print(
        f"Streak: [bold]{summary.streak} day{'s' if summary.streak != 1 else ''}[/] ({summary.streak_status})  "
        f"Green trips: {summary.green_share_pct:.1f}%  "
        f"Week trend: emissions {summary.emissions_trend_pct:+.1f}%, savings {summary.savings_trend_pct:+.1f}%"
    )

    if summary.modes:
        modes = Table(title="Transport mode usage")
        modes.add_column("Mode")
        modes.add_column("Trips", justify="right")
        modes.add_column("Share", justify="right")
        modes.add_column("Saved", justify="right", style="green")
        for m in summary.modes:
            modes.add_row(m.label, str(m.count), f"{m.percentage:.1f}%", f"{m.savings:.3f}")
        console.print(modes)
    return 0


def cmd_badges(args: argparse.Namespace) -> int:
    """Handle: badges. Show every badge with earned state and progress."""
    service = _service(args)
    table = Table(title="Badges")
    table.add_column("", justify="center")
    table.add_column("Badge", style="bold")
    table.add_column("Requirement")
    table.add_column("Progress", justify="right")
    table.add_column("Earned", style="dim")
    for b in service.badges():
        status = "[green]earned[/]" if b["earned"] else f"{b['progress_pct']:.0f}%"
        table.add_row(b["icon"], b["name"], b["requirement"], status, b["earned_at"] or "")
    console.print(table)
    return 0


def _print_settings(service: TrackerService) -> None:
    settings = service.get_settings()
    table = Table(title="Emission factors (kg CO₂e / mile)")
    table.add_column("Mode", style="cyan")
    table.add_column("Factor", justify="right")
    table.add_column("Effective", justify="right")
    for mode in TRANSPORT_MODES:
        table.add_row(
            MODE_LABELS[mode],
            f"{settings.factors.factor_for(mode):.3f}",
            f"{service.calculator.effective_factor(mode):.3f}",
        )
    console.print(table)
    console.print(
        f"Rideshare occupancy: {settings.rideshare_occupancy:g}   Default unit: {settings.default_unit}"
    )


def _parse_factor_args(pairs: list[str]) -> dict[str, str]:
    factors: dict[str, str] = {}
    for pair in pairs:
        mode, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"Expected MODE=VALUE, got '{pair}'")
        factors[mode.strip()] = value.strip()
    return factors


def cmd_settings(args: argparse.Namespace) -> int:
    """Handle: settings show|set|reset."""
    service = _service(args)
    if args.action == "reset":
        service.reset_settings()
        console.print("[green]Emission settings reset to defaults.[/]")
    elif args.action == "set":
        try:
            factors = _parse_factor_args(args.factor) if args.factor else None
            service.update_settings(
                factors=factors,
                rideshare_occupancy=args.occupancy,
                default_unit=args.default_unit,
            )
        except argparse.ArgumentTypeError as e:
            console.print(f"[red]Error:[/] {e}")
            return 1
        except SettingsValidationError as e:
            for err in e.errors:
                console.print(f"[red]Error:[/] {err}")
            return 1
        console.print("[green]Emission settings saved.[/] Existing trips keep their recorded values.")
    _print_settings(service)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Handle: export. Write trips as CSV (or print with --stdout)."""
    service = _service(args)
    if args.stdout:
        print(service.export_csv())
        return 0

    outdir = Path(args.outdir) if args.outdir else args.export_dir
    dest = write_csv(service.trips, outdir)
    summary = service.export_summary()
    console.print(
        f"[green]Exported[/] {summary.total_trips} trip(s) ({summary.date_range}) → {dest}\n"
        f"  Total distance {summary.total_distance:g}, "
        f"emissions {summary.total_emissions:.3f} kg, savings {summary.total_savings:.3f} kg"
    )
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    """Handle: reset. Delete all trips, badges and settings."""
    if not args.yes:
        console.print("[red]Refusing to reset without --yes.[/] This deletes all trips, badges and settings.")
        return 1
    service = _service(args)
    service.reset_all()
    console.print("[green]All data cleared.[/]")
    return 0


# ─────────────────────────────────────────────────────────────
# Argument parsing
# ─────────────────────────────────────────────────────────────

def _build_shared_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by every sub-command."""
    parser.add_argument(
        "--data-dir",
        dest="data_dir",
        default=None,
        help="Directory holding the JSON data store (default: GREENDEX_DATA_DIR or ~/.greendex)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct and return the top-level argument parser."""
    root = argparse.ArgumentParser(
        prog="greendex",
        description="Greendex – log commutes, see emissions saved, earn badges.",
    )
    sub = root.add_subparsers(dest="command", required=True)

    # ── add ────────────────────────────────────────────────────
    p_add = sub.add_parser("add", help="Log a trip.")
    p_add.add_argument("--mode", required=True, choices=TRANSPORT_MODES, help="Transport mode")
    p_add.add_argument("--distance", required=True, help="Distance travelled (0 < d <= 10000)")
    p_add.add_argument("--unit", choices=("mi", "km"), default=None, help="Distance unit (default: settings)")
    p_add.add_argument("--date", default=None, help="Trip date, e.g. 2024-05-09 (default: today)")
    p_add.add_argument("--notes", default=None, help="Optional free-text note")
    _build_shared_args(p_add)

    # ── list ───────────────────────────────────────────────────
    p_list = sub.add_parser("list", help="List logged trips.")
    p_list.add_argument("--limit", type=int, default=50, help="Max number of trips (default 50)")
    _build_shared_args(p_list)

    # ── delete ─────────────────────────────────────────────────
    p_delete = sub.add_parser("delete", help="Delete a trip by id.")
    p_delete.add_argument("trip_id", help="Trip id as shown by `list`")
    _build_shared_args(p_delete)

    # ── stats / badges ─────────────────────────────────────────
    _build_shared_args(sub.add_parser("stats", help="Show impact totals, streak and mode usage."))
    _build_shared_args(sub.add_parser("badges", help="Show badges and progress."))

    # ── settings ───────────────────────────────────────────────
    p_settings = sub.add_parser("settings", help="Show or change emission settings.")
    p_settings.add_argument("action", choices=("show", "set", "reset"))
    p_settings.add_argument(
        "--factor",
        action="append",
        default=[],
        metavar="MODE=VALUE",
        help="Emission factor in kg CO₂e/mile, repeatable (e.g. --factor bus=0.2)",
    )
    p_settings.add_argument("--occupancy", default=None, help="Average rideshare occupancy (0 < n <= 10)")
    p_settings.add_argument("--default-unit", dest="default_unit", choices=("mi", "km"), default=None)
    _build_shared_args(p_settings)

    # ── export ─────────────────────────────────────────────────
    p_export = sub.add_parser("export", help="Export trips as CSV.")
    p_export.add_argument("--outdir", default=None, help="Output directory (default: GREENDEX_EXPORT_DIR)")
    p_export.add_argument("--stdout", action="store_true", default=False, help="Print CSV instead of writing a file")
    _build_shared_args(p_export)

    # ── reset ──────────────────────────────────────────────────
    p_reset = sub.add_parser("reset", help="Delete all trips, badges and settings.")
    p_reset.add_argument("--yes", action="store_true", default=False, help="Confirm the reset")
    _build_shared_args(p_reset)

    return root


# ─────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────

def main() -> None:
    """Parse arguments and dispatch to the correct sub-command."""
    parser = build_parser()
    args = parser.parse_args()

    dispatch = {
        "add": cmd_add,
        "list": cmd_list,
        "delete": cmd_delete,
        "stats": cmd_stats,
        "badges": cmd_badges,
        "settings": cmd_settings,
        "export": cmd_export,
        "reset": cmd_reset,
    }
    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    sys.exit(handler(args))


if __name__ == "__main__":
    main()
