"""
export.py – Tabular CSV export of trips and a short export summary.

Rows are sorted by date ascending; the input list is never reordered.
Emissions and savings are rounded to three decimals; the summary rounds
distance totals to one decimal.
"""
from __future__ import annotations

import csv
import datetime as dt
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from greendex.constants import (
    DISTANCE_DECIMALS,
    EXPORT_EMPTY_MESSAGE,
    EXPORT_FILENAME_TEMPLATE,
    EXPORT_HEADERS,
    KG_DECIMALS,
    MODE_LABELS,
)
from greendex.emission_factors import round_half_up
from greendex.schemas import Trip

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportRow:
    date: str
    mode: str
    distance: float
    unit: str
    emissions: float
    savings: float
    notes: str


@dataclass(frozen=True)
class ExportSummary:
    total_trips: int
    date_range: str
    total_emissions: float
    total_savings: float
    total_distance: float


def format_mode_label(mode: str) -> str:
    """Human label for a transport mode; unknown modes pass through."""
    return MODE_LABELS.get(mode, mode)


def _num(value: float) -> str:
    """Plain number text: 10.0 -> "10", 1.25 -> "1.25"."""
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _format_day(day: dt.date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


def prepare_export_rows(trips: Sequence[Trip]) -> list[ExportRow]:
    return [
        ExportRow(
            date=trip.date.isoformat(),
            mode=format_mode_label(trip.mode),
            distance=trip.distance,
            unit=trip.unit,
            emissions=round_half_up(trip.emissions, KG_DECIMALS),
            savings=round_half_up(trip.savings, KG_DECIMALS),
            notes=trip.notes or "",
        )
        for trip in sorted(trips, key=lambda t: t.date)
    ]


def to_csv(rows: Sequence[ExportRow]) -> str:
    """Render rows as CSV text, or the empty-export message when there are none."""
    if not rows:
        return EXPORT_EMPTY_MESSAGE

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for row in rows:
        writer.writerow([
            row.date,
            row.mode,
            _num(row.distance),
            row.unit,
            _num(row.emissions),
            _num(row.savings),
            row.notes,
        ])
    return buf.getvalue().rstrip("\n")


def export_trips_csv(trips: Sequence[Trip]) -> str:
    return to_csv(prepare_export_rows(trips))


def export_filename(today: dt.date | None = None) -> str:
    """e.g. ``carbon-tracker-export-2024-05-10.csv``"""
    return EXPORT_FILENAME_TEMPLATE.format(date=(today or dt.date.today()).isoformat())


def write_csv(trips: Sequence[Trip], outdir: Path, today: dt.date | None = None) -> Path:
    """Write the CSV export into *outdir* and return the file path."""
    dest = outdir / export_filename(today)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(export_trips_csv(trips), encoding="utf-8")
    logger.info("Exported %d trip(s) to %s", len(trips), dest)
    return dest


def export_summary(trips: Sequence[Trip]) -> ExportSummary:
    if not trips:
        return ExportSummary(
            total_trips=0,
            date_range="No trips",
            total_emissions=0.0,
            total_savings=0.0,
            total_distance=0.0,
        )

    first = _format_day(min(t.date for t in trips))
    last = _format_day(max(t.date for t in trips))
    return ExportSummary(
        total_trips=len(trips),
        date_range=first if first == last else f"{first} - {last}",
        total_emissions=round_half_up(sum(t.emissions for t in trips), KG_DECIMALS),
        total_savings=round_half_up(sum(t.savings for t in trips), KG_DECIMALS),
        total_distance=round_half_up(sum(t.distance for t in trips), DISTANCE_DECIMALS),
    )
