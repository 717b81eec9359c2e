"""
store.py – JSON-file persistence for trips, emission settings, and badges.

Layout under the data directory:
    data_dir/
        carbon-tracker-trips.json              list of Trip
        carbon-tracker-emission-settings.json  EmissionSettings
        carbon-tracker-badges.json             list of EarnedAchievement

Loaders never raise on bad content.  Each returns ``(value, warnings)``:
unparseable files fall back to defaults / empty state, invalid records are
dropped, and in both cases the original file is kept next to the store with
a ``.corrupt`` suffix so nothing is silently lost on the next save.
Missing files are not an error.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from greendex import validators
from greendex.constants import CORRUPT_SUFFIX, STORE_BADGES, STORE_SETTINGS, STORE_TRIPS
from greendex.schemas import EarnedAchievement, EmissionSettings, Trip

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Serialise *data* to JSON at *path* via a temp file and atomic replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    with tmp.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=indent, ensure_ascii=False, default=str)
    os.replace(tmp, path)


def _read_json(path: Path) -> tuple[Any, str | None]:
    """Return (data, error). Missing file → (None, None)."""
    if not path.exists():
        return None, None
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh), None
    except (OSError, ValueError) as e:
        return None, f"Could not parse {path.name}: {e}"


def _quarantine(path: Path) -> Path:
    """Move a bad store file aside and return its new path."""
    dest = path.with_name(path.name + CORRUPT_SUFFIX)
    os.replace(path, dest)
    logger.warning("Kept unreadable data as %s", dest)
    return dest


def _settings_errors(settings: EmissionSettings) -> list[str]:
    errors = []
    for mode, value in settings.factors.model_dump().items():
        if not validators.validate_emission_factor(value):
            errors.append(f"factor for {mode} out of range: {value}")
    if not validators.validate_occupancy(settings.rideshare_occupancy):
        errors.append(f"rideshare occupancy out of range: {settings.rideshare_occupancy}")
    return errors


# ─────────────────────────────────────────────────────────────
# Store
# ─────────────────────────────────────────────────────────────

class JsonStore:
    """Durable keyed store backed by three JSON files in *data_dir*."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    @property
    def trips_path(self) -> Path:
        return self.data_dir / STORE_TRIPS

    @property
    def settings_path(self) -> Path:
        return self.data_dir / STORE_SETTINGS

    @property
    def badges_path(self) -> Path:
        return self.data_dir / STORE_BADGES

    # ---------- Trips ----------
    def load_trips(self) -> tuple[list[Trip], list[str]]:
        return self._load_records(self.trips_path, Trip, "trip")

    def save_trips(self, trips: list[Trip]) -> None:
        _write_json(self.trips_path, [t.model_dump(mode="json") for t in trips])

    # ---------- Badges ----------
    def load_badges(self) -> tuple[list[EarnedAchievement], list[str]]:
        return self._load_records(self.badges_path, EarnedAchievement, "badge")

    def save_badges(self, earned: list[EarnedAchievement]) -> None:
        _write_json(self.badges_path, [e.model_dump(mode="json") for e in earned])

    # ---------- Settings ----------
    def load_settings(self) -> tuple[EmissionSettings, list[str]]:
        """Persisted settings, or defaults when missing or malformed."""
        path = self.settings_path
        data, error = _read_json(path)
        if data is None and error is None:
            return EmissionSettings(), []

        warnings: list[str] = []
        if error is None:
            try:
                settings = EmissionSettings.model_validate(data)
            except ValidationError as e:
                error = f"Invalid settings in {path.name}: {e.error_count()} error(s)"
            else:
                problems = _settings_errors(settings)
                if not problems:
                    return settings, []
                error = f"Invalid settings in {path.name}: {'; '.join(problems)}"

        warnings.append(f"{error}. Using default emission settings.")
        logger.warning(warnings[-1])
        _quarantine(path)
        return EmissionSettings(), warnings

    def save_settings(self, settings: EmissionSettings) -> None:
        _write_json(self.settings_path, settings.model_dump(mode="json"))

    # ---------- Reset ----------
    def clear(self) -> None:
        """Delete every store file (full data reset)."""
        for path in (self.trips_path, self.settings_path, self.badges_path):
            if path.exists():
                path.unlink()
        logger.info("Cleared data store at %s", self.data_dir)

    # ---------- Internal ----------
    def _load_records(self, path: Path, model, label: str) -> tuple[list, list[str]]:
        data, error = _read_json(path)
        if data is None and error is None:
            return [], []
        if error is None and not isinstance(data, list):
            error = f"Expected a list in {path.name}, got {type(data).__name__}"
        if error is not None:
            message = f"{error}. Starting with no {label}s."
            logger.warning(message)
            _quarantine(path)
            return [], [message]

        records = []
        warnings: list[str] = []
        for i, raw in enumerate(data):
            try:
                records.append(model.model_validate(raw))
            except ValidationError as e:
                warnings.append(f"Skipped invalid {label} #{i} in {path.name}: {e.error_count()} error(s)")
                logger.warning(warnings[-1])
        if warnings:
            _quarantine(path)
            _write_json(path, [r.model_dump(mode="json") for r in records])
        return records, warnings
