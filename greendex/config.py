"""
config.py – Load and validate runtime settings from the environment.

All configuration comes from environment variables (or a .env file at the
repository root).  Call `get_config()` at startup and pass the resulting
Config object to whatever needs it.

Variables
---------
GREENDEX_DATA_DIR    directory holding the JSON store   (default ~/.greendex)
GREENDEX_LOG_LEVEL   logging level name                  (default INFO)
GREENDEX_EXPORT_DIR  where CLI CSV exports are written   (default: cwd)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Repository root: the directory containing greendex/
_REPO_ROOT = Path(__file__).resolve().parent.parent

_env_file = _REPO_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file, override=True)

DEFAULT_DATA_DIR = Path.home() / ".greendex"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class Config:
    """Validated runtime configuration."""

    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"
    export_dir: Path = Path(".")

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def _resolve(raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (_REPO_ROOT / path).resolve()
    return path


def get_config(data_dir: str | None = None, log_level: str | None = None) -> Config:
    """
    Read environment variables, validate them, and return a Config.

    Parameters
    ----------
    data_dir, log_level:
        Overrides (e.g. from CLI flags) that win over the environment.

    Raises
    ------
    EnvironmentError
        If the log level is not a standard logging level name.
    """
    cfg = Config()

    raw_dir = data_dir or os.environ.get("GREENDEX_DATA_DIR")
    if raw_dir:
        cfg.data_dir = _resolve(raw_dir)

    raw_export = os.environ.get("GREENDEX_EXPORT_DIR")
    if raw_export:
        cfg.export_dir = _resolve(raw_export)

    level = (log_level or os.environ.get("GREENDEX_LOG_LEVEL") or "INFO").strip().upper()
    if level not in _LOG_LEVELS:
        raise EnvironmentError(
            f"Invalid GREENDEX_LOG_LEVEL '{level}'. Expected one of: {', '.join(_LOG_LEVELS)}"
        )
    cfg.log_level = level
    return cfg
