"""
tracker.py – TrackerService factory for the Dashboard API.

Reads GREENDEX_DATA_DIR from the environment (same variable used by the
CLI).  The service is built once per application and handed to routes via
FastAPI dependencies, so tests can swap in their own.
"""
from __future__ import annotations

import logging

from greendex.config import get_config
from greendex.service import TrackerService

log = logging.getLogger(__name__)


def build_service() -> TrackerService:
    """Load the configured data directory into a new TrackerService."""
    cfg = get_config()
    service = TrackerService.from_config(cfg)
    for warning in service.warnings:
        log.warning("[startup] %s", warning)
    return service
