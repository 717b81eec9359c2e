"""
main.py – FastAPI dashboard API for the Greendex commute tracker.

Start:
    cd /path/to/greendex
    uvicorn dashboard_api.main:app --reload --port 8000

All state lives in the JSON store under GREENDEX_DATA_DIR; the API is a thin
layer over greendex.service.TrackerService.
"""
from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from greendex.export import export_filename
from greendex.schemas import SettingsUpdate, TripCreate, TripPreview
from greendex.service import (
    SettingsValidationError,
    TrackerService,
    TripValidationError,
)

from . import queries
from .tracker import build_service


def create_app(service: TrackerService | None = None) -> FastAPI:
    """
    Build the application around *service* (or one loaded from the
    environment on first use).
    """
    app = FastAPI(
        title="Greendex – Dashboard API",
        version="1.0.0",
        description="Commute trips, emissions saved, streaks and badges.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = service

    def get_service() -> TrackerService:
        if app.state.service is None:
            app.state.service = build_service()
        return app.state.service

    @app.get("/api/trips", summary="Logged trips, newest first")
    def list_trips(limit: int | None = None, svc: TrackerService = Depends(get_service)):
        return queries.get_trips(svc, limit=limit)

    @app.post("/api/trips", status_code=201, summary="Log a trip and evaluate badges")
    def add_trip(body: TripCreate, svc: TrackerService = Depends(get_service)):
        """
        Computes emissions/savings with the current settings, stores the trip,
        and returns it with any badges unlocked by this trip.
        """
        try:
            result = svc.add_trip(
                mode=body.mode,
                distance=body.distance,
                unit=body.unit,
                date=body.date,
                notes=body.notes,
            )
        except TripValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors) from e
        return {"trip": queries.trip_payload(result.trip), "new_badges": result.new_badges}

    @app.post("/api/trips/preview", summary="Emissions/savings a trip would get, without saving")
    def preview_trip(body: TripPreview, svc: TrackerService = Depends(get_service)):
        try:
            figures = svc.preview_trip(body.mode, body.distance, body.unit)
        except TripValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors) from e
        return {"emissions": figures.emissions, "savings": figures.savings}

    @app.get("/api/trips/{trip_id}", summary="One trip")
    def get_trip(trip_id: str, svc: TrackerService = Depends(get_service)):
        trip = svc.get_trip(trip_id)
        if trip is None:
            raise HTTPException(status_code=404, detail=f"Trip {trip_id} not found")
        return queries.trip_payload(trip)

    @app.delete("/api/trips/{trip_id}", summary="Delete a trip (earned badges are kept)")
    def delete_trip(trip_id: str, svc: TrackerService = Depends(get_service)):
        if not svc.delete_trip(trip_id):
            raise HTTPException(status_code=404, detail=f"Trip {trip_id} not found")
        return {"ok": True}

    @app.get("/api/settings", summary="Emission settings")
    def get_settings(svc: TrackerService = Depends(get_service)):
        return queries.get_settings(svc)

    @app.patch("/api/settings", summary="Change emission settings")
    def update_settings(body: SettingsUpdate, svc: TrackerService = Depends(get_service)):
        """
        Body fields are all optional; ``factors`` may hold a subset of modes.
        Existing trips keep the figures they were logged with.
        """
        try:
            svc.update_settings(
                factors=body.factors,
                rideshare_occupancy=body.rideshare_occupancy,
                default_unit=body.default_unit,
            )
        except SettingsValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors) from e
        return queries.get_settings(svc)

    @app.post("/api/settings/reset", summary="Restore default emission settings")
    def reset_settings(svc: TrackerService = Depends(get_service)):
        svc.reset_settings()
        return queries.get_settings(svc)

    @app.get("/api/badges", summary="Badge catalog with earned state and progress")
    def badges(svc: TrackerService = Depends(get_service)):
        return queries.get_badges(svc)

    @app.get("/api/dashboard", summary="Full dashboard payload")
    def dashboard(svc: TrackerService = Depends(get_service)):
        return queries.get_dashboard(svc)

    @app.get("/api/export", summary="Trips as CSV", response_class=PlainTextResponse)
    def export_csv(svc: TrackerService = Depends(get_service)):
        return PlainTextResponse(
            svc.export_csv(),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
        )

    @app.get("/api/export/summary", summary="Totals and date range of the export")
    def export_summary(svc: TrackerService = Depends(get_service)):
        return queries.get_export_summary(svc)

    @app.post("/api/reset", summary="Delete all trips, badges and settings")
    def reset(svc: TrackerService = Depends(get_service)):
        svc.reset_all()
        return {"status": "ok", "message": "All data cleared."}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
