"""
PetAlert - REST API

FastAPI application for reporting lost pets, finding lost pets nearby,
and reporting found pets.

Run with: uvicorn src.api.main:app --reload
"""

import logging
from datetime import date
from typing import Optional, List, Dict

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.alerts.notification import get_notifier
from src.core.config import settings
from src.core.constants import RADIUS_PRESETS_KM
from src.core.exceptions import (
    ConcurrentUpdate,
    InvalidCoordinate,
    InvalidTransition,
    NotFound,
    PetAlertError,
    ValidationError,
)
from src.core.logging import setup_logging
from src.database.connection import init_db
from src.database.store import ReportStore
from src.matching.service import MatchingService
from src.reports.schemas import ReportPayload

setup_logging()
logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

# FastAPI app
app = FastAPI(
    title="PetAlert",
    description="Report lost pets, find lost pets near you, and report found pets",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class ReportResponse(BaseModel):
    """Lost pet report."""
    id: str
    latitude: float
    longitude: float
    status: str
    created_at: str
    pet_name: str
    pet_type: str
    breed: Optional[str] = None
    color: str
    size: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    last_seen_location: str
    last_seen_date: Optional[str] = None
    contact_name: str
    contact_email: str
    contact_phone: Optional[str] = None
    claimed_by_sighting_id: Optional[int] = None
    claimed_at: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[str] = None


class NearbyReportResponse(ReportResponse):
    """Lost pet report with distance from the searcher."""
    distance_km: float = Field(description="Great-circle distance in kilometers")
    distance_label: str


class NearbyListResponse(BaseModel):
    """Result of a nearby search."""
    count: int
    radius_km: float
    reports: List[NearbyReportResponse]


class SightingCreateRequest(BaseModel):
    """Request to report a found pet."""
    latitude: float
    longitude: float
    found_location: str
    found_date: Optional[date] = None
    description: str
    image_url: Optional[str] = None
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    reporter_phone: Optional[str] = None


class SightingResponse(BaseModel):
    """Found-pet report."""
    id: int
    report_id: str
    latitude: float
    longitude: float
    submitted_at: str
    found_location: str
    found_date: Optional[str] = None
    description: str
    image_url: Optional[str] = None
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    reporter_phone: Optional[str] = None


class SightingResultResponse(BaseModel):
    """Outcome of reporting a found pet."""
    sighting: SightingResponse
    report_id: str
    status: str
    claim_trigger: bool


class SightingListResponse(BaseModel):
    """Sightings for one report, earliest first."""
    report_id: str
    count: int
    sightings: List[SightingResponse]


class ResolveRequest(BaseModel):
    """Request to confirm a pet is back home."""
    resolved_by: Optional[str] = Field(default=None, max_length=100)


class ShareResponse(BaseModel):
    """Link to the found-pet form, for posters and QR codes."""
    report_id: str
    url: str


class StatsResponse(BaseModel):
    """Report statistics."""
    total_reports: int
    by_status: Dict[str, int]
    indexed: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    database: bool


# ============================================================================
# Error Handling
# ============================================================================

ERROR_STATUS_CODES = {
    InvalidCoordinate: 422,
    ValidationError: 422,
    NotFound: 404,
    InvalidTransition: 409,
    ConcurrentUpdate: 409,
}


@app.exception_handler(PetAlertError)
async def pet_alert_error_handler(request: Request, exc: PetAlertError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# ============================================================================
# Dependencies
# ============================================================================

_service: Optional[MatchingService] = None


def get_service() -> MatchingService:
    """Get the matching service, building it and its index on first use."""
    global _service
    if _service is None:
        db = init_db()
        _service = MatchingService(ReportStore(db), notifier=get_notifier())
        _service.rebuild_index()
    return _service


# ============================================================================
# System Routes
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
def health_check(service: MatchingService = Depends(get_service)):
    """Check API and database health."""
    database_ok = service.store.db.check_connection()
    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        version=API_VERSION,
        database=database_ok,
    )


# ============================================================================
# Report Routes
# ============================================================================

@app.post("/api/v1/reports", response_model=ReportResponse, status_code=201, tags=["Reports"])
def create_report(request: ReportPayload, service: MatchingService = Depends(get_service)):
    """
    Report a lost pet.

    The report is immediately visible to nearby searches.
    """
    report = service.create_report(request.model_dump())
    return ReportResponse(**report.to_dict())


@app.get("/api/v1/search/radii", tags=["Reports"])
def get_search_radii():
    """Radius presets offered to searchers, in km."""
    return {
        "default_km": settings.default_search_radius_km,
        "max_km": settings.max_search_radius_km,
        "presets_km": RADIUS_PRESETS_KM,
    }


@app.get("/api/v1/reports/nearby", response_model=NearbyListResponse, tags=["Reports"])
def find_nearby_reports(
    latitude: float = Query(..., description="Searcher latitude"),
    longitude: float = Query(..., description="Searcher longitude"),
    radius_km: Optional[float] = Query(None, description="Search radius in km"),
    service: MatchingService = Depends(get_service),
):
    """
    Lost pets still missing near a location, nearest first.
    """
    radius = radius_km if radius_km is not None else settings.default_search_radius_km
    matches = service.find_nearby(latitude, longitude, radius)

    return NearbyListResponse(
        count=len(matches),
        radius_km=radius,
        reports=[NearbyReportResponse(**m.to_dict()) for m in matches],
    )


@app.get("/api/v1/reports/stats/summary", response_model=StatsResponse, tags=["Reports"])
def get_report_stats(service: MatchingService = Depends(get_service)):
    """Get report counts by status."""
    return StatsResponse(**service.get_statistics())


@app.get("/api/v1/reports/{report_id}", response_model=ReportResponse, tags=["Reports"])
def get_report(report_id: str, service: MatchingService = Depends(get_service)):
    """Get a specific report by ID."""
    return ReportResponse(**service.get_report(report_id).to_dict())


@app.get("/api/v1/reports/{report_id}/share", response_model=ShareResponse, tags=["Reports"])
def get_share_link(report_id: str, service: MatchingService = Depends(get_service)):
    """Link to the found-pet form for this report."""
    return ShareResponse(report_id=report_id, url=service.share_url(report_id))


@app.post("/api/v1/reports/{report_id}/resolve", response_model=ReportResponse, tags=["Reports"])
def resolve_report(
    report_id: str,
    request: Optional[ResolveRequest] = None,
    service: MatchingService = Depends(get_service),
):
    """Confirm the pet has been recovered. Resolved reports cannot be reopened."""
    resolved_by = request.resolved_by if request else None
    report = service.confirm_recovery(report_id, resolved_by)
    return ReportResponse(**report.to_dict())


@app.post("/api/v1/reports/{report_id}/invalidate-claim", response_model=ReportResponse, tags=["Reports"])
def invalidate_claim(report_id: str, service: MatchingService = Depends(get_service)):
    """Reject a false found-pet claim and put the report back into search."""
    report = service.invalidate_claim(report_id)
    return ReportResponse(**report.to_dict())


# ============================================================================
# Sighting Routes
# ============================================================================

@app.post(
    "/api/v1/reports/{report_id}/sightings",
    response_model=SightingResultResponse,
    status_code=201,
    tags=["Sightings"],
)
def report_sighting(
    report_id: str,
    request: SightingCreateRequest,
    service: MatchingService = Depends(get_service),
):
    """
    Report that a lost pet has been found.

    The first report on a missing pet notifies the owner.
    """
    payload = request.model_dump(exclude={"latitude", "longitude"})
    result = service.report_sighting(report_id, request.latitude, request.longitude, payload)
    return SightingResultResponse(**result.to_dict())


@app.get("/api/v1/reports/{report_id}/sightings", response_model=SightingListResponse, tags=["Sightings"])
def list_sightings(report_id: str, service: MatchingService = Depends(get_service)):
    """All found-pet reports for a lost pet, earliest first."""
    sightings = service.list_sightings(report_id)
    return SightingListResponse(
        report_id=report_id,
        count=len(sightings),
        sightings=[SightingResponse(**s.to_dict()) for s in sightings],
    )


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
