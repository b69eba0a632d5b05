"""
Lost-pet reports and sightings.

Immutable snapshots handed out by the report store. The store owns the
canonical records; these are copies taken at read time.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from src.core.constants import ReportStatus
from src.core.geo_utils import format_distance


def _iso(value: Optional[Any]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Report:
    """
    A lost pet reported by its owner.

    Only status, the claim attribution fields and the resolution fields ever
    change between snapshots of the same report.
    """
    id: str
    latitude: float
    longitude: float
    status: ReportStatus
    created_at: datetime

    # Pet details
    pet_name: str
    pet_type: str
    color: str
    size: str
    last_seen_location: str
    breed: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    last_seen_date: Optional[date] = None

    # Owner contact
    contact_name: str = ""
    contact_email: str = ""
    contact_phone: Optional[str] = None

    # Lifecycle
    claimed_by_sighting_id: Optional[int] = None
    claimed_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "status": self.status.value,
            "created_at": _iso(self.created_at),
            "pet_name": self.pet_name,
            "pet_type": self.pet_type,
            "breed": self.breed,
            "color": self.color,
            "size": self.size,
            "description": self.description,
            "image_url": self.image_url,
            "last_seen_location": self.last_seen_location,
            "last_seen_date": _iso(self.last_seen_date),
            "contact_name": self.contact_name,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
            "claimed_by_sighting_id": self.claimed_by_sighting_id,
            "claimed_at": _iso(self.claimed_at),
            "resolved_by": self.resolved_by,
            "resolved_at": _iso(self.resolved_at),
        }


@dataclass(frozen=True)
class SightingReport:
    """A third party's report of having found the pet. Never mutated."""
    id: int
    report_id: str
    latitude: float
    longitude: float
    submitted_at: datetime
    found_location: str
    description: str
    found_date: Optional[date] = None
    image_url: Optional[str] = None

    # Reporter (all optional)
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    reporter_phone: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "report_id": self.report_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "submitted_at": _iso(self.submitted_at),
            "found_location": self.found_location,
            "found_date": _iso(self.found_date),
            "description": self.description,
            "image_url": self.image_url,
            "reporter_name": self.reporter_name,
            "reporter_email": self.reporter_email,
            "reporter_phone": self.reporter_phone,
        }


@dataclass(frozen=True)
class NearbyMatch:
    """A report returned by a nearby search with its distance."""
    report: Report
    distance_km: float

    def to_dict(self) -> Dict[str, Any]:
        data = self.report.to_dict()
        data["distance_km"] = round(self.distance_km, 3)
        data["distance_label"] = format_distance(self.distance_km)
        return data


@dataclass(frozen=True)
class SightingResult:
    """Outcome of submitting a sighting."""
    sighting: SightingReport
    report: Report
    claim_trigger: bool

    @property
    def status(self) -> ReportStatus:
        return self.report.status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sighting": self.sighting.to_dict(),
            "report_id": self.report.id,
            "status": self.report.status.value,
            "claim_trigger": self.claim_trigger,
        }
