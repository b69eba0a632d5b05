"""
PetAlert - Reports
Lost-pet report and sighting types and their input payloads.
"""

from src.reports.models import (
    Report,
    SightingReport,
    NearbyMatch,
    SightingResult,
)
from src.reports.schemas import (
    ReportPayload,
    SightingPayload,
    parse_payload,
)

__all__ = [
    "Report",
    "SightingReport",
    "NearbyMatch",
    "SightingResult",
    "ReportPayload",
    "SightingPayload",
    "parse_payload",
]
