"""
PetAlert - Constants and Reference Data
Static values used throughout the application.
"""

from enum import Enum
from typing import Dict, FrozenSet, Tuple


# =============================================================================
# REPORT LIFECYCLE
# =============================================================================

class ReportStatus(str, Enum):
    """Status of a lost-pet report."""
    ACTIVE = "active"      # Still missing, shown in nearby searches
    CLAIMED = "claimed"    # Someone reported finding the pet
    RESOLVED = "resolved"  # Owner confirmed recovery (terminal)


# Allowed status changes. RESOLVED has no exits.
ALLOWED_TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    ReportStatus.ACTIVE: frozenset({ReportStatus.CLAIMED, ReportStatus.RESOLVED}),
    ReportStatus.CLAIMED: frozenset({ReportStatus.RESOLVED, ReportStatus.ACTIVE}),
    ReportStatus.RESOLVED: frozenset(),
}

# Statuses that still appear in the spatial index
SEARCHABLE_STATUSES: FrozenSet[ReportStatus] = frozenset({
    ReportStatus.ACTIVE,
    ReportStatus.CLAIMED,
})


# =============================================================================
# SEARCH RADII
# =============================================================================

# Radius presets offered to users (1, 2 and 5 miles)
RADIUS_PRESETS_KM: Dict[str, float] = {
    "1mi": 1.6,
    "2mi": 3.2,
    "5mi": 8.0,
}

# Coordinate limits
LATITUDE_RANGE: Tuple[float, float] = (-90.0, 90.0)
LONGITUDE_RANGE: Tuple[float, float] = (-180.0, 180.0)

# Retries for optimistic status updates before giving up
STATUS_CAS_MAX_RETRIES: int = 5
