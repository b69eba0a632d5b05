"""
PetAlert - Core Utilities
Central configuration, errors, logging, and geo helpers.
"""

from src.core.config import settings
from src.core.constants import (
    ReportStatus,
    ALLOWED_TRANSITIONS,
    SEARCHABLE_STATUSES,
    RADIUS_PRESETS_KM,
)
from src.core.exceptions import (
    PetAlertError,
    InvalidCoordinate,
    ValidationError,
    NotFound,
    InvalidTransition,
    ConcurrentUpdate,
)
from src.core.geo_utils import (
    Point,
    haversine_distance,
    validate_coordinate,
    is_valid_coordinate,
)

__all__ = [
    "settings",
    "ReportStatus",
    "ALLOWED_TRANSITIONS",
    "SEARCHABLE_STATUSES",
    "RADIUS_PRESETS_KM",
    "PetAlertError",
    "InvalidCoordinate",
    "ValidationError",
    "NotFound",
    "InvalidTransition",
    "ConcurrentUpdate",
    "Point",
    "haversine_distance",
    "validate_coordinate",
    "is_valid_coordinate",
]
