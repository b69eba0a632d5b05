"""
PetAlert - Error Taxonomy
Domain errors raised by the matching and lifecycle core.

Caller errors and missing entities, plus ConcurrentUpdate when a status
write keeps losing its compare-and-set. None are retried here.
Infrastructure failures (database unavailable) are not wrapped here and
propagate as raised by SQLAlchemy.
"""

import math
from typing import Any, Dict, List, Optional, Sequence


def _json_value(value: Any) -> Any:
    """JSON-safe form of a rejected coordinate: non-finite values as strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return value
    if value is None:
        return None
    return str(value)


class PetAlertError(Exception):
    """Base class for domain errors."""

    kind = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": str(self)}


class InvalidCoordinate(PetAlertError):
    """Latitude or longitude outside the valid range."""

    kind = "invalid_coordinate"

    def __init__(self, latitude: Any, longitude: Any):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            f"Invalid coordinate ({latitude}, {longitude}): latitude must be in "
            f"[-90, 90] and longitude in [-180, 180]"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["latitude"] = _json_value(self.latitude)
        data["longitude"] = _json_value(self.longitude)
        return data


class ValidationError(PetAlertError):
    """Missing or malformed required fields."""

    kind = "validation_error"

    def __init__(self, fields: Sequence[str], message: Optional[str] = None):
        self.fields: List[str] = list(fields)
        super().__init__(message or f"Invalid or missing fields: {', '.join(self.fields)}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["fields"] = self.fields
        return data


class NotFound(PetAlertError):
    """Unknown report or sighting id."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["entity"] = self.entity
        data["id"] = self.entity_id
        return data


class InvalidTransition(PetAlertError):
    """Requested status change is not reachable from the current status."""

    kind = "invalid_transition"

    def __init__(self, report_id: str, current: Any, requested: Any):
        self.report_id = report_id
        self.current = getattr(current, "value", current)
        self.requested = getattr(requested, "value", requested)
        super().__init__(
            f"Report {report_id} cannot move from '{self.current}' to '{self.requested}'"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["current"] = self.current
        data["requested"] = self.requested
        return data


class ConcurrentUpdate(PetAlertError):
    """Status kept changing under a writer until its retries ran out."""

    kind = "concurrent_update"

    def __init__(self, report_id: str, attempts: int):
        self.report_id = report_id
        self.attempts = attempts
        super().__init__(
            f"Report {report_id} changed concurrently {attempts} times, giving up"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["id"] = self.report_id
        return data
