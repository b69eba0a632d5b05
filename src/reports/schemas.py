"""
Input payloads for reports and sightings.

Payloads arrive as plain mappings from the API or CLI layer and are checked
here before anything is persisted. Failures are reported as a single
ValidationError naming every offending field.
"""

from datetime import date
from typing import Any, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.core.exceptions import ValidationError
from src.core.geo_utils import Point, validate_coordinate

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ReportPayload(BaseModel):
    """Fields accepted when reporting a lost pet."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    latitude: float
    longitude: float

    pet_name: str = Field(min_length=1, max_length=100)
    pet_type: Literal["dog", "cat", "other"]
    breed: Optional[str] = Field(default=None, max_length=100)
    color: str = Field(min_length=1, max_length=100)
    size: Literal["small", "medium", "large"]
    description: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    last_seen_location: str = Field(min_length=1, max_length=255)
    last_seen_date: Optional[date] = None

    contact_name: str = Field(min_length=1, max_length=100)
    contact_email: str = Field(min_length=3, max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=30)

    @field_validator("breed", "description", "image_url", "contact_phone", "last_seen_date", mode="before")
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("contact_email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("not an email address")
        return value


class SightingPayload(BaseModel):
    """Fields accepted when someone reports finding a pet."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    report_id: str = Field(min_length=1)
    latitude: float
    longitude: float

    found_location: str = Field(min_length=1, max_length=255)
    found_date: Optional[date] = None
    description: str = Field(min_length=1)
    image_url: Optional[str] = Field(default=None, max_length=500)

    reporter_name: Optional[str] = Field(default=None, max_length=100)
    reporter_email: Optional[str] = Field(default=None, max_length=255)
    reporter_phone: Optional[str] = Field(default=None, max_length=30)

    @field_validator(
        "found_date", "image_url", "reporter_name", "reporter_email", "reporter_phone",
        mode="before",
    )
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)


def check_coordinates(payload: Mapping[str, Any]) -> Point:
    """
    Validate the coordinate pair of a payload.

    Missing coordinates are a ValidationError; present but out-of-range
    values are an InvalidCoordinate.
    """
    missing = [name for name in ("latitude", "longitude") if payload.get(name) is None]
    if missing:
        raise ValidationError(missing)
    return validate_coordinate(payload["latitude"], payload["longitude"])


def parse_payload(model: Type[PayloadT], payload: Mapping[str, Any]) -> PayloadT:
    """
    Coordinates are checked first so that an out-of-range latitude is always
    reported as InvalidCoordinate, never folded into the field list.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    if not isinstance(payload, Mapping):
        raise ValidationError(["payload"], "Payload must be a mapping")

    check_coordinates(payload)

    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as e:
        fields = sorted({
            ".".join(str(part) for part in error["loc"]) or "payload"
            for error in e.errors()
        })
        raise ValidationError(fields) from e
