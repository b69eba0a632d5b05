"""
PetAlert - Geospatial Utilities
Great-circle distance and coordinate checks.
"""

import math
from typing import Any, Tuple
from dataclasses import dataclass

from src.core.constants import LATITUDE_RANGE, LONGITUDE_RANGE
from src.core.exceptions import InvalidCoordinate, ValidationError

# Mean Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0

# Length of one degree of latitude along a meridian
KM_PER_DEGREE_LAT = math.pi * EARTH_RADIUS_KM / 180.0


@dataclass(frozen=True)
class Point:
    """Geographic point with latitude and longitude."""
    latitude: float
    longitude: float

    def to_tuple(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


def is_valid_coordinate(latitude: Any, longitude: Any) -> bool:
    """Check that a latitude/longitude pair is numeric, finite and in range."""
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return False
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        return False

    if math.isnan(lat) or math.isnan(lon):
        return False

    return (
        LATITUDE_RANGE[0] <= lat <= LATITUDE_RANGE[1] and
        LONGITUDE_RANGE[0] <= lon <= LONGITUDE_RANGE[1]
    )


def validate_coordinate(latitude: Any, longitude: Any) -> Point:
    """
    Validate a coordinate pair.

    Args:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees

    Returns:
        Point with float coordinates

    Raises:
        InvalidCoordinate: If either value is missing, non-numeric or out of range
    """
    if not is_valid_coordinate(latitude, longitude):
        raise InvalidCoordinate(latitude, longitude)
    return Point(latitude=float(latitude), longitude=float(longitude))


def validate_radius(radius_km: Any) -> float:
    """
    Validate a search radius in kilometers.

    Raises:
        ValidationError: If the radius is negative, NaN or not a number
    """
    if isinstance(radius_km, bool):
        raise ValidationError(["radius_km"], f"Invalid radius: {radius_km}")
    try:
        radius = float(radius_km)
    except (TypeError, ValueError):
        raise ValidationError(["radius_km"], f"Invalid radius: {radius_km}")
    if math.isnan(radius) or radius < 0:
        raise ValidationError(["radius_km"], f"Invalid radius: {radius_km}")
    return radius

def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates in decimal degrees
        lat2, lon2: Second point coordinates in decimal degrees

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push a slightly past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def latitude_band(latitude: float, radius_km: float) -> Tuple[float, float]:
    """
    Latitude band that contains every point within radius_km of latitude.

    Any point farther north or south than this band is farther than
    radius_km along the meridian alone, so it can be skipped before the
    haversine check.
    """
    # Small margin so rounding never drops a point sitting on the boundary
    delta = radius_km / KM_PER_DEGREE_LAT + 1e-9
    return (max(-90.0, latitude - delta), min(90.0, latitude + delta))


def format_distance(distance_km: float) -> str:
    """Human readable distance, meters below one kilometer."""
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m away"
    return f"{distance_km:.1f}km away"
