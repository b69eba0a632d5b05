"""
Spatial index of reports.

Holds (report_id, latitude, longitude, status) for every report that can
still show up in a search and answers radius queries by great-circle
distance. The index is a projection of the report store and can be
rebuilt from it at any time.

A flat scan over a few thousand entries is fast enough for one metro
area. For larger data sets this is the class to swap for an R-tree or
geohash buckets; the query contract stays the same.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional

from src.core.constants import ReportStatus
from src.core.exceptions import NotFound
from src.core.geo_utils import (
    haversine_distance,
    latitude_band,
    validate_coordinate,
    validate_radius,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexEntry:
    """Indexed position and status of one report."""
    report_id: str
    latitude: float
    longitude: float
    status: ReportStatus


@dataclass(frozen=True)
class GeoMatch:
    """Index entry annotated with its distance from the query point."""
    report_id: str
    latitude: float
    longitude: float
    status: ReportStatus
    distance_km: float


class GeoIndex:
    """In-memory radius search over report locations."""

    def __init__(self):
        self._entries: Dict[str, IndexEntry] = {}
        self._lock = threading.RLock()

    def insert(
        self,
        report_id: str,
        latitude: float,
        longitude: float,
        status: ReportStatus
    ) -> IndexEntry:
        """
        Add or replace the entry for a report.

        Raises:
            InvalidCoordinate: If the coordinates are out of range
        """
        point = validate_coordinate(latitude, longitude)
        entry = IndexEntry(
            report_id=report_id,
            latitude=point.latitude,
            longitude=point.longitude,
            status=ReportStatus(status),
        )
        with self._lock:
            self._entries[report_id] = entry
        return entry

    def update_status(self, report_id: str, status: ReportStatus) -> IndexEntry:
        """
        Change the indexed status, keeping the coordinates.

        Raises:
            NotFound: If the report is not indexed
        """
        with self._lock:
            entry = self._entries.get(report_id)
            if entry is None:
                raise NotFound("Index entry", report_id)
            entry = replace(entry, status=ReportStatus(status))
            self._entries[report_id] = entry
        return entry

    def remove(self, report_id: str) -> bool:
        """Remove a report. Returns whether it was present."""
        with self._lock:
            return self._entries.pop(report_id, None) is not None

    def get(self, report_id: str) -> Optional[IndexEntry]:
        with self._lock:
            return self._entries.get(report_id)

    def replace_all(self, entries: Iterable[IndexEntry]) -> int:
        """Swap the whole index contents in one step. Used by rebuilds."""
        fresh = {entry.report_id: entry for entry in entries}
        with self._lock:
            self._entries = fresh
        return len(fresh)

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def query(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        status_filter: Iterable[ReportStatus]
    ) -> List[GeoMatch]:
        """
        Find entries within radius_km of a point.

        Args:
            latitude: Query latitude
            longitude: Query longitude
            radius_km: Search radius in kilometers (inclusive)
            status_filter: Statuses to include

        Returns:
            Matches ordered by distance, then report id

        Raises:
            InvalidCoordinate: If the query point is out of range
            ValidationError: If the radius is negative or not a number
        """
        origin = validate_coordinate(latitude, longitude)
        radius = validate_radius(radius_km)
        statuses = {ReportStatus(s) for s in status_filter}
        if not statuses:
            return []

        with self._lock:
            candidates = list(self._entries.values())

        south, north = latitude_band(origin.latitude, radius)
        matches: List[GeoMatch] = []

        for entry in candidates:
            if entry.status not in statuses:
                continue
            if not south <= entry.latitude <= north:
                continue

            distance = haversine_distance(
                origin.latitude, origin.longitude,
                entry.latitude, entry.longitude
            )
            if distance <= radius:
                matches.append(GeoMatch(
                    report_id=entry.report_id,
                    latitude=entry.latitude,
                    longitude=entry.longitude,
                    status=entry.status,
                    distance_km=distance,
                ))

        matches.sort(key=lambda m: (m.distance_km, m.report_id))

        logger.debug(
            f"Index query ({origin.latitude}, {origin.longitude}) r={radius}km: "
            f"{len(matches)}/{len(candidates)} entries"
        )
        return matches

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, report_id: object) -> bool:
        with self._lock:
            return report_id in self._entries
