"""
Matching service.

Entry point for the API and CLI layers: report a lost pet, search for
active reports near a point, and file sightings. Coordinates the report
store (source of truth), the spatial index and the lifecycle engine.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from src.core.config import Settings, settings as default_settings
from src.core.constants import SEARCHABLE_STATUSES, ReportStatus
from src.core.exceptions import NotFound, ValidationError
from src.core.geo_utils import validate_coordinate, validate_radius
from src.core.locks import KeyedLock
from src.database.store import ReportStore
from src.matching.geo_index import GeoIndex, IndexEntry
from src.matching.lifecycle import LifecycleEngine
from src.alerts.notification import NotificationIntent
from src.reports.models import NearbyMatch, Report, SightingReport, SightingResult

logger = logging.getLogger(__name__)


class MatchingService:
    """
    Proximity matching and report lifecycle.

    All mutations of one report (sighting, transition, index update) run
    under a lock keyed by its id. Work on different reports runs in
    parallel.
    """

    def __init__(
        self,
        store: ReportStore,
        index: Optional[GeoIndex] = None,
        notifier: Optional[Any] = None,
        config: Optional[Settings] = None
    ):
        """
        Initialize matching service.

        Args:
            store: Report store
            index: Spatial index (empty index if not provided)
            notifier: Sink for found-pet notifications, anything with send(intent)
            config: Settings (global settings if not provided)
        """
        self.store = store
        self.index = index if index is not None else GeoIndex()
        self.engine = LifecycleEngine(store, self.index)
        self.notifier = notifier
        self.config = config or default_settings
        self._locks = KeyedLock()

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def create_report(self, payload: Mapping[str, Any]) -> Report:
        """
        Report a lost pet and make it searchable.

        Raises:
            InvalidCoordinate: Coordinates out of range
            ValidationError: Required fields missing or malformed
        """
        report = self.store.create_report(payload)
        with self._locks.hold(report.id):
            self.index.insert(report.id, report.latitude, report.longitude, report.status)
        return report

    def find_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: Optional[float] = None
    ) -> List[NearbyMatch]:
        """
        Active reports within radius_km of a point, nearest first.

        Args:
            latitude: Searcher latitude
            longitude: Searcher longitude
            radius_km: Search radius (default from settings)

        Returns:
            List of matches, empty if nothing is nearby

        Raises:
            InvalidCoordinate: Coordinates out of range
            ValidationError: Radius negative or above the configured maximum
        """
        validate_coordinate(latitude, longitude)
        if radius_km is None:
            radius_km = self.config.default_search_radius_km
        radius_km = validate_radius(radius_km)
        if radius_km > self.config.max_search_radius_km:
            raise ValidationError(
                ["radius_km"],
                f"Radius {radius_km}km exceeds maximum of {self.config.max_search_radius_km}km",
            )

        hits = self.index.query(latitude, longitude, radius_km, {ReportStatus.ACTIVE})

        matches: List[NearbyMatch] = []
        for hit in hits:
            try:
                report = self.store.get_report(hit.report_id)
            except NotFound:
                logger.warning(f"Index entry {hit.report_id} has no stored report, dropping it")
                self.index.remove(hit.report_id)
                continue

            if report.status != ReportStatus.ACTIVE:
                # Index lagged behind the store; the store wins
                with self._locks.hold(report.id):
                    self.engine.sync_index(self.store.get_report(report.id))
                continue

            matches.append(NearbyMatch(report=report, distance_km=hit.distance_km))

        logger.info(
            f"Nearby search ({latitude}, {longitude}) r={radius_km}km: {len(matches)} reports"
        )
        return matches

    def report_sighting(
        self,
        report_id: str,
        latitude: float,
        longitude: float,
        payload: Optional[Mapping[str, Any]] = None
    ) -> SightingResult:
        """
        File a sighting against a report.

        The first sighting on an active report claims it and triggers a
        notification to the owner. Later sightings are recorded without
        changing the status.

        Raises:
            NotFound: Unknown report
            InvalidCoordinate: Coordinates out of range
            ValidationError: Required fields missing or malformed
        """
        validate_coordinate(latitude, longitude)

        data: Dict[str, Any] = dict(payload or {})
        data.update(report_id=report_id, latitude=latitude, longitude=longitude)

        with self._locks.hold(report_id):
            sighting = self.store.create_sighting(data)
            report = self.store.get_report(report_id)
            report, claim_trigger = self.engine.apply_sighting(report, sighting)

        if claim_trigger:
            self._notify(report, sighting)

        return SightingResult(sighting=sighting, report=report, claim_trigger=claim_trigger)

    # ------------------------------------------------------------------
    # Lifecycle actions
    # ------------------------------------------------------------------

    def confirm_recovery(self, report_id: str, resolved_by: Optional[str] = None) -> Report:
        """Mark a report resolved. Raises NotFound or InvalidTransition."""
        with self._locks.hold(report_id):
            return self.engine.confirm_recovery(report_id, resolved_by)

    def invalidate_claim(self, report_id: str) -> Report:
        """Reopen a claimed report. Raises NotFound or InvalidTransition."""
        with self._locks.hold(report_id):
            return self.engine.invalidate_claim(report_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_report(self, report_id: str) -> Report:
        return self.store.get_report(report_id)

    def list_sightings(self, report_id: str) -> List[SightingReport]:
        return self.store.list_sightings(report_id)

    def share_url(self, report_id: str) -> str:
        """URL of the found-pet form for a report, as printed in QR codes."""
        self.store.get_report(report_id)
        base = self.config.public_base_url.rstrip("/")
        return f"{base}/report-found?pet_id={report_id}"

    def get_statistics(self) -> Dict[str, Any]:
        by_status = self.store.count_by_status()
        return {
            "total_reports": sum(by_status.values()),
            "by_status": by_status,
            "indexed": len(self.index),
        }

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    def rebuild_index(self) -> int:
        """
        Reload the spatial index from the store.

        Run at startup and after any suspected index corruption.

        Returns:
            Number of indexed reports
        """
        reports = self.store.list_reports(SEARCHABLE_STATUSES)
        count = self.index.replace_all(
            IndexEntry(
                report_id=r.id,
                latitude=r.latitude,
                longitude=r.longitude,
                status=r.status,
            )
            for r in reports
        )
        logger.info(f"Spatial index rebuilt with {count} reports")
        return count

    def _notify(self, report: Report, sighting: SightingReport) -> None:
        """Best effort. Delivery problems never undo the claim."""
        if self.notifier is None:
            return

        intent = NotificationIntent.from_claim(report, sighting)
        try:
            result = self.notifier.send(intent)
        except Exception:
            logger.exception(f"Notifier raised for report {report.id}")
            return

        if isinstance(result, dict) and not result.get("success", True):
            logger.error(f"Notification for report {report.id} failed: {result.get('error')}")
