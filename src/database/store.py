"""
Report store for PetAlert
Authoritative persistence for lost-pet reports and their sightings
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import func, select, update

from src.core.constants import ALLOWED_TRANSITIONS, ReportStatus, STATUS_CAS_MAX_RETRIES
from src.core.exceptions import ConcurrentUpdate, InvalidTransition, NotFound
from src.reports.models import Report, SightingReport
from src.reports.schemas import ReportPayload, SightingPayload, parse_payload
from .connection import DatabaseConnection, get_db
from .models import PetReport, Sighting, utcnow

logger = logging.getLogger(__name__)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything is stored as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_report(row: PetReport) -> Report:
    return Report(
        id=row.id,
        latitude=row.latitude,
        longitude=row.longitude,
        status=ReportStatus(row.status),
        created_at=_aware(row.created_at),
        pet_name=row.pet_name,
        pet_type=row.pet_type,
        color=row.color,
        size=row.size,
        last_seen_location=row.last_seen_location,
        breed=row.breed,
        description=row.description,
        image_url=row.image_url,
        last_seen_date=row.last_seen_date,
        contact_name=row.contact_name,
        contact_email=row.contact_email,
        contact_phone=row.contact_phone,
        claimed_by_sighting_id=row.claimed_by_sighting_id,
        claimed_at=_aware(row.claimed_at),
        resolved_by=row.resolved_by,
        resolved_at=_aware(row.resolved_at),
        updated_at=_aware(row.updated_at),
    )


def _to_sighting(row: Sighting) -> SightingReport:
    return SightingReport(
        id=row.id,
        report_id=row.report_id,
        latitude=row.latitude,
        longitude=row.longitude,
        submitted_at=_aware(row.submitted_at),
        found_location=row.found_location,
        description=row.description,
        found_date=row.found_date,
        image_url=row.image_url,
        reporter_name=row.reporter_name,
        reporter_email=row.reporter_email,
        reporter_phone=row.reporter_phone,
    )


class ReportStore:
    """
    Persists reports and sightings.

    Status changes go through an optimistic compare-and-set on the current
    status, so concurrent writers (threads or processes) can never both move
    a report out of the same state.
    """

    def __init__(
        self,
        db: Optional[DatabaseConnection] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        """
        Initialize report store.

        Args:
            db: Database connection (global connection if not provided)
            clock: Source of timestamps
        """
        self.db = db or get_db()
        self._clock = clock

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def create_report(self, payload: Mapping[str, Any]) -> Report:
        """
        Validate and persist a new lost-pet report.

        Args:
            payload: Report fields (see ReportPayload)

        Returns:
            Created report, status active

        Raises:
            InvalidCoordinate: Coordinates out of range
            ValidationError: Required fields missing or malformed
        """
        data = parse_payload(ReportPayload, payload)

        row = PetReport(
            id=uuid.uuid4().hex,
            status=ReportStatus.ACTIVE,
            created_at=self._clock(),
            **data.model_dump(),
        )

        with self.db.get_session() as session:
            session.add(row)
            session.flush()
            report = _to_report(row)

        logger.info(f"Report created: {report.id} ({report.pet_name}) at ({report.latitude}, {report.longitude})")
        return report

    def get_report(self, report_id: str) -> Report:
        """Get report by ID. Raises NotFound if absent."""
        with self.db.get_session() as session:
            row = session.get(PetReport, report_id)
            if row is None:
                raise NotFound("Report", report_id)
            return _to_report(row)

    def list_reports(self, statuses: Optional[Iterable[ReportStatus]] = None) -> List[Report]:
        """
        List reports, oldest first.

        Args:
            statuses: Only return reports in these statuses

        Returns:
            List of reports
        """
        stmt = select(PetReport).order_by(PetReport.created_at, PetReport.id)
        if statuses is not None:
            stmt = stmt.where(PetReport.status.in_([ReportStatus(s) for s in statuses]))

        with self.db.get_session() as session:
            return [_to_report(row) for row in session.scalars(stmt)]

    def count_by_status(self) -> Dict[str, int]:
        """Number of reports per status."""
        counts = {status.value: 0 for status in ReportStatus}
        stmt = select(PetReport.status, func.count()).group_by(PetReport.status)

        with self.db.get_session() as session:
            for status, count in session.execute(stmt):
                counts[ReportStatus(status).value] = count

        return counts

    # ------------------------------------------------------------------
    # Sightings
    # ------------------------------------------------------------------

    def create_sighting(self, payload: Mapping[str, Any]) -> SightingReport:
        """
        Validate and persist a sighting.

        Args:
            payload: Sighting fields (see SightingPayload), including report_id

        Returns:
            Created sighting

        Raises:
            NotFound: Target report does not exist
            InvalidCoordinate: Coordinates out of range
            ValidationError: Required fields missing or malformed
        """
        data = parse_payload(SightingPayload, payload)

        with self.db.get_session() as session:
            if session.get(PetReport, data.report_id) is None:
                raise NotFound("Report", data.report_id)

            row = Sighting(submitted_at=self._clock(), **data.model_dump())
            session.add(row)
            session.flush()
            sighting = _to_sighting(row)

        logger.info(f"Sighting {sighting.id} recorded for report {sighting.report_id}")
        return sighting

    def get_sighting(self, sighting_id: int) -> SightingReport:
        """Get sighting by ID. Raises NotFound if absent."""
        with self.db.get_session() as session:
            row = session.get(Sighting, sighting_id)
            if row is None:
                raise NotFound("Sighting", sighting_id)
            return _to_sighting(row)

    def list_sightings(self, report_id: str) -> List[SightingReport]:
        """
        All sightings for a report in the order they were submitted.

        The first element is the earliest claim.

        Raises:
            NotFound: Report does not exist
        """
        stmt = (
            select(Sighting)
            .where(Sighting.report_id == report_id)
            .order_by(Sighting.submitted_at, Sighting.id)
        )

        with self.db.get_session() as session:
            if session.get(PetReport, report_id) is None:
                raise NotFound("Report", report_id)
            return [_to_sighting(row) for row in session.scalars(stmt)]

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def _status_values(
        self,
        status: ReportStatus,
        extra: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        extra = extra or {}
        now = self._clock()
        values: Dict[str, Any] = {"status": status, "updated_at": now}

        if status == ReportStatus.CLAIMED:
            values["claimed_by_sighting_id"] = extra.get("claimed_by_sighting_id")
            values["claimed_at"] = extra.get("claimed_at") or now
        elif status == ReportStatus.ACTIVE:
            # Claim invalidated
            values["claimed_by_sighting_id"] = None
            values["claimed_at"] = None
        elif status == ReportStatus.RESOLVED:
            values["resolved_by"] = extra.get("resolved_by")
            values["resolved_at"] = extra.get("resolved_at") or now

        return values

    def compare_and_set_status(
        self,
        report_id: str,
        expected: ReportStatus,
        status: ReportStatus,
        extra: Optional[Mapping[str, Any]] = None
    ) -> bool:
        """
        Atomically move a report from expected to status.

        Args:
            report_id: Report ID
            expected: Status the report must currently have
            status: New status
            extra: resolved_by / resolved_at / claimed_by_sighting_id

        Returns:
            True if this call performed the change, False if the report was
            no longer in the expected status

        Raises:
            NotFound: Report does not exist
            InvalidTransition: expected -> status is not an allowed transition
        """
        expected = ReportStatus(expected)
        status = ReportStatus(status)
        if status not in ALLOWED_TRANSITIONS[expected]:
            raise InvalidTransition(report_id, expected, status)

        stmt = (
            update(PetReport)
            .where(PetReport.id == report_id, PetReport.status == expected)
            .values(**self._status_values(status, extra))
            .execution_options(synchronize_session=False)
        )

        with self.db.get_session() as session:
            result = session.execute(stmt)
            if result.rowcount == 1:
                logger.info(f"Report {report_id} status: {expected.value} -> {status.value}")
                return True

            if session.get(PetReport, report_id) is None:
                raise NotFound("Report", report_id)

        logger.debug(f"Report {report_id} no longer {expected.value}, {status.value} not applied")
        return False

    def set_status(
        self,
        report_id: str,
        status: ReportStatus,
        extra: Optional[Mapping[str, Any]] = None
    ) -> Report:
        """
        Move a report to status from whatever status it currently has.

        Args:
            report_id: Report ID
            status: New status
            extra: resolved_by / resolved_at / claimed_by_sighting_id

        Returns:
            Updated report

        Raises:
            NotFound: Report does not exist
            InvalidTransition: Status not reachable from the current one
            ConcurrentUpdate: Status changed on every retry
        """
        status = ReportStatus(status)

        for _ in range(STATUS_CAS_MAX_RETRIES):
            current = self.get_report(report_id).status
            if status not in ALLOWED_TRANSITIONS[current]:
                logger.warning(f"Rejected transition for report {report_id}: {current.value} -> {status.value}")
                raise InvalidTransition(report_id, current, status)

            if self.compare_and_set_status(report_id, current, status, extra):
                return self.get_report(report_id)

        logger.warning(f"Report {report_id} kept changing during {status.value} update")
        raise ConcurrentUpdate(report_id, STATUS_CAS_MAX_RETRIES)
