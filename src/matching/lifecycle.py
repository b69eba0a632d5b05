"""
Report lifecycle.

    active --first sighting--> claimed --confirm--> resolved
    active --confirm--> resolved
    claimed --invalidate claim--> active

resolved is terminal. Every transition is written with a compare-and-set
on the status the engine read, so two sightings racing against the same
active report produce exactly one claim.
"""

import logging
from typing import Optional, Tuple

from src.core.constants import ALLOWED_TRANSITIONS, SEARCHABLE_STATUSES, ReportStatus
from src.core.exceptions import InvalidTransition
from src.database.store import ReportStore
from src.matching.geo_index import GeoIndex
from src.reports.models import Report, SightingReport

logger = logging.getLogger(__name__)


def can_transition(current: ReportStatus, requested: ReportStatus) -> bool:
    """Check whether requested is reachable from current in one step."""
    return ReportStatus(requested) in ALLOWED_TRANSITIONS[ReportStatus(current)]


def validate_transition(report_id: str, current: ReportStatus, requested: ReportStatus) -> None:
    """Raise InvalidTransition unless current -> requested is allowed."""
    if not can_transition(current, requested):
        logger.warning(f"Rejected transition for report {report_id}: {current} -> {requested}")
        raise InvalidTransition(report_id, current, requested)


class LifecycleEngine:
    """
    Applies status transitions to reports.

    The store is written first; the index is then brought in line with the
    stored status.
    """

    def __init__(self, store: ReportStore, index: GeoIndex):
        self.store = store
        self.index = index

    def apply_sighting(self, report: Report, sighting: SightingReport) -> Tuple[Report, bool]:
        """
        Apply an accepted sighting to its report.

        Only a sighting against an active report can claim it. Sightings
        against claimed or resolved reports are kept as corroboration and
        leave the status alone.

        Args:
            report: Report snapshot read before the sighting was applied
            sighting: The persisted sighting

        Returns:
            (current report, whether this sighting is the claim-trigger)
        """
        if report.status != ReportStatus.ACTIVE:
            logger.info(
                f"Sighting {sighting.id} corroborates report {report.id} ({report.status.value})"
            )
            return report, False

        won = self.store.compare_and_set_status(
            report.id,
            ReportStatus.ACTIVE,
            ReportStatus.CLAIMED,
            {"claimed_by_sighting_id": sighting.id},
        )
        report = self.store.get_report(report.id)

        if won:
            logger.info(f"Report {report.id} claimed by sighting {sighting.id}")
        else:
            logger.info(f"Sighting {sighting.id} lost the claim on report {report.id}")

        self.sync_index(report)
        return report, won

    def confirm_recovery(self, report_id: str, resolved_by: Optional[str] = None) -> Report:
        """
        Mark a report resolved and drop it from search.

        Who may confirm is decided by the caller.

        Raises:
            NotFound: Unknown report
            InvalidTransition: Report already resolved
        """
        report = self.store.set_status(
            report_id,
            ReportStatus.RESOLVED,
            {"resolved_by": resolved_by},
        )
        self.index.remove(report_id)
        logger.info(f"Report {report_id} resolved by {resolved_by or 'unknown'}")
        return report

    def invalidate_claim(self, report_id: str) -> Report:
        """
        Put a claimed report back into search after a false claim.

        The sightings stay on record.

        Raises:
            NotFound: Unknown report
            InvalidTransition: Report is not claimed
        """
        report = self.store.get_report(report_id)
        validate_transition(report_id, report.status, ReportStatus.ACTIVE)

        if not self.store.compare_and_set_status(report_id, ReportStatus.CLAIMED, ReportStatus.ACTIVE):
            current = self.store.get_report(report_id).status
            raise InvalidTransition(report_id, current, ReportStatus.ACTIVE)

        report = self.store.get_report(report_id)
        self.sync_index(report)
        logger.info(f"Claim on report {report_id} invalidated, back to active")
        return report

    def sync_index(self, report: Report) -> None:
        """Make the index entry match the report's stored status."""
        if report.status in SEARCHABLE_STATUSES:
            self.index.insert(report.id, report.latitude, report.longitude, report.status)
        else:
            self.index.remove(report.id)
