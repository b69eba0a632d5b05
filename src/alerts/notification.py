"""
PetAlert - Found-Pet Notifications
Notification intents emitted when a report is claimed, and the sinks that
deliver them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.reports.models import Report, SightingReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationIntent:
    """Everything a sink needs to tell an owner their pet was found."""
    report_id: str
    pet_name: str
    pet_type: str

    # Owner
    owner_name: str
    owner_email: str
    owner_phone: Optional[str]

    # Where the pet was found
    location: str
    latitude: float
    longitude: float

    # Finder (all optional)
    finder_name: Optional[str] = None
    finder_email: Optional[str] = None
    finder_phone: Optional[str] = None

    sighting_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_claim(cls, report: Report, sighting: SightingReport) -> "NotificationIntent":
        """Build the intent for a report claimed by a sighting."""
        return cls(
            report_id=report.id,
            pet_name=report.pet_name,
            pet_type=report.pet_type,
            owner_name=report.contact_name,
            owner_email=report.contact_email,
            owner_phone=report.contact_phone,
            location=sighting.found_location,
            latitude=sighting.latitude,
            longitude=sighting.longitude,
            finder_name=sighting.reporter_name,
            finder_email=sighting.reporter_email,
            finder_phone=sighting.reporter_phone,
            sighting_id=sighting.id,
            created_at=sighting.submitted_at,
        )

    @property
    def subject(self) -> str:
        return f"Great News! {self.pet_name} Has Been Found!"

    @property
    def message(self) -> str:
        finder = self.finder_name or "Someone"
        return (
            f"Great news! {finder} has reported finding {self.pet_name} near "
            f"{self.location}. Please check your PetAlert dashboard for details "
            f"and contact information."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "pet_name": self.pet_name,
            "pet_type": self.pet_type,
            "owner": {
                "name": self.owner_name,
                "email": self.owner_email,
                "phone": self.owner_phone,
            },
            "finder": {
                "name": self.finder_name,
                "email": self.finder_email,
                "phone": self.finder_phone,
            },
            "location": {
                "description": self.location,
                "latitude": self.latitude,
                "longitude": self.longitude,
            },
            "sighting_id": self.sighting_id,
            "subject": self.subject,
            "message": self.message,
        }


class MockNotifier:
    """
    Mock notifier for testing.

    Logs notifications instead of sending them.
    """

    def __init__(self):
        self.sent: List[NotificationIntent] = []
        logger.info("Mock notifier initialized")

    @property
    def is_configured(self) -> bool:
        return True

    def send(self, intent: NotificationIntent) -> Dict[str, Any]:
        """Log notification instead of sending."""
        self.sent.append(intent)
        logger.info(f"[MOCK] Found-pet notification for report {intent.report_id} to {intent.owner_email}")
        return {
            "success": True,
            "sent_to": [intent.owner_email],
            "mock": True,
        }


def get_notifier():
    """
    Get notifier instance.

    Returns mock notifier if SMTP is not configured.
    """
    from src.alerts.email_sender import EmailNotifier

    notifier = EmailNotifier()

    if not notifier.is_configured:
        logger.warning("SMTP not configured, using mock notifier")
        return MockNotifier()

    return notifier
