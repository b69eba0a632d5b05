"""
SQLAlchemy models for PetAlert
Lost-pet reports and the sightings filed against them
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, Float, String, Text, Date,
    DateTime, ForeignKey, Index, Enum as SQLEnum
)
from sqlalchemy.orm import declarative_base, relationship

from src.core.constants import ReportStatus

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PetReport(Base):
    """
    Lost pet reported by its owner.

    Coordinates and id are written once at creation. Only status and the
    claim/resolution columns are updated afterwards.
    """
    __tablename__ = "pet_reports"

    id = Column(String(32), primary_key=True)

    # Location
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Pet details
    pet_name = Column(String(100), nullable=False)
    pet_type = Column(String(20), nullable=False)  # dog, cat, other
    breed = Column(String(100))
    color = Column(String(100), nullable=False)
    size = Column(String(20), nullable=False)  # small, medium, large
    description = Column(Text)
    image_url = Column(String(500))
    last_seen_location = Column(String(255), nullable=False)
    last_seen_date = Column(Date)

    # Owner contact
    contact_name = Column(String(100), nullable=False)
    contact_email = Column(String(255), nullable=False)
    contact_phone = Column(String(30))

    # Lifecycle
    status = Column(
        SQLEnum(ReportStatus, name="report_status"),
        nullable=False,
        default=ReportStatus.ACTIVE,
    )
    claimed_by_sighting_id = Column(Integer, nullable=True)
    claimed_at = Column(DateTime(timezone=True))
    resolved_by = Column(String(100))
    resolved_at = Column(DateTime(timezone=True))

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))

    sightings = relationship("Sighting", back_populates="report")

    __table_args__ = (
        Index("idx_report_status", status),
        Index("idx_report_lat_lon", latitude, longitude),
        Index("idx_report_created_at", created_at),
    )

    def __repr__(self):
        return f"<PetReport({self.id}, status={self.status.value}, lat={self.latitude}, lon={self.longitude})>"


class Sighting(Base):
    """
    Found-pet submission against a report.

    Rows are insert-only.
    """
    __tablename__ = "sightings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    report_id = Column(String(32), ForeignKey("pet_reports.id"), nullable=False)
    report = relationship("PetReport", back_populates="sightings")

    # Location
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    found_location = Column(String(255), nullable=False)
    found_date = Column(Date)

    # Details
    description = Column(Text, nullable=False)
    image_url = Column(String(500))

    # Reporter info
    reporter_name = Column(String(100))
    reporter_email = Column(String(255))
    reporter_phone = Column(String(30))

    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_sighting_report_submitted", report_id, submitted_at),
    )

    def __repr__(self):
        return f"<Sighting({self.id}, report={self.report_id}, submitted_at={self.submitted_at})>"
