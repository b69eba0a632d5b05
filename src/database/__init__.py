"""
Database module for PetAlert
SQLAlchemy persistence for reports and sightings
"""

from .connection import DatabaseConnection, get_db, init_db
from .models import (
    Base,
    PetReport,
    Sighting,
)
from .store import ReportStore

__all__ = [
    "DatabaseConnection",
    "get_db",
    "init_db",
    "Base",
    "PetReport",
    "Sighting",
    "ReportStore",
]
