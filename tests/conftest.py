"""
Pytest configuration and fixtures
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.alerts.notification import MockNotifier
from src.database.connection import DatabaseConnection
from src.database.store import ReportStore
from src.matching.geo_index import GeoIndex
from src.matching.service import MatchingService


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite database in a temporary file."""
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'petalert.db'}")
    connection.create_tables()
    yield connection
    connection.close()


@pytest.fixture
def store(db):
    """Report store over the temporary database."""
    return ReportStore(db)


@pytest.fixture
def index():
    """Empty spatial index."""
    return GeoIndex()


@pytest.fixture
def notifier():
    """Notifier that records intents instead of sending email."""
    return MockNotifier()


@pytest.fixture
def service(store, index, notifier):
    """Matching service wired to the temporary database."""
    return MatchingService(store, index=index, notifier=notifier)


@pytest.fixture
def report_payload():
    """Valid lost-pet report at (40.0, -73.0)."""
    return {
        "latitude": 40.0,
        "longitude": -73.0,
        "pet_name": "Biscuit",
        "pet_type": "dog",
        "breed": "Beagle",
        "color": "Brown and white",
        "size": "medium",
        "description": "Red collar, very friendly",
        "last_seen_location": "Riverside Park near the playground",
        "last_seen_date": "2026-10-18",
        "contact_name": "Dana Reyes",
        "contact_email": "dana@example.com",
        "contact_phone": "555-0100",
    }


@pytest.fixture
def sighting_payload():
    """Valid found-pet details, without report id or coordinates."""
    return {
        "found_location": "Corner of 5th and Main",
        "found_date": "2026-10-19",
        "description": "Beagle with a red collar, hiding under a car",
        "reporter_name": "Sam Okafor",
        "reporter_email": "sam@example.com",
    }


@pytest.fixture
def make_report(service, report_payload):
    """Factory creating reports through the service at a given location."""
    def _make(latitude=40.0, longitude=-73.0, **overrides):
        payload = dict(report_payload, latitude=latitude, longitude=longitude)
        payload.update(overrides)
        return service.create_report(payload)
    return _make
