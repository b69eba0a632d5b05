"""
Tests for API endpoints
"""
import pytest
from fastapi.testclient import TestClient

import sys
sys.path.insert(0, '.')

from src.api.main import app, get_service


@pytest.fixture
def client(service):
    """API client backed by the temporary database."""
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def report_body(report_payload):
    return dict(report_payload)


@pytest.fixture
def sighting_body(sighting_payload):
    return dict(sighting_payload, latitude=40.0003, longitude=-73.0003)


class TestAPIEndpoints:
    """Test suite for API endpoints."""

    def _create(self, client, body):
        response = client.post("/api/v1/reports", json=body)
        assert response.status_code == 201
        return response.json()

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] is True

    def test_create_and_get_report(self, client, report_body):
        created = self._create(client, report_body)

        assert created["status"] == "active"
        assert created["pet_name"] == "Biscuit"
        assert created["last_seen_date"] == "2026-10-18"

        response = client.get(f"/api/v1/reports/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_create_report_invalid_latitude(self, client, report_body):
        report_body["latitude"] = 200

        response = client.post("/api/v1/reports", json=report_body)

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_coordinate"
        assert response.json()["latitude"] == 200

    def test_create_report_missing_field(self, client, report_body):
        del report_body["pet_name"]

        response = client.post("/api/v1/reports", json=report_body)

        assert response.status_code == 422

    def test_get_unknown_report(self, client):
        response = client.get("/api/v1/reports/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_nearby(self, client, report_body):
        created = self._create(client, report_body)

        response = client.get(
            "/api/v1/reports/nearby",
            params={"latitude": 40.001, "longitude": -73.001, "radius_km": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["radius_km"] == 1
        assert data["reports"][0]["id"] == created["id"]
        assert data["reports"][0]["distance_km"] == pytest.approx(0.14, abs=0.01)

    def test_nearby_default_radius_and_empty(self, client, report_body):
        self._create(client, report_body)

        response = client.get("/api/v1/reports/nearby", params={"latitude": 41.0, "longitude": -73.0})

        assert response.status_code == 200
        assert response.json()["count"] == 0
        assert response.json()["radius_km"] == pytest.approx(3.2)

    def test_nearby_invalid_coordinate(self, client):
        response = client.get("/api/v1/reports/nearby", params={"latitude": 200, "longitude": 0})

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_coordinate"

    @pytest.mark.parametrize("latitude", ["nan", "inf", "-inf"])
    def test_nearby_non_finite_coordinate(self, client, latitude):
        response = client.get("/api/v1/reports/nearby", params={"latitude": latitude, "longitude": 0})

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_coordinate"
        assert response.json()["latitude"] == str(float(latitude))

    def test_nearby_radius_above_maximum(self, client):
        response = client.get(
            "/api/v1/reports/nearby",
            params={"latitude": 40.0, "longitude": -73.0, "radius_km": 100},
        )

        assert response.status_code == 422
        assert response.json()["fields"] == ["radius_km"]

    def test_sighting_flow(self, client, report_body, sighting_body):
        report = self._create(client, report_body)
        url = f"/api/v1/reports/{report['id']}/sightings"

        first = client.post(url, json=sighting_body)
        second = client.post(url, json=dict(sighting_body, reporter_name="Lee"))

        assert first.status_code == 201
        assert first.json()["claim_trigger"] is True
        assert first.json()["status"] == "claimed"
        assert second.json()["claim_trigger"] is False
        assert second.json()["status"] == "claimed"

        listing = client.get(url).json()
        assert listing["count"] == 2
        assert [s["id"] for s in listing["sightings"]] == [
            first.json()["sighting"]["id"],
            second.json()["sighting"]["id"],
        ]

    def test_sighting_unknown_report(self, client, sighting_body):
        response = client.post("/api/v1/reports/missing/sightings", json=sighting_body)

        assert response.status_code == 404

    def test_resolve_and_terminal(self, client, report_body):
        report = self._create(client, report_body)
        url = f"/api/v1/reports/{report['id']}/resolve"

        response = client.post(url, json={"resolved_by": "Dana"})
        assert response.status_code == 200
        assert response.json()["status"] == "resolved"
        assert response.json()["resolved_by"] == "Dana"

        again = client.post(url)
        assert again.status_code == 409
        assert again.json()["error"] == "invalid_transition"
        assert again.json()["current"] == "resolved"

        nearby = client.get("/api/v1/reports/nearby", params={"latitude": 40.0, "longitude": -73.0})
        assert nearby.json()["count"] == 0

    def test_invalidate_claim(self, client, report_body, sighting_body):
        report = self._create(client, report_body)
        url = f"/api/v1/reports/{report['id']}/invalidate-claim"

        assert client.post(url).status_code == 409

        client.post(f"/api/v1/reports/{report['id']}/sightings", json=sighting_body)
        response = client.post(url)

        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_share_link(self, client, report_body):
        report = self._create(client, report_body)

        response = client.get(f"/api/v1/reports/{report['id']}/share")

        assert response.status_code == 200
        assert response.json()["url"].endswith(f"/report-found?pet_id={report['id']}")

    def test_stats(self, client, report_body):
        self._create(client, report_body)

        response = client.get("/api/v1/reports/stats/summary")

        assert response.status_code == 200
        assert response.json()["total_reports"] == 1
        assert response.json()["by_status"]["active"] == 1

    def test_search_radii(self, client):
        response = client.get("/api/v1/search/radii")

        assert response.status_code == 200
        assert response.json()["presets_km"] == {"1mi": 1.6, "2mi": 3.2, "5mi": 8.0}
        assert response.json()["default_km"] == pytest.approx(3.2)
