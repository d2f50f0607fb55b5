"""API tests for the map and shared-link endpoints."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from housemap.core.config import Settings
from housemap.geo.providers.mock import MockGeocoder
from housemap.web.app import create_app

BRICKELL = "6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1001"
TAMPA = "6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1003"
AUSTIN = "6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1004"


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings=settings, geocoder=MockGeocoder())


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


class TestMapAPI:
    def test_get_map(self, client: TestClient) -> None:
        resp = client.get("/api/map")
        assert resp.status_code == 200
        data = resp.json()
        assert set(data) == {"viewport", "annotations", "highlight"}
        assert data["highlight"]["target_id"] is None

    def test_highlight_centers_on_fallback_immediately(self, client: TestClient) -> None:
        resp = client.post(f"/api/map/highlight/{TAMPA}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["highlight"]["target_id"] == TAMPA
        assert data["viewport"]["source"] == "highlight"
        assert data["viewport"]["center"] == {"latitude": 27.9506, "longitude": -82.4572}
        highlighted = [a for a in data["annotations"] if a["category"] == "highlighted"]
        assert [a["id"] for a in highlighted] == [TAMPA]

    def test_highlight_unknown_listing(self, client: TestClient) -> None:
        resp = client.post("/api/map/highlight/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert client.get("/api/map").json()["highlight"]["target_id"] is None

    def test_clear_highlight(self, client: TestClient) -> None:
        client.post(f"/api/map/highlight/{TAMPA}")
        resp = client.delete("/api/map/highlight")
        assert resp.status_code == 200
        assert resp.json()["highlight"]["target_id"] is None

    def test_update_location(self, client: TestClient) -> None:
        resp = client.post("/api/map/location", json={"latitude": 40.7, "longitude": -74.0})
        assert resp.status_code == 200
        data = resp.json()
        assert data["viewport"]["source"] == "user_location"
        assert any(a["id"] == "user-location" for a in data["annotations"])

    def test_update_location_out_of_range(self, client: TestClient) -> None:
        resp = client.post("/api/map/location", json={"latitude": 123.0, "longitude": 0.0})
        assert resp.status_code == 422

    def test_refresh_keeps_highlighted_placeholder(self, client: TestClient) -> None:
        client.post(f"/api/map/highlight/{TAMPA}")
        resp = client.post("/api/map/refresh", params={"state": "TX"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["highlight"]["target_id"] == TAMPA
        ids = [a["id"] for a in data["annotations"]]
        assert TAMPA in ids
        assert BRICKELL not in ids

    def test_tap_forwards_selection(self, app: FastAPI, client: TestClient) -> None:
        resp = client.post("/api/map/tap", json={"annotation_id": AUSTIN})
        assert resp.status_code == 200
        assert resp.json()["id"] == AUSTIN
        assert [l.id for l in app.state.selections] == [AUSTIN]

    def test_tap_unknown_listing(self, client: TestClient) -> None:
        resp = client.post("/api/map/tap", json={"annotation_id": "nope"})
        assert resp.status_code == 404

    def test_session_unavailable(self, app: FastAPI, client: TestClient) -> None:
        app.state.map_session = None
        resp = client.get("/api/map")
        assert resp.status_code == 503


class TestLinksAPI:
    def test_open_listing_link(self, client: TestClient) -> None:
        resp = client.post("/api/links/open", json={"url": f"housemap://listing/{BRICKELL}"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["listing_id"] == BRICKELL
        assert data["map"]["highlight"]["target_id"] == BRICKELL

    def test_open_non_listing_link(self, client: TestClient) -> None:
        resp = client.post("/api/links/open", json={"url": "https://example.com/about"})
        assert resp.status_code == 400


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["service"] == "housemap"
        assert data["geocoder"] == "mock"
        assert data["cached_coordinates"] >= 0
