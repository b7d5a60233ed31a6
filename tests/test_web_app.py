"""
Tests for the web surface.

Tests covering:
1. Health endpoints
2. Link classification API (tokens never echoed)
3. Listing API status mapping (404 / 502)
4. Server-rendered property page
5. Redirector pages for shared links
"""

import pytest
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from listings import MockPropertySource
from utils.config import Config
from web.app import create_app


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def source():
    return MockPropertySource(missing_ids={"gone"}, failing_ids={"broken"})


@pytest.fixture
def client(source):
    config = Config(property_source="mock", log_level="WARNING")
    app = create_app(config=config, source=source)
    return TestClient(app)


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    """Tests for health endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_api_health(self, client):
        data = client.get("/api/health").json()
        assert data["status"] == "healthy"
        assert data["property_source"] == "mock"


# =============================================================================
# Classification API
# =============================================================================


class TestClassifyApi:
    """Tests for POST /api/links/classify."""

    def test_property_link(self, client):
        response = client.post("/api/links/classify", json={"url": "domgomobile://property/123"})
        assert response.status_code == 200
        assert response.json() == {
            "type": "property",
            "property_id": "123",
            "raw": "domgomobile://property/123",
        }

    def test_unknown_link(self, client):
        response = client.post("/api/links/classify", json={"url": "https://example.com/test"})
        assert response.json() == {"type": "unknown", "raw": "https://example.com/test"}

    def test_auth_tokens_are_redacted(self, client):
        url = "domgomobile://auth/callback?access_token=abc123&refresh_token=ref456"
        response = client.post("/api/links/classify", json={"url": url})
        data = response.json()
        assert data["type"] == "auth"
        assert "abc123" not in response.text
        assert "ref456" not in response.text

    def test_missing_url(self, client):
        response = client.post("/api/links/classify", json={})
        assert response.status_code == 422


# =============================================================================
# Listing API
# =============================================================================


class TestPropertyApi:
    """Tests for GET /api/properties/{id}."""

    def test_found(self, client):
        response = client.get("/api/properties/123")
        assert response.status_code == 200
        assert response.json()["id"] == "123"

    def test_not_found(self, client):
        assert client.get("/api/properties/gone").status_code == 404

    def test_backend_failure(self, client):
        response = client.get("/api/properties/broken")
        assert response.status_code == 502
        assert response.json()["detail"] == "Listing backend unavailable"


# =============================================================================
# Pages
# =============================================================================


class TestPropertyPage:
    """Tests for the canonical web listing page."""

    def test_renders_listing(self, client):
        response = client.get("/property/123")
        assert response.status_code == 200
        assert 'data-property-id="123"' in response.text
        assert "domgomobile://property/123" in response.text

    def test_missing_listing(self, client):
        response = client.get("/property/gone")
        assert response.status_code == 404
        assert "Oglas nije pronađen" in response.text

    def test_backend_failure(self, client):
        assert client.get("/property/broken").status_code == 502


class TestRedirectorPages:
    """Tests for the shared-link redirector pages."""

    @pytest.mark.parametrize("page", ["/deeplink-handler.html", "/property.html"])
    def test_redirects_into_app(self, client, page):
        response = client.get(page, params={"id": "555"})
        assert response.status_code == 200
        assert "domgomobile://property/555" in response.text
        assert "https://domgo.rs/property/555" in response.text

    @pytest.mark.parametrize("page", ["/deeplink-handler.html", "/property.html"])
    def test_missing_id(self, client, page):
        response = client.get(page)
        assert response.status_code == 400
        assert "Link nije potpun" in response.text

    def test_blank_id(self, client):
        assert client.get("/deeplink-handler.html", params={"id": "  "}).status_code == 400
