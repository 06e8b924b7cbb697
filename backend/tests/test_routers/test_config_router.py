"""Tests for the public site configuration endpoint."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from models.config import settings


class TestSiteConfigEndpoint:
    """GET /api/config/site."""

    def test_returns_site_metadata(self, client: TestClient) -> None:
        response = client.get("/api/config/site")

        assert response.status_code == 200
        data = response.json()
        assert data["name"]
        assert data["email"]
        assert any(item["name"] == "contact" for item in data["navigation"])

    def test_sitekey_null_when_verification_off(self, client: TestClient) -> None:
        with patch.object(settings, "TURNSTILE_SITEKEY", ""):
            data = client.get("/api/config/site").json()

        assert data["turnstile_sitekey"] is None

    def test_exposes_sitekey_but_not_secret(self, client: TestClient) -> None:
        with (
            patch.object(settings, "TURNSTILE_SITEKEY", "0x4AAAAAAA-public"),
            patch.object(settings, "TURNSTILE_SECRET", "0x4AAAAAAA-secret"),
        ):
            response = client.get("/api/config/site")

        assert response.json()["turnstile_sitekey"] == "0x4AAAAAAA-public"
        assert "0x4AAAAAAA-secret" not in response.text

    def test_lists_supported_locales(self, client: TestClient) -> None:
        data = client.get("/api/config/site").json()

        assert data["default_locale"] == "en"
        assert "en" in data["supported_locales"]
