"""Tests for the message catalog endpoint."""

from fastapi.testclient import TestClient


class TestMessagesEndpoint:
    """GET /api/messages/{locale}."""

    def test_default_locale(self, client: TestClient) -> None:
        response = client.get("/api/messages/en")

        assert response.status_code == 200
        data = response.json()
        assert data["locale"] == "en"
        assert data["messages"]["contact"]["send"] == "Send Message"

    def test_translation_overrides_default(self, client: TestClient) -> None:
        data = client.get("/api/messages/fr").json()

        assert data["locale"] == "fr"
        assert data["messages"]["nav"]["home"] == "Accueil"

    def test_missing_keys_fall_back_to_default(self, client: TestClient) -> None:
        """ja only translates a handful of keys."""
        data = client.get("/api/messages/ja").json()

        assert data["messages"]["contact"]["send"] == "送信"
        assert data["messages"]["contact"]["errors"]["nameRequired"] == "Name is required."

    def test_unknown_locale_gets_default_bundle(self, client: TestClient) -> None:
        data = client.get("/api/messages/xx").json()

        assert data["locale"] == "en"
        assert data["messages"]["nav"]["home"] == "Home"

    def test_regional_variant_resolves(self, client: TestClient) -> None:
        data = client.get("/api/messages/fr-CA").json()
        assert data["locale"] == "fr"


class TestMessagesRateLimit:
    """Read endpoints are throttled per caller address."""

    def test_throttled_after_burst(self, client: TestClient) -> None:
        headers = {"X-Forwarded-For": "203.0.113.200"}
        statuses = [
            client.get("/api/messages/en", headers=headers).status_code
            for _ in range(121)
        ]

        assert statuses[:120] == [200] * 120
        assert statuses[120] == 429
