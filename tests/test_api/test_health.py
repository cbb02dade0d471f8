"""Tests for the health endpoint."""

from unittest.mock import AsyncMock, patch

from creator_feed.config.settings import Settings


def _settings(**overrides) -> Settings:
    values = {"scraper_provider": "twitterapi", "twitterapi_io_key": "key"}
    values.update(overrides)
    return Settings(**values)


class TestHealth:
    def test_healthy(self, client, mock_database):
        with patch("creator_feed.api.routes.health.get_settings", return_value=_settings()):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["provider"] == "twitterapi"
        assert data["components"]["database"]["status"] == "healthy"

    def test_reports_provider_configuration(self, client):
        with patch("creator_feed.api.routes.health.get_settings", return_value=_settings()):
            data = client.get("/health").json()

        assert data["provider_configured"] is True

    def test_unhealthy_when_database_down(self, client, mock_database):
        mock_database.health_check = AsyncMock(side_effect=ConnectionError("refused"))

        with patch("creator_feed.api.routes.health.get_settings", return_value=_settings()):
            data = client.get("/health").json()

        assert data["status"] == "unhealthy"
        assert data["components"]["database"]["details"]["error"] == "refused"

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
