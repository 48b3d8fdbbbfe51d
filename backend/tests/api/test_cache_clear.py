"""Tests for POST /admin/cache/clear endpoint."""

from unittest.mock import patch


class TestCacheClearEndpoint:
    """Tests for the cache-clearing admin endpoint."""

    def test_cache_clear_should_return_200_with_result(self, client):
        # Act
        resp = client.post("/admin/cache/clear")

        # Assert
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["l1_cleared"] >= 4
        assert data["symbol_map_invalidated"] is True

    def test_cache_clear_should_be_idempotent(self, client):
        # Act: calling twice should work fine
        resp1 = client.post("/admin/cache/clear")
        resp2 = client.post("/admin/cache/clear")

        # Assert
        assert resp1.status_code == 200
        assert resp2.status_code == 200
        assert resp1.json() == resp2.json()

    def test_cache_clear_should_force_catalog_reload(self, client, symbol_cache):
        # Arrange
        with (
            patch("application.history_service.fetch_series", return_value=[]),
            patch.object(symbol_cache, "_loader", wraps=symbol_cache._loader) as loader,
        ):
            client.get("/history", params={"base": "BTC", "quote": "BTC", "days": 1})
            # Act
            client.post("/admin/cache/clear")
            client.get("/history", params={"base": "BTC", "quote": "BTC", "days": 1})

        # Assert
        assert loader.call_count == 2
