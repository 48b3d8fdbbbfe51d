"""Tests for GET /assets, GET /history and GET /price endpoints."""

from unittest.mock import patch

from domain.entities import Point
from domain.errors import CatalogUnavailableError

HISTORY_PATH = "api.routes.market_routes.get_ratio_history"
PRICE_PATH = "api.routes.market_routes.get_spot_price"


class TestAssetsEndpoint:
    def test_should_list_fiat_and_crypto_assets(self, client):
        # Act
        resp = client.get("/assets")

        # Assert
        assert resp.status_code == 200
        data = resp.json()
        types = {a["type"] for a in data}
        assert types == {"fiat", "crypto"}
        btc = next(a for a in data if a["id"] == "bitcoin")
        assert btc["symbol"] == "BTC"
        assert btc["name"] == "Bitcoin"


class TestHistoryEndpoint:
    def test_should_return_ratio_history(self, client):
        # Arrange
        with patch(HISTORY_PATH, return_value=[Point(time=100, value=5.0)]) as mock_hist:
            # Act
            resp = client.get("/history", params={"base": "BTC", "quote": "EUR", "days": 7})

        # Assert
        assert resp.status_code == 200
        assert resp.json() == {
            "base": "BTC",
            "quote": "EUR",
            "days": 7,
            "history": [{"time": 100, "value": 5.0}],
        }
        mock_hist.assert_called_once_with("BTC", "EUR", 7)

    def test_should_default_to_thirty_days(self, client):
        with patch(HISTORY_PATH, return_value=[]) as mock_hist:
            resp = client.get("/history", params={"base": "BTC", "quote": "USD"})

        assert resp.status_code == 200
        assert resp.json()["days"] == 30
        mock_hist.assert_called_once_with("BTC", "USD", 30)

    def test_range_should_override_days(self, client):
        with patch(HISTORY_PATH, return_value=[]) as mock_hist:
            resp = client.get(
                "/history", params={"base": "BTC", "quote": "USD", "days": 7, "range": "1Y"}
            )

        assert resp.status_code == 200
        assert resp.json()["days"] == 365
        mock_hist.assert_called_once_with("BTC", "USD", 365)

    def test_empty_history_should_return_200_with_empty_list(self, client):
        with patch(HISTORY_PATH, return_value=[]):
            resp = client.get("/history", params={"base": "BTC", "quote": "EUR"})

        assert resp.status_code == 200
        assert resp.json()["history"] == []

    def test_unknown_symbol_should_return_404(self, client):
        # Act: real resolver against the mock catalog
        resp = client.get("/history", params={"base": "NOPE", "quote": "USD"})

        # Assert
        assert resp.status_code == 404
        assert "NOPE" in resp.json()["detail"]

    def test_catalog_unavailable_should_return_503(self, client):
        with patch(HISTORY_PATH, side_effect=CatalogUnavailableError("down")):
            resp = client.get("/history", params={"base": "BTC", "quote": "USD"})

        assert resp.status_code == 503

    def test_usd_over_usd_should_be_flat_ones(self, client):
        resp = client.get("/history", params={"base": "USD", "quote": "USD", "days": 7})

        assert resp.status_code == 200
        history = resp.json()["history"]
        assert len(history) == 8
        assert all(p["value"] == 1.0 for p in history)

    def test_out_of_range_days_should_return_422(self, client):
        resp = client.get("/history", params={"base": "BTC", "quote": "USD", "days": 0})
        assert resp.status_code == 422

        resp = client.get("/history", params={"base": "BTC", "quote": "USD", "days": 366})
        assert resp.status_code == 422

    def test_invalid_range_should_return_422(self, client):
        resp = client.get("/history", params={"base": "BTC", "quote": "USD", "range": "5Y"})

        assert resp.status_code == 422

    def test_missing_base_should_return_422(self, client):
        resp = client.get("/history", params={"quote": "USD"})

        assert resp.status_code == 422


class TestPriceEndpoint:
    def test_should_return_spot_price(self, client):
        with patch(PRICE_PATH, return_value=50000.0) as mock_price:
            resp = client.get("/price", params={"base": "BTC", "quote": "EUR"})

        assert resp.status_code == 200
        assert resp.json() == {"base": "BTC", "quote": "EUR", "price": 50000.0}
        mock_price.assert_called_once_with("BTC", "EUR")

    def test_unavailable_price_should_be_null(self, client):
        with patch(PRICE_PATH, return_value=None):
            resp = client.get("/price", params={"base": "BTC", "quote": "EUR"})

        assert resp.status_code == 200
        assert resp.json()["price"] is None

    def test_unknown_symbol_should_return_404(self, client):
        resp = client.get("/price", params={"base": "BTC", "quote": "NOPE"})

        assert resp.status_code == 404
