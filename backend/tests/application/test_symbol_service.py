"""Tests for symbol resolution in application/symbol_service.py."""

from unittest.mock import MagicMock

import pytest

from domain.entities import AssetRef
from domain.enums import AssetKind
from domain.errors import CatalogUnavailableError, UnresolvedSymbolError
from application.symbol_service import resolve, to_asset_ref
from infrastructure.symbol_cache import SymbolMapCache
from tests.conftest import MOCK_CATALOG


class TestResolve:
    def test_should_resolve_fiat_and_crypto_to_asset_refs(self, symbol_cache):
        result = resolve(["BTC", "EUR", "ETH"])

        assert result == {
            "BTC": AssetRef.crypto("BTC", "bitcoin"),
            "EUR": AssetRef.fiat("EUR"),
            "ETH": AssetRef.crypto("ETH", "ethereum"),
        }

    def test_only_unknown_symbol_should_map_to_none(self, symbol_cache):
        result = resolve(["EUR", "NOPE"])

        assert result["EUR"] == AssetRef.fiat("EUR")
        assert result["NOPE"] is None

    def test_fiat_only_input_should_not_touch_catalog(self):
        # Arrange
        loader = MagicMock(return_value=list(MOCK_CATALOG))
        cache = SymbolMapCache(loader=loader)

        # Act
        result = resolve(["USD", "EUR", "JPY"], cache=cache)

        # Assert
        assert all(ref.kind == AssetKind.FIAT for ref in result.values())
        loader.assert_not_called()

    def test_duplicate_ticker_should_resolve_to_top_ranked(self, symbol_cache):
        assert resolve(["BTC"])["BTC"].resolved_id == "bitcoin"

    def test_catalog_failure_should_propagate(self):
        cache = SymbolMapCache(loader=MagicMock(side_effect=RuntimeError("down")))

        with pytest.raises(CatalogUnavailableError):
            resolve(["BTC", "EUR"], cache=cache)


class TestToAssetRef:
    def test_fiat_symbol_should_be_case_insensitive(self, symbol_cache):
        ref = to_asset_ref("eur")

        assert ref.kind == AssetKind.FIAT
        assert ref.symbol == "EUR"
        assert ref.resolved_id is None

    def test_crypto_symbol_should_carry_resolved_id(self, symbol_cache):
        ref = to_asset_ref(" sol ")

        assert ref.kind == AssetKind.CRYPTO
        assert ref.symbol == "SOL"
        assert ref.resolved_id == "solana"

    def test_known_coingecko_id_should_be_accepted(self, symbol_cache):
        ref = to_asset_ref("ethereum")

        assert ref.resolved_id == "ethereum"

    def test_unknown_symbol_should_raise_unresolved(self, symbol_cache):
        with pytest.raises(UnresolvedSymbolError) as exc_info:
            to_asset_ref("NOPE")

        assert exc_info.value.symbol == "NOPE"

    def test_catalog_failure_without_cache_should_raise_catalog_unavailable(self):
        cache = SymbolMapCache(loader=MagicMock(side_effect=RuntimeError("down")))

        with pytest.raises(CatalogUnavailableError):
            to_asset_ref("BTC", cache=cache)

    def test_fiat_symbol_should_resolve_even_when_catalog_down(self):
        cache = SymbolMapCache(loader=MagicMock(side_effect=RuntimeError("down")))

        ref = to_asset_ref("USD", cache=cache)

        assert ref.kind == AssetKind.FIAT
