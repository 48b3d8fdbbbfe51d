"""
Application: Symbol Resolver：將使用者輸入的代號分類為法幣或加密貨幣，
加密貨幣再透過 SymbolMap 快取解析為 CoinGecko id。
"""

from collections.abc import Iterable

from domain.entities import AssetRef
from domain.errors import UnresolvedSymbolError
from domain.symbols import is_fiat_symbol
from infrastructure.symbol_cache import SymbolMapCache, get_symbol_cache
from logging_config import get_logger

logger = get_logger(__name__)


def _lookup_crypto_id(symbol: str, cache: SymbolMapCache) -> str | None:
    """大寫代號查表；查無結果時，若輸入本身即為已知的 CoinGecko id 則直接採用。"""
    coin_id = cache.get_or_refresh().get(symbol.upper())
    if coin_id is not None:
        return coin_id
    if symbol.islower() and cache.has_id(symbol):
        return symbol
    return None


def to_asset_ref(symbol: str, cache: SymbolMapCache | None = None) -> AssetRef:
    """
    將單一代號轉為 AssetRef（不分大小寫）。

    Raises:
        UnresolvedSymbolError: 加密貨幣代號不在目錄中。
        CatalogUnavailableError: 目錄無法取得且無舊快取。
    """
    symbol = symbol.strip()
    if is_fiat_symbol(symbol.upper()):
        return AssetRef.fiat(symbol.upper())

    coin_id = _lookup_crypto_id(symbol, cache or get_symbol_cache())
    if coin_id is None:
        logger.info("無法解析代號：%s", symbol)
        raise UnresolvedSymbolError(symbol)
    return AssetRef.crypto(symbol.upper(), coin_id)


def resolve(
    symbols: Iterable[str], cache: SymbolMapCache | None = None
) -> dict[str, AssetRef | None]:
    """
    解析多個代號。
    回傳 {symbol: AssetRef}；只有無法解析的加密貨幣代號對應 None。
    全部為法幣時不會存取（或重建）SymbolMap。

    Raises:
        CatalogUnavailableError: 目錄無法取得且無舊快取。
    """
    out: dict[str, AssetRef | None] = {}
    for symbol in set(symbols):
        try:
            out[symbol] = to_asset_ref(symbol, cache)
        except UnresolvedSymbolError:
            out[symbol] = None
    return out
