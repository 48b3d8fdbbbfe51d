"""
Domain: 代號分類與代號索引純函式。
"""

import math
import re
from collections.abc import Iterable

from domain.constants import (
    FIAT_CURRENCIES,
    FIAT_FLAG_COUNTRY_OVERRIDES,
    FIAT_FLAG_URL_TEMPLATE,
    FIAT_SYMBOL_PATTERN,
)
from domain.entities import CoinListing
from domain.enums import AssetKind

_FIAT_RE = re.compile(FIAT_SYMBOL_PATTERN)


def is_fiat_symbol(symbol: str) -> bool:
    """3–5 個大寫字母且屬於支援的法幣清單，即視為法幣（不查詢上游）。"""
    return bool(_FIAT_RE.match(symbol)) and symbol in FIAT_CURRENCIES


def _rank_key(listing: CoinListing) -> float:
    # 無排名者排在所有有排名者之後
    return listing.market_cap_rank if listing.market_cap_rank is not None else math.inf


def build_symbol_index(listings: Iterable[CoinListing]) -> dict[str, str]:
    """
    建立 大寫代號 → CoinGecko id 的對照表。

    多個資產共用同一代號時，保留市值排名最佳（數字最小）者；
    排名相同（含皆無排名）時保留目錄中先出現者。
    """
    best: dict[str, CoinListing] = {}
    for listing in listings:
        if not listing.id or not listing.symbol:
            continue
        sym = listing.symbol.upper()
        current = best.get(sym)
        if current is None or _rank_key(listing) < _rank_key(current):
            best[sym] = listing
    return {sym: listing.id for sym, listing in best.items()}


def fiat_flag_url(symbol: str) -> str:
    country = FIAT_FLAG_COUNTRY_OVERRIDES.get(symbol, symbol[:2].lower())
    return FIAT_FLAG_URL_TEMPLATE.format(country=country)


def fiat_listings() -> list[dict]:
    """支援的法幣清單，格式與 CoinListing.to_dict() 一致。"""
    return [
        {
            "id": symbol.lower(),
            "symbol": symbol,
            "name": name,
            "image": fiat_flag_url(symbol),
            "type": AssetKind.FIAT.value,
        }
        for symbol, name in sorted(FIAT_CURRENCIES.items())
    ]
