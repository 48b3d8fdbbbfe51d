"""
Infrastructure: Frankfurter (ECB 參考匯率) API 適配器。
所有匯率皆以 UNIT_CURRENCY (USD) 為 base：回傳值為 1 USD = ? symbol。
"""

from datetime import date

from pydantic import BaseModel, ValidationError

from domain import constants
from domain.constants import (
    FX_RANGE_CACHE_MAXSIZE,
    FX_RANGE_CACHE_TTL,
    SPOT_CACHE_MAXSIZE,
    SPOT_CACHE_TTL,
    UNIT_CURRENCY,
)
from domain.errors import UpstreamUnavailableError
from infrastructure.cache import cached_fetch, make_cache
from infrastructure.http import http_get_json
from logging_config import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Upstream response schemas
# ---------------------------------------------------------------------------


class RangeRates(BaseModel):
    """GET /{start}..{end} 回應：{"rates": {"2024-01-02": {"EUR": 0.91}}}。"""

    rates: dict[date, dict[str, float]]


class LatestRates(BaseModel):
    """GET /latest 回應：{"rates": {"EUR": 0.91}}。"""

    rates: dict[str, float]


_range_cache = make_cache(FX_RANGE_CACHE_MAXSIZE, FX_RANGE_CACHE_TTL)
_latest_cache = make_cache(SPOT_CACHE_MAXSIZE, SPOT_CACHE_TTL)


def _fetch_rate_range(symbol: str, start: date, end: date) -> list[tuple[date, float]]:
    data = http_get_json(
        f"{constants.FRANKFURTER_API_URL}/{start.isoformat()}..{end.isoformat()}",
        params={"from": UNIT_CURRENCY, "to": symbol},
    )
    try:
        payload = RangeRates.model_validate(data)
        rows = [(day, rates[symbol]) for day, rates in payload.rates.items()]
    except (ValidationError, KeyError) as e:
        raise UpstreamUnavailableError(
            f"Malformed Frankfurter range for {symbol}: {e}"
        ) from e

    logger.debug(
        "匯率區間 %s/%s %s..%s 取得 %d 筆。", UNIT_CURRENCY, symbol, start, end, len(rows)
    )
    return rows


def fetch_rate_range(symbol: str, start: date, end: date) -> list[tuple[date, float]]:
    """
    取得 [start, end] 期間每個營業日的 USD→symbol 匯率。
    回傳 [(date, rate), ...]，順序依上游回應（不保證排序）。結果快取 1 小時。
    """
    return cached_fetch(
        _range_cache,
        (symbol, start, end),
        lambda: _fetch_rate_range(symbol, start, end),
    )


def _fetch_latest_rate(symbol: str) -> float:
    data = http_get_json(
        f"{constants.FRANKFURTER_API_URL}/latest",
        params={"from": UNIT_CURRENCY, "to": symbol},
    )
    try:
        return LatestRates.model_validate(data).rates[symbol]
    except (ValidationError, KeyError) as e:
        raise UpstreamUnavailableError(f"No latest rate for {symbol}") from e


def fetch_latest_rate(symbol: str) -> float:
    """取得最新 USD→symbol 匯率。結果快取 1 分鐘。"""
    return cached_fetch(_latest_cache, symbol, lambda: _fetch_latest_rate(symbol))
