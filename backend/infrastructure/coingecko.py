"""
Infrastructure: CoinGecko API 適配器。
負責加密貨幣目錄、歷史走勢 (market chart) 與即時報價的外部呼叫。
回應以 pydantic 模型嚴格解析，缺欄位或格式錯誤時拋出 UpstreamUnavailableError。
"""

from concurrent.futures import ThreadPoolExecutor

from pydantic import BaseModel, TypeAdapter, ValidationError

from domain import constants
from domain.constants import (
    CATALOG_ORDER,
    CATALOG_PAGE_SIZE,
    COINGECKO_API_KEY_HEADER,
    COINGECKO_VS_CURRENCY,
    MARKET_CHART_CACHE_MAXSIZE,
    MARKET_CHART_CACHE_TTL,
    MILLISECONDS_PER_SECOND,
    SPOT_CACHE_MAXSIZE,
    SPOT_CACHE_TTL,
)
from domain.entities import CoinListing, Point
from domain.errors import UpstreamUnavailableError
from infrastructure.cache import cached_fetch, make_cache
from infrastructure.http import http_get_json
from logging_config import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Upstream response schemas
# ---------------------------------------------------------------------------


class MarketEntry(BaseModel):
    """GET /coins/markets 單筆項目（僅取用到的欄位）。"""

    id: str
    symbol: str
    name: str = ""
    image: str | None = None
    market_cap_rank: int | None = None


class MarketChart(BaseModel):
    """GET /coins/{id}/market_chart 回應。prices 為 [timestamp_ms, price]。"""

    prices: list[tuple[float, float]]


_market_list_adapter = TypeAdapter(list[MarketEntry])
_simple_price_adapter = TypeAdapter(dict[str, dict[str, float]])


# ---------------------------------------------------------------------------
# L1 快取
# ---------------------------------------------------------------------------
_market_chart_cache = make_cache(MARKET_CHART_CACHE_MAXSIZE, MARKET_CHART_CACHE_TTL)
_spot_cache = make_cache(SPOT_CACHE_MAXSIZE, SPOT_CACHE_TTL)


def _headers() -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if constants.COINGECKO_API_KEY:
        headers[COINGECKO_API_KEY_HEADER] = constants.COINGECKO_API_KEY
    return headers


def _get(path: str, params: dict):
    return http_get_json(
        f"{constants.COINGECKO_API_URL}{path}", params=params, headers=_headers()
    )


# ===========================================================================
# 加密貨幣目錄（Catalog）
# ===========================================================================


def fetch_catalog_page(page: int) -> list[CoinListing]:
    """取得依市值排序的目錄第 page 頁（從 1 起算）。"""
    data = _get(
        "/coins/markets",
        {
            "vs_currency": COINGECKO_VS_CURRENCY,
            "order": CATALOG_ORDER,
            "per_page": CATALOG_PAGE_SIZE,
            "page": page,
        },
    )
    try:
        entries = _market_list_adapter.validate_python(data)
    except ValidationError as e:
        raise UpstreamUnavailableError(f"Malformed catalog page {page}: {e}") from e

    return [
        CoinListing(
            id=e.id,
            symbol=e.symbol.upper(),
            name=e.name,
            image=e.image,
            market_cap_rank=e.market_cap_rank,
        )
        for e in entries
        if e.id and e.symbol
    ]


def fetch_coin_catalog(pages: int | None = None) -> list[CoinListing]:
    """
    並行取得目錄前 pages 頁並依頁序攤平。
    任一頁失敗即視為整體失敗（目錄需整批重建），拋出 UpstreamUnavailableError。
    """
    pages = pages or constants.CATALOG_PAGES
    with ThreadPoolExecutor(
        max_workers=min(pages, constants.UPSTREAM_THREAD_POOL_SIZE)
    ) as executor:
        results = list(executor.map(fetch_catalog_page, range(1, pages + 1)))

    listings = [listing for page in results for listing in page]
    logger.info("CoinGecko 目錄取得 %d 筆（%d 頁）。", len(listings), pages)
    return listings


# ===========================================================================
# 歷史走勢（Market Chart）
# ===========================================================================


def _fetch_market_chart(coin_id: str, days: int) -> list[Point]:
    data = _get(
        f"/coins/{coin_id}/market_chart",
        {"vs_currency": COINGECKO_VS_CURRENCY, "days": days},
    )
    try:
        chart = MarketChart.model_validate(data)
    except ValidationError as e:
        raise UpstreamUnavailableError(f"Malformed market chart for {coin_id}: {e}") from e

    points = [
        Point(time=int(ts_ms) // MILLISECONDS_PER_SECOND, value=price)
        for ts_ms, price in chart.prices
    ]
    logger.debug("%s market chart (%d 天) 取得 %d 筆。", coin_id, days, len(points))
    return points


def fetch_market_chart(coin_id: str, days: int) -> list[Point]:
    """
    取得 coin_id 最近 days 天的 USD 價格序列（秒級時間戳，未排序保證）。
    結果快取 1 分鐘；失敗時拋出 UpstreamUnavailableError。
    """
    return cached_fetch(
        _market_chart_cache,
        (coin_id, days),
        lambda: _fetch_market_chart(coin_id, days),
    )


# ===========================================================================
# 即時報價（Simple Price）
# ===========================================================================


def _fetch_simple_price(coin_id: str) -> float:
    data = _get(
        "/simple/price", {"ids": coin_id, "vs_currencies": COINGECKO_VS_CURRENCY}
    )
    try:
        prices = _simple_price_adapter.validate_python(data)
        return prices[coin_id][COINGECKO_VS_CURRENCY]
    except (ValidationError, KeyError) as e:
        raise UpstreamUnavailableError(f"No spot price for {coin_id}") from e


def fetch_simple_price(coin_id: str) -> float:
    """取得 coin_id 的 USD 即時價格。結果快取 1 分鐘。"""
    return cached_fetch(_spot_cache, coin_id, lambda: _fetch_simple_price(coin_id))
