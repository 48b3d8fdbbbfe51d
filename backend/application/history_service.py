"""
Application: 比值歷史 (Ratio History) 與即時換算服務。

流程：Resolver → Fetcher（兩條序列並行）→ Resampler（長區間）→ Aligner。
「無資料」類錯誤（上游失敗、時間區間無重疊）吸收為空序列；
「設定」類錯誤（未知代號、目錄不可用）向上傳遞給呼叫端。
"""

from concurrent.futures import ThreadPoolExecutor

from domain.constants import LONG_RANGE_DAYS, LONG_RANGE_MIN_SPACING
from domain.entities import AssetRef, Point
from domain.errors import CatalogUnavailableError, NoOverlapError, UnresolvedSymbolError
from domain.symbols import fiat_listings
from domain.timeseries import align_or_raise, downsample
from infrastructure.cache import clear_registered_caches
from infrastructure.symbol_cache import SymbolMapCache, get_symbol_cache
from application.series_service import fetch_series, fetch_usd_price
from application.symbol_service import resolve
from logging_config import get_logger

logger = get_logger(__name__)

# 兩條序列各佔一個 worker
_LEG_COUNT = 2


def _resolve_pair(
    base: str, quote: str, cache: SymbolMapCache | None
) -> tuple[AssetRef, AssetRef]:
    refs = resolve([base, quote], cache)
    for symbol in (base, quote):
        if refs[symbol] is None:
            raise UnresolvedSymbolError(symbol.strip())
    return refs[base], refs[quote]  # type: ignore[return-value]


def _fetch_legs(
    base_ref: AssetRef, quote_ref: AssetRef, days: int
) -> tuple[list[Point], list[Point]]:
    """並行取得分子與分母序列，兩者皆完成後才回傳。"""
    with ThreadPoolExecutor(max_workers=_LEG_COUNT) as executor:
        base_future = executor.submit(fetch_series, base_ref, days)
        quote_future = executor.submit(fetch_series, quote_ref, days)
        return base_future.result(), quote_future.result()


def get_ratio_history(
    base: str, quote: str, days: int, cache: SymbolMapCache | None = None
) -> list[Point]:
    """
    取得 base / quote 的比值歷史（1 base = ? quote）。

    Args:
        base: 分子代號（例如 "BTC"、"EUR"）。
        quote: 分母代號。
        days: 回溯天數。
        cache: 代號對照表快取（預設為程序層級單例）。

    Returns:
        時間升序的比值序列；任一邊無資料或時間區間無重疊時回傳空 list。

    Raises:
        UnresolvedSymbolError: 代號不在目錄中。
        CatalogUnavailableError: 目錄無法取得且無舊快取。
    """
    base_ref, quote_ref = _resolve_pair(base, quote, cache)
    numerator, denominator = _fetch_legs(base_ref, quote_ref, days)

    if not numerator or not denominator:
        logger.info(
            "%s/%s（%d 天）缺少資料（分子 %d 筆、分母 %d 筆），回傳空序列。",
            base, quote, days, len(numerator), len(denominator),
        )
        return []

    if days >= LONG_RANGE_DAYS:
        numerator = downsample(numerator, LONG_RANGE_MIN_SPACING)
        denominator = downsample(denominator, LONG_RANGE_MIN_SPACING)

    try:
        history = align_or_raise(numerator, denominator)
    except NoOverlapError as e:
        logger.info("%s/%s 時間區間無重疊，回傳空序列：%s", base, quote, e)
        return []

    logger.debug("%s/%s（%d 天）比值序列 %d 筆。", base, quote, days, len(history))
    return history


def get_spot_price(
    base: str, quote: str, cache: SymbolMapCache | None = None
) -> float | None:
    """
    取得即時換算比率：1 base = ? quote。
    任一邊價格無法取得或 quote 價格為 0 時回傳 None。
    """
    base_ref, quote_ref = _resolve_pair(base, quote, cache)
    with ThreadPoolExecutor(max_workers=_LEG_COUNT) as executor:
        base_future = executor.submit(fetch_usd_price, base_ref)
        quote_future = executor.submit(fetch_usd_price, quote_ref)
        base_usd, quote_usd = base_future.result(), quote_future.result()

    if base_usd is None or not quote_usd:
        return None
    return base_usd / quote_usd


def list_assets(cache: SymbolMapCache | None = None) -> list[dict]:
    """
    法幣與加密貨幣目錄合併清單，依代號字母排序。
    目錄不可用時僅回傳法幣。
    """
    cache = cache or get_symbol_cache()
    assets = fiat_listings()
    try:
        assets.extend(listing.to_dict() for listing in cache.listings())
    except CatalogUnavailableError as e:
        logger.warning("加密貨幣目錄不可用，僅回傳法幣清單：%s", e)
    return sorted(assets, key=lambda a: (a["symbol"], a["type"]))


def clear_all_caches() -> dict:
    """清除所有上游回應快取並使代號對照表失效。"""
    cleared = clear_registered_caches()
    get_symbol_cache().invalidate()
    logger.info("已清除所有快取（L1×%d + 代號對照表）。", cleared)
    return {"l1_cleared": cleared, "symbol_map_invalidated": True}
