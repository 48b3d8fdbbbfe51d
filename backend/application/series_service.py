"""
Application: Series Fetcher：取得單一資產以 USD 計價的時間序列。
上游失敗或格式錯誤時回傳空序列（視為「無資料」），不向上拋出例外。
"""

import time
from datetime import UTC, date, datetime, timedelta

from domain.constants import SECONDS_PER_DAY, UNIT_CURRENCY
from domain.entities import AssetRef, Point
from domain.errors import UpstreamUnavailableError
from domain.timeseries import fill_daily_gaps, flat_daily_series, normalize_series
from infrastructure import coingecko, frankfurter
from logging_config import get_logger

logger = get_logger(__name__)


def _utc_today(now: float) -> date:
    return datetime.fromtimestamp(now, tz=UTC).date()


def _day_start_ts(day: date) -> int:
    return int(datetime(day.year, day.month, day.day, tzinfo=UTC).timestamp())


# ===========================================================================
# 法幣（Frankfurter）
# ===========================================================================


def fetch_fiat_series(symbol: str, days: int, now: float | None = None) -> list[Point]:
    """
    取得法幣的 USD 價值序列：1 symbol = ? USD，每日一點。

    - symbol 為 USD 時直接產生 days + 1 個值為 1.0 的每日資料點。
    - 其餘幣別查詢 [today - days, today] 的每日匯率並取倒數，
      週末 / 假日缺漏沿用前一日數值。
    """
    now = time.time() if now is None else now
    today = _utc_today(now)
    end_ts = _day_start_ts(today)

    if symbol == UNIT_CURRENCY:
        return flat_daily_series(end_ts, days)

    start = today - timedelta(days=days)
    try:
        rows = frankfurter.fetch_rate_range(symbol, start, today)
    except UpstreamUnavailableError as e:
        logger.warning("法幣序列 %s 取得失敗，回傳空序列：%s", symbol, e)
        return []

    raw = normalize_series(
        Point(time=_day_start_ts(day), value=1.0 / rate)
        for day, rate in rows
        if rate > 0
    )
    if not raw:
        logger.warning("法幣序列 %s 無有效匯率資料。", symbol)
        return []
    return fill_daily_gaps(raw, end_ts - days * SECONDS_PER_DAY, days)


# ===========================================================================
# 加密貨幣（CoinGecko）
# ===========================================================================


def fetch_crypto_series(resolved_id: str, days: int) -> list[Point]:
    """取得加密貨幣的 USD 價格序列（時間升序、時間戳不重複）。"""
    try:
        points = coingecko.fetch_market_chart(resolved_id, days)
    except UpstreamUnavailableError as e:
        logger.warning("加密貨幣序列 %s 取得失敗，回傳空序列：%s", resolved_id, e)
        return []
    return normalize_series(points)


def fetch_series(ref: AssetRef, days: int, now: float | None = None) -> list[Point]:
    """依資產類型分派至對應的 fetcher。"""
    if ref.is_fiat:
        return fetch_fiat_series(ref.symbol, days, now=now)
    return fetch_crypto_series(ref.resolved_id or "", days)


# ===========================================================================
# 即時價格
# ===========================================================================


def fetch_usd_price(ref: AssetRef) -> float | None:
    """取得 1 單位資產 = ? USD 的即時價格；無法取得時回傳 None。"""
    try:
        if ref.is_fiat:
            if ref.symbol == UNIT_CURRENCY:
                return 1.0
            rate = frankfurter.fetch_latest_rate(ref.symbol)
            return 1.0 / rate if rate > 0 else None
        return coingecko.fetch_simple_price(ref.resolved_id or "")
    except UpstreamUnavailableError as e:
        logger.warning("即時價格 %s 取得失敗：%s", ref.symbol, e)
        return None
