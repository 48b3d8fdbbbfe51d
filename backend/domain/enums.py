"""
Domain: 列舉定義。
資產分類與歷史區間等業務常數。
"""

from enum import StrEnum


class AssetKind(StrEnum):
    """資產類型：法幣 / 加密貨幣"""

    FIAT = "fiat"
    CRYPTO = "crypto"


class HistoryRange(StrEnum):
    """圖表時間區間（前端按鈕）"""

    DAY = "24H"
    WEEK = "7D"
    MONTH = "1M"
    QUARTER = "3M"
    HALF_YEAR = "6M"
    YEAR = "1Y"


HISTORY_RANGE_DAYS: dict[str, int] = {
    HistoryRange.DAY: 1,
    HistoryRange.WEEK: 7,
    HistoryRange.MONTH: 30,
    HistoryRange.QUARTER: 90,
    HistoryRange.HALF_YEAR: 180,
    HistoryRange.YEAR: 365,
}
