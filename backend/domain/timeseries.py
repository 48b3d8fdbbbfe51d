"""
Domain: 時間序列對齊與降採樣純函式。
不依賴任何外部服務、資料庫或框架。

兩條序列取樣頻率不同（加密貨幣為每小時或更密，法幣為每日），
因此比值序列以「最近的前一筆」(last observation carried forward) 對齊，
不做內插。
"""

from __future__ import annotations

import math
from bisect import bisect_right
from collections.abc import Iterable, Sequence

from domain.constants import SECONDS_PER_DAY
from domain.entities import Point
from domain.errors import NoOverlapError


def normalize_series(points: Iterable[Point]) -> list[Point]:
    """
    依時間升序排序，並去除重複時間戳（同一時間保留最後一筆）。
    非有限值（NaN / inf）一律剔除。
    """
    by_time: dict[int, float] = {}
    for p in points:
        if not math.isfinite(p.value):
            continue
        by_time[p.time] = p.value
    return [Point(time=t, value=by_time[t]) for t in sorted(by_time)]


def downsample(series: Sequence[Point], min_spacing: int) -> list[Point]:
    """
    貪婪前向掃描：保留第一筆，之後僅保留與「上一筆保留點」相距
    至少 min_spacing 秒的資料點。輸出為輸入的子序列。
    """
    if not series:
        return []

    kept = [series[0]]
    for p in series[1:]:
        if p.time - kept[-1].time >= min_spacing:
            kept.append(p)
    return kept


class _PriorIndex:
    """分母序列的時間索引，支援「<= t 的最大時間戳」查詢 (O(log n))。"""

    def __init__(self, series: Sequence[Point]):
        self._times = [p.time for p in series]
        self._values = [p.value for p in series]

    def value_at_or_before(self, t: int) -> float | None:
        idx = bisect_right(self._times, t) - 1
        if idx < 0:
            return None
        return self._values[idx]


def align(numerator: Sequence[Point], denominator: Sequence[Point]) -> list[Point]:
    """
    以分子序列的每個時間點，找出分母序列中時間 <= 該點的最近一筆，
    輸出 numerator.value / denominator.value。

    找不到前一筆、分母為 0、或比值非有限值的點直接略過。
    兩條序列皆須已依時間升序排序。
    """
    if not numerator or not denominator:
        return []

    index = _PriorIndex(denominator)
    out: list[Point] = []
    for p in numerator:
        matched = index.value_at_or_before(p.time)
        if matched is None or matched == 0:
            continue
        ratio = p.value / matched
        if not math.isfinite(ratio):
            continue
        out.append(Point(time=p.time, value=ratio))
    return out


def align_or_raise(
    numerator: Sequence[Point], denominator: Sequence[Point]
) -> list[Point]:
    """同 align()，但兩條非空序列對齊後若無任何資料點則拋出 NoOverlapError。"""
    result = align(numerator, denominator)
    if not result and numerator and denominator:
        raise NoOverlapError(
            f"No overlap: numerator [{numerator[0].time}, {numerator[-1].time}], "
            f"denominator starts at {denominator[0].time}"
        )
    return result


def fill_daily_gaps(points: Sequence[Point], start_ts: int, days: int) -> list[Point]:
    """
    將每日資料補齊為 days + 1 個等距 (86400 秒) 資料點，起點為 start_ts。
    週末 / 假日等缺漏日期沿用上一個已知值；
    第一筆觀測之前的日期沿用第一筆觀測值。
    """
    if not points:
        return []

    by_time = {p.time: p.value for p in points}
    last = points[0].value
    out: list[Point] = []
    for i in range(days + 1):
        t = start_ts + i * SECONDS_PER_DAY
        if t in by_time:
            last = by_time[t]
        out.append(Point(time=t, value=last))
    return out


def flat_daily_series(end_ts: int, days: int, value: float = 1.0) -> list[Point]:
    """產生 days + 1 個每日等值資料點，最後一點落在 end_ts。"""
    start_ts = end_ts - days * SECONDS_PER_DAY
    return [
        Point(time=start_ts + i * SECONDS_PER_DAY, value=value)
        for i in range(days + 1)
    ]
