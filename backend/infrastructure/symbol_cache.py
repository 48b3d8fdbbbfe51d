"""
Infrastructure: 代號對照表快取 (SymbolMap)。

整份 CoinGecko 目錄建立 大寫代號 → id 對照表，TTL 1 小時，過期後整批重建。
- 單一飛行 (single-flight)：同時多個請求觸發重建時只會呼叫上游一次。
- 重建失敗時回傳舊對照表；沒有舊資料時拋出 CatalogUnavailableError，
  排隊等待的請求與退避期間內的請求直接沿用同一次失敗結果。
- 時鐘可注入，測試可使用假時鐘。
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from domain.constants import SYMBOL_MAP_FAILURE_BACKOFF, SYMBOL_MAP_TTL
from domain.entities import CoinListing
from domain.errors import CatalogUnavailableError
from domain.symbols import build_symbol_index
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    symbols: dict[str, str]
    listings: tuple[CoinListing, ...]
    ids: frozenset[str] = field(default_factory=frozenset)
    built_at: float = 0.0


class SymbolMapCache:
    """程序層級的代號對照表快取。"""

    def __init__(
        self,
        loader: Callable[[], list[CoinListing]],
        ttl: float = SYMBOL_MAP_TTL,
        clock: Callable[[], float] = time.time,
        failure_backoff: float = SYMBOL_MAP_FAILURE_BACKOFF,
    ):
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._failure_backoff = failure_backoff
        self._state_lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._snapshot: _Snapshot | None = None
        self._last_failure_at: float | None = None
        # 每次重建失敗遞增，供排隊等待的執行緒判斷是否已有一次失敗
        self._failure_count = 0
        self._last_error = ""

    def _read(self) -> _Snapshot | None:
        with self._state_lock:
            return self._snapshot

    def _is_fresh(self, snap: _Snapshot | None, now: float) -> bool:
        return snap is not None and now - snap.built_at < self._ttl

    def _in_failure_backoff(self, now: float) -> bool:
        return (
            self._last_failure_at is not None
            and now - self._last_failure_at < self._failure_backoff
        )

    def _current(self, now: float | None = None) -> _Snapshot:
        now = self._clock() if now is None else now
        snap = self._read()
        if self._is_fresh(snap, now):
            return snap  # type: ignore[return-value]

        failures_seen = self._failure_count
        with self._refresh_lock:
            # 等待期間可能已由其他執行緒完成重建
            snap = self._read()
            if self._is_fresh(snap, now):
                return snap  # type: ignore[return-value]
            if snap is not None and self._in_failure_backoff(now):
                return snap
            if snap is None and (
                self._failure_count != failures_seen or self._in_failure_backoff(now)
            ):
                # 冷啟動失敗：排隊者與退避期間的請求不再重複呼叫上游
                raise CatalogUnavailableError(self._last_error)
            return self._rebuild(snap, now)

    def _rebuild(self, stale: _Snapshot | None, now: float) -> _Snapshot:
        try:
            listings = self._loader()
        except Exception as e:
            self._last_failure_at = now
            self._failure_count += 1
            self._last_error = str(e)
            if stale is not None:
                logger.warning("代號對照表重建失敗，沿用舊資料：%s", e)
                return stale
            logger.error("代號對照表重建失敗且無舊資料：%s", e)
            raise CatalogUnavailableError(str(e)) from e

        snap = _Snapshot(
            symbols=build_symbol_index(listings),
            listings=tuple(listings),
            ids=frozenset(listing.id for listing in listings),
            built_at=now,
        )
        with self._state_lock:
            self._snapshot = snap
        self._last_failure_at = None
        logger.info(
            "代號對照表已重建：%d 個代號（%d 筆目錄）。",
            len(snap.symbols),
            len(snap.listings),
        )
        return snap

    def get_or_refresh(self, now: float | None = None) -> dict[str, str]:
        """取得 大寫代號 → CoinGecko id 對照表，必要時重建。"""
        return self._current(now).symbols

    def listings(self, now: float | None = None) -> list[CoinListing]:
        """取得目錄項目（依上游市值排序）。"""
        return list(self._current(now).listings)

    def has_id(self, coin_id: str, now: float | None = None) -> bool:
        return coin_id in self._current(now).ids

    def invalidate(self) -> None:
        """丟棄目前的對照表，下次存取時重建。"""
        with self._state_lock:
            self._snapshot = None
        self._last_failure_at = None


# ---------------------------------------------------------------------------
# 程序層級單例
# ---------------------------------------------------------------------------
_instance_lock = threading.Lock()
_instance: SymbolMapCache | None = None


def get_symbol_cache() -> SymbolMapCache:
    """取得程序層級的 SymbolMapCache（延遲建立，loader 為 CoinGecko 目錄）。"""
    global _instance
    with _instance_lock:
        if _instance is None:
            from infrastructure.coingecko import fetch_coin_catalog

            _instance = SymbolMapCache(loader=fetch_coin_catalog)
        return _instance


def set_symbol_cache(cache: SymbolMapCache | None) -> None:
    """替換程序層級的 SymbolMapCache（None 表示下次存取時重新建立）。"""
    global _instance
    with _instance_lock:
        _instance = cache
