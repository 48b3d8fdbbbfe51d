"""
Infrastructure: L1 記憶體快取 (cachetools) 與 in-flight 重複請求去重。
上游 API 的成功結果寫入 TTLCache；失敗（例外）不快取，下次呼叫重新嘗試。
"""

import threading
from collections.abc import Callable, Hashable
from typing import TypeVar

from cachetools import TTLCache

from logging_config import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

# 所有已註冊的 L1 快取（供 clear_all_caches 使用）
_registered_caches: list[TTLCache] = []


def make_cache(maxsize: int, ttl: int) -> TTLCache:
    """建立並註冊一個 TTLCache。"""
    cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
    _registered_caches.append(cache)
    return cache


def clear_registered_caches() -> int:
    """清除所有已註冊的 L1 快取，回傳清除的快取數量。"""
    for cache in _registered_caches:
        cache.clear()
    return len(_registered_caches)


# ---------------------------------------------------------------------------
# In-flight 重複請求去重：避免同一 key 並發觸發多次上游呼叫
# ---------------------------------------------------------------------------
_inflight_lock = threading.Lock()
_inflight_events: dict[Hashable, threading.Event] = {}
_cache_lock = threading.Lock()


def _deduped_fetch(
    key: Hashable, fetcher: Callable[[], T], result_getter: Callable[[], T]
) -> T:
    """確保同一 key 的上游呼叫在任意時刻只有一個在飛行中。

    若已有相同 key 的請求進行中，等待其完成後透過 result_getter 取用結果。
    """
    with _inflight_lock:
        if key in _inflight_events:
            event = _inflight_events[key]
            should_wait = True
        else:
            event = threading.Event()
            _inflight_events[key] = event
            should_wait = False

    if should_wait:
        event.wait()
        return result_getter()

    try:
        return fetcher()
    finally:
        # set() before pop(): late arrivals see a set event and read the cache
        event.set()
        with _inflight_lock:
            _inflight_events.pop(key, None)


def cached_fetch(
    l1_cache: TTLCache,
    key: Hashable,
    fetcher: Callable[[], T],
) -> T:
    """
    L1 快取 → fetcher，並回寫 L1。
    fetcher 拋出的例外直接向上傳遞且不寫入快取。
    """
    with _cache_lock:
        cached = l1_cache.get(key)
    if cached is not None:
        logger.debug("%s 命中 L1 快取。", key)
        return cached

    def _do_fetch() -> T:
        res = fetcher()
        with _cache_lock:
            l1_cache[key] = res
        return res

    def _get_cached() -> T:
        with _cache_lock:
            cached = l1_cache.get(key)
        if cached is not None:
            return cached
        # 先行者失敗（例外未寫入快取），由等待者自行重試一次
        return _do_fetch()

    return _deduped_fetch((id(l1_cache), key), _do_fetch, _get_cached)
