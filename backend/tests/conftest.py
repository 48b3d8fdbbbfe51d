"""
Shared test fixtures: TestClient, fake symbol map, upstream cache isolation.
"""

import os

# Set environment variables BEFORE any app imports
os.environ.setdefault("LOG_DIR", "")
os.environ["PREWARM_SYMBOL_MAP"] = "false"

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from domain.entities import CoinListing  # noqa: E402
from infrastructure.cache import clear_registered_caches  # noqa: E402
from infrastructure.symbol_cache import SymbolMapCache, set_symbol_cache  # noqa: E402
from main import app  # noqa: E402

# ---------------------------------------------------------------------------
# Mock catalog: CoinGecko /coins/markets (already parsed)
# ---------------------------------------------------------------------------

MOCK_CATALOG = [
    CoinListing(id="bitcoin", symbol="BTC", name="Bitcoin", market_cap_rank=1),
    CoinListing(id="ethereum", symbol="ETH", name="Ethereum", market_cap_rank=2),
    CoinListing(id="solana", symbol="SOL", name="Solana", market_cap_rank=5),
    # 同代號、排名較差的資產不應覆蓋 bitcoin
    CoinListing(id="batcat", symbol="BTC", name="batcat", market_cap_rank=4012),
]


class FakeClock:
    """可手動推進的時鐘。"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolate_caches() -> Generator[None, None, None]:
    """Clear upstream response caches and the symbol-map singleton between tests."""
    clear_registered_caches()
    set_symbol_cache(None)
    yield
    clear_registered_caches()
    set_symbol_cache(None)


@pytest.fixture()
def symbol_cache() -> SymbolMapCache:
    """Process-wide SymbolMapCache backed by MOCK_CATALOG (no network)."""
    cache = SymbolMapCache(loader=lambda: list(MOCK_CATALOG))
    set_symbol_cache(cache)
    return cache


@pytest.fixture()
def client(symbol_cache: SymbolMapCache) -> Generator[TestClient, None, None]:
    """TestClient with the mock symbol map installed."""
    with TestClient(app) as c:
        yield c
