"""
Config: 從環境變數覆寫 domain 常數。
在應用程式啟動時呼叫一次 init_settings()。
"""

import os

from domain import constants
from logging_config import get_logger

logger = get_logger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("環境變數 %s=%r 不是整數，沿用預設值 %d。", name, raw, default)
        return default


def init_settings() -> None:
    """Override domain constants from environment. Call once at startup."""
    constants.COINGECKO_API_URL = os.getenv(
        "COINGECKO_API_URL", constants.COINGECKO_API_URL
    ).rstrip("/")
    constants.FRANKFURTER_API_URL = os.getenv(
        "FRANKFURTER_API_URL", constants.FRANKFURTER_API_URL
    ).rstrip("/")
    constants.COINGECKO_API_KEY = os.getenv(
        "COINGECKO_API_KEY", constants.COINGECKO_API_KEY
    )
    constants.UPSTREAM_REQUEST_TIMEOUT = _env_int(
        "UPSTREAM_REQUEST_TIMEOUT", constants.UPSTREAM_REQUEST_TIMEOUT
    )
    constants.CATALOG_PAGES = max(1, _env_int("CATALOG_PAGES", constants.CATALOG_PAGES))
