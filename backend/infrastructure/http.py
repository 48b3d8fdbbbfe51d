"""
Infrastructure: 共用 HTTP GET (httpx)。
含 tenacity 重試機制，針對暫時性網路錯誤自動指數退避重試；
重試耗盡、HTTP 錯誤狀態碼或非 JSON 回應一律轉為 UpstreamUnavailableError。
"""

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain import constants
from domain.errors import UpstreamUnavailableError
from logging_config import get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Retry Decorator
# ---------------------------------------------------------------------------
_RETRYABLE = (httpx.TransportError, httpx.TimeoutException, OSError)

_upstream_retry = retry(
    stop=stop_after_attempt(constants.UPSTREAM_RETRY_ATTEMPTS),
    wait=wait_exponential(
        min=constants.UPSTREAM_RETRY_WAIT_MIN, max=constants.UPSTREAM_RETRY_WAIT_MAX
    ),
    retry=retry_if_exception_type(_RETRYABLE),
    reraise=True,
)


@_upstream_retry
def _get(url: str, params: dict | None, headers: dict | None) -> httpx.Response:
    with httpx.Client(timeout=constants.UPSTREAM_REQUEST_TIMEOUT) as client:
        resp = client.get(url, params=params, headers=headers)
        resp.raise_for_status()
        return resp


def http_get_json(
    url: str, params: dict | None = None, headers: dict | None = None
):
    """GET 一個 JSON endpoint（含 timeout 與重試）。失敗時拋出 UpstreamUnavailableError。"""
    try:
        resp = _get(url, params, headers)
        return resp.json()
    except httpx.HTTPStatusError as e:
        logger.warning("上游回應錯誤 %s：HTTP %d", url, e.response.status_code)
        raise UpstreamUnavailableError(
            f"{url} returned HTTP {e.response.status_code}"
        ) from e
    except (*_RETRYABLE, ValueError) as e:
        logger.warning("上游呼叫失敗 %s：%s", url, e)
        raise UpstreamUnavailableError(f"{url} unavailable: {e}") from e
