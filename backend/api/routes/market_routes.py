"""
API: 資產清單 / 比值歷史 / 即時換算路由。
僅負責參數驗證與 HTTP 錯誤對應，業務邏輯位於 application.history_service。
"""

from fastapi import APIRouter, HTTPException, Query, status

from application.history_service import get_ratio_history, get_spot_price, list_assets
from api.schemas.market import (
    AssetResponse,
    HistoryPointResponse,
    HistoryResponse,
    PriceResponse,
)
from domain.constants import (
    GENERIC_CATALOG_UNAVAILABLE_ERROR,
    GENERIC_UNKNOWN_SYMBOL_ERROR,
    HISTORY_DEFAULT_DAYS,
    HISTORY_MAX_DAYS,
    HISTORY_MIN_DAYS,
)
from domain.enums import HISTORY_RANGE_DAYS, HistoryRange
from domain.errors import CatalogUnavailableError, UnresolvedSymbolError
from logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Market"])


def _normalize_symbol(symbol: str) -> str:
    return symbol.strip()


def _to_http_exception(exc: UnresolvedSymbolError | CatalogUnavailableError) -> HTTPException:
    if isinstance(exc, UnresolvedSymbolError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{GENERIC_UNKNOWN_SYMBOL_ERROR}: {exc.symbol}",
        )
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=GENERIC_CATALOG_UNAVAILABLE_ERROR,
    )


@router.get(
    "/assets",
    response_model=list[AssetResponse],
    summary="List supported fiat currencies and crypto assets",
)
def list_assets_endpoint() -> list[dict]:
    """法幣與加密貨幣（市值前 N 名）合併清單，依代號排序。"""
    return list_assets()


@router.get(
    "/history",
    response_model=HistoryResponse,
    summary="Get ratio history between two assets",
)
def get_history_endpoint(
    base: str = Query(min_length=1, description="分子代號（例如 BTC）"),
    quote: str = Query(min_length=1, description="分母代號（例如 EUR）"),
    days: int = Query(
        default=HISTORY_DEFAULT_DAYS,
        ge=HISTORY_MIN_DAYS,
        le=HISTORY_MAX_DAYS,
        description=f"回溯天數（{HISTORY_MIN_DAYS}–{HISTORY_MAX_DAYS}）",
    ),
    range_: HistoryRange | None = Query(
        default=None, alias="range", description="圖表區間（優先於 days）"
    ),
) -> HistoryResponse:
    """
    取得 1 base = ? quote 的歷史比值。

    - `range`（24H / 7D / 1M / 3M / 6M / 1Y）優先於 `days`。
    - 上游無資料時回傳 `history: []`（200），而非錯誤。
    - 未知代號回傳 404；加密貨幣目錄無法取得回傳 503。
    """
    base, quote = _normalize_symbol(base), _normalize_symbol(quote)
    if range_ is not None:
        days = HISTORY_RANGE_DAYS[range_]

    try:
        history = get_ratio_history(base, quote, days)
    except (UnresolvedSymbolError, CatalogUnavailableError) as e:
        raise _to_http_exception(e) from e

    return HistoryResponse(
        base=base,
        quote=quote,
        days=days,
        history=[HistoryPointResponse(time=p.time, value=p.value) for p in history],
    )


@router.get(
    "/price",
    response_model=PriceResponse,
    summary="Get spot conversion rate between two assets",
)
def get_price_endpoint(
    base: str = Query(min_length=1, description="分子代號"),
    quote: str = Query(min_length=1, description="分母代號"),
) -> PriceResponse:
    """取得即時換算比率：1 base = ? quote。無法取得時 price 為 null。"""
    base, quote = _normalize_symbol(base), _normalize_symbol(quote)
    try:
        price = get_spot_price(base, quote)
    except (UnresolvedSymbolError, CatalogUnavailableError) as e:
        raise _to_http_exception(e) from e

    return PriceResponse(base=base, quote=quote, price=price)
