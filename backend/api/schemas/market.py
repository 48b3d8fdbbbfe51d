"""
API: 資產清單 / 比值歷史 / 即時換算 Schemas。
"""

from typing import Literal

from pydantic import BaseModel


class AssetResponse(BaseModel):
    """GET /assets 回傳單筆資產。"""

    id: str
    symbol: str
    name: str
    image: str | None = None
    type: Literal["fiat", "crypto"]


class HistoryPointResponse(BaseModel):
    time: int
    value: float


class HistoryResponse(BaseModel):
    """GET /history 回應。history 為空表示「無資料」，不是錯誤。"""

    base: str
    quote: str
    days: int
    history: list[HistoryPointResponse]


class PriceResponse(BaseModel):
    """GET /price 回應。price 為 None 表示目前無法取得報價。"""

    base: str
    quote: str
    price: float | None
