"""
API: 共用/通用 Response Schemas。
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """GET /health 回應。"""

    status: str
    service: str


class CacheClearResponse(BaseModel):
    """POST /admin/cache/clear 回應。"""

    status: str
    l1_cleared: int
    symbol_map_invalidated: bool
