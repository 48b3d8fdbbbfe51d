"""
Crossrate: FastAPI 應用程式進入點。
負責建立 App、註冊路由、管理生命週期。
業務邏輯位於 application/history_service.py。
"""

import os
import threading
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from api.routes.market_routes import router as market_router
from api.schemas.common import CacheClearResponse, HealthResponse
from application.history_service import clear_all_caches, list_assets
from config.settings import init_settings
from logging_config import bind_request_id, get_logger

# Load environment variables from .env file
load_dotenv()
init_settings()

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _prewarm_symbol_map() -> None:
    """背景預熱代號對照表；失敗時僅記錄，首次請求會再嘗試。"""
    try:
        count = len(list_assets())
        logger.info("代號對照表預熱完成（%d 筆資產）。", count)
    except Exception as exc:
        logger.warning("代號對照表預熱失敗：%s", exc)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Crossrate 後端啟動中...")
    if os.getenv("PREWARM_SYMBOL_MAP", "true").lower() == "true":
        # daemon=True 確保不影響關閉
        threading.Thread(target=_prewarm_symbol_map, daemon=True).start()
        logger.info("背景代號對照表預熱已啟動。")
    yield
    logger.info("Crossrate 後端關閉中...")


# ---------------------------------------------------------------------------
# App Factory
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Crossrate API",
    description="Crossrate: 法幣 / 加密貨幣換算與歷史比值",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGIN", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", REQUEST_ID_HEADER],
)


@app.middleware("http")
async def request_id_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """沿用呼叫端的 X-Request-ID，否則產生新的；寫入 log context 與回應 header。"""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    with bind_request_id(request_id):
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


# ---------------------------------------------------------------------------
# Health Check & Admin
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse, summary="Health check")
def health_check() -> dict:
    return {"status": "ok", "service": "crossrate-backend"}


@app.post(
    "/admin/cache/clear",
    response_model=CacheClearResponse,
    summary="Clear upstream response caches and the symbol map",
)
def clear_cache() -> dict:
    result = clear_all_caches()
    return {"status": "ok", **result}


# ---------------------------------------------------------------------------
# 註冊路由
# ---------------------------------------------------------------------------

app.include_router(market_router)
