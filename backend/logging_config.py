"""
Crossrate: 集中式 Logging 設定
- 所有模組透過 get_logger(__name__) 取得 logger，首次呼叫時設定 root logger
- 一律輸出至 console；設定 LOG_DIR 時另寫入每日輪替檔案（保留 LOG_BACKUP_DAYS 天）
- LOG_FORMAT=json 切換為單行 JSON 結構化輸出
- LOG_LEVEL 調整 log 等級（預設 INFO）
- 每個 HTTP 請求帶有 request_id（由 main.py 的 middleware 透過 bind_request_id 設定）
"""

import contextlib
import contextvars
import json
import logging
import os
from collections.abc import Iterator
from logging.handlers import TimedRotatingFileHandler

LOG_DIR = os.getenv("LOG_DIR", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "text").lower()
LOG_BACKUP_DAYS = int(os.getenv("LOG_BACKUP_DAYS", "3"))
LOG_FILE_NAME = "crossrate.log"

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 第三方套件只保留 WARNING 以上
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="-"
)

_configured = False


@contextlib.contextmanager
def bind_request_id(request_id: str) -> Iterator[None]:
    """在 with 區塊內將 request_id 綁定到目前的 context。"""
    token = request_id_var.set(request_id)
    try:
        yield
    finally:
        request_id_var.reset(token)


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()  # type: ignore[attr-defined]
        return True


class _JsonFormatter(logging.Formatter):
    """單行 JSON，適用 ELK / Loki 等集中式 log 收集。"""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": self.formatTime(record, LOG_DATE_FORMAT),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", "-"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _build_handlers(formatter: logging.Formatter) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if LOG_DIR:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=os.path.join(LOG_DIR, LOG_FILE_NAME),
            when="midnight",
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
            utc=True,
        )
        file_handler.suffix = "%Y-%m-%d"
        handlers.append(file_handler)
    for handler in handlers:
        handler.setLevel(LOG_LEVEL)
        handler.setFormatter(formatter)
    return handlers


def _configure_root_logger() -> None:
    """設定 root logger（僅執行一次）。"""
    global _configured
    if _configured:
        return

    formatter: logging.Formatter = (
        _JsonFormatter()
        if LOG_FORMAT == "json"
        else logging.Formatter(_TEXT_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    request_filter = _RequestIdFilter()
    for handler in _build_handlers(formatter):
        # filter on the handler so records from child loggers also get request_id
        handler.addFilter(request_filter)
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """取得指定名稱的 logger，自動確保 root logger 已設定。"""
    _configure_root_logger()
    return logging.getLogger(name)
