# storefront/utils/logging.py
import json
import logging
import sys
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from storefront.utils.settings import LOG_LEVEL, SERVICE_NAME

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}

_EXTRA_FIELDS = ("request_id", "user_id", "order_id", "method", "path", "status_code", "duration_ms")


class JSONFormatter(logging.Formatter):
    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service_name,
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "func": record.funcName,
            "line": record.lineno,
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)

        if record.exc_info:
            log_obj["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_obj, default=str)


def configure_logging(level: str = LOG_LEVEL, service_name: str = SERVICE_NAME) -> None:
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service_name))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, service_name: str = SERVICE_NAME):
        super().__init__(app)
        self.logger = logging.getLogger(f"{service_name}.access")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self.log_request(request, 500, start, request_id, exc_info=sys.exc_info())
            raise

        self.log_request(request, response.status_code, start, request_id)
        response.headers["X-Request-ID"] = request_id
        return response

    def log_request(self, request: Request, status_code: int, start: float, request_id: str, exc_info=None):
        extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            "user_id": getattr(request.state, "user_id", None),
        }
        headers = {
            k: ("***" if k.lower() in SENSITIVE_HEADERS else v)
            for k, v in request.headers.items()
        }
        self.logger.debug("Request headers %s", headers, extra={"request_id": request_id})

        if status_code >= 500:
            self.logger.error("Request failed", extra=extra, exc_info=exc_info)
        elif status_code >= 400:
            self.logger.warning("Request error", extra=extra)
        else:
            self.logger.info("Request processed", extra=extra)
