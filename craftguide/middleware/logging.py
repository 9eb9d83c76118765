"""Structured logging middleware with request tracking."""
import logging
import json
import time
import uuid
from typing import Callable
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from craftguide.settings import settings

REQUEST_ID_HEADER = "X-Request-ID"

# Health checks are logged at DEBUG
HEALTH_CHECK_PATHS = frozenset({"/health", "/ready"})

# Client libraries that log every HTTP call at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with request and engine fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            log_data["request_id"] = request_id

        log_data.update(getattr(record, "extra_fields", None) or {})

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def resolve_request_id(request: Request) -> str:
    """Reuse a caller-supplied request ID, otherwise mint one."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    return incoming[:128] if incoming else str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request's outcome and echo its request ID back to the caller."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.logger = logging.getLogger("craftguide.requests")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id

        path = request.url.path
        level = logging.DEBUG if path in HEALTH_CHECK_PATHS else logging.INFO
        fields = {
            "method": request.method,
            "path": path,
            "client_ip": request.client.host if request.client else None,
        }
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            fields["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            fields["error"] = str(e)
            self.logger.error(
                f"{request.method} {path} failed: {e}",
                extra={"request_id": request_id, "extra_fields": fields},
                exc_info=True,
            )
            raise

        fields["status_code"] = response.status_code
        fields["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        if response.status_code >= 500:
            level = logging.WARNING

        self.logger.log(
            level,
            f"{request.method} {path} -> {response.status_code}",
            extra={"request_id": request_id, "extra_fields": fields},
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def setup_logging():
    """Configure root logging from settings."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    if settings.LOG_FORMAT == "json":
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging configured: level={settings.LOG_LEVEL}, format={settings.LOG_FORMAT}")
