"""JSON-lines logging for the API process.

Every record carries the service name and the id of the request being served.
Structured fields go in ``extra={"context": {...}}`` and are flattened into
the emitted object.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

REQUEST_ID_HEADER = "X-Request-ID"

# Keys owned by the formatter; context fields cannot overwrite them.
RESERVED_KEYS = ("time", "level", "logger", "message", "service", "request_id")

current_request_id: ContextVar[Optional[str]] = ContextVar(
    "current_request_id", default=None
)

logger = logging.getLogger("triptally.request")


class RequestContextFilter(logging.Filter):
    """Stamp records with the request id bound to the current task."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id.get() or "-"
        return True


class JsonLineFormatter(logging.Formatter):
    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: Dict[str, Any] = {
            "time": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service,
            "request_id": getattr(record, "request_id", "-"),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            for key, value in context.items():
                if key not in RESERVED_KEYS:
                    line[key] = value
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def init_logging(debug: bool = False, service: str = "triptally") -> None:
    """Route every logger through one stdout handler emitting JSON lines.

    uvicorn's access log is turned down to warnings because the request
    middleware already writes one line per request with the request id.
    """
    level = logging.DEBUG if debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonLineFormatter(service))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


async def request_context_middleware(request, call_next):  # type: ignore
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = current_request_id.set(request_id)
    route = {"method": request.method, "path": request.url.path}
    started = time.perf_counter()
    status_code = 500
    logger.debug("request start", extra={"context": route})
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "request end",
            extra={"context": {**route, "status": status_code, "duration_ms": elapsed_ms}},
        )
        current_request_id.reset(token)
