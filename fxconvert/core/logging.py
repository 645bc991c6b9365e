"""Structured JSON logging with a per-request correlation id.

Every record written through the root handler carries the id of the HTTP request
it was emitted under ("-" outside a request), so a cache miss, the upstream
fetch and the access line of one conversion can be grepped together.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

REQUEST_ID_HEADER = "X-Request-ID"
NOISY_LOGGERS = ("httpx", "httpcore")


def _attach_request_id(record: logging.LogRecord) -> bool:
    record.request_id = request_id_ctx.get() or "-"
    return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, UTC timestamps with milliseconds."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        payload = {
            "time": f"{stamp}.{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def init_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_attach_request_id)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # httpx logs every request at INFO; keep it for debug runs only
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)


async def request_context_middleware(request, call_next):  # type: ignore
    """Tag every log line of a request with a fresh id and log one access line."""
    rid = str(uuid.uuid4())
    token = request_id_ctx.set(rid)
    logger = logging.getLogger("fxconvert.request")
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers[REQUEST_ID_HEADER] = rid
        return response
    finally:
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            status_code,
            (time.perf_counter() - started) * 1000,
        )
        request_id_ctx.reset(token)
