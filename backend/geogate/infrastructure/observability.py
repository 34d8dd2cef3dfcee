"""Structured Logging — request-aware JSON logging for the gateway.

Invariants:
    - Every record emitted while a request is in flight carries its request_id,
      including records from the composer, error stages and the OpenCage client
    - Access-log fields (method, path, status_code, duration_ms) surfaced when present
    - duration_ms always rendered in milliseconds with two decimals
    - JSON format in production, human-readable text otherwise
    - Upstream credentials never reach the logs (httpx request lines suppressed)

Design Decisions:
    - request_id held in a ContextVar: each asyncio task sees its own value,
      so concurrent requests never tag each other's records
    - Tagging done by a Filter on the handler rather than by every call site
"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_EXTRA_FIELDS = (
    "request_id", "method", "path", "status_code", "duration_ms",
    "error_code", "query_length",
)
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp records with the request id of the current request, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        return True


def _format_duration(value) -> str:
    return f"{float(value):.2f}"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, request fields included when known."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is None:
                continue
            log[key] = _format_duration(val) if key == "duration_ms" else val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable format; '-' stands in for a missing request id."""

    def __init__(self):
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, "request_id", None) is None:
            record.request_id = "-"
        return super().format(record)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application (called once from the app lifespan)."""
    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # httpx logs full request URLs at INFO, and ours carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
