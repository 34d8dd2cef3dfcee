"""Structured Logging — formatter output shape and request id propagation.

Tests:
    - JSONFormatter base fields and extra-field allowlist
    - duration_ms rendered as milliseconds with two decimals
    - RequestContextFilter stamps the current request id, leaves explicit ids alone
    - TextFormatter substitutes '-' outside a request
    - RequestLoggingMiddleware exposes the response's X-Request-ID to code
      running inside the request, and clears it afterwards
"""

import json
import logging

import httpx
from fastapi import FastAPI

from geogate.infrastructure.middleware import RequestLoggingMiddleware
from geogate.infrastructure.observability import (
    JSONFormatter,
    RequestContextFilter,
    TextFormatter,
    request_id_var,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "geogate.test", logging.WARNING, __file__, 1, "Client error", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_base_fields():
    """Every record carries timestamp, level, logger and message."""
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "geogate.test"
    assert log["message"] == "Client error"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    """Known extras are surfaced, anything else is dropped."""
    log = json.loads(JSONFormatter().format(
        _record(error_code="BAD_REQUEST", path="/api/v1/search", api_key="secret"),
    ))
    assert log["error_code"] == "BAD_REQUEST"
    assert log["path"] == "/api/v1/search"
    assert "api_key" not in log


def test_json_formatter_duration_in_milliseconds():
    """Sub-millisecond durations are not rounded away."""
    log = json.loads(JSONFormatter().format(_record(duration_ms=0.4271)))
    assert log["duration_ms"] == "0.43"


def test_filter_stamps_current_request_id():
    """Records emitted inside a request pick up its id."""
    token = request_id_var.set("abc123")
    try:
        record = _record()
        assert RequestContextFilter().filter(record) is True
    finally:
        request_id_var.reset(token)
    assert record.request_id == "abc123"


def test_filter_keeps_explicit_request_id():
    """An id passed through extra wins over the context value."""
    token = request_id_var.set("from-context")
    try:
        record = _record(request_id="explicit")
        RequestContextFilter().filter(record)
    finally:
        request_id_var.reset(token)
    assert record.request_id == "explicit"


def test_filter_outside_request_leaves_id_unset():
    record = _record()
    RequestContextFilter().filter(record)
    assert record.request_id is None
    assert "request_id" not in json.loads(JSONFormatter().format(record))


def test_text_formatter_uses_dash_without_request():
    """Startup and shutdown lines render with a '-' placeholder."""
    record = _record()
    RequestContextFilter().filter(record)
    assert "[-] Client error" in TextFormatter().format(record)


def test_text_formatter_includes_request_id():
    line = TextFormatter().format(_record(request_id="abc123"))
    assert "[abc123] Client error" in line


def _tagging_app(seen: list) -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        seen.append(request_id_var.get())
        logging.getLogger("geogate.test").warning("inside request")
        return {"ok": True}

    app.add_middleware(RequestLoggingMiddleware)
    return app


async def test_middleware_sets_request_id_for_handlers(caplog):
    """Handler logs carry the same id the client sees in X-Request-ID."""
    seen: list = []
    caplog.handler.addFilter(RequestContextFilter())
    transport = httpx.ASGITransport(app=_tagging_app(seen))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        with caplog.at_level(logging.INFO):
            res = await client.get("/ping")

    request_id = res.headers["x-request-id"]
    assert seen == [request_id]
    inside = [r for r in caplog.records if r.getMessage() == "inside request"]
    assert inside[0].request_id == request_id
    assert request_id_var.get() is None


async def test_middleware_echoes_incoming_request_id():
    seen: list = []
    transport = httpx.ASGITransport(app=_tagging_app(seen))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        res = await client.get("/ping", headers={"X-Request-ID": "upstream-7"})

    assert res.headers["x-request-id"] == "upstream-7"
    assert seen == ["upstream-7"]
