"""Cross-Cutting Middleware Stages — request logging and fatal-error supervision.

Invariants:
    - Each stage is a plain function taking the app and registering middleware
    - Starlette wraps later-added middleware around earlier ones, so the
      supervision stage must come last in the stage list to be outermost
    - Every response carries an X-Request-ID (echoed or generated), and the
      same id tags every log record emitted while the request is handled

Design Decisions:
    - Pure ASGI middleware: no BaseHTTPMiddleware body buffering or task hop
"""

import logging
import time
from uuid import uuid4

from fastapi import FastAPI
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from geogate.infrastructure.observability import request_id_var
from geogate.infrastructure.supervisor import (
    SupervisorMiddleware, Terminate, terminate_process,
)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


class RequestLoggingMiddleware:
    """One access log line per request, tagged with a request id."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or uuid4().hex
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        status_holder = {"status": None}

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            logger.info(
                f"{scope['method']} {scope['path']} {status_holder['status']}",
                extra={
                    "request_id": request_id,
                    "method": scope["method"],
                    "path": scope["path"],
                    "status_code": status_holder["status"],
                    "duration_ms": (time.perf_counter() - started) * 1000,
                },
            )
            request_id_var.reset(token)


def _incoming_request_id(scope: Scope) -> str | None:
    for name, value in scope.get("headers", []):
        if name == REQUEST_ID_HEADER.encode():
            return value.decode("latin-1")
    return None


# ─── Stages ─────────────────────────────────────────────────────

def request_logging_stage(app: FastAPI) -> None:
    app.add_middleware(RequestLoggingMiddleware)


def make_supervision_stage(terminate: Terminate = terminate_process):
    """Build the stage installing the fatal-error boundary."""

    def supervision_stage(app: FastAPI) -> None:
        app.add_middleware(SupervisorMiddleware, terminate=terminate)

    return supervision_stage
