"""Supervisory Boundary — last stop for errors the resolution pipeline did not handle.

Invariants:
    - Anything escaping the error stages is logged at CRITICAL, then terminate() runs
    - Errors raised outside request handling (event loop callbacks, orphaned
      tasks) take the same path via the loop exception handler
    - terminate is injected: production exits the process, tests record the call

Design Decisions:
    - Pure ASGI middleware (not BaseHTTPMiddleware): sees the raw exception
      before Starlette's ServerErrorMiddleware turns it into a bare 500
    - os._exit after flushing logs: process state is unverifiable, so no
      cleanup hooks run
"""

import asyncio
import logging
import os
from collections.abc import Callable

from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

Terminate = Callable[[BaseException], None]


def terminate_process(exc: BaseException) -> None:
    """Flush logs and exit immediately with a failure status."""
    logging.shutdown()
    os._exit(1)


class SupervisorMiddleware:
    """Outermost ASGI boundary: escaped errors are fatal."""

    def __init__(self, app: ASGIApp, terminate: Terminate = terminate_process):
        self.app = app
        self.terminate = terminate

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            logger.critical(
                f"Error escaped the resolution pipeline: {exc!r}",
                exc_info=exc,
                extra={"path": scope.get("path"), "method": scope.get("method")},
            )
            self.terminate(exc)
            raise


def install_fatal_hooks(
    loop: asyncio.AbstractEventLoop, terminate: Terminate = terminate_process,
) -> None:
    """Route unhandled event-loop errors to the same fatal path."""

    def handle_loop_error(
        loop: asyncio.AbstractEventLoop, context: dict,
    ) -> None:
        exc = context.get("exception") or RuntimeError(context.get("message"))
        logger.critical(
            f"Unhandled error outside request handling: {context.get('message')}",
            exc_info=exc,
        )
        terminate(exc)

    loop.set_exception_handler(handle_loop_error)
