"""Resolution Pipeline — not-found route plus the ordered client/server error stages.

Invariants:
    - The not-found handler always raises; it never writes a response itself,
      so "no route" and "handler raised" share one propagation path
    - Client-error stage: ClientFailure → its status and message; else next_(error)
    - Server-error stage: always terminal, always 500
    - Production: generic body, no exception text; otherwise full traceback
    - Client errors logged at WARNING, server errors at ERROR with exc_info

Design Decisions:
    - Stages match on classify_error() variants rather than exception classes
    - Server-error stage built by a factory so the production flag is passed in
      explicitly instead of read from the environment at request time
"""

import logging

from geogate.core.error_policy import (
    ClientFailure, ServerFailure, classify_error, render_server_failure,
)
from geogate.core.errors import NotFoundError
from geogate.core.pipeline import (
    ErrorStage, HttpMethod, Next, RequestView, ResponseSink, RouteDescriptor,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Method not found."


# ─── Not-found (last route stage) ───────────────────────────────

def not_found_handler(
    request: RequestView, response: ResponseSink, next_: Next,
) -> None:
    """Terminal route: anything reaching it has no matching route."""
    raise NotFoundError(NOT_FOUND_MESSAGE)


FALLBACK_ROUTES = tuple(
    RouteDescriptor(path="/{path:path}", method=method, handler=not_found_handler)
    for method in HttpMethod
)


# ─── Error stages ───────────────────────────────────────────────

def client_error_stage(
    error: BaseException, request: RequestView, response: ResponseSink, next_: Next,
) -> None:
    """Render recognized client errors; forward everything else unchanged."""
    match classify_error(error):
        case ClientFailure(status_code=status, message=message, code=code):
            logger.warning(
                f"Client error on {request.path}: {message}",
                extra={"error_code": code, "path": request.path, "status_code": status},
            )
            response.status(status).send(message)
        case _:
            next_(error)


def make_server_error_stage(production: bool) -> ErrorStage:
    """Build the terminal 500 stage for the given deployment mode."""

    def server_error_stage(
        error: BaseException, request: RequestView, response: ResponseSink, next_: Next,
    ) -> None:
        failure = classify_error(error)
        match failure:
            case ClientFailure(message=message, code=code):
                # Reached only if an earlier stage forwarded a client error
                failure = ServerFailure(message=message, detail=message, code=code)
        logger.error(
            f"Unhandled exception on {request.path}: {failure.message}",
            exc_info=error,
            extra={"error_code": failure.code, "path": request.path},
        )
        response.status(failure.status_code).send(
            render_server_failure(failure, production),
        )

    return server_error_stage


def build_error_stages(production: bool) -> list[ErrorStage]:
    """Client stage first, server stage last."""
    return [client_error_stage, make_server_error_stage(production)]
