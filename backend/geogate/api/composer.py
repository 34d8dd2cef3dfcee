"""Composer — applies middleware stages, route descriptors and error stages to an app.

Invariants:
    - Stages and routes are applied strictly in list order, exactly once
    - A stage raising during registration aborts startup (propagates as-is)
    - Within a route, a handler runs only if the previous one called next_()
    - Every error (sync raise, async raise, next_(error), response rendering)
      enters the error stages through run_error_stages, the only recovery path
    - The fallback (not-found) routes are always registered after app routes
    - Errors escaping the error stages are not caught here: they belong to
      the supervisor

Design Decisions:
    - Endpoints built per descriptor via add_api_route, so Starlette's router
      does method/path matching and the catch-all route is just the last route
    - Error stages read from app.state at request time: compose_app sets them
      once, after routes, mirroring "error handlers appended after routes"
    - A sequence exhausted through next_() raises NotFoundError, the same outcome
      as reaching the end of the route table
"""

import dataclasses
import inspect
import logging
from collections.abc import Callable, Iterable, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from geogate.api.error_stages import FALLBACK_ROUTES, NOT_FOUND_MESSAGE
from geogate.core.errors import (
    HandlerContractError, NotFoundError, ResolutionExhaustedError,
)
from geogate.core.pipeline import (
    JSON_MEDIA_TYPE, ErrorStage, Handler, Next, RequestView, ResponseSink,
    RouteDescriptor,
)

logger = logging.getLogger(__name__)

Stage = Callable[[FastAPI], None]


# ─── Middleware Composer ────────────────────────────────────────

def apply_middleware(stages: Iterable[Stage], target: FastAPI) -> None:
    """Invoke each registration stage with the app, in order."""
    for stage in stages:
        stage(target)


# ─── Route Composer ─────────────────────────────────────────────

def normalize_handlers(handler: Handler | Sequence[Handler]) -> tuple[Handler, ...]:
    """Single handler → one-element tuple; sequences keep their order."""
    if callable(handler):
        return (handler,)
    handlers = tuple(handler)
    if not handlers:
        raise ValueError("Route needs at least one handler")
    return handlers


def apply_routes(routes: Iterable[RouteDescriptor], target: FastAPI) -> None:
    """Register one endpoint per descriptor under its method and path."""
    for route in routes:
        handlers = normalize_handlers(route.handler)
        target.add_api_route(
            route.path,
            _build_endpoint(handlers),
            methods=[route.method.value],
            name=f"{route.method.value} {route.path}",
            include_in_schema=False,
        )


def _build_endpoint(handlers: tuple[Handler, ...]):
    async def endpoint(request: Request):
        view = RequestView(
            method=request.method,
            path=request.url.path,
            query=dict(request.query_params),
        )
        response = ResponseSink()
        try:
            view = dataclasses.replace(view, body=await request.body())
            await run_handlers(handlers, view, response)
            return render_response(response)
        except Exception as exc:
            response = ResponseSink()
            await run_error_stages(
                request.app.state.error_stages, exc, view, response,
            )
        return render_response(response)

    return endpoint


async def _invoke(func, *args) -> None:
    result = func(*args)
    if inspect.isawaitable(result):
        await result


def _name_of(func) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


async def run_handlers(
    handlers: Sequence[Handler], request: RequestView, response: ResponseSink,
) -> None:
    """Run a handler sequence; raise whatever error the chain produced."""
    for handler in handlers:
        next_ = Next()
        await _invoke(handler, request, response, next_)
        if next_.error is not None:
            raise next_.error
        if next_.called:
            continue
        if response.finished:
            return
        raise HandlerContractError(_name_of(handler))
    raise NotFoundError(NOT_FOUND_MESSAGE)


async def run_error_stages(
    stages: Sequence[ErrorStage],
    error: BaseException,
    request: RequestView,
    response: ResponseSink,
) -> None:
    """Pass the error through the stages until one renders a response.

    Exceptions raised by a stage are deliberately not caught.
    """
    for stage in stages:
        next_ = Next()
        await _invoke(stage, error, request, response, next_)
        if response.finished:
            return
        if not next_.called:
            raise HandlerContractError(_name_of(stage))
        if next_.error is not None:
            error = next_.error
    raise ResolutionExhaustedError(error)


def render_response(response: ResponseSink) -> Response:
    """Turn a finished ResponseSink into a Starlette response.

    Bodies sent with json() are always JSON-encoded, whatever their type.
    """
    body = response.body
    if response.media_type == JSON_MEDIA_TYPE:
        return JSONResponse(status_code=response.status_code, content=body)
    if isinstance(body, (dict, list)):
        return JSONResponse(status_code=response.status_code, content=body)
    if body is None:
        return Response(status_code=response.status_code)
    if isinstance(body, bytes):
        return Response(status_code=response.status_code, content=body)
    return PlainTextResponse(status_code=response.status_code, content=str(body))


# ─── Composition ────────────────────────────────────────────────

def compose_app(
    target: FastAPI,
    *,
    middleware: Sequence[Stage],
    routes: Sequence[RouteDescriptor],
    error_stages: Sequence[ErrorStage],
) -> FastAPI:
    """Wire stages, routes, fallback routes and error stages; return the app."""
    apply_middleware(middleware, target)
    apply_routes(routes, target)
    apply_routes(FALLBACK_ROUTES, target)
    target.state.error_stages = tuple(error_stages)
    logger.debug(
        f"Composed app: {len(middleware)} stages, {len(routes)} routes, "
        f"{len(error_stages)} error stages",
    )
    return target
