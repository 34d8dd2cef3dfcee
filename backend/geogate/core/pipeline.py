"""Pipeline Types — values exchanged between the composer and handlers.

Invariants:
    - Handlers see a RequestView, never the framework's Request object
    - ResponseSink accepts exactly one send(); a second send raises
    - Next records at most what the handler asked for; the composer acts on it
    - RouteDescriptor is frozen: routes are static configuration

Design Decisions:
    - Continue signal as a small callable object instead of nested callbacks:
      the chain runner inspects it after the handler returns, which keeps
      handler sequences strictly sequential and sync/async agnostic
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

JSON_MEDIA_TYPE = "application/json"


class HttpMethod(str, Enum):
    """Verbs a route may be registered under."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class RequestView:
    """Transport-free view of an inbound request."""
    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


class ResponseSink:
    """Collects status and body; the composer turns it into an HTTP response."""

    def __init__(self):
        self.status_code = 200
        self.body: Any = None
        self.finished = False
        self.media_type: str | None = None

    def status(self, code: int) -> "ResponseSink":
        self.status_code = code
        return self

    def send(self, body: Any = None) -> None:
        if self.finished:
            raise RuntimeError("Response already sent")
        self.body = body
        self.finished = True

    def json(self, body: Any) -> None:
        """Send body as JSON, including null and bare scalars."""
        self.send(body)
        self.media_type = JSON_MEDIA_TYPE


class Next:
    """Continue signal handed to every handler and error stage."""

    def __init__(self):
        self.called = False
        self.error: BaseException | None = None

    def __call__(self, error: BaseException | None = None) -> None:
        self.called = True
        self.error = error


Handler = Callable[[RequestView, ResponseSink, Next], Awaitable[None] | None]
ErrorStage = Callable[
    [BaseException, RequestView, ResponseSink, Next], Awaitable[None] | None,
]


@dataclass(frozen=True)
class RouteDescriptor:
    """Declarative route: one verb, one path, one or more handlers."""
    path: str
    method: HttpMethod
    handler: Handler | Sequence[Handler]
