"""Error Taxonomy — typed client errors and the server errors raised by Geogate.

Invariants:
    - ClientError is abstract; each concrete variant fixes its status_code (400-499)
    - status_code is read-only on instances (no setter, no instance override)
    - Structured messages are stored in canonical JSON form (sorted keys, compact)
    - Server errors never carry a caller-chosen status: the boundary maps them to 500

Design Decisions:
    - status_code as class-level constant exposed through a property: immutability
      without __setattr__ tricks
    - ServerError is only the base for errors this package raises itself; any
      other exception is still treated as a server error by the resolution policy
"""

import json
from collections.abc import Mapping, Sequence
from typing import ClassVar


def serialize_message(message: str | Mapping | Sequence) -> str:
    """Return the message unchanged if text, else its canonical JSON form."""
    if isinstance(message, str):
        return message
    return json.dumps(
        message, sort_keys=True, separators=(",", ":"), ensure_ascii=False,
    )


# ─── Client Errors (400-level) ──────────────────────────────────

class ClientError(Exception):
    """Base for errors caused by the caller. Message is safe to expose."""

    _status_code: ClassVar[int | None] = None
    code: ClassVar[str] = "CLIENT_ERROR"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        status = cls.__dict__.get("_status_code")
        if status is not None and not 400 <= status < 500:
            raise TypeError(
                f"{cls.__name__} status {status} is not a client error status",
            )

    def __init__(self, message: str | Mapping | Sequence):
        if self._status_code is None:
            raise TypeError(
                f"{type(self).__name__} is abstract; raise a concrete variant",
            )
        self._message = serialize_message(message)
        super().__init__(self._message)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def message(self) -> str:
        return self._message


class BadRequestError(ClientError):
    """Request input is missing or malformed."""
    _status_code = 400
    code = "BAD_REQUEST"


class NotFoundError(ClientError):
    """No route matched the request."""
    _status_code = 404
    code = "NOT_FOUND"


# ─── Server Errors (500-level) ──────────────────────────────────

class ServerError(Exception):
    """Base for failures that are not the caller's fault."""
    code: ClassVar[str] = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamParseError(ServerError):
    """Upstream geocoder returned a body that is not valid JSON."""
    code = "UPSTREAM_PARSE_ERROR"

    def __init__(self, reason: str, body_preview: str = ""):
        super().__init__(f"Upstream response is not valid JSON: {reason}")
        self.reason = reason
        self.body_preview = body_preview


class HandlerContractError(ServerError):
    """A handler returned without sending a response or calling next_."""
    code = "HANDLER_CONTRACT"

    def __init__(self, handler_name: str):
        super().__init__(
            f"Handler '{handler_name}' neither sent a response nor called next_",
        )
        self.handler_name = handler_name


# ─── Fatal Errors ───────────────────────────────────────────────

class ResolutionExhaustedError(Exception):
    """Every error stage passed on the error; nothing rendered a response.

    Not a ServerError: it must escape the pipeline and reach the supervisor.
    """

    def __init__(self, original: BaseException):
        super().__init__(
            f"No error stage produced a response for {type(original).__name__}",
        )
        self.original = original
