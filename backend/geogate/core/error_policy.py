"""Error Resolution Policy — decides how a caught error is rendered.

Invariants:
    - Pure functions: no IO, no logging, no framework types
    - Every exception classifies to exactly one of ClientFailure | ServerFailure
    - Production rendering never includes exception text or tracebacks

Design Decisions:
    - Closed variant set consumed with match, so stages pattern-match on the
      resolved failure instead of inspecting exception classes themselves
"""

import traceback
from dataclasses import dataclass

from geogate.core.errors import ClientError

GENERIC_SERVER_MESSAGE = "Internal Server Error"
SERVER_STATUS_CODE = 500


@dataclass(frozen=True)
class ClientFailure:
    status_code: int
    message: str
    code: str = "CLIENT_ERROR"


@dataclass(frozen=True)
class ServerFailure:
    message: str
    detail: str
    code: str = "INTERNAL_ERROR"
    status_code: int = SERVER_STATUS_CODE


Failure = ClientFailure | ServerFailure


def _format_detail(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc)).rstrip()


def _error_code(exc: BaseException) -> str:
    code = getattr(exc, "code", None)
    return code if isinstance(code, str) else "INTERNAL_ERROR"


def classify_error(exc: BaseException) -> Failure:
    """Map any exception onto the closed failure variants."""
    match exc:
        case ClientError(status_code=status, message=message, code=code):
            return ClientFailure(status, message, code)
        case _:
            return ServerFailure(
                message=str(exc) or type(exc).__name__,
                detail=_format_detail(exc),
                code=_error_code(exc),
            )


def render_server_failure(failure: ServerFailure, production: bool) -> str:
    """Body for a 500 response: generic in production, full detail otherwise."""
    if production:
        return GENERIC_SERVER_MESSAGE
    return failure.detail or failure.message
