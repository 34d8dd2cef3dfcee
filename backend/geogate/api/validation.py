"""Request Validation — precondition handlers placed before route handlers.

Invariants:
    - Missing or empty parameter → BadRequestError raised (never a written response)
    - On success the handler only calls next_(); it never sends
"""

from geogate.core.errors import BadRequestError
from geogate.core.pipeline import Handler, Next, RequestView, ResponseSink


def require_query_param(name: str) -> Handler:
    """Handler rejecting requests whose query lacks a non-empty `name`."""

    def check_query_param(
        request: RequestView, response: ResponseSink, next_: Next,
    ) -> None:
        if not request.query.get(name):
            raise BadRequestError(f"Missing {name} parameter")
        next_()

    return check_query_param
