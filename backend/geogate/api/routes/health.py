"""Health Check — liveness endpoint for process managers.

Invariants:
    - GET /api/v1/health always returns 200 if the process is up
    - No upstream call: a geocoder outage must not restart healthy workers
"""

from geogate import __version__
from geogate.core.pipeline import (
    HttpMethod, Next, RequestView, ResponseSink, RouteDescriptor,
)


def health_check(request: RequestView, response: ResponseSink, next_: Next) -> None:
    """Basic liveness check. Returns 200 if the process is up."""
    response.json({
        "status": "healthy",
        "service": "geogate",
        "version": __version__,
    })


HEALTH_ROUTES = [
    RouteDescriptor(path="/api/v1/health", method=HttpMethod.GET, handler=health_check),
]
