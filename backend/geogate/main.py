"""Geogate API — composition root and server entry point.

Invariants:
    - Routes registered explicitly from descriptor lists (no auto-discovery)
    - Order: middleware stages → app routes → not-found routes → error stages
    - Settings read once here; components receive explicit values
    - The OpenCage client is closed on shutdown when this module created it

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - docs/redoc/openapi disabled: the public surface is the search endpoint only
    - create_app accepts provider/terminate overrides so tests wire stubs
      without monkeypatching modules
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from geogate import __version__
from geogate.api.composer import compose_app
from geogate.api.error_stages import build_error_stages
from geogate.api.routes.health import HEALTH_ROUTES
from geogate.api.routes.search import search_routes
from geogate.config import Settings, get_settings
from geogate.core.provider_protocols import PlaceProvider
from geogate.infrastructure.middleware import (
    make_supervision_stage, request_logging_stage,
)
from geogate.infrastructure.observability import setup_logging
from geogate.infrastructure.opencage_client import OpenCageClient
from geogate.infrastructure.supervisor import (
    Terminate, install_fatal_hooks, terminate_process,
)
from geogate.services.place_search import PlaceSearch

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    provider: PlaceProvider | None = None,
    terminate: Terminate = terminate_process,
) -> FastAPI:
    """Build a fully wired Geogate application."""
    settings = settings or get_settings()
    owned_client: OpenCageClient | None = None
    if provider is None:
        owned_client = OpenCageClient(
            api_key=settings.opencage_api_key,
            base_url=settings.opencage_base_url,
            timeout_seconds=settings.opencage_timeout_seconds,
        )
        provider = owned_client

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        install_fatal_hooks(asyncio.get_running_loop(), terminate)
        if not settings.opencage_api_key:
            logger.warning("OPENCAGE_API_KEY is not set; upstream calls will be rejected")
        logger.info(
            f"Geogate API started ({settings.environment})",
        )
        yield
        if owned_client is not None:
            await owned_client.aclose()
        logger.info("Geogate API shutting down")

    app = FastAPI(
        title="Geogate API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Supervision last: Starlette makes the last-added middleware outermost
    return compose_app(
        app,
        middleware=[request_logging_stage, make_supervision_stage(terminate)],
        routes=[*HEALTH_ROUTES, *search_routes(PlaceSearch(provider))],
        error_stages=build_error_stages(settings.is_production),
    )


def run() -> None:
    """Console entry point: serve with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(
        "geogate.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
