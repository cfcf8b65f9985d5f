"""FastAPI application factory for the cluster health monitor."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from .. import __version__
from ..collectors.aggregator import HealthAggregator, build_aggregator
from ..config import MonitorSettings
from . import dashboard, routes

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[MonitorSettings] = None,
    aggregator: Optional[HealthAggregator] = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    The aggregator is built from *settings* (or env defaults) unless one is
    passed in, and injected into the routers via ``init_router()``.
    """
    if settings is None:
        settings = MonitorSettings.from_env()
    if aggregator is None:
        aggregator = build_aggregator(settings)

    app = FastAPI(
        title="K3s Cluster Monitor",
        version=__version__,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )
    app.state.settings = settings
    app.state.aggregator = aggregator

    routes.init_router(aggregator)
    app.include_router(routes.router)
    app.include_router(dashboard.router)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s", request.url.path)
        if request.url.path.startswith("/api/"):
            return routes.error_envelope(str(exc) or type(exc).__name__, 500)
        return PlainTextResponse("Internal Server Error", status_code=500)

    logger.info(
        "Monitoring %d components: %s",
        len(aggregator.registry),
        ", ".join(aggregator.get_component_names()),
    )
    return app
