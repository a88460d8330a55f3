"""FastAPI application serving the landing page and the metrics endpoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from mirth_exporter import __version__
from mirth_exporter.api_clients import MirthClient
from mirth_exporter.config import Settings, configure_logging, get_settings
from mirth_exporter.metrics import MirthCollector, default_registry

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>Mirth Channel Exporter</title></head>
<body>
<h1>Mirth Channel Exporter</h1>
<p><a href='{metrics_path}'>Metrics</a></p>
</body>
</html>
"""


def build_prometheus_registry(collector: MirthCollector) -> CollectorRegistry:
    """Registry holding the Mirth collector plus process/platform metrics."""
    registry = CollectorRegistry(auto_describe=True)
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    registry.register(collector)
    return registry


def create_app(
    settings: Optional[Settings] = None,
    collector: Optional[MirthCollector] = None,
) -> FastAPI:
    """Create the exporter application.

    Args:
        settings: Application settings; loaded from the environment if omitted.
        collector: Pre-built collector, mainly for tests. A new collector with
            a :class:`MirthClient` built from ``settings`` is used otherwise.
    """
    settings = settings or get_settings()
    owns_client = collector is None
    if collector is None:
        collector = MirthCollector(MirthClient.from_settings(settings), default_registry())
    registry = build_prometheus_registry(collector)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(
            level=settings.log_level,
            format=settings.log_format,
            sanitize_logs=settings.sanitize_logs,
        )
        logger.info(
            "Mirth channel exporter %s scraping %s, metrics at %s",
            __version__,
            settings.mirth_endpoint,
            settings.metrics_path,
        )
        yield
        if owns_client and isinstance(collector.client, MirthClient):
            collector.client.close()
        logger.info("Mirth channel exporter stopped")

    app = FastAPI(
        title="Mirth Channel Exporter",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.collector = collector
    app.state.registry = registry

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index() -> str:
        return LANDING_PAGE.format(metrics_path=settings.metrics_path)

    # Plain def: FastAPI runs it in the threadpool, so concurrent scrapes
    # each get their own collection cycle without blocking the event loop.
    def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    app.add_api_route(settings.metrics_path, metrics, methods=["GET"], include_in_schema=False)

    return app
