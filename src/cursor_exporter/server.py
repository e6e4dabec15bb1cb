"""HTTP surface: metrics exposition, health check and an index page."""

from __future__ import annotations

import datetime as dt
import logging
import time
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from prometheus_client import CollectorRegistry

logger = logging.getLogger(__name__)

_INDEX_HTML = """<html>
<head><title>Cursor Admin API Exporter</title></head>
<body>
<h1>Cursor Admin API Exporter</h1>
<p>This is a Prometheus exporter for Cursor Admin API metrics.</p>
<ul>
<li><a href="{metrics_path}">Metrics</a></li>
<li><a href="/health">Health Check</a></li>
</ul>
<h2>Available Metrics</h2>
<ul>
<li><strong>Team Members API:</strong> Team member counts, roles</li>
<li><strong>Daily Usage API:</strong> Lines of code, suggestion acceptance, feature usage</li>
<li><strong>Spending API:</strong> Per-member spending, premium requests</li>
<li><strong>Usage Events API:</strong> Token consumption, model usage, granular events</li>
</ul>
</body>
</html>
"""


def create_app(
    registry: CollectorRegistry, *, metrics_path: str = "/metrics", debug: bool = False
) -> FastAPI:
    """Build the FastAPI application that publishes ``registry``."""
    app = FastAPI(title="Cursor Admin API Exporter", docs_url=None, redoc_url=None)

    if debug:
        app.middleware("http")(_log_requests)

    # Plain ``def`` so the scrape runs in the worker thread pool.
    def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    app.add_api_route(metrics_path, metrics, methods=["GET"], include_in_schema=False)

    @app.get("/health")
    async def health() -> dict[str, str]:
        logger.debug("Health check endpoint accessed")
        return {
            "status": "healthy",
            "timestamp": dt.datetime.now(dt.UTC).isoformat(timespec="seconds"),
        }

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        logger.debug("Root endpoint accessed")
        return _INDEX_HTML.format(metrics_path=metrics_path)

    return app


async def _log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    start = time.perf_counter()
    logger.debug(
        "HTTP request received: %s %s from %s (%s)",
        request.method,
        request.url.path,
        request.client.host if request.client else "-",
        request.headers.get("user-agent", ""),
    )
    response = await call_next(request)
    logger.debug(
        "HTTP request completed: %s %s -> %d in %.3fs",
        request.method,
        request.url.path,
        response.status_code,
        time.perf_counter() - start,
    )
    return response
