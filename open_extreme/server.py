"""FastAPI application for the opening-extreme screener."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from .app.middleware import RequestIdMiddleware
from .app.routers.screener import router as screener_router
from .app.session import ScreenerSession
from .config import get_settings
from .logging_setup import setup_logging
from .telemetry import prometheus_response

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Opening Extreme Screener",
        description="Screens intraday CSV uploads for open-at-high / open-at-low candles and derives trade plans.",
        version="0.1.0",
    )
    app.state.session = ScreenerSession()

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )

    app.include_router(screener_router)

    @app.get("/healthz", summary="Readiness probe")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", include_in_schema=False)
    async def metrics_endpoint() -> Response:
        payload, content_type = prometheus_response()
        return Response(content=payload, media_type=content_type)

    @app.get("/", summary="Service metadata")
    async def root() -> Dict[str, Any]:
        return {
            "name": "open-extreme-screener",
            "routes": {
                "load": "/api/v1/dataset",
                "screen": "/api/v1/screen",
                "clear": "/api/v1/clear",
                "plans": "/api/v1/plans",
                "export_csv": "/api/v1/export.csv",
                "export_pdf": "/api/v1/export.pdf",
                "chart_url": "/api/v1/chart-url",
                "health": "/healthz",
            },
        }

    logger.info("screener app created")
    return app


app = create_app()


__all__ = ["app", "create_app"]
