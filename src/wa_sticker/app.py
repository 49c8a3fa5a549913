"""FastAPI application factory for the sticker service."""

from __future__ import annotations

from fastapi import FastAPI

from .api.routes import router as api_router
from .config import get_settings
from .converters import load_converters_from_settings
from .logging import configure_logging
from .monitoring import ensure_metrics_server


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.logging)
    load_converters_from_settings(settings)

    if settings.monitoring.enabled:
        ensure_metrics_server(settings.monitoring.prometheus_port)

    app = FastAPI(
        title="WhatsApp Sticker Service",
        version=settings.api_version,
        docs_url=f"{settings.api.base_url}/docs",
        redoc_url=f"{settings.api.base_url}/redoc",
        openapi_url=f"{settings.api.base_url}/openapi.json",
    )

    app.include_router(api_router, prefix=settings.api.base_url)

    @app.get("/healthz")
    async def root_health() -> dict[str, str]:
        return {"status": "ok"}

    return app
