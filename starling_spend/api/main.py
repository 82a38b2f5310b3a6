"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from starling_spend.api.middleware import MetricsMiddleware, RequestIDMiddleware
from starling_spend.api.v1 import balance, spending
from starling_spend.config import Settings, get_settings
from starling_spend.infrastructure.observability.logging import setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Run with: uvicorn starling_spend.api.main:create_app --factory
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.service_name)

    app = FastAPI(
        title="Starling Spend",
        description="Account balance, spend breakdowns and spend trends from the bank API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(balance.router, prefix="/v1", tags=["balance"])
    app.include_router(spending.router, prefix="/v1", tags=["spending"])

    return app
