"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from invoice_service.api.middleware import RequestIDMiddleware, MetricsMiddleware
from invoice_service.api.v1 import clients, dashboard, invoices, payments
from invoice_service.infrastructure.observability.logging import setup_logging
from invoice_service.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Invoice Service",
        description="Clients, invoices, payments and dashboard analytics",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

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
    app.include_router(clients.router, prefix="/v1", tags=["clients"])
    app.include_router(invoices.router, prefix="/v1", tags=["invoices"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
