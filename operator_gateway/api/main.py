"""FastAPI application factory"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from operator_gateway.api.dependencies import get_request_id
from operator_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from operator_gateway.api.v1 import operators, transactions
from operator_gateway.config import settings
from operator_gateway.domain.exceptions import ConfigurationError, SpecificationError
from operator_gateway.infrastructure.observability.logging import setup_logging
from operator_gateway.services.transactions import TransactionService, build_transaction_service

# Setup structured logging
setup_logging(settings.log_level)


def create_app(service: TransactionService | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Operator Gateway",
        description="Multi-operator transaction engine (bank, mobile money, microfinance)",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.transaction_service = service or build_transaction_service()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logging.warning(f"Configuration error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(SpecificationError)
    async def specification_error_handler(request: Request, exc: SpecificationError):
        logging.warning(f"Invalid transaction: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(operators.router, prefix="/v1", tags=["operators"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])

    return app


app = create_app()
