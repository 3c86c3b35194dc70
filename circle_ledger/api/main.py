"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from circle_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from circle_ledger.api.dependencies import get_request_id
from circle_ledger.api.v1 import collection, expenses, loans, members, payments
from circle_ledger.domain.exceptions import (
    BusinessRuleError,
    NotFoundError,
    StorageError,
    UnpaidInterestError,
    ValidationError,
)
from circle_ledger.infrastructure.observability.logging import setup_logging
from circle_ledger.infrastructure.observability.metrics import rule_rejection_counter
from circle_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to HTTP responses"""

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError):
        logging.warning(f"Validation error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=400, content={"detail": str(exc), "reason": "invalid_input"})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logging.warning(f"Invalid request body: {exc.errors()}", extra={"request_id": get_request_id(request)})
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(exc.errors()), "reason": "invalid_input"},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logging.warning(f"Not found: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=404, content={"detail": str(exc), "reason": "not_found"})

    @app.exception_handler(BusinessRuleError)
    async def handle_business_rule(request: Request, exc: BusinessRuleError):
        rule_rejection_counter.labels(reason=exc.reason).inc()
        logging.warning(
            f"Rejected by ledger rule: {exc}",
            extra={"request_id": get_request_id(request), "reason": exc.reason},
        )
        content = {"detail": str(exc), "reason": exc.reason}
        if isinstance(exc, UnpaidInterestError):
            content["interest_due"] = float(exc.interest_due)
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(StorageError)
    async def handle_storage(request: Request, exc: StorageError):
        logging.error(f"Storage error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=500, content={"detail": "Internal server error", "reason": "storage"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Circle Ledger",
        description="Lending-circle dues, loans and collection service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(collection.router, prefix="/v1", tags=["collection"])
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])

    return app


app = create_app()
