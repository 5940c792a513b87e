"""
FastAPI application for the laundry back office.

Mounts the order pricing and status workflow router under the v1 prefix,
tags every request with a correlation ID, and turns request validation
failures and unexpected errors into JSON bodies that carry that ID. Run with
``uvicorn laundra.main:app``.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from laundra.api.v1.orders import router as orders_router
from laundra.core.config import get_settings
from laundra.core.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    log_performance,
    set_request_id,
)

REQUEST_ID_HEADER = "X-Request-ID"

configure_logging()
logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log the pricing and workflow configuration the process serves with."""
    current = get_settings()
    logger.info(
        "Application starting",
        environment=current.environment,
        version=current.app_version,
        currency=current.currency,
        vat_rate_percent=str(current.default_vat_rate_percent),
        express_fee=str(current.express_fee),
        allow_status_rollback=current.allow_status_rollback,
    )
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Order pricing, status workflow and receipt data for the shop's back office",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


def _internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    # Internal details stay in the log; the body only carries the request ID.
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "request_id": get_request_id(),
        },
    )


@app.middleware("http")
async def correlate_request(request: Request, call_next):
    """
    Bind a request ID for the lifetime of the request.

    The caller's ``X-Request-ID`` is reused when present, so a till or
    back-office screen can match its own logs to ours. Unhandled errors are
    answered here, while the request ID is still bound.
    """
    request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
    try:
        try:
            with log_performance(
                logger, "http_request", method=request.method, path=request.url.path
            ):
                response = await call_next(request)
        except Exception as exc:
            response = _internal_error_response(request, exc)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        return response
    finally:
        clear_context()


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies, unknown statuses and bad path values."""
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        path=request.url.path,
        error_count=len(errors),
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": "Request validation failed",
            "details": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
                for error in errors
            ],
            "request_id": get_request_id(),
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return _internal_error_response(request, exc)


@app.get("/health", tags=["Health"], summary="Health check")
async def health_check() -> dict[str, str]:
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/live", tags=["Health"], summary="Liveness check")
async def liveness_check() -> dict[str, str]:
    return {
        "status": "alive",
        "service": settings.app_name,
        "version": settings.app_version,
    }


app.include_router(orders_router, prefix=f"{settings.api_v1_prefix}/orders")
