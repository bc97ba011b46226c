"""
Error Handler Middleware

Provides consistent error handling and response formatting.
Logs errors with correlation IDs for debugging and records HTTP
request metrics.
"""

import time
import traceback
from uuid import uuid4

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from edu360.config.logging_config import bind_correlation_id, clear_context, get_logger
from edu360.domain.models import PanicAlertAlreadyResolvedError, VerdictAlreadyAttachedError
from edu360.infrastructure.metrics.prometheus_metrics import track_http_request
from edu360.infrastructure.store.base import (
    DuplicateRecordError,
    RecordNotFoundError,
    StoreUnavailableError,
)
from edu360.services.wellness.wellness_service import ConflictError, InvalidReferenceError

logger = get_logger(__name__)


def _endpoint_label(request: Request) -> str:
    # Route templates keep metric cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Provides:
    - Correlation ID tracking for all requests
    - Consistent error response format
    - Error logging with context
    - Sensitive data protection in errors
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request with error handling."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
        bind_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id
        start_time = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            logger.error(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
                error_message=str(e),
                traceback=traceback.format_exc(),
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Internal server error",
                    "correlation_id": correlation_id,
                    "message": "An unexpected error occurred. Please try again.",
                },
                headers={"X-Correlation-ID": correlation_id},
            )

        finally:
            track_http_request(
                request.method,
                _endpoint_label(request),
                status_code,
                time.perf_counter() - start_time,
            )
            clear_context()


def _error_response(request: Request, status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "correlation_id": getattr(request.state, "correlation_id", None),
        },
    )


async def _store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("Event store unavailable", path=request.url.path, error=str(exc))
    return _error_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Service unavailable",
        "Storage is temporarily unavailable. Please try again.",
    )


async def _not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return _error_response(request, status.HTTP_404_NOT_FOUND, "Not found", str(exc))


async def _conflict(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(request, status.HTTP_409_CONFLICT, "Conflict", str(exc))


async def _invalid_reference(request: Request, exc: InvalidReferenceError) -> JSONResponse:
    return _error_response(request, 422, "Invalid reference", str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and store exceptions to HTTP responses."""
    app.add_exception_handler(StoreUnavailableError, _store_unavailable)
    app.add_exception_handler(RecordNotFoundError, _not_found)
    app.add_exception_handler(DuplicateRecordError, _conflict)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(VerdictAlreadyAttachedError, _conflict)
    app.add_exception_handler(PanicAlertAlreadyResolvedError, _conflict)
    app.add_exception_handler(InvalidReferenceError, _invalid_reference)
