"""
Shared API Middleware
=====================

Request tracing for the client registry.

Every request gets a correlation ID, one access-log record and an
X-Response-Time header. Errors no route handled become a 500 JSON body
inside CorrelationIDMiddleware, so those responses still carry the ID and
the server carries on with the next request.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from client_registry.shared.infrastructure.logging import get_context_logger

CORRELATION_HEADER = "X-Correlation-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"


def get_correlation_id(request: Request) -> Optional[str]:
    """Correlation ID assigned to this request, if tracing ran."""
    return getattr(request.state, "correlation_id", None)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Outermost application middleware.

    Reuses the caller's X-Correlation-ID or generates one, and answers
    unhandled errors with `global_exception_handler`.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        except Exception as exc:
            response = await global_exception_handler(request, exc)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs each request once it finishes and stamps its duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        logger = get_context_logger(__name__, get_correlation_id(request))
        route = f"{request.method} {request.url.path}"
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("Request failed", extra={
                "route": route,
                "error": str(exc),
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            })
            raise

        elapsed = time.perf_counter() - start
        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed:.3f}s"
        logger.info("Request completed", extra={
            "route": route,
            "status_code": response.status_code,
            "latency_ms": round(elapsed * 1000, 2),
        })
        return response


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all 500 response.

    The error message is only echoed back in development.
    """
    correlation_id = get_correlation_id(request)
    get_context_logger(__name__, correlation_id).exception(
        "Unhandled exception",
        exc_info=exc,
        extra={"route": f"{request.method} {request.url.path}", "error_type": type(exc).__name__},
    )

    settings = getattr(request.app.state, "settings", None)
    is_dev = getattr(settings, "environment", None) == "development"

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "correlation_id": correlation_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "debug_info": str(exc) if is_dev else None,
        },
    )
