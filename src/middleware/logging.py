"""Request logging middleware with correlation ID support."""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.logging.config import get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Request-ID"


def _request_context(request: Request) -> dict:
    """
    Build the log context shared by all request log lines.

    Headers are deliberately left out so credentials never reach the logs.

    Args:
        request: The incoming request

    Returns:
        Dict with method, path and client host
    """
    return {
        "method": request.method,
        "path": request.url.path,
        "client_host": request.client.host if request.client else None,
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses.

    Features:
    - Adds a correlation ID (X-Request-ID) to each request and response
    - Logs request start and completion with status code and timing
    - Includes the authenticated key_id and principal, never the key itself
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and add logging.

        Args:
            request: The incoming request
            call_next: The next middleware/handler in the chain

        Returns:
            The response from the handler
        """
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        context = _request_context(request)

        logger.info(
            "Request started",
            extra={"correlation_id": correlation_id, "context": context},
        )
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "Request failed with exception",
                exc_info=exc,
                extra={
                    "correlation_id": correlation_id,
                    "context": {**context, "response_time_ms": round(elapsed_ms, 2)},
                },
            )
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Request completed",
            extra={
                "correlation_id": correlation_id,
                "context": {
                    **context,
                    "status_code": response.status_code,
                    "response_time_ms": round(elapsed_ms, 2),
                    "api_key_id": getattr(request.state, "api_key_id", None),
                    "principal": getattr(request.state, "principal", None),
                },
            },
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
