"""FastAPI middleware for request correlation.

Assigns every request an ID (or reuses the caller's X-Request-ID), logs
start and completion, and echoes the ID back in the response headers.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import get_logger
from .request_id import generate_request_id, set_governed_route, set_request_id

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to generate and inject request IDs."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        set_governed_route(None)

        start_time = time.perf_counter()
        logger.info(f"{request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {str(e)}",
                extra={"duration_ms": round(duration_ms, 2)},
                exc_info=True
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Request completed: {response.status_code}",
            extra={"duration_ms": round(duration_ms, 2)}
        )

        response.headers["X-Request-ID"] = request_id
        return response
