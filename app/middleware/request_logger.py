"""Request logging middleware: one INFO line per request, plus a warning for slow ones."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from app.core.config import get_settings

logger = logging.getLogger(__name__)


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Log method, url, status, duration, client ip and user agent once the response is ready."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000)

    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    logger.info(
        "Request",
        extra={
            "method": request.method,
            "url": url,
            "status": response.status_code,
            "duration_ms": duration_ms,
            "ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
        },
    )
    if duration_ms > get_settings().SLOW_REQUEST_MS:
        logger.warning(
            "Slow request detected",
            extra={"method": request.method, "url": url, "duration_ms": duration_ms},
        )
    return response
