"""
Request/response logging middleware

One structured line per request. The request_id bound by
RequestIDMiddleware is merged in by structlog.
"""

import time

from fastapi import Request

from config import get_logger

logger = get_logger(__name__).bind(component="http")

QUIET_PATHS = {"/metrics", "/api/health"}


async def log_requests(request: Request, call_next):
    """Log method, path, hashed client, status and duration"""
    if request.url.path in QUIET_PATHS:
        return await call_next(request)

    started = time.perf_counter()
    client = getattr(request.state, "client_ip_hash", "unknown")[:7]

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "request failed",
            method=request.method,
            path=request.url.path,
            client=client,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
            error=str(e),
        )
        raise

    log = logger.warning if response.status_code >= 500 else logger.info
    log(
        "request",
        method=request.method,
        path=request.url.path,
        client=client,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return response
