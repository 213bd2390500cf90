"""
Rate limiting middleware

Applies to /api/* only. Health and metrics endpoints and CORS preflight
requests are never limited. Clients are keyed by a hash of their IP.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from config import get_logger
from server.rate_limiter import InMemoryRateLimiter
from server.utils.client_ip import get_client_ip, hash_client_ip

logger = get_logger(__name__)

EXEMPT_PATHS = {"/health", "/metrics", "/api/health", "/api/metrics"}


async def rate_limit_middleware(
    request: Request, call_next, rate_limiter: InMemoryRateLimiter
):
    """Check rate limits for API endpoints"""
    client_ip = get_client_ip(request)
    client_ip_hash = hash_client_ip(client_ip)
    request.state.client_ip = client_ip
    request.state.client_ip_hash = client_ip_hash

    if request.method == "OPTIONS":
        return await call_next(request)

    if request.url.path in EXEMPT_PATHS or not request.url.path.startswith("/api/"):
        return await call_next(request)

    is_allowed, remaining, limit_info = rate_limiter.check_rate_limit(client_ip_hash)

    if not is_allowed:
        retry_after = str(limit_info["retry_after"])
        logger.warning(
            "rate limit exceeded",
            client=client_ip_hash,
            endpoint=f"{request.method} {request.url.path}",
        )
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "message": "Too many requests from this IP, please try again later.",
                "retry_after_seconds": int(retry_after),
            },
            headers={
                "X-RateLimit-Remaining": "0",
                "Retry-After": retry_after,
            },
        )

    response = await call_next(request)
    response.headers["X-RateLimit-Remaining"] = str(remaining)
    return response
