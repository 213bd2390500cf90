"""
Prometheus metrics middleware for API requests

Instruments all API requests with:
- Request count (by endpoint, method, status_code)
- Request duration (by endpoint, method)
"""

import time

from fastapi import Request

from server.metrics import metrics


async def metrics_middleware(request: Request, call_next):
    """Record Prometheus metrics for all API requests"""
    start_time = time.time()

    endpoint = normalize_endpoint(request.url.path)
    method = request.method

    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    except Exception:
        status_code = 500
        raise
    finally:
        duration = time.time() - start_time
        metrics.api_requests.labels(
            endpoint=endpoint,
            method=method,
            status_code=status_code
        ).inc()
        metrics.api_request_duration.labels(
            endpoint=endpoint,
            method=method
        ).observe(duration)


def normalize_endpoint(path: str) -> str:
    """Collapse numeric path segments to :id for metrics cardinality control

    /api/admin/contestants/12 -> /api/admin/contestants/:id
    """
    parts = [p for p in path.split('/') if p]
    return '/' + '/'.join(':id' if p.isdigit() else p for p in parts)
