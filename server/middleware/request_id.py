"""
Request ID middleware

Every request gets a correlation id, taken from X-Request-ID when the
caller (or a proxy) sends a sane one, otherwise generated. It is bound
into structlog contextvars so all log lines of the request carry it, and
echoed back on the response.
"""

import re
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

HEADER = "X-Request-ID"
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(HEADER, "")
        request_id = incoming if _ACCEPTED_ID.match(incoming) else uuid.uuid4().hex

        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
            response.headers[HEADER] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()
