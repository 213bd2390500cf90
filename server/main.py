"""
Voting API Server

Modular FastAPI application: routes, dependencies, middleware and the
spreadsheet store are organized into focused modules.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import config, get_logger
from server.auth import AdminTokenSigner
from server.middleware.logging import log_requests
from server.middleware.metrics import metrics_middleware
from server.middleware.rate_limiting import rate_limit_middleware
from server.middleware.request_id import RequestIDMiddleware
from server.rate_limiter import InMemoryRateLimiter
from server.routes import admin, contestants, monitoring, vote
from server.utils.responses import error_response
from store.db import VotingStore

logger = get_logger(__name__)


def create_app(store: Optional[VotingStore] = None) -> FastAPI:
    """Build the application

    Args:
        store: Pre-built store (tests); None creates one from configuration at startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = store is None
        app.state.store = store if store is not None else await VotingStore.create()
        logger.info("voting store ready", owns_store=owns_store)

        yield

        if owns_store:
            try:
                app.state.store.close()
            except Exception as e:
                # Don't crash on shutdown - log and continue
                logger.error("error closing store", error=str(e), exc_info=True)

    app = FastAPI(title="voting API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware (must be early in stack for tracing)
    app.add_middleware(RequestIDMiddleware)

    app.state.token_signer = AdminTokenSigner.from_config(config)
    rate_limiter = InMemoryRateLimiter(
        requests_limit=config.RATE_LIMIT_REQUESTS,
        window_seconds=config.RATE_LIMIT_WINDOW,
    )
    app.state.rate_limiter = rate_limiter

    # Execution order: metrics -> rate limiting -> logging
    # (last registered runs first)
    @app.middleware("http")
    async def log_requests_middleware(request, call_next):
        return await log_requests(request, call_next)

    @app.middleware("http")
    async def rate_limit_middleware_wrapper(request, call_next):
        return await rate_limit_middleware(request, call_next, rate_limiter)

    @app.middleware("http")
    async def metrics_middleware_wrapper(request, call_next):
        return await metrics_middleware(request, call_next)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=error_response("Invalid request body"))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error", path=request.url.path)
        return JSONResponse(status_code=500, content=error_response("Internal server error"))

    app.include_router(monitoring.router)   # Root, health and metrics
    app.include_router(contestants.router)  # Public contestant listing
    app.include_router(vote.router)         # Vote submission and results
    app.include_router(admin.router)        # Admin panel API

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    if not config.ADMIN_PASSWORD:
        logger.warning("WARNING: No admin password configured. Admin login will not work.")
        logger.warning("Set VOTING_ADMIN_PASSWORD to enable the admin panel.")

    logger.info("Starting voting API server...")
    logger.info("configuration", config_summary=config.summary())

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        access_log=False,  # Custom middleware logs each request
    )
