"""
Monitoring and health check API routes
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST

from config import config
from server.metrics import get_metrics_text

router = APIRouter()


@router.get("/")
async def root():
    """API status and info"""
    return {
        "service": "voting API",
        "status": "running",
        "endpoints": {
            "contestants": "GET /api/contestants - Active contestants",
            "vote": "POST /api/vote - Submit one vote",
            "results": "GET /api/results - Live vote tallies",
            "health": "GET /api/health - Health check",
            "metrics": "GET /metrics - Prometheus metrics",
            "admin": {
                "login": "POST /api/admin/login - Exchange admin password for a bearer token",
                "overview": "GET /api/admin/overview - Vote and contestant counts",
                "contestants": "GET|POST /api/admin/contestants, PUT|DELETE /api/admin/contestants/{id}",
                "voters": "GET /api/admin/voters - Voter roster with contestant names",
            },
        },
        "rate_limiting": f"{config.RATE_LIMIT_REQUESTS} requests per {config.RATE_LIMIT_WINDOW} seconds per IP",
    }


@router.get("/api/health")
async def health():
    """Liveness check; does not touch the spreadsheet"""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "Voting service is running",
    }


@router.get("/metrics")
async def prometheus_metrics():
    return Response(content=get_metrics_text(), media_type=CONTENT_TYPE_LATEST)
