"""Public contestant listing"""

from fastapi import APIRouter, Depends, HTTPException

from config import get_logger
from exceptions import StoreError
from server.dependencies import get_store
from server.metrics import metrics
from server.utils.responses import success_response
from store.db import VotingStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api")


@router.get("/contestants")
async def list_contestants(store: VotingStore = Depends(get_store)):
    """Active contestants in roster order"""
    try:
        contestants = await store.contestants.get_contestants(include_inactive=False)
    except StoreError as e:
        metrics.record_store_error(e)
        logger.exception("failed to load contestants")
        raise HTTPException(status_code=500, detail="Error loading contestants")

    return success_response({"contestants": [c.to_dict() for c in contestants]})
