"""Vote submission and public results"""

from fastapi import APIRouter, Depends, HTTPException, Request

from config import get_logger
from exceptions import DuplicateVote, InvalidContestant, StoreError, ValidationError
from server.dependencies import get_store
from server.metrics import metrics
from server.models.requests import VoteRequest
from server.utils.client_ip import get_client_ip
from server.utils.responses import success_response
from store.db import VotingStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api")

DUPLICATE_MESSAGE = "You have already voted. Each email and mobile number can only vote once."
INVALID_CONTESTANT_MESSAGE = "Invalid candidate selected"
SUBMIT_FAILED_MESSAGE = "An error occurred while submitting your vote. Please try again."


@router.post("/vote")
async def submit_vote(
    payload: VoteRequest,
    request: Request,
    store: VotingStore = Depends(get_store),
):
    """Validate and record one vote

    Validation runs before any store access. Duplicate and unknown-contestant
    rejections get actionable messages; store failures get a generic one.
    """
    try:
        submission = store.validator.validate(payload.to_submission())
    except ValidationError as e:
        metrics.votes_submitted.labels(outcome="invalid").inc()
        raise HTTPException(status_code=400, detail=e.message)

    ip_address = getattr(request.state, "client_ip", None) or get_client_ip(request)

    try:
        await store.votes.submit_vote(submission, ip_address=ip_address)
    except DuplicateVote:
        metrics.votes_submitted.labels(outcome="duplicate").inc()
        raise HTTPException(status_code=400, detail=DUPLICATE_MESSAGE)
    except InvalidContestant:
        metrics.votes_submitted.labels(outcome="invalid_contestant").inc()
        raise HTTPException(status_code=400, detail=INVALID_CONTESTANT_MESSAGE)
    except StoreError as e:
        metrics.votes_submitted.labels(outcome="error").inc()
        metrics.record_store_error(e)
        logger.exception("vote submission failed", contestant_id=submission.contestant_id)
        raise HTTPException(status_code=500, detail=SUBMIT_FAILED_MESSAGE)

    metrics.votes_submitted.labels(outcome="accepted").inc()
    return success_response({"message": "Vote submitted successfully"})


@router.get("/results")
async def get_results(store: VotingStore = Depends(get_store)):
    """Vote counts per active contestant, in roster order (unsorted)"""
    try:
        results = await store.tally.get_results()
    except StoreError as e:
        metrics.record_store_error(e)
        logger.exception("failed to compute results")
        raise HTTPException(status_code=500, detail="Error loading results")

    return success_response(results.to_dict())
