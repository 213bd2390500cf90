"""
Admin API routes

Everything except /login requires a bearer token issued by /login.
"""

from fastapi import APIRouter, Depends, HTTPException

from config import config, get_logger
from exceptions import ContestantNotFound, StoreError, ValidationError
from server.auth import AdminSession, AdminTokenSigner, check_admin_password
from server.dependencies import get_store, get_token_signer, require_admin
from server.metrics import metrics
from server.models.requests import ContestantRequest, LoginRequest
from server.utils.responses import success_response
from store.db import VotingStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin")


def _store_failure(e: StoreError, action: str) -> HTTPException:
    metrics.record_store_error(e)
    logger.exception(f"failed to {action}")
    return HTTPException(status_code=500, detail=f"Error {action}")


@router.post("/login")
async def login(body: LoginRequest, signer: AdminTokenSigner = Depends(get_token_signer)):
    """Exchange the shared admin password for a signed, expiring token"""
    if not config.ADMIN_PASSWORD:
        raise HTTPException(status_code=500, detail="Admin authentication not configured")

    if not check_admin_password(body.password, config.ADMIN_PASSWORD):
        logger.warning("failed admin login")
        raise HTTPException(status_code=401, detail="Invalid password")

    logger.info("admin logged in")
    return success_response({"token": signer.issue(), "message": "Login successful"})


@router.get("/overview")
async def get_overview(
    store: VotingStore = Depends(get_store),
    session: AdminSession = Depends(require_admin),
):
    """Total votes, total contestants, active contestants"""
    try:
        overview = await store.tally.get_overview()
    except StoreError as e:
        raise _store_failure(e, "loading overview")

    return success_response(overview)


@router.get("/contestants")
async def list_all_contestants(
    store: VotingStore = Depends(get_store),
    session: AdminSession = Depends(require_admin),
):
    """All contestants including deactivated ones"""
    try:
        contestants = await store.contestants.get_contestants(include_inactive=True)
    except StoreError as e:
        raise _store_failure(e, "loading contestants")

    return success_response({"contestants": [c.to_dict() for c in contestants]})


@router.post("/contestants")
async def add_contestant(
    body: ContestantRequest,
    store: VotingStore = Depends(get_store),
    session: AdminSession = Depends(require_admin),
):
    """Create a contestant with the next sequential id (imageUrl is a filename string)"""
    try:
        contestant = await store.contestants.add_contestant(
            name=body.name,
            description=body.description,
            active=body.active,
            image_url=body.image_url,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except StoreError as e:
        raise _store_failure(e, "adding contestant")

    return success_response({
        "message": "Contestant added successfully",
        "contestant": contestant.to_dict(),
    })


@router.put("/contestants/{contestant_id}")
async def update_contestant(
    contestant_id: int,
    body: ContestantRequest,
    store: VotingStore = Depends(get_store),
    session: AdminSession = Depends(require_admin),
):
    """Overwrite name, description, active flag and image of a contestant"""
    try:
        contestant = await store.contestants.update_contestant(
            contestant_id,
            name=body.name,
            description=body.description,
            active=body.active,
            image_url=body.image_url,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ContestantNotFound:
        raise HTTPException(status_code=404, detail="Contestant not found")
    except StoreError as e:
        raise _store_failure(e, "updating contestant")

    return success_response({
        "message": "Contestant updated successfully",
        "contestant": contestant.to_dict(),
    })


@router.delete("/contestants/{contestant_id}")
async def delete_contestant(
    contestant_id: int,
    store: VotingStore = Depends(get_store),
    session: AdminSession = Depends(require_admin),
):
    """Soft delete: the contestant is hidden from public listings, its votes remain"""
    try:
        await store.contestants.deactivate_contestant(contestant_id)
    except ContestantNotFound:
        raise HTTPException(status_code=404, detail="Contestant not found")
    except StoreError as e:
        raise _store_failure(e, "deleting contestant")

    return success_response({"message": "Contestant deleted successfully"})


@router.get("/voters")
async def list_voters(
    store: VotingStore = Depends(get_store),
    session: AdminSession = Depends(require_admin),
):
    """Every vote with the contestant's name resolved"""
    try:
        voters = await store.tally.get_voters_with_names()
    except StoreError as e:
        raise _store_failure(e, "loading voters")

    return success_response({"voters": voters, "total": len(voters)})
