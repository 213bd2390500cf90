"""FastAPI Dependencies

Centralized dependency injection for reuse across all route modules.
Provides type-safe, testable access to shared resources.
"""

from fastapi import HTTPException, Request, status

from server.auth import AdminSession, AdminTokenSigner
from store.db import VotingStore


def get_store(request: Request) -> VotingStore:
    """Dependency to get the shared store from app state

    Usage in routes:
        @router.get("/endpoint")
        async def endpoint(store: VotingStore = Depends(get_store)):
            return await store.tally.get_results()
    """
    return request.app.state.store


def get_token_signer(request: Request) -> AdminTokenSigner:
    return request.app.state.token_signer


async def require_admin(request: Request) -> AdminSession:
    """
    FastAPI dependency that verifies the admin bearer token.

    Accepts "Authorization: Bearer <token>" (a bare token is tolerated).

    Returns:
        AdminSession for this request

    Raises:
        HTTPException 401 if the header is missing or the token invalid/expired
    """
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="No authorization token provided"
        )

    token = auth_header[7:] if auth_header.startswith("Bearer ") else auth_header

    session = get_token_signer(request).verify(token.strip())
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return session
