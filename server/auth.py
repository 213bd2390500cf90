"""
Admin session tokens

Login with the shared admin password yields a signed, expiring JWT. The
signer lives in app state and each request gets its own AdminSession, so
no token is held in module-level state.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from config import get_logger

logger = get_logger(__name__).bind(component="auth")

_ALGORITHM = "HS256"
_TOKEN_TYPE = "admin"


@dataclass(frozen=True)
class AdminSession:
    """Verified admin capability for the duration of one request"""

    subject: str
    issued_at: datetime
    expires_at: datetime


class AdminTokenSigner:
    """Issues and verifies admin bearer tokens"""

    def __init__(self, secret: str, expiry: timedelta = timedelta(hours=8)):
        if not secret or not secret.strip():
            raise ValueError("Admin token secret cannot be empty")
        self._secret = secret
        self.expiry = expiry

    @classmethod
    def from_config(cls, cfg) -> "AdminTokenSigner":
        """Use the configured secret, or a per-process random one (tokens die on restart)"""
        secret = cfg.ADMIN_TOKEN_SECRET
        if not secret:
            logger.warning("VOTING_ADMIN_TOKEN_SECRET not set, admin tokens will not survive restarts")
            secret = secrets.token_urlsafe(32)
        return cls(secret, expiry=timedelta(hours=cfg.ADMIN_TOKEN_HOURS))

    def issue(self, subject: str = "admin") -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "type": _TOKEN_TYPE,
            "iat": now,
            "exp": now + self.expiry,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> Optional[AdminSession]:
        """Return the session for a valid token, or None if invalid/expired"""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except JWTError:
            return None

        if payload.get("type") != _TOKEN_TYPE:
            return None

        return AdminSession(
            subject=payload.get("sub", "admin"),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


def check_admin_password(candidate: str, configured: str) -> bool:
    """Constant-time password comparison; never matches when none is configured"""
    if not configured or candidate is None:
        return False
    return secrets.compare_digest(candidate.encode(), configured.encode())
