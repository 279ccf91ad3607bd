"""Security utilities: staff credential checks and session tokens."""

import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from .config import Settings

logger = logging.getLogger(__name__)


def verify_staff_password(
    accounts: dict[str, str],
    username: str | None,
    password: str | None,
) -> bool:
    """Check a username/password pair against the configured staff accounts."""
    if not username or password is None:
        return False
    expected = accounts.get(username)
    if expected is None:
        return False
    return hmac.compare_digest(expected.encode(), password.encode())


# JWT session handling
class SessionPayload(BaseModel):
    """JWT session payload."""

    sub: str  # Staff username
    jti: str  # Session id, must be live in the SessionStore
    exp: datetime
    iat: datetime


class SessionStore:
    """Live staff sessions, keyed by token id.

    Held in process memory only; a restart logs everybody out.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        # jti -> expiry
        self._sessions: dict[str, datetime] = {}

    def create(self, username: str, now: datetime | None = None) -> str:
        """Open a session for ``username`` and return its signed token."""
        now = now or datetime.now(timezone.utc)
        self._prune(now)

        jti = secrets.token_hex(24)
        expires_at = now + timedelta(hours=self._settings.session_expire_hours)
        self._sessions[jti] = expires_at

        payload = {
            "sub": username,
            "jti": jti,
            "iat": now,
            "exp": expires_at,
        }
        return jwt.encode(payload, self._settings.secret_key, algorithm="HS256")

    def resolve(self, token: str | None) -> SessionPayload | None:
        """Decode a token and return its payload if the session is still live."""
        if not token:
            return None
        try:
            payload = SessionPayload(
                **jwt.decode(token, self._settings.secret_key, algorithms=["HS256"])
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None

        if payload.jti not in self._sessions:
            return None
        return payload

    def destroy(self, token: str | None) -> None:
        """Forget the session behind ``token``. Unknown tokens are ignored."""
        payload = self.resolve(token)
        if payload:
            self._sessions.pop(payload.jti, None)
            logger.info(f"[AUTH] Session closed for {payload.sub}")

    def _prune(self, now: datetime) -> None:
        """Drop sessions whose token has expired."""
        expired = [jti for jti, expires_at in self._sessions.items() if expires_at <= now]
        for jti in expired:
            del self._sessions[jti]

    def __len__(self) -> int:
        return len(self._sessions)
