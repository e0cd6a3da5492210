"""Stateless signed session tokens."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from pydantic import ValidationError

from photoflow.domain.models import PublicUser

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session"
DEFAULT_SESSION_TTL = timedelta(days=1)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionManager:
    """Issues and verifies HS256 tokens embedding a public user snapshot.

    The embedded user is not refreshed when the stored record changes;
    callers re-issue a token after profile updates.
    """

    secret: str
    ttl: timedelta = DEFAULT_SESSION_TTL
    algorithm: str = "HS256"
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)

    def issue(self, user: PublicUser) -> str:
        """Return a signed token for the user with an absolute expiry."""
        issued_at = self.clock()
        claims = {
            "user": user.to_document(),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> PublicUser | None:
        """Return the embedded user, or None for missing, expired or forged tokens."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return PublicUser.model_validate(payload["user"])
        except (JWTError, KeyError, ValidationError):
            logger.info("Failed to verify session")
            return None
