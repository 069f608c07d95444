"""Long-lived session tokens issued at login.

Session tokens are signed with one fixed secret. There is no rotation and no
key id: a compromised or expired session is replaced by logging in again.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from jose import JWTError, jwt

from trayex.core.settings import settings
from trayex.db.time import utcnow
from trayex.services.keyring import MissingSigningSecret

DEFAULT_SESSION_TTL = timedelta(days=7)


class InvalidSessionToken(ValueError):
    """Raised when a session token is invalid; the caller must log in again."""


@dataclass(frozen=True)
class SessionClaims:
    """Identity established by a verified session token."""

    subject_id: str
    role: str
    issued_at: datetime | None = None
    expires_at: datetime | None = None


class SessionTokenService:
    """Issue and verify HS256 session tokens."""

    def __init__(
        self,
        secret: str | None,
        *,
        algorithm: str = "HS256",
        default_ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if not secret:
            raise MissingSigningSecret("JWT_SECRET must be configured to issue session tokens")
        self._secret = secret
        self.algorithm = algorithm
        self.default_ttl = default_ttl
        self._clock = clock

    def issue(self, subject_id: str, role: str, ttl: timedelta | None = None) -> str:
        """Return a session token for ``subject_id`` acting as ``role``."""
        issued_at = int(self._clock().timestamp())
        lifetime = ttl if ttl is not None else self.default_ttl
        token: str = jwt.encode(
            {
                "sub": str(subject_id),
                "role": role,
                "iat": issued_at,
                "exp": issued_at + int(lifetime.total_seconds()),
            },
            self._secret,
            algorithm=self.algorithm,
        )
        return token

    def verify(self, token: str) -> SessionClaims:
        """Return the identity carried by ``token``.

        Raises:
            InvalidSessionToken: On a bad signature, expiry, or a missing or
                mistyped ``sub``/``role`` claim.
        """
        if not isinstance(token, str) or not token:
            raise InvalidSessionToken("Missing session token")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as err:
            raise InvalidSessionToken("Invalid session token") from err

        subject = payload.get("sub")
        role = payload.get("role")
        if not isinstance(subject, str) or not subject:
            raise InvalidSessionToken("Session token has no subject")
        if not isinstance(role, str) or not role:
            raise InvalidSessionToken("Session token has no role")

        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(expires_at, int):
            raise InvalidSessionToken("Session token has no expiry")
        if expires_at < int(self._clock().timestamp()):
            raise InvalidSessionToken("Session token expired")
        return SessionClaims(
            subject_id=subject,
            role=role,
            issued_at=datetime.fromtimestamp(issued_at, UTC) if isinstance(issued_at, int) else None,
            expires_at=datetime.fromtimestamp(expires_at, UTC),
        )


@lru_cache(maxsize=1)
def get_session_token_service() -> SessionTokenService:
    """Return the process-wide session token service."""
    return SessionTokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        default_ttl=timedelta(seconds=settings.session_token_ttl_seconds),
    )
