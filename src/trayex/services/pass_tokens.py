"""Short-lived rotating boarding-pass tokens.

Tokens are compact HS256 JWTs signed with the current key of a :class:`KeyRing`
and tagged with a ``kid`` header naming the ring slot. Verification tries the
tagged slot first and falls back to scanning every slot, so tokens minted
before a key rotation keep verifying for the rest of their lifetime.

Every rejection (expired, tampered, unknown key, malformed) surfaces as the
same :class:`InvalidPassToken`; the internal reason is only logged.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import jwt
from jose.exceptions import JWTClaimsError, JWTError

from trayex.core.settings import settings
from trayex.db.time import utcnow
from trayex.services.keyring import KeyRing, key_id_for

logger = logging.getLogger(__name__)

PURPOSE_BOARDING = "BOARDING"
PURPOSE_RESERVATION = "RESERVATION"

DEFAULT_PASS_TTL = timedelta(minutes=15)

# Claims owned by the service; caller-supplied extras never override them.
_RESERVED_CLAIMS = frozenset({"sub", "purpose", "iat", "exp", "jti", "role"})

# Internal rejection reasons (logged, never returned to callers)
REASON_MALFORMED = "malformed"
REASON_BAD_SIGNATURE = "bad_signature"
REASON_EXPIRED = "expired"
REASON_BAD_CLAIMS = "bad_claims"


class InvalidPassToken(ValueError):
    """Raised when a pass token cannot be verified under any known key."""


@dataclass(frozen=True)
class PassClaims:
    """Verified contents of a boarding-pass token."""

    subject_id: str
    purpose: str
    issued_at: datetime
    expires_at: datetime
    key_id: str
    jti: str | None = None
    role: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Return the claims in their wire form (suitable for JSON responses)."""
        decoded: dict[str, Any] = dict(self.extra)
        decoded.update(
            {
                "sub": self.subject_id,
                "purpose": self.purpose,
                "iat": int(self.issued_at.timestamp()),
                "exp": int(self.expires_at.timestamp()),
                "kid": self.key_id,
            }
        )
        if self.jti is not None:
            decoded["jti"] = self.jti
        if self.role is not None:
            decoded["role"] = self.role
        return decoded


@dataclass(frozen=True)
class PassVerification:
    """Outcome of a verification attempt: claims on success, a reason otherwise."""

    claims: PassClaims | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.claims is not None

    @classmethod
    def accepted(cls, claims: PassClaims) -> PassVerification:
        return cls(claims=claims)

    @classmethod
    def rejected(cls, reason: str) -> PassVerification:
        return cls(reason=reason)


class PassTokenService:
    """Mint and verify boarding-pass tokens against a key ring."""

    def __init__(
        self,
        key_ring: KeyRing,
        *,
        default_ttl: timedelta = DEFAULT_PASS_TTL,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utcnow,
        use_key_hint: bool = True,
    ) -> None:
        """Initialize the service.

        Args:
            key_ring: Signing secrets, newest first.
            default_ttl: Lifetime applied when ``mint`` is called without ``ttl``.
            algorithm: JWS algorithm used for signing and accepted on verification.
            clock: Source of the current time for issuance and expiry checks.
            use_key_hint: Try the slot named by the ``kid`` header before scanning.
        """
        self.key_ring = key_ring
        self.default_ttl = default_ttl
        self.algorithm = algorithm
        self._clock = clock
        self._use_key_hint = use_key_hint

    def mint(
        self,
        subject_id: str,
        purpose: str = PURPOSE_BOARDING,
        ttl: timedelta | None = None,
        *,
        role: str | None = None,
        claims: Mapping[str, Any] | None = None,
    ) -> str:
        """Return a new token for ``subject_id`` signed with the current key."""
        if not subject_id:
            raise ValueError("subject_id is required")
        if not purpose:
            raise ValueError("purpose is required")
        lifetime = ttl if ttl is not None else self.default_ttl
        if lifetime <= timedelta(0):
            raise ValueError("ttl must be positive")

        issued_at = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            key: value for key, value in (claims or {}).items() if key not in _RESERVED_CLAIMS
        }
        payload.update(
            {
                "sub": str(subject_id),
                "purpose": purpose,
                "iat": issued_at,
                "exp": issued_at + int(lifetime.total_seconds()),
                "jti": secrets.token_urlsafe(8),
            }
        )
        if role:
            payload["role"] = role

        token: str = jwt.encode(
            payload,
            self.key_ring.current(),
            algorithm=self.algorithm,
            headers={"kid": key_id_for(0)},
        )
        return token

    def check(self, token: object) -> PassVerification:
        """Verify ``token`` and return a tagged result instead of raising."""
        if not isinstance(token, str) or not token.strip():
            return self._reject(REASON_MALFORMED)

        hinted = self._hinted_index(token) if self._use_key_hint else None
        reason = REASON_BAD_SIGNATURE

        if hinted is not None:
            outcome = self._attempt(token, hinted)
            if outcome.ok:
                return outcome
            reason = _prefer(reason, outcome.reason)
            logger.debug("Pass key hint %s did not verify (%s); scanning ring", hinted, reason)

        for index in range(len(self.key_ring)):
            if index == hinted:
                continue
            outcome = self._attempt(token, index)
            if outcome.ok:
                return outcome
            reason = _prefer(reason, outcome.reason)

        return self._reject(reason)

    def verify(self, token: object) -> PassClaims:
        """Return the claims of ``token``.

        Raises:
            InvalidPassToken: If the token is expired, tampered with, malformed or
                signed by a key no longer in the ring.
        """
        outcome = self.check(token)
        if outcome.claims is None:
            raise InvalidPassToken("Invalid pass token")
        return outcome.claims

    def _hinted_index(self, token: str) -> int | None:
        """Return the ring slot declared by the token header, if usable."""
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            return None
        index = self.key_ring.label_to_index(header.get("kid"))
        if index is None or not self.key_ring.contains_index(index):
            return None
        return index

    def _attempt(self, token: str, index: int) -> PassVerification:
        try:
            payload = jwt.decode(
                token,
                self.key_ring.secret_at(index),
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError:
            return PassVerification.rejected(REASON_BAD_CLAIMS)
        except JWTError:
            return PassVerification.rejected(REASON_BAD_SIGNATURE)

        claims = _claims_from_payload(payload, key_id_for(index))
        if claims is None:
            return PassVerification.rejected(REASON_BAD_CLAIMS)
        # Expired once the clock passes exp; still valid at exactly exp.
        if payload["exp"] < int(self._clock().timestamp()):
            return PassVerification.rejected(REASON_EXPIRED)
        return PassVerification.accepted(claims)

    @staticmethod
    def _reject(reason: str) -> PassVerification:
        logger.info("Rejected pass token: %s", reason)
        return PassVerification.rejected(reason)


def _prefer(current: str, candidate: str | None) -> str:
    """Keep the most informative rejection reason for logging."""
    if candidate is None or candidate == REASON_BAD_SIGNATURE:
        return current
    return candidate


def _claims_from_payload(payload: Mapping[str, Any], key_id: str) -> PassClaims | None:
    subject = payload.get("sub")
    purpose = payload.get("purpose")
    issued_at = payload.get("iat")
    expires_at = payload.get("exp")
    if not isinstance(subject, str) or not subject:
        return None
    if not isinstance(purpose, str) or not purpose:
        return None
    if not isinstance(issued_at, int) or not isinstance(expires_at, int):
        return None
    role = payload.get("role")
    jti = payload.get("jti")
    return PassClaims(
        subject_id=subject,
        purpose=purpose,
        issued_at=datetime.fromtimestamp(issued_at, UTC),
        expires_at=datetime.fromtimestamp(expires_at, UTC),
        key_id=key_id,
        jti=jti if isinstance(jti, str) else None,
        role=role if isinstance(role, str) else None,
        extra={k: v for k, v in payload.items() if k not in _RESERVED_CLAIMS},
    )


@lru_cache(maxsize=1)
def get_key_ring() -> KeyRing:
    """Return the process-wide key ring built from settings."""
    return KeyRing.from_config(
        settings.qr_signing_keys,
        allow_insecure_default=settings.allow_insecure_defaults,
    )


@lru_cache(maxsize=1)
def get_pass_token_service() -> PassTokenService:
    """Return the process-wide pass token service."""
    return PassTokenService(
        get_key_ring(),
        default_ttl=timedelta(seconds=settings.qr_token_ttl_seconds),
        algorithm=settings.jwt_algorithm,
    )
