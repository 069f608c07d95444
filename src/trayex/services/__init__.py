# src/trayex/services/__init__.py
"""Business logic services for the Trayex application."""

from .capacity import CapacityExceeded, ReservationCapacityGuard
from .keyring import KeyIndexOutOfRange, KeyRing, MissingSigningSecret
from .pass_store import PassStore
from .pass_tokens import InvalidPassToken, PassClaims, PassTokenService, PassVerification
from .session_tokens import InvalidSessionToken, SessionClaims, SessionTokenService

__all__ = [
    "CapacityExceeded",
    "InvalidPassToken",
    "InvalidSessionToken",
    "KeyIndexOutOfRange",
    "KeyRing",
    "MissingSigningSecret",
    "PassClaims",
    "PassStore",
    "PassTokenService",
    "PassVerification",
    "ReservationCapacityGuard",
    "SessionClaims",
    "SessionTokenService",
]
