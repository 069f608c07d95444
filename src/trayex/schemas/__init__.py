# src/trayex/schemas/__init__.py
"""Pydantic schemas for request and response payloads."""

from .passes import (
    PassIdResponse,
    PassIdValidateRequest,
    PassIdValidateResponse,
    PassResponse,
    ValidateFailure,
    ValidateRequest,
    ValidateResponse,
)
from .reservation import (
    ReservationCreateRequest,
    ReservationResponse,
    StopResponse,
    TicketResponse,
    TimeslotResponse,
    ZoneResponse,
)
from .user import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    ProfileEnvelope,
    ProfileFields,
    ProfileResponse,
    RefreshResponse,
    RegisterRequest,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "MeResponse",
    "PassIdResponse",
    "PassIdValidateRequest",
    "PassIdValidateResponse",
    "PassResponse",
    "ProfileEnvelope",
    "ProfileFields",
    "ProfileResponse",
    "RefreshResponse",
    "RegisterRequest",
    "ReservationCreateRequest",
    "ReservationResponse",
    "StopResponse",
    "TicketResponse",
    "TimeslotResponse",
    "UserResponse",
    "ValidateFailure",
    "ValidateRequest",
    "ValidateResponse",
    "ZoneResponse",
]
