# src/trayex/api/v1/endpoints/auth.py
"""Authentication and profile endpoints for the Trayex API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from trayex.api.v1.dependencies import (
    ClaimsDep,
    CurrentUserDep,
    SessionDep,
    SessionTokensDep,
)
from trayex.models import StudentProfile
from trayex.schemas.user import (
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
from trayex.services.accounts import (
    AccountError,
    InvalidCredentials,
    apply_profile,
    authenticate,
    register_user,
)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    summary="Register a student account",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
async def register(
    payload: RegisterRequest,
    db: SessionDep,
    session_tokens: SessionTokensDep,
) -> AuthResponse:
    """Create an account and return a session token for it."""
    try:
        user = register_user(db, payload)
    except AccountError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err

    token = session_tokens.issue(user.id, user.role)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/login",
    summary="Authenticate with email and password",
    response_model=AuthResponse,
)
async def login(
    payload: LoginRequest,
    db: SessionDep,
    session_tokens: SessionTokensDep,
) -> AuthResponse:
    """Exchange credentials for a session token."""
    try:
        user = authenticate(db, payload.email, payload.password)
    except InvalidCredentials as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        ) from err

    token = session_tokens.issue(user.id, user.role)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get("/me", response_model=MeResponse)
async def me(user: CurrentUserDep) -> MeResponse:
    """Return the authenticated account."""
    return MeResponse(user=UserResponse.model_validate(user))


@router.get("/me/profile", response_model=ProfileEnvelope)
async def get_profile(user: CurrentUserDep) -> ProfileEnvelope:
    """Return the authenticated account with its student profile."""
    profile = ProfileResponse.model_validate(user.student) if user.student else None
    return ProfileEnvelope(user=UserResponse.model_validate(user), profile=profile)


@router.put("/me/profile", response_model=ProfileEnvelope)
async def update_profile(
    payload: ProfileFields,
    user: CurrentUserDep,
    db: SessionDep,
) -> ProfileEnvelope:
    """Update the fields present in the request, creating the profile if needed."""
    if user.student is None:
        user.student = StudentProfile(user_id=user.id)
    apply_profile(user.student, payload)
    db.commit()
    db.refresh(user)
    return ProfileEnvelope(
        user=UserResponse.model_validate(user),
        profile=ProfileResponse.model_validate(user.student),
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(claims: ClaimsDep, session_tokens: SessionTokensDep) -> RefreshResponse:
    """Issue a new session token for the same identity."""
    return RefreshResponse(token=session_tokens.issue(claims.subject_id, claims.role))
