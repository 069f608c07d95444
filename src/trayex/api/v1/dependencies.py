"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from trayex.db.session import get_db
from trayex.models import User
from trayex.services.capacity import ReservationCapacityGuard
from trayex.services.pass_store import PassStore
from trayex.services.pass_tokens import PassTokenService, get_pass_token_service
from trayex.services.session_tokens import (
    InvalidSessionToken,
    SessionClaims,
    SessionTokenService,
    get_session_token_service,
)

# Missing credentials are reported as 401 by get_session_claims, not 403 by the scheme.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_tokens() -> SessionTokenService:
    return get_session_token_service()


def get_pass_tokens() -> PassTokenService:
    return get_pass_token_service()


def get_pass_store(db: SessionDep) -> PassStore:
    return PassStore(db)


def get_capacity_guard() -> ReservationCapacityGuard:
    return ReservationCapacityGuard()


SessionTokensDep = Annotated[SessionTokenService, Depends(get_session_tokens)]
PassTokensDep = Annotated[PassTokenService, Depends(get_pass_tokens)]
PassStoreDep = Annotated[PassStore, Depends(get_pass_store)]
CapacityGuardDep = Annotated[ReservationCapacityGuard, Depends(get_capacity_guard)]


def get_session_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session_tokens: SessionTokensDep,
) -> SessionClaims:
    """Resolve the bearer session token to the caller's identity.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return session_tokens.verify(credentials.credentials)
    except InvalidSessionToken as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


# Type alias for authenticated identity dependency
ClaimsDep = Annotated[SessionClaims, Depends(get_session_claims)]


def get_current_user(claims: ClaimsDep, db: SessionDep) -> User:
    """Load the account behind the session token.

    Raises:
        HTTPException: 401 if the account no longer exists
    """
    user = db.get(User, claims.subject_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
