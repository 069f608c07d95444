"""Account registration and password login."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from trayex.core.security import hash_password, verify_password
from trayex.models import StudentProfile, User, UserRole
from trayex.schemas.user import MIN_PASSWORD_LENGTH, ProfileFields, RegisterRequest


class AccountError(ValueError):
    """Base exception for account failures."""


class AccountExists(AccountError):
    """Raised when the email or phone is already registered."""


class WeakPassword(AccountError):
    """Raised when the password does not meet the minimum length."""


class InvalidCredentials(AccountError):
    """Raised for an unknown login or a wrong password."""


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def register_user(db: Session, payload: RegisterRequest) -> User:
    """Create a student account together with its profile."""
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise WeakPassword(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = _clean(payload.email)
    phone = _clean(payload.phone)
    if email is not None:
        email = email.lower()

    conditions = []
    if email is not None:
        conditions.append(User.email == email)
    if phone is not None:
        conditions.append(User.phone == phone)
    existing = db.execute(select(User.id).where(or_(*conditions))).first()
    if existing is not None:
        raise AccountExists("Email or phone already registered")

    user = User(
        email=email,
        phone=phone,
        role=UserRole.STUDENT.value,
        password_hash=hash_password(payload.password),
    )
    user.student = StudentProfile()
    apply_profile(user.student, payload, overwrite=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the account matching ``email`` and ``password``."""
    user = db.execute(select(User).where(User.email == email.strip().lower())).scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials("Invalid credentials")
    return user


def apply_profile(profile: StudentProfile, fields: ProfileFields, *, overwrite: bool = False) -> None:
    """Copy profile fields onto ``profile``.

    Without ``overwrite`` only the fields present in the request are changed.
    """
    data = fields.model_dump(include=set(ProfileFields.model_fields), exclude_unset=not overwrite)
    for name, value in data.items():
        if isinstance(value, str):
            value = value.strip() or None
        setattr(profile, name, value)
