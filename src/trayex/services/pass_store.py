"""Persisted, rotatable pass identifier stored on the student profile.

This is an alternate credential to the signed pass tokens: one opaque value
per user, valid until it is rotated. Rotation has no grace window.

Every write goes through a single SQL statement (insert-ignore or update) so
concurrent calls for the same user never read-then-write from Python.
"""

from __future__ import annotations

import secrets

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from trayex.models import StudentProfile

# 24 random bytes render as 32 URL-safe characters.
PASS_ID_BYTES = 24

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def generate_pass_identifier() -> str:
    """Return a fresh cryptographically random, URL-safe identifier."""
    return secrets.token_urlsafe(PASS_ID_BYTES)


class PassStore:
    """Get-or-create and rotate the per-user pass identifier."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_or_create(self, user_id: str) -> str:
        """Return the user's identifier, creating it on first use."""
        self._ensure_profile(user_id)
        self.db.execute(
            update(StudentProfile)
            .where(StudentProfile.user_id == user_id, StudentProfile.qr_token.is_(None))
            .values(qr_token=generate_pass_identifier())
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return self._current(user_id)

    def rotate(self, user_id: str) -> str:
        """Replace the user's identifier; the previous value stops matching immediately."""
        self._ensure_profile(user_id)
        new_value = generate_pass_identifier()
        self.db.execute(
            update(StudentProfile)
            .where(StudentProfile.user_id == user_id)
            .values(qr_token=new_value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return new_value

    def lookup(self, identifier: object) -> str | None:
        """Return the id of the user currently holding ``identifier``."""
        if not isinstance(identifier, str) or not identifier:
            return None
        return self.db.execute(
            select(StudentProfile.user_id).where(StudentProfile.qr_token == identifier)
        ).scalar_one_or_none()

    def _current(self, user_id: str) -> str:
        value = self.db.execute(
            select(StudentProfile.qr_token).where(StudentProfile.user_id == user_id)
        ).scalar_one()
        if value is None:  # pragma: no cover - guarded by the conditional update above
            raise RuntimeError(f"Pass identifier missing for user {user_id}")
        return value

    def _ensure_profile(self, user_id: str) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect for pass storage: {dialect}")
        self.db.execute(
            insert(StudentProfile)
            .values(user_id=user_id)
            .on_conflict_do_nothing(index_elements=[StudentProfile.user_id])
        )
