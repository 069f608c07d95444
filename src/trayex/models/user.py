# src/trayex/models/user.py
"""SQLAlchemy models for accounts and student profiles."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trayex.db.session import Base
from trayex.db.time import utcnow


class UserRole(str, Enum):
    """Roles carried in session tokens."""

    STUDENT = "STUDENT"
    DRIVER = "DRIVER"
    ADMIN = "ADMIN"


def new_id() -> str:
    """Return a fresh opaque primary key."""
    return uuid.uuid4().hex


class User(Base):
    """Account identified by email and/or phone with a password credential."""

    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), unique=True, nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=UserRole.STUDENT.value)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    student: Mapped[StudentProfile | None] = relationship(
        "StudentProfile",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )


class StudentProfile(Base):
    """Per-user profile; also stores the persisted pass identifier."""

    __tablename__ = "student_profile"

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    blood_type: Mapped[str | None] = mapped_column(String(8), nullable=True)
    id_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    university: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_contact: Mapped[str | None] = mapped_column(Text, nullable=True)
    qr_token: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)

    user: Mapped[User] = relationship("User", back_populates="student")
