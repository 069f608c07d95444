# src/trayex/models/reservation.py
"""Seat reservations on timeslots."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trayex.db.session import Base
from trayex.db.time import utcnow
from trayex.models.transit import Stop, Timeslot
from trayex.models.user import new_id


class ReservationStatus(str, Enum):
    """Lifecycle of a reservation."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"
    BOARDED = "BOARDED"


# Statuses that occupy a seat.
ACTIVE_STATUSES = (ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value)

# Statuses that can no longer be cancelled.
FINAL_STATUSES = (
    ReservationStatus.CANCELLED.value,
    ReservationStatus.NO_SHOW.value,
    ReservationStatus.BOARDED.value,
)


class Reservation(Base):
    """A user's seat on a timeslot, boarding at a stop."""

    __tablename__ = "reservation"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    timeslot_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("timeslot.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stop_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("stop.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ReservationStatus.CONFIRMED.value
    )
    offline_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    timeslot: Mapped[Timeslot] = relationship("Timeslot")
    stop: Mapped[Stop] = relationship("Stop")
