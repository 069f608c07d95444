"""Seat admission for timeslot reservations."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from trayex.models import Reservation, Timeslot
from trayex.models.reservation import ACTIVE_STATUSES


class CapacityExceeded(RuntimeError):
    """Raised when a timeslot has no free seats left."""


class ReservationCapacityGuard:
    """Count active reservations against a timeslot's capacity."""

    def active_count(self, db: Session, timeslot_id: str) -> int:
        return int(
            db.execute(
                select(func.count(Reservation.id)).where(
                    Reservation.timeslot_id == timeslot_id,
                    Reservation.status.in_(ACTIVE_STATUSES),
                )
            ).scalar_one()
        )

    def admit(self, db: Session, timeslot_id: str) -> Timeslot:
        """Return the timeslot if one more seat can be booked.

        The timeslot row is locked (where the database supports it) so that
        concurrent admissions for the same timeslot are serialized until the
        caller's transaction ends.

        Raises:
            LookupError: If the timeslot does not exist.
            CapacityExceeded: If every seat is taken.
        """
        timeslot = db.execute(
            select(Timeslot).where(Timeslot.id == timeslot_id).with_for_update()
        ).scalar_one_or_none()
        if timeslot is None:
            raise LookupError(f"Unknown timeslot {timeslot_id}")
        if self.active_count(db, timeslot_id) >= timeslot.capacity:
            raise CapacityExceeded(f"Timeslot {timeslot_id} is full")
        return timeslot
