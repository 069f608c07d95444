# src/trayex/models/__init__.py
"""SQLAlchemy models for the Trayex application."""

from .reservation import Reservation, ReservationStatus
from .transit import Stop, Timeslot, Zone
from .user import StudentProfile, User, UserRole

__all__ = [
    "Reservation", "ReservationStatus",
    "Stop", "Timeslot", "Zone",
    "StudentProfile", "User", "UserRole",
]
