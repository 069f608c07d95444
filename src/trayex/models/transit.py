# src/trayex/models/transit.py
"""Zones, stops and bookable timeslots."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trayex.db.session import Base
from trayex.models.user import new_id


class Zone(Base):
    """Service area grouping stops and timeslots."""

    __tablename__ = "zone"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    stops: Mapped[list[Stop]] = relationship("Stop", back_populates="zone")
    timeslots: Mapped[list[Timeslot]] = relationship("Timeslot", back_populates="zone")


class Stop(Base):
    """Boarding point inside a zone."""

    __tablename__ = "stop"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    zone_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("zone.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    zone: Mapped[Zone] = relationship("Zone", back_populates="stops")


class Timeslot(Base):
    """Departure window with a fixed seat capacity."""

    __tablename__ = "timeslot"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    zone_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("zone.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    zone: Mapped[Zone] = relationship("Zone", back_populates="timeslots")
