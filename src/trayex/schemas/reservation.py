"""Catalog, reservation and ticket schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ZoneResponse(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class StopResponse(BaseModel):
    id: str
    name: str
    zone_id: str
    lat: float | None = None
    lng: float | None = None

    model_config = ConfigDict(from_attributes=True)


class TimeslotResponse(BaseModel):
    id: str
    zone_id: str
    start_at: datetime
    end_at: datetime
    capacity: int
    available: int | None = Field(None, description="Seats still free, when computed")

    model_config = ConfigDict(from_attributes=True)


class ReservationCreateRequest(BaseModel):
    """Seat request for a timeslot, boarding at a stop of the same zone."""

    timeslot_id: str
    stop_id: str


class ReservationResponse(BaseModel):
    id: str
    status: str
    offline_token: str | None = None
    created_at: datetime
    timeslot: TimeslotResponse
    stop: StopResponse

    model_config = ConfigDict(from_attributes=True)


class TicketResponse(BaseModel):
    """Reservation-bound boarding token."""

    reservation_id: str
    qr: str
