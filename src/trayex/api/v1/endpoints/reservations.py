# src/trayex/api/v1/endpoints/reservations.py
"""Reservation and ticket endpoints for the Trayex API."""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from trayex.api.v1.dependencies import (
    CapacityGuardDep,
    CurrentUserDep,
    PassTokensDep,
    SessionDep,
)
from trayex.core.settings import settings
from trayex.db.time import utcnow
from trayex.models import Reservation, ReservationStatus, Stop, Timeslot, User
from trayex.models.reservation import FINAL_STATUSES
from trayex.schemas.reservation import (
    ReservationCreateRequest,
    ReservationResponse,
    TicketResponse,
)
from trayex.services.capacity import CapacityExceeded
from trayex.services.pass_tokens import PURPOSE_BOARDING, PURPOSE_RESERVATION

router = APIRouter(tags=["reservations"])


def _get_own_reservation(db: SessionDep, reservation_id: str, user: User) -> Reservation:
    reservation = db.get(Reservation, reservation_id)
    if reservation is None or reservation.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reservation not found",
        )
    return reservation


@router.post(
    "/reservations",
    status_code=status.HTTP_201_CREATED,
    response_model=ReservationResponse,
)
async def create_reservation(
    payload: ReservationCreateRequest,
    user: CurrentUserDep,
    db: SessionDep,
    guard: CapacityGuardDep,
    pass_tokens: PassTokensDep,
) -> ReservationResponse:
    """Book a seat and attach an offline token the driver can verify without network."""
    stop = db.get(Stop, payload.stop_id)
    try:
        timeslot = guard.admit(db, payload.timeslot_id)
    except LookupError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Timeslot or stop not found",
        ) from err
    except CapacityExceeded as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Timeslot is full",
        ) from err

    if stop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Timeslot or stop not found",
        )
    if stop.zone_id != timeslot.zone_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Timeslot and stop must belong to the same zone",
        )

    offline_token = pass_tokens.mint(
        user.id,
        PURPOSE_RESERVATION,
        timedelta(seconds=settings.offline_token_ttl_seconds),
        claims={"tsl": timeslot.id, "stp": stop.id},
    )
    reservation = Reservation(
        user_id=user.id,
        timeslot_id=timeslot.id,
        stop_id=stop.id,
        status=ReservationStatus.CONFIRMED.value,
        offline_token=offline_token,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return ReservationResponse.model_validate(reservation)


@router.get("/me/reservations", response_model=list[ReservationResponse])
async def list_my_reservations(user: CurrentUserDep, db: SessionDep) -> list[ReservationResponse]:
    """Return the caller's reservations for timeslots that have not started yet."""
    reservations = db.execute(
        select(Reservation)
        .join(Reservation.timeslot)
        .where(Reservation.user_id == user.id, Timeslot.start_at >= utcnow())
        .options(selectinload(Reservation.timeslot), selectinload(Reservation.stop))
        .order_by(Timeslot.start_at.asc(), Reservation.created_at.desc())
    ).scalars().all()
    return [ReservationResponse.model_validate(item) for item in reservations]


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: str,
    user: CurrentUserDep,
    db: SessionDep,
) -> ReservationResponse:
    """Cancel one of the caller's reservations, freeing its seat."""
    reservation = _get_own_reservation(db, reservation_id, user)
    if reservation.status in FINAL_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reservation can no longer be cancelled",
        )
    reservation.status = ReservationStatus.CANCELLED.value
    db.commit()
    db.refresh(reservation)
    return ReservationResponse.model_validate(reservation)


@router.get("/tickets/{reservation_id}/qr", response_model=TicketResponse)
async def ticket_qr(
    reservation_id: str,
    user: CurrentUserDep,
    db: SessionDep,
    pass_tokens: PassTokensDep,
) -> TicketResponse:
    """Mint a short-lived boarding token bound to one reservation."""
    reservation = _get_own_reservation(db, reservation_id, user)
    if reservation.status in FINAL_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reservation is not active",
        )
    qr = pass_tokens.mint(
        user.id,
        PURPOSE_BOARDING,
        timedelta(seconds=settings.ticket_token_ttl_seconds),
        role=user.role,
        claims={"rid": reservation.id},
    )
    return TicketResponse(reservation_id=reservation.id, qr=qr)
