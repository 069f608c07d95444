# src/trayex/api/v1/endpoints/catalog.py
"""Read-only catalog of zones, stops and timeslots."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from trayex.api.v1.dependencies import CapacityGuardDep, SessionDep
from trayex.models import Stop, Timeslot, Zone
from trayex.schemas.reservation import StopResponse, TimeslotResponse, ZoneResponse

router = APIRouter(prefix="/zones", tags=["catalog"])


def _get_zone_or_404(db: SessionDep, zone_id: str) -> Zone:
    zone = db.get(Zone, zone_id)
    if zone is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Zone not found",
        )
    return zone


@router.get("", response_model=list[ZoneResponse])
async def list_zones(db: SessionDep) -> list[ZoneResponse]:
    zones = db.execute(select(Zone).order_by(Zone.name)).scalars().all()
    return [ZoneResponse.model_validate(zone) for zone in zones]


@router.get("/{zone_id}/stops", response_model=list[StopResponse])
async def list_stops(zone_id: str, db: SessionDep) -> list[StopResponse]:
    _get_zone_or_404(db, zone_id)
    stops = db.execute(
        select(Stop).where(Stop.zone_id == zone_id).order_by(Stop.name)
    ).scalars().all()
    return [StopResponse.model_validate(stop) for stop in stops]


@router.get("/{zone_id}/timeslots", response_model=list[TimeslotResponse])
async def list_timeslots(
    zone_id: str,
    db: SessionDep,
    guard: CapacityGuardDep,
) -> list[TimeslotResponse]:
    """List a zone's timeslots with the number of seats still free."""
    _get_zone_or_404(db, zone_id)
    timeslots = db.execute(
        select(Timeslot).where(Timeslot.zone_id == zone_id).order_by(Timeslot.start_at)
    ).scalars().all()
    results = []
    for timeslot in timeslots:
        item = TimeslotResponse.model_validate(timeslot)
        item.available = max(0, timeslot.capacity - guard.active_count(db, timeslot.id))
        results.append(item)
    return results
