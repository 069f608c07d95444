# src/trayex/api/v1/endpoints/passes.py
"""Rotating boarding-pass endpoints for the Trayex API."""

from __future__ import annotations

from fastapi import APIRouter

from trayex.api.v1.dependencies import (
    ClaimsDep,
    CurrentUserDep,
    PassStoreDep,
    PassTokensDep,
)
from trayex.schemas.passes import PassIdResponse, PassResponse
from trayex.services.pass_tokens import PURPOSE_BOARDING

router = APIRouter(prefix="/pass", tags=["pass"])


def _mint_boarding_pass(claims: ClaimsDep, pass_tokens: PassTokensDep) -> PassResponse:
    qr = pass_tokens.mint(claims.subject_id, PURPOSE_BOARDING, role=claims.role)
    return PassResponse(qr=qr)


@router.get("/qr", response_model=PassResponse, summary="Mint a boarding pass")
async def get_pass(claims: ClaimsDep, pass_tokens: PassTokensDep) -> PassResponse:
    """Return a fresh boarding-pass token for the authenticated user.

    Clients call this on a fixed cadence; every previously issued pass stays
    valid until its own expiry.
    """
    return _mint_boarding_pass(claims, pass_tokens)


@router.post("/rotate", response_model=PassResponse, summary="Regenerate the boarding pass now")
async def rotate_pass(claims: ClaimsDep, pass_tokens: PassTokensDep) -> PassResponse:
    """Same as ``GET /pass/qr``; exists so clients can signal an explicit refresh."""
    return _mint_boarding_pass(claims, pass_tokens)


@router.post("/qr/rotate", response_model=PassResponse, include_in_schema=False)
async def rotate_pass_legacy(claims: ClaimsDep, pass_tokens: PassTokensDep) -> PassResponse:
    return _mint_boarding_pass(claims, pass_tokens)


@router.get("/id", response_model=PassIdResponse, summary="Get the persisted pass identifier")
def get_pass_id(user: CurrentUserDep, store: PassStoreDep) -> PassIdResponse:
    """Return the user's persisted pass identifier, creating it on first use."""
    return PassIdResponse(pass_id=store.get_or_create(user.id))


@router.post("/id/rotate", response_model=PassIdResponse, summary="Rotate the persisted pass identifier")
def rotate_pass_id(user: CurrentUserDep, store: PassStoreDep) -> PassIdResponse:
    """Replace the persisted identifier; the previous one stops validating immediately."""
    return PassIdResponse(pass_id=store.rotate(user.id))
