# src/trayex/api/v1/endpoints/validation.py
"""Gate-side validation endpoints for boarding passes.

These endpoints take no session token: they are called by driver and gate
devices. Every failure has the same shape so a caller cannot learn why a pass
was rejected.
"""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from trayex.api.v1.dependencies import PassStoreDep, PassTokensDep
from trayex.schemas.passes import (
    PassIdValidateRequest,
    PassIdValidateResponse,
    ValidateFailure,
    ValidateRequest,
    ValidateResponse,
)

router = APIRouter(prefix="/validate", tags=["validation"])

_FAILURE_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ValidateFailure},
}


def _invalid_qr() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidateFailure().model_dump(),
    )


@router.post("", response_model=ValidateResponse, responses=_FAILURE_RESPONSES)
async def validate_pass(
    payload: ValidateRequest,
    pass_tokens: PassTokensDep,
) -> ValidateResponse | JSONResponse:
    """Verify a scanned boarding-pass token."""
    outcome = pass_tokens.check(payload.qr)
    if outcome.claims is None:
        return _invalid_qr()
    return ValidateResponse(decoded=outcome.claims.as_dict())


@router.post("/pass-id", response_model=PassIdValidateResponse, responses=_FAILURE_RESPONSES)
def validate_pass_id(
    payload: PassIdValidateRequest,
    store: PassStoreDep,
) -> PassIdValidateResponse | JSONResponse:
    """Resolve a scanned persisted pass identifier to its owner (online only)."""
    user_id = store.lookup(payload.pass_id)
    if user_id is None:
        return _invalid_qr()
    return PassIdValidateResponse(user_id=user_id)
