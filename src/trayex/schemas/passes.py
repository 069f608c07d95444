"""Boarding-pass Pydantic schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class PassResponse(BaseModel):
    """Freshly minted boarding-pass token, to be rendered as a QR code."""

    qr: str = Field(..., description="Signed boarding-pass token")


class ValidateRequest(BaseModel):
    """Token scanned by a driver or gate device."""

    # Any JSON value is accepted here; non-strings fail as INVALID_QR.
    qr: Any = Field(None, description="Scanned boarding-pass token")


class ValidateResponse(BaseModel):
    """Successful validation."""

    ok: Literal[True] = True
    decoded: dict[str, Any]


class ValidateFailure(BaseModel):
    """Uniform validation failure; never says why the pass was rejected."""

    ok: Literal[False] = False
    reason: str = "INVALID_QR"


class PassIdResponse(BaseModel):
    """Persisted pass identifier of the current user."""

    pass_id: str


class PassIdValidateRequest(BaseModel):
    """Persisted pass identifier scanned at the gate."""

    pass_id: Any = Field(None, description="Scanned persisted pass identifier")


class PassIdValidateResponse(BaseModel):
    """Owner of a valid persisted pass identifier."""

    ok: Literal[True] = True
    user_id: str
