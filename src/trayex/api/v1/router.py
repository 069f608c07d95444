"""Versioned API router wiring for v1.

This module composes the version 1 API surface by including the sub-routers
that define their own endpoints. It contains no endpoint definitions.
Downstream code should import and mount `api_v1` only.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .endpoints import (
    auth_router,
    catalog_router,
    pass_router,
    reservations_router,
    validation_router,
)

api_v1: Final[APIRouter] = APIRouter()
api_v1.include_router(auth_router)
api_v1.include_router(pass_router)
api_v1.include_router(validation_router)
api_v1.include_router(catalog_router)
api_v1.include_router(reservations_router)

__all__ = ["api_v1"]
