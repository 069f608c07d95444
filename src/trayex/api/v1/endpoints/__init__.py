# src/trayex/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .catalog import router as catalog_router
from .passes import router as pass_router
from .reservations import router as reservations_router
from .validation import router as validation_router

__all__ = [
    "auth_router",
    "catalog_router",
    "pass_router",
    "reservations_router",
    "validation_router",
]
