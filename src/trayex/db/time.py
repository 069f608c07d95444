# src/trayex/db/time.py
"""Time utilities for database models and token issuance."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)
