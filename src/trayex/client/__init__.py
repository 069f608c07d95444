# src/trayex/client/__init__.py
"""Client-side helpers: pass rotation loop and QR rendering."""

from .render import render_ascii, render_svg
from .rotation import PassApiClient, PassApiError, PassRotationLoop

__all__ = [
    "PassApiClient",
    "PassApiError",
    "PassRotationLoop",
    "render_ascii",
    "render_svg",
]
