"""Render boarding-pass tokens as scannable QR codes."""

from __future__ import annotations

import io

import qrcode
from qrcode.constants import ERROR_CORRECT_H
from qrcode.image.svg import SvgPathImage


def _build(token: str) -> qrcode.QRCode:
    # High error correction leaves room for a logo overlay on the client.
    code = qrcode.QRCode(error_correction=ERROR_CORRECT_H, border=2)
    code.add_data(token)
    code.make(fit=True)
    return code


def render_ascii(token: str, *, invert: bool = True) -> str:
    """Return ``token`` as a terminal-printable QR code."""
    buffer = io.StringIO()
    _build(token).print_ascii(out=buffer, invert=invert)
    return buffer.getvalue()


def render_svg(token: str) -> bytes:
    """Return ``token`` as an SVG document."""
    image = _build(token).make_image(image_factory=SvgPathImage)
    buffer = io.BytesIO()
    image.save(buffer)
    return buffer.getvalue()
