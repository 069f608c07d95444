"""Ordered set of symmetric secrets used to sign boarding-pass tokens.

Index 0 is the current key; higher indices are retired keys that remain valid
for verification until they are removed from configuration. Tokens reference a
slot through a short label (``k<index>``) carried in their JOSE header.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

# Well-known secret used only when insecure defaults are explicitly allowed.
DEVELOPMENT_SECRET = "trayex-dev-qr-secret-change-me"

_KEY_ID_PATTERN = re.compile(r"^k(\d+)$")


class KeyIndexOutOfRange(IndexError):
    """Raised when a ring slot that does not exist is requested."""


class MissingSigningSecret(RuntimeError):
    """Raised at startup when no signing secret is configured."""


def key_id_for(index: int) -> str:
    """Return the stable label for ring slot ``index``."""
    return f"k{index}"


def label_to_index(label: object) -> int | None:
    """Return the slot index encoded by ``label``, or None if it is not a key id."""
    if not isinstance(label, str):
        return None
    match = _KEY_ID_PATTERN.fullmatch(label)
    if match is None:
        return None
    return int(match.group(1))


class KeyRing:
    """Immutable, indexable sequence of signing secrets (newest first)."""

    __slots__ = ("_secrets",)

    def __init__(self, secrets: Iterable[str]) -> None:
        cleaned = tuple(secret for secret in secrets if secret)
        if not cleaned:
            raise MissingSigningSecret("Key ring requires at least one signing secret")
        self._secrets: tuple[str, ...] = cleaned

    @classmethod
    def from_config(cls, secrets: Sequence[str], *, allow_insecure_default: bool) -> KeyRing:
        """Build a ring from configuration.

        Args:
            secrets: Configured secrets, newest first. Blank entries are ignored.
            allow_insecure_default: Substitute ``DEVELOPMENT_SECRET`` when no secret
                is configured instead of refusing to start.

        Raises:
            MissingSigningSecret: If no secret is configured and the insecure
                default is not allowed.
        """
        cleaned = [secret.strip() for secret in secrets if secret and secret.strip()]
        if cleaned:
            return cls(cleaned)
        if not allow_insecure_default:
            raise MissingSigningSecret(
                "QR_JWT_KEYS is empty; refusing to sign boarding passes with a default key"
            )
        logger.warning(
            "QR_JWT_KEYS is empty; using the insecure development key. "
            "Never run this configuration in production."
        )
        return cls([DEVELOPMENT_SECRET])

    def __len__(self) -> int:
        return len(self._secrets)

    def __iter__(self) -> Iterator[str]:
        return iter(self._secrets)

    def __repr__(self) -> str:
        # Never render secret material.
        return f"KeyRing(size={len(self._secrets)})"

    def secret_at(self, index: int) -> str:
        """Return the secret stored in slot ``index``.

        Raises:
            KeyIndexOutOfRange: If ``index`` does not address a slot.
        """
        if index < 0 or index >= len(self._secrets):
            raise KeyIndexOutOfRange(
                f"Key index {index} outside ring of size {len(self._secrets)}"
            )
        return self._secrets[index]

    def current(self) -> str:
        """Return the newest secret, used for all new signatures."""
        return self.secret_at(0)

    def contains_index(self, index: int) -> bool:
        return 0 <= index < len(self._secrets)

    def key_id_for(self, index: int) -> str:
        """Return the label for ``index`` after checking the slot exists."""
        self.secret_at(index)
        return key_id_for(index)

    def label_to_index(self, label: object) -> int | None:
        return label_to_index(label)

    def rotated(self, new_secret: str) -> KeyRing:
        """Return a new ring with ``new_secret`` as current and every existing key demoted."""
        return KeyRing((new_secret, *self._secrets))
