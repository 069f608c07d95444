"""Offline boarding-pass validator for driver and gate devices.

Verifies scanned passes using only the configured key ring (``QR_JWT_KEYS``),
with no call to the issuing server. Reads tokens from the command line or, one
per line, from standard input.

Exit status is 0 when every token validated and 1 otherwise.
"""
from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable

from trayex.core.settings import settings
from trayex.services.keyring import KeyRing, MissingSigningSecret
from trayex.services.pass_tokens import PassTokenService

INVALID_QR = "INVALID_QR"


def validate_tokens(service: PassTokenService, tokens: Iterable[str]) -> tuple[list[dict], bool]:
    """Return one result record per token and whether all of them validated."""
    results: list[dict] = []
    all_ok = True
    for raw in tokens:
        token = raw.strip()
        if not token:
            continue
        outcome = service.check(token)
        if outcome.claims is None:
            all_ok = False
            results.append({"ok": False, "reason": INVALID_QR})
        else:
            results.append({"ok": True, "decoded": outcome.claims.as_dict()})
    return results, all_ok


def build_service(keys: list[str] | None = None) -> PassTokenService:
    ring = KeyRing.from_config(
        keys if keys else settings.qr_signing_keys,
        allow_insecure_default=settings.allow_insecure_defaults,
    )
    return PassTokenService(ring, algorithm=settings.jwt_algorithm)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate boarding passes offline")
    parser.add_argument("tokens", nargs="*", help="Scanned tokens (defaults to stdin)")
    parser.add_argument(
        "--key",
        action="append",
        dest="keys",
        default=None,
        help="Signing secret, newest first; repeat for retired keys (defaults to QR_JWT_KEYS)",
    )
    args = parser.parse_args(argv)

    try:
        service = build_service(args.keys)
    except MissingSigningSecret as exc:
        print(f"[gate] ERROR: {exc}", file=sys.stderr)
        return 2

    tokens = args.tokens or sys.stdin.read().splitlines()
    results, all_ok = validate_tokens(service, tokens)
    for result in results:
        print(json.dumps(result, sort_keys=True))
    return 0 if all_ok and results else 1


if __name__ == "__main__":
    sys.exit(main())
