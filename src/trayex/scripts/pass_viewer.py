"""Show a rotating boarding pass in the terminal.

Logs in against the API, then keeps printing a fresh QR code on the
configured rotation cadence until interrupted.
"""
from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from trayex.client.render import render_ascii
from trayex.client.rotation import PassApiClient, PassApiError, PassRotationLoop
from trayex.core.settings import settings


def _print_pass(token: str) -> None:
    print("\033[2J\033[H", end="")
    print(render_ascii(token))


async def run(base_url: str, email: str, password: str, interval: float) -> None:
    client = PassApiClient(base_url)
    try:
        await client.login(email, password)
        loop = PassRotationLoop(client, _print_pass, interval=interval)
        await loop.start()
        try:
            await asyncio.Event().wait()
        finally:
            await loop.stop()
    finally:
        await client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Display a rotating boarding pass")
    parser.add_argument("--email", required=True)
    parser.add_argument("--url", default=settings.api_base_url, help="API base URL")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.pass_rotation_interval_seconds,
        help="Seconds between refreshes",
    )
    args = parser.parse_args()
    password = getpass.getpass("Password: ")

    try:
        asyncio.run(run(args.url, args.email, password, args.interval))
    except KeyboardInterrupt:
        pass
    except PassApiError as exc:
        print(f"[pass] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
