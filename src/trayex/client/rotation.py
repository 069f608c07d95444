"""Periodic boarding-pass refresh for client devices.

The loop fetches a new pass on a fixed cadence and hands it to a callback that
renders it. Fetches are strictly sequential: the next sleep starts only after
the previous response arrived, so one client never has two mints in flight.
Each pass outlives the cadence, so a scan taken just before a refresh still
validates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from trayex.core.settings import settings

logger = logging.getLogger(__name__)

PassCallback = Callable[[str], Awaitable[None] | None]


class PassApiError(RuntimeError):
    """Raised when the pass API returns an unusable response."""


class PassApiClient:
    """Thin async client for the authentication and pass endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout,
        )
        self.token = token

    async def close(self) -> None:
        await self._client.aclose()

    async def login(self, email: str, password: str) -> str:
        """Log in and remember the session token for later calls."""
        data = await self._request(
            "POST", "/api/v1/auth/login", json={"email": email, "password": password}
        )
        token = data.get("token")
        if not isinstance(token, str):
            raise PassApiError("Login response carried no token")
        self.token = token
        return token

    async def fetch_pass(self) -> str:
        return self._qr_from(await self._request("GET", "/api/v1/pass/qr"))

    async def rotate_pass(self) -> str:
        return self._qr_from(await self._request("POST", "/api/v1/pass/rotate"))

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        response = await self._client.request(method, path, headers=headers, **kwargs)
        if response.status_code >= 400:
            detail = f"HTTP {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("detail"):
                detail = str(body["detail"])
            raise PassApiError(detail)
        try:
            data = response.json()
        except ValueError as err:
            raise PassApiError("Unexpected response body") from err
        if not isinstance(data, dict):
            raise PassApiError("Unexpected response body")
        return data

    @staticmethod
    def _qr_from(data: dict[str, Any]) -> str:
        qr = data.get("qr")
        if not isinstance(qr, str) or not qr:
            raise PassApiError("Pass response carried no token")
        return qr


class PassRotationLoop:
    """Fetch a fresh pass every ``interval`` seconds and publish it."""

    def __init__(
        self,
        client: PassApiClient,
        on_pass: PassCallback,
        *,
        interval: float | None = None,
    ) -> None:
        self.client = client
        self.on_pass = on_pass
        self.interval = max(
            0.01,
            float(interval if interval is not None else settings.pass_rotation_interval_seconds),
        )
        self.current: str | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background rotation loop."""
        if not self.running:
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the loop and wait for the in-flight fetch to finish."""
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None

    async def refresh_now(self) -> str:
        """Ask the server to regenerate the pass immediately and publish it."""
        async with self._lock:
            token = await self.client.rotate_pass()
            await self._publish(token)
            return token

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                async with self._lock:
                    token = await self.client.fetch_pass()
                    await self._publish(token)
            except (PassApiError, httpx.HTTPError) as e:
                # The last pass stays on screen; it is valid until its own expiry.
                logger.warning("Pass refresh failed: %s", e)
            except Exception:
                # on_pass is caller code; its failures must not end the loop.
                logger.exception("Pass callback raised; rotation continues")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except TimeoutError:
                continue

    async def _publish(self, token: str) -> None:
        self.current = token
        result = self.on_pass(token)
        if result is not None:
            await result
