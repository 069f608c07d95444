"""Tests for the client-side pass rotation loop."""

import asyncio
import itertools
import json

import httpx
import pytest

from trayex.client.rotation import PassApiClient, PassApiError, PassRotationLoop


def _mock_client(handler) -> PassApiClient:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="http://test",
    )
    return PassApiClient(http_client=http_client, token="session-token")


def _counting_handler(calls):
    counter = itertools.count(1)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, request.headers.get("authorization")))
        return httpx.Response(200, json={"qr": f"pass-{next(counter)}"})

    return handler


class TestPassApiClient:
    @pytest.mark.asyncio
    async def test_login_stores_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v1/auth/login"
            assert json.loads(request.content) == {"email": "a@uni.test", "password": "pw"}
            return httpx.Response(200, json={"token": "fresh", "user": {}})

        client = _mock_client(handler)
        client.token = None
        assert await client.login("a@uni.test", "pw") == "fresh"
        assert client.token == "fresh"
        await client.close()

    @pytest.mark.asyncio
    async def test_fetch_sends_bearer(self):
        calls = []
        client = _mock_client(_counting_handler(calls))
        assert await client.fetch_pass() == "pass-1"
        assert await client.rotate_pass() == "pass-2"
        assert calls == [
            ("GET", "/api/v1/pass/qr", "Bearer session-token"),
            ("POST", "/api/v1/pass/rotate", "Bearer session-token"),
        ]
        await client.close()

    @pytest.mark.asyncio
    async def test_error_detail_is_raised(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"detail": "Invalid token"})

        client = _mock_client(handler)
        with pytest.raises(PassApiError, match="Invalid token"):
            await client.fetch_pass()
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_success_is_an_error(self):
        client = _mock_client(lambda request: httpx.Response(200, text="<html>portal</html>"))
        with pytest.raises(PassApiError, match="Unexpected response body"):
            await client.fetch_pass()
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_qr_is_an_error(self):
        client = _mock_client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(PassApiError):
            await client.fetch_pass()
        await client.close()


class TestPassRotationLoop:
    @pytest.mark.asyncio
    async def test_publishes_successive_passes(self):
        calls = []
        client = _mock_client(_counting_handler(calls))
        seen: list[str] = []
        enough = asyncio.Event()

        def on_pass(token: str) -> None:
            seen.append(token)
            if len(seen) >= 3:
                enough.set()

        loop = PassRotationLoop(client, on_pass, interval=0.01)
        await loop.start()
        assert loop.running
        await asyncio.wait_for(enough.wait(), timeout=5)
        await loop.stop()

        assert not loop.running
        assert seen[:3] == ["pass-1", "pass-2", "pass-3"]
        assert loop.current == seen[-1]
        await client.close()

    @pytest.mark.asyncio
    async def test_async_callback_and_refresh_now(self):
        calls = []
        client = _mock_client(_counting_handler(calls))
        seen: list[str] = []

        async def on_pass(token: str) -> None:
            seen.append(token)

        loop = PassRotationLoop(client, on_pass, interval=60)
        token = await loop.refresh_now()
        assert token == "pass-1"
        assert seen == ["pass-1"]
        assert calls[0][:2] == ("POST", "/api/v1/pass/rotate")
        await client.close()

    @pytest.mark.asyncio
    async def test_failures_keep_last_pass(self, caplog):
        responses = iter(
            [
                httpx.Response(200, json={"qr": "pass-1"}),
                httpx.Response(503, json={"detail": "unavailable"}),
            ]
        )
        attempts = asyncio.Event()

        def handler(request: httpx.Request) -> httpx.Response:
            try:
                return next(responses)
            except StopIteration:
                attempts.set()
                return httpx.Response(503)

        client = _mock_client(handler)
        seen: list[str] = []
        loop = PassRotationLoop(client, seen.append, interval=0.01)
        with caplog.at_level("WARNING", logger="trayex.client.rotation"):
            await loop.start()
            await asyncio.wait_for(attempts.wait(), timeout=5)
            await loop.stop()

        assert seen == ["pass-1"]
        assert loop.current == "pass-1"
        assert "Pass refresh failed" in caplog.text
        await client.close()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        client = _mock_client(lambda request: httpx.Response(200, json={"qr": "x"}))
        loop = PassRotationLoop(client, lambda token: None, interval=1)
        await loop.stop()
        assert not loop.running
        await client.close()


class TestPassRotationLoopRecovery:
    @pytest.mark.asyncio
    async def test_html_response_does_not_stop_rotation(self, caplog):
        responses = iter([httpx.Response(200, text="<html>proxy</html>")])
        counter = itertools.count(1)

        def handler(request: httpx.Request) -> httpx.Response:
            try:
                return next(responses)
            except StopIteration:
                return httpx.Response(200, json={"qr": f"pass-{next(counter)}"})

        client = _mock_client(handler)
        published = asyncio.Event()
        seen: list[str] = []

        def on_pass(token: str) -> None:
            seen.append(token)
            published.set()

        loop = PassRotationLoop(client, on_pass, interval=0.01)
        with caplog.at_level("WARNING", logger="trayex.client.rotation"):
            await loop.start()
            await asyncio.wait_for(published.wait(), timeout=5)
            assert loop.running
            await loop.stop()

        assert seen[0] == "pass-1"
        assert "Unexpected response body" in caplog.text
        await client.close()

    @pytest.mark.asyncio
    async def test_failing_callback_is_logged_and_loop_continues(self, caplog):
        calls = []
        client = _mock_client(_counting_handler(calls))
        seen: list[str] = []
        recovered = asyncio.Event()

        def on_pass(token: str) -> None:
            seen.append(token)
            if len(seen) == 1:
                raise RuntimeError("display unavailable")
            recovered.set()

        loop = PassRotationLoop(client, on_pass, interval=0.01)
        with caplog.at_level("ERROR", logger="trayex.client.rotation"):
            await loop.start()
            await asyncio.wait_for(recovered.wait(), timeout=5)
            assert loop.running
            await loop.stop()

        assert seen[:2] == ["pass-1", "pass-2"]
        assert "Pass callback raised" in caplog.text
        await client.close()
