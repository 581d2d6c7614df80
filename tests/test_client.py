"""Gateway client tests against an in-process mock transport."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from penelope_gateway import AsyncGatewayClient, GatewayClient, GatewayConfig
from penelope_gateway.errors import InvalidTokenError, InvalidURLError, MissingConfigurationError

BASE_URL = "https://penelope.tailnet.ts.net"
TOKEN = "secret-token"

SESSIONS_OK = {
    "ok": True,
    "result": {"details": {"count": 3, "sessions": [
        {"key": "agent:main:main", "model": "claude-opus-4-5", "totalTokens": 1_200_000, "updatedAt": 1_700_000_000_000},
        {"key": "agent:main:sub", "model": "gpt-4", "totalTokens": 34_000, "updatedAt": 1_700_000_500_000},
        {"key": "cron:nightly"},
    ]}},
    "error": None,
}


def responder(status_code=200, body=None, content=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if content is not None:
            return httpx.Response(status_code, content=content)
        return httpx.Response(status_code, json=body)
    return httpx.MockTransport(handler)


def raiser(exc_type):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)
    return httpx.MockTransport(handler)


def make_client(transport, **kwargs) -> AsyncGatewayClient:
    kwargs.setdefault("gateway_url", BASE_URL)
    kwargs.setdefault("auth_token", TOKEN)
    return AsyncGatewayClient(transport=transport, **kwargs)


class TestConfiguration:
    @pytest.mark.asyncio
    async def test_empty_token_raises(self):
        async with make_client(responder(body=SESSIONS_OK), auth_token="") as client:
            with pytest.raises(MissingConfigurationError):
                await client.fetch_status()

    @pytest.mark.asyncio
    async def test_empty_url_raises(self):
        async with make_client(responder(body=SESSIONS_OK), gateway_url="") as client:
            with pytest.raises(MissingConfigurationError) as exc:
                await client.fetch_status()
        assert exc.value.code == "missing_configuration"

    @pytest.mark.asyncio
    async def test_no_config_at_all_raises(self):
        async with AsyncGatewayClient(transport=responder(body=SESSIONS_OK)) as client:
            with pytest.raises(MissingConfigurationError):
                await client.fetch_status()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["not a url", "ftp://penelope.example", "http://"])
    async def test_malformed_url_raises(self, url):
        seen = []
        async with make_client(responder(body=SESSIONS_OK, seen=seen), gateway_url=url) as client:
            with pytest.raises(InvalidURLError) as exc:
                await client.fetch_status()
        assert exc.value.code == "invalid_url"
        assert seen == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["tok\u00e9n", "tok\u00a0en", "tok\nen"])
    async def test_token_not_usable_as_header_raises(self, token):
        seen = []
        async with make_client(responder(body=SESSIONS_OK, seen=seen), auth_token=token) as client:
            with pytest.raises(InvalidTokenError) as exc:
                await client.fetch_status()
        assert exc.value.code == "invalid_token"
        assert seen == []

    @pytest.mark.asyncio
    async def test_config_object_is_used(self):
        seen = []
        cfg = GatewayConfig(gateway_url="http://10.0.0.5:8080", auth_token="abc")
        async with AsyncGatewayClient(cfg, transport=responder(body=SESSIONS_OK, seen=seen)) as client:
            status = await client.fetch_status()
        assert status.is_online
        assert str(seen[0].url) == "http://10.0.0.5:8080/tools/invoke"
        assert seen[0].headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_call_arguments_override_config(self):
        seen = []
        async with make_client(responder(body=SESSIONS_OK, seen=seen)) as client:
            await client.fetch_status(gateway_url="https://other.example", auth_token="tok2")
        assert str(seen[0].url) == "https://other.example/tools/invoke"
        assert seen[0].headers["Authorization"] == "Bearer tok2"


class TestRequest:
    @pytest.mark.asyncio
    async def test_posts_sessions_list(self):
        seen = []
        async with make_client(responder(body=SESSIONS_OK, seen=seen)) as client:
            await client.fetch_status()

        assert len(seen) == 1
        req = seen[0]
        assert req.method == "POST"
        assert str(req.url) == f"{BASE_URL}/tools/invoke"
        assert req.headers["Authorization"] == f"Bearer {TOKEN}"
        assert req.headers["Content-Type"] == "application/json"
        assert json.loads(req.content) == {"tool": "sessions_list", "action": "json", "args": {}}

    @pytest.mark.asyncio
    async def test_trailing_slash_is_stripped(self):
        seen = []
        async with make_client(responder(body=SESSIONS_OK, seen=seen), gateway_url=BASE_URL + "/") as client:
            await client.fetch_status()
        assert str(seen[0].url) == f"{BASE_URL}/tools/invoke"

    @pytest.mark.asyncio
    async def test_timeout_is_bounded(self):
        async with make_client(responder(body=SESSIONS_OK)) as client:
            assert 10 <= client.http.timeout <= 15

    @pytest.mark.asyncio
    async def test_each_fetch_is_a_new_request(self):
        seen = []
        async with make_client(responder(body=SESSIONS_OK, seen=seen)) as client:
            await client.fetch_status()
            await client.fetch_status()
        assert len(seen) == 2


class TestOnline:
    @pytest.mark.asyncio
    async def test_aggregates_sessions(self):
        async with make_client(responder(body=SESSIONS_OK)) as client:
            status = await client.fetch_status()

        assert status.is_online is True
        assert status.error is None
        assert status.session_count == 3
        assert status.total_tokens == 1_234_000
        assert status.model == "Claude Opus"
        assert status.last_activity == datetime.fromtimestamp(1_700_000_500, tz=timezone.utc)

    @pytest.mark.asyncio
    async def test_count_comes_from_gateway(self):
        body = {"ok": True, "result": {"details": {"count": 10, "sessions": [{"key": "a"}]}}}
        async with make_client(responder(body=body)) as client:
            status = await client.fetch_status()
        assert status.session_count == 10

    @pytest.mark.asyncio
    async def test_empty_session_list(self):
        body = {"ok": True, "result": {"details": {"count": 0, "sessions": []}}, "error": None}
        async with make_client(responder(body=body)) as client:
            status = await client.fetch_status()
        assert status.is_online
        assert (status.total_tokens, status.model, status.last_activity) == (0, "N/A", None)


class TestOffline:
    @pytest.mark.asyncio
    async def test_http_500(self):
        async with make_client(responder(500, body={"detail": "oops"})) as client:
            status = await client.fetch_status()
        assert status.is_online is False
        assert status.error == "HTTP error: 500"
        assert status.model == "N/A"
        assert status.total_tokens == 0

    @pytest.mark.asyncio
    async def test_http_401(self):
        async with make_client(responder(401, body={})) as client:
            status = await client.fetch_status()
        assert status.error == "HTTP error: 401"

    @pytest.mark.asyncio
    async def test_timeout(self):
        async with make_client(raiser(httpx.ReadTimeout)) as client:
            status = await client.fetch_status()
        assert status.is_online is False
        assert status.error == "Request timed out"

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        async with make_client(raiser(httpx.ConnectError)) as client:
            status = await client.fetch_status()
        assert status.is_online is False
        assert status.error == "Network error: boom"

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        async with make_client(responder(content=b"<html>gateway</html>")) as client:
            status = await client.fetch_status()
        assert status.is_online is False
        assert status.error == "Invalid response from gateway"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"result": {"details": {"count": 1, "sessions": []}}},
        {"ok": True, "result": {"details": {"sessions": []}}},
        {"ok": True, "result": {"details": {"count": 1, "sessions": [{"model": "gpt-4"}]}}},
        {"ok": True, "result": {"details": {"count": 1, "sessions": [{"key": "a", "totalTokens": -5}]}}},
        {"ok": True, "result": {"details": {"count": 1, "sessions": [{"key": "a", "totalTokens": "lots"}]}}},
        {"ok": True, "result": {"details": {"count": 1, "sessions": [{"key": "a", "updatedAt": 10**17}]}}},
        {"ok": True, "result": {"details": {"count": 1, "sessions": [{"key": "a", "updatedAt": -(10**17)}]}}},
        [1, 2, 3],
    ])
    async def test_schema_mismatch(self, body):
        async with make_client(responder(body=body)) as client:
            status = await client.fetch_status()
        assert status.is_online is False
        assert status.error == "Invalid response from gateway"

    @pytest.mark.asyncio
    async def test_logical_failure_uses_error_message(self):
        body = {"ok": False, "error": {"type": "forbidden", "message": "Tool not allowed"}}
        async with make_client(responder(body=body)) as client:
            status = await client.fetch_status()
        assert status.is_online is False
        assert status.error == "Tool not allowed"

    @pytest.mark.asyncio
    async def test_logical_failure_without_message(self):
        async with make_client(responder(body={"ok": False})) as client:
            status = await client.fetch_status()
        assert status.error == "Unknown error"

    @pytest.mark.asyncio
    async def test_missing_details(self):
        async with make_client(responder(body={"ok": True, "result": {}})) as client:
            status = await client.fetch_status()
        assert status.is_online is False
        assert status.error == "Unknown error"


class TestConnectionCheck:
    @pytest.mark.asyncio
    async def test_success_message(self):
        async with make_client(responder(body=SESSIONS_OK)) as client:
            assert await client.test_connection() == "Success! 3 sessions, 1.2M tokens"

    @pytest.mark.asyncio
    async def test_offline_message(self):
        async with make_client(responder(503, body={})) as client:
            assert await client.test_connection() == "Error: HTTP error: 503"

    @pytest.mark.asyncio
    async def test_invalid_token_message(self):
        async with make_client(responder(body=SESSIONS_OK)) as client:
            assert await client.test_connection(auth_token="tok\u00e9n") == "Error: Auth token must be printable ASCII"

    @pytest.mark.asyncio
    async def test_missing_configuration_message(self):
        async with make_client(responder(body=SESSIONS_OK)) as client:
            assert await client.test_connection(auth_token="") == "Error: Gateway URL or token not configured"


class TestSyncClient:
    def test_fetch_status(self):
        with GatewayClient(gateway_url=BASE_URL, auth_token=TOKEN, transport=responder(body=SESSIONS_OK)) as client:
            status = client.fetch_status()
            assert status.is_online
            assert status.total_tokens == 1_234_000

    def test_raises_on_missing_configuration(self):
        with GatewayClient(transport=responder(body=SESSIONS_OK)) as client:
            with pytest.raises(MissingConfigurationError):
                client.fetch_status()

    def test_close_is_idempotent(self):
        client = GatewayClient(gateway_url=BASE_URL, auth_token=TOKEN, transport=responder(body=SESSIONS_OK))
        client.close()
        client.close()
