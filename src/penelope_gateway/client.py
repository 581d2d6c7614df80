"""
AsyncGatewayClient / GatewayClient — poll the gateway and summarize its sessions.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from penelope_gateway.aggregator import aggregate
from penelope_gateway.config import GatewayConfig
from penelope_gateway.errors import (
    API_ERROR,
    HTTP_ERROR,
    MALFORMED_RESPONSE,
    NETWORK_ERROR,
    GatewayError,
    InvalidTokenError,
    InvalidURLError,
    MissingConfigurationError,
)
from penelope_gateway.formatting import format_tokens
from penelope_gateway.models.session import ToolInvokeResponse, build_tool_request
from penelope_gateway.models.status import GatewayStatus
from penelope_gateway.transport.http import DEFAULT_TIMEOUT, HttpClient, tools_invoke_url

logger = logging.getLogger(__name__)

SESSIONS_LIST_TOOL = "sessions_list"


class AsyncGatewayClient:
    """Async gateway client (primary).

    Each fetch_status() call makes exactly one request; nothing is cached and
    nothing is retried. Setup defects (missing or malformed configuration)
    raise, every other failure comes back as an offline GatewayStatus.
    """

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        *,
        gateway_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if gateway_url is None:
            gateway_url = config.gateway_url if config else ""
        if auth_token is None:
            auth_token = config.auth_token if config else ""
        self._gateway_url = gateway_url
        self._auth_token = auth_token
        self.http = HttpClient(timeout=timeout, transport=transport)

    @property
    def gateway_url(self) -> str:
        return self._gateway_url

    async def fetch_status(
        self, gateway_url: Optional[str] = None, auth_token: Optional[str] = None,
    ) -> GatewayStatus:
        """Fetch sessions_list and aggregate it. Per-call arguments override the configured ones."""
        url = self._gateway_url if gateway_url is None else gateway_url
        token = self._auth_token if auth_token is None else auth_token
        if not url or not token:
            raise MissingConfigurationError()
        # sent as an HTTP header value
        if not (token.isascii() and token.isprintable()):
            raise InvalidTokenError()

        try:
            endpoint = tools_invoke_url(url)
        except ValueError as e:
            raise InvalidURLError(url) from e

        logger.debug("POST %s (timeout=%ss)", endpoint, self.http.timeout)
        try:
            resp = await self.http.post_json(str(endpoint), build_tool_request(SESSIONS_LIST_TOOL), token)
        except httpx.TimeoutException:
            return self._offline(NETWORK_ERROR, "Request timed out")
        except httpx.RequestError as e:
            return self._offline(NETWORK_ERROR, f"Network error: {str(e) or type(e).__name__}")

        if resp.status_code != 200:
            return self._offline(HTTP_ERROR, f"HTTP error: {resp.status_code}")

        try:
            envelope = ToolInvokeResponse.model_validate_json(resp.content)
        except ValidationError as e:
            logger.debug("Rejected response body: %s", e)
            return self._offline(MALFORMED_RESPONSE, "Invalid response from gateway")

        details = envelope.result.details if envelope.result else None
        if not envelope.ok or details is None:
            message = envelope.error.message if envelope.error else "Unknown error"
            return self._offline(API_ERROR, message)

        status = GatewayStatus.online(aggregate(details.count, details.sessions))
        logger.debug("Gateway online: %d sessions, %d tokens", status.session_count, status.total_tokens)
        return status

    async def test_connection(
        self, gateway_url: Optional[str] = None, auth_token: Optional[str] = None,
    ) -> str:
        """One-line result for a manual connection check."""
        try:
            status = await self.fetch_status(gateway_url, auth_token)
        except GatewayError as e:
            return f"Error: {e}"
        if not status.is_online:
            return f"Error: {status.error}"
        return f"Success! {status.session_count} sessions, {format_tokens(status.total_tokens)} tokens"

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AsyncGatewayClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    @staticmethod
    def _offline(code: str, message: str) -> GatewayStatus:
        logger.warning("Gateway offline [%s]: %s", code, message)
        return GatewayStatus.offline(message)


class GatewayClient:
    """Sync wrapper around AsyncGatewayClient. Runs the event loop internally.

    Owns an event loop and an HTTP connection pool: call close() or use it as a
    context manager to release them.
    """

    def __init__(self, config: Optional[GatewayConfig] = None, **kwargs: Any):
        self._async = AsyncGatewayClient(config, **kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def gateway_url(self) -> str:
        return self._async.gateway_url

    def fetch_status(self, gateway_url: Optional[str] = None, auth_token: Optional[str] = None) -> GatewayStatus:
        return self._run(self._async.fetch_status(gateway_url, auth_token))

    def test_connection(self, gateway_url: Optional[str] = None, auth_token: Optional[str] = None) -> str:
        return self._run(self._async.test_connection(gateway_url, auth_token))

    def close(self) -> None:
        if self._loop.is_closed():
            return
        self._run(self._async.close())
        self._loop.close()

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
