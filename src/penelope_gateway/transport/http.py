"""
REST HTTP client for the gateway's tools/invoke endpoint.
"""

from typing import Any, Optional

import httpx

DEFAULT_TIMEOUT = 15.0
TOOLS_INVOKE_PATH = "/tools/invoke"


class HttpClient:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            headers={"User-Agent": "penelope-gateway/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def timeout(self) -> float:
        return self._timeout

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    async def post_json(self, url: str, body: dict[str, Any], token: str) -> httpx.Response:
        """POST a JSON body. Status codes are left for the caller to interpret."""
        return await self._client.post(url, json=body, headers=self._auth_headers(token))

    async def close(self) -> None:
        await self._client.aclose()


def tools_invoke_url(base_url: str) -> httpx.URL:
    """Append /tools/invoke to the base URL. Raises ValueError if it is not absolute http(s)."""
    try:
        url = httpx.URL(f"{base_url.rstrip('/')}{TOOLS_INVOKE_PATH}")
    except httpx.InvalidURL as e:
        raise ValueError(str(e)) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"not an absolute http(s) URL: {base_url}")
    return url
