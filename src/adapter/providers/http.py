from typing import Any, Dict, Optional

import httpx

DEFAULT_TIMEOUT = 30.0


class HttpProvider:
    """
    Base for providers talking to a JSON HTTP API.

    A shared `httpx.AsyncClient` may be injected (tests pass one built on
    `httpx.MockTransport`); otherwise a short-lived client is opened per call.
    Non-2xx responses raise `httpx.HTTPStatusError`.
    """

    name = "http"
    base_url = ""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._client = client
        self._timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        if self._client is not None:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
        response.raise_for_status()
        return response
