# sdk/http_transport.py
import logging
from typing import Any, Mapping, Optional

import httpx

from stocktask.errors import TransportFailure, error_from_response
from stocktask.transport import ResourceTransport

logger = logging.getLogger(__name__)


class HttpTransport(ResourceTransport):
    """Async transport against a running stocktask (or compatible) server."""

    assigns_defaults = False

    def __init__(
        self,
        base_url: str = "http://localhost:8085",
        api_key: Optional[str] = None,
        timeout: float = 10,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
        self.client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout, headers=headers)

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._request("GET", url, params=_encode_params(params))

    async def post(self, url: str, body: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._request("POST", url, json=dict(body) if body is not None else None)

    async def put(self, url: str, body: Mapping[str, Any]) -> Any:
        return await self._request("PUT", url, json=dict(body))

    async def delete(self, url: str) -> Any:
        return await self._request("DELETE", url)

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            r = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportFailure(f"{method} {url} failed: {e}") from e

        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"detail": r.text}
            err = error_from_response(r.status_code, payload, method, url)
            logger.warning("%s %s -> HTTP %s (%s)", method, url, r.status_code, err.code)
            raise err
        return r.json()


def _encode_params(params: Optional[Mapping[str, Any]]) -> Optional[dict]:
    # query strings carry booleans as true/false
    if not params:
        return None
    return {k: (str(v).lower() if isinstance(v, bool) else v) for k, v in params.items() if v is not None}
