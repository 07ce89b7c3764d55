"""Async client for the IPFS Pinning Service API.

Only the endpoints exercised by compliance checks are exposed. Every
request goes through a MiddlewareTransport, so rate limit backpressure and
response recording apply to all of them.
"""

import json
import logging
from typing import Any

import httpx

from .exceptions import ApiResponseError
from .middleware import Middleware, MiddlewareTransport
from .models import ServiceAndTokenPair

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class PinningServiceClient:
    """
    Pinning service client bound to one endpoint and bearer token.

    Methods return the decoded JSON payload and raise ApiResponseError for
    any non-2xx status.

    Example:
        async with PinningServiceClient(pair, middleware) as client:
            pin = await client.pins_post(pin={"cid": cid})
            await client.pins_requestid_delete(requestid=pin["requestid"])

    Args:
        pair: Service endpoint and bearer token
        middleware: Middleware observing every exchange
        transport: Transport performing the exchange (for tests)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        pair: ServiceAndTokenPair,
        middleware: Middleware,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.pair = pair
        self._http = httpx.AsyncClient(
            base_url=pair.endpoint,
            headers={
                "Authorization": f"Bearer {pair.token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=MiddlewareTransport(middleware, transport),
        )

    async def close(self) -> None:
        """Close the underlying connections."""
        await self._http.aclose()

    async def __aenter__(self) -> "PinningServiceClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._http.request(method, path, **kwargs)
        if not response.is_success:
            raise ApiResponseError(response)
        if not response.content:
            return None
        return response.json()

    # -------------------------------------------------------------------------
    # Pins
    # -------------------------------------------------------------------------

    async def pins_get(
        self,
        cid: list[str] | None = None,
        name: str | None = None,
        match: str | None = None,
        status: list[str] | None = None,
        before: str | None = None,
        after: str | None = None,
        limit: int | None = None,
        meta: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        List pin objects (``GET /pins``).

        Returns:
            PinResults payload: ``{"count": int, "results": [PinStatus, ...]}``
        """
        params: dict[str, Any] = {}
        if cid:
            params["cid"] = ",".join(cid)
        if name is not None:
            params["name"] = name
        if match is not None:
            params["match"] = match
        if status:
            params["status"] = ",".join(status)
        if before is not None:
            params["before"] = before
        if after is not None:
            params["after"] = after
        if limit is not None:
            params["limit"] = limit
        if meta:
            params["meta"] = json.dumps(meta)
        return await self._request("GET", "/pins", params=params)  # type: ignore[no-any-return]

    async def pins_post(self, pin: dict[str, Any]) -> dict[str, Any]:
        """Add a pin object (``POST /pins``); returns the PinStatus."""
        return await self._request("POST", "/pins", json=pin)  # type: ignore[no-any-return]

    async def pins_requestid_get(self, requestid: str) -> dict[str, Any]:
        """Get a pin object by request id (``GET /pins/{requestid}``)."""
        return await self._request("GET", f"/pins/{requestid}")  # type: ignore[no-any-return]

    async def pins_requestid_post(self, requestid: str, pin: dict[str, Any]) -> dict[str, Any]:
        """Replace a pin object (``POST /pins/{requestid}``); returns the new PinStatus."""
        return await self._request(  # type: ignore[no-any-return]
            "POST", f"/pins/{requestid}", json=pin
        )

    async def pins_requestid_delete(self, requestid: str) -> None:
        """Remove a pin object (``DELETE /pins/{requestid}``)."""
        await self._request("DELETE", f"/pins/{requestid}")
