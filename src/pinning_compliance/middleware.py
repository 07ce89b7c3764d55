"""Request/response middleware.

The middleware observes every exchange made through a pinning-service
client. ``pre`` gates the request on the RateLimitTracker; ``post``
normalizes the response, records its rate limit signal and hands the
ResponseDetail to a final callback. The response returned to httpx is the
original object, unchanged.

Caller hooks are observers, never gatekeepers: each runs inside its own
error boundary that logs and continues, so broken instrumentation cannot
break the exchange it is watching.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from .models import RateLimitHeaders, ResponseDetail
from .normalizer import normalize_response
from .ratelimit import RateLimitTracker, rate_limit_key

logger = logging.getLogger(__name__)

PreHook = Callable[[httpx.Request], Awaitable[None] | None]
PostHook = Callable[[httpx.Request, httpx.Response], Awaitable[None] | None]
FinalHook = Callable[[ResponseDetail], Awaitable[None] | None]


async def _call_hook(name: str, hook: Callable[..., Any] | None, *args: Any) -> None:
    if hook is None:
        return
    try:
        result = hook(*args)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.exception("In middleware: %s hook failed", name)


class Middleware:
    """
    Rate limit aware request/response interceptor.

    Args:
        tracker: Rate limit ledger shared by every request of a run
        pre_hook: Called with the request before it is sent
        post_hook: Called with the request and raw response
        final_hook: Called with the normalized ResponseDetail
    """

    def __init__(
        self,
        tracker: RateLimitTracker,
        pre_hook: PreHook | None = None,
        post_hook: PostHook | None = None,
        final_hook: FinalHook | None = None,
    ) -> None:
        self.tracker = tracker
        self.pre_hook = pre_hook
        self.post_hook = post_hook
        self.final_hook = final_hook

    async def pre(self, request: httpx.Request) -> httpx.Request:
        """Run the pre hook, then wait out any rate limit on the request's bucket."""
        logger.debug("In middleware.pre")
        await _call_hook("pre", self.pre_hook, request)

        key = rate_limit_key(request.method, str(request.url))
        await self.tracker.before_request(key)
        return request

    async def post(self, request: httpx.Request, response: httpx.Response) -> httpx.Response:
        """Observe a response and return it unchanged."""
        logger.debug("In middleware.post")
        await _call_hook("post", self.post_hook, request, response)

        detail = await normalize_response(request, response)

        key = rate_limit_key(request.method, str(request.url))
        self.tracker.after_response(key, RateLimitHeaders.from_headers(response.headers))

        await _call_hook("final", self.final_hook, detail)
        return response


class MiddlewareTransport(httpx.AsyncBaseTransport):
    """
    httpx transport that runs a Middleware around another transport.

    Args:
        middleware: The middleware to run
        transport: Transport that performs the exchange (defaults to a
            plain ``httpx.AsyncHTTPTransport``)
    """

    def __init__(
        self,
        middleware: Middleware,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.middleware = middleware
        self._transport = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        request = await self.middleware.pre(request)
        response = await self._transport.handle_async_request(request)
        return await self.middleware.post(request, response)

    async def aclose(self) -> None:
        await self._transport.aclose()
