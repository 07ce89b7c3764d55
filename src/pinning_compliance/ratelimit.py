"""Adaptive rate limit backpressure.

When a response reports that no request tokens remain, the tracker
schedules a wait that resolves at the reported reset instant. The next
request in the same quota bucket awaits every pending wait before it is
sent, so the harness slows down instead of tripping the service's limit.

Requests are grouped into buckets by RateLimitKey. DELETE requests drop
the trailing path segment (the request id) so that deletes of different
pins share a bucket.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from .models import RateLimitHeaders, RateLimitKey

logger = logging.getLogger(__name__)


def rate_limit_key(method: str | None, url: str) -> RateLimitKey:
    """
    Derive the quota bucket of a request.

    Args:
        method: HTTP method (None is reported as ``Unknown``)
        url: Request URL; the query string is ignored

    Returns:
        ``"<METHOD>:<url>"``, with the last path segment removed for DELETE
    """
    key = method.upper() if method else "Unknown"
    url_without_query = url.split("?", 1)[0]
    if key == "DELETE":
        # The last segment of a delete url is the request id.
        url_without_query = url_without_query.rsplit("/", 1)[0]
    return f"{key}:{url_without_query}"


async def wait_until(
    instant: float,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """
    Sleep until a wall-clock instant.

    Args:
        instant: Epoch seconds to wait for
        clock: Source of the current epoch time
        sleep: Coroutine used to suspend
    """
    delay = instant - clock()
    if delay > 0:
        await sleep(delay)


@dataclass
class RateLimitTracker:
    """
    Per-run ledger of pending quota recovery waits.

    One tracker is constructed per compliance run and injected into every
    middleware, so all requests of a run share quota state while separate
    runs (and tests) stay isolated.

    The wait queue of a key is mutated by ``before_request`` (drain) and
    ``after_response`` (enqueue) of overlapping requests. Neither mutation
    awaits between reading and writing the queue, so both are atomic with
    respect to the event loop. A drain awaits a snapshot of the queue and
    leaves the queue in place, so overlapping requests on the key hold on
    the same waits. Only the snapshot is removed once it has elapsed; waits
    enqueued meanwhile are left for the next request.

    Args:
        clock: Source of the current epoch time
        sleep: Coroutine used by recovery waits
    """

    clock: Callable[[], float] = time.time
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _waits: dict[RateLimitKey, list["asyncio.Future[None]"]] = field(
        init=False, default_factory=dict
    )

    def __contains__(self, key: RateLimitKey) -> bool:
        return key in self._waits

    def pending(self, key: RateLimitKey) -> int:
        """Number of recovery waits queued for a key."""
        return len(self._waits.get(key, ()))

    async def before_request(self, key: RateLimitKey) -> None:
        """
        Block until every pending recovery wait for ``key`` has elapsed.

        Waits run concurrently. A failing wait is logged and ignored so the
        request proceeds instead of hanging.
        """
        waits = self._waits.get(key)
        if waits is None:
            self._waits[key] = []
            return
        if not waits:
            return

        batch = list(waits)
        logger.debug("%s: waiting on %d rate limit reset(s)", key, len(batch))
        results = await asyncio.gather(*batch, return_exceptions=True)
        waits = self._waits.get(key, [])
        self._waits[key] = [w for w in waits if w not in batch]
        for result in results:
            if isinstance(result, BaseException):
                logger.error("%s: rate limit wait failed: %r", key, result)

    def after_response(self, key: RateLimitKey, headers: RateLimitHeaders | None) -> None:
        """
        Record the rate limit signal of a response.

        When no tokens remain, a wait resolving at the reset instant is
        queued for the next request on ``key``. Without a signal nothing
        changes.
        """
        if headers is None:
            return

        logger.debug(
            "%s: Rate limit is %s and we have %g tokens remaining.",
            key,
            headers.limit,
            headers.remaining,
        )
        if not headers.exhausted:
            return

        logger.debug(
            "%s: No rate tokens remaining, we need to wait until epoch %.3f",
            key,
            headers.reset,
        )
        wait = asyncio.ensure_future(wait_until(headers.reset, clock=self.clock, sleep=self.sleep))
        self._waits.setdefault(key, []).append(wait)
