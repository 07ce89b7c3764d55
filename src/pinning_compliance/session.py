"""Per-run state shared by the ApiCalls of a compliance run."""

from dataclasses import dataclass, field

import httpx

from .client import DEFAULT_TIMEOUT_SECONDS
from .models import ExpectationReport
from .ratelimit import RateLimitTracker


@dataclass
class Session:
    """
    Shared state of one compliance run.

    Attributes:
        tracker: Rate limit ledger used by every request of the run
        transport: Transport override for the pinning-service client
            (None uses real HTTP)
        timeout_seconds: Per-request HTTP timeout
        reports: Expectation reports produced during the run, in order
    """

    tracker: RateLimitTracker = field(default_factory=RateLimitTracker)
    transport: httpx.AsyncBaseTransport | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    reports: list[ExpectationReport] = field(default_factory=list)
