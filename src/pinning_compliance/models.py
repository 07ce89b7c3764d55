"""Core models for pinning-compliance."""

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from .exceptions import ConfigurationError, ExpectationsFailed

RateLimitKey = str
"""Quota bucket identifier, ``"<METHOD>:<url>"``."""


class ServiceAndTokenPair(NamedTuple):
    """A pinning-service endpoint and the bearer token used against it."""

    endpoint: str
    token: str


@dataclass(frozen=True)
class RateLimitHeaders:
    """
    Rate limit signal reported by a response.

    Attributes:
        limit: Requests allowed per window (None if not reported)
        remaining: Requests left in the current window
        reset: Epoch seconds at which the window resets
    """

    limit: int | None
    remaining: float
    reset: float

    @classmethod
    def from_headers(cls, headers: Any) -> "RateLimitHeaders | None":
        """
        Parse ``x-ratelimit-*`` headers.

        Parsing is best-effort: a missing or non-numeric ``remaining`` or
        ``reset`` header means there is no rate limit signal.

        Args:
            headers: Case-insensitive mapping of response headers

        Returns:
            The parsed headers, or None when no usable signal is present
        """
        reset = _to_number(headers.get("x-ratelimit-reset"))
        remaining = _to_number(headers.get("x-ratelimit-remaining"))
        if reset is None or remaining is None:
            return None
        limit = _to_number(headers.get("x-ratelimit-limit"))
        return cls(
            limit=int(limit) if limit is not None else None,
            remaining=remaining,
            reset=reset,
        )

    @property
    def exhausted(self) -> bool:
        """True if no request tokens remain in the current window."""
        return self.remaining == 0


def _to_number(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):  # NaN / inf
        return None
    return number


@dataclass
class RequestSnapshot:
    """The parts of an outgoing request recorded alongside its response."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class ResponseSnapshot:
    """
    Normalized response metadata and body.

    Header names are lower-cased. ``text`` and ``json`` are None when the
    response carried no content or the respective read failed.
    """

    status: int
    reason: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    text: str | None = None
    json: Any = None

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300


@dataclass
class ResponseDetail:
    """
    Snapshot of a request/response exchange.

    This is the single source of truth handed to hooks and ApiCall
    consumers; nothing else re-reads the response body.
    """

    url: str
    request: RequestSnapshot
    response: ResponseSnapshot
    errors: list[Exception] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Expectation reporting
# ---------------------------------------------------------------------------


@dataclass
class ExpectationResult:
    """
    Outcome of a single expectation.

    Attributes:
        title: Expectation title
        passed: True if the predicate returned a truthy value
        reason: Human readable failure reason (None when passed)
        error: Exception raised by the predicate, if any
    """

    title: str
    passed: bool
    reason: str | None = None
    error: BaseException | None = None


@dataclass
class ExpectationReport:
    """
    Aggregate result of ``ApiCall.run_expectations``.

    A report passes when every expectation passed. If the call itself
    raised, the report also requires at least one expectation to have
    judged that outcome; an error nobody looked at is a failure.

    ``schema_result`` is kept apart from ``results`` because it is
    added by the ApiCall, not registered by the check.
    """

    title: str
    results: list[ExpectationResult] = field(default_factory=list)
    error: BaseException | None = None
    schema_result: ExpectationResult | None = None

    @property
    def all_results(self) -> list[ExpectationResult]:
        """Registered expectations followed by the schema check, if any."""
        if self.schema_result is None:
            return list(self.results)
        return [*self.results, self.schema_result]

    @property
    def failures(self) -> list[ExpectationResult]:
        """Only the expectations (and schema check) that failed."""
        return [r for r in self.all_results if not r.passed]

    @property
    def passed(self) -> bool:
        if self.error is not None and not self.results:
            return False
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise ExpectationsFailed if this report did not pass."""
        if not self.passed:
            raise ExpectationsFailed(self)


@dataclass
class CheckOutcome:
    """
    Result of running one check against one service.

    ``reports`` holds the expectation reports the check produced; ``error``
    holds an exception that stopped the check from running to completion.
    """

    name: str
    pair: ServiceAndTokenPair
    reports: list[ExpectationReport] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def errored(self) -> bool:
        return self.error is not None

    @property
    def passed(self) -> bool:
        return not self.errored and all(r.passed for r in self.reports)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class ComplianceConfig:
    """
    Configuration for a compliance run.

    Attributes:
        pairs: Services to check, each with its bearer token
        checks: Names of checks to run (empty means all registered checks)
        timeout_seconds: Per-request HTTP timeout
    """

    pairs: list[ServiceAndTokenPair]
    checks: list[str] = field(default_factory=list)
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if not self.pairs:
            raise ConfigurationError("pairs", "at least one service and token is required")
        for pair in self.pairs:
            if not pair.endpoint.startswith(("http://", "https://")):
                raise ConfigurationError(
                    "pairs", f"service endpoint must be an http(s) URL: {pair.endpoint!r}"
                )
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds", "must be positive")
