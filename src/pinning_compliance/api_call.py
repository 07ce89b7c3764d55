"""ApiCall: one logical request and the expectations judged against it."""

import asyncio
import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from .client import PinningServiceClient
from .exceptions import ApiCallNotResolved
from .middleware import Middleware
from .models import (
    ExpectationReport,
    ExpectationResult,
    ResponseDetail,
    ResponseSnapshot,
    ServiceAndTokenPair,
)
from .schemas import validation_errors
from .session import Session

logger = logging.getLogger(__name__)

CallFn = Callable[[PinningServiceClient], Awaitable[Any]]
Predicate = Callable[["ExpectationContext"], bool | Awaitable[bool]]


@dataclass
class Expectation:
    """A named predicate evaluated against a resolved ApiCall."""

    title: str
    fn: Predicate


@dataclass
class ExpectationContext:
    """
    What an expectation predicate gets to look at.

    Attributes:
        api_call: The call being judged
        result: Value returned by the call function (None if it raised)
        details: Normalized detail of the last exchange (None if no
            response was received)
        error: Exception raised by the call function, if any
    """

    api_call: "ApiCall"
    result: Any
    details: ResponseDetail | None
    error: BaseException | None

    @property
    def response(self) -> ResponseSnapshot | None:
        return self.details.response if self.details is not None else None


class ApiCall:
    """
    A single request against a pinning service, run exactly once.

    Nothing is executed on construction. The first access to ``result``
    schedules the call function as a task; every later access (including
    concurrent ones made before the first completes) returns that same
    task. A raised exception is captured as the outcome instead of
    propagating.

    Example:
        session = Session()
        call = ApiCall(pair, lambda client: client.pins_get(), "List pins", session=session)
        call.expect("Returns a 200", lambda ctx: ctx.response.status == 200)
        report = await call.run_expectations()

    Args:
        pair: Service endpoint and bearer token to call with
        fn: Coroutine function taking a configured client
        title: Human readable name of the operation
        schema: JSON Schema the response body must match
        session: Run state shared by every call of the run (rate limit
            tracker, transport, reports)
    """

    def __init__(
        self,
        pair: ServiceAndTokenPair,
        fn: CallFn,
        title: str | None = None,
        schema: dict[str, Any] | None = None,
        *,
        session: Session,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.pair = ServiceAndTokenPair(*pair)
        self.fn = fn
        self.title = title or f"ApiCall {self.id[:8]}"
        self.schema = schema
        self.session = session
        self.expectations: list[Expectation] = []
        self.exchanges: list[ResponseDetail] = []

        self._task: asyncio.Task[Any] | None = None
        self._resolved = False
        self._result: Any = None
        self._error: BaseException | None = None

    def __repr__(self) -> str:
        return f"ApiCall(title={self.title!r}, endpoint={self.pair.endpoint!r})"

    # -------------------------------------------------------------------------
    # Outcome
    # -------------------------------------------------------------------------

    @property
    def result(self) -> "asyncio.Task[Any]":
        """
        Awaitable outcome of the call: its value, or None if it raised.

        Must be accessed from a running event loop.
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self._execute())
        return self._task

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def error(self) -> BaseException | None:
        self._check_resolved()
        return self._error

    @property
    def details(self) -> ResponseDetail | None:
        """Normalized detail of the last exchange made by the call."""
        self._check_resolved()
        return self.exchanges[-1] if self.exchanges else None

    @property
    def response(self) -> ResponseSnapshot | None:
        """Response of the last exchange (None if nothing was received)."""
        details = self.details
        return details.response if details is not None else None

    def _check_resolved(self) -> None:
        if not self._resolved:
            raise ApiCallNotResolved(self.title)

    def _record(self, detail: ResponseDetail) -> None:
        self.exchanges.append(detail)

    async def _execute(self) -> Any:
        middleware = Middleware(self.session.tracker, final_hook=self._record)
        try:
            async with PinningServiceClient(
                self.pair,
                middleware,
                transport=self.session.transport,
                timeout=self.session.timeout_seconds,
            ) as client:
                self._result = await self.fn(client)
        except Exception as e:
            logger.debug("%s: call raised %r", self.title, e)
            self._error = e
            self._result = None
        self._resolved = True
        return self._result

    # -------------------------------------------------------------------------
    # Expectations
    # -------------------------------------------------------------------------

    def expect(self, title: str, fn: Predicate) -> "ApiCall":
        """Register an expectation; it is evaluated by ``run_expectations``."""
        self.expectations.append(Expectation(title=title, fn=fn))
        return self

    async def run_expectations(self) -> ExpectationReport:
        """
        Resolve the call and evaluate every expectation in order.

        All expectations run even after one fails. Neither a failing
        predicate nor an exception from the call function propagates; both
        become entries in the returned report, which is also appended to
        the session's reports.
        """
        result = await self.result
        context = ExpectationContext(
            api_call=self,
            result=result,
            details=self.details,
            error=self._error,
        )

        report = ExpectationReport(title=self.title, error=self._error)
        for expectation in list(self.expectations):
            report.results.append(await _evaluate(expectation, context))
        if self.schema is not None:
            report.schema_result = _validate_schema(self.schema, context)

        _log_report(report)
        self.session.reports.append(report)
        return report


async def _evaluate(expectation: Expectation, context: ExpectationContext) -> ExpectationResult:
    try:
        outcome = expectation.fn(context)
        if inspect.isawaitable(outcome):
            outcome = await outcome
    except Exception as e:
        return ExpectationResult(
            title=expectation.title,
            passed=False,
            reason=f"{type(e).__name__}: {e}",
            error=e,
        )
    if not outcome:
        return ExpectationResult(
            title=expectation.title,
            passed=False,
            reason=f"Expectation returned {outcome!r}",
        )
    return ExpectationResult(title=expectation.title, passed=True)


def _validate_schema(schema: dict[str, Any], context: ExpectationContext) -> ExpectationResult:
    title = f"Response body matches the {schema.get('title', 'expected')} schema"
    response = context.response
    if response is None or response.json is None:
        return ExpectationResult(title=title, passed=False, reason="Response has no JSON body")
    errors = validation_errors(schema, response.json)
    if errors:
        return ExpectationResult(title=title, passed=False, reason="; ".join(errors))
    return ExpectationResult(title=title, passed=True)


def _log_report(report: ExpectationReport) -> None:
    if report.error is not None:
        logger.info("%s: call raised %r", report.title, report.error)
    for result in report.all_results:
        if result.passed:
            logger.info("%s: PASS %s", report.title, result.title)
        else:
            logger.info("%s: FAIL %s (%s)", report.title, result.title, result.reason)
