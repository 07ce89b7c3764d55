"""Compliance checks and the runner that executes them.

A check is a coroutine function taking a ServiceAndTokenPair and a
Session. It composes ApiCalls, registers expectations and runs them;
reports land on the session. A check that cannot run raises (usually
CheckError), which the runner records separately from failed
expectations.
"""

import logging
from collections.abc import Awaitable, Callable

import httpx

from ..exceptions import ConfigurationError
from ..models import CheckOutcome, ComplianceConfig, ServiceAndTokenPair
from ..ratelimit import RateLimitTracker
from ..session import Session
from .auth import check_invalid_bearer_token
from .delete import delete_new_pin

logger = logging.getLogger(__name__)

Check = Callable[[ServiceAndTokenPair, Session], Awaitable[None]]

CHECKS: dict[str, Check] = {
    "check-invalid-bearer-token": check_invalid_bearer_token,
    "delete-new-pin": delete_new_pin,
}


def select_checks(names: list[str] | None = None) -> dict[str, Check]:
    """
    Resolve check names against the registry.

    Args:
        names: Check names; empty or None selects every check

    Raises:
        ConfigurationError: If a name is not registered
    """
    if not names:
        return dict(CHECKS)
    unknown = [n for n in names if n not in CHECKS]
    if unknown:
        raise ConfigurationError("checks", f"unknown check(s): {', '.join(unknown)}")
    return {n: CHECKS[n] for n in names}


async def run_check(
    name: str,
    check: Check,
    pair: ServiceAndTokenPair,
    session: Session,
) -> CheckOutcome:
    """Run one check and capture its reports or the error that stopped it."""
    outcome = CheckOutcome(name=name, pair=pair)
    first_report = len(session.reports)
    try:
        await check(pair, session)
    except Exception as e:
        logger.error("%s against %s could not run: %r", name, pair.endpoint, e)
        outcome.error = e
    outcome.reports = session.reports[first_report:]
    return outcome


async def run_checks(
    config: ComplianceConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[CheckOutcome]:
    """
    Run the configured checks against every configured service.

    Checks run one after another and share a single RateLimitTracker, so
    quota exhausted by one check slows down the next request in the same
    bucket.

    Args:
        config: Services, tokens and check selection
        transport: Transport override (for tests)

    Returns:
        One outcome per (service, check), in execution order
    """
    checks = select_checks(config.checks)
    session = Session(
        tracker=RateLimitTracker(),
        transport=transport,
        timeout_seconds=config.timeout_seconds,
    )
    outcomes = []
    for pair in config.pairs:
        for name, check in checks.items():
            logger.debug("Running %s against %s", name, pair.endpoint)
            outcomes.append(await run_check(name, check, pair, session))
    return outcomes


__all__ = [
    "CHECKS",
    "Check",
    "check_invalid_bearer_token",
    "delete_new_pin",
    "run_check",
    "run_checks",
    "select_checks",
]
