"""Tests for models."""

import httpx
import pytest

from pinning_compliance.exceptions import ConfigurationError
from pinning_compliance.models import (
    CheckOutcome,
    ComplianceConfig,
    ExpectationReport,
    ExpectationResult,
    RateLimitHeaders,
    ResponseSnapshot,
    ServiceAndTokenPair,
)

PAIR = ServiceAndTokenPair("https://pinning.test", "token")


class TestRateLimitHeaders:
    """Tests for RateLimitHeaders.from_headers."""

    def test_parses_all_headers(self) -> None:
        headers = httpx.Headers(
            {"X-RateLimit-Limit": "100", "X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"}
        )

        parsed = RateLimitHeaders.from_headers(headers)

        assert parsed == RateLimitHeaders(limit=100, remaining=0, reset=1700000000.0)
        assert parsed.exhausted is True

    def test_limit_is_optional(self) -> None:
        parsed = RateLimitHeaders.from_headers(
            {"x-ratelimit-remaining": "5", "x-ratelimit-reset": "1700000000.5"}
        )
        assert parsed == RateLimitHeaders(limit=None, remaining=5, reset=1700000000.5)
        assert parsed.exhausted is False

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"x-ratelimit-remaining": "0"},
            {"x-ratelimit-reset": "1700000000"},
            {"x-ratelimit-remaining": "none", "x-ratelimit-reset": "1700000000"},
            {"x-ratelimit-remaining": "0", "x-ratelimit-reset": ""},
            {"x-ratelimit-remaining": "0", "x-ratelimit-reset": "nan"},
        ],
    )
    def test_no_signal(self, headers: dict[str, str]) -> None:
        assert RateLimitHeaders.from_headers(headers) is None

    @pytest.mark.parametrize(("remaining", "exhausted"), [("0", True), ("0.0", True), ("0.5", False), ("1", False)])
    def test_fractional_remaining_not_truncated(self, remaining: str, exhausted: bool) -> None:
        parsed = RateLimitHeaders.from_headers(
            {"x-ratelimit-remaining": remaining, "x-ratelimit-reset": "10"}
        )
        assert parsed is not None
        assert parsed.exhausted is exhausted

    def test_non_numeric_limit_ignored(self) -> None:
        parsed = RateLimitHeaders.from_headers(
            {"x-ratelimit-limit": "lots", "x-ratelimit-remaining": "1", "x-ratelimit-reset": "10"}
        )
        assert parsed is not None
        assert parsed.limit is None


class TestResponseSnapshot:
    @pytest.mark.parametrize(("status", "ok"), [(200, True), (202, True), (301, False), (403, False)])
    def test_ok(self, status: int, ok: bool) -> None:
        snapshot = ResponseSnapshot(status=status, reason="", url="https://pinning.test/pins")
        assert snapshot.ok is ok


class TestExpectationReport:
    """Tests for ExpectationReport pass/fail rules."""

    def test_empty_report_passes(self) -> None:
        assert ExpectationReport(title="t").passed is True

    def test_any_failure_fails(self) -> None:
        report = ExpectationReport(
            title="t",
            results=[
                ExpectationResult(title="a", passed=True),
                ExpectationResult(title="b", passed=False, reason="nope"),
            ],
        )
        assert report.passed is False
        assert [f.title for f in report.failures] == ["b"]

    def test_unjudged_error_fails(self) -> None:
        assert ExpectationReport(title="t", error=RuntimeError("x")).passed is False

    def test_judged_error_passes(self) -> None:
        report = ExpectationReport(
            title="t",
            results=[ExpectationResult(title="a", passed=True)],
            error=RuntimeError("x"),
        )
        assert report.passed is True

    def test_schema_result_counts(self) -> None:
        report = ExpectationReport(
            title="t",
            results=[ExpectationResult(title="a", passed=True)],
            schema_result=ExpectationResult(title="schema", passed=False, reason="bad"),
        )
        assert [r.title for r in report.all_results] == ["a", "schema"]
        assert report.passed is False


class TestCheckOutcome:
    def test_error_fails_outcome(self) -> None:
        outcome = CheckOutcome(name="c", pair=PAIR, error=RuntimeError("x"))
        assert outcome.errored is True
        assert outcome.passed is False

    def test_failing_report_fails_outcome(self) -> None:
        failing = ExpectationReport(
            title="t", results=[ExpectationResult(title="a", passed=False)]
        )
        outcome = CheckOutcome(name="c", pair=PAIR, reports=[failing])
        assert outcome.errored is False
        assert outcome.passed is False


class TestComplianceConfig:
    """Tests for ComplianceConfig validation."""

    def test_defaults(self) -> None:
        config = ComplianceConfig(pairs=[PAIR])
        assert config.checks == []
        assert config.timeout_seconds == 30.0

    def test_requires_pairs(self) -> None:
        with pytest.raises(ConfigurationError, match="at least one service"):
            ComplianceConfig(pairs=[])

    def test_requires_http_endpoint(self) -> None:
        with pytest.raises(ConfigurationError, match="http"):
            ComplianceConfig(pairs=[ServiceAndTokenPair("pinning.test", "t")])

    def test_requires_positive_timeout(self) -> None:
        with pytest.raises(ConfigurationError, match="timeout_seconds"):
            ComplianceConfig(pairs=[PAIR], timeout_seconds=0)
