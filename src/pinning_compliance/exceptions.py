"""Exceptions for pinning-compliance."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from .models import ExpectationReport


# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class ComplianceError(Exception):
    """
    Base exception for all pinning-compliance errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Category Exceptions
# ---------------------------------------------------------------------------


class TransportError(ComplianceError):
    """
    Base exception for errors raised while talking to a pinning service.

    These are captured into an ApiCall outcome rather than propagated
    out of ``run_expectations``.
    """

    pass


class ApiCallError(ComplianceError):
    """Base exception for misuse of an ApiCall."""

    pass


class CheckError(ComplianceError):
    """
    Raised when a check script cannot run against the current service.

    This is a caller logic error (for example, deleting a pin that was
    never created). It aborts the check immediately and is reported
    separately from expectation failures.
    """

    pass


# ---------------------------------------------------------------------------
# Transport Exceptions
# ---------------------------------------------------------------------------


class ApiResponseError(TransportError):
    """
    Raised by the client when the service answers with a non-2xx status.

    Attributes:
        status: HTTP status code of the response
        response: The underlying httpx response
    """

    def __init__(self, response: "httpx.Response") -> None:
        self.response = response
        self.status = response.status_code
        super().__init__(
            f"{response.request.method} {response.request.url} "
            f"returned {response.status_code} {response.reason_phrase}"
        )


# ---------------------------------------------------------------------------
# ApiCall Exceptions
# ---------------------------------------------------------------------------


class ApiCallNotResolved(ApiCallError):  # noqa: N818
    """Raised when the outcome of an ApiCall is read before it was awaited."""

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"ApiCall '{title}' has not been resolved; await its result first")


class ExpectationsFailed(ComplianceError):  # noqa: N818
    """
    Raised by ``ExpectationReport.raise_for_failures`` when a report failed.

    Attributes:
        report: The failing report
        failures: Only the expectation results that failed
    """

    def __init__(self, report: "ExpectationReport") -> None:
        self.report = report
        self.failures = report.failures
        titles = ", ".join(f.title for f in self.failures)
        msg = f"Expectations failed for '{report.title}'"
        if titles:
            msg += f": [{titles}]"
        if report.error is not None and not report.results:
            msg += f" (call raised {report.error!r})"
        super().__init__(msg)


# ---------------------------------------------------------------------------
# Configuration Exceptions
# ---------------------------------------------------------------------------


class SchemaNotFoundError(ComplianceError):
    """Raised when a schema is requested by an unknown name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Schema not found: {name}")


class ConfigurationError(ComplianceError):
    """Raised when the harness configuration is invalid."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for {field}: {reason}")
