"""
pinning-compliance: compliance checks for IPFS Pinning Service API providers.

This library provides:
- An async pinning-service client whose middleware records every exchange
- Adaptive rate limit backpressure driven by ``x-ratelimit-*`` headers
- ApiCall, a run-once request with deferred, non-short-circuiting
  expectations
- Ready-made checks and a ``pinning-compliance`` CLI

Example:
    from pinning_compliance import ApiCall, ServiceAndTokenPair, Session

    pair = ServiceAndTokenPair("https://pinning.example.com", token)
    session = Session()
    call = ApiCall(
        pair, lambda client: client.pins_get(), title="List pins", session=session
    )
    call.expect("Returns a 200", lambda ctx: ctx.response.status == 200)
    report = await call.run_expectations()
    report.raise_for_failures()
"""

from .api_call import ApiCall, Expectation, ExpectationContext
from .cid import inline_cid
from .client import PinningServiceClient
from .exceptions import (
    ApiCallError,
    ApiCallNotResolved,
    ApiResponseError,
    CheckError,
    ComplianceError,
    ConfigurationError,
    ExpectationsFailed,
    SchemaNotFoundError,
    TransportError,
)
from .middleware import Middleware, MiddlewareTransport
from .models import (
    CheckOutcome,
    ComplianceConfig,
    ExpectationReport,
    ExpectationResult,
    RateLimitHeaders,
    RateLimitKey,
    RequestSnapshot,
    ResponseDetail,
    ResponseSnapshot,
    ServiceAndTokenPair,
)
from .normalizer import normalize_response, response_has_content
from .ratelimit import RateLimitTracker, rate_limit_key, wait_until
from .schemas import get_schema
from .session import Session

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Main classes
    "ApiCall",
    "Middleware",
    "MiddlewareTransport",
    "PinningServiceClient",
    "RateLimitTracker",
    "Session",
    # Models
    "CheckOutcome",
    "ComplianceConfig",
    "Expectation",
    "ExpectationContext",
    "ExpectationReport",
    "ExpectationResult",
    "RateLimitHeaders",
    "RateLimitKey",
    "RequestSnapshot",
    "ResponseDetail",
    "ResponseSnapshot",
    "ServiceAndTokenPair",
    # Functions
    "get_schema",
    "inline_cid",
    "normalize_response",
    "rate_limit_key",
    "response_has_content",
    "wait_until",
    # Exceptions - Base
    "ComplianceError",
    # Exceptions - Categories
    "TransportError",
    "ApiCallError",
    # Exceptions
    "ApiResponseError",
    "ApiCallNotResolved",
    "CheckError",
    "ConfigurationError",
    "ExpectationsFailed",
    "SchemaNotFoundError",
]
