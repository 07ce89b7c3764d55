"""Response normalization.

Turns a raw ``httpx.Response`` into a ResponseDetail. The body is read from
the network once; text and JSON are then derived from that buffer
independently, so a JSON parse failure never costs the text snapshot and
vice versa. Read failures are recorded on the detail instead of raised.
"""

import json
import logging
from typing import Any

import httpx

from .models import RequestSnapshot, ResponseDetail, ResponseSnapshot

logger = logging.getLogger(__name__)


async def response_has_content(response: httpx.Response) -> bool:
    """
    Check whether a response carries a body worth parsing.

    The check looks at the body only; the status code is not consulted.
    """
    if response.headers.get("content-length", "").strip() == "0":
        return False
    content = await response.aread()
    return len(content) > 0


def canonical_headers(headers: httpx.Headers) -> dict[str, str]:
    """Lower-case header names; repeated headers are joined with commas."""
    return {name.lower(): value for name, value in headers.items()}


async def normalize_response(request: httpx.Request, response: httpx.Response) -> ResponseDetail:
    """
    Build the ResponseDetail for an exchange.

    Args:
        request: The request that was sent
        response: The response returned by the transport

    Returns:
        The normalized detail. ``text`` and ``json`` are None when the
        response has no content; failures reading either are appended to
        ``errors``.
    """
    errors: list[Exception] = []
    text: str | None = None
    body: Any = None

    try:
        has_content = await response_has_content(response)
    except Exception as e:
        errors.append(e)
        has_content = False
    logger.debug("Response has content: %s", "Yes" if has_content else "No")

    if has_content:
        try:
            text = response.text
        except Exception as e:
            errors.append(e)
        try:
            body = json.loads(response.content)
        except Exception as e:
            errors.append(e)

    url = str(request.url)
    return ResponseDetail(
        url=url,
        request=RequestSnapshot(
            method=request.method,
            url=url,
            headers=canonical_headers(request.headers),
        ),
        response=ResponseSnapshot(
            status=response.status_code,
            reason=response.reason_phrase,
            url=url,
            headers=canonical_headers(response.headers),
            text=text,
            json=body,
        ),
        errors=errors,
    )
