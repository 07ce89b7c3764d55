"""Helpers shared by check scripts."""

from typing import Any

from ..api_call import ApiCall
from ..exceptions import CheckError


def get_request_id(pin: Any, api_call: ApiCall) -> str:
    """
    Extract the ``requestid`` of a PinStatus returned by ``api_call``.

    Raises:
        CheckError: If the payload carries no request id
    """
    requestid = pin.get("requestid") if isinstance(pin, dict) else None
    if not isinstance(requestid, str) or not requestid:
        raise CheckError(f"{api_call.title}: response has no requestid")
    return requestid
