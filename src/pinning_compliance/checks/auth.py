"""Authentication checks."""

from ..api_call import ApiCall
from ..models import ServiceAndTokenPair
from ..schemas import get_schema
from ..session import Session

INVALID_TOKEN = "purposefullyInvalid"


async def check_invalid_bearer_token(pair: ServiceAndTokenPair, session: Session) -> None:
    """A request carrying a bogus bearer token is rejected with a 403."""
    api_call = ApiCall(
        pair=ServiceAndTokenPair(pair.endpoint, INVALID_TOKEN),
        fn=lambda client: client.pins_get(),
        schema=get_schema("Failure"),
        title="Request with invalid token",
        session=session,
    )
    api_call.expect(
        "Returns a 403",
        lambda ctx: ctx.response is not None and ctx.response.status == 403,
    )
    await api_call.run_expectations()
