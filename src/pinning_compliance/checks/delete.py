"""Pin deletion checks."""

from ..api_call import ApiCall
from ..cid import inline_cid
from ..exceptions import CheckError
from ..models import ServiceAndTokenPair
from ..session import Session
from .helpers import get_request_id


async def delete_new_pin(pair: ServiceAndTokenPair, session: Session) -> None:
    """
    Create a pin for a fresh inline CID, then delete it.

    Raises:
        CheckError: If the pin could not be created, so there is nothing
            to delete
    """
    cid = inline_cid()
    create_call = ApiCall(
        pair=pair,
        fn=lambda client: client.pins_post(pin={"cid": cid}),
        title="Can create and then delete a new pin",
        session=session,
    )

    pin = await create_call.result
    create_call.expect("Pin was created", lambda ctx: ctx.result is not None)
    create_call.expect(
        "Creation response code is 200",
        lambda ctx: ctx.api_call.response.status == 200,
    )

    if pin is None:
        raise CheckError("No Pin in ApiCall to delete")

    requestid = get_request_id(pin, create_call)
    delete_call = ApiCall(
        pair=pair,
        fn=lambda client: client.pins_requestid_delete(requestid=requestid),
        title="Can delete pin",
        session=session,
    )
    await delete_call.result

    create_call.expect("Pin was deleted", lambda ctx: delete_call.response.ok)
    create_call.expect(
        "Pin deletion response code is 202",
        lambda ctx: delete_call.response.status == 202,
    )
    await create_call.run_expectations()
