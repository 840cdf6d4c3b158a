"""ASGI handler — translates ASGI scope/messages to perch types.

The only component that touches raw ASGI for HTTP. Converts the scope
to a ``Request``, looks the route up in the dispatcher, runs the
stored handler, and sends the response back through ASGI ``send()``.
"""

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke
from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import AnyResponse, StreamingResponse
from perch.routing.dispatcher import Dispatcher
from perch.server.errors import handle_http_error, handle_internal_error
from perch.server.negotiation import negotiate
from perch.server.sender import send_response, send_streaming_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    debug: bool,
) -> None:
    """Process a single HTTP request through lookup, handler, and send."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await dispatch(dispatcher, request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)

    if isinstance(response, StreamingResponse):
        await send_streaming_response(response, send)
    else:
        await send_response(response, send)


async def dispatch(dispatcher: Dispatcher, request: Request) -> AnyResponse:
    """Look up and run the handler for *request*.

    Handler exceptions (and ``NotFound`` from the lookup) propagate.
    """
    match = dispatcher.lookup(request.method, request.path)
    if match.kind == "prefix":
        request = request.with_prefix(match.key)
    return negotiate(await invoke(match.handler, request))
