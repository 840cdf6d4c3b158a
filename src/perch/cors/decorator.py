"""CORS handler decorator.

``wrap(inner, policy)`` returns a handler that calls *inner* once,
converts its return value to a response, and overlays the policy's
CORS headers on it. Status, reason, and body pass through untouched;
for a ``StreamingResponse`` the chunk iterator is handed over by
reference and never read here.

Exceptions raised by *inner* are not caught. Whatever invoked the
wrapped handler (the ASGI handler, in practice) decides what a failure
turns into.
"""

from dataclasses import dataclass

from perch._internal.invoke import invoke
from perch.cors.policy import CorsPolicy
from perch.errors import MissingHandlerError
from perch.http.request import Request
from perch.http.response import AnyResponse
from perch.routing.route import Handler
from perch.server.negotiation import negotiate


@dataclass(frozen=True, slots=True)
class CorsHandler:
    """An application handler with CORS headers merged into its response.

    The router recognises stored ``CorsHandler`` entries when it
    computes which methods a path's preflight should advertise.
    """

    inner: Handler
    policy: CorsPolicy

    async def __call__(self, request: Request) -> AnyResponse:
        response = negotiate(await invoke(self.inner, request))
        return response.with_overlaid_headers(self.policy.headers)


def wrap(inner: Handler | None, policy: CorsPolicy) -> CorsHandler:
    """Wrap *inner* so its responses carry *policy*'s CORS headers.

    Raises:
        MissingHandlerError: *inner* is ``None`` or not callable.
    """
    if inner is None or not callable(inner):
        msg = (
            f"No handler supplied to the CORS wrapper for methods "
            f"{', '.join(policy.allowed_methods)}; got {inner!r}."
        )
        raise MissingHandlerError(msg)
    return CorsHandler(inner=inner, policy=policy)
