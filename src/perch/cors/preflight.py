"""Preflight (OPTIONS) responses."""

from dataclasses import dataclass

from perch.cors.policy import CorsPolicy
from perch.http.request import Request
from perch.http.response import Response


def respond_preflight(policy: CorsPolicy) -> Response:
    """A 204 with no body, no content type, and exactly the policy headers."""
    return Response(body=b"", status=204, reason="No Content", content_type=None).with_headers(
        policy.headers
    )


@dataclass(frozen=True, slots=True)
class PreflightHandler:
    """The handler stored under ``OPTIONS`` for a CORS-enabled path or prefix.

    Answers every request with the same response; it never looks at
    the request and never calls application code.
    """

    policy: CorsPolicy

    async def __call__(self, request: Request) -> Response:  # noqa: ARG002
        return respond_preflight(self.policy)


def preflight_handler(policy: CorsPolicy) -> PreflightHandler:
    return PreflightHandler(policy)
