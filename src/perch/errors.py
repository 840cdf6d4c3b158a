"""Perch exception hierarchy.

Shared across the dispatcher, the CORS router, the App, and the ASGI
handler so every module raises and catches the same types.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when route registration or app configuration is invalid.

    Always raised at registration time, never while serving a request.
    """


class InvalidRouteSpecError(ConfigurationError):
    """A RouteSpec has both or neither of ``path``/``path_prefix`` set,
    or one of them is malformed."""


class MissingHandlerError(ConfigurationError):
    """A CORS wrapper was requested without a real handler to wrap."""


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher (or by handlers). The ASGI handler catches
    these and turns them into plain-text responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path and method."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
