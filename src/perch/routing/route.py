"""RouteSpec, RouteMatch, and RouteInfo frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from perch.errors import InvalidRouteSpecError

Handler: TypeAlias = Callable[..., Any]

# Methods the dispatcher can route.
ROUTABLE_HTTP_METHODS: frozenset[str] = frozenset(
    {"GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"}
)


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """A single registration request.

    Exactly one of ``path`` (exact route) or ``path_prefix`` (prefix
    route) must be set::

        RouteSpec(path="/fact", method="GET", handler=get_fact)
        RouteSpec(path_prefix="/dynamicFact/", method="PATCH", handler=get_fact)
        RouteSpec(path="/bypass", method="GET", handler=raw, cors_disabled=True)
    """

    method: str
    handler: Handler | None
    path: str | None = None
    path_prefix: str | None = None
    cors_disabled: bool = False
    allowed_origins: tuple[str, ...] | None = None

    @property
    def kind(self) -> Literal["exact", "prefix"]:
        return "exact" if self.path is not None else "prefix"

    @property
    def key(self) -> str:
        """The path or prefix this route registers under."""
        if self.path is not None:
            return self.path
        if self.path_prefix is not None:
            return self.path_prefix
        msg = "A route needs exactly one of 'path' or 'path_prefix', got neither."
        raise InvalidRouteSpecError(msg)

    def validate(self) -> None:
        """Check the path/prefix shape.

        Raises:
            InvalidRouteSpecError: both or neither of ``path`` and
                ``path_prefix`` set, a path not starting with ``/``,
                or a prefix not starting and ending with ``/``.
        """
        if (self.path is None) == (self.path_prefix is None):
            msg = (
                "A route needs exactly one of 'path' or 'path_prefix', "
                f"got path={self.path!r}, path_prefix={self.path_prefix!r}."
            )
            raise InvalidRouteSpecError(msg)
        if self.path is not None and not self.path.startswith("/"):
            msg = f"Route path {self.path!r} must start with '/'."
            raise InvalidRouteSpecError(msg)
        if self.path_prefix is not None and not (
            self.path_prefix.startswith("/") and self.path_prefix.endswith("/")
        ):
            msg = f"Route path_prefix {self.path_prefix!r} must start and end with '/'."
            raise InvalidRouteSpecError(msg)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful dispatcher lookup."""

    handler: Handler
    kind: Literal["exact", "prefix"]
    key: str


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """One stored (path-or-prefix, method) entry, for introspection."""

    kind: Literal["exact", "prefix"]
    key: str
    method: str
    handler: Handler
    cors: bool
