"""CORS-aware route registration.

``CorsRouter`` sits in front of a ``Dispatcher``. Every CORS-enabled
registration stores two things:

1. the application handler wrapped by ``wrap()`` under (key, method),
   advertising just that method;
2. a fresh ``PreflightHandler`` under (key, ``OPTIONS``) advertising
   every CORS-wrapped method currently stored for that key.

Keys are exact paths or path prefixes. Prefix preflights are stored
under the ``OPTIONS`` method bucket of the prefix table, the same way
the dispatcher files every prefix route.

Registrations with ``cors_disabled=True`` go straight to the dispatcher
and never touch preflight state, so a path with only such routes has no
``OPTIONS`` handler unless one is registered explicitly.

When methods on one key use different ``allowed_origins``, the preflight
reflects the most recent registration's origins. With
``strict_origins=True`` that situation is a ``ConfigurationError``
instead.
"""

import logging
from collections.abc import Iterable, Iterator

from perch.cors.decorator import CorsHandler, wrap
from perch.cors.policy import CorsPolicy
from perch.cors.preflight import PreflightHandler, preflight_handler
from perch.errors import ConfigurationError, MissingHandlerError
from perch.routing.dispatcher import Dispatcher
from perch.routing.route import ROUTABLE_HTTP_METHODS, Handler, RouteInfo, RouteSpec

logger = logging.getLogger("perch.cors")


class CorsRouter:
    """Registers routes with automatic CORS headers and preflight handling.

    Usage::

        router = CorsRouter(allowed_origins=("*",))
        router.route(path="/fact", method="GET", handler=get_fact)
        router.route(path="/fact", method="POST", handler=get_fact)
        router.route(path_prefix="/dynamicFact/", method="GET", handler=get_fact)

        # OPTIONS /fact -> 204, Access-Control-Allow-Methods: GET, POST, OPTIONS
        match = router.dispatcher.lookup("OPTIONS", "/fact")

    Registration is expected to happen once, at startup, from a single
    thread. Nothing here locks.
    """

    __slots__ = ("_dispatcher", "_origins_by_key", "allowed_origins", "strict_origins")

    def __init__(
        self,
        allowed_origins: Iterable[str] = ("*",),
        *,
        dispatcher: Dispatcher | None = None,
        strict_origins: bool = False,
    ) -> None:
        self.allowed_origins: tuple[str, ...] = tuple(allowed_origins)
        self.strict_origins = strict_origins
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher()
        # Origins the current preflight of each (kind, key) was built with
        self._origins_by_key: dict[tuple[str, str], tuple[str, ...]] = {}

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    # -- Registration --

    def route(
        self,
        *,
        method: str,
        handler: Handler | None,
        path: str | None = None,
        path_prefix: str | None = None,
        cors_disabled: bool = False,
        allowed_origins: Iterable[str] | None = None,
    ) -> None:
        """Keyword form of ``register``."""
        self.register(
            RouteSpec(
                method=method,
                handler=handler,
                path=path,
                path_prefix=path_prefix,
                cors_disabled=cors_disabled,
                allowed_origins=tuple(allowed_origins) if allowed_origins is not None else None,
            )
        )

    def register(self, spec: RouteSpec) -> None:
        """Add *spec* to the route tables.

        Every check runs and every policy is built before the first
        table write, so a ``ConfigurationError`` leaves the tables as
        they were.

        Raises:
            InvalidRouteSpecError: malformed path/prefix.
            MissingHandlerError: no callable handler.
            ConfigurationError: unroutable method, or conflicting
                origins on one key with ``strict_origins``.
        """
        method = self.check(spec)

        if spec.cors_disabled:
            self._store(spec.kind, spec.key, method, spec.handler)
            logger.debug("registered %s %s %r without CORS", spec.kind, method, spec.key)
            return

        origins = self._origins_for(spec)
        previous = self._origins_by_key.get((spec.kind, spec.key))
        if previous is not None and previous != origins:
            logger.warning(
                "preflight for %s route %r now allows origins %s (was %s)",
                spec.kind,
                spec.key,
                ", ".join(origins),
                ", ".join(previous),
            )

        handler = wrap(spec.handler, CorsPolicy.from_methods([method], origins))

        stored = self._methods_at(spec.kind, spec.key)
        stored[method] = handler
        union = [
            name
            for name, entry in stored.items()
            if name != "OPTIONS" and isinstance(entry, CorsHandler)
        ] or ["OPTIONS"]
        preflight = preflight_handler(CorsPolicy.from_methods(union, origins))

        self._store(spec.kind, spec.key, method, handler)
        self._store(spec.kind, spec.key, "OPTIONS", preflight)
        self._origins_by_key[(spec.kind, spec.key)] = origins

        logger.debug(
            "registered %s %s %r; preflight allows %s from %s",
            spec.kind,
            method,
            spec.key,
            ", ".join(preflight.policy.allowed_methods),
            ", ".join(origins),
        )

    def check(self, spec: RouteSpec) -> str:
        """Run every registration check for *spec* without touching the tables.

        Returns the uppercased method. ``register`` calls this first;
        callers registering several specs at once can check them all
        before registering any.

        Raises:
            InvalidRouteSpecError: malformed path/prefix.
            MissingHandlerError: no callable handler.
            ConfigurationError: unroutable method, or conflicting
                origins on one key with ``strict_origins``.
        """
        spec.validate()
        method = spec.method.upper()
        if method not in ROUTABLE_HTTP_METHODS:
            msg = (
                f"Cannot route method {spec.method!r} on {spec.key!r}. "
                f"Routable methods: {', '.join(sorted(ROUTABLE_HTTP_METHODS))}."
            )
            raise ConfigurationError(msg)
        if spec.handler is None or not callable(spec.handler):
            msg = f"Route {method} {spec.key!r} has no callable handler (got {spec.handler!r})."
            raise MissingHandlerError(msg)

        if self.strict_origins and not spec.cors_disabled:
            origins = self._origins_for(spec)
            previous = self._origins_by_key.get((spec.kind, spec.key))
            if previous is not None and previous != origins:
                msg = (
                    f"Conflicting allowed origins on {spec.kind} route {spec.key!r}: "
                    f"{', '.join(previous)} vs {', '.join(origins)}."
                )
                raise ConfigurationError(msg)
        return method

    # -- Introspection --

    def routes(self) -> Iterator[RouteInfo]:
        """Yield every stored (key, method) entry, exact routes first."""
        for path, method, handler in self._dispatcher.exact_entries():
            yield RouteInfo("exact", path, method, handler, _is_cors(handler))
        for prefix, method, handler in self._dispatcher.prefix_entries():
            yield RouteInfo("prefix", prefix, method, handler, _is_cors(handler))

    # -- Internal --

    def _methods_at(self, kind: str, key: str) -> dict[str, Handler]:
        if kind == "exact":
            return self._dispatcher.methods_for_path(key)
        return self._dispatcher.methods_for_prefix(key)

    def _store(self, kind: str, key: str, method: str, handler: Handler) -> None:
        if kind == "exact":
            self._dispatcher.add_exact(key, method, handler)
        else:
            self._dispatcher.add_prefix(key, method, handler)

    def _origins_for(self, spec: RouteSpec) -> tuple[str, ...]:
        if spec.allowed_origins is not None:
            return tuple(spec.allowed_origins)
        return self.allowed_origins


def _is_cors(handler: Handler) -> bool:
    return isinstance(handler, (CorsHandler, PreflightHandler))


def cors_router(*, allowed_origins: Iterable[str]) -> CorsRouter:
    """Create a ``CorsRouter`` with the given default origins."""
    return CorsRouter(allowed_origins=allowed_origins)
