"""Exact/prefix route dispatcher.

Two independent tables, laid out the way lookups use them:

* ``exact_routes``: path -> {method -> handler}
* ``prefix_routes``: method -> {path_prefix -> handler}

Exact matches win over prefix matches; among prefixes for a method the
longest one that the request path starts with wins. A miss, including
a path that exists for other methods only, is a plain 404.
"""

from collections.abc import Iterator

from perch.errors import NotFound
from perch.routing.route import Handler, RouteMatch


class Dispatcher:
    """Route table with exact and prefix lookups.

    Usage::

        dispatcher = Dispatcher()
        dispatcher.add_exact("/fact", "GET", get_fact)
        dispatcher.add_prefix("/dynamicFact/", "GET", get_fact)
        dispatcher.freeze()
        match = dispatcher.lookup("GET", "/dynamicFact/42")
    """

    __slots__ = ("_exact", "_frozen", "_prefix")

    def __init__(self) -> None:
        self._exact: dict[str, dict[str, Handler]] = {}
        self._prefix: dict[str, dict[str, Handler]] = {}
        self._frozen = False

    # -- Registration --

    def add_exact(self, path: str, method: str, handler: Handler) -> None:
        """Store *handler* under (path, method), replacing any previous one."""
        self._check_not_frozen()
        self._exact.setdefault(path, {})[method] = handler

    def add_prefix(self, prefix: str, method: str, handler: Handler) -> None:
        """Store *handler* under (method, prefix), replacing any previous one."""
        self._check_not_frozen()
        self._prefix.setdefault(method, {})[prefix] = handler

    def freeze(self) -> None:
        """Refuse further registrations. Lookups are unaffected."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Read access --

    def methods_for_path(self, path: str) -> dict[str, Handler]:
        """Methods currently registered at an exact path, in registration order."""
        return dict(self._exact.get(path, {}))

    def methods_for_prefix(self, prefix: str) -> dict[str, Handler]:
        """Methods currently registered at a path prefix, in registration order."""
        return {
            method: by_prefix[prefix]
            for method, by_prefix in self._prefix.items()
            if prefix in by_prefix
        }

    def exact_entries(self) -> Iterator[tuple[str, str, Handler]]:
        """Yield ``(path, method, handler)`` for every exact route."""
        for path, by_method in self._exact.items():
            for method, handler in by_method.items():
                yield path, method, handler

    def prefix_entries(self) -> Iterator[tuple[str, str, Handler]]:
        """Yield ``(prefix, method, handler)`` for every prefix route."""
        for method, by_prefix in self._prefix.items():
            for prefix, handler in by_prefix.items():
                yield prefix, method, handler

    # -- Dispatch --

    def lookup(self, method: str, path: str) -> RouteMatch:
        """Find the handler for a request.

        Raises ``NotFound`` when neither an exact nor a prefix route
        matches *method* and *path*.
        """
        by_method = self._exact.get(path)
        if by_method is not None and method in by_method:
            return RouteMatch(handler=by_method[method], kind="exact", key=path)

        best: str | None = None
        for prefix in self._prefix.get(method, {}):
            if path.startswith(prefix) and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is not None:
            return RouteMatch(handler=self._prefix[method][best], kind="prefix", key=best)

        raise NotFound(f"No matching routes found for {method} {path!r}")

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot register routes after the dispatcher has started serving. "
                "Register every route during startup."
            )
            raise RuntimeError(msg)
