"""Perch — CORS-aware routing for small ASGI APIs.

Every route registered through perch answers browsers correctly:
responses carry ``Access-Control-*`` headers and each path gets an
``OPTIONS`` preflight handler listing every method registered there.

Basic usage::

    from perch import App, AppConfig

    app = App(AppConfig(allowed_origins=("*",)))

    @app.route("/fact", methods=["GET", "POST", "PATCH", "DELETE"])
    async def fact(request):
        return {"fact": "Owls can't move their eyes."}

    app.run()

Serving via ``app.run()`` needs ``pip install perch[server]``.
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "ConfigurationError",
    "CorsPolicy",
    "CorsRouter",
    "Dispatcher",
    "HTTPError",
    "InvalidRouteSpecError",
    "MissingHandlerError",
    "NotFound",
    "PerchError",
    "Request",
    "Response",
    "RouteSpec",
    "StreamingResponse",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name == "Request":
        from perch.http.request import Request

        return Request

    if name in ("AnyResponse", "Response", "StreamingResponse"):
        from perch.http import response as _resp

        return getattr(_resp, name)

    if name in ("CorsPolicy", "CorsRouter"):
        import perch.cors as _cors

        return getattr(_cors, name)

    if name == "Dispatcher":
        from perch.routing.dispatcher import Dispatcher

        return Dispatcher

    if name == "RouteSpec":
        from perch.routing.route import RouteSpec

        return RouteSpec

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidRouteSpecError",
        "MissingHandlerError",
        "NotFound",
        "PerchError",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
