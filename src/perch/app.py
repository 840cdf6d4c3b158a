"""Perch application class.

Mutable during setup (route registration, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import inspect
import threading
from collections.abc import Callable, Iterable
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch.config import AppConfig
from perch.cors.router import CorsRouter
from perch.errors import ConfigurationError
from perch.routing.route import Handler, RouteSpec
from perch.server.handler import handle_request


class App:
    """The perch application: a CORS router served over ASGI.

    Usage::

        app = App(AppConfig(allowed_origins=("*",)))

        @app.route("/fact", methods=["GET", "POST"])
        async def fact(request):
            return {"fact": "..."}

        @app.route(path_prefix="/dynamicFact/", methods=["GET"])
        async def dynamic_fact(request):
            return {"id": request.remainder}

    Thread safety:
        Setup is single-threaded (decorators at import time). The
        freeze transition uses a Lock + double-check so exactly one
        thread freezes the routes, even if several ASGI workers call
        ``__call__()`` on first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = CorsRouter(
            allowed_origins=self.config.allowed_origins,
            strict_origins=self.config.strict_origins,
        )
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    @property
    def router(self) -> CorsRouter:
        return self._router

    # -- Route registration --

    def route(
        self,
        path: str | None = None,
        *,
        path_prefix: str | None = None,
        methods: Iterable[str] | None = None,
        cors: bool = True,
        allowed_origins: Iterable[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: Exact path to match (e.g. ``"/fact"``).
            path_prefix: Prefix to match instead of an exact path; must
                start and end with ``/``.
            methods: HTTP methods. Defaults to ``["GET"]``; an empty list
                is a ``ConfigurationError``. Every method is checked
                before any is registered, then each is registered in order.
            cors: ``False`` registers the handler untouched, with no
                CORS headers and no preflight.
            allowed_origins: Origins for this route. Defaults to
                ``AppConfig.allowed_origins``.
        """
        origins = tuple(allowed_origins) if allowed_origins is not None else None
        method_list = ["GET"] if methods is None else list(methods)
        if not method_list:
            msg = f"Route {path or path_prefix!r} was given an empty methods list."
            raise ConfigurationError(msg)

        def decorator(func: Handler) -> Handler:
            specs = [
                RouteSpec(
                    method=method,
                    handler=func,
                    path=path,
                    path_prefix=path_prefix,
                    cors_disabled=not cors,
                    allowed_origins=origins,
                )
                for method in method_list
            ]
            self._check_not_frozen()
            # All methods are checked before the first one is stored
            for spec in specs:
                self._router.check(spec)
            for spec in specs:
                self._router.register(spec)
            return func

        return decorator

    def register(self, spec: RouteSpec) -> None:
        """Register a single ``RouteSpec`` with the CORS router."""
        self._check_not_frozen()
        self._router.register(spec)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a startup hook (sync or async).

        Hooks run in registration order during ASGI lifespan startup.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a shutdown hook (sync or async).

        Hooks run in registration order during ASGI lifespan shutdown.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Running --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the routes and serve with pounce."""
        from perch.server.dev import run_server

        self._ensure_frozen()
        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._router.dispatcher,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request),
        then runs the hooks and reports back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._router.dispatcher.freeze()
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
