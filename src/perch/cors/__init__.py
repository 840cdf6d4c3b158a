"""CORS-aware routing.

Registering a route through ``CorsRouter`` wraps its handler so every
response carries ``Access-Control-*`` headers, and keeps an
auto-generated ``OPTIONS`` preflight handler per path or prefix that
advertises every method registered there::

    from perch.cors import CorsRouter

    router = CorsRouter(allowed_origins=("*",))
    router.route(path="/fact", method="GET", handler=get_fact)
    router.route(path="/fact", method="DELETE", handler=delete_fact)
    router.route(path="/raw", method="GET", handler=raw, cors_disabled=True)
"""

from perch.cors.decorator import CorsHandler, wrap
from perch.cors.policy import SECONDS_IN_A_DAY, CorsPolicy, build_headers
from perch.cors.preflight import PreflightHandler, preflight_handler, respond_preflight
from perch.cors.router import CorsRouter, cors_router

__all__ = [
    "SECONDS_IN_A_DAY",
    "CorsHandler",
    "CorsPolicy",
    "CorsRouter",
    "PreflightHandler",
    "build_headers",
    "cors_router",
    "preflight_handler",
    "respond_preflight",
    "wrap",
]
