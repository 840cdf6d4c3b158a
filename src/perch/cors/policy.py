"""CORS header policy.

A ``CorsPolicy`` is the (methods, origins) pair a route answers
preflights and responses with. ``build_headers`` turns one into the
four headers every CORS-enabled response carries::

    build_headers(["get", "POST", "GET"], ["*"])
    # Access-Control-Allow-Origin:  *
    # Access-Control-Allow-Methods: GET, POST, OPTIONS
    # Access-Control-Allow-Headers: Content-Type
    # Access-Control-Max-Age:       86400

Origins are passed through verbatim. Any of these are just strings
here; the browser decides what they mean:

- ``"*"`` (any origin)
- ``"https://example.com"``
- ``"https://*.example.com"``
- ``"null"`` (data URLs, local files)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from perch.errors import ConfigurationError
from perch.routing.route import ROUTABLE_HTTP_METHODS

SECONDS_IN_A_DAY = 60 * 60 * 24

ALLOW_HEADERS = "Content-Type"


def normalize_methods(methods: Iterable[str]) -> tuple[str, ...]:
    """Uppercase, de-duplicate (first occurrence wins), and drop unroutable methods.

    ``OPTIONS`` is appended when missing.

    Raises:
        ConfigurationError: nothing routable is left.
    """
    given = list(methods)
    unique = dict.fromkeys(method.upper() for method in given)
    filtered = [method for method in unique if method in ROUTABLE_HTTP_METHODS]
    if not filtered:
        msg = f"No valid HTTP methods provided (got {given!r})."
        raise ConfigurationError(msg)
    if "OPTIONS" not in filtered:
        filtered.append("OPTIONS")
    return tuple(filtered)


@dataclass(frozen=True, slots=True)
class CorsPolicy:
    """Allowed methods and origins for one route or preflight.

    Build through ``from_methods`` so methods are normalized; the
    constructor trusts its input.
    """

    allowed_methods: tuple[str, ...]
    allowed_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_methods(cls, methods: Iterable[str], origins: Iterable[str]) -> CorsPolicy:
        return cls(
            allowed_methods=normalize_methods(methods),
            allowed_origins=tuple(origins),
        )

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": ", ".join(self.allowed_origins),
            "Access-Control-Allow-Methods": ", ".join(self.allowed_methods),
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Max-Age": str(SECONDS_IN_A_DAY),
        }


def build_headers(methods: Iterable[str], origins: Iterable[str]) -> dict[str, str]:
    """Return the CORS header set for *methods* and *origins*.

    Raises:
        ConfigurationError: no routable method in *methods*.
    """
    return CorsPolicy.from_methods(methods, origins).headers
