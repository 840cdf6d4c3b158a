"""Test utilities for perch applications.

Provides an in-process ASGI test client and CORS header assertions::

    from perch.testing import TestClient, assert_cors_headers
"""

from perch.testing.assertions import allowed_methods, assert_cors_headers, assert_no_cors_headers
from perch.testing.client import TestClient

__all__ = [
    "TestClient",
    "allowed_methods",
    "assert_cors_headers",
    "assert_no_cors_headers",
]
