"""Tests for perch.cors.policy — header building and method normalization."""

import pytest

from perch.cors.policy import CorsPolicy, build_headers, normalize_methods
from perch.errors import ConfigurationError


class TestNormalizeMethods:
    def test_appends_options(self) -> None:
        assert normalize_methods(["GET"]) == ("GET", "OPTIONS")

    def test_keeps_explicit_options_in_place(self) -> None:
        assert normalize_methods(["OPTIONS", "GET"]) == ("OPTIONS", "GET")

    def test_uppercases(self) -> None:
        assert normalize_methods(["get", "Post"]) == ("GET", "POST", "OPTIONS")

    def test_deduplicates_keeping_first_position(self) -> None:
        assert normalize_methods(["GET", "POST", "get", "GET"]) == ("GET", "POST", "OPTIONS")

    def test_drops_unroutable(self) -> None:
        assert normalize_methods(["GET", "BREW", "TRACE"]) == ("GET", "OPTIONS")

    def test_accepts_generator(self) -> None:
        assert normalize_methods(m for m in ["patch"]) == ("PATCH", "OPTIONS")

    def test_empty_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="No valid HTTP methods"):
            normalize_methods([])

    def test_only_unroutable_raises(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_methods(["BREW", "CONNECT"])
        assert "BREW" in str(exc_info.value)


class TestBuildHeaders:
    def test_exact_header_set(self) -> None:
        headers = build_headers(["GET", "POST"], ["*"])
        assert headers == {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": "86400",
        }

    def test_origins_joined_verbatim(self) -> None:
        headers = build_headers(["GET"], ["https://a.example", "https://*.b.example", "null"])
        assert (
            headers["Access-Control-Allow-Origin"]
            == "https://a.example, https://*.b.example, null"
        )

    def test_options_not_repeated(self) -> None:
        headers = build_headers(["GET", "OPTIONS", "options"], ["*"])
        assert headers["Access-Control-Allow-Methods"] == "GET, OPTIONS"

    def test_options_only(self) -> None:
        headers = build_headers(["OPTIONS"], ["*"])
        assert headers["Access-Control-Allow-Methods"] == "OPTIONS"

    def test_no_valid_methods_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            build_headers(["NOPE"], ["*"])


class TestCorsPolicy:
    def test_from_methods_normalizes(self) -> None:
        policy = CorsPolicy.from_methods(["delete", "GET"], ["http://localhost:3000"])
        assert policy.allowed_methods == ("DELETE", "GET", "OPTIONS")
        assert policy.allowed_origins == ("http://localhost:3000",)

    def test_headers_match_build_headers(self) -> None:
        policy = CorsPolicy.from_methods(["PUT"], ["*"])
        assert policy.headers == build_headers(["PUT"], ["*"])

    def test_frozen(self) -> None:
        policy = CorsPolicy.from_methods(["GET"], ["*"])
        with pytest.raises(AttributeError):
            policy.allowed_origins = ("x",)  # type: ignore[misc]

    def test_equal_policies_compare_equal(self) -> None:
        assert CorsPolicy.from_methods(["get"], ["*"]) == CorsPolicy.from_methods(["GET"], ["*"])
