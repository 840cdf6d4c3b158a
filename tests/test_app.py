"""Tests for perch.app — decorator registration, ASGI dispatch, lifecycle."""

import pytest

from perch import App, AppConfig
from perch.errors import ConfigurationError, HTTPError
from perch.http.request import Request
from perch.http.response import Response, StreamingResponse
from perch.testing import (
    TestClient,
    allowed_methods,
    assert_cors_headers,
    assert_no_cors_headers,
)


class TestRouteDecorator:
    async def test_default_method_is_get(self) -> None:
        app = App()

        @app.route("/fact")
        async def fact(request: Request) -> str:
            return "owls"

        async with TestClient(app) as client:
            response = await client.get("/fact")
            assert response.status == 200
            assert response.text == "owls"
            assert_cors_headers(response, origin="*", methods={"GET", "OPTIONS"})

    async def test_decorator_returns_function(self) -> None:
        app = App()

        async def fact(request: Request) -> str:
            return "owls"

        assert app.route("/fact")(fact) is fact

    async def test_every_method_registered(self) -> None:
        app = App()

        @app.route("/fact", methods=["GET", "POST", "PATCH", "DELETE"])
        async def fact(request: Request) -> dict[str, str]:
            return {"method": request.method}

        async with TestClient(app) as client:
            response = await client.options("/fact")
            assert response.status == 204
            assert response.body == b""
            assert response.content_type is None
            assert_cors_headers(
                response, origin="*", methods={"GET", "POST", "PATCH", "DELETE", "OPTIONS"}
            )

            response = await client.patch("/fact")
            assert response.json == {"method": "PATCH"}
            assert allowed_methods(response) == ["PATCH", "OPTIONS"]

    async def test_config_origins_are_default(self) -> None:
        app = App(AppConfig(allowed_origins=("https://app.example",)))

        @app.route("/fact")
        def fact(request: Request) -> str:
            return "sync handler"

        async with TestClient(app) as client:
            response = await client.get("/fact")
            assert response.text == "sync handler"
            assert_cors_headers(response, origin="https://app.example")

    async def test_route_origins(self) -> None:
        app = App()

        @app.route("/special", allowed_origins=["http://localhost:3000"])
        async def special(request: Request) -> str:
            return "special"

        async with TestClient(app) as client:
            response = await client.get("/special")
            assert_cors_headers(response, origin="http://localhost:3000")

    async def test_cors_false(self) -> None:
        app = App()

        @app.route("/bypass", cors=False)
        async def bypass(request: Request) -> str:
            return "raw"

        async with TestClient(app) as client:
            response = await client.get("/bypass")
            assert response.status == 200
            assert_no_cors_headers(response)
            assert (await client.options("/bypass")).status == 404

    async def test_invalid_route_rejected_at_decoration(self) -> None:
        app = App()
        with pytest.raises(ConfigurationError):

            @app.route("/fact", path_prefix="/fact/")
            async def fact(request: Request) -> str:
                return ""

    async def test_empty_methods_rejected(self) -> None:
        app = App()
        with pytest.raises(ConfigurationError, match="empty methods list"):
            app.route("/fact", methods=[])
        assert app.router.dispatcher.methods_for_path("/fact") == {}

    async def test_bad_method_registers_nothing(self) -> None:
        app = App()

        async def fact(request: Request) -> str:
            return ""

        with pytest.raises(ConfigurationError, match="BREW"):
            app.route("/fact", methods=["GET", "BREW"])(fact)
        assert app.router.dispatcher.methods_for_path("/fact") == {}

        async with TestClient(app) as client:
            assert (await client.get("/fact")).status == 404
            assert (await client.options("/fact")).status == 404

    async def test_strict_origin_conflict_registers_nothing(self) -> None:
        app = App(AppConfig(strict_origins=True))

        async def fact(request: Request) -> str:
            return ""

        app.route("/fact")(fact)
        before = app.router.dispatcher.methods_for_path("/fact")

        with pytest.raises(ConfigurationError, match="Conflicting allowed origins"):
            app.route(
                "/fact", methods=["POST", "PUT"], allowed_origins=["https://admin.example"]
            )(fact)
        assert app.router.dispatcher.methods_for_path("/fact") == before


class TestPrefixRoutes:
    async def test_remainder(self) -> None:
        app = App()

        @app.route(path_prefix="/dynamicFact/", methods=["GET", "PATCH"])
        async def dynamic(request: Request) -> dict[str, str | None]:
            return {"prefix": request.matched_prefix, "id": request.remainder}

        async with TestClient(app) as client:
            response = await client.get("/dynamicFact/42")
            assert response.json == {"prefix": "/dynamicFact/", "id": "42"}
            assert_cors_headers(response, methods={"GET", "OPTIONS"})

            preflight = await client.options("/dynamicFact/anything")
            assert preflight.status == 204
            assert set(allowed_methods(preflight)) == {"GET", "PATCH", "OPTIONS"}

    async def test_exact_route_has_empty_remainder(self) -> None:
        app = App()

        @app.route("/fact")
        async def fact(request: Request) -> str:
            return repr(request.remainder)

        async with TestClient(app) as client:
            assert (await client.get("/fact")).text == "''"


class TestResponses:
    async def test_handler_response_preserved(self) -> None:
        app = App()

        @app.route("/created", methods=["POST"])
        async def created(request: Request) -> Response:
            payload = await request.json()
            response = Response(body=payload["name"], content_type="text/plain")
            return response.with_status(201).with_header("X-Foo", "bar")

        async with TestClient(app) as client:
            response = await client.post("/created", json={"name": "owl"})
            assert response.status == 201
            assert response.text == "owl"
            assert response.content_type == "text/plain"
            assert response.header("x-foo") == "bar"
            assert_cors_headers(response, methods={"POST", "OPTIONS"})

    async def test_cors_headers_replace_handler_values(self) -> None:
        app = App()

        @app.route("/fact")
        async def fact(request: Request) -> Response:
            return Response("x").with_header("Access-Control-Allow-Origin", "https://evil.example")

        async with TestClient(app) as client:
            response = await client.get("/fact")
            origins = [v for n, v in response.headers if n == "access-control-allow-origin"]
            assert origins == ["*"]

    async def test_tuple_status(self) -> None:
        app = App()

        @app.route("/teapot")
        async def teapot(request: Request) -> tuple[dict[str, str], int]:
            return {"error": "short and stout"}, 418

        async with TestClient(app) as client:
            response = await client.get("/teapot")
            assert response.status == 418
            assert response.json == {"error": "short and stout"}
            assert_cors_headers(response)

    async def test_streaming_response_gets_cors_headers(self) -> None:
        app = App()

        @app.route("/stream")
        async def stream(request: Request) -> StreamingResponse:
            async def chunks():
                yield "a"
                yield "b"

            return StreamingResponse(chunks(), content_type="text/plain")

        async with TestClient(app) as client:
            response = await client.get("/stream")
            assert response.text == "ab"
            assert_cors_headers(response)


class TestErrors:
    async def test_unknown_path_is_404(self) -> None:
        async with TestClient(App()) as client:
            response = await client.get("/missing")
            assert response.status == 404
            assert "No matching routes found" in response.text

    async def test_method_mismatch_is_404(self) -> None:
        app = App()

        @app.route("/fact")
        async def fact(request: Request) -> str:
            return ""

        async with TestClient(app) as client:
            assert (await client.delete("/fact")).status == 404

    async def test_http_error_from_handler(self) -> None:
        app = App()

        @app.route("/gone")
        async def gone(request: Request) -> str:
            raise HTTPError(status=410, detail="nothing here", headers=(("X-Reason", "gone"),))

        async with TestClient(app) as client:
            response = await client.get("/gone")
            assert response.status == 410
            assert response.text == "nothing here"
            assert response.header("x-reason") == "gone"

    async def test_handler_exception_is_500(self, caplog) -> None:
        app = App()

        @app.route("/boom")
        async def boom(request: Request) -> str:
            raise ValueError("kaboom")

        async with TestClient(app) as client:
            response = await client.get("/boom")
            assert response.status == 500
            assert response.text == "Internal Server Error"
        assert "500 GET /boom" in caplog.text

    async def test_debug_shows_traceback(self) -> None:
        app = App(AppConfig(debug=True))

        @app.route("/boom")
        async def boom(request: Request) -> str:
            raise ValueError("kaboom")

        async with TestClient(app) as client:
            response = await client.get("/boom")
            assert response.status == 500
            assert "ValueError: kaboom" in response.text


class TestFreeze:
    async def test_route_after_first_request(self) -> None:
        app = App()

        @app.route("/fact")
        async def fact(request: Request) -> str:
            return ""

        async with TestClient(app) as client:
            await client.get("/fact")

        with pytest.raises(RuntimeError, match="started serving"):
            app.route("/late")(fact)

    async def test_hook_after_freeze(self) -> None:
        app = App()
        async with TestClient(app):
            pass
        with pytest.raises(RuntimeError):
            app.on_startup(lambda: None)


class TestLifecycle:
    async def test_hooks_run_in_order(self) -> None:
        app = App()
        events: list[str] = []

        @app.on_startup
        async def first() -> None:
            events.append("startup-1")

        @app.on_startup
        def second() -> None:
            events.append("startup-2")

        @app.on_shutdown
        async def closing() -> None:
            events.append("shutdown")

        async with TestClient(app):
            assert events == ["startup-1", "startup-2"]
        assert events == ["startup-1", "startup-2", "shutdown"]

    async def test_asgi_lifespan(self) -> None:
        app = App()
        events: list[str] = []
        app.on_startup(lambda: events.append("up"))
        app.on_shutdown(lambda: events.append("down"))

        incoming = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent: list[dict] = []

        async def receive() -> dict:
            return next(incoming)

        async def send(message: dict) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        assert events == ["up", "down"]

    async def test_asgi_lifespan_startup_failure(self) -> None:
        app = App()

        @app.on_startup
        async def broken() -> None:
            raise RuntimeError("no database")

        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "lifespan.startup"}

        async def send(message: dict) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        assert sent == [{"type": "lifespan.startup.failed", "message": "no database"}]
