"""Facts — a random-fact API that browsers on any origin can call.

Proxies https://api.api-ninjas.com/v1/facts. Demonstrates exact and
prefix routes sharing one handler, automatic OPTIONS preflights, a
route with its own origin list, and a route registered without CORS.

Run:
    FACTS_API_KEY=... python app.py

Requires ``pip install perch[facts,server]``.
"""

import os

import httpx

from perch import App, AppConfig, Request, Response

API_URL = os.environ.get("FACTS_API_URL", "https://api.api-ninjas.com/v1/facts")

app = App(AppConfig(allowed_origins=("*",)))

_client: httpx.AsyncClient | None = None


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"X-Api-Key": os.environ.get("FACTS_API_KEY", "")},
        timeout=10.0,
    )


@app.on_startup
async def open_client() -> None:
    global _client
    _client = make_client()


@app.on_shutdown
async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


# Exact routes match /fact only
@app.route("/fact", methods=["GET", "POST", "PATCH", "DELETE"])
# Prefix routes match /dynamicFact/123, /dynamicFact/456, ...
@app.route(path_prefix="/dynamicFact/", methods=["GET", "PATCH"])
async def get_fact(request: Request):
    """Fetch one random fact and pass the upstream JSON through."""
    assert _client is not None, "client is opened by the startup hook"
    try:
        upstream = await _client.get(API_URL)
    except httpx.HTTPError as exc:
        return {"error": f"Internal Server Error: {exc}"}, 500
    return Response(
        body=upstream.content,
        status=upstream.status_code,
        reason=upstream.reason_phrase,
        content_type=upstream.headers.get("content-type", "application/json"),
    )


@app.route("/special", allowed_origins=["http://localhost:3000"])
def special(request: Request):
    return {"message": "only the local dev frontend may read this"}


@app.route("/bypass", cors=False)
def bypass(request: Request):
    return {"message": "no CORS headers here"}


if __name__ == "__main__":
    app.run()
