"""Hello World — the smallest perch app.

One JSON route that any origin may call, one prefix route echoing the
rest of the path, and a health check served without CORS headers.

Run:
    python app.py
"""

from perch import App, Request, Response

app = App()


@app.route("/", methods=["GET", "POST"])
def index(request: Request):
    return {"message": "Hello, World!", "method": request.method}


@app.route(path_prefix="/greet/")
def greet(request: Request):
    return f"Hello, {request.remainder or 'stranger'}!"


@app.route("/custom")
def custom(request: Request):
    return Response("Created").with_status(201).with_header("X-Custom", "perch")


@app.route("/healthz", cors=False)
def healthz(request: Request):
    return "ok"


if __name__ == "__main__":
    app.run()
