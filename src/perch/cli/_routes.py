"""``perch routes`` — list registered routes.

Prints one line per stored (path-or-prefix, method) entry, including
the synthesized OPTIONS preflights, so it is easy to see which paths
answer CORS and which were registered without it.
"""

import argparse
import sys

from perch.cli._resolve import resolve_app
from perch.cors.decorator import CorsHandler
from perch.cors.preflight import PreflightHandler
from perch.routing.route import Handler


def _handler_name(handler: Handler) -> str:
    if isinstance(handler, PreflightHandler):
        return "(preflight)"
    if isinstance(handler, CorsHandler):
        handler = handler.inner
    return getattr(handler, "__name__", type(handler).__name__)


def run_routes(args: argparse.Namespace) -> None:
    """Print a METHOD / KIND / PATH / CORS / HANDLER table."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = [
        (info.method, info.kind, info.key, "yes" if info.cors else "no", _handler_name(info.handler))
        for info in app.router.routes()
    ]
    if not rows:
        print("No routes registered.")
        return

    headings = ("METHOD", "KIND", "PATH", "CORS", "HANDLER")
    widths = [max(len(row[i]) for row in (*rows, headings)) for i in range(4)]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths) + "  {}"
    print(fmt.format(*headings))
    print("-" * min(sum(widths) + 8 + max(len(r[4]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))
