"""Serve a perch App with pounce.

pounce is an optional dependency (``pip install perch[server]``); any
other ASGI server can serve an ``App`` instance directly.
"""

from perch.errors import ConfigurationError


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """Start a single-worker pounce server with the live App object.

    Args:
        app: ASGI callable (perch App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        log_level: Log level (debug, info, warning, error, critical).
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = (
            "Serving requires the 'pounce' ASGI server. "
            "Install it with: pip install perch[server]"
        )
        raise ConfigurationError(msg) from exc

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        log_level=log_level,
    )
    Server(config, app).run()
