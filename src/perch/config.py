"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, allowed_origins=("http://localhost:5173",))
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # CORS: router-wide default origins, used by routes that don't set their own
    allowed_origins: tuple[str, ...] = ("*",)

    # Treat differing per-route origins on one path as a configuration error
    strict_origins: bool = False
