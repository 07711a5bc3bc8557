"""Configuration for the assertion service."""

import os
from dataclasses import dataclass

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ServiceConfig:
    """Configuration for the assertion service.

    Attributes:
        db_path: Path to the SQLite database
        enable_wal: Whether to open connections in WAL mode
        log_level: Logging level name, e.g. "INFO"
        host: Host the HTTP server binds to
        port: Port the HTTP server listens on
    """

    db_path: str = "assertions.db"
    enable_wal: bool = True
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Read overrides from RAIRE_* environment variables."""
        defaults = cls()
        wal = os.environ.get("RAIRE_ENABLE_WAL")
        port = os.environ.get("RAIRE_PORT")
        return cls(
            db_path=os.environ.get("RAIRE_DB_PATH", defaults.db_path),
            enable_wal=defaults.enable_wal if wal is None else wal.strip().lower() in _TRUE_VALUES,
            log_level=os.environ.get("RAIRE_LOG_LEVEL", defaults.log_level).upper(),
            host=os.environ.get("RAIRE_HOST", defaults.host),
            port=defaults.port if port is None else int(port),
        )
