"""
Configuration from environment variables.

Variables:
- GEMDUEL_ENV: deployment name (default "development")
- GEMDUEL_LOG_LEVEL: logging level used by the CLI (default "WARNING")
- GEMDUEL_PING_INTERVAL_MS: heartbeat interval (default 2000)
- GEMDUEL_TIMEOUT_MS: silence before a link is unstable (default 6000)
"""

from dataclasses import dataclass, field
import os

DEFAULT_PING_INTERVAL_MS = 2000
DEFAULT_TIMEOUT_THRESHOLD_MS = 6000


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_env() -> str:
    return os.getenv("GEMDUEL_ENV", "development")


def get_log_level() -> str:
    return os.getenv("GEMDUEL_LOG_LEVEL", "WARNING").upper()


@dataclass(frozen=True)
class NetworkSettings:
    """Heartbeat timing, in milliseconds."""
    ping_interval_ms: int = field(
        default_factory=lambda: _env_int("GEMDUEL_PING_INTERVAL_MS", DEFAULT_PING_INTERVAL_MS)
    )
    timeout_threshold_ms: int = field(
        default_factory=lambda: _env_int("GEMDUEL_TIMEOUT_MS", DEFAULT_TIMEOUT_THRESHOLD_MS)
    )
