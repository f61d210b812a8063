"""Environment driven configuration + logging setup."""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_DB_URL = "sqlite:///breakandrun_local.db"
DEFAULT_REMOTE_DB_URL = "sqlite:///breakandrun_remote.db"
DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_API_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _parse_timeout(env_var: str, default: float) -> float:
    raw_value = os.getenv(env_var)
    if raw_value is None:
        return default

    try:
        value = float(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid float (got %r); defaulting to %.1f",
            env_var,
            raw_value,
            default,
        )
        return default

    if value <= 0:
        logger.warning("%s must be positive; defaulting to %.1f", env_var, default)
        return default

    return value


def _canon_url(val: str | None, default: str) -> str:
    """Strip whitespace and any trailing slash so paths can be appended safely."""
    val = (val or default).strip()
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


@dataclass(frozen=True)
class Settings:
    local_db_url: str = DEFAULT_LOCAL_DB_URL
    remote_db_url: str = DEFAULT_REMOTE_DB_URL
    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            local_db_url=os.getenv("BREAKANDRUN_LOCAL_DB_URL") or DEFAULT_LOCAL_DB_URL,
            remote_db_url=os.getenv("BREAKANDRUN_REMOTE_DB_URL")
            or DEFAULT_REMOTE_DB_URL,
            api_url=_canon_url(os.getenv("BREAKANDRUN_API_URL"), DEFAULT_API_URL),
            api_timeout=_parse_timeout("BREAKANDRUN_API_TIMEOUT", DEFAULT_API_TIMEOUT),
            log_level=(os.getenv("BREAKANDRUN_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Single console handler on the root logger. Calling it again only changes the level."""
    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(h, "_breakandrun", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._breakandrun = True  # type: ignore[attr-defined]
    root.addHandler(handler)
