"""
Environment-driven configuration.

Values are read on each call so tests can patch the environment.
"""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_PORT = 3000
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def get_host() -> str:
    return os.environ.get("HOST") or "0.0.0.0"


def get_port() -> int:
    return _get_int("PORT", DEFAULT_PORT)


def get_data_dir() -> Path:
    """Directory holding the per-user JSON files."""
    return Path(os.environ.get("DATA_DIR") or PROJECT_ROOT / "data")


def get_static_dir() -> Path:
    """Deployment directory served as static files."""
    return Path(os.environ.get("STATIC_DIR") or PROJECT_ROOT)


def get_index_file() -> Path:
    """Entry document served at the root path."""
    return get_static_dir() / (os.environ.get("INDEX_FILE") or "index.html")


def get_max_body_bytes() -> int:
    return _get_int("MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES)


def get_sentry_dsn() -> str | None:
    return os.environ.get("SENTRY_DSN") or None


def get_log_level() -> str:
    return (os.environ.get("LOG_LEVEL") or "INFO").upper()
