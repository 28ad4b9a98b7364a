"""
Environment-driven configuration.

Every knob is read lazily from `os.environ` so tests can monkeypatch the
environment without reloading modules. Defaults target local development.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_POOL_MAX_SIZE = 10
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_PORT = 3000


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def db_host() -> str:
    return _env_str("DB_HOST", "localhost")


def db_port() -> int:
    return _env_int("DB_PORT", 5432)


def db_user() -> str:
    return _env_str("DB_USER", "postgres")


def db_password() -> str:
    # Empty password is a valid local setup, so no fallback on blank.
    return os.environ.get("DB_PASSWORD", "")


def db_name() -> str:
    return _env_str("DB_NAME", "admin_dashboard")


def pool_max_size() -> int:
    value = _env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE)
    return value if value > 0 else DEFAULT_POOL_MAX_SIZE


def command_timeout() -> int | None:
    # Unset means no client-side limit; queries run as long as the server lets them.
    value = _env_int("DB_COMMAND_TIMEOUT", 0)
    return value if value > 0 else None


def max_upload_bytes() -> int:
    value = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES


def static_dir() -> Path:
    return Path(_env_str("STATIC_DIR", "public"))


def cors_allow_origins() -> list[str]:
    raw = _env_str("CORS_ALLOW_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def listen_host() -> str:
    return _env_str("HOST", "0.0.0.0")


def listen_port() -> int:
    return _env_int("PORT", DEFAULT_PORT)
