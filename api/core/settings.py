"""
Environment-driven settings.

Values are read on every call so tests (and reloads) see the current
environment.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from exc


def database_url() -> str:
    return _env("DATABASE_URL")


def database_user() -> str | None:
    return _env("DATABASE_USER") or None


def database_password() -> str | None:
    return _env("DATABASE_PASSWORD") or None


def pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", 1))


def pool_max_size() -> int:
    return max(1, pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def log_level() -> str:
    return _env("LOG_LEVEL", "INFO").upper() or "INFO"


def cors_origins() -> list[str]:
    raw = _env("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
