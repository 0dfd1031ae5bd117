"""
Environment-driven settings.

Every value is read on call, so tests can tweak `os.environ` without
re-importing anything.
"""

from __future__ import annotations

import os

DEFAULT_PORT = 4000


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def app_env() -> str:
    return os.environ.get("APP_ENV", "development").strip().lower() or "development"


def is_test_mode() -> bool:
    # Tests never open a real pool at startup.
    return app_env() == "test"


def is_production() -> bool:
    return app_env() == "production"


def host() -> str:
    return os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", 1))


def pool_max_size() -> int:
    return max(1, _env_int("DB_POOL_MAX_SIZE", 10))


def command_timeout() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", 30.0)


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "*")
    origins = [item.strip() for item in raw.split(",") if item.strip()]
    return origins or ["*"]


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def acquire_timeout() -> float:
    # An exhausted pool fails the request after this many seconds.
    return _env_float("DB_ACQUIRE_TIMEOUT", 10.0)
