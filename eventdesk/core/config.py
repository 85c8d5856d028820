"""
Configuration helpers for the eventdesk backend.

Routers and services receive a Settings instance instead of reading
os.environ directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_dir: str
    database_url: str
    frontend_dir: str
    admin_username: str
    admin_password: str
    admin_password_hash: str
    admin_token: str
    admin_count: int
    registration_result_limit: int
    feedback_result_limit: int
    duplicate_email_policy: str
    cors_origins: tuple[str, ...]
    log_level: str
    log_file: str
    log_format: str
    host: str
    port: int


def _int(value: str | None, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _choice(value: str | None, allowed: set[str], default: str) -> str:
    normalized = (value or "").strip().lower()
    return normalized if normalized in allowed else default


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    origins = tuple(o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip())
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=_choice(os.getenv("STORAGE_BACKEND"), {"json", "sql"}, "json"),
        data_dir=os.getenv("DATA_DIR", "data"),
        database_url=os.getenv("DATABASE_URL", ""),
        frontend_dir=os.getenv("FRONTEND_DIR", "public"),
        admin_username=os.getenv("ADMIN_USERNAME", "admin@mtn.ng"),
        admin_password=os.getenv("ADMIN_PASSWORD", "1234"),
        admin_password_hash=os.getenv("ADMIN_PASSWORD_HASH", ""),
        admin_token=os.getenv("ADMIN_TOKEN", "demo-token"),
        admin_count=_int(os.getenv("ADMIN_COUNT", "3"), 3),
        registration_result_limit=max(1, _int(os.getenv("REGISTRATION_RESULT_LIMIT", "200"), 200)),
        feedback_result_limit=max(1, _int(os.getenv("FEEDBACK_RESULT_LIMIT", "100"), 100)),
        duplicate_email_policy=_choice(os.getenv("DUPLICATE_EMAIL_POLICY"), {"allow", "reject"}, "allow"),
        cors_origins=origins or ("*",),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
        log_format=os.getenv("LOG_FORMAT", ""),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "3000"), 3000),
    )
