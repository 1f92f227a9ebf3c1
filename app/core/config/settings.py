from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    records_db_path: str
    free_max_chat_messages: int
    free_max_resume_scans: int
    chat_history_turns: int
    chat_history_limit: int
    resume_history_limit: int
    max_upload_bytes: int


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "20/minute") or "20/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    records_db_path=_get_env("RECORDS_DB_PATH", "data/career_records.db") or "data/career_records.db",
    free_max_chat_messages=_get_env_int("FREE_MAX_CHAT_MESSAGES", 15),
    free_max_resume_scans=_get_env_int("FREE_MAX_RESUME_SCANS", 3),
    chat_history_turns=_get_env_int("CHAT_HISTORY_TURNS", 5),
    chat_history_limit=_get_env_int("CHAT_HISTORY_LIMIT", 100),
    resume_history_limit=_get_env_int("RESUME_HISTORY_LIMIT", 50),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
)

if settings.free_max_chat_messages < 0 or settings.free_max_resume_scans < 0:
    raise RuntimeError("FREE_MAX_CHAT_MESSAGES and FREE_MAX_RESUME_SCANS must be non-negative.")
