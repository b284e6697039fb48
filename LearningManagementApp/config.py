"""Environment-driven configuration read once at import time."""
import os
from dataclasses import dataclass, field


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _list(name: str, default: str = "") -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    secret_key: str = os.getenv("LMS_SECRET_KEY", "dev-insecure-change-me")
    debug: bool = _flag("LMS_DEBUG")
    allowed_hosts: list[str] = field(default_factory=lambda: _list("LMS_ALLOWED_HOSTS", "localhost,127.0.0.1"))
    db_engine: str = os.getenv("LMS_DB_ENGINE", "django.db.backends.sqlite3")
    db_name: str = os.getenv("LMS_DB_NAME", "lms.sqlite3")
    db_host: str = os.getenv("LMS_DB_HOST", "")
    db_port: str = os.getenv("LMS_DB_PORT", "")
    db_user: str = os.getenv("LMS_DB_USER", "")
    db_password: str = os.getenv("LMS_DB_PASSWORD", "")
    log_level: str = os.getenv("LMS_LOG_LEVEL", "INFO").upper()
    log_file: str = os.getenv("LMS_LOG_FILE", "")
    submission_rate: str = os.getenv("LMS_SUBMISSION_RATE", "30/hour")
    upcoming_window_days: int = int(os.getenv("LMS_UPCOMING_WINDOW_DAYS", "7"))
    link_domains: list[str] = field(default_factory=lambda: _list("LMS_SUBMISSION_LINK_DOMAINS"))
    access_token_minutes: int = int(os.getenv("LMS_ACCESS_TOKEN_MINUTES", "30"))
    refresh_token_days: int = int(os.getenv("LMS_REFRESH_TOKEN_DAYS", "7"))


settings = Settings()
