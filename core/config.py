"""
Environment-backed settings. Missing required values fail fast at startup.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List
from urllib.parse import quote_plus

from dotenv import find_dotenv, load_dotenv

_REQUIRED = ("JWT_SECRET", "EMAIL_USER", "EMAIL_PASSWORD", "FRONTEND_URL")
_DB_PARTS = ("DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME")


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret: str
    email_user: str
    email_password: str
    frontend_url: str
    email_from: str | None = None
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    rate_limit_window_seconds: int = 900
    rate_limit_max: int = 10
    password_min_length: int = 6
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = 3000


def _database_url_from_env(missing: List[str]) -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    parts = {name: os.getenv(name) for name in _DB_PARTS}
    absent = [name for name, value in parts.items() if not value]
    if absent:
        missing.append("DATABASE_URL (or " + ", ".join(absent) + ")")
        return ""
    return "postgresql://{user}:{password}@{host}/{name}".format(
        user=quote_plus(parts["DB_USER"]),
        password=quote_plus(parts["DB_PASSWORD"]),
        host=parts["DB_HOST"],
        name=parts["DB_NAME"],
    )


def resolve_database_url() -> str:
    """DATABASE_URL, or a Postgres URL assembled from DB_HOST/DB_USER/DB_PASSWORD/DB_NAME."""
    load_dotenv(find_dotenv(usecwd=True), override=True)
    missing: List[str] = []
    url = _database_url_from_env(missing)
    if missing:
        raise RuntimeError("Missing required configuration: " + ", ".join(missing))
    return url


def load_settings() -> Settings:
    """
    Build Settings from the process environment (and `.env` if present).
    Raises RuntimeError listing every required variable that is unset.
    """
    load_dotenv(find_dotenv(usecwd=True), override=True)

    missing: List[str] = []
    database_url = _database_url_from_env(missing)
    missing.extend(name for name in _REQUIRED if not os.getenv(name))
    if missing:
        raise RuntimeError("Missing required configuration: " + ", ".join(missing))

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    return Settings(
        database_url=database_url,
        jwt_secret=os.environ["JWT_SECRET"],
        email_user=os.environ["EMAIL_USER"],
        email_password=os.environ["EMAIL_PASSWORD"],
        frontend_url=os.environ["FRONTEND_URL"].rstrip("/"),
        email_from=os.getenv("EMAIL_FROM") or None,
        smtp_server=os.getenv("SMTP_SERVER", "smtp.gmail.com"),
        smtp_port=int(os.getenv("SMTP_PORT", "587")),
        rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900")),
        rate_limit_max=int(os.getenv("RATE_LIMIT_MAX", "10")),
        password_min_length=int(os.getenv("PASSWORD_MIN_LENGTH", "6")),
        cors_origins=origins or ["*"],
        port=int(os.getenv("PORT", "3000")),
    )


__all__ = ["Settings", "load_settings", "resolve_database_url"]
