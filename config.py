"""Application configuration module."""

import os
import re
from datetime import timedelta
from pathlib import Path


_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str | int | None, default: timedelta) -> timedelta:
    """Parse durations such as ``7d``, ``12h``, ``30m`` or plain seconds."""

    if value is None or str(value).strip() == "":
        return default
    text = str(value).strip().lower()
    if text.isdigit():
        return timedelta(seconds=int(text))
    match = re.fullmatch(r"(\d+)\s*([smhd])", text)
    if match is None:
        raise ValueError(f"Unrecognised duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or os.getenv("JWT_SECRET")
    JWT_ACCESS_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_EXPIRE"), timedelta(days=7))
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///oracle.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Uploads
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path("uploads")))
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 10 * 1024 * 1024))

    # CORS
    _raw_origins = os.getenv(
        "ORIGINS",
        "http://localhost:3000,"
        "https://osheen-oracle-website2-0.vercel.app,"
        "https://osheen-oracle-website-updated.vercel.app,"
        "https://osheen-oracle-dashboard.vercel.app",
    )
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip().rstrip("/") for o in _raw_origins.split(",") if o.strip()]

    # Google identity federation
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
    GOOGLE_CERTS_URL = os.getenv(
        "GOOGLE_CERTS_URL", "https://www.googleapis.com/oauth2/v3/certs"
    )
    FEDERATION_TIMEOUT = float(os.getenv("FEDERATION_TIMEOUT", 5))

    # Password reset
    RESET_TOKEN_TTL_MINUTES = int(os.getenv("RESET_TOKEN_TTL_MINUTES", 15))
    PASSWORD_RESET_URL = os.getenv(
        "PASSWORD_RESET_URL",
        "http://localhost:5000/api/auth/reset-password/{token}",
    )
    AUTH_SUPPRESS_ENUMERATION = _env_flag("AUTH_SUPPRESS_ENUMERATION")

    # Outgoing mail
    MAIL_SERVER = os.getenv("MAIL_SERVER")
    MAIL_PORT = int(os.getenv("MAIL_PORT", 587))
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_USE_TLS = _env_flag("MAIL_USE_TLS", True)
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "no-reply@osheenoracle.com")
    MAIL_SUPPRESS_SEND = _env_flag("MAIL_SUPPRESS_SEND")
