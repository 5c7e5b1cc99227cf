"""
Configuration helpers for the catalog backend.

Routers and services read a typed Settings object instead of touching
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

_DEV_JWT_SECRET = "dev-only-insecure-secret-change-me"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    app_name: str
    frontend_url: str
    database_url: str
    jwt_secret: str
    jwt_algorithm: str
    jwt_ttl_seconds: int
    email_verification_ttl_seconds: int
    password_reset_ttl: int
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str
    exchange_api_url: str
    exchange_timeout_seconds: float
    base_currency: str
    cors_origins: tuple[str, ...]
    log_level: str
    rate_limit_enabled: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    jwt_secret = os.getenv("JWT_SECRET", "")
    if not jwt_secret:
        if app_env == "prod":
            raise RuntimeError("JWT_SECRET must be configured in production.")
        jwt_secret = _DEV_JWT_SECRET
    base_currency = (os.getenv("BASE_CURRENCY") or "USD").strip().upper()
    cors_raw = os.getenv("CORS_ORIGINS", "")
    cors_origins = tuple(origin.strip().rstrip("/") for origin in cors_raw.split(",") if origin.strip())

    return Settings(
        app_env=app_env,
        app_name=os.getenv("APP_NAME", "E-commerce API"),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./catalog.db"),
        jwt_secret=jwt_secret,
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_ttl_seconds=_int(os.getenv("JWT_TTL_SECONDS", "3600"), 3600),
        email_verification_ttl_seconds=_int(os.getenv("EMAIL_VERIFICATION_TTL_SECONDS", "7200"), 7200),
        password_reset_ttl=_int(os.getenv("PASSWORD_RESET_TTL", "1800"), 1800),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int(os.getenv("SMTP_PORT", "587"), 587),
        smtp_user=os.getenv("SMTP_USER", ""),
        smtp_password=os.getenv("SMTP_PASSWORD", ""),
        smtp_from=os.getenv("SMTP_FROM", os.getenv("SMTP_USER", "")),
        exchange_api_url=os.getenv(
            "EXCHANGE_API_URL", f"https://api.exchangerate-api.com/v4/latest/{base_currency}"
        ),
        exchange_timeout_seconds=_float(os.getenv("EXCHANGE_TIMEOUT_SECONDS", "5"), 5.0),
        base_currency=base_currency,
        cors_origins=cors_origins,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        rate_limit_enabled=_bool(os.getenv("RATE_LIMIT_ENABLED"), True),
    )
