# config.py
"""
Application configuration read from the environment (.env supported).
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_cors_origins(value: str | None) -> list[str]:
    if not value or not value.strip():
        return ["*"]
    origins = [item.strip() for item in value.split(",") if item.strip()]
    return origins or ["*"]


def _build_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    server = os.getenv("DB_SERVER")
    if not server:
        return "sqlite:///./ariza_takip.db"

    safe_user = quote_plus(os.getenv("DB_USER") or "")
    safe_pass = quote_plus(os.getenv("DB_PASS") or "")
    port = os.getenv("DB_PORT", "1433")
    name = os.getenv("DB_NAME", "")
    return f"mssql+pymssql://{safe_user}:{safe_pass}@{server}:{port}/{name}"


# Database
DATABASE_URL = _build_database_url()
SQL_ECHO = _as_bool(os.getenv("SQL_ECHO"))

# JWT
JWT_SECRET = os.getenv("JWT_SECRET", "ariza-takip-dev-secret-change-me")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 12)))

# Object storage
AZURE_STORAGE_ACCOUNT = os.getenv("AZURE_STORAGE_ACCOUNT")
AZURE_STORAGE_KEY = os.getenv("AZURE_STORAGE_KEY")
AZURE_STORAGE_CONTAINER = os.getenv("AZURE_STORAGE_CONTAINER", "ariza-fotograflari")

# HTTP
CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS"))
PORT = int(os.getenv("PORT", "10000"))

# Bootstrap manager account (optional)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Yönetici")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MIN_PASSWORD_LENGTH = 6

# Reports and duty-check slots are evaluated in this timezone
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Europe/Istanbul")
