# config.py
# Role: Runtime configuration for the finance tracker API.
#       Reads settings from environment variables (and a local .env file)
#       into a small immutable Settings object passed to the app factory.

"""
Configuration for the finance tracker API.

Values come from the environment; a `.env` file in the working directory
is loaded first so local development does not need exported variables.
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Default SQLite location: <project_root>/database/finance.db
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "database", "finance.db")
DEFAULT_DATABASE_URL = f"sqlite:///{DEFAULT_DB_PATH}"

# Tokens are valid for one hour
DEFAULT_JWT_TTL_SECONDS = 60 * 60


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    jwt_secret: str
    database_url: str = DEFAULT_DATABASE_URL
    jwt_ttl_seconds: int = DEFAULT_JWT_TTL_SECONDS
    log_level: str = "INFO"
    log_file: str | None = None
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def _parse_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Raises:
        ConfigError: if JWT_SECRET is missing or a numeric value is invalid.
    """
    load_dotenv()

    jwt_secret = os.getenv("JWT_SECRET", "").strip()
    if not jwt_secret:
        raise ConfigError("JWT_SECRET is missing. Set it in the environment or in .env")

    origins_raw = os.getenv("CORS_ORIGINS", "*")
    cors_origins = [o.strip() for o in origins_raw.split(",") if o.strip()] or ["*"]

    return Settings(
        jwt_secret=jwt_secret,
        database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
        jwt_ttl_seconds=_parse_int(
            "JWT_TTL_SECONDS",
            os.getenv("JWT_TTL_SECONDS", str(DEFAULT_JWT_TTL_SECONDS)),
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE") or None,
        cors_origins=cors_origins,
    )
