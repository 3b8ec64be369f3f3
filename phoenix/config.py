# phoenix/config.py
# Environment-aware configuration for the Cloud Phoenix backend

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

DEFAULT_PORT = 5001
DEFAULT_DB_NAME = "cloudphoenix"

# JWT configuration
ALGORITHM = "HS256"


class ConfigError(RuntimeError):
    """Raised when a required environment variable is missing or malformed."""


class Settings(BaseModel):
    """
    Process-wide configuration, read once at startup.

    mongo_uri, jwt_secret and cors_origin have no defaults: a deployment
    that forgets one of them should refuse to start.
    """
    env: Literal["dev", "staging", "prod"] = "dev"
    mongo_uri: str
    mongo_db_name: Optional[str] = None
    jwt_secret: str
    cors_origin: str
    host: str = "0.0.0.0"
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)

    # Token lifetime and hashing cost
    token_expires_hours: int = Field(5, ge=1)
    bcrypt_rounds: int = Field(10, ge=4, le=31)

    # Per-operation store deadline
    store_timeout_ms: int = Field(10000, ge=100)

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ConfigError: a required variable is unset/blank or a value fails validation
        """
        environ = os.environ if environ is None else environ

        missing = [
            name for name in ("MONGO_URI", "JWT_SECRET", "CORS_ORIGIN")
            if not environ.get(name, "").strip()
        ]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        raw = {
            "env": environ.get("ENV", "dev"),
            "mongo_uri": environ["MONGO_URI"].strip(),
            "mongo_db_name": environ.get("MONGO_DB_NAME", "").strip() or None,
            "jwt_secret": environ["JWT_SECRET"],
            "cors_origin": environ["CORS_ORIGIN"].strip(),
            "host": environ.get("HOST", "0.0.0.0"),
            "port": environ.get("PORT", str(DEFAULT_PORT)),
            "token_expires_hours": environ.get("TOKEN_EXPIRES_HOURS", "5"),
            "bcrypt_rounds": environ.get("BCRYPT_ROUNDS", "10"),
            "store_timeout_ms": environ.get("STORE_TIMEOUT_MS", "10000"),
            "log_level": environ.get("LOG_LEVEL", "INFO").upper(),
            "log_format": environ.get("LOG_FORMAT", "console").lower(),
        }
        try:
            return cls(**raw)
        except ValueError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc
