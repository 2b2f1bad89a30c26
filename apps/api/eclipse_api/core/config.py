from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PLACEHOLDER_SECRETS = frozenset(
    {
        "CHANGE_ME",
        "changeme",
        "secret",
        "your-secret-key-change-in-production",
    }
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "EclipseAI API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # No default: credentials must come from the environment.
    mongodb_uri: str
    mongodb_database: str = "eclipse_ai"
    mongodb_users_collection: str = "users"
    mongodb_server_selection_timeout_ms: int = 10000
    mongodb_connect_timeout_ms: int = 10000
    mongodb_socket_timeout_ms: int = 10000
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 0
    mongodb_max_idle_time_ms: int = 10000
    mongodb_tls_insecure: bool = False

    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_expires_minutes: int = 60 * 24

    password_hash_rounds: int = 10

    cors_allowed_origins: str | list[str] = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ECLIPSE_",
        extra="ignore",
    )

    @field_validator("mongodb_uri")
    @classmethod
    def _require_mongodb_uri(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("mongodb_uri must be configured")
        return value

    @field_validator("jwt_secret_key")
    @classmethod
    def _reject_placeholder_secret(cls, value: str) -> str:
        if not value.strip() or value in _PLACEHOLDER_SECRETS:
            raise ValueError("jwt_secret_key must be set to a non-default secret")
        return value

    @field_validator("jwt_algorithm")
    @classmethod
    def _require_supported_algorithm(cls, value: str) -> str:
        if value != "HS256":
            raise ValueError("Only HS256 tokens are supported")
        return value

    @field_validator("password_hash_rounds")
    @classmethod
    def _check_hash_rounds(cls, value: int) -> int:
        # bcrypt accepts cost factors 4..31
        if not 4 <= value <= 31:
            raise ValueError("password_hash_rounds must be between 4 and 31")
        return value

    @property
    def mongodb_client_options(self) -> dict[str, Any]:
        """Keyword arguments passed to ``pymongo.MongoClient``."""

        options: dict[str, Any] = {
            "serverSelectionTimeoutMS": self.mongodb_server_selection_timeout_ms,
            "connectTimeoutMS": self.mongodb_connect_timeout_ms,
            "socketTimeoutMS": self.mongodb_socket_timeout_ms,
            "maxPoolSize": self.mongodb_max_pool_size,
            "minPoolSize": self.mongodb_min_pool_size,
            "maxIdleTimeMS": self.mongodb_max_idle_time_ms,
            "retryWrites": True,
            "retryReads": True,
        }
        if self.mongodb_tls_insecure:
            options["tls"] = True
            options["tlsAllowInvalidCertificates"] = True
        return options

    @property
    def resolved_cors_allowed_origins(self) -> list[str]:
        """Return the configured CORS origins as a normalized list."""

        if isinstance(self.cors_allowed_origins, str):
            return [
                origin.strip()
                for origin in self.cors_allowed_origins.split(",")
                if origin.strip()
            ]

        return list(self.cors_allowed_origins)


@lru_cache
def get_settings() -> Settings:
    """Cache settings to avoid re-parsing environment files."""
    return Settings()
