"""Tollgate settings.

Every option can be set through a TOLLGATE_-prefixed environment variable or
a .env file in the working directory.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production-use-openssl-rand-hex-32"


class Settings(BaseSettings):
    """Process-wide configuration, validated once when first loaded."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TOLLGATE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Tollgate"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    app_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL used to build links in emails",
    )

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./tg_data/tollgate.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Security Settings
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        description="Secret key for session token signing",
    )
    session_token_expire_hours: int = Field(default=24, gt=0)

    # Account Lifecycle Settings
    email_verification_required: bool = True
    verification_token_expire_hours: int = Field(default=24, gt=0)
    password_reset_token_expire_hours: int = Field(default=24, gt=0)
    token_cleanup_interval_hours: int = Field(
        default=24,
        ge=0,
        description="Interval of the expired-token sweep; 0 disables the background task",
    )

    # Email Settings
    smtp_host: str | None = Field(
        default=None,
        description="SMTP server host. When unset, emails are written to the log instead",
    )
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    smtp_timeout: int = 10
    mail_from_email: str = "no-reply@localhost"
    mail_from_name: str = "Tollgate"

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept a comma-separated string as well as a JSON list."""
        if not isinstance(v, str):
            return v
        return [part.strip() for part in v.split(",") if part.strip()]

    @field_validator("app_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store the public URL without a trailing slash."""
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_production_secret(self) -> "Settings":
        """Refuse to run in production with the placeholder signing key."""
        if self.is_production and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError(
                "TOLLGATE_SECRET_KEY must be set in production. "
                "Generate one with: openssl rand -hex 32"
            )
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """SQLite files cannot be shared between worker processes."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                f"workers={self.workers} requires a server database; "
                "SQLite only supports a single worker"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Load settings on first use and return the same instance afterwards."""
    return Settings()
