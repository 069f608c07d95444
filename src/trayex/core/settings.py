"""Application settings and configuration.

This module defines all configuration options for the Trayex shuttle backend.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    Signing material (``JWT_SECRET`` and ``QR_JWT_KEYS``) is read once at
    process start and treated as immutable afterwards.
    """

    # Application metadata
    app_name: str = Field(default="Trayex", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./trayex.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Session (login) tokens
    jwt_secret: str = Field(default="", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_token_ttl_seconds: int = Field(
        default=60 * 60 * 24 * 7,
        alias="SESSION_TOKEN_TTL_SECONDS",
    )

    # Boarding-pass tokens. Comma separated, newest key first.
    qr_jwt_keys: str = Field(default="", alias="QR_JWT_KEYS")
    qr_token_ttl_seconds: int = Field(default=60 * 15, alias="QR_TOKEN_TTL_SECONDS")
    ticket_token_ttl_seconds: int = Field(default=60 * 10, alias="TICKET_TOKEN_TTL_SECONDS")
    offline_token_ttl_seconds: int = Field(default=60 * 60, alias="OFFLINE_TOKEN_TTL_SECONDS")

    # Client-side rotation cadence (independent of, and shorter than, the token TTL)
    pass_rotation_interval_seconds: float = Field(
        default=30.0,
        alias="PASS_ROTATION_INTERVAL_SECONDS",
    )
    api_base_url: str = Field(default="http://localhost:8000", alias="TRAYEX_API_BASE_URL")

    # CORS configuration for web and mobile front-ends
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def qr_signing_keys(self) -> list[str]:
        """Return the configured QR signing secrets, newest first.

        Returns:
            Non-empty, whitespace-trimmed entries of ``QR_JWT_KEYS``
        """
        return [part.strip() for part in self.qr_jwt_keys.split(",") if part.strip()]

    @property
    def allow_insecure_defaults(self) -> bool:
        """Return True when well-known development secrets may be substituted."""
        return self.environment.strip().lower() == "development"


settings = Settings()
