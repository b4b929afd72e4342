# python
# app/core/config.py
"""Configuration settings for the Chat API application.

Uses Pydantic BaseSettings for environment variable management.
"""
import secrets
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Chat API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")
    app_url: str = Field(
        default="http://localhost:3000", description="Public base URL used for redirects"
    )

    # ===== Session Settings =====
    session_secret: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Secret used to sign provider session tokens",
    )
    jwt_secret: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Secret used to sign standalone login tokens",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    session_max_age_days: int = Field(default=30, description="Provider session lifetime")
    login_token_expire_minutes: int = Field(
        default=60, description="Standalone login token lifetime"
    )
    session_cookie_name: str = Field(default="session-token", description="Session cookie name")
    login_cookie_name: str = Field(default="token", description="Standalone login cookie name")
    cookie_secure: bool = Field(default=False, description="Mark auth cookies Secure")

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== OAuth Providers =====
    google_client_id: str | None = Field(default=None, description="Google OAuth client id")
    google_client_secret: str | None = Field(default=None, description="Google OAuth secret")
    github_client_id: str | None = Field(default=None, description="GitHub OAuth client id")
    github_client_secret: str | None = Field(default=None, description="GitHub OAuth secret")

    # ===== Completion Service =====
    completion_api_base_url: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenAI-compatible API base URL"
    )
    completion_api_key: str | None = Field(default=None, description="Completion API key")
    completion_default_model: str = Field(
        default="deepseek/deepseek-r1:free", description="Model used when none is requested"
    )
    completion_max_tokens_ceiling: int = Field(
        default=4096, description="Hard ceiling on max_tokens forwarded upstream"
    )
    completion_default_max_tokens: int = Field(
        default=2000, description="max_tokens used when the caller gives none"
    )
    completion_temperature: float = Field(default=0.7, description="Sampling temperature")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Email Configuration =====
    smtp_host: str | None = Field(default=None, description="SMTP host")
    smtp_port: int = Field(default=587, description="SMTP port")
    smtp_user: str | None = Field(default=None, description="SMTP username")
    smtp_password: str | None = Field(default=None, description="SMTP password")
    email_from: str | None = Field(default=None, description="Email from address")

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_completion_enabled(self) -> bool:
        return bool(self.completion_api_key)

    @property
    def has_email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    def oauth_credentials(self, provider: str) -> tuple[str, str] | None:
        """Return (client_id, client_secret) when both are set for a provider."""
        client_id = getattr(self, f"{provider}_client_id", None)
        client_secret = getattr(self, f"{provider}_client_secret", None)
        if client_id and client_secret:
            return client_id, client_secret
        return None

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("completion_max_tokens_ceiling")
    @classmethod
    def validate_tokens_ceiling(cls, v):
        if v < 1:
            raise ValueError("Completion max tokens ceiling must be positive")
        return v

    @field_validator("app_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings(config: Settings | None = None):
        config = config or settings
        errors = []
        if not config.database_url:
            errors.append("DATABASE_URL is required")
        if config.is_production and "session_secret" not in config.model_fields_set:
            errors.append("SESSION_SECRET is required in production")
        if config.is_production and "jwt_secret" not in config.model_fields_set:
            errors.append("JWT_SECRET is required in production")
        if config.is_production and not config.completion_api_key:
            errors.append("COMPLETION_API_KEY is required in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status(config: Settings | None = None) -> dict:
        config = config or settings
        return {
            "completion_enabled": config.has_completion_enabled,
            "email_enabled": config.has_email_enabled,
            "oauth_providers": [
                name for name in ("google", "github") if config.oauth_credentials(name)
            ],
            "environment": config.environment,
        }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
