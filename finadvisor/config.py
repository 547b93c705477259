# finadvisor/config.py
"""
Configuration for the Financial Advisor API.

Everything comes from environment variables prefixed with ``FINADVISOR_``
(or a local ``.env`` file). ``get_settings`` is cached and injected with
``Depends(get_settings)`` so tests can swap it out.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FINADVISOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )

    # Record store
    database_url: str = Field(
        default="sqlite:///./finadvisor.db",
        description="SQLAlchemy database URL"
    )

    # Tokens
    jwt_secret: str = Field(
        default="change-me",
        description="Secret used to sign access tokens"
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expires_days: int = Field(
        default=30,
        ge=1,
        description="Access token lifetime in days"
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor"
    )

    # Demo identities and the seed route are only available when this is on.
    demo_mode: bool = Field(
        default=False,
        description="Accept the built-in demo accounts and expose /api/seed"
    )

    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # Launcher
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5001, ge=1, le=65535)
    port_scan: bool = Field(
        default=False,
        description="Probe for the next free port if the configured one is taken"
    )
    port_scan_span: int = Field(default=10, ge=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (console renderer otherwise)"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload after changing the environment.
    """
    return Settings()
