"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (session_secret, razorpay_key_secret) have no defaults: startup fails
      with a ValidationError when they are missing, so tokens and payment
      signatures are never keyed by a value published in the source
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - session_secret needs at least 32 characters (HS256 key length)
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://taskshare:taskshare@db:5432/taskshare"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Sessions
    session_secret: str = Field(min_length=32)
    session_ttl_minutes: int = 60 * 24

    # Invitations
    app_base_url: str = "http://localhost:3000"

    # Email
    email_provider: str = "log"  # "smtp" | "log"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    email_from: str = "TaskShare <no-reply@taskshare.local>"

    # Payments (Razorpay)
    razorpay_key_id: str = "rzp_test_placeholder"
    razorpay_key_secret: str = Field(min_length=1)
    razorpay_base_url: str = "https://api.razorpay.com/v1"
    razorpay_timeout_seconds: float = 10.0
    upgrade_amount_paise: int = 49_900
    upgrade_currency: str = "INR"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
