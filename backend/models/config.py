import os
import sys
from pathlib import Path
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BACKEND_DIR = Path(__file__).resolve().parent.parent


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    Local development picks up SMTP and Turnstile credentials from
    `backend/.env`. Under pytest or in CI the file is skipped so tests see
    only the environment they set up themselves.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'test', 'staging', or 'production'",
    )
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins (comma-separated in env var)",
    )
    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )
    LOG_DIR: str = Field(
        default="logs",
        description="Directory for the rotating log file (empty disables file logging)",
    )

    # Cloudflare Turnstile bot verification
    # The secret toggles server-side enforcement; the site key is public.
    TURNSTILE_SECRET: str = Field(
        default="",
        description="Turnstile secret key (server only). Empty disables verification.",
    )
    TURNSTILE_SITEKEY: str = Field(
        default="",
        description="Turnstile site key exposed to the contact form",
    )
    TURNSTILE_VERIFY_URL: str = Field(
        default="https://challenges.cloudflare.com/turnstile/v0/siteverify",
        description="Turnstile siteverify endpoint",
    )
    TURNSTILE_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Deadline for the siteverify call",
    )

    # Email settings
    EMAIL_PROVIDER: str = Field(
        default="smtp",
        description="Email provider: 'smtp' or 'console'",
    )
    SMTP_HOST: str = Field(default="localhost", description="SMTP relay host")
    SMTP_PORT: int = Field(default=587, description="SMTP relay port")
    SMTP_USER: str = Field(default="", description="SMTP username")
    SMTP_PASSWORD: str = Field(default="", description="SMTP password")
    SMTP_FROM_EMAIL: str = Field(
        default="",
        description="Sender address (defaults to SMTP_USER)",
    )
    SMTP_FROM_NAME: str = Field(default="Contact Form", description="Sender name")
    SMTP_USE_TLS: bool = Field(
        default=True,
        description="Require STARTTLS before authenticating",
    )
    SMTP_USE_SSL: bool = Field(
        default=False,
        description="Use implicit SSL (port 465) instead of STARTTLS",
    )
    SMTP_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        description="Deadline for the whole mail dispatch",
    )
    CONTACT_RECIPIENT: str = Field(
        default="",
        description="Where contact form emails go (defaults to the site email)",
    )

    # Contact form rate limiting
    RATE_LIMIT_MAX: int = Field(
        default=5,
        description="Maximum contact submissions per caller address per window",
    )
    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=60 * 60,
        description="Length of the sliding rate-limit window",
    )
    RATE_LIMIT_STORAGE_URI: str = Field(
        default="memory://",
        description="Read-endpoint limiter storage (memory:// or redis://host)",
    )

    # Site content
    SITE_CONFIG_PATH: str = Field(
        default=str(BACKEND_DIR / "config" / "site.config.json"),
        description="Path to the public site configuration file",
    )
    MESSAGES_DIR: str = Field(
        default=str(BACKEND_DIR / "messages"),
        description="Directory holding <locale>.json message bundles",
    )
    DEFAULT_LOCALE: str = Field(default="en", description="Fallback locale")
    SUPPORTED_LOCALES: Annotated[List[str], NoDecode] = Field(
        default=["en", "es", "fr", "de", "ja"],
        description="Locales the site is translated into",
    )

    @property
    def turnstile_enabled(self) -> bool:
        """Server-side bot verification is enforced only when a secret is set."""
        return bool(self.TURNSTILE_SECRET)

    @property
    def sender_email(self) -> str:
        return self.SMTP_FROM_EMAIL or self.SMTP_USER

    @field_validator("CORS_ORIGINS", "SUPPORTED_LOCALES", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | List[str]) -> List[str]:
        """Parse list settings from comma-separated string."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


settings = Settings()
