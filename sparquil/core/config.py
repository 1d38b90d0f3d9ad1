"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sparquil.core.constants import DEFAULT_ENV_PATTERN, ENV_NAMESPACE


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_env_pattern rejects a mirrored
    pattern that could never match a valid env key.
    """

    # App
    app_name: str = "sparquil"
    debug: bool = False

    # Redis key/value store
    redis_host: str = "127.0.0.1"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_socket_connect_timeout: float = 5.0
    # e.g. "K$gx"; None leaves the server's notify-keyspace-events untouched.
    redis_notify_keyspace_events: str | None = None

    # Environment mirror
    env_pattern: str = DEFAULT_ENV_PATTERN

    # Sketch
    sketch_title: str = "You spin my circle right round"
    sketch_width: int = 500
    sketch_height: int = 500
    sketch_frame_rate: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_env_pattern(self) -> "Settings":
        """Require a non-empty pattern inside the env namespace."""
        if not self.env_pattern:
            raise ValueError("ENV_PATTERN must not be empty.")
        if not self.env_pattern.startswith(ENV_NAMESPACE):
            raise ValueError(
                f"ENV_PATTERN must start with {ENV_NAMESPACE!r}, got: {self.env_pattern!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
