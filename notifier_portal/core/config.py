"""Application settings loaded from environment."""

from functools import lru_cache
from urllib.parse import urlsplit
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notifier_portal.core.enums import ChannelEnum

_LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class Settings(BaseSettings):
    """Runtime application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Delayed Notifier Portal"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    api_base_url: str = "http://localhost:8080/api/v1"
    request_timeout_seconds: float | None = Field(default=None, gt=0)
    ready_timeout_seconds: float = Field(default=3.0, gt=0)

    display_timezone: str = "UTC"
    default_channel: ChannelEnum = ChannelEnum.TELEGRAM

    @field_validator("api_base_url", mode="before")
    @classmethod
    def normalize_api_base_url(cls, value: object) -> object:
        """Strip whitespace and trailing slashes from the backend base URL."""
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, value: str) -> str:
        """Accept only absolute http(s) URLs."""
        parts = urlsplit(value)
        if parts.scheme not in {"http", "https"} or not parts.hostname:
            raise ValueError("API_BASE_URL must be an absolute http(s) URL")
        return value

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, value: str) -> str:
        """Reject zone names unknown to the tz database."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown DISPLAY_TIMEZONE: {value}") from exc
        return value

    @field_validator("default_channel", mode="before")
    @classmethod
    def normalize_default_channel(cls, value: object) -> object:
        """Normalize channel token for case-insensitive env parsing."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def validate_transport_for_environment(self) -> "Settings":
        """Block plain-http backends in production-like environments."""
        env_name = self.app_env.strip().lower()
        if env_name not in {"production", "prod"}:
            return self

        parts = urlsplit(self.api_base_url)
        if parts.scheme != "https" and parts.hostname not in _LOOPBACK_HOSTS:
            raise ValueError(
                "API_BASE_URL must use https in production environment "
                "unless it targets a loopback host",
            )
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        """Zone used to interpret the date/time input of the form."""
        return ZoneInfo(self.display_timezone)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
