"""Application configuration settings."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    app_name: str = Field(
        default="Lapu",
        description="Display name used in welcome notifications",
        min_length=1,
    )
    app_url: str = Field(
        default="https://lapu.gg",
        description="Home URL opened when a notification has no explicit target",
        min_length=1,
        max_length=1024,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to stamp credential records",
    )
    kv_rest_api_url: str | None = Field(
        default=None,
        description="URL of the remote key-value store (redis:// or https:// REST endpoint)",
    )
    kv_rest_api_token: str | None = Field(
        default=None,
        description="Access token for the remote key-value store",
    )
    kv_key_prefix: str = Field(
        default="miniapp:notifications",
        description="Namespace prepended to every credential key",
        min_length=1,
    )
    notification_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to outbound notification and key-value requests",
        gt=0,
    )
    notifications_api_key: str | None = Field(
        default=None,
        description="Shared secret required by the notification trigger endpoints",
    )
    webhook_allow_unverified: bool = Field(
        default=False,
        description="Trust unsigned webhook envelopes (development only)",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @model_validator(mode="after")
    def _validate_kv_pair(self) -> "Settings":
        if bool(self.kv_rest_api_url) ^ bool(self.kv_rest_api_token):
            raise ValueError(
                "KV_REST_API_URL and KV_REST_API_TOKEN must both be provided to enable the remote store"
            )
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ValueError(f"LOG_LEVEL '{self.log_level}' is not a valid logging level")
        return self

    @property
    def remote_store_configured(self) -> bool:
        return bool(self.kv_rest_api_url and self.kv_rest_api_token)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
