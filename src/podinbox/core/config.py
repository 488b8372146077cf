"""
podinbox Configuration

Loads configuration from environment variables and .env files.
"""

from functools import lru_cache
from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from podinbox.core.constants import HTTP_TIMEOUT_SECS_DEFAULT, HTTP_USER_AGENT_DEFAULT
from podinbox.core.models import PodConfig, PodInboxConfig


class Settings(BaseSettings):
    """podinbox settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PODINBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Pod transport
    auth_token: str = ""  # Bearer token for the pod, empty for anonymous access
    http_timeout_secs: float = HTTP_TIMEOUT_SECS_DEFAULT
    verify_tls: bool = True
    user_agent: str = HTTP_USER_AGENT_DEFAULT

    # Identity
    owner_webid: str = ""  # e.g. https://pod.example/alice/profile/card#me
    default_inbox: str = ""  # e.g. https://pod.example/alice/inbox

    # Notification shape (local path or URL, JSON or YAML)
    notification_shape: str = ""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_podinbox_config(self) -> PodInboxConfig:
        """Convert settings to PodInboxConfig."""
        return PodInboxConfig(
            pod=PodConfig(
                auth_token=self.auth_token,
                http_timeout_secs=self.http_timeout_secs,
                verify_tls=self.verify_tls,
                user_agent=self.user_agent,
            ),
            owner_webid=self.owner_webid,
            default_inbox=self.default_inbox,
            notification_shape=self.notification_shape,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_config() -> PodInboxConfig:
    """Get podinbox configuration."""
    return get_settings().to_podinbox_config()
