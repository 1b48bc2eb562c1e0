"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from timezone_detector.domain.configuration import ConfigurationInternal

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Detector settings loaded from TZ_DETECTOR_* environment variables."""

    environment: str = _ENVIRONMENT
    debug: bool = False
    time_zone_change_log_size: int = Field(default=30, ge=0)
    user_id: int = 0
    initial_time_zone: str | None = None
    user_config_allowed: bool = True
    auto_detection_supported: bool = True
    auto_detection_enabled: bool = True
    location_enabled: bool = True
    geo_detection_enabled: bool = False

    model_config = SettingsConfigDict(
        env_prefix="TZ_DETECTOR_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def initial_configuration(self) -> ConfigurationInternal:
        """Return the starting configuration for the configured user."""
        return ConfigurationInternal(
            user_id=self.user_id,
            user_config_allowed=self.user_config_allowed,
            auto_detection_supported=self.auto_detection_supported,
            auto_detection_enabled=self.auto_detection_enabled,
            location_enabled=self.location_enabled,
            geo_detection_enabled=self.geo_detection_enabled,
        )
