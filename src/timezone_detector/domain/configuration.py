"""Domain models for time zone detection configuration."""

from dataclasses import dataclass, replace
from enum import Enum


class DetectionMode(Enum):
    """Which source, if any, drives the device time zone."""

    OFF = "off"
    AUTO_TELEPHONY = "auto_telephony"
    AUTO_GEO = "auto_geo"


@dataclass(frozen=True)
class TimeZoneConfiguration:
    """User-settable configuration; unset fields are None.

    Used both as a partial change request and, when complete, as the
    user-visible view of a ConfigurationInternal.
    """

    auto_detection_enabled: bool | None = None
    geo_detection_enabled: bool | None = None

    def is_complete(self) -> bool:
        """Return True when every user-settable field is present."""
        return (
            self.auto_detection_enabled is not None
            and self.geo_detection_enabled is not None
        )


@dataclass(frozen=True)
class ConfigurationInternal:
    """Complete configuration for a user, including device restrictions."""

    user_id: int
    user_config_allowed: bool
    auto_detection_supported: bool
    auto_detection_enabled: bool
    location_enabled: bool
    geo_detection_enabled: bool

    @property
    def auto_detection_enabled_behavior(self) -> bool:
        """Return True when automatic detection is actually in effect."""
        return self.auto_detection_supported and self.auto_detection_enabled

    @property
    def geo_detection_enabled_behavior(self) -> bool:
        """Return True when geolocation is the active detection source."""
        return (
            self.auto_detection_enabled_behavior
            and self.location_enabled
            and self.geo_detection_enabled
        )

    @property
    def detection_mode(self) -> DetectionMode:
        """Return the detection mode implied by this configuration."""
        if not self.auto_detection_enabled_behavior:
            return DetectionMode.OFF
        if self.geo_detection_enabled_behavior:
            return DetectionMode.AUTO_GEO
        return DetectionMode.AUTO_TELEPHONY

    def as_configuration(self) -> TimeZoneConfiguration:
        """Return the user-visible configuration."""
        return TimeZoneConfiguration(
            auto_detection_enabled=self.auto_detection_enabled,
            geo_detection_enabled=self.geo_detection_enabled,
        )

    def merge(self, change: TimeZoneConfiguration) -> "ConfigurationInternal":
        """Return a copy with the fields present in the change applied."""
        updates: dict[str, bool] = {}
        if change.auto_detection_enabled is not None:
            updates["auto_detection_enabled"] = change.auto_detection_enabled
        if change.geo_detection_enabled is not None:
            updates["geo_detection_enabled"] = change.geo_detection_enabled
        return replace(self, **updates)
