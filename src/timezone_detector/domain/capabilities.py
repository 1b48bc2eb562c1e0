"""Capability model: what a user may change or suggest."""

from dataclasses import dataclass
from enum import Enum

from timezone_detector.domain.configuration import (
    ConfigurationInternal,
    TimeZoneConfiguration,
)


class Capability(Enum):
    """State of a single capability."""

    POSSESSED = "possessed"
    NOT_ALLOWED = "not_allowed"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class TimeZoneCapabilities:
    """Capabilities of a user, derived from their configuration."""

    user_id: int
    configure_auto_detection_enabled: Capability
    configure_geo_detection_enabled: Capability
    suggest_manual_time_zone: Capability

    def try_apply_config_changes(
        self, old_config: ConfigurationInternal, change: TimeZoneConfiguration
    ) -> ConfigurationInternal | None:
        """Return the merged configuration, or None if any change is not permitted.

        Every field present in the change must be backed by a possessed
        capability; a single missing capability rejects the whole request.
        """
        if (
            change.auto_detection_enabled is not None
            and self.configure_auto_detection_enabled is not Capability.POSSESSED
        ):
            return None
        if (
            change.geo_detection_enabled is not None
            and self.configure_geo_detection_enabled is not Capability.POSSESSED
        ):
            return None
        return old_config.merge(change)


@dataclass(frozen=True)
class TimeZoneCapabilitiesAndConfig:
    """Capabilities paired with the user-visible configuration."""

    capabilities: TimeZoneCapabilities
    configuration: TimeZoneConfiguration


def compute_capabilities(config: ConfigurationInternal) -> TimeZoneCapabilities:
    """Compute a user's capabilities from their current configuration."""
    allowed = config.user_config_allowed

    if not config.auto_detection_supported:
        configure_auto = Capability.NOT_APPLICABLE
    elif allowed:
        configure_auto = Capability.POSSESSED
    else:
        configure_auto = Capability.NOT_ALLOWED

    if allowed and config.auto_detection_supported and config.location_enabled:
        configure_geo = Capability.POSSESSED
    else:
        configure_geo = Capability.NOT_ALLOWED

    if allowed and not config.auto_detection_enabled_behavior:
        suggest_manual = Capability.POSSESSED
    else:
        suggest_manual = Capability.NOT_ALLOWED

    return TimeZoneCapabilities(
        user_id=config.user_id,
        configure_auto_detection_enabled=configure_auto,
        configure_geo_detection_enabled=configure_geo,
        suggest_manual_time_zone=suggest_manual,
    )


def try_apply_config_changes(
    old_config: ConfigurationInternal, change: TimeZoneConfiguration
) -> ConfigurationInternal | None:
    """Apply a change request if the user's capabilities permit all of it."""
    return compute_capabilities(old_config).try_apply_config_changes(old_config, change)
