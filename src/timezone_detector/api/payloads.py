"""Pydantic models for values crossing the transport boundary."""

from pydantic import BaseModel, ConfigDict

from timezone_detector.domain.capabilities import Capability, TimeZoneCapabilities
from timezone_detector.domain.configuration import (
    ConfigurationInternal,
    TimeZoneConfiguration,
)
from timezone_detector.domain.suggestions import (
    GeolocationTimeZoneSuggestion,
    ManualTimeZoneSuggestion,
    TelephonyMatchType,
    TelephonyQuality,
    TelephonyTimeZoneSuggestion,
)


class ConfigurationInternalPayload(BaseModel):
    """Complete user configuration payload."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    user_config_allowed: bool
    auto_detection_supported: bool
    auto_detection_enabled: bool
    location_enabled: bool
    geo_detection_enabled: bool

    @classmethod
    def from_domain(cls, config: ConfigurationInternal) -> "ConfigurationInternalPayload":
        return cls(
            user_id=config.user_id,
            user_config_allowed=config.user_config_allowed,
            auto_detection_supported=config.auto_detection_supported,
            auto_detection_enabled=config.auto_detection_enabled,
            location_enabled=config.location_enabled,
            geo_detection_enabled=config.geo_detection_enabled,
        )

    def to_domain(self) -> ConfigurationInternal:
        return ConfigurationInternal(
            user_id=self.user_id,
            user_config_allowed=self.user_config_allowed,
            auto_detection_supported=self.auto_detection_supported,
            auto_detection_enabled=self.auto_detection_enabled,
            location_enabled=self.location_enabled,
            geo_detection_enabled=self.geo_detection_enabled,
        )


class TimeZoneConfigurationPayload(BaseModel):
    """Partial configuration change payload."""

    model_config = ConfigDict(frozen=True)

    auto_detection_enabled: bool | None = None
    geo_detection_enabled: bool | None = None

    @classmethod
    def from_domain(
        cls, configuration: TimeZoneConfiguration
    ) -> "TimeZoneConfigurationPayload":
        return cls(
            auto_detection_enabled=configuration.auto_detection_enabled,
            geo_detection_enabled=configuration.geo_detection_enabled,
        )

    def to_domain(self) -> TimeZoneConfiguration:
        return TimeZoneConfiguration(
            auto_detection_enabled=self.auto_detection_enabled,
            geo_detection_enabled=self.geo_detection_enabled,
        )


class CapabilitiesPayload(BaseModel):
    """User capabilities payload."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    configure_auto_detection_enabled: Capability
    configure_geo_detection_enabled: Capability
    suggest_manual_time_zone: Capability

    @classmethod
    def from_domain(cls, capabilities: TimeZoneCapabilities) -> "CapabilitiesPayload":
        return cls(
            user_id=capabilities.user_id,
            configure_auto_detection_enabled=capabilities.configure_auto_detection_enabled,
            configure_geo_detection_enabled=capabilities.configure_geo_detection_enabled,
            suggest_manual_time_zone=capabilities.suggest_manual_time_zone,
        )

    def to_domain(self) -> TimeZoneCapabilities:
        return TimeZoneCapabilities(
            user_id=self.user_id,
            configure_auto_detection_enabled=self.configure_auto_detection_enabled,
            configure_geo_detection_enabled=self.configure_geo_detection_enabled,
            suggest_manual_time_zone=self.suggest_manual_time_zone,
        )


class TelephonySuggestionPayload(BaseModel):
    """Telephony suggestion payload; missing fields are passed through as-is."""

    slot_index: int
    zone_id: str | None = None
    match_type: TelephonyMatchType | None = None
    quality: TelephonyQuality | None = None
    debug_info: list[str] = []

    @classmethod
    def from_domain(
        cls, suggestion: TelephonyTimeZoneSuggestion
    ) -> "TelephonySuggestionPayload":
        return cls(
            slot_index=suggestion.slot_index,
            zone_id=suggestion.zone_id,
            match_type=suggestion.match_type,
            quality=suggestion.quality,
            debug_info=list(suggestion.debug_info),
        )

    def to_domain(self) -> TelephonyTimeZoneSuggestion:
        return TelephonyTimeZoneSuggestion(
            slot_index=self.slot_index,
            zone_id=self.zone_id,
            match_type=self.match_type,
            quality=self.quality,
            debug_info=tuple(self.debug_info),
        )


class GeolocationSuggestionPayload(BaseModel):
    """Geolocation suggestion payload; zone_ids is null when uncertain."""

    zone_ids: list[str] | None
    debug_info: list[str] = []

    @classmethod
    def from_domain(
        cls, suggestion: GeolocationTimeZoneSuggestion
    ) -> "GeolocationSuggestionPayload":
        zone_ids = None if suggestion.zone_ids is None else list(suggestion.zone_ids)
        return cls(zone_ids=zone_ids, debug_info=list(suggestion.debug_info))

    def to_domain(self) -> GeolocationTimeZoneSuggestion:
        zone_ids = None if self.zone_ids is None else tuple(self.zone_ids)
        return GeolocationTimeZoneSuggestion(
            zone_ids=zone_ids, debug_info=tuple(self.debug_info)
        )


class ManualSuggestionPayload(BaseModel):
    """Manual suggestion payload."""

    zone_id: str

    @classmethod
    def from_domain(cls, suggestion: ManualTimeZoneSuggestion) -> "ManualSuggestionPayload":
        return cls(zone_id=suggestion.zone_id)

    def to_domain(self) -> ManualTimeZoneSuggestion:
        return ManualTimeZoneSuggestion(zone_id=self.zone_id)
