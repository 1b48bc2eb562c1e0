"""Domain models for time zone suggestions."""

from dataclasses import dataclass, field, replace
from enum import Enum


class TelephonyMatchType(Enum):
    """How a telephony suggestion was matched to a zone."""

    NETWORK_COUNTRY_ONLY = "network_country_only"
    NETWORK_COUNTRY_AND_OFFSET = "network_country_and_offset"
    EMULATOR_ZONE_ID = "emulator_zone_id"
    TEST_NETWORK_OFFSET_ONLY = "test_network_offset_only"


class TelephonyQuality(Enum):
    """How ambiguous the zone behind a telephony suggestion is."""

    SINGLE_ZONE = "single_zone"
    MULTIPLE_ZONES_WITH_SAME_OFFSET = "multiple_zones_with_same_offset"
    MULTIPLE_ZONES_WITH_DIFFERENT_OFFSETS = "multiple_zones_with_different_offsets"


@dataclass(frozen=True)
class TelephonyTimeZoneSuggestion:
    """Suggestion from one telephony slot; a missing zone_id withdraws it."""

    slot_index: int
    zone_id: str | None = None
    match_type: TelephonyMatchType | None = None
    quality: TelephonyQuality | None = None
    debug_info: tuple[str, ...] = field(default=(), compare=False)

    def with_debug_info(self, *lines: str) -> "TelephonyTimeZoneSuggestion":
        """Return a copy with extra debug lines appended."""
        return replace(self, debug_info=self.debug_info + lines)


@dataclass(frozen=True)
class GeolocationTimeZoneSuggestion:
    """Suggestion from geolocation.

    zone_ids is None when the location is uncertain, empty when the location
    is known but matches no zone, and otherwise ordered by preference.
    """

    zone_ids: tuple[str, ...] | None
    debug_info: tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_certain(self) -> bool:
        """Return True when the suggestion reflects a known location."""
        return self.zone_ids is not None

    def with_debug_info(self, *lines: str) -> "GeolocationTimeZoneSuggestion":
        """Return a copy with extra debug lines appended."""
        return replace(self, debug_info=self.debug_info + lines)


@dataclass(frozen=True)
class ManualTimeZoneSuggestion:
    """Time zone picked by the user."""

    zone_id: str
