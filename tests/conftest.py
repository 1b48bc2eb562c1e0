"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from typing import Generic, TypeVar

import pytest

from timezone_detector.config import Settings
from timezone_detector.domain.configuration import (
    ConfigurationInternal,
    TimeZoneConfiguration,
)
from timezone_detector.domain.suggestions import (
    GeolocationTimeZoneSuggestion,
    TelephonyMatchType,
    TelephonyQuality,
    TelephonyTimeZoneSuggestion,
)
from timezone_detector.services.detector import (
    ConfigChangeListener,
    TimeZoneDetectorCallback,
    TimeZoneDetectorStrategy,
)
from timezone_detector.services.telephony import TelephonyScore

USER_ID = 9876
ARBITRARY_TIME_ZONE_ID = "Etc/UTC"
SLOT_INDEX1 = 10000
SLOT_INDEX2 = 20000

CONFIG_INT_USER_RESTRICTED_AUTO_DISABLED = ConfigurationInternal(
    user_id=USER_ID,
    user_config_allowed=False,
    auto_detection_supported=True,
    auto_detection_enabled=False,
    location_enabled=True,
    geo_detection_enabled=False,
)
CONFIG_INT_USER_RESTRICTED_AUTO_ENABLED = ConfigurationInternal(
    user_id=USER_ID,
    user_config_allowed=False,
    auto_detection_supported=True,
    auto_detection_enabled=True,
    location_enabled=True,
    geo_detection_enabled=True,
)
CONFIG_INT_AUTO_DETECT_NOT_SUPPORTED = ConfigurationInternal(
    user_id=USER_ID,
    user_config_allowed=True,
    auto_detection_supported=False,
    auto_detection_enabled=False,
    location_enabled=True,
    geo_detection_enabled=False,
)
CONFIG_INT_AUTO_DISABLED_GEO_DISABLED = ConfigurationInternal(
    user_id=USER_ID,
    user_config_allowed=True,
    auto_detection_supported=True,
    auto_detection_enabled=False,
    location_enabled=True,
    geo_detection_enabled=False,
)
CONFIG_INT_AUTO_ENABLED_GEO_DISABLED = replace(
    CONFIG_INT_AUTO_DISABLED_GEO_DISABLED, auto_detection_enabled=True
)
CONFIG_INT_AUTO_ENABLED_GEO_ENABLED = replace(
    CONFIG_INT_AUTO_ENABLED_GEO_DISABLED, geo_detection_enabled=True
)

CONFIG_AUTO_DISABLED = TimeZoneConfiguration(auto_detection_enabled=False)
CONFIG_AUTO_ENABLED = TimeZoneConfiguration(auto_detection_enabled=True)
CONFIG_GEO_DETECTION_ENABLED = TimeZoneConfiguration(geo_detection_enabled=True)
CONFIG_GEO_DETECTION_DISABLED = TimeZoneConfiguration(geo_detection_enabled=False)


@dataclass(frozen=True)
class TelephonyTestCase:
    """Match type and quality with the score they should produce."""

    match_type: TelephonyMatchType
    quality: TelephonyQuality
    expected_score: TelephonyScore

    def create_suggestion(
        self, slot_index: int, zone_id: str
    ) -> TelephonyTimeZoneSuggestion:
        return TelephonyTimeZoneSuggestion(
            slot_index=slot_index,
            zone_id=zone_id,
            match_type=self.match_type,
            quality=self.quality,
        )


# Ordered so that each case scores the same as or higher than the previous one.
TELEPHONY_TEST_CASES = [
    TelephonyTestCase(
        TelephonyMatchType.NETWORK_COUNTRY_ONLY,
        TelephonyQuality.MULTIPLE_ZONES_WITH_DIFFERENT_OFFSETS,
        TelephonyScore.LOW,
    ),
    TelephonyTestCase(
        TelephonyMatchType.NETWORK_COUNTRY_ONLY,
        TelephonyQuality.MULTIPLE_ZONES_WITH_SAME_OFFSET,
        TelephonyScore.MEDIUM,
    ),
    TelephonyTestCase(
        TelephonyMatchType.NETWORK_COUNTRY_AND_OFFSET,
        TelephonyQuality.MULTIPLE_ZONES_WITH_SAME_OFFSET,
        TelephonyScore.MEDIUM,
    ),
    TelephonyTestCase(
        TelephonyMatchType.NETWORK_COUNTRY_ONLY,
        TelephonyQuality.SINGLE_ZONE,
        TelephonyScore.HIGH,
    ),
    TelephonyTestCase(
        TelephonyMatchType.NETWORK_COUNTRY_AND_OFFSET,
        TelephonyQuality.SINGLE_ZONE,
        TelephonyScore.HIGH,
    ),
    TelephonyTestCase(
        TelephonyMatchType.TEST_NETWORK_OFFSET_ONLY,
        TelephonyQuality.MULTIPLE_ZONES_WITH_SAME_OFFSET,
        TelephonyScore.HIGHEST,
    ),
    TelephonyTestCase(
        TelephonyMatchType.EMULATOR_ZONE_ID,
        TelephonyQuality.SINGLE_ZONE,
        TelephonyScore.HIGHEST,
    ),
]

T = TypeVar("T")


class TrackedValue(Generic[T]):
    """Value that records sets made since the last commit."""

    def __init__(self) -> None:
        self.initial: T | None = None
        self.values: list[T] = []

    def init(self, value: T | None) -> None:
        self.initial = value
        self.values = []

    def set(self, value: T) -> None:
        self.values.append(value)

    def latest(self) -> T | None:
        return self.values[-1] if self.values else self.initial

    def commit(self) -> None:
        self.initial = self.latest()
        self.values = []


class FakeCallback(TimeZoneDetectorCallback):
    """Single-user callback that tracks device and configuration changes."""

    def __init__(self) -> None:
        self.configuration: TrackedValue[ConfigurationInternal] = TrackedValue()
        self.time_zone_id: TrackedValue[str] = TrackedValue()
        self.listener: ConfigChangeListener | None = None

    def get_configuration_internal(self, user_id: int) -> ConfigurationInternal:
        configuration = self.configuration.latest()
        assert configuration is not None
        assert user_id == configuration.user_id, "FakeCallback supports one user"
        return configuration

    def set_config_change_listener(self, listener: ConfigChangeListener) -> None:
        self.listener = listener

    def get_current_user_id(self) -> int:
        configuration = self.configuration.latest()
        return configuration.user_id if configuration is not None else USER_ID

    def is_device_time_zone_initialized(self) -> bool:
        return self.time_zone_id.latest() is not None

    def get_device_time_zone(self) -> str | None:
        return self.time_zone_id.latest()

    def set_device_time_zone(self, zone_id: str) -> None:
        self.time_zone_id.set(zone_id)

    def store_configuration(
        self, user_id: int, configuration: TimeZoneConfiguration
    ) -> None:
        current = self.get_configuration_internal(user_id)
        merged = current.merge(configuration)
        if merged != current:
            self.configuration.set(merged)
            if self.listener is not None:
                self.listener()

    def commit_all_changes(self) -> None:
        self.configuration.commit()
        self.time_zone_id.commit()


@dataclass
class RecordingConfigChangeListener:
    """Config change listener that counts calls."""

    calls: int = 0

    def __call__(self) -> None:
        self.calls += 1


@dataclass
class Script:
    """Fluent helper for driving the strategy and checking the fake callback."""

    callback: FakeCallback
    strategy: TimeZoneDetectorStrategy
    listener: RecordingConfigChangeListener = field(
        default_factory=RecordingConfigChangeListener
    )

    def __post_init__(self) -> None:
        self.strategy.add_config_change_listener(self.listener)

    def initialize_config(self, configuration: ConfigurationInternal) -> "Script":
        self.callback.configuration.init(configuration)
        return self

    def initialize_time_zone_setting(self, zone_id: str) -> "Script":
        self.callback.time_zone_id.init(zone_id)
        return self

    def simulate_update_configuration(
        self, user_id: int, change: TimeZoneConfiguration, expected_result: bool
    ) -> "Script":
        assert self.strategy.update_configuration(user_id, change) is expected_result
        return self

    def simulate_telephony_suggestion(
        self, suggestion: TelephonyTimeZoneSuggestion
    ) -> "Script":
        self.strategy.suggest_telephony_time_zone(suggestion)
        return self

    def simulate_geolocation_suggestion(
        self, suggestion: GeolocationTimeZoneSuggestion
    ) -> "Script":
        self.strategy.suggest_geolocation_time_zone(suggestion)
        return self

    def verify_time_zone_not_changed(self) -> "Script":
        assert self.callback.time_zone_id.values == []
        return self

    def verify_time_zone_changed_and_reset(self, zone_id: str) -> "Script":
        assert self.callback.time_zone_id.values == [zone_id]
        self.callback.commit_all_changes()
        return self

    def verify_configuration_changed_and_reset(
        self, expected: ConfigurationInternal
    ) -> "Script":
        assert self.callback.configuration.values
        assert self.callback.configuration.latest() == expected
        assert self.listener.calls == 1
        self.callback.commit_all_changes()
        self.listener.calls = 0
        return self

    def verify_configuration_not_changed(self) -> "Script":
        assert self.callback.configuration.values == []
        assert self.listener.calls == 0
        return self

    def reset_configuration_tracking(self) -> "Script":
        self.callback.commit_all_changes()
        return self


@pytest.fixture
def fake_callback() -> FakeCallback:
    return FakeCallback()


@pytest.fixture
def strategy(fake_callback: FakeCallback) -> TimeZoneDetectorStrategy:
    return TimeZoneDetectorStrategy(fake_callback)


@pytest.fixture
def script(
    fake_callback: FakeCallback, strategy: TimeZoneDetectorStrategy
) -> Script:
    return Script(callback=fake_callback, strategy=strategy)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        user_id=USER_ID,
        initial_time_zone=ARBITRARY_TIME_ZONE_ID,
    )
