"""Time zone detection strategy.

Arbitrates between manual, telephony and geolocation suggestions under the
current user's configuration and applies the winning zone through a callback.
Every entry point runs under a single lock, so suggestions and configuration
changes are applied in one deterministic order.
"""

import logging
import threading
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from timezone_detector.diagnostics import Dumpable, IndentingWriter
from timezone_detector.domain.capabilities import (
    Capability,
    TimeZoneCapabilitiesAndConfig,
    compute_capabilities,
)
from timezone_detector.domain.configuration import (
    ConfigurationInternal,
    DetectionMode,
    TimeZoneConfiguration,
)
from timezone_detector.domain.suggestions import (
    GeolocationTimeZoneSuggestion,
    ManualTimeZoneSuggestion,
    TelephonyTimeZoneSuggestion,
)
from timezone_detector.services.configuration_store import ConfigurationStore
from timezone_detector.services.geolocation import (
    GeolocationSuggestionSlot,
    select_geolocation_zone,
)
from timezone_detector.services.telephony import (
    TELEPHONY_SCORE_USAGE_THRESHOLD,
    QualifiedTelephonySuggestion,
    TelephonySuggestionTable,
)

_logger = logging.getLogger(__name__)

ConfigChangeListener = Callable[[], None]


class TimeZoneDetectorCallback(Protocol):
    """Device and settings access used by the strategy."""

    def get_configuration_internal(self, user_id: int) -> ConfigurationInternal:
        """Return the stored configuration for a user."""

    def set_config_change_listener(self, listener: ConfigChangeListener) -> None:
        """Register the listener to call when configuration changes outside the strategy."""

    def get_current_user_id(self) -> int:
        """Return the id of the foreground user."""

    def is_device_time_zone_initialized(self) -> bool:
        """Return True when the device has a time zone set."""

    def get_device_time_zone(self) -> str | None:
        """Return the device time zone id."""

    def set_device_time_zone(self, zone_id: str) -> None:
        """Set the device time zone."""

    def store_configuration(
        self, user_id: int, configuration: TimeZoneConfiguration
    ) -> None:
        """Persist the user-settable configuration fields that are present."""


@dataclass(frozen=True)
class TimeZoneChange:
    """Entry in the device time zone change log."""

    zone_id: str
    previous_zone_id: str | None
    cause: str
    changed_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


class TimeZoneDetectorStrategy:
    """Decides the device time zone from suggestions and user configuration."""

    def __init__(
        self, callback: TimeZoneDetectorCallback, change_log_size: int = 30
    ) -> None:
        self._callback = callback
        self._lock = threading.RLock()
        self._configurations = ConfigurationStore(callback)
        self._telephony = TelephonySuggestionTable()
        self._geolocation = GeolocationSuggestionSlot()
        self._config_change_listeners: list[ConfigChangeListener] = []
        self._dumpables: list[Dumpable] = []
        self._time_zone_changes: deque[TimeZoneChange] = deque(maxlen=change_log_size)
        self._current_user_id = callback.get_current_user_id()
        callback.set_config_change_listener(self._handle_external_config_change)

    def add_config_change_listener(self, listener: ConfigChangeListener) -> None:
        """Register a listener called after every configuration change."""
        with self._lock:
            self._config_change_listeners.append(listener)

    def add_dumpable(self, dumpable: Dumpable) -> None:
        """Register a component included in dump()."""
        with self._lock:
            self._dumpables.append(dumpable)

    def get_current_user_configuration_internal(self) -> ConfigurationInternal:
        """Return the configuration of the current user."""
        with self._lock:
            return self._current_config()

    def get_capabilities_and_config(self, user_id: int) -> TimeZoneCapabilitiesAndConfig:
        """Return a user's capabilities and user-visible configuration."""
        with self._lock:
            config = self._configurations.get(user_id)
            return TimeZoneCapabilitiesAndConfig(
                capabilities=compute_capabilities(config),
                configuration=config.as_configuration(),
            )

    def update_configuration(
        self, user_id: int, change: TimeZoneConfiguration
    ) -> bool:
        """Apply a configuration change if the user is allowed to make all of it."""
        with self._lock:
            old_config = self._configurations.get(user_id)
            capabilities = compute_capabilities(old_config)
            new_config = capabilities.try_apply_config_changes(old_config, change)
            if new_config is None:
                _logger.info(
                    "Configuration change rejected: user_id=%s change=%s capabilities=%s",
                    user_id,
                    change,
                    capabilities,
                )
                return False

            self._configurations.replace(new_config)
            self._callback.store_configuration(user_id, change)
            if new_config != old_config:
                _logger.info(
                    "Configuration changed: user_id=%s change=%s", user_id, change
                )
                self._handle_config_changed(old_config, new_config, "configuration update")
            return True

    def suggest_manual_time_zone(
        self, user_id: int, suggestion: ManualTimeZoneSuggestion
    ) -> bool:
        """Apply a user-picked zone; returns False if the user may not pick one."""
        with self._lock:
            capabilities = compute_capabilities(self._configurations.get(user_id))
            if capabilities.suggest_manual_time_zone is not Capability.POSSESSED:
                _logger.info(
                    "Manual suggestion rejected: user_id=%s suggestion=%s capability=%s",
                    user_id,
                    suggestion,
                    capabilities.suggest_manual_time_zone.value,
                )
                return False

            self._set_device_time_zone_if_required(
                suggestion.zone_id,
                cause=f"manual suggestion: user_id={user_id}",
            )
            return True

    def suggest_telephony_time_zone(self, suggestion: TelephonyTimeZoneSuggestion) -> None:
        """Record a telephony suggestion and re-run detection."""
        with self._lock:
            qualified = self._telephony.record(suggestion)
            _logger.debug(
                "Telephony suggestion recorded: slot_index=%s score=%s zone_id=%s",
                suggestion.slot_index,
                qualified.score,
                suggestion.zone_id,
            )
            self._do_auto_time_zone_detection(
                self._current_config(),
                reason=f"telephony suggestion: slot_index={suggestion.slot_index}",
            )

    def suggest_geolocation_time_zone(
        self, suggestion: GeolocationTimeZoneSuggestion
    ) -> None:
        """Record a geolocation suggestion if geolocation detection is active."""
        with self._lock:
            config = self._current_config()
            if not config.geo_detection_enabled_behavior:
                _logger.debug(
                    "Geolocation suggestion discarded: detection_mode=%s suggestion=%s",
                    config.detection_mode.value,
                    suggestion,
                )
                return

            self._geolocation.record(suggestion)
            self._do_auto_time_zone_detection(config, reason="geolocation suggestion")

    def get_latest_telephony_suggestion(
        self, slot_index: int
    ) -> QualifiedTelephonySuggestion | None:
        with self._lock:
            return self._telephony.get(slot_index)

    def get_latest_geolocation_suggestion(self) -> GeolocationTimeZoneSuggestion | None:
        with self._lock:
            return self._geolocation.latest

    def find_best_telephony_suggestion(self) -> QualifiedTelephonySuggestion | None:
        with self._lock:
            return self._telephony.find_best()

    def dump(self, writer: IndentingWriter, args: Sequence[str]) -> None:
        """Write the strategy state, then every registered dumpable."""
        with self._lock:
            config = self._current_config()
            writer.println("TimeZoneDetectorStrategy:")
            writer.increase_indent()
            writer.println(f"current_user_id={config.user_id}")
            writer.println(f"known_user_ids={self._configurations.user_ids()}")
            writer.println(f"configuration={config}")
            writer.println(f"detection_mode={config.detection_mode.value}")
            writer.println(f"capabilities={compute_capabilities(config)}")
            writer.println(
                f"device_time_zone_initialized="
                f"{self._callback.is_device_time_zone_initialized()}"
            )
            writer.println(f"device_time_zone={self._current_device_time_zone()}")
            writer.println("Time zone change log:")
            writer.increase_indent()
            for change in self._time_zone_changes:
                writer.println(
                    f"{change.changed_at.isoformat()} {change.previous_zone_id}"
                    f" -> {change.zone_id}: {change.cause}"
                )
            writer.decrease_indent()
            self._telephony.dump(writer, args)
            self._geolocation.dump(writer, args)
            writer.decrease_indent()

            for dumpable in self._dumpables:
                dumpable.dump(writer, args)

    def _handle_external_config_change(self) -> None:
        """Reload the current user's configuration after a change outside the strategy."""
        with self._lock:
            user_id = self._callback.get_current_user_id()
            config = self._callback.get_configuration_internal(user_id)
            previous = self._configurations.peek(user_id)
            user_switched = user_id != self._current_user_id
            self._current_user_id = user_id
            if config == previous and not user_switched:
                return

            self._configurations.replace(config)
            if previous is None and not user_switched:
                # First load of the current user's record, nothing to compare against.
                _logger.debug("Loaded configuration: user_id=%s", user_id)
                return

            _logger.info(
                "External configuration change: user_id=%s user_switched=%s",
                user_id,
                user_switched,
            )
            self._handle_config_changed(previous, config, "external configuration change")

    def _handle_config_changed(
        self,
        previous: ConfigurationInternal | None,
        config: ConfigurationInternal,
        reason: str,
    ) -> None:
        if previous is None or previous.detection_mode != config.detection_mode:
            _logger.info(
                "Detection mode changed: user_id=%s %s -> %s",
                config.user_id,
                previous.detection_mode.value if previous else None,
                config.detection_mode.value,
            )

        is_current_user = config.user_id == self._callback.get_current_user_id()
        if is_current_user and not config.geo_detection_enabled_behavior:
            if self._geolocation.latest is not None:
                _logger.debug("Forgetting geolocation suggestion")
            self._geolocation.clear()

        for listener in list(self._config_change_listeners):
            listener()

        if is_current_user:
            self._do_auto_time_zone_detection(config, reason=reason)

    def _do_auto_time_zone_detection(
        self, config: ConfigurationInternal, reason: str
    ) -> None:
        mode = config.detection_mode
        if mode is DetectionMode.AUTO_GEO:
            self._do_geolocation_time_zone_detection(reason)
        elif mode is DetectionMode.AUTO_TELEPHONY:
            self._do_telephony_time_zone_detection(reason)

    def _do_geolocation_time_zone_detection(self, reason: str) -> None:
        suggestion = self._geolocation.latest
        if suggestion is None:
            _logger.debug("No geolocation suggestion: reason=%s", reason)
            return

        zone_id = select_geolocation_zone(
            suggestion.zone_ids, self._current_device_time_zone()
        )
        if zone_id is None:
            _logger.debug(
                "Geolocation suggestion requires no change: zone_ids=%s reason=%s",
                suggestion.zone_ids,
                reason,
            )
            return
        self._set_device_time_zone_if_required(
            zone_id, cause=f"geolocation: zone_ids={suggestion.zone_ids} ({reason})"
        )

    def _do_telephony_time_zone_detection(self, reason: str) -> None:
        best = self._telephony.find_best()
        if best is None or best.suggestion.zone_id is None:
            _logger.debug("No usable telephony suggestion: reason=%s", reason)
            return

        if (
            self._callback.is_device_time_zone_initialized()
            and best.score < TELEPHONY_SCORE_USAGE_THRESHOLD
        ):
            _logger.debug(
                "Telephony suggestion below threshold: score=%s threshold=%s reason=%s",
                best.score,
                int(TELEPHONY_SCORE_USAGE_THRESHOLD),
                reason,
            )
            return

        self._set_device_time_zone_if_required(
            best.suggestion.zone_id,
            cause=(
                f"telephony: slot_index={best.suggestion.slot_index}"
                f" score={best.score} ({reason})"
            ),
        )

    def _set_device_time_zone_if_required(self, zone_id: str, cause: str) -> None:
        current_zone_id = self._current_device_time_zone()
        if current_zone_id == zone_id:
            _logger.debug("Device time zone already %s: cause=%s", zone_id, cause)
            return

        self._callback.set_device_time_zone(zone_id)
        self._time_zone_changes.append(
            TimeZoneChange(zone_id=zone_id, previous_zone_id=current_zone_id, cause=cause)
        )
        _logger.info(
            "Device time zone changed: %s -> %s cause=%s",
            current_zone_id,
            zone_id,
            cause,
        )

    def _current_config(self) -> ConfigurationInternal:
        return self._configurations.get(self._callback.get_current_user_id())

    def _current_device_time_zone(self) -> str | None:
        if not self._callback.is_device_time_zone_initialized():
            return None
        return self._callback.get_device_time_zone()
