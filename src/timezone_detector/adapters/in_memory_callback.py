"""In-memory device and settings boundary."""

import logging
import threading
from dataclasses import replace

from timezone_detector.domain.configuration import (
    ConfigurationInternal,
    TimeZoneConfiguration,
)
from timezone_detector.services.detector import (
    ConfigChangeListener,
    TimeZoneDetectorCallback,
)

_logger = logging.getLogger(__name__)


class InMemoryDetectorCallback(TimeZoneDetectorCallback):
    """Keeps user configurations and the device time zone in memory.

    A user seen for the first time gets a copy of the seed configuration.
    Configuration changes that alter a stored record are reported to the
    registered listener synchronously, after the adapter's own lock is
    released.
    """

    def __init__(
        self,
        configuration: ConfigurationInternal,
        device_time_zone: str | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._defaults = configuration
        self._configurations = {configuration.user_id: configuration}
        self._current_user_id = configuration.user_id
        self._device_time_zone = device_time_zone
        self._listener: ConfigChangeListener | None = None

    def get_configuration_internal(self, user_id: int) -> ConfigurationInternal:
        with self._lock:
            return self._get_or_create(user_id)

    def set_config_change_listener(self, listener: ConfigChangeListener) -> None:
        with self._lock:
            self._listener = listener

    def get_current_user_id(self) -> int:
        with self._lock:
            return self._current_user_id

    def is_device_time_zone_initialized(self) -> bool:
        with self._lock:
            return self._device_time_zone is not None

    def get_device_time_zone(self) -> str | None:
        with self._lock:
            return self._device_time_zone

    def set_device_time_zone(self, zone_id: str) -> None:
        _logger.info("Setting device time zone: zone_id=%s", zone_id)
        with self._lock:
            self._device_time_zone = zone_id

    def store_configuration(
        self, user_id: int, configuration: TimeZoneConfiguration
    ) -> None:
        with self._lock:
            current = self._get_or_create(user_id)
            merged = current.merge(configuration)
            changed = merged != current
            if changed:
                self._configurations[user_id] = merged
        if changed:
            self._notify()

    def replace_configuration(self, configuration: ConfigurationInternal) -> None:
        """Replace a user's configuration as a system settings change would."""
        with self._lock:
            if self._configurations.get(configuration.user_id) == configuration:
                return
            self._configurations[configuration.user_id] = configuration
        self._notify()

    def switch_user(self, configuration: ConfigurationInternal) -> None:
        """Make the configuration's user the current user."""
        with self._lock:
            self._configurations.setdefault(configuration.user_id, configuration)
            self._current_user_id = configuration.user_id
        self._notify()

    def _get_or_create(self, user_id: int) -> ConfigurationInternal:
        config = self._configurations.get(user_id)
        if config is None:
            _logger.info("Creating configuration for new user: user_id=%s", user_id)
            config = replace(self._defaults, user_id=user_id)
            self._configurations[user_id] = config
        return config

    def _notify(self) -> None:
        with self._lock:
            listener = self._listener
        if listener is not None:
            listener()
