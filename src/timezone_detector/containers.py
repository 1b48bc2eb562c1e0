"""Dependency container wiring for the detector."""

from dataclasses import dataclass

from timezone_detector.adapters.in_memory_callback import InMemoryDetectorCallback
from timezone_detector.app_logging import configure_logging
from timezone_detector.config import Settings
from timezone_detector.services.detector import (
    TimeZoneDetectorCallback,
    TimeZoneDetectorStrategy,
)


@dataclass
class DetectorContainer:
    """Holds detector-wide dependencies."""

    settings: Settings
    callback: TimeZoneDetectorCallback
    strategy: TimeZoneDetectorStrategy


def build_container(
    settings: Settings | None = None,
    callback: TimeZoneDetectorCallback | None = None,
) -> DetectorContainer:
    """Create the default dependency container.

    Without a callback, the device is simulated in memory from settings.
    """
    resolved_settings = settings or Settings()
    configure_logging(debug=resolved_settings.debug)
    resolved_callback = callback or InMemoryDetectorCallback(
        configuration=resolved_settings.initial_configuration(),
        device_time_zone=resolved_settings.initial_time_zone,
    )
    strategy = TimeZoneDetectorStrategy(
        resolved_callback,
        change_log_size=resolved_settings.time_zone_change_log_size,
    )
    return DetectorContainer(
        settings=resolved_settings,
        callback=resolved_callback,
        strategy=strategy,
    )
