"""Per-user configuration store."""

from dataclasses import dataclass, field
from typing import Protocol

from timezone_detector.domain.configuration import ConfigurationInternal


class ConfigurationSource(Protocol):
    """Source of a user's configuration on first use."""

    def get_configuration_internal(self, user_id: int) -> ConfigurationInternal:
        """Return the configuration for a user."""


@dataclass
class ConfigurationStore:
    """Holds the current ConfigurationInternal for each known user."""

    source: ConfigurationSource
    _configurations: dict[int, ConfigurationInternal] = field(default_factory=dict)

    def get(self, user_id: int) -> ConfigurationInternal:
        """Return the user's configuration, loading it from the source on first use."""
        config = self._configurations.get(user_id)
        if config is None:
            config = self.source.get_configuration_internal(user_id)
            self._configurations[user_id] = config
        return config

    def peek(self, user_id: int) -> ConfigurationInternal | None:
        """Return the stored configuration without loading it."""
        return self._configurations.get(user_id)

    def replace(self, config: ConfigurationInternal) -> ConfigurationInternal | None:
        """Store a configuration for its user and return the one it replaced."""
        previous = self._configurations.get(config.user_id)
        self._configurations[config.user_id] = config
        return previous

    def user_ids(self) -> list[int]:
        return sorted(self._configurations)
