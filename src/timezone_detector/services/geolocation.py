"""Geolocation suggestion storage and zone selection."""

from collections.abc import Sequence

from timezone_detector.diagnostics import IndentingWriter
from timezone_detector.domain.suggestions import GeolocationTimeZoneSuggestion


def select_geolocation_zone(
    zone_ids: Sequence[str] | None, current_zone_id: str | None
) -> str | None:
    """Return the zone to switch to, or None when no change is warranted.

    The current zone is kept while it is still one of the candidates.
    """
    if not zone_ids:
        return None
    if current_zone_id is not None and current_zone_id in zone_ids:
        return None
    return zone_ids[0]


class GeolocationSuggestionSlot:
    """Holds the latest geolocation suggestion until it is forgotten."""

    def __init__(self) -> None:
        self._latest: GeolocationTimeZoneSuggestion | None = None

    @property
    def latest(self) -> GeolocationTimeZoneSuggestion | None:
        return self._latest

    def record(self, suggestion: GeolocationTimeZoneSuggestion) -> None:
        self._latest = suggestion

    def clear(self) -> None:
        self._latest = None

    def dump(self, writer: IndentingWriter, args: Sequence[str]) -> None:
        if self._latest is None:
            writer.println("Geolocation suggestion: (none)")
            return
        writer.println(
            f"Geolocation suggestion: zone_ids={self._latest.zone_ids}"
            f" debug_info={list(self._latest.debug_info)}"
        )
