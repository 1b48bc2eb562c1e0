"""Telephony suggestion scoring and per-slot storage."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

from timezone_detector.diagnostics import IndentingWriter
from timezone_detector.domain.suggestions import (
    TelephonyMatchType,
    TelephonyQuality,
    TelephonyTimeZoneSuggestion,
)

_logger = logging.getLogger(__name__)


class TelephonyScore(IntEnum):
    """Ordinal score of a telephony suggestion; higher is better."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    HIGHEST = 4


# LOW < threshold <= HIGH; below this a suggestion only seeds an uninitialized device.
TELEPHONY_SCORE_USAGE_THRESHOLD = TelephonyScore.HIGH

_TEST_MATCH_TYPES = {
    TelephonyMatchType.TEST_NETWORK_OFFSET_ONLY,
    TelephonyMatchType.EMULATOR_ZONE_ID,
}

_QUALITY_SCORES = {
    TelephonyQuality.SINGLE_ZONE: TelephonyScore.HIGH,
    TelephonyQuality.MULTIPLE_ZONES_WITH_SAME_OFFSET: TelephonyScore.MEDIUM,
    TelephonyQuality.MULTIPLE_ZONES_WITH_DIFFERENT_OFFSETS: TelephonyScore.LOW,
}


@dataclass(frozen=True)
class QualifiedTelephonySuggestion:
    """A telephony suggestion together with its computed score."""

    suggestion: TelephonyTimeZoneSuggestion
    score: int


def score_telephony_suggestion(suggestion: TelephonyTimeZoneSuggestion) -> TelephonyScore:
    """Score a suggestion from its match type and quality."""
    if suggestion.zone_id is None:
        return TelephonyScore.NONE
    if suggestion.match_type in _TEST_MATCH_TYPES:
        return TelephonyScore.HIGHEST
    if suggestion.quality is None:
        _logger.debug("Telephony suggestion without quality: %s", suggestion)
        return TelephonyScore.NONE
    return _QUALITY_SCORES[suggestion.quality]


class TelephonySuggestionTable:
    """Latest suggestion per telephony slot; later suggestions replace earlier ones."""

    def __init__(self) -> None:
        self._entries: dict[int, QualifiedTelephonySuggestion] = {}

    def record(
        self, suggestion: TelephonyTimeZoneSuggestion
    ) -> QualifiedTelephonySuggestion:
        """Score and store a suggestion, replacing any previous one for its slot."""
        qualified = QualifiedTelephonySuggestion(
            suggestion=suggestion,
            score=score_telephony_suggestion(suggestion),
        )
        self._entries[suggestion.slot_index] = qualified
        return qualified

    def get(self, slot_index: int) -> QualifiedTelephonySuggestion | None:
        """Return the latest suggestion for a slot, if one was ever made."""
        entry = self._entries.get(slot_index)
        if entry is None:
            _logger.debug("No telephony suggestion for slot_index=%s", slot_index)
        return entry

    def find_best(self) -> QualifiedTelephonySuggestion | None:
        """Return the highest scoring suggestion; the lowest slot index wins ties."""
        best: QualifiedTelephonySuggestion | None = None
        for slot_index in sorted(self._entries):
            candidate = self._entries[slot_index]
            if best is None or candidate.score > best.score:
                best = candidate
        return best

    def dump(self, writer: IndentingWriter, args: Sequence[str]) -> None:
        writer.println("Telephony suggestions:")
        writer.increase_indent()
        if not self._entries:
            writer.println("(none)")
        for slot_index in sorted(self._entries):
            entry = self._entries[slot_index]
            writer.println(
                f"slot_index={slot_index} score={entry.score}"
                f" suggestion={entry.suggestion}"
                f" debug_info={list(entry.suggestion.debug_info)}"
            )
        writer.decrease_indent()
