"""Diagnostics dump helpers."""

from collections.abc import Sequence
from typing import Protocol, TextIO


class IndentingWriter:
    """Line writer that prefixes output with the current indentation."""

    def __init__(self, stream: TextIO, indent: str = "  ") -> None:
        self._stream = stream
        self._indent = indent
        self._level = 0

    def println(self, text: object = "") -> None:
        """Write one line at the current indentation."""
        self._stream.write(f"{self._indent * self._level}{text}\n")

    def increase_indent(self) -> None:
        self._level += 1

    def decrease_indent(self) -> None:
        self._level = max(0, self._level - 1)


class Dumpable(Protocol):
    """Component that can write its state to a diagnostics dump."""

    def dump(self, writer: IndentingWriter, args: Sequence[str]) -> None:
        """Write state to the writer."""
