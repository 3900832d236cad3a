"""Sink column layouts.

A layout maps each sink field to a 1-based column index. Layouts are built from
the static ``RelayConfig`` once per sink name and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Sequence

from gmailrelay.domain.entities.record import SinkRow

SINK_FIELDS = ("timestamp", "sender", "subject")


def column_index(letters: str) -> int:
    """Convert column letters to a 1-based index: A=1, Z=26, AA=27."""
    letters = letters.strip().upper()
    if not letters or not letters.isalpha() or not letters.isascii():
        raise ValueError(f"Invalid column letters: {letters!r}")
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index


def column_letters(index: int) -> str:
    """Inverse of :func:`column_index`."""
    if index < 1:
        raise ValueError(f"Column index must be >= 1, got {index}")
    letters = ""
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


@dataclass(frozen=True)
class LayoutMap:
    sink_name: str
    columns: Mapping[str, int]

    @classmethod
    def from_letters(cls, sink_name: str, letters: Mapping[str, str]) -> LayoutMap:
        missing = [f for f in SINK_FIELDS if f not in letters]
        if missing:
            raise ValueError(f"Layout for {sink_name!r} is missing columns for {missing}")
        columns = {name: column_index(letter) for name, letter in letters.items()}
        return cls(sink_name=sink_name, columns=MappingProxyType(columns))

    @property
    def width(self) -> int:
        return max(self.columns.values())

    def project(self, row: SinkRow) -> list[str]:
        """Place the row's fields at their columns; unused columns stay blank."""
        values = [""] * self.width
        for name, value in row.as_fields().items():
            values[self.columns[name] - 1] = value
        return values

    def project_all(self, rows: Sequence[SinkRow]) -> list[list[str]]:
        return [self.project(row) for row in rows]


@lru_cache(maxsize=None)
def _cached_layout(sink_name: str, letters: tuple[tuple[str, str], ...]) -> LayoutMap:
    return LayoutMap.from_letters(sink_name, dict(letters))


def get_layout(sink_name: str, letters: Mapping[str, str]) -> LayoutMap:
    """Cached LayoutMap for a sink; built on first use."""
    return _cached_layout(sink_name, tuple(sorted(letters.items())))
