from __future__ import annotations
from dataclasses import dataclass
from functools import total_ordering


@total_ordering
@dataclass(frozen=True)
class Cursor:
    # Gmail historyId: opaque string, ordered by its integer value
    value: str

    def __post_init__(self) -> None:
        if not str(self.value).strip().isdigit():
            raise ValueError(f"Cursor must be a non-negative integer, got {self.value!r}")
        object.__setattr__(self, "value", str(int(self.value)))

    @property
    def position(self) -> int:
        return int(self.value)

    def __lt__(self, other: Cursor) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self.position < other.position

    def __str__(self) -> str:
        return self.value
