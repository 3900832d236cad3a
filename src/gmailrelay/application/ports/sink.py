from __future__ import annotations
from typing import Protocol, Sequence


class RowSink(Protocol):
    def last_row(self, sink_name: str) -> int:
        """1-based index of the last row holding data, 0 when empty."""
        ...

    def write_rows(self, sink_name: str, start_row: int, rows: Sequence[Sequence[str]]) -> None:
        """Write ``rows`` as one block starting at column 1 of ``start_row``. Raise WriteError on failure."""
        ...
