"""Call-scoped table tracking shared by the comment extractor and merger."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ScanPhase(Enum):
    """Where the scanner sits relative to the current table block."""
    IDLE = "idle"
    IN_TABLE_HEADER = "in_table_header"
    IN_TABLE_BODY = "in_table_body"


@dataclass
class TableScanState:
    """
    Brace depth and table anchor for one pass over DSL text.

    A new instance is created per extraction or merge call. Brace counts of
    a line are applied by :meth:`finish_line` once the line has been
    classified, so checks made while handling a line see the depth as it
    stood before that line.
    """

    phase: ScanPhase = ScanPhase.IDLE
    depth: int = 0
    table_name: Optional[str] = None

    @property
    def in_table(self) -> bool:
        return self.phase is not ScanPhase.IDLE

    @property
    def in_table_body(self) -> bool:
        """Inside a table and below its opening brace."""
        return self.in_table and self.depth > 0

    def enter_table(self, name: str) -> None:
        self.table_name = name
        self.phase = ScanPhase.IN_TABLE_HEADER

    def finish_line(self, opens: int, closes: int) -> None:
        self.depth += opens - closes
        if not self.in_table:
            return
        if self.depth == 0 and closes > 0:
            self.phase = ScanPhase.IDLE
            self.table_name = None
        elif self.depth > 0:
            self.phase = ScanPhase.IN_TABLE_BODY


__all__ = ["ScanPhase", "TableScanState"]
