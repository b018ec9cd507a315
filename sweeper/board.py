"""What an outside observer sees of the game: unknown, marked or cleared cells."""

from enum import IntEnum
from typing import List, Optional

import numpy as np

from .knowledge import Free, KnowledgeGrid
from .utils import ActiveRegion, InvariantViolation, Position


class CellState(IntEnum):
    UNKNOWN = 0
    MARKED = 1
    FREE = 2


class PlayerView:
    """Per-cell visible state; each cell is resolved at most once."""

    def __init__(self, n_rows: int, n_cols: int, region: ActiveRegion) -> None:
        self.region: ActiveRegion = region
        self.cells: np.ndarray = np.full(
            (n_rows, n_cols), CellState.UNKNOWN, dtype=np.int8
        )

    def state(self, pos: Position) -> CellState:
        return CellState(int(self.cells[pos]))

    def _require_unknown(self, pos: Position, action: str) -> None:
        if not self.region.contains(pos):
            raise InvariantViolation(f"Cannot {action} {pos}: outside the active region.")
        current = self.state(pos)
        if current != CellState.UNKNOWN:
            raise InvariantViolation(
                f"Cannot {action} {pos}: already {current.name}."
            )

    def mark(self, pos: Position) -> None:
        self._require_unknown(pos, "mark")
        self.cells[pos] = CellState.MARKED

    def reveal(self, pos: Position) -> None:
        self._require_unknown(pos, "reveal")
        self.cells[pos] = CellState.FREE

    def count(self, state: CellState) -> int:
        """Number of active cells currently in ``state``."""
        r = self.region
        active = self.cells[r.row_start:r.row_stop, r.col_start:r.col_stop]
        return int((active == state).sum())

    def snapshot(self) -> np.ndarray:
        return self.cells.copy()

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_MARK = "\033[93m"
    _ANSI_HIDDEN = "\033[90m"

    def format_view(self, knowledge: Optional[KnowledgeGrid] = None) -> str:
        """
        Render the active region for a terminal.

        Args:
            knowledge: When given, revealed cells show their observed count;
                otherwise they are drawn blank.

        Returns:
            A multi-line string: grey ``#`` unknown, yellow ``@`` marked.
        """
        lines: List[str] = []
        region = self.region
        for r in range(region.row_start, region.row_stop):
            row: List[str] = []
            for c in range(region.col_start, region.col_stop):
                s = self.state((r, c))
                if s == CellState.MARKED:
                    row.append(f"{self._ANSI_MARK}@{self._ANSI_RESET}")
                elif s == CellState.UNKNOWN:
                    row.append(f"{self._ANSI_HIDDEN}#{self._ANSI_RESET}")
                else:
                    desc = knowledge.get((r, c)) if knowledge is not None else None
                    if isinstance(desc, Free) and desc.count > 0:
                        row.append(str(desc.count))
                    else:
                        row.append(" ")
            lines.append(" ".join(row))
        return "\n".join(lines)
