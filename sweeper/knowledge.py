"""Solver belief state per cell, and the local estimate propagation."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .frontier import Frontier
from .utils import (
    N_DIRECTIONS,
    ActiveRegion,
    InvariantViolation,
    Position,
    block_3x3,
    get_neighborhoods,
)


class CellDesc:
    """Base class of the per-cell belief variants."""

    # Unknown or Estimate: the cell may still turn out to be a mine.
    is_open: bool = False

    def danger(self) -> float:
        raise NotImplementedError

    def symbol(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Unknown(CellDesc):
    is_open = True

    def danger(self) -> float:
        raise InvariantViolation("danger() queried on a cell with no information.")

    def symbol(self) -> str:
        return "."


@dataclass(frozen=True)
class Estimate(CellDesc):
    """
    Mine probability contributions, one slot per neighbor direction.

    Slot ``i`` is written by the revealed cell that sees this one in direction
    ``i``. The usable danger is the largest contribution: an upper bound, not
    a joint probability.
    """

    contributions: Tuple[float, ...] = (0.0,) * N_DIRECTIONS

    is_open = True

    def __post_init__(self) -> None:
        if len(self.contributions) != N_DIRECTIONS:
            raise ValueError(
                f"Estimate needs exactly {N_DIRECTIONS} contribution slots."
            )

    def with_contribution(self, index: int, p: float) -> "Estimate":
        slots = list(self.contributions)
        slots[index] = p
        return Estimate(tuple(slots))

    def danger(self) -> float:
        return max(self.contributions)

    def symbol(self) -> str:
        # Tenths of danger, clipped so a near-certain estimate still reads as 9.
        return str(min(9, max(1, int(self.danger() * 10))))


@dataclass(frozen=True)
class ShouldFree(CellDesc):
    def danger(self) -> float:
        return 0.0

    def symbol(self) -> str:
        return "o"


@dataclass(frozen=True)
class Free(CellDesc):
    # Raw number of mined neighbors as reported by the field.
    count: int

    def danger(self) -> float:
        return 0.0

    def symbol(self) -> str:
        return str(self.count)


@dataclass(frozen=True)
class Mine(CellDesc):
    def danger(self) -> float:
        return 1.0

    def symbol(self) -> str:
        return "M"


UNKNOWN = Unknown()
SHOULD_FREE = ShouldFree()
MINE_CELL = Mine()


class KnowledgeGrid:
    """Belief grid over the padded board; padding cells stay Unknown forever."""

    def __init__(
        self,
        n_rows: int,
        n_cols: int,
        region: ActiveRegion,
        frontier: Optional[Frontier] = None,
    ) -> None:
        self.n_rows: int = n_rows
        self.n_cols: int = n_cols
        self.region: ActiveRegion = region
        self.frontier: Frontier = frontier if frontier is not None else Frontier()

        self.cells: List[List[CellDesc]] = [
            [UNKNOWN for _ in range(n_cols)] for _ in range(n_rows)
        ]

        self._neighborhoods: Dict[
            Position, Tuple[Tuple[int, Position], ...]
        ] = get_neighborhoods(region)

    def get(self, pos: Position) -> CellDesc:
        r, c = pos
        return self.cells[r][c]

    def _set(self, pos: Position, desc: CellDesc) -> None:
        r, c = pos
        self.cells[r][c] = desc

    def _require_unresolved(self, pos: Position) -> None:
        if isinstance(self.get(pos), (Free, Mine)):
            raise InvariantViolation(f"Cell {pos} is already resolved.")

    def set_free(self, pos: Position, count: int) -> None:
        """Record a probed safe cell and drop it from the frontier."""
        self._require_unresolved(pos)
        self._set(pos, Free(count))
        self.frontier.discard(pos)

    def set_mine(self, pos: Position) -> None:
        """Record a certain mine and drop it from the frontier."""
        self._require_unresolved(pos)
        self._set(pos, MINE_CELL)
        self.frontier.discard(pos)

    def propagate(self, at: Position) -> List[Position]:
        """
        Push the danger implied by the revealed count at ``at`` onto its neighbors.

        The residual count (observed minus already known mines) is spread
        evenly over the still-open neighbors. A residual of zero makes every
        open neighbor certainly safe. Neighbors that are already certain keep
        their belief.

        Args:
            at: Position of a ``Free`` cell.

        Returns:
            The neighbors whose belief was written.

        Raises:
            InvariantViolation: If ``at`` is not Free, or its count cannot be
                reconciled with the mines already known around it.
        """
        desc = self.get(at)
        if not isinstance(desc, Free):
            raise InvariantViolation(f"Cannot propagate from non-free cell {at}.")

        neighbors = self._neighborhoods[at]
        n_mines = 0
        n_unknowns = 0
        for _, n in neighbors:
            nd = self.get(n)
            if isinstance(nd, Mine):
                n_mines += 1
            elif nd.is_open:
                n_unknowns += 1

        if desc.count < n_mines:
            raise InvariantViolation(
                f"Cell {at} shows {desc.count} but has {n_mines} known mines around it."
            )

        if desc.count == 0 or n_unknowns == 0:
            p = 0.0
        else:
            p = (desc.count - n_mines) / n_unknowns
            if p > 1.0:
                raise InvariantViolation(
                    f"Cell {at} needs {desc.count - n_mines} more mines "
                    f"but only {n_unknowns} open neighbors remain."
                )

        touched: List[Position] = []
        for i, n in neighbors:
            nd = self.get(n)
            if not nd.is_open:
                continue
            if p == 0.0:
                self._set(n, SHOULD_FREE)
            else:
                estimate = nd if isinstance(nd, Estimate) else Estimate()
                self._set(n, estimate.with_contribution(i, p))
            self.frontier.add(n)
            touched.append(n)

        return touched

    def propagate_around(self, pos: Position) -> List[Position]:
        """Re-run propagation for every revealed cell in the 3x3 block around ``pos``."""
        touched: List[Position] = []
        for q in block_3x3(pos):
            if self.region.contains(q) and isinstance(self.get(q), Free):
                touched.extend(self.propagate(q))
        return touched

    def danger(self, pos: Position) -> float:
        return self.get(pos).danger()

    def danger_map(self) -> np.ndarray:
        """Float array of dangers; NaN where nothing is known or outside the region."""
        out = np.full((self.n_rows, self.n_cols), np.nan)
        for pos in self.region.positions():
            desc = self.get(pos)
            if not isinstance(desc, Unknown):
                out[pos] = desc.danger()
        return out

    def snapshot(self) -> List[List[CellDesc]]:
        # Cell descriptors are immutable, so copying the rows is enough.
        return [list(row) for row in self.cells]

    def format_knowledge(self) -> str:
        """One symbol per active cell: ``.`` unknown, 1-9 estimate tenths, ``o`` safe, count, ``M``."""
        region = self.region
        lines = []
        for r in range(region.row_start, region.row_stop):
            lines.append(
                " ".join(
                    self.cells[r][c].symbol()
                    for c in range(region.col_start, region.col_stop)
                )
            )
        return "\n".join(lines)
