"""Ground-truth mine layout with a padding ring around the playable region."""

from typing import Iterable, List, Sequence, Union

import numpy as np

from .utils import ActiveRegion, Position

# Returned by MineField.probe() for a mined cell.
MINE: int = -1

SeedLike = Union[None, int, np.random.Generator]


class MineField:
    """Which cells hold mines, and how many mines surround each safe cell."""

    def __init__(self, rows: int, cols: int, margin: int = 1) -> None:
        """
        Create an empty field.

        Args:
            rows: Number of active rows, must be >= 1.
            cols: Number of active columns, must be >= 1.
            margin: Width of the never-mined ring around the active region,
                must be >= 1 so that every active cell has eight addressable
                neighbors.

        Raises:
            ValueError: If any dimension is invalid.
        """
        if rows < 1 or cols < 1:
            raise ValueError("rows and cols must be at least 1.")
        if margin < 1:
            raise ValueError("margin must be at least 1.")

        self.margin: int = margin
        self.region: ActiveRegion = ActiveRegion.with_margin(rows, cols, margin)
        self.n_rows: int = rows + 2 * margin
        self.n_cols: int = cols + 2 * margin

        self.cells: np.ndarray = np.zeros((self.n_rows, self.n_cols), dtype=bool)
        self.mine_count: int = 0
        self._filled: bool = False

    @classmethod
    def random(
        cls,
        rows: int,
        cols: int,
        density: float,
        *,
        margin: int = 1,
        seed: SeedLike = None,
    ) -> "MineField":
        """Create a field and fill it with independently placed mines."""
        field = cls(rows, cols, margin=margin)
        field.random_fill(density, rng=seed)
        return field

    @classmethod
    def from_layout(
        cls, layout: Union[str, Sequence[Sequence[object]]], margin: int = 1
    ) -> "MineField":
        """
        Build a field from a literal layout, bypassing randomness.

        Args:
            layout: Either a grid of truthy (mine) / falsy (safe) values, or a
                multiline string where ``*`` marks a mine and ``.`` a safe
                cell. Blank lines and surrounding whitespace are ignored.
            margin: Padding ring width.

        Raises:
            ValueError: If the layout is empty, ragged, or contains an
                unexpected character.
        """
        if isinstance(layout, str):
            grid: List[List[bool]] = []
            for line in layout.strip().splitlines():
                line = line.strip()
                if not line:
                    continue
                bad = set(line) - {"*", "."}
                if bad:
                    raise ValueError(f"Unexpected layout characters: {sorted(bad)}")
                grid.append([ch == "*" for ch in line])
        else:
            grid = [[bool(v) for v in row] for row in layout]

        if not grid or not grid[0]:
            raise ValueError("Layout must contain at least one cell.")
        width = len(grid[0])
        if any(len(row) != width for row in grid):
            raise ValueError("Layout rows must all have the same length.")

        field = cls(len(grid), width, margin=margin)
        r0, c0 = field.region.row_start, field.region.col_start
        field.cells[r0:r0 + len(grid), c0:c0 + width] = np.array(grid, dtype=bool)
        field.mine_count = int(field.cells.sum())
        field._filled = True
        return field

    def random_fill(self, density: float, rng: SeedLike = None) -> None:
        """
        Place a mine in each active cell independently with probability ``density``.

        Args:
            density: Mine probability per cell, within [0, 1].
            rng: None, an integer seed, or a numpy Generator.

        Raises:
            ValueError: If density is out of range or the field was already filled.
        """
        if not 0.0 <= density <= 1.0:
            raise ValueError("density must be within [0, 1].")
        if self._filled:
            raise ValueError("The field is already filled.")

        generator = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        region = self.region
        placed = generator.random((region.rows, region.cols)) < density
        self.cells[region.row_start:region.row_stop, region.col_start:region.col_stop] = placed
        self.mine_count += int(placed.sum())
        self._filled = True

    @property
    def safe_count(self) -> int:
        return self.region.size - self.mine_count

    def is_active(self, pos: Position) -> bool:
        return self.region.contains(pos)

    def is_mine(self, pos: Position) -> bool:
        return bool(self.cells[pos])

    def active_positions(self) -> Iterable[Position]:
        return self.region.positions()

    def mine_positions(self) -> List[Position]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.cells)]

    def probe(self, pos: Position) -> int:
        """Return ``MINE`` for a mined cell, else the number of mined neighbors."""
        if not self.is_active(pos):
            raise ValueError(f"Position {pos} is outside the active region.")
        if self.cells[pos]:
            return MINE
        r, c = pos
        # The padding ring guarantees the 3x3 slice is in bounds and mine-free outside.
        return int(self.cells[r - 1:r + 2, c - 1:c + 2].sum())

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_MINE = "\033[91m"

    def format_field(self) -> str:
        """Render the active region with mines as red ``*`` and hint counts elsewhere."""
        lines: List[str] = []
        region = self.region
        for r in range(region.row_start, region.row_stop):
            row: List[str] = []
            for c in range(region.col_start, region.col_stop):
                n = self.probe((r, c))
                if n == MINE:
                    row.append(f"{self._ANSI_MINE}*{self._ANSI_RESET}")
                elif n == 0:
                    row.append(" ")
                else:
                    row.append(str(n))
            lines.append(" ".join(row))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MineField(rows={self.region.rows}, cols={self.region.cols}, "
            f"margin={self.margin}, mines={self.mine_count})"
        )
