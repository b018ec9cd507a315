"""Grid geometry shared by the field, the player view and the solver state."""

from typing import Dict, Iterator, List, NamedTuple, Tuple

Position = Tuple[int, int]

# Moore neighborhood, row-major. The index of an offset is the slot a revealed
# cell writes into when it estimates the neighbor lying in that direction.
DIRECTIONS: Tuple[Position, ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)
N_DIRECTIONS: int = len(DIRECTIONS)


class InvariantViolation(RuntimeError):
    """Raised when the engine reaches a state that correct propagation never produces."""


class ActiveRegion(NamedTuple):
    """Half-open rectangle of playable cells inside the padded grid."""

    row_start: int
    row_stop: int
    col_start: int
    col_stop: int

    @classmethod
    def with_margin(cls, rows: int, cols: int, margin: int) -> "ActiveRegion":
        return cls(margin, margin + rows, margin, margin + cols)

    @property
    def rows(self) -> int:
        return self.row_stop - self.row_start

    @property
    def cols(self) -> int:
        return self.col_stop - self.col_start

    @property
    def size(self) -> int:
        return self.rows * self.cols

    @property
    def center(self) -> Position:
        return (
            self.row_start + self.rows // 2,
            self.col_start + self.cols // 2,
        )

    def contains(self, pos: Position) -> bool:
        r, c = pos
        return (
            self.row_start <= r < self.row_stop
            and self.col_start <= c < self.col_stop
        )

    def positions(self) -> Iterator[Position]:
        """Yield every active position in row-major order."""
        for r in range(self.row_start, self.row_stop):
            for c in range(self.col_start, self.col_stop):
                yield (r, c)


# Module-level cache: region -> {(r,c): ((direction_index, (nr,nc)), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[
    ActiveRegion,
    Dict[Position, Tuple[Tuple[int, Position], ...]]
] = {}


def get_neighborhoods(
    region: ActiveRegion,
) -> Dict[Position, Tuple[Tuple[int, Position], ...]]:
    """
    Precompute and cache the active neighbors of every active cell.

    Args:
        region: The active rectangle. Cells outside it never hold mines and
            never receive estimates, so they are left out of the result.

    Returns:
        Mapping from each active position to a tuple of
        ``(direction_index, neighbor_position)`` pairs, in direction order.

    Raises:
        ValueError: If the region is empty.
    """
    if region.rows <= 0 or region.cols <= 0:
        raise ValueError("Active region must contain at least one cell.")

    cached = _NEIGHBORHOODS_CACHE.get(region)
    if cached is not None:
        return cached

    neighborhoods: Dict[Position, Tuple[Tuple[int, Position], ...]] = {}
    for r, c in region.positions():
        nbrs: List[Tuple[int, Position]] = []
        for i, (dr, dc) in enumerate(DIRECTIONS):
            n = (r + dr, c + dc)
            if region.contains(n):
                nbrs.append((i, n))
        neighborhoods[(r, c)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[region] = neighborhoods
    return neighborhoods


def block_3x3(pos: Position) -> Iterator[Position]:
    """Yield ``pos`` and its eight surrounding positions, row-major."""
    r, c = pos
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            yield (r + dr, c + dc)
