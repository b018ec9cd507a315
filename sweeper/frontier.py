"""Insertion-ordered set of cells awaiting a decision."""

from typing import Dict, Iterator, List

from .utils import Position


class Frontier:
    """
    Positions whose belief is an estimate or a pending certain-safe.

    Iteration follows the order in which positions joined, which makes the
    choice between equally risky cells reproducible. Re-adding a member keeps
    its original place.
    """

    def __init__(self) -> None:
        self._members: Dict[Position, None] = {}
        self.max_size: int = 0

    def add(self, pos: Position) -> None:
        self._members.setdefault(pos, None)
        self.max_size = max(self.max_size, len(self._members))

    def discard(self, pos: Position) -> None:
        self._members.pop(pos, None)

    def __contains__(self, pos: object) -> bool:
        return pos in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._members)

    def to_list(self) -> List[Position]:
        return list(self._members)
