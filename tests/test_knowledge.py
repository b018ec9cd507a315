import math

import pytest

from sweeper import (
    DIRECTIONS,
    Estimate,
    Free,
    InvariantViolation,
    Mine,
    ShouldFree,
    Unknown,
)
from sweeper.knowledge import MINE_CELL, SHOULD_FREE, UNKNOWN


def test_danger_per_variant():
    assert MINE_CELL.danger() == 1.0
    assert SHOULD_FREE.danger() == 0.0
    assert Free(3).danger() == 0.0
    assert Estimate().with_contribution(2, 0.25).with_contribution(5, 0.5).danger() == 0.5


def test_unknown_danger_is_an_error():
    with pytest.raises(InvariantViolation):
        UNKNOWN.danger()


def test_estimate_has_exactly_eight_slots():
    assert len(DIRECTIONS) == 8
    assert Estimate().contributions == (0.0,) * 8
    with pytest.raises(ValueError):
        Estimate((0.5, 0.5))


def test_with_contribution_leaves_original_untouched():
    base = Estimate()
    updated = base.with_contribution(7, 0.75)
    assert base.danger() == 0.0
    assert updated.contributions[7] == 0.75


def test_zero_count_makes_neighbors_safe(grid_3x3):
    grid_3x3.set_free((2, 2), 0)
    touched = grid_3x3.propagate((2, 2))
    assert len(touched) == 8
    for pos in touched:
        assert isinstance(grid_3x3.get(pos), ShouldFree)
        assert pos in grid_3x3.frontier


def test_count_spreads_evenly_over_open_neighbors(grid_3x3):
    # Corner of the 3x3 region: three active neighbors.
    grid_3x3.set_free((1, 1), 1)
    touched = grid_3x3.propagate((1, 1))
    assert touched == [(1, 2), (2, 1), (2, 2)]
    for pos in touched:
        desc = grid_3x3.get(pos)
        assert isinstance(desc, Estimate)
        assert desc.danger() == pytest.approx(1 / 3)

    # Each neighbor records the contribution in the slot of its direction from (1, 1).
    assert grid_3x3.get((1, 2)).contributions[DIRECTIONS.index((0, 1))] == pytest.approx(1 / 3)
    assert grid_3x3.get((2, 2)).contributions[DIRECTIONS.index((1, 1))] == pytest.approx(1 / 3)


def test_danger_is_max_of_contributions(grid_3x3):
    grid_3x3.set_free((1, 1), 1)
    grid_3x3.propagate((1, 1))
    grid_3x3.set_free((1, 3), 1)
    grid_3x3.propagate((1, 3))
    # (1, 2) and (2, 2) now sit between two revealed cells.
    assert grid_3x3.danger((2, 2)) == pytest.approx(1 / 3)
    grid_3x3.set_free((1, 2), 1)
    grid_3x3.propagate_around((1, 2))
    # (1, 1) now only has (2, 1) and (2, 2) open.
    assert grid_3x3.danger((2, 2)) == pytest.approx(0.5)
    assert grid_3x3.danger((2, 1)) == pytest.approx(0.5)


def test_centre_mine_isolated_by_edge_reveals(grid_3x3):
    grid_3x3.set_free((1, 1), 1)
    grid_3x3.set_free((1, 2), 1)
    grid_3x3.set_free((2, 1), 1)
    grid_3x3.propagate_around((1, 1))
    assert grid_3x3.danger((2, 2)) == 1.0


def test_known_mines_are_subtracted(grid_3x3):
    grid_3x3.set_mine((2, 2))
    grid_3x3.set_free((1, 1), 1)
    grid_3x3.propagate((1, 1))
    assert isinstance(grid_3x3.get((1, 2)), ShouldFree)
    assert isinstance(grid_3x3.get((2, 1)), ShouldFree)
    assert isinstance(grid_3x3.get((2, 2)), Mine)
    assert (2, 2) not in grid_3x3.frontier


def test_certain_cells_are_not_downgraded(grid_3x3):
    grid_3x3.set_free((1, 1), 0)
    grid_3x3.propagate((1, 1))
    assert isinstance(grid_3x3.get((2, 2)), ShouldFree)

    grid_3x3.set_free((3, 3), 2)
    grid_3x3.propagate((3, 3))
    assert isinstance(grid_3x3.get((2, 2)), ShouldFree)
    assert grid_3x3.danger((3, 2)) == pytest.approx(1.0)
    assert grid_3x3.danger((2, 3)) == pytest.approx(1.0)


def test_count_below_known_mines_is_an_error(grid_3x3):
    grid_3x3.set_mine((2, 2))
    grid_3x3.set_free((1, 1), 0)
    with pytest.raises(InvariantViolation):
        grid_3x3.propagate((1, 1))


def test_count_above_open_neighbors_is_an_error(grid_3x3):
    grid_3x3.set_free((1, 1), 4)
    with pytest.raises(InvariantViolation):
        grid_3x3.propagate((1, 1))


def test_propagate_requires_free_cell(grid_3x3):
    with pytest.raises(InvariantViolation):
        grid_3x3.propagate((2, 2))


def test_resolving_twice_is_an_error(grid_3x3):
    grid_3x3.set_free((2, 2), 1)
    with pytest.raises(InvariantViolation):
        grid_3x3.set_mine((2, 2))
    with pytest.raises(InvariantViolation):
        grid_3x3.set_free((2, 2), 1)


def test_resolving_removes_from_frontier(grid_3x3):
    grid_3x3.set_free((1, 1), 0)
    grid_3x3.propagate((1, 1))
    assert (2, 2) in grid_3x3.frontier
    grid_3x3.set_free((2, 2), 0)
    assert (2, 2) not in grid_3x3.frontier


def test_danger_map(grid_3x3):
    grid_3x3.set_free((1, 1), 1)
    grid_3x3.propagate((1, 1))
    dangers = grid_3x3.danger_map()
    assert dangers.shape == (5, 5)
    assert dangers[1, 1] == 0.0
    assert dangers[2, 2] == pytest.approx(1 / 3)
    assert math.isnan(dangers[3, 3])
    assert math.isnan(dangers[0, 0])


def test_format_knowledge(grid_3x3):
    grid_3x3.set_free((1, 1), 1)
    grid_3x3.propagate((1, 1))
    assert grid_3x3.format_knowledge().split("\n") == [
        "1 3 .",
        "3 3 .",
        ". . .",
    ]


def test_padding_stays_unknown(grid_3x3):
    grid_3x3.set_free((1, 1), 0)
    grid_3x3.propagate((1, 1))
    assert isinstance(grid_3x3.get((0, 0)), Unknown)
    assert isinstance(grid_3x3.get((1, 0)), Unknown)
