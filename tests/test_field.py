import numpy as np
import pytest

from sweeper import MINE, MineField


def brute_force_count(field, pos):
    r, c = pos
    total = 0
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            total += int(field.cells[r + dr, c + dc])
    return total


def test_rejects_bad_dimensions():
    with pytest.raises(ValueError):
        MineField(0, 3)
    with pytest.raises(ValueError):
        MineField(3, 0)
    with pytest.raises(ValueError):
        MineField(3, 3, margin=0)


@pytest.mark.parametrize("density", [-0.1, 1.5])
def test_random_fill_rejects_density_out_of_range(density):
    field = MineField(4, 4)
    with pytest.raises(ValueError):
        field.random_fill(density)


def test_random_fill_only_once():
    field = MineField(4, 4)
    field.random_fill(0.2, rng=1)
    with pytest.raises(ValueError):
        field.random_fill(0.2, rng=1)


def test_mines_stay_inside_active_region():
    field = MineField.random(6, 7, 1.0, margin=2, seed=3)
    assert field.mine_count == 42
    assert field.cells.shape == (10, 11)
    assert not field.cells[:2, :].any()
    assert not field.cells[-2:, :].any()
    assert not field.cells[:, :2].any()
    assert not field.cells[:, -2:].any()
    assert all(field.is_active(pos) for pos in field.mine_positions())


def test_same_seed_same_layout():
    a = MineField.random(10, 10, 0.3, seed=42)
    b = MineField.random(10, 10, 0.3, seed=42)
    assert np.array_equal(a.cells, b.cells)
    assert a.mine_count == b.mine_count == int(a.cells.sum())


def test_zero_density_places_nothing():
    field = MineField.random(5, 5, 0.0, seed=0)
    assert field.mine_count == 0
    assert field.safe_count == 25


def test_probe_matches_neighbor_count():
    field = MineField.random(12, 9, 0.25, seed=11)
    for pos in field.active_positions():
        if field.is_mine(pos):
            assert field.probe(pos) == MINE
        else:
            assert field.probe(pos) == brute_force_count(field, pos)


def test_probe_outside_active_region():
    field = MineField(3, 3)
    with pytest.raises(ValueError):
        field.probe((0, 0))


def test_from_layout_string():
    field = MineField.from_layout(
        """
        *..
        ...
        ..*
        """
    )
    assert field.region.rows == 3 and field.region.cols == 3
    assert field.mine_count == 2
    assert field.mine_positions() == [(1, 1), (3, 3)]
    assert field.probe((2, 2)) == 2
    assert field.probe((1, 3)) == 0


def test_from_layout_grid():
    field = MineField.from_layout([[0, 1], [0, 0]])
    assert field.mine_positions() == [(1, 2)]
    assert field.probe((2, 1)) == 1


@pytest.mark.parametrize("layout", ["", "..\n.", "..x", [[]]])
def test_from_layout_rejects_bad_input(layout):
    with pytest.raises(ValueError):
        MineField.from_layout(layout)


def test_format_field_marks_mines():
    field = MineField.from_layout("*.\n..")
    lines = field.format_field().split("\n")
    assert len(lines) == 2
    assert "*" in lines[0]
    assert lines[1] == "1 1"
