import pytest

from sweeper import ActiveRegion, CellState, InvariantViolation, KnowledgeGrid, PlayerView


@pytest.fixture
def view():
    return PlayerView(4, 4, ActiveRegion.with_margin(2, 2, 1))


def test_starts_unknown(view):
    assert view.count(CellState.UNKNOWN) == 4
    assert view.state((1, 1)) == CellState.UNKNOWN


def test_mark_and_reveal(view):
    view.mark((1, 1))
    view.reveal((2, 2))
    assert view.state((1, 1)) == CellState.MARKED
    assert view.state((2, 2)) == CellState.FREE
    assert view.count(CellState.UNKNOWN) == 2


@pytest.mark.parametrize("first, second", [
    ("mark", "mark"),
    ("mark", "reveal"),
    ("reveal", "mark"),
    ("reveal", "reveal"),
])
def test_cells_resolve_only_once(view, first, second):
    getattr(view, first)((1, 2))
    with pytest.raises(InvariantViolation):
        getattr(view, second)((1, 2))


def test_padding_is_not_playable(view):
    with pytest.raises(InvariantViolation):
        view.reveal((0, 0))


def test_snapshot_is_a_copy(view):
    snap = view.snapshot()
    view.reveal((1, 1))
    assert snap[1, 1] == CellState.UNKNOWN


def test_format_view_shows_counts(view):
    region = view.region
    knowledge = KnowledgeGrid(4, 4, region)
    view.reveal((1, 1))
    knowledge.set_free((1, 1), 2)
    view.reveal((1, 2))
    knowledge.set_free((1, 2), 0)
    view.mark((2, 1))

    lines = view.format_view(knowledge).split("\n")
    assert lines[0] == "2  "
    assert "@" in lines[1] and "#" in lines[1]
