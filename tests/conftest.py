import pytest

from sweeper import ActiveRegion, KnowledgeGrid, MineField


@pytest.fixture
def centre_mine_field():
    """3x3 active region with a single mine in the middle."""
    return MineField.from_layout(
        """
        ...
        .*.
        ...
        """
    )


@pytest.fixture
def walled_field():
    """The top-left safe cell is boxed in by mines and touches no other number."""
    return MineField.from_layout(
        """
        .*..
        **..
        ....
        ....
        """
    )


@pytest.fixture
def grid_3x3():
    """Knowledge grid over a 3x3 active region with a one-cell margin."""
    region = ActiveRegion.with_margin(3, 3, 1)
    return KnowledgeGrid(5, 5, region)
