"""
Frontier Sweeper

A Minesweeper-playing engine that works from local count estimates:
- Each revealed count spreads its residual danger evenly over its open neighbors
- A cell's danger is the largest estimate any revealed neighbor gives it
- Certain mines are marked and certain-safe cells probed in batches
- The least dangerous frontier cell is probed when nothing is certain
"""

from .board import CellState, PlayerView
from .engine import (
    COMPLETE,
    FAILED,
    RUNNING,
    Action,
    ActionKind,
    StepEngine,
    watch_cli,
)
from .field import MINE, MineField
from .frontier import Frontier
from .knowledge import (
    CellDesc,
    Estimate,
    Free,
    KnowledgeGrid,
    Mine,
    ShouldFree,
    Unknown,
)
from .utils import DIRECTIONS, ActiveRegion, InvariantViolation
from .analysis import (
    format_engine_state,
    run_engine_single_test,
    run_engine_many_tests,
    run_engine_density_sweep,
)

__version__ = "1.0.0"

DEFAULT_ROWS = 15
DEFAULT_COLS = 80
DEFAULT_DENSITY = 0.12

__all__ = [
    # Core classes
    "MineField",
    "PlayerView",
    "KnowledgeGrid",
    "Frontier",
    "StepEngine",
    # Values
    "Action",
    "ActionKind",
    "ActiveRegion",
    "CellState",
    "CellDesc",
    "Unknown",
    "Estimate",
    "ShouldFree",
    "Free",
    "Mine",
    "DIRECTIONS",
    "MINE",
    "FAILED",
    "RUNNING",
    "COMPLETE",
    "InvariantViolation",
    # CLI
    "watch_cli",
    # Analysis functions
    "format_engine_state",
    "run_engine_single_test",
    "run_engine_many_tests",
    "run_engine_density_sweep",
    # Defaults
    "DEFAULT_ROWS",
    "DEFAULT_COLS",
    "DEFAULT_DENSITY",
]
