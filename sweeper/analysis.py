"""Analysis and benchmarking tools for the frontier engine."""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .engine import COMPLETE, FAILED, StepEngine
from .field import MineField
from .utils import Position

# Payload values that describe the last round rather than the whole game.
PER_ROUND_KEYS = ("round", "unmarked_mines")


def format_engine_state(engine: StepEngine, *, show_coords: bool = True) -> str:
    """
    Format the engine's knowledge grid as a human-readable string.

    Args:
        engine: Engine whose beliefs will be displayed.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid of belief symbols: '.' unknown, '1'-'9' estimate in
        tenths, 'o' certain safe, a digit for revealed counts, 'M' mine.
    """
    region = engine.region
    rows = engine.knowledge.format_knowledge().split("\n")

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{c:2d}" for c in range(region.col_start, region.col_stop))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * region.cols - 1))

    for r, row in zip(range(region.row_start, region.row_stop), rows):
        spaced = " ".join(f" {ch}" for ch in row.split(" "))
        lines.append(f"{r:2d} |" + spaced if show_coords else row)

    return "\n".join(lines)


def run_engine_single_test(
    rows: int,
    cols: int,
    density: float,
    *,
    seed: Optional[int] = None,
    first_probe: Optional[Position] = None,
    show_boards: bool = False,
) -> Dict[str, object]:
    """
    Play one game on a freshly filled field.

    Args:
        rows: Active rows.
        cols: Active columns.
        density: Mine probability per cell.
        seed: Optional seed for the mine layout.
        first_probe: Optional first probe; defaults to the region centre.
        show_boards: If True, print the field and the engine's final beliefs.

    Returns:
        The engine's terminal payload augmented with "status" (-1 failed,
        1 complete) and "mine_count".
    """
    field = MineField.random(rows, cols, density, seed=seed)
    engine = StepEngine(field, first_probe)

    status, payload = engine.run()

    if show_boards:
        print("Field (mines visible):")
        print(field.format_field())
        print()
        print("Engine knowledge:")
        print(format_engine_state(engine, show_coords=True))
        print()
        print(f"Finished with status {status}.")

    out: Dict[str, object] = dict(payload)
    out["status"] = status
    out["mine_count"] = field.mine_count
    return out


def run_engine_many_tests(
    rows: int,
    cols: int,
    density: float,
    runs: int,
    *,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Play many independent games and return averaged metrics plus win rate.

    Args:
        rows: Active rows.
        cols: Active columns.
        density: Mine probability per cell.
        runs: Number of games, must be positive.
        seed: Optional seed; the whole batch is reproducible when given.

    Returns:
        Averages of the numeric game metrics (prefixed with "avg_"), plus:
        - win_rate
        - avg_guesses_total
        - guess_failure_rate
        - avg_cleared_fraction
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = np.random.default_rng(seed)
    sums: Dict[str, float] = defaultdict(float)
    wins = 0
    total_guesses = 0.0
    total_failed_guesses = 0.0
    cleared_fractions: List[float] = []

    for _ in range(runs):
        field = MineField.random(rows, cols, density, seed=rng)
        engine = StepEngine(field)

        status, payload = engine.run()
        if status == COMPLETE:
            wins += 1
        elif status != FAILED:
            raise RuntimeError(f"Unexpected engine status: {status}")

        for k, v in payload.items():
            if k in PER_ROUND_KEYS:
                continue
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                sums[f"avg_{k}"] += float(v)

        guesses = float(payload["risky_guesses_count"]) + float(payload["blind_guesses_count"])
        total_guesses += guesses
        # A game lost on the opening probe made no guess.
        if status == FAILED and guesses > 0:
            total_failed_guesses += 1.0

        safe = field.safe_count
        revealed = float(payload["revealed_cells_count"])
        cleared_fractions.append(revealed / safe if safe else 1.0)

    out: Dict[str, float] = {k: total / runs for k, total in sums.items()}
    out["win_rate"] = wins / runs
    out["avg_guesses_total"] = total_guesses / runs
    out["guess_failure_rate"] = (
        (total_failed_guesses / total_guesses) if total_guesses > 0 else 0.0
    )
    out["avg_cleared_fraction"] = float(np.mean(cleared_fractions))
    return out


def run_engine_density_sweep(
    rows: int,
    cols: int,
    densities: Sequence[float],
    runs: int,
    *,
    seed: Optional[int] = None,
    plot: bool = True,
) -> Dict[float, Dict[str, float]]:
    """
    Benchmark the engine across mine densities and plot summaries.

    Args:
        rows: Active rows.
        cols: Active columns.
        densities: Mine densities to test.
        runs: Games per density.
        seed: Optional base seed.
        plot: If True, show win-rate and guess-count charts.

    Returns:
        Mapping from density to statistics dict returned by run_engine_many_tests().
    """
    results: Dict[float, Dict[str, float]] = {}
    for i, density in enumerate(densities):
        results[density] = run_engine_many_tests(
            rows, cols, density, runs, seed=None if seed is None else seed + i
        )

    if not plot:
        return results

    x = np.asarray(list(densities), dtype=float)

    # 1) Win rate and cleared fraction by density
    win_rates = [results[d]["win_rate"] for d in densities]
    cleared = [results[d]["avg_cleared_fraction"] for d in densities]

    plt.figure()  # type: ignore[misc]
    plt.plot(x, win_rates, marker="o", label="win rate")  # type: ignore[misc]
    plt.plot(x, cleared, marker="s", label="cleared fraction")  # type: ignore[misc]
    plt.xlabel("Mine density")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title(f"Outcome by density ({rows}x{cols}, {runs} games each)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Moves by kind
    certain = [results[d]["avg_certain_probes_count"] for d in densities]
    marks = [results[d]["avg_marks_count"] for d in densities]
    guesses = [results[d]["avg_guesses_total"] for d in densities]

    bar_w = 0.25 * float(np.min(np.abs(np.diff(x)))) if len(x) > 1 else 0.02
    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w, certain, width=bar_w, label="certain probes")  # type: ignore[misc]
    plt.bar(x, marks, width=bar_w, label="marks")  # type: ignore[misc]
    plt.bar(x + bar_w, guesses, width=bar_w, label="guesses")  # type: ignore[misc]
    plt.xlabel("Mine density")  # type: ignore[misc]
    plt.ylabel("Average count per game")  # type: ignore[misc]
    plt.title("Average moves by kind")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
