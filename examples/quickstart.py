"""
Quickstart example for the Frontier Sweeper engine.

This script demonstrates basic usage of the engine.
"""

from sweeper import (
    DEFAULT_COLS,
    DEFAULT_DENSITY,
    DEFAULT_ROWS,
    MineField,
    StepEngine,
    format_engine_state,
    run_engine_many_tests,
)


def main():
    print("=" * 60)
    print("Frontier Sweeper - Quickstart Example")
    print("=" * 60)

    # Example 1: Play a single game
    print(f"\n1. Playing one {DEFAULT_ROWS}x{DEFAULT_COLS} game at density {DEFAULT_DENSITY}...")
    print("-" * 60)

    field = MineField.random(DEFAULT_ROWS, DEFAULT_COLS, DEFAULT_DENSITY, seed=7)
    engine = StepEngine(field)
    status, payload = engine.run()

    result = "COMPLETE" if status == 1 else f"FAILED at {payload['failed_at']}"
    print(f"Result: {result}")
    print(f"Mines on field: {field.mine_count}")
    print(f"Rounds: {payload['rounds_count']}")
    print(f"Probes: {payload['probes_count']} ({payload['certain_probes_count']} certain)")
    print(f"Marks: {payload['marks_count']}")
    print(f"Risky guesses: {payload['risky_guesses_count']}")
    print(f"Blind guesses: {payload['blind_guesses_count']}")

    # Example 2: Show final beliefs next to the ground truth
    print("\n2. Field and final engine knowledge:")
    print("-" * 60)
    print(field.format_field())
    print()
    print(format_engine_state(engine))

    # Example 3: Run multiple games for statistics
    print("\n3. Running 50 games on a 16x16 field at density 0.12...")
    print("-" * 60)

    results = run_engine_many_tests(16, 16, 0.12, runs=50, seed=1)

    print(f"Win rate: {results['win_rate']*100:.1f}%")
    print(f"Average rounds per game: {results['avg_rounds_count']:.1f}")
    print(f"Average guesses per game: {results['avg_guesses_total']:.1f}")
    print(f"Average cleared fraction: {results['avg_cleared_fraction']*100:.1f}%")

    # Example 4: Compare densities
    print("\n4. Win rates by density (20 games each)...")
    print("-" * 60)

    for density in (0.05, 0.10, 0.15, 0.20):
        results = run_engine_many_tests(16, 16, density, runs=20, seed=2)
        print(f"density {density:.2f}: {results['win_rate']*100:5.1f}% win rate")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
