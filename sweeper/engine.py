"""Round-based engine that plays a MineField from local count estimates."""

import logging
import time
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .board import PlayerView
from .field import MINE, MineField
from .frontier import Frontier
from .knowledge import Estimate, KnowledgeGrid, ShouldFree, Unknown
from .utils import InvariantViolation, Position

logger = logging.getLogger(__name__)

# Status codes returned by StepEngine.step().
FAILED: int = -1
RUNNING: int = 0
COMPLETE: int = 1


class ActionKind(Enum):
    PROBE = "probe"
    MARK = "mark"


class Action(NamedTuple):
    kind: ActionKind
    pos: Position

    @classmethod
    def probe(cls, pos: Position) -> "Action":
        return cls(ActionKind.PROBE, pos)

    @classmethod
    def mark(cls, pos: Position) -> "Action":
        return cls(ActionKind.MARK, pos)


class StepEngine:
    """
    Plays one game against a MineField, one round per step() call.

    A round resolves the pending actions, propagates the new counts into the
    knowledge grid around every resolved cell, and then scans the frontier
    once to produce the next batch: every certain mine is marked and every
    certain-safe cell probed. When nothing is certain, the single least
    dangerous frontier cell is probed instead.
    """

    def __init__(
        self,
        field: MineField,
        first_probe: Optional[Position] = None,
        *,
        record_steps: bool = False,
        allow_blind_guess: bool = True,
    ) -> None:
        """
        Initialize an engine bound to a specific field.

        Args:
            field: Ground truth to play against; never mutated.
            first_probe: Active position probed in the first round. Defaults
                to the centre of the active region.
            record_steps: If True, keep a per-round history (actions, player
                view snapshot, danger map) for replay.
            allow_blind_guess: If True, an exhausted frontier with safe cells
                still hidden triggers a probe on the first untouched cell in
                row-major order. If False, that situation raises
                InvariantViolation.

        Raises:
            ValueError: If first_probe lies outside the active region.
        """
        self.field = field
        self.region = field.region
        self.record_steps = record_steps
        self.allow_blind_guess = allow_blind_guess

        if first_probe is None:
            first_probe = self.region.center
        if not field.is_active(first_probe):
            raise ValueError(f"First probe {first_probe} is outside the active region.")

        self.view = PlayerView(field.n_rows, field.n_cols, self.region)
        self.frontier = Frontier()
        self.knowledge = KnowledgeGrid(
            field.n_rows, field.n_cols, self.region, self.frontier
        )
        self.pending: List[Action] = [Action.probe(first_probe)]

        # Safe cells not yet revealed; the game is complete when it reaches 0.
        self.outstanding: int = field.safe_count
        self.status: int = RUNNING
        self.failed_at: Optional[Position] = None
        self._last_result: Optional[Tuple[int, Dict[str, Any]]] = None

        # Metrics / counters (for analysis)
        self.rounds_count: int = 0
        self.probes_count: int = 0
        self.marks_count: int = 0
        self.certain_probes_count: int = 0
        self.risky_guesses_count: int = 0
        self.blind_guesses_count: int = 0

        self.steps_history: List[Dict[str, Any]] = []

    # -------------------------------------------------------------------------
    # Round phases
    # -------------------------------------------------------------------------

    def _resolve(self, actions: List[Action]) -> List[Position]:
        """Apply actions to the view and the knowledge grid; stop at the first mine hit."""
        resolved: List[Position] = []
        for action in actions:
            pos = action.pos
            if action.kind is ActionKind.MARK:
                self.view.mark(pos)
                self.knowledge.set_mine(pos)
                self.marks_count += 1
            else:
                self.view.reveal(pos)
                self.probes_count += 1
                n = self.field.probe(pos)
                if n == MINE:
                    self.status = FAILED
                    self.failed_at = pos
                    return resolved
                self.knowledge.set_free(pos, n)
                self.outstanding -= 1
            resolved.append(pos)
        return resolved

    def _propagate(self, resolved: List[Position]) -> None:
        for pos in resolved:
            self.knowledge.propagate_around(pos)

    def _decide(self) -> List[Action]:
        """Scan the frontier once and choose the next batch of actions."""
        actions: List[Action] = []
        risky_pick: Optional[Position] = None
        risky_danger = 2.0

        for pos in self.frontier.to_list():
            desc = self.knowledge.get(pos)
            if not isinstance(desc, (Estimate, ShouldFree)):
                raise InvariantViolation(
                    f"Frontier holds {pos} with belief {type(desc).__name__}."
                )
            danger = desc.danger()
            if danger == 1.0:
                actions.append(Action.mark(pos))
                self.frontier.discard(pos)
            elif danger == 0.0:
                actions.append(Action.probe(pos))
                self.frontier.discard(pos)
                self.certain_probes_count += 1
            elif danger < risky_danger:
                risky_pick, risky_danger = pos, danger

        if actions:
            return actions

        if risky_pick is not None:
            self.frontier.discard(risky_pick)
            self.risky_guesses_count += 1
            logger.debug("Guessing %s at danger %.3f", risky_pick, risky_danger)
            return [Action.probe(risky_pick)]

        blind = self._first_untouched()
        if blind is None or not self.allow_blind_guess:
            raise InvariantViolation(
                f"Frontier is empty with {self.outstanding} safe cells still hidden."
            )
        self.blind_guesses_count += 1
        logger.debug("Frontier exhausted; probing untouched cell %s", blind)
        return [Action.probe(blind)]

    def _first_untouched(self) -> Optional[Position]:
        for pos in self.region.positions():
            if isinstance(self.knowledge.get(pos), Unknown):
                return pos
        return None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def unmarked_mines(self) -> int:
        return self.field.mine_count - self.marks_count

    def step(self) -> Tuple[int, Dict[str, Any]]:
        """
        Run one round.

        Returns:
            Tuple of (status, payload) where status is:
                - -1: a probe hit a mine (Failed)
                - 0: still running
                - 1: every safe cell is revealed (Complete)

            Payload contains "round", "actions" (emitted for the next round),
            and "unmarked_mines"; "failed_at" on Failed; the metrics counters
            on terminal rounds.

            Once terminal, further calls return the same result unchanged.

        Raises:
            InvariantViolation: If the internal state becomes inconsistent.
        """
        if self.status != RUNNING:
            if self._last_result is None:
                raise InvariantViolation("Engine stopped without a terminal result.")
            return self._last_result

        self.rounds_count += 1
        actions, self.pending = self.pending, []

        resolved = self._resolve(actions)
        if self.status == RUNNING and self.outstanding == 0:
            self.status = COMPLETE

        next_actions: List[Action] = []
        if self.status == RUNNING:
            self._propagate(resolved)
            next_actions = self._decide()
            self.pending = next_actions

        payload: Dict[str, Any] = {
            "round": self.rounds_count,
            "actions": next_actions,
            "unmarked_mines": self.unmarked_mines,
        }
        if self.status == FAILED:
            payload["failed_at"] = self.failed_at
        if self.status != RUNNING:
            payload.update(self.metrics())
            logger.info(
                "Game %s after %d rounds (%d probes, %d marks)",
                "complete" if self.status == COMPLETE else f"failed at {self.failed_at}",
                self.rounds_count,
                self.probes_count,
                self.marks_count,
            )
            self._last_result = (self.status, payload)
        else:
            logger.debug(
                "Round %d: resolved %d, emitted %d, frontier %d",
                self.rounds_count,
                len(resolved),
                len(next_actions),
                len(self.frontier),
            )

        self._record_step(actions)
        return self.status, payload

    def run(self, max_rounds: Optional[int] = None) -> Tuple[int, Dict[str, Any]]:
        """
        Step until the game ends.

        Args:
            max_rounds: Optional cap on the number of rounds.

        Returns:
            The terminal (status, payload) pair.

        Raises:
            RuntimeError: If max_rounds is reached while still running.
        """
        status, payload = self.step()
        while status == RUNNING:
            if max_rounds is not None and self.rounds_count >= max_rounds:
                raise RuntimeError(f"Game still running after {max_rounds} rounds.")
            status, payload = self.step()
        return status, payload

    def metrics(self) -> Dict[str, Any]:
        return {
            "rounds_count": self.rounds_count,
            "probes_count": self.probes_count,
            "marks_count": self.marks_count,
            "certain_probes_count": self.certain_probes_count,
            "risky_guesses_count": self.risky_guesses_count,
            "blind_guesses_count": self.blind_guesses_count,
            "max_frontier": self.frontier.max_size,
            "revealed_cells_count": self.field.safe_count - self.outstanding,
            "steps_history": self.steps_history,
        }

    def _record_step(self, resolved_actions: List[Action]) -> None:
        """Record a round for replay functionality."""
        if not self.record_steps:
            return
        self.steps_history.append({
            "round": self.rounds_count,
            "resolved": list(resolved_actions),
            "emitted": list(self.pending),
            "status": self.status,
            "failed_at": self.failed_at,
            "view_snapshot": self.view.snapshot(),
            "danger_snapshot": self.knowledge.danger_map(),
            "knowledge_snapshot": self.knowledge.snapshot(),
        })


def watch_cli(engine: StepEngine, delay: float = 0.05) -> int:
    """
    Run the engine to the end, redrawing the player view after every round.

    Args:
        engine: A fresh StepEngine.
        delay: Seconds to pause between rounds.

    Returns:
        The terminal status code.
    """
    hide, show, clear, home = "\033[?25l", "\033[?25h", "\033[2J", "\033[H"
    print(hide + clear, end="")
    try:
        status = RUNNING
        payload: Dict[str, Any] = {}
        while status == RUNNING:
            status, payload = engine.step()
            print(home + engine.view.format_view(engine.knowledge), flush=True)
            time.sleep(delay)
    finally:
        print(show, end="")

    if status == FAILED:
        print(f"\nHit a mine at {payload['failed_at']}. "
              f"{payload['unmarked_mines']} mines were not cleared.")
        print("\nField:")
        print(engine.field.format_field())
    else:
        print(f"\nAll safe cells revealed in {payload['rounds_count']} rounds.")
    return status
