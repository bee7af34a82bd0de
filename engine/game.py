"""Turn orchestration, time budget, and game configuration."""

from __future__ import annotations

import json
import logging
import random
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from ai.base_ai import BaseAI
from ai.minimax_ai import DEFAULT_CUTOFF, MinimaxAI
from ai.random_ai import RandomAI
from engine.board import Board, IllegalMoveError, Move, MoveRecord, NoLegalMoveError
from engine.pieces import Side

LOGGER = logging.getLogger(__name__)

DEFAULT_SEED = 4
DEFAULT_TIME_LIMIT_MINUTES = 9999.0


class PlayerKind(str, Enum):
    """Who decides moves for a side."""

    HUMAN = "human"
    MACHINE = "machine"


class GameConfig:
    """Container for game settings loaded from a config file."""

    def __init__(self, payload: Dict[str, object]) -> None:
        self.seed = int(payload.get("seed", DEFAULT_SEED))
        self.time_limit_minutes = float(payload.get("time_limit_minutes", DEFAULT_TIME_LIMIT_MINUTES))
        self.ai_players = int(payload.get("ai_players", 1))
        self.human_side = Side(str(payload.get("human_side", Side.BLACK.value)))

        search = payload.get("search", {})
        self.depth = int(search.get("depth", 1))
        self.cutoff = float(search.get("cutoff", DEFAULT_CUTOFF))
        self.strategy = str(search.get("strategy", "minimax"))
        self.validate()

    def validate(self) -> None:
        if self.ai_players not in (0, 1, 2):
            raise ValueError(f"ai_players must be 0, 1 or 2, got {self.ai_players}")
        if self.time_limit_minutes <= 0:
            raise ValueError("time_limit_minutes must be positive")
        if self.depth < 0:
            raise ValueError("search depth must be non-negative")
        if self.strategy not in ("minimax", "random"):
            raise ValueError(f"Unsupported search strategy: {self.strategy}")

    @classmethod
    def from_json(cls, path: str | Path) -> "GameConfig":
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(payload)

    def controllers(self) -> Dict[Side, PlayerKind]:
        """Map each side to the kind of player controlling it."""
        if self.ai_players == 0:
            return {Side.BLACK: PlayerKind.HUMAN, Side.WHITE: PlayerKind.HUMAN}
        if self.ai_players == 2:
            return {Side.BLACK: PlayerKind.MACHINE, Side.WHITE: PlayerKind.MACHINE}
        return {
            self.human_side: PlayerKind.HUMAN,
            self.human_side.opponent(): PlayerKind.MACHINE,
        }


def build_ai(config: GameConfig) -> BaseAI:
    if config.strategy == "minimax":
        return MinimaxAI(depth=config.depth, cutoff=config.cutoff)
    if config.strategy == "random":
        return RandomAI()
    raise ValueError(f"Unsupported search strategy: {config.strategy}")


@dataclass(frozen=True)
class GameOutcome:
    """How a game ended. winner is None only when a player quit."""

    winner: Optional[Side]
    reason: str  # connected, timeout, no_legal_moves or quit


class TurnClock:
    """Accumulating wall-clock timer with a fixed budget, in seconds."""

    def __init__(self, limit_seconds: float, now: Callable[[], float] = time.monotonic) -> None:
        self.limit_seconds = limit_seconds
        self._now = now
        self._accum = 0.0
        self._started_at: Optional[float] = None

    def start(self) -> None:
        if self._started_at is not None:
            raise RuntimeError("Clock is already running.")
        self._started_at = self._now()

    def stop(self) -> float:
        """Stop the clock and return the seconds elapsed since start."""
        if self._started_at is None:
            raise RuntimeError("Clock is not running.")
        diff = self._now() - self._started_at
        self._started_at = None
        self._accum += diff
        return diff

    @property
    def elapsed(self) -> float:
        if self._started_at is None:
            return self._accum
        return self._accum + self._now() - self._started_at

    @property
    def remaining(self) -> float:
        return max(0.0, self.limit_seconds - self.elapsed)

    @property
    def expired(self) -> bool:
        return self.elapsed > self.limit_seconds

    def reset(self) -> None:
        self._accum = 0.0
        self._started_at = None


class Game:
    """
    One game of Lines of Action between human and/or machine players.

    Until deploy() is called both sides are entered by hand and no time is
    charged, so a position can be set up before the machine players take over.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        board: Optional[Board] = None,
        now: Callable[[], float] = time.monotonic,
        deployed: bool = False,
    ) -> None:
        self.config = config or GameConfig({})
        self.board = board if board is not None else Board()
        self.rng = random.Random(self.config.seed)
        self.controllers: Dict[Side, PlayerKind] = {side: PlayerKind.HUMAN for side in Side}
        self.ai = build_ai(self.config)
        limit = self.config.time_limit_minutes * 60.0
        self.clocks: Dict[Side, TurnClock] = {side: TurnClock(limit, now) for side in Side}
        self._deployed = False
        self._outcome: Optional[GameOutcome] = None
        if deployed:
            self.deploy()
        self._refresh_outcome()

    @property
    def random_source(self) -> random.Random:
        """The game-wide random stream."""
        return self.rng

    @property
    def deployed(self) -> bool:
        return self._deployed

    def deploy(self) -> bool:
        """Hand each side to its configured player and start the clocks. False if already deployed."""
        if self._deployed:
            return False
        self._deployed = True
        self.controllers = self.config.controllers()
        for clock in self.clocks.values():
            clock.reset()
        LOGGER.info(
            "Players deployed: black=%s white=%s",
            self.controllers[Side.BLACK].value,
            self.controllers[Side.WHITE].value,
        )
        return True

    def controller(self, side: Side) -> PlayerKind:
        return self.controllers[side]

    def outcome(self) -> Optional[GameOutcome]:
        return self._outcome

    def is_over(self) -> bool:
        return self._outcome is not None

    def remaining_seconds(self, side: Side) -> float:
        return self.clocks[side].remaining

    def transcript(self) -> List[MoveRecord]:
        return [
            MoveRecord(move=self.board.get_move(k), captured=self.board.get_ate_piece(k))
            for k in range(self.board.moves_made)
        ]

    @contextmanager
    def thinking(self, side: Side) -> Iterator[TurnClock]:
        """Charge the time spent in the block to side, ending the game if its budget runs out."""
        clock = self.clocks[side]
        if not self._deployed:
            yield clock
            return
        clock.start()
        try:
            yield clock
        finally:
            clock.stop()
            if clock.expired and self._outcome is None:
                LOGGER.info("%s exceeded the time budget (%.1fs)", side, clock.elapsed)
                self._finish(side.opponent(), "timeout")

    def submit_move(self, move: Move) -> MoveRecord:
        """Commit a move for the side to move. Illegal moves raise IllegalMoveError."""
        if self._outcome is not None:
            raise RuntimeError("Game is already over.")
        try:
            record = self.board.make_move(move)
        except IllegalMoveError:
            LOGGER.info("Rejected move %s for %s", move, self.board.turn)
            raise
        self._refresh_outcome()
        return record

    def play_machine_turn(self) -> Optional[Move]:
        """Let the automated player move for the side to move; None if the game ended instead."""
        if self._outcome is not None:
            raise RuntimeError("Game is already over.")
        side = self.board.turn
        move: Optional[Move] = None
        with self.thinking(side):
            try:
                move = self.ai.choose_move(self.board, self.rng)
            except NoLegalMoveError:
                LOGGER.info("%s has no legal moves", side)
                self._finish(side.opponent(), "no_legal_moves")
        if self._outcome is not None or move is None:
            return None
        self.submit_move(move)
        return move

    def quit(self) -> None:
        if self._outcome is None:
            self._finish(None, "quit")

    def _refresh_outcome(self) -> None:
        winner = self.board.winner()
        if winner is not None:
            self._finish(winner, "connected")

    def _finish(self, winner: Optional[Side], reason: str) -> None:
        self._outcome = GameOutcome(winner=winner, reason=reason)
        LOGGER.info(
            "Game over after %d moves: winner=%s reason=%s",
            self.board.moves_made,
            winner.value if winner else "none",
            reason,
        )
