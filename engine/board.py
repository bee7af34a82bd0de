"""Lines of Action board state, move legality, and move history."""

from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from engine.connectivity import connected
from engine.pieces import Piece, Side
from engine.rules import (
    BOARD_SIZE,
    TRAVEL_DIRECTIONS,
    Direction,
    Position,
    in_bounds,
    line_through,
    positions_between,
    square_name,
)

_MOVE_PATTERN = re.compile(r"([a-h])([1-8])-([a-h])([1-8])", re.IGNORECASE)


class IllegalMoveError(ValueError):
    """Raised when a move is not legal for the side to move."""


class RetractError(RuntimeError):
    """Raised when retracting with no moves made."""


class NoLegalMoveError(RuntimeError):
    """Raised when a move is requested for a side that has none."""


@dataclass(frozen=True)
class Move:
    """Move of the piece at (col0, row0) to (col1, row1)."""

    col0: int
    row0: int
    col1: int
    row1: int

    @classmethod
    def create(cls, col0: int, row0: int, col1: int, row1: int) -> Optional["Move"]:
        """Return the move, or None if any coordinate is off the board."""
        if not (in_bounds((col0, row0)) and in_bounds((col1, row1))):
            return None
        return cls(col0, row0, col1, row1)

    @classmethod
    def parse(cls, text: str) -> Optional["Move"]:
        """Parse 'b8-b6' style notation. Returns None if text is not a move."""
        match = _MOVE_PATTERN.fullmatch(text.strip())
        if match is None:
            return None
        c0, r0, c1, r1 = match.groups()
        return cls(
            ord(c0.lower()) - ord("a") + 1,
            int(r0),
            ord(c1.lower()) - ord("a") + 1,
            int(r1),
        )

    @property
    def source(self) -> Position:
        return (self.col0, self.row0)

    @property
    def destination(self) -> Position:
        return (self.col1, self.row1)

    @property
    def length(self) -> int:
        return max(abs(self.col1 - self.col0), abs(self.row1 - self.row0))

    @property
    def direction(self) -> Direction:
        return Direction.from_delta(self.col1 - self.col0, self.row1 - self.row0)

    def __str__(self) -> str:
        return f"{square_name(self.source)}-{square_name(self.destination)}"


@dataclass(frozen=True)
class MoveRecord:
    """History entry for one committed move."""

    move: Move
    captured: bool


E = Piece.EMPTY
B = Piece.BLACK
W = Piece.WHITE

# Top row is row 8, as printed.
INITIAL_PIECES: Sequence[Sequence[Piece]] = (
    (E, B, B, B, B, B, B, E),
    (W, E, E, E, E, E, E, W),
    (W, E, E, E, E, E, E, W),
    (W, E, E, E, E, E, E, W),
    (W, E, E, E, E, E, E, W),
    (W, E, E, E, E, E, E, W),
    (W, E, E, E, E, E, E, W),
    (E, B, B, B, B, B, B, E),
)


class Board:
    """Lines of Action board with an undoable move history."""

    size: int = BOARD_SIZE

    def __init__(
        self,
        contents: Optional[Sequence[Sequence[Piece]]] = None,
        turn: Side = Side.BLACK,
    ) -> None:
        rows = INITIAL_PIECES if contents is None else contents
        if len(rows) != self.size or any(len(row) != self.size for row in rows):
            raise ValueError(f"Board contents must be {self.size}x{self.size}.")
        # grid[row - 1][col - 1]; contents list row 8 first.
        self.grid: List[List[Piece]] = [list(row) for row in reversed(rows)]
        self._turn = turn
        self._history: List[MoveRecord] = []

    @classmethod
    def from_rows(cls, rows: Sequence[str], turn: Side = Side.BLACK) -> "Board":
        """Build a board from text rows such as '-bbbbbb-', row 8 first."""
        contents = [[Piece.from_symbol(ch) for ch in row.replace(" ", "")] for row in rows]
        return cls(contents, turn)

    def clone(self) -> "Board":
        """Deep copy board state, including history."""
        cloned = Board.__new__(Board)
        cloned.grid = [list(row) for row in self.grid]
        cloned._turn = self._turn
        cloned._history = list(self._history)
        return cloned

    @property
    def turn(self) -> Side:
        """Side to move."""
        return self._turn

    @property
    def moves_made(self) -> int:
        """Number of moves made and not retracted."""
        return len(self._history)

    def get_move(self, k: int) -> Move:
        """Return move #k used to reach the current position, 0 <= k < moves_made."""
        return self._history[k].move

    def get_ate_piece(self, k: int) -> bool:
        """Return whether move #k captured an opponent piece."""
        return self._history[k].captured

    def iter_positions(self) -> Iterable[Position]:
        """Yield all board positions, row-major from row 1."""
        for row in range(1, self.size + 1):
            for col in range(1, self.size + 1):
                yield (col, row)

    def get(self, col: int, row: int) -> Piece:
        """Return the contents of column col, row row (both 1-indexed)."""
        if not in_bounds((col, row)):
            raise IndexError(f"Square ({col}, {row}) is off the board.")
        return self.grid[row - 1][col - 1]

    def get_cell(self, pos: Position) -> Piece:
        return self.get(pos[0], pos[1])

    def _set(self, pos: Position, piece: Piece) -> None:
        col, row = pos
        self.grid[row - 1][col - 1] = piece

    def piece_count(self, side: Side) -> int:
        piece = Piece.of(side)
        return sum(row.count(piece) for row in self.grid)

    def positions_of(self, side: Side) -> List[Position]:
        piece = Piece.of(side)
        return [pos for pos in self.iter_positions() if self.get_cell(pos) is piece]

    def line_occupancy(self, move: Move) -> int:
        """Count pieces on the full line through the move's source along its direction of travel."""
        direction = move.direction
        if direction is Direction.INVALID:
            return 0
        return sum(1 for pos in line_through(move.source, direction) if self.get_cell(pos) is not Piece.EMPTY)

    def is_blocked(self, move: Move) -> bool:
        """Return True if an opponent piece lies strictly between source and destination."""
        mover = self.get_cell(move.source).side
        if mover is None:
            return False
        enemy = Piece.of(mover.opponent())
        return any(self.get_cell(pos) is enemy for pos in positions_between(move.source, move.destination))

    def is_legal(self, move: Optional[Move]) -> bool:
        """Return True iff move is legal for the side to move."""
        if move is None:
            return False
        if not (in_bounds(move.source) and in_bounds(move.destination)):
            return False
        if move.direction is Direction.INVALID:
            return False
        own = Piece.of(self._turn)
        if self.get_cell(move.source) is not own:
            return False
        if self.get_cell(move.destination) is own:
            return False
        if self.is_blocked(move):
            return False
        return move.length == self.line_occupancy(move)

    def legal_moves(self) -> List[Move]:
        """Generate all legal moves, ordered row-major by source then by destination."""
        own = Piece.of(self._turn)
        moves: List[Move] = []
        for source in self.iter_positions():
            if self.get_cell(source) is not own:
                continue
            candidates: List[Move] = []
            for direction in TRAVEL_DIRECTIONS:
                probe = Move(source[0], source[1], source[0] + direction.dcol, source[1] + direction.drow)
                distance = self.line_occupancy(probe)
                move = Move.create(
                    source[0],
                    source[1],
                    source[0] + direction.dcol * distance,
                    source[1] + direction.drow * distance,
                )
                if self.is_legal(move):
                    candidates.append(move)
            candidates.sort(key=lambda m: (m.row1, m.col1))
            moves.extend(candidates)
        return moves

    def make_move(self, move: Move) -> MoveRecord:
        """Apply a legal move and switch turn."""
        if not self.is_legal(move):
            raise IllegalMoveError(f"Illegal move for {self._turn}: {move}")
        captured = self.get_cell(move.destination) is not Piece.EMPTY
        self._set(move.destination, Piece.of(self._turn))
        self._set(move.source, Piece.EMPTY)
        record = MoveRecord(move=move, captured=captured)
        self._history.append(record)
        self._turn = self._turn.opponent()
        return record

    def retract(self) -> Move:
        """Unmake the last move, returning to the position immediately before it."""
        if not self._history:
            raise RetractError("No moves to retract.")
        self._turn = self._turn.opponent()
        record = self._history.pop()
        move = record.move
        self._set(move.source, Piece.of(self._turn))
        if record.captured:
            self._set(move.destination, Piece.of(self._turn.opponent()))
        else:
            self._set(move.destination, Piece.EMPTY)
        return move

    @contextmanager
    def speculate(self, move: Move) -> Iterator["Board"]:
        """Make move for the duration of the block, retracting it on every exit path."""
        self.make_move(move)
        try:
            yield self
        finally:
            self.retract()

    def game_over(self) -> bool:
        """Return True iff either side's pieces are contiguous."""
        return connected(self, Side.BLACK) or connected(self, Side.WHITE)

    def winner(self) -> Optional[Side]:
        """Return the connected side; the side that moved last wins if both are."""
        last_mover = self._turn.opponent()
        for side in (last_mover, last_mover.opponent()):
            if connected(self, side):
                return side
        return None

    def snapshot(self) -> np.ndarray:
        """Return occupancy codes indexed [row - 1, col - 1]."""
        encoded = np.zeros((self.size, self.size), dtype=np.int8)
        for col, row in self.iter_positions():
            encoded[row - 1, col - 1] = self.grid[row - 1][col - 1].code
        return encoded

    def render_ascii(self) -> str:
        """Return a simple human-readable board representation, row 8 on top."""
        lines: List[str] = []
        for row in range(self.size, 0, -1):
            cells = " ".join(self.grid[row - 1][col - 1].symbol for col in range(1, self.size + 1))
            lines.append(f"{row}  {cells}")
        lines.append("   " + " ".join(chr(ord("a") + c) for c in range(self.size)))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(turn={self._turn}, moves_made={self.moves_made})\n{self.render_ascii()}"
