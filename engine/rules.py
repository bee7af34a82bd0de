"""Geometry helpers for Lines of Action."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Tuple

BOARD_SIZE = 8
CENTER_LOW = 3
CENTER_HIGH = 6

# (col, row), both 1-indexed.
Position = Tuple[int, int]

KING_STEPS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


class Direction(Enum):
    """Direction of travel as a (dcol, drow) unit step. UP is increasing row."""

    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP_LEFT = (-1, 1)
    UP_RIGHT = (1, 1)
    DOWN_LEFT = (-1, -1)
    DOWN_RIGHT = (1, -1)
    INVALID = (0, 0)

    @property
    def dcol(self) -> int:
        return self.value[0]

    @property
    def drow(self) -> int:
        return self.value[1]

    @classmethod
    def from_delta(cls, dcol: int, drow: int) -> "Direction":
        """Return the direction of a displacement, INVALID unless on a row, column or diagonal."""
        if dcol == 0 and drow == 0:
            return cls.INVALID
        if dcol != 0 and drow != 0 and abs(dcol) != abs(drow):
            return cls.INVALID
        step = (_sign(dcol), _sign(drow))
        return cls(step)


TRAVEL_DIRECTIONS: Tuple[Direction, ...] = tuple(d for d in Direction if d is not Direction.INVALID)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def in_bounds(pos: Position) -> bool:
    """Return whether a position is inside the board."""
    col, row = pos
    return 1 <= col <= BOARD_SIZE and 1 <= row <= BOARD_SIZE


def in_center(pos: Position) -> bool:
    """Return whether a position lies in the central 4x4 region."""
    col, row = pos
    return CENTER_LOW <= col <= CENTER_HIGH and CENTER_LOW <= row <= CENTER_HIGH


def king_neighbors(pos: Position) -> Iterable[Position]:
    """Yield the in-bounds cells one king move away."""
    col, row = pos
    for dc, dr in KING_STEPS:
        candidate = (col + dc, row + dr)
        if in_bounds(candidate):
            yield candidate


def ray(start: Position, direction: Direction) -> Iterable[Position]:
    """Yield cells from start (exclusive) toward the board edge."""
    col, row = start
    while True:
        col += direction.dcol
        row += direction.drow
        if not in_bounds((col, row)):
            return
        yield (col, row)


def line_through(pos: Position, direction: Direction) -> List[Position]:
    """Return every cell on the full line through pos along direction's axis, pos included."""
    backward = Direction((-direction.dcol, -direction.drow))
    return [pos, *ray(pos, direction), *ray(pos, backward)]


def positions_between(start: Position, end: Position) -> List[Position]:
    """Return squares strictly between two aligned positions."""
    direction = Direction.from_delta(end[0] - start[0], end[1] - start[1])
    if direction is Direction.INVALID:
        return []
    between: List[Position] = []
    for pos in ray(start, direction):
        if pos == end:
            break
        between.append(pos)
    return between


def square_name(pos: Position) -> str:
    """Return the printed designation of a square, e.g. (2, 8) -> 'b8'."""
    col, row = pos
    return f"{chr(ord('a') + col - 1)}{row}"
