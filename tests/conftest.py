from typing import Callable, Iterable, Tuple

import pytest

from engine.board import Board
from engine.pieces import Side

Position = Tuple[int, int]


def _board_with(
    black: Iterable[Position] = (),
    white: Iterable[Position] = (),
    turn: Side = Side.BLACK,
) -> Board:
    rows = [["-"] * 8 for _ in range(8)]
    for col, row in black:
        rows[8 - row][col - 1] = "b"
    for col, row in white:
        rows[8 - row][col - 1] = "w"
    return Board.from_rows(["".join(r) for r in rows], turn)


@pytest.fixture
def board_with() -> Callable[..., Board]:
    """Build a board from (col, row) piece lists."""
    return _board_with
