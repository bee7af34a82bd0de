"""Contiguity checks over king-move adjacency."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Set

from engine.pieces import Piece, Side
from engine.rules import Position, king_neighbors

if TYPE_CHECKING:
    from engine.board import Board


def _flood(board: "Board", side: Side, start: Position) -> Set[Position]:
    piece = Piece.of(side)
    seen: Set[Position] = {start}
    queue = deque([start])
    while queue:
        pos = queue.popleft()
        for neighbor in king_neighbors(pos):
            if neighbor not in seen and board.get_cell(neighbor) is piece:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen


def component_size(board: "Board", side: Side, position: Position) -> int:
    """Return the size of side's group containing position, or 0 if side has no piece there."""
    if board.get_cell(position) is not Piece.of(side):
        return 0
    return len(_flood(board, side, position))


def connected(board: "Board", side: Side) -> bool:
    """
    Return True iff all of side's pieces form one king-move-connected group.

    A side with no pieces is vacuously connected.
    """
    positions = board.positions_of(side)
    if not positions:
        return True
    return len(_flood(board, side, positions[0])) == len(positions)
