"""Connectivity-driven lookahead search for Lines of Action."""

from __future__ import annotations

import logging
import math
import random
from typing import Optional

from ai.base_ai import BaseAI
from engine.board import Board, Move, NoLegalMoveError
from engine.connectivity import component_size, connected
from engine.pieces import Side
from engine.rules import in_center

LOGGER = logging.getLogger(__name__)

OPENING_MOVES = 10
OPENING_PENALTY = -10
DEFAULT_CUTOFF = 9


def score(side: Side, move: Move, board: Board) -> int:
    """
    Score a legal move by side.

    During the opening any move that leaves the central 4x4 scores
    OPENING_PENALTY. Afterwards the score is the size of the moved piece's
    group after the move minus its size before.
    """
    if board.moves_made < OPENING_MOVES and not in_center(move.destination):
        return OPENING_PENALTY
    before = component_size(board, side, move.source)
    with board.speculate(move):
        after = component_size(board, side, move.destination)
    return after - before


def guess_best_move(side: Side, board: Board, cutoff: float, rng: random.Random) -> Move:
    """Return the best one-ply move for side, breaking ties with a coin from rng."""
    if side is not board.turn:
        raise ValueError(f"Cannot search for {side} when {board.turn} is to move.")
    best_move: Optional[Move] = None
    best_score = -math.inf
    for move in board.legal_moves():
        value = score(side, move, board)
        if value > best_score or (value == best_score and rng.random() < 0.5):
            best_move = move
            best_score = value
        if best_score >= cutoff:
            break
    if best_move is None:
        raise NoLegalMoveError(f"No legal moves for {side}.")
    return best_move


def find_best_move(side: Side, board: Board, depth: int, cutoff: float, rng: random.Random) -> Move:
    """
    Return a move for side looking up to depth replies ahead.

    Each candidate is rated by its own score minus the score of the
    opponent's best reply. Scanning stops once a candidate reaches cutoff.
    The board is returned in the state it was passed in.
    """
    if depth <= 0 or connected(board, side):
        return guess_best_move(side, board, cutoff, rng)
    if side is not board.turn:
        raise ValueError(f"Cannot search for {side} when {board.turn} is to move.")

    opponent = side.opponent()
    best_move: Optional[Move] = None
    best_net = -math.inf
    for move in board.legal_moves():
        own = score(side, move, board)
        with board.speculate(move):
            try:
                reply = find_best_move(opponent, board, depth - 1, cutoff, rng)
            except NoLegalMoveError:
                reply_score = 0
            else:
                reply_score = score(opponent, reply, board)
        net = own - reply_score
        if net > best_net:
            best_net = net
            best_move = move
        if best_net >= cutoff:
            break
    if best_move is None:
        raise NoLegalMoveError(f"No legal moves for {side}.")
    return best_move


class MinimaxAI(BaseAI):
    """Automated player backed by find_best_move."""

    def __init__(self, depth: int = 1, cutoff: float = DEFAULT_CUTOFF) -> None:
        self.depth = depth
        self.cutoff = cutoff

    def choose_move(self, board: Board, rng: random.Random) -> Move:
        """Choose move via depth-limited connectivity search."""
        side = board.turn
        chosen = find_best_move(side, board, self.depth, self.cutoff, rng)
        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug(
                "Search selected %s for %s depth=%d score=%d",
                chosen,
                side,
                self.depth,
                score(side, chosen, board),
            )
        return chosen
