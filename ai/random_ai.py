"""Uniformly random automated player."""

from __future__ import annotations

import random

from ai.base_ai import BaseAI
from engine.board import Board, Move, NoLegalMoveError


class RandomAI(BaseAI):
    """Plays any legal move, chosen from the shared random stream."""

    def choose_move(self, board: Board, rng: random.Random) -> Move:
        legal_moves = board.legal_moves()
        if not legal_moves:
            raise NoLegalMoveError(f"No legal moves for {board.turn}.")
        return rng.choice(legal_moves)
