"""Base AI interface."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from engine.board import Board, Move


class BaseAI(ABC):
    """Abstract automated-player contract."""

    @abstractmethod
    def choose_move(self, board: Board, rng: random.Random) -> Move:
        """Choose a legal move for the side to move, drawing any randomness from rng."""
        raise NotImplementedError
