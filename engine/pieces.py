"""Side and piece definitions for Lines of Action."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class Side(str, Enum):
    """Player side."""

    BLACK = "black"
    WHITE = "white"

    def opponent(self) -> "Side":
        return Side.WHITE if self is Side.BLACK else Side.BLACK

    @property
    def prefix(self) -> str:
        return SIDE_PREFIX[self]

    def __str__(self) -> str:
        return self.value


SIDE_PREFIX: Dict[Side, str] = {
    Side.BLACK: "B",
    Side.WHITE: "W",
}


class Piece(str, Enum):
    """Contents of a single square."""

    EMPTY = "-"
    BLACK = "b"
    WHITE = "w"

    @property
    def side(self) -> Optional[Side]:
        if self is Piece.BLACK:
            return Side.BLACK
        if self is Piece.WHITE:
            return Side.WHITE
        return None

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def code(self) -> int:
        return PIECE_CODES[self]

    @classmethod
    def of(cls, side: Side) -> "Piece":
        return cls.BLACK if side is Side.BLACK else cls.WHITE

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        for piece in cls:
            if piece.value == symbol.lower():
                return piece
        raise ValueError(f"Unknown piece symbol: {symbol!r}")


PIECE_CODES: Dict[Piece, int] = {
    Piece.EMPTY: 0,
    Piece.BLACK: 1,
    Piece.WHITE: 2,
}
