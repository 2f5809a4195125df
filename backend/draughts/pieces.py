from __future__ import annotations

from enum import Enum
from itertools import count
from typing import Optional

from .move import Coordinate


_PIECE_ID_COUNTER = count()


class Color(Enum):
    BLACK = "black"
    WHITE = "white"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta of a non-king step: White climbs the board, Black descends."""
        return 1 if self is Color.WHITE else -1

    @property
    def promotion_row(self) -> int:
        return 7 if self is Color.WHITE else 0


class Piece:
    def __init__(self, color: Color, col: int, row: int, *, identifier: Optional[int] = None) -> None:
        self.color = color
        self.col = col
        self.row = row
        self.is_king = False
        self.id = identifier if identifier is not None else next(_PIECE_ID_COUNTER)

    def move(self, new_col: int, new_row: int) -> None:
        self.col = new_col
        self.row = new_row

    def king(self) -> None:
        self.is_king = True

    @property
    def position(self) -> Coordinate:
        return (self.col, self.row)

    @property
    def directions(self) -> tuple[Coordinate, ...]:
        if self.is_king:
            return ((-1, -1), (1, -1), (-1, 1), (1, 1))
        dy = self.color.forward
        return ((-1, dy), (1, dy))

    def allows_row_delta(self, dy: int) -> bool:
        if self.is_king:
            return dy != 0
        return dy * self.color.forward > 0

    def __repr__(self) -> str:
        piece_type = "K" if self.is_king else "M"
        return f"{piece_type}({self.color.name},{self.col},{self.row})"
