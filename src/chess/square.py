"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from dataclasses import dataclass
from typing import Any, Optional

from src.chess.notation import (
    BOARD_SIZE,
    Position,
    col_to_file,
    is_within_bounds,
    row_to_rank,
    square_name,
)
from src.chess.pieces import Piece
from src.core.exceptions import OutOfBoundsError

# Coordinates are fixed at construction. Only the occupant changes during a game.
_FIXED_COORDINATES = ("row", "col")


@dataclass(eq=False)
class Square:
    row: int
    col: int
    piece: Optional[Piece] = None

    def __post_init__(self) -> None:
        if not is_within_bounds(self.row, self.col):
            raise OutOfBoundsError(
                f"Square ({self.row}, {self.col}) lies outside the {BOARD_SIZE}x{BOARD_SIZE} board"
            )

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _FIXED_COORDINATES and hasattr(self, name):
            raise AttributeError(f"Square coordinate {name!r} cannot be changed")
        super().__setattr__(name, value)

    def __str__(self) -> str:
        """Occupied squares render as <rank><file> (ex. '8a'), empty squares as '-'"""
        if self.piece is None:
            return "-"
        return f"{self.rank}{self.file}"

    @property
    def rank(self) -> int:
        return row_to_rank(self.row)

    @property
    def file(self) -> str:
        return col_to_file(self.col)

    @property
    def position(self) -> Position:
        return self.row, self.col

    def is_empty(self) -> bool:
        return self.piece is None

    def to_algebraic(self) -> str:
        return square_name(self.position)
