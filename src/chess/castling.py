"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum

from src.chess.notation import BOARD_SIZE
from src.chess.pieces import Color

DEFAULT_KING_COL = 4
DEFAULT_KINGSIDE_ROOK_COL = 7
DEFAULT_QUEENSIDE_ROOK_COL = 0

CASTLE_KINGSIDE_SAN = "O-O"
CASTLE_QUEENSIDE_SAN = "O-O-O"


class CastlingSide(Enum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


@dataclass(frozen=True)
class CastlingColumns:
    """
    Columns involved when castling to one side.
    NOTE: Everything is relative to the home row of the color that castles.
    """

    rook_from: int
    king_to: int
    rook_to: int
    # squares that must be empty: everything strictly between king and rook
    between: tuple[int, ...]
    # squares the king passes through (destination included). None of them may be under attack.
    king_path: tuple[int, ...]


CASTLING_COLUMNS: dict[CastlingSide, CastlingColumns] = {
    CastlingSide.KINGSIDE: CastlingColumns(
        rook_from=DEFAULT_KINGSIDE_ROOK_COL,
        king_to=DEFAULT_KING_COL + 2,
        rook_to=DEFAULT_KING_COL + 1,
        between=(DEFAULT_KING_COL + 1, DEFAULT_KING_COL + 2),
        king_path=(DEFAULT_KING_COL + 1, DEFAULT_KING_COL + 2),
    ),
    CastlingSide.QUEENSIDE: CastlingColumns(
        rook_from=DEFAULT_QUEENSIDE_ROOK_COL,
        king_to=DEFAULT_KING_COL - 2,
        rook_to=DEFAULT_KING_COL - 1,
        between=(DEFAULT_KING_COL - 1, DEFAULT_KING_COL - 2, DEFAULT_KING_COL - 3),
        king_path=(DEFAULT_KING_COL - 1, DEFAULT_KING_COL - 2),
    ),
}

CASTLING_SAN: dict[CastlingSide, str] = {
    CastlingSide.KINGSIDE: CASTLE_KINGSIDE_SAN,
    CastlingSide.QUEENSIDE: CASTLE_QUEENSIDE_SAN,
}


def home_row(color: Color) -> int:
    """White starts on the bottom row (rank 1), Black on the top row (rank 8)"""
    return BOARD_SIZE - 1 if color == Color.WHITE else 0


@dataclass
class CastlingRights:
    """
    Which castling moves are available right now.

    `check_empty_squares` records how the summary was made: with False, pieces standing in between
    king and rook are ignored (so the summary reports 'rights' rather than 'can castle this very move').
    """

    white_kingside: bool = False
    white_queenside: bool = False
    black_kingside: bool = False
    black_queenside: bool = False
    check_empty_squares: bool = True

    def to_fen(self) -> str:
        castling_chars = "".join(
            char
            for char, available in [
                ("K", self.white_kingside),
                ("Q", self.white_queenside),
                ("k", self.black_kingside),
                ("q", self.black_queenside),
            ]
            if available
        )
        return castling_chars or "-"

    def any(self) -> bool:
        return self.to_fen() != "-"
