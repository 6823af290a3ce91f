"""
Conversions between algebraic notation ("e4") and zero-based grid indices.

The grid is stored row-major with row 0 being the 8th rank (Black's back rank), which is also the order a FEN string
lists the ranks in. Columns simply run a -> h.
"""

from string import ascii_lowercase

from src.core.exceptions import (
    InvalidPositionFileError,
    InvalidPositionRankError,
    OutOfBoundsError,
    StringTooShortError,
)

BOARD_SIZE = 8
FILES = ascii_lowercase[:BOARD_SIZE]

# (row, col)
Position = tuple[int, int]


def rank_to_row(rank: int) -> int:
    """rank 8 -> row 0, ..., rank 1 -> row 7"""
    if not 1 <= rank <= BOARD_SIZE:
        raise InvalidPositionRankError(f"Rank must lie within 1-{BOARD_SIZE}: {rank}")
    return BOARD_SIZE - rank


def row_to_rank(row: int) -> int:
    if not 0 <= row < BOARD_SIZE:
        raise OutOfBoundsError(f"Row must lie within 0-{BOARD_SIZE - 1}: {row}")
    return BOARD_SIZE - row


def file_to_col(file: str) -> int:
    """'a' -> 0, ..., 'h' -> 7"""
    if len(file) != 1 or file not in FILES:
        raise InvalidPositionFileError(f"File must be one of {FILES!r}: {file!r}")
    return ord(file) - ord("a")


def col_to_file(col: int) -> str:
    if not 0 <= col < BOARD_SIZE:
        raise OutOfBoundsError(f"Column must lie within 0-{BOARD_SIZE - 1}: {col}")
    return FILES[col]


def is_within_bounds(row: int, col: int) -> bool:
    return (0 <= row < BOARD_SIZE) and (0 <= col < BOARD_SIZE)


def parse_square(text: str) -> Position:
    """Algebraic notation: 'a8' -> (0, 0), 'h1' -> (7, 7)"""
    if len(text) != 2:
        raise StringTooShortError(f"A square is exactly 2 characters long: {text!r}")
    return _parse_coordinate(text[0], text[1])


def square_name(position: Position) -> str:
    """Reverse of parse_square"""
    row, col = position
    return f"{col_to_file(col)}{row_to_rank(row)}"


def _parse_coordinate(file_char: str, rank_char: str) -> Position:
    """Validate the file first, then the rank. The error tells the caller which one was wrong."""
    col = file_to_col(file_char)
    if not (rank_char.isascii() and rank_char.isdigit()):
        raise InvalidPositionRankError(f"Rank must be a digit: {rank_char!r}")
    row = rank_to_row(int(rank_char))
    return row, col


def parse_coordinate_pair(text: str) -> tuple[Position, Position]:
    """
    4 characters: <from file><from rank><to file><to rank>

    Only validates the coordinates. Turning this into a Move (and rejecting useless moves) is done by Move.from_str
    """
    if len(text) != 4:
        raise StringTooShortError(f"A move is exactly 4 characters long: {text!r}")
    from_pos = _parse_coordinate(text[0], text[1])
    to_pos = _parse_coordinate(text[2], text[3])
    return from_pos, to_pos
