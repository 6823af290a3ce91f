"""
FEN (Forsyth-Edwards Notation) encoding and decoding of a Board.

<board position><active color><castling rights><en passant square><# half move clock><# full moves>

* The board position lists the ranks from the 8th down to the 1st, separated by slashes. Within a rank: a -> h.
  A letter is a piece (capital letters for the white pieces), a digit is the amount of empty squares in a row.
* The active color is either "w" or "b"
* Castling rights: "K"/"Q" for White's king-side / queen-side, "k"/"q" for Black's. "-" if none.
* The en passant target square, or "-".
* The half move clock counts the moves since the last pawn move or capture.
* The full move counter goes up after every move Black makes.

ex) rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1

NOTE: decoding ignores the castling field. Castling eligibility follows from the pieces' own move counters,
and pieces read from a FEN string have never moved. So only placement, turn and counters survive a round trip exactly.
"""

import logging
import re
from typing import Optional, Protocol

from src.chess.castling import CastlingRights
from src.chess.notation import BOARD_SIZE
from src.chess.pieces import Color, Piece
from src.chess.square import Square
from src.core.exceptions import InvalidFENError

logger = logging.getLogger(__name__)

INITIAL_FEN_BOARD = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 0"

_RANK = r"[pnbrqkPNBRQK1-8]+"
FEN_PATTERN = re.compile(
    rf"(?P<position>{_RANK}(?:/{_RANK}){{{BOARD_SIZE - 1}}})"
    r" (?P<active_color>[wb])"
    r" (?P<castling>-|[KQkq]{1,4})"
    r" (?P<en_passant>-|[a-h][1-8])"
    r" (?P<half_moves>[0-9]+)"
    r" (?P<full_moves>[0-9]+)"
)
RANK_SEPARATOR = "/"


class Board(Protocol):
    """The parts of the board FEN reads and writes"""

    active_color: Color
    half_moves: int
    full_moves: int
    passant_square: Optional[Square]

    def piece(self, row: int, col: int) -> Optional[Piece]: ...
    def set_piece(self, row: int, col: int, piece: Optional[Piece]) -> "Board": ...
    def square_at(self, algebraic: str) -> Square: ...
    def castling_rights(self, check_empty_squares: bool = True) -> CastlingRights: ...


def is_valid_fen(fen: str) -> bool:
    """Check if given string follows proper FEN notation (including ranks of exactly 8 squares)."""
    match = FEN_PATTERN.fullmatch(fen)
    if match is None:
        return False
    return all(
        _rank_width(rank) == BOARD_SIZE
        for rank in match.group("position").split(RANK_SEPARATOR)
    )


def _rank_width(rank_fen: str) -> int:
    return sum(int(char) if char.isdigit() else 1 for char in rank_fen)


def decode(fen: str, board: Board) -> Board:
    """
    Fill an (empty) board from the FEN string.

    The position is read character by character: a file cursor moves along the rank and a slash moves on to the next
    rank (one row down in the grid).
    """
    match = FEN_PATTERN.fullmatch(fen)
    if match is None:
        raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}")

    row, col = 0, 0
    for character in match.group("position"):
        if character == RANK_SEPARATOR:
            if col != BOARD_SIZE:
                raise InvalidFENError(
                    f"Rank {BOARD_SIZE - row} does not describe {BOARD_SIZE} squares: {fen!r}"
                )
            row, col = row + 1, 0
            continue

        if character.isdigit():
            # A number denotes the amount of empty squares after each other
            col += int(character)
        else:
            if col < BOARD_SIZE:
                board.set_piece(row, col, Piece.from_fen(character))
            col += 1

        if col > BOARD_SIZE:
            raise InvalidFENError(
                f"Rank {BOARD_SIZE - row} describes more than {BOARD_SIZE} squares: {fen!r}"
            )

    if col != BOARD_SIZE:
        raise InvalidFENError(f"Rank 1 does not describe {BOARD_SIZE} squares: {fen!r}")

    board.active_color = Color.from_str(match.group("active_color"))
    logger.debug("Ignoring castling field %r", match.group("castling"))

    en_passant = match.group("en_passant")
    board.passant_square = None if en_passant == "-" else board.square_at(en_passant)

    board.half_moves = int(match.group("half_moves"))
    board.full_moves = int(match.group("full_moves"))
    return board


def encode(board: Board) -> str:
    """Ranks are separated by slashes in FEN string, followed by the space separated game metadata."""
    position = RANK_SEPARATOR.join(_row_to_fen(board, row) for row in range(BOARD_SIZE))
    castling = board.castling_rights(check_empty_squares=False).to_fen()
    en_passant = (
        board.passant_square.to_algebraic() if board.passant_square is not None else "-"
    )
    return f"{position} {board.active_color.to_fen()} {castling} {en_passant} {board.half_moves} {board.full_moves}"


def _row_to_fen(board: Board, row: int) -> str:
    """FEN string of a single rank"""
    fen_characters: list[str] = []
    empty_count = 0
    for col in range(BOARD_SIZE):
        piece = board.piece(row, col)
        if piece is None:
            empty_count += 1
            continue

        if empty_count > 0:
            fen_characters.append(str(empty_count))
            empty_count = 0
        fen_characters.append(piece.to_fen())

    # if the entire rank is empty, then we still place this number in the string
    if empty_count > 0:
        fen_characters.append(str(empty_count))
    return "".join(fen_characters)
