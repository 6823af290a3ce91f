"""
Move application: the only code that changes the position on a Board during a game.

Board state machine: one state ("waiting for the active color to move") and two transitions back into it,
a normal move and a castle. Both validate everything first and only then touch the board,
so a rejected move never leaves anything behind.
"""

import logging
from typing import Optional, Protocol

from src.chess.castling import (
    CASTLING_COLUMNS,
    DEFAULT_KING_COL,
    CastlingSide,
    home_row,
)
from src.chess.moves import Move
from src.chess.notation import Position, is_within_bounds, square_name
from src.chess.pieces import Color, Piece, PieceType
from src.chess.rules import (
    can_castle,
    find_king,
    has_any_legal_move,
    is_king_in_check,
    legal_king_moves,
)
from src.chess.square import Square
from src.core.exceptions import (
    CastlingForbiddenError,
    OutOfBoundsError,
    StartPieceMissingError,
    UselessMoveError,
    WrongPieceColorError,
)
from src.core.shared_types import Status

logger = logging.getLogger(__name__)


class Board(Protocol):
    """The state a move updates"""

    active_color: Color
    half_moves: int
    full_moves: int
    passant_square: Optional[Square]
    highlighted: dict[Position, Color]

    def piece(self, row: int, col: int) -> Optional[Piece]: ...
    def set_piece(self, row: int, col: int, piece: Optional[Piece]) -> "Board": ...


def move_piece(board: Board, move: Move) -> str:
    """
    Attempt to make a move
    -----

    1. validate: coordinates on the board and distinct, a piece to move, and it belongs to the side to move
    2. castling moves (as produced by legal_king_moves) are handed over to castle()
    3. relocate the piece (capturing whatever stood on the target square)
    4. update highlights, move counters and the side to move

    Returns a human readable description of what happened.
    NOTE: Geometry is not checked here. Use the move generators / rules to find out which moves are possible.
    """
    for row, col in (move.from_pos, move.to_pos):
        if not is_within_bounds(row, col):
            raise OutOfBoundsError(f"Move {move.from_pos}->{move.to_pos} leaves the board")
    if move.from_pos == move.to_pos:
        raise UselessMoveError(
            f"Move does not go anywhere: {square_name(move.from_pos)}"
        )

    mover = board.piece(*move.from_pos)
    if mover is None:
        raise StartPieceMissingError(
            f"There is no piece on {square_name(move.from_pos)} to move"
        )

    if mover.color != board.active_color:
        raise WrongPieceColorError(
            f"{mover.name} on {square_name(move.from_pos)} cannot move: it is {board.active_color.name.lower()}'s turn"
        )

    if move.castling:
        side = (
            CastlingSide.KINGSIDE
            if move.to_pos[1] > move.from_pos[1]
            else CastlingSide.QUEENSIDE
        )
        return castle(board, mover.color, side)

    captured = board.piece(*move.to_pos)
    board.set_piece(*move.to_pos, mover)
    board.set_piece(*move.from_pos, None)
    mover.moves += 1

    description = _describe(mover, move, captured)
    logger.debug(description)

    _highlight(board, mover.color, [move.from_pos, move.to_pos])
    if mover.piece_type == PieceType.PAWN or captured is not None:
        board.half_moves = 0
    else:
        board.half_moves += 1
    _end_turn(board, mover.color)
    return description


def castle(board: Board, color: Color, side: CastlingSide) -> str:
    """
    Move both the King and the Rook
    ---

    Eligibility is checked again right before committing, with the squares in between required to be empty.
    """
    if color != board.active_color:
        raise WrongPieceColorError(
            f"{color.name.capitalize()} cannot castle: it is {board.active_color.name.lower()}'s turn"
        )
    if not can_castle(board, color, side, check_empty_squares=True):
        raise CastlingForbiddenError(
            f"{color.name.capitalize()} is not allowed to castle {side.value}"
        )

    row = home_row(color)
    columns = CASTLING_COLUMNS[side]
    king = board.piece(row, DEFAULT_KING_COL)
    rook = board.piece(row, columns.rook_from)
    assert king is not None and rook is not None

    board.set_piece(row, columns.king_to, king)
    board.set_piece(row, DEFAULT_KING_COL, None)
    board.set_piece(row, columns.rook_to, rook)
    board.set_piece(row, columns.rook_from, None)
    king.moves += 1
    rook.moves += 1

    description = f"{color.name.capitalize()} castles {side.value}"
    logger.debug(description)

    _highlight(
        board,
        color,
        [
            (row, DEFAULT_KING_COL),
            (row, columns.king_to),
            (row, columns.rook_from),
            (row, columns.rook_to),
        ],
    )
    board.half_moves += 1
    _end_turn(board, color)
    return description


def status(board: Board, color: Optional[Color] = None) -> Status:
    """
    Where does the side to move (or `color`) stand?

    * CHECKMATE: in check, no legal king move, and no other move gets the king out of check
    * STALEMATE: not in check, but nothing can move without exposing the king
    * CHECK / IN_PROGRESS otherwise
    """
    color = color or board.active_color
    king_position = find_king(board, color)
    if king_position is None:
        return Status.IN_PROGRESS

    in_check = is_king_in_check(board, king_position)
    if legal_king_moves(board, king_position):
        return Status.CHECK if in_check else Status.IN_PROGRESS

    if not has_any_legal_move(board, color):
        return Status.CHECKMATE if in_check else Status.STALEMATE
    return Status.CHECK if in_check else Status.IN_PROGRESS


# -- PRIVATE HELPERS ---
def _describe(mover: Piece, move: Move, captured: Optional[Piece]) -> str:
    if captured is None:
        return f"{mover.name} {square_name(move.from_pos)} -> {square_name(move.to_pos)}"
    return f"{mover.name} {square_name(move.from_pos)} takes {captured.name} on {square_name(move.to_pos)}"


def _highlight(board: Board, color: Color, positions: list[Position]) -> None:
    """Highlights are cleared whenever White starts a new turn, so they show White's move and Black's reply."""
    if color == Color.WHITE:
        board.highlighted.clear()
    for position in positions:
        board.highlighted[position] = color


def _end_turn(board: Board, color: Color) -> None:
    """The full move counter goes up after Black moved. Then it is the other side's turn."""
    # NOTE: en passant is not implemented, so a move never leaves an en passant target behind
    board.passant_square = None
    if color == Color.BLACK:
        board.full_moves += 1
    board.active_color = color.inverse()
