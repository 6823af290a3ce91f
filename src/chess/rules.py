"""
Legality rules: attacked squares, check detection, legal king moves and castling eligibility.

Candidate (intrinsic) moves come from src/chess/moves.py. Here they get filtered for the one thing those rules ignore:
the king may never end up on a square the opponent can move to.
"""

import logging
from typing import Optional, Protocol

from src.chess.castling import (
    CASTLING_COLUMNS,
    DEFAULT_KING_COL,
    CastlingRights,
    CastlingSide,
    home_row,
)
from src.chess.moves import Move, generate_king_moves, generate_moves
from src.chess.notation import Position
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square

logger = logging.getLogger(__name__)


class Board(Protocol):
    """Just the parts the legality rules need"""

    def piece(self, row: int, col: int) -> Optional[Piece]: ...
    def set_piece(self, row: int, col: int, piece: Optional[Piece]) -> "Board": ...
    def pieces(self, color: Color) -> list[Square]: ...
    def find_pieces(self, piece_type: PieceType, color: Color) -> list[Square]: ...
    def copy(self) -> "Board": ...


def attacked_squares(board: Board, color: Color) -> set[Position]:
    """
    Every square a piece of `color` could move to (pseudo-legal, so without checking for check).

    NOTE: squares occupied by `color`'s own pieces are never part of the set. Whether such a piece is protected only
    becomes visible once an opponent's piece stands there, which is exactly what simulate_move does.
    """
    squares: set[Position] = set()
    for square in board.pieces(color):
        squares.update(move.to_pos for move in generate_moves(board, square.position))
    return squares


def find_king(board: Board, color: Color) -> Optional[Position]:
    kings = board.find_pieces(PieceType.KING, color)
    if not kings:
        return None
    return kings[0].position


def is_king_in_check(board: Board, position: Position) -> bool:
    """True if there is a king on the square and the opponent attacks that square"""
    king = board.piece(*position)
    if king is None or king.piece_type != PieceType.KING:
        return False
    return position in attacked_squares(board, king.color.inverse())


def simulate_move(board: Board, move: Move) -> Board:
    """
    Try the move on a copy of the board.

    The copy is thrown away by the caller, so the board in play never sees a half-made move.
    """
    simulated = board.copy()
    mover = simulated.piece(*move.from_pos)
    simulated.set_piece(*move.to_pos, mover)
    simulated.set_piece(*move.from_pos, None)
    return simulated


def leaves_king_in_check(board: Board, move: Move) -> bool:
    """Return True if the mover's own king is attacked after the move has been made"""
    mover = board.piece(*move.from_pos)
    assert mover is not None
    simulated = simulate_move(board, move)
    king_position = find_king(simulated, mover.color)
    if king_position is None:
        return False
    return king_position in attacked_squares(simulated, mover.color.inverse())


def legal_king_moves(board: Board, position: Position) -> list[Move]:
    """
    List of legal moves for the king standing on `position`
    ----

    ----
    **Combines the following**

    1. generate the intrinsic king moves
    2. drop destinations the opponent already attacks
    3. for the remaining ones: make the move on a copy of the board and drop it if the king is attacked on its new square
       (catches protected pieces the king would capture, and lines that open up once the king steps away)
    4. add castling moves (kingside first) when allowed

    An empty list while the king is in check means checkmate. An empty list without check: the king is stuck.
    """
    king = board.piece(*position)
    if king is None or king.piece_type != PieceType.KING:
        return []

    opponent_attacks = attacked_squares(board, king.color.inverse())
    candidate_moves = [
        move
        for move in generate_king_moves(board, position)
        if move.to_pos not in opponent_attacks
    ]

    legal_moves: list[Move] = []
    for move in candidate_moves:
        if leaves_king_in_check(board, move):
            logger.debug("King move %s would walk into check", move)
            continue
        legal_moves.append(move)

    row, _ = position
    for side in CastlingSide:
        if can_castle(board, king.color, side, check_empty_squares=True):
            king_to = (row, CASTLING_COLUMNS[side].king_to)
            legal_moves.append(Move(position, king_to, castling=True))

    return legal_moves


def legal_moves(board: Board, position: Position) -> list[Move]:
    """
    Kings get the full legality treatment. All other pieces: their intrinsic moves.

    NOTE: pinned pieces are not filtered here (use leaves_king_in_check for that).
    """
    piece = board.piece(*position)
    if piece is None:
        return []
    if piece.piece_type == PieceType.KING:
        return legal_king_moves(board, position)
    return generate_moves(board, position)


def has_any_legal_move(board: Board, color: Color) -> bool:
    """Is there any move at all for `color` that does not leave (or put) its king in check?"""
    for square in board.pieces(color):
        piece = square.piece
        assert piece is not None
        if piece.piece_type == PieceType.KING:
            if legal_king_moves(board, square.position):
                return True
            continue
        for move in generate_moves(board, square.position):
            if not leaves_king_in_check(board, move):
                return True
    return False


def can_castle(
    board: Board, color: Color, side: CastlingSide, check_empty_squares: bool
) -> bool:
    """
    Can `color` castle to the given side?
    ---

    **you are allowed to castle if**

    * Both the king and the rook are on their starting squares, and neither of them ever moved.
    * (only when check_empty_squares) There is no piece in between the two.
    * You are not currently in check (you cannot castle out of check).
    * None of the squares the king passes through (or lands on) is under attack.
    """
    row = home_row(color)
    columns = CASTLING_COLUMNS[side]
    king = board.piece(row, DEFAULT_KING_COL)
    rook = board.piece(row, columns.rook_from)

    if king is None or rook is None:
        return False
    if king.piece_type != PieceType.KING or rook.piece_type != PieceType.ROOK:
        return False
    if king.color != color or rook.color != color:
        return False
    if king.has_moved() or rook.has_moved():
        return False

    if check_empty_squares and any(
        board.piece(row, col) is not None for col in columns.between
    ):
        return False

    opponent_attacks = attacked_squares(board, color.inverse())
    if (row, DEFAULT_KING_COL) in opponent_attacks:
        return False
    if any((row, col) in opponent_attacks for col in columns.king_path):
        return False

    return True


def castling_rights(board: Board, check_empty_squares: bool) -> CastlingRights:
    """Summary of all four castling options"""
    return CastlingRights(
        white_kingside=can_castle(
            board, Color.WHITE, CastlingSide.KINGSIDE, check_empty_squares
        ),
        white_queenside=can_castle(
            board, Color.WHITE, CastlingSide.QUEENSIDE, check_empty_squares
        ),
        black_kingside=can_castle(
            board, Color.BLACK, CastlingSide.KINGSIDE, check_empty_squares
        ),
        black_queenside=can_castle(
            board, Color.BLACK, CastlingSide.QUEENSIDE, check_empty_squares
        ),
        check_empty_squares=check_empty_squares,
    )
