"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the move sets for each piece type.

Every rule is a pure function (board, position) -> list[Move]. It returns an empty list when the square is empty or holds
a different piece type, so callers can simply run it over all squares.
The moves are 'intrinsic' (pseudo-legal): they obey the piece geometry, but do not care about leaving the own king in check.
That is the job of src/chess/rules.py

NOTE: The order in which moves are generated is fixed (direction by direction, as listed in the vectors below).
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.notation import (
    BOARD_SIZE,
    Position,
    is_within_bounds,
    parse_coordinate_pair,
    square_name,
)
from src.chess.pieces import Color, Piece, PieceType
from src.core.exceptions import UselessMoveError


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, row: int, col: int) -> Optional[Piece]: ...


# (delta row, delta col)
Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_pos: Position
    to_pos: Position
    castling: bool = False

    @classmethod
    def from_str(cls, text: str) -> Self:
        """
        Coordinate notation
        ---

        examples:
        * "e2e4": move the piece on e2 to e4
        * "a8b8": from (0, 0) to (0, 1)

        Castling is never the result of parsing. It only gets set by the legality layer.
        """
        from_pos, to_pos = parse_coordinate_pair(text)
        if from_pos == to_pos:
            raise UselessMoveError(f"Move does not go anywhere: {text!r}")
        return cls(from_pos, to_pos)

    def to_str(self) -> str:
        return f"{square_name(self.from_pos)}{square_name(self.to_pos)}"

    def __str__(self) -> str:
        return self.to_str()


# --- DIRECTIONS ---
KNIGHT_DELTAS: list[Vector] = [
    (1, 2),
    (2, 1),
    (-1, 2),
    (-2, 1),
    (1, -2),
    (2, -1),
    (-1, -2),
    (-2, -1),
]
DIAGONALS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
STRAIGHTS: list[Vector] = [(-1, 0), (1, 0), (0, -1), (0, 1)]
KING_DELTAS: list[Vector] = [
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
]

# White moves UP the board (towards row 0), Black moves DOWN the board
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: BOARD_SIZE - 2, Color.BLACK: 1}


# --- MOVEMENT RULES ---
def raycasting_move(
    position: Position, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    mover = board.piece(*position)
    assert mover is not None

    moves: list[Move] = []
    for dr, dc in directions:
        row, col = position
        while True:
            row += dr
            col += dc
            if not is_within_bounds(row, col):
                break

            target = board.piece(row, col)
            if target is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if target.color != mover.color:
                    moves.append(Move(position, (row, col)))
                break

            moves.append(Move(position, (row, col)))
    return moves


def single_step_move(
    position: Position, board: Board, deltas: list[Vector]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    mover = board.piece(*position)
    assert mover is not None

    moves: list[Move] = []
    for dr, dc in deltas:
        row = position[0] + dr
        col = position[1] + dc
        if not is_within_bounds(row, col):
            continue

        target = board.piece(row, col)
        if target is None or target.color != mover.color:
            moves.append(Move(position, (row, col)))

    return moves


def _holds(board: Board, position: Position, piece_type: PieceType) -> bool:
    """Empty square or another piece type: the rule does not apply (and yields no moves)"""
    if not is_within_bounds(*position):
        return False
    piece = board.piece(*position)
    return piece is not None and piece.piece_type == piece_type


def generate_pawn_moves(board: Board, position: Position) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square
    - can move by two in its very first move, from its starting row, if both squares are empty
    - takes diagonally (only when there is an opponent's piece to take)

    NOTE: En passant and promotion are not implemented.
    """
    if not _holds(board, position, PieceType.PAWN):
        return []

    pawn = board.piece(*position)
    assert pawn is not None
    row, col = position
    direction = PAWN_DIRECTION[pawn.color]

    moves: list[Move] = []
    one_ahead = (row + direction, col)
    forward_is_free = is_within_bounds(*one_ahead) and board.piece(*one_ahead) is None
    if forward_is_free:
        moves.append(Move(position, one_ahead))

    two_ahead = (row + 2 * direction, col)
    if (
        forward_is_free
        and pawn.moves == 0
        and row == PAWN_START_ROW[pawn.color]
        and board.piece(*two_ahead) is None
    ):
        moves.append(Move(position, two_ahead))

    # capture towards the a-file first, then towards the h-file
    for dc in (-1, 1):
        target_pos = (row + direction, col + dc)
        if not is_within_bounds(*target_pos):
            continue
        target = board.piece(*target_pos)
        if target is not None and target.color != pawn.color:
            moves.append(Move(position, target_pos))

    return moves


def generate_knight_moves(board: Board, position: Position) -> list[Move]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    if not _holds(board, position, PieceType.KNIGHT):
        return []
    return single_step_move(position, board, KNIGHT_DELTAS)


def generate_bishop_moves(board: Board, position: Position) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    if not _holds(board, position, PieceType.BISHOP):
        return []
    return raycasting_move(position, board, DIAGONALS)


def generate_rook_moves(board: Board, position: Position) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    if not _holds(board, position, PieceType.ROOK):
        return []
    return raycasting_move(position, board, STRAIGHTS)


def generate_queen_moves(board: Board, position: Position) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    if not _holds(board, position, PieceType.QUEEN):
        return []
    return raycasting_move(position, board, STRAIGHTS + DIAGONALS)


def generate_king_moves(board: Board, position: Position) -> list[Move]:
    """
    The king can move by a single square at the time.

    No check for walking into check here, and castling is added by the legality layer.
    """
    if not _holds(board, position, PieceType.KING):
        return []
    return single_step_move(position, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MoveGeneratorFn = Callable[[Board, Position], list[Move]]
MOVEMENT_RULES: dict[PieceType, MoveGeneratorFn] = {
    PieceType.PAWN: generate_pawn_moves,
    PieceType.KNIGHT: generate_knight_moves,
    PieceType.BISHOP: generate_bishop_moves,
    PieceType.ROOK: generate_rook_moves,
    PieceType.QUEEN: generate_queen_moves,
    PieceType.KING: generate_king_moves,
}


def generate_moves(board: Board, position: Position) -> list[Move]:
    """Intrinsic moves of whatever piece stands on the square (empty square -> no moves)"""
    if not is_within_bounds(*position):
        return []
    piece = board.piece(*position)
    if piece is None:
        return []
    movement_rule = MOVEMENT_RULES[piece.piece_type]
    return movement_rule(board, position)
