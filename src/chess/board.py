"""The Board owns the 8x8 grid of squares plus the game metadata that goes into a FEN string."""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess import fen, game, rules
from src.chess.castling import CastlingRights, CastlingSide
from src.chess.moves import Move, generate_moves
from src.chess.notation import BOARD_SIZE, FILES, Position, is_within_bounds, parse_square
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square
from src.core.exceptions import OutOfBoundsError
from src.core.shared_types import Status


def empty_grid() -> list[list[Square]]:
    """Row-major, row 0 is the 8th rank. Every square knows its own coordinates."""
    return [[Square(row, col) for col in range(BOARD_SIZE)] for row in range(BOARD_SIZE)]


@dataclass(eq=False)
class Board:
    squares: list[list[Square]] = field(default_factory=empty_grid)
    active_color: Color = Color.WHITE
    # plies since the last capture or pawn move (fifty-move rule)
    half_moves: int = 0
    # goes up after every move of Black
    full_moves: int = 0
    passant_square: Optional[Square] = None
    # display only: the squares touched by the latest moves, and the color that moved there
    highlighted: dict[Position, Color] = field(default_factory=dict)

    # --- FEN ---
    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a complete FEN string (raises InvalidFENError)"""
        board = cls()
        fen.decode(fen_str, board)
        return board

    def to_fen(self) -> str:
        return fen.encode(self)

    # --- SQUARES & PIECES ---
    def square(self, row: int, col: int) -> Square:
        if not is_within_bounds(row, col):
            raise OutOfBoundsError(f"({row}, {col}) is not a square on the board")
        return self.squares[row][col]

    def square_at(self, algebraic: str) -> Square:
        """ex) board.square_at('e4')"""
        return self.square(*parse_square(algebraic))

    def piece(self, row: int, col: int) -> Optional[Piece]:
        return self.square(row, col).piece

    def piece_at(self, algebraic: str) -> Optional[Piece]:
        return self.square_at(algebraic).piece

    def set_piece(self, row: int, col: int, piece: Optional[Piece]) -> Self:
        """Place a piece (or None to empty the square). Returns the board, so calls can be chained."""
        self.square(row, col).piece = piece
        return self

    def set_piece_at(self, algebraic: str, piece: Optional[Piece]) -> Self:
        return self.set_piece(*parse_square(algebraic), piece)

    def remove_piece(self, row: int, col: int) -> Optional[Piece]:
        piece = self.piece(row, col)
        self.set_piece(row, col, None)
        return piece

    def all_squares(self) -> list[Square]:
        return [square for row in self.squares for square in row]

    def pieces(self, color: Color) -> list[Square]:
        """Occupied squares of one color, scanned top row first"""
        return [
            square
            for square in self.all_squares()
            if square.piece is not None and square.piece.color == color
        ]

    def find_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square in self.pieces(color)
            if square.piece is not None and square.piece.piece_type == piece_type
        ]

    def copy(self) -> Self:
        return deepcopy(self)

    # --- MOVES & RULES ---
    def generate_moves(self, position: Position) -> list[Move]:
        """Intrinsic moves of the piece on `position`"""
        return generate_moves(self, position)

    def legal_moves(self, position: Position) -> list[Move]:
        return rules.legal_moves(self, position)

    def attacked_squares(self, color: Color) -> set[Position]:
        return rules.attacked_squares(self, color)

    def is_king_in_check(self, position: Position) -> bool:
        return rules.is_king_in_check(self, position)

    def legal_king_moves(self, position: Position) -> list[Move]:
        return rules.legal_king_moves(self, position)

    def can_castle(
        self, color: Color, side: CastlingSide, check_empty_squares: bool = True
    ) -> bool:
        return rules.can_castle(self, color, side, check_empty_squares)

    def castling_rights(self, check_empty_squares: bool = True) -> CastlingRights:
        return rules.castling_rights(self, check_empty_squares)

    def castling_as_string(self) -> str:
        """Castling field of the FEN string. Pieces standing in between do not revoke the right."""
        return self.castling_rights(check_empty_squares=False).to_fen()

    def move_piece(self, move: Move) -> str:
        return game.move_piece(self, move)

    def castle(self, color: Color, side: CastlingSide) -> str:
        return game.castle(self, color, side)

    def status(self, color: Optional[Color] = None) -> Status:
        return game.status(self, color)

    # --- DISPLAY ---
    def render(self) -> str:
        """
        Board art, White at the bottom. Squares touched by the latest move(s) are put between brackets.

        ex) after 1. e4
          ╭────────────────────────╮
        8 │ ♜  ♞  ♝  ♛  ♚  ♝  ♞  ♜ │
        ...
        4 │            [♙]         │
        ...
        2 │ ♙  ♙  ♙  ♙ [ ] ♙  ♙  ♙ │
        """
        width = 3 * BOARD_SIZE
        lines = [f"  ╭{'─' * width}╮"]
        for row in range(BOARD_SIZE):
            cells: list[str] = []
            for col in range(BOARD_SIZE):
                piece = self.piece(row, col)
                symbol = piece.symbol if piece is not None else " "
                if (row, col) in self.highlighted:
                    cells.append(f"[{symbol}]")
                else:
                    cells.append(f" {symbol} ")
            lines.append(f"{BOARD_SIZE - row} │{''.join(cells)}│")
        lines.append(f"  ╰{'─' * width}╯")
        lines.append("   " + "".join(f" {file} " for file in FILES))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
