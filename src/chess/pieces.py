"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class PieceType(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    def inverse(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    def to_fen(self) -> str:
        return "w" if self == Color.WHITE else "b"

    @classmethod
    def from_str(cls, text: str) -> Self:
        """
        Lenient: only the first character counts. So 'w', 'W', 'white' (and even 'wow') are all White.
        """
        first_character = text[:1].lower()
        if first_character == "w":
            return cls.WHITE
        if first_character == "b":
            return cls.BLACK
        raise ValueError(f"Cannot interpret {text!r} as a color")


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

PIECE_SYMBOLS: dict[tuple[Color, PieceType], str] = {
    (Color.WHITE, PieceType.PAWN): "♙",
    (Color.WHITE, PieceType.KNIGHT): "♘",
    (Color.WHITE, PieceType.BISHOP): "♗",
    (Color.WHITE, PieceType.ROOK): "♖",
    (Color.WHITE, PieceType.QUEEN): "♕",
    (Color.WHITE, PieceType.KING): "♔",
    (Color.BLACK, PieceType.PAWN): "♟",
    (Color.BLACK, PieceType.KNIGHT): "♞",
    (Color.BLACK, PieceType.BISHOP): "♝",
    (Color.BLACK, PieceType.ROOK): "♜",
    (Color.BLACK, PieceType.QUEEN): "♛",
    (Color.BLACK, PieceType.KING): "♚",
}


@dataclass(eq=False)
class Piece:
    """
    A piece on the board.

    `moves` counts how often this particular piece has been relocated (castling and the pawn's double step depend on it).
    It is NOT part of the identity: a white rook is a white rook, whether it moved or not.
    """

    color: Color
    piece_type: PieceType
    moves: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (self.color, self.piece_type) == (other.color, other.piece_type)

    def __hash__(self) -> int:
        return hash((self.color, self.piece_type))

    def __str__(self) -> str:
        return self.symbol

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        if character.lower() not in FEN_TO_PIECE:
            raise ValueError(f"Invalid piece character: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(color, piece_type)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.piece_type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.piece_type].lower()
        )

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[(self.color, self.piece_type)]

    @property
    def name(self) -> str:
        """ex) 'White Knight'"""
        return f"{self.color.name.capitalize()} {self.piece_type.name.capitalize()}"

    def has_moved(self) -> bool:
        return self.moves > 0
