"""
PGN / SAN adapter
----

Turns PGN movetext into SAN tokens, SAN tokens into move descriptors, and move descriptors into concrete Moves
on a given board.

SAN (Standard Algebraic Notation), examples:
* "e4": a pawn moves to e4
* "Nbd7": the knight on the b-file moves to d7
* "R1xe5+": the rook on the 1st rank takes on e5, giving check
* "O-O" / "O-O-O": castling kingside / queenside

NOTE: promotions ("e8=Q") are not supported.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import CastlingSide
from src.chess.fen import INITIAL_FEN_BOARD
from src.chess.moves import Move, generate_moves
from src.chess.notation import file_to_col, rank_to_row
from src.chess.pieces import Color, PieceType
from src.chess.rules import leaves_king_in_check
from src.core.exceptions import (
    InvalidMoveNotationError,
    StartPieceMissingError,
    TooManyPossibleMovesError,
)

logger = logging.getLogger(__name__)

SAN_PATTERN = re.compile(
    r"(?P<piece>[KQRBN])?"
    r"(?P<from_file>[a-h])?"
    r"(?P<from_rank>[1-8])?"
    r"x?"
    r"(?P<to_file>[a-h])"
    r"(?P<to_rank>[1-8])"
    r"(?P<promotion>=?[QRBN])?"
    r"[+#]?[!?]*"
)
CASTLING_PATTERN = re.compile(r"(?P<castling>[O0]-[O0](?P<long>-[O0])?)[+#]?[!?]*")

SAN_PIECES: dict[str, PieceType] = {
    "K": PieceType.KING,
    "Q": PieceType.QUEEN,
    "R": PieceType.ROOK,
    "B": PieceType.BISHOP,
    "N": PieceType.KNIGHT,
}

HEADER_PATTERN = re.compile(r'^\[(\w+)\s+"((?:[^"\\]|\\.)*)"\]\s*$')
MOVE_NUMBER_PATTERN = re.compile(r"^\d+\.(?:\.\.)?$")
RESULT_TOKENS = {"1-0", "0-1", "1/2-1/2", "*"}


@dataclass(frozen=True)
class PieceMove:
    """What a SAN token says: which kind of piece goes where (and, when ambiguous, from which file or rank)"""

    piece_type: PieceType
    color: Color
    to_row: int
    to_col: int
    row_disambiguator: Optional[int] = None
    col_disambiguator: Optional[int] = None
    san: str = ""

    def matches_origin(self, row: int, col: int) -> bool:
        if self.row_disambiguator is not None and row != self.row_disambiguator:
            return False
        if self.col_disambiguator is not None and col != self.col_disambiguator:
            return False
        return True


def parse_san(token: str, color: Color) -> PieceMove | CastlingSide:
    """
    Parse a single SAN token for the side `color`.

    Check and mate markers, the capture 'x' and annotation glyphs (!, ?) are accepted and ignored.
    Castling tokens come back as the CastlingSide.
    """
    castling = CASTLING_PATTERN.fullmatch(token)
    if castling is not None:
        return CastlingSide.QUEENSIDE if castling.group("long") else CastlingSide.KINGSIDE

    match = SAN_PATTERN.fullmatch(token)
    if match is None:
        raise InvalidMoveNotationError(f"Cannot interpret {token!r} as a SAN move")
    if match.group("promotion") is not None:
        raise InvalidMoveNotationError(f"Promotion is not supported: {token!r}")

    from_file = match.group("from_file")
    from_rank = match.group("from_rank")
    return PieceMove(
        piece_type=SAN_PIECES.get(match.group("piece") or "", PieceType.PAWN),
        color=color,
        to_row=rank_to_row(int(match.group("to_rank"))),
        to_col=file_to_col(match.group("to_file")),
        row_disambiguator=rank_to_row(int(from_rank)) if from_rank else None,
        col_disambiguator=file_to_col(from_file) if from_file else None,
        san=token,
    )


def resolve_move(board: Board, piece_move: PieceMove) -> Move:
    """
    Find the one piece on the board that can make the described move
    ---

    1. all pieces of the given type and color
    2. narrowed down by the disambiguators (if any)
    3. keep the ones that have the target square among their intrinsic moves

    When that still leaves more than one, pieces that may not move because of a pin are dropped
    (SAN does not disambiguate against pinned pieces).
    """
    target = (piece_move.to_row, piece_move.to_col)
    candidates = [
        move
        for square in board.find_pieces(piece_move.piece_type, piece_move.color)
        if piece_move.matches_origin(square.row, square.col)
        for move in generate_moves(board, square.position)
        if move.to_pos == target
    ]

    if len(candidates) > 1:
        candidates = [
            move for move in candidates if not leaves_king_in_check(board, move)
        ]

    if not candidates:
        raise StartPieceMissingError(
            f"No {piece_move.color.name.lower()} {piece_move.piece_type.name.lower()} can make the move {piece_move.san!r}"
        )
    if len(candidates) > 1:
        raise TooManyPossibleMovesError(
            f"Move {piece_move.san!r} is ambiguous: {', '.join(str(m) for m in candidates)}"
        )
    return candidates[0]


def play_san(board: Board, token: str) -> str:
    """Play a single SAN move for the side to move. Returns the description of what happened."""
    parsed = parse_san(token, board.active_color)
    if isinstance(parsed, CastlingSide):
        return board.castle(board.active_color, parsed)
    return board.move_piece(resolve_move(board, parsed))


@dataclass
class PGNGame:
    """A single game: tag pairs, the SAN tokens of the mainline, and the result token"""

    metadata: dict[str, str] = field(default_factory=dict)
    moves: list[str] = field(default_factory=list)
    result: str = "*"

    @classmethod
    def from_str(cls, text: str) -> Self:
        return parse_pgn(text)

    def play(self, board: Optional[Board] = None) -> list[str]:
        """
        Replay every ply, starting from the initial position (or from the supplied board).

        The first ply that cannot be played raises.
        """
        board = board if board is not None else Board.from_fen(INITIAL_FEN_BOARD)
        for key, value in self.metadata.items():
            logger.debug("%-20s | %s", key, value)

        descriptions: list[str] = []
        for ply, token in enumerate(self.moves, start=1):
            description = play_san(board, token)
            logger.debug("%3d %s: %s\n%s", ply, token, description, board.render())
            descriptions.append(description)
        return descriptions


def parse_pgn(text: str) -> PGNGame:
    """Parse the tag pairs and the mainline of a single PGN game"""
    metadata: dict[str, str] = {}
    movetext_lines: list[str] = []
    in_headers = True

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            if in_headers and metadata:
                in_headers = False
            continue

        if in_headers and line.startswith("["):
            match = HEADER_PATTERN.match(line)
            if match is None:
                raise InvalidMoveNotationError(f"Invalid PGN header line: {line!r}")
            key, raw_value = match.groups()
            metadata[key] = raw_value.replace('\\"', '"').replace("\\\\", "\\")
            continue

        in_headers = False
        # escape mechanism: the whole line is ignored
        if line.startswith("%"):
            continue
        movetext_lines.append(line)

    moves, result = _parse_movetext("\n".join(movetext_lines))
    if result == "*" and metadata.get("Result") in RESULT_TOKENS:
        result = metadata["Result"]
    return PGNGame(metadata=metadata, moves=moves, result=result)


def _parse_movetext(movetext: str) -> tuple[list[str], str]:
    """Mainline SAN tokens and the result. Comments, variations, move numbers and NAGs are skipped."""
    moves: list[str] = []
    result = "*"
    variation_depth = 0
    idx = 0
    total = len(movetext)

    while idx < total:
        char = movetext[idx]

        if char.isspace():
            idx += 1
            continue

        if char == "{":
            end = movetext.find("}", idx + 1)
            idx = total if end < 0 else end + 1
            continue

        if char == ";":
            end = movetext.find("\n", idx + 1)
            idx = total if end < 0 else end
            continue

        if char == "(":
            variation_depth += 1
            idx += 1
            continue

        if char == ")":
            variation_depth = max(0, variation_depth - 1)
            idx += 1
            continue

        token_end = idx
        while (
            token_end < total
            and not movetext[token_end].isspace()
            and movetext[token_end] not in "{};()"
        ):
            token_end += 1
        token = movetext[idx:token_end]
        idx = token_end

        if variation_depth > 0:
            continue
        if token in RESULT_TOKENS:
            result = token
            continue
        if MOVE_NUMBER_PATTERN.match(token):
            continue
        if token.startswith("$") and token[1:].isdigit():
            continue

        # "12.e4" or "12...Nf6": move number glued to the move
        token = re.sub(r"^\d+\.+", "", token)
        if token:
            moves.append(token)

    return moves, result
