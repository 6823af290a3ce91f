"""Unit tests for /src/chess/moves.py"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.moves import (
    MOVEMENT_RULES,
    Move,
    generate_bishop_moves,
    generate_king_moves,
    generate_knight_moves,
    generate_moves,
    generate_pawn_moves,
    generate_queen_moves,
    generate_rook_moves,
)
from src.chess.notation import Position, parse_square
from src.chess.pieces import Color, Piece, PieceType

INITIAL_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b KQkq - 0 1"
MoveGenerator = Callable[[Board, Position], list[Move]]


def destinations(moves: list[Move]) -> list[Position]:
    """Only the target squares, in generation order"""
    return [move.to_pos for move in moves]


@pytest.fixture
def initial_board() -> Board:
    return Board.from_fen(INITIAL_POSITION)


# --- FAIL GRACEFULLY ---
@pytest.mark.parametrize(
    "generator, piece_type",
    [
        (generate_pawn_moves, PieceType.PAWN),
        (generate_knight_moves, PieceType.KNIGHT),
        (generate_bishop_moves, PieceType.BISHOP),
        (generate_rook_moves, PieceType.ROOK),
        (generate_queen_moves, PieceType.QUEEN),
        (generate_king_moves, PieceType.KING),
    ],
)
def test_rule_ignores_other_squares(
    initial_board: Board, generator: MoveGenerator, piece_type: PieceType
) -> None:
    """Empty squares and other piece types produce no moves"""
    for row in range(8):
        for col in range(8):
            piece = initial_board.piece(row, col)
            if piece is not None and piece.piece_type == piece_type:
                continue
            assert generator(initial_board, (row, col)) == []


@pytest.mark.parametrize(
    "generator",
    [generate_bishop_moves, generate_rook_moves, generate_queen_moves, generate_king_moves],
)
def test_back_rank_is_stuck_initially(initial_board: Board, generator: MoveGenerator) -> None:
    """In the starting position only pawns and knights can move"""
    for row in range(8):
        for col in range(8):
            assert generator(initial_board, (row, col)) == []


def test_generated_moves_are_never_castles() -> None:
    board = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w - - 0 0")
    for square in board.pieces(Color.WHITE) + board.pieces(Color.BLACK):
        assert not any(move.castling for move in generate_moves(board, square.position))


# --- PAWN ---
def test_pawn_moves_initial(initial_board: Board) -> None:
    """On its first move, every pawn has two options: single step first, double step second"""
    for col in range(8):
        black = generate_pawn_moves(initial_board, (1, col))
        assert black == [Move((1, col), (2, col)), Move((1, col), (3, col))]

        white = generate_pawn_moves(initial_board, (6, col))
        assert white == [Move((6, col), (5, col)), Move((6, col), (4, col))]


def test_white_pawn_captures() -> None:
    """Blocked by the bishop in front, but it can take the rook or the king"""
    board = Board.from_fen("8/8/2rbk3/3P4/8/8/8/8 w - - 0 0")
    assert destinations(generate_pawn_moves(board, (3, 3))) == [(2, 2), (2, 4)]


def test_black_pawn_captures() -> None:
    board = Board.from_fen("8/8/8/8/3p4/2RBK3/8/8 w - - 0 0")
    assert destinations(generate_pawn_moves(board, (4, 3))) == [(5, 2), (5, 4)]


def test_pawn_does_not_capture_own_pieces() -> None:
    board = Board.from_fen("8/8/8/2PPP3/3P4/8/8/8 w - - 0 0")
    assert generate_pawn_moves(board, (4, 3)) == []


def test_pawn_double_step_needs_both_squares_empty() -> None:
    board = Board.from_fen("8/8/8/8/4n3/8/4P3/8 w - - 0 0")
    assert destinations(generate_pawn_moves(board, parse_square("e2"))) == [(5, 4)]

    board = Board.from_fen("8/8/8/8/8/4n3/4P3/8 w - - 0 0")
    assert generate_pawn_moves(board, parse_square("e2")) == []


def test_moved_pawn_has_no_double_step() -> None:
    """Even back on its starting row (which cannot happen in a real game)"""
    board = Board().set_piece(6, 0, Piece(Color.WHITE, PieceType.PAWN, moves=1))
    assert destinations(generate_pawn_moves(board, (6, 0))) == [(5, 0)]


def test_pawn_on_the_edge() -> None:
    """Captures towards a column off the board are skipped"""
    board = Board.from_fen("8/8/8/8/1p6/P7/8/8 w - - 0 0")
    assert destinations(generate_pawn_moves(board, parse_square("a3"))) == [
        (4, 0),
        (4, 1),
    ]


# --- KNIGHT ---
@pytest.mark.parametrize(
    "square, expected",
    [
        ("b8", [(2, 2), (2, 0)]),
        ("g8", [(2, 7), (2, 5)]),
        ("b1", [(5, 2), (5, 0)]),
        ("g1", [(5, 7), (5, 5)]),
    ],
)
def test_knight_moves_initial(
    initial_board: Board, square: str, expected: list[Position]
) -> None:
    assert destinations(generate_knight_moves(initial_board, parse_square(square))) == expected


def test_knight_moves_open_board() -> None:
    """The black knight in the corner only has 3 moves, the white one all 8"""
    board = Board.from_fen("1n6/8/8/8/8/5N2/8/8 b KQkq - 0 1")
    assert destinations(generate_knight_moves(board, (0, 1))) == [(1, 3), (2, 2), (2, 0)]
    assert destinations(generate_knight_moves(board, (5, 5))) == [
        (6, 7),
        (7, 6),
        (4, 7),
        (3, 6),
        (6, 3),
        (7, 4),
        (4, 3),
        (3, 4),
    ]


# --- BISHOP ---
@pytest.mark.parametrize(
    "square, expected",
    [
        ("c8", [(1, 1), (2, 0), (1, 3), (2, 4), (3, 5), (4, 6), (5, 7)]),
        ("f8", [(1, 4), (2, 3), (3, 2), (4, 1), (5, 0), (1, 6), (2, 7)]),
        ("c1", [(6, 1), (5, 0), (6, 3), (5, 4), (4, 5), (3, 6), (2, 7)]),
        ("f1", [(6, 4), (5, 3), (4, 2), (3, 1), (2, 0), (6, 6), (5, 7)]),
    ],
)
def test_bishop_moves_from_home(square: str, expected: list[Position]) -> None:
    board = Board.from_fen("2b2b2/8/8/8/8/8/8/2B2B2 w - - 0 0")
    assert destinations(generate_bishop_moves(board, parse_square(square))) == expected


def test_bishop_moves_crossing() -> None:
    board = Board.from_fen("8/3p4/8/5B2/3b4/8/2P5/8 w - - 0 0")
    assert destinations(generate_bishop_moves(board, (4, 3))) == [
        (3, 2),
        (2, 1),
        (1, 0),
        (3, 4),
        (2, 5),
        (1, 6),
        (0, 7),
        (5, 2),
        (6, 1),
        (7, 0),
        (5, 4),
        (6, 5),
        (7, 6),
    ]
    # f5: captures the d7 pawn, stops in front of its own pawn on c2
    assert destinations(generate_bishop_moves(board, (3, 5))) == [
        (2, 4),
        (1, 3),
        (2, 6),
        (1, 7),
        (4, 4),
        (5, 3),
        (4, 6),
        (5, 7),
    ]


# --- ROOK ---
def test_rook_moves() -> None:
    board = Board.from_fen("8/4P1r1/8/6p1/3R4/8/8/8 w - - 0 0")

    # 4 moves to empty squares and the capture on e7
    assert destinations(generate_rook_moves(board, (1, 6))) == [
        (0, 6),
        (2, 6),
        (1, 5),
        (1, 4),
        (1, 7),
    ]

    moves = destinations(generate_rook_moves(board, (4, 3)))
    assert len(moves) == 14
    assert moves[:7] == [(3, 3), (2, 3), (1, 3), (0, 3), (5, 3), (6, 3), (7, 3)]
    assert moves[7:] == [(4, 2), (4, 1), (4, 0), (4, 4), (4, 5), (4, 6), (4, 7)]


# --- QUEEN ---
def test_queen_moves_open_board() -> None:
    """Rook directions first, then the bishop directions"""
    board = Board.from_fen("3q4/8/8/8/8/8/8/3Q4 b - - 0 0")
    assert destinations(generate_queen_moves(board, parse_square("d8"))) == [
        (1, 3), (2, 3), (3, 3), (4, 3), (5, 3), (6, 3), (7, 3),
        (0, 2), (0, 1), (0, 0),
        (0, 4), (0, 5), (0, 6), (0, 7),
        (1, 2), (2, 1), (3, 0),
        (1, 4), (2, 5), (3, 6), (4, 7),
    ]  # fmt: skip
    assert destinations(generate_queen_moves(board, parse_square("d1"))) == [
        (6, 3), (5, 3), (4, 3), (3, 3), (2, 3), (1, 3), (0, 3),
        (7, 2), (7, 1), (7, 0),
        (7, 4), (7, 5), (7, 6), (7, 7),
        (6, 2), (5, 1), (4, 0),
        (6, 4), (5, 5), (4, 6), (3, 7),
    ]  # fmt: skip


def test_queen_moves_surrounded() -> None:
    """Every neighbour can be captured, nothing beyond"""
    board = Board.from_fen("8/8/2ppp3/2pQp3/2ppp3/8/8/8 w - - 0 0")
    assert destinations(generate_queen_moves(board, parse_square("d5"))) == [
        (2, 3),
        (4, 3),
        (3, 2),
        (3, 4),
        (2, 2),
        (2, 4),
        (4, 2),
        (4, 4),
    ]


# --- KING ---
def test_king_moves_from_home() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 0")
    assert destinations(generate_king_moves(board, (0, 4))) == [
        (0, 3),
        (1, 3),
        (1, 4),
        (0, 5),
        (1, 5),
    ]
    assert destinations(generate_king_moves(board, (7, 4))) == [
        (6, 3),
        (7, 3),
        (6, 4),
        (6, 5),
        (7, 5),
    ]


def test_king_intrinsic_moves_ignore_check() -> None:
    board = Board.from_fen("5r2/7q/6N1/8/1P1k4/5Q2/B7/3R2K1 w - - 0 0")
    assert len(generate_king_moves(board, parse_square("d4"))) == 8


# --- DISPATCH ---
def test_every_piece_type_has_a_rule() -> None:
    assert set(MOVEMENT_RULES) == set(PieceType)


def test_generate_moves_dispatches_on_occupant(initial_board: Board) -> None:
    assert generate_moves(initial_board, parse_square("b1")) == generate_knight_moves(
        initial_board, parse_square("b1")
    )
    assert generate_moves(initial_board, parse_square("e4")) == []
    assert generate_moves(initial_board, (8, 8)) == []
