"""
Custom exceptions shared across layers.

All of them are recoverable: a caller replaying a game treats any of these as "this ply failed".
"""


class ChessError(Exception):
    """Top level exception for anything going wrong inside the chess domain."""


# --- PARSE ERRORS ---
class ParseError(ChessError):
    """Malformed coordinate / move / FEN / notation text."""


class StringTooShortError(ParseError):
    pass


class InvalidPositionFileError(ParseError):
    pass


class InvalidPositionRankError(ParseError):
    pass


class InvalidFENError(ParseError):
    pass


class UselessMoveError(ParseError):
    """A move that starts and ends on the same square."""


class InvalidMoveNotationError(ParseError):
    """A SAN token the notation adapter cannot interpret."""


# --- MOVE-LEGALITY ERRORS ---
class ChessMoveError(ChessError):
    """The text was fine, but the move cannot be made on this board."""


class OutOfBoundsError(ChessMoveError):
    pass


class StartPieceMissingError(ChessMoveError):
    pass


class WrongPieceColorError(ChessMoveError):
    pass


class CastlingForbiddenError(ChessMoveError):
    pass


class TooManyPossibleMovesError(ChessMoveError):
    pass


class IllegalMoveError(ChessMoveError):
    """The piece cannot reach the requested square."""


# --- GAME / SERVICE ERRORS ---
class GameError(ChessError):
    pass


class GameStateError(GameError):
    pass


class RepositoryError(Exception):
    pass


class InvalidRequestError(ChessError):
    """Raised inside pydantic validators. Not a ValueError, so pydantic does not wrap it in a ValidationError."""
