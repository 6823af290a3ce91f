"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.fen import is_valid_fen
from src.chess.notation import parse_coordinate_pair, parse_square
from src.chess.pgn import CASTLING_PATTERN, SAN_PATTERN
from src.core.exceptions import InvalidRequestError, ParseError
from src.core.shared_types import CastlingSide, Color, Status


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        parts = value.split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        if not is_valid_fen(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a FEN string.")
        return value


class MoveRequest(BaseModel):
    """Coordinate notation, ex) 'e2e4'"""

    game_id: UUID
    move: str

    @field_validator("move")
    @classmethod
    def validate_move(cls, value: str) -> str:
        try:
            from_pos, to_pos = parse_coordinate_pair(value)
        except ParseError as e:
            raise InvalidRequestError(
                f"Cannot interpret move: {value!r} as a coordinate pair ({e})"
            ) from e
        if from_pos == to_pos:
            raise InvalidRequestError(f"Move {value!r} does not go anywhere.")
        return value


class SanMoveRequest(BaseModel):
    """Standard algebraic notation, ex) 'Nf3', 'exd5', 'O-O'"""

    game_id: UUID
    san: str

    @field_validator("san")
    @classmethod
    def validate_san(cls, value: str) -> str:
        value = value.strip()
        if not (SAN_PATTERN.fullmatch(value) or CASTLING_PATTERN.fullmatch(value)):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a SAN move.")
        return value


class CastleRequest(BaseModel):
    game_id: UUID
    side: CastlingSide


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        try:
            parse_square(value)
        except ParseError as e:
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            ) from e
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    move_history: list[str]
    status: Status
    active_color: Color
    castling: str
    # algebraic names of the squares touched by the latest move(s)
    highlighted: list[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    color: Optional[Color]
    legal_moves: list[str]
