from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from src.api.models import (
    CastleRequest,
    CreateGameRequest,
    LegalMovesRequest,
    MoveRequest,
    SanMoveRequest,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import CastlingSide


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_valid_fen() -> None:
    """Test that CreateGameRequest accepts a valid FEN string."""

    valid_fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
    request = CreateGameRequest(starting_fen=valid_fen)
    assert request.starting_fen == valid_fen


def test_fen_is_stripped() -> None:
    request = CreateGameRequest(starting_fen="  4k3/8/8/8/8/8/8/4K3 b - - 3 41 ")
    assert request.starting_fen == "4k3/8/8/8/8/8/8/4K3 b - - 3 41"


def test_starting_fen_is_optional() -> None:
    """Should be able to not supply a starting FEN, and validator just returns None."""
    assert CreateGameRequest().starting_fen is None
    assert CreateGameRequest(starting_fen=None).starting_fen is None


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # only 5 space-separated values
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 extra",  # too many space-separated values
        " ".join(["mock"] * 6),  # right shape, nonsense content
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNRR w KQkq - 0 1",  # 9 squares on the last rank
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",  # no such color
    ],
)
def test_invalid_fen(invalid_fen: str) -> None:
    """Structurally invalid FEN strings are rejected before reaching the service."""

    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(starting_fen=invalid_fen)


# -- Validation - MoveRequest --
@pytest.mark.parametrize("move", ["e2e4", "a8h1", "g1f3"])
def test_valid_move(mock_id: UUID, move: str) -> None:
    """Test that MoveRequest accepts coordinate pairs."""
    request = MoveRequest(game_id=mock_id, move=move)
    assert request.move == move


@pytest.mark.parametrize(
    "move",
    [
        "nonsense",  # not a coordinate pair
        "e2",  # only one square
        "e2e9",  # rank out of range
        "i2e4",  # file out of range
        "e2e2",  # does not go anywhere
    ],
)
def test_invalid_move(mock_id: UUID, move: str) -> None:
    """Test that an exception is raised when the move cannot be a coordinate pair."""
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, move=move)


def test_game_id_must_be_uuid() -> None:
    with pytest.raises(ValidationError):
        _ = MoveRequest(game_id="not-a-uuid", move="e2e4")  # type: ignore[arg-type]


# -- Validation - SanMoveRequest --
@pytest.mark.parametrize("san", ["e4", "Nf3", "exd5", "Nbd7", "R1e5+", "O-O", "O-O-O#", "Qxf7#"])
def test_valid_san(mock_id: UUID, san: str) -> None:
    request = SanMoveRequest(game_id=mock_id, san=san)
    assert request.san == san


@pytest.mark.parametrize("san", ["", "e9", "Zf3", "castle", "O-O-O-O"])
def test_invalid_san(mock_id: UUID, san: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = SanMoveRequest(game_id=mock_id, san=san)


# -- Validation - CastleRequest --
def test_castle_request(mock_id: UUID) -> None:
    request = CastleRequest(game_id=mock_id, side="queenside")  # type: ignore[arg-type]
    assert request.side == CastlingSide.QUEENSIDE


def test_castle_request_unknown_side(mock_id: UUID) -> None:
    with pytest.raises(ValidationError):
        _ = CastleRequest(game_id=mock_id, side="middle")  # type: ignore[arg-type]


# -- Validation - LegalMovesRequest --
def test_valid_square(mock_id: UUID) -> None:
    request = LegalMovesRequest(game_id=mock_id, square="e2")
    assert request.square == "e2"


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than two characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "j1",  # file out of range
        "a0",  # rank out of range
    ],
)
def test_invalid_square(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        _ = LegalMovesRequest(game_id=mock_id, square=square)
