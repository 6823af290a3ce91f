"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CastleRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    SanMoveRequest,
)
from src.chess.board import Board
from src.chess.castling import CASTLING_SAN, DEFAULT_KING_COL, CastlingSide
from src.chess.fen import INITIAL_FEN_BOARD
from src.chess.moves import Move
from src.chess.notation import parse_square, square_name
from src.chess.pgn import parse_san, resolve_move
from src.chess.rules import leaves_king_in_check
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    RepositoryError,
    StartPieceMissingError,
    WrongPieceColorError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Status
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)

SAN_TO_CASTLING_SIDE: dict[str, CastlingSide] = {
    san: side for side, san in CASTLING_SAN.items()
}
GAME_OVER = (Status.CHECKMATE, Status.STALEMATE)


class ChessService:
    """
    Orchestration of layers for chess game.

    Only the starting FEN and the list of moves are the source of truth: the board gets rebuilt by replaying the moves.
    That way the move counter of every piece (and so castling eligibility) survives persistence, which a FEN string
    on its own cannot guarantee.
    """

    def __init__(
        self, repository: GameRepository, starting_fen: str = INITIAL_FEN_BOARD
    ) -> None:
        self.repo = repository
        self.default_fen = starting_fen

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Set up a board (standard starting position unless a FEN was supplied) and persist it."""
        starting_fen = request.starting_fen or self.default_fen

        # raises InvalidFENError for anything the validator let through
        board = Board.from_fen(starting_fen)
        new_game = GameModel(
            starting_fen=starting_fen,
            current_fen=board.to_fen(),
            status=board.status(),
        )

        stored_game, game_id = self.repo.create_game(new_game)
        logger.info("Created game %s from %r", game_id, starting_fen)
        return self._create_game_response(game_id, stored_game, board)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        board = self._replay(game_model)
        return self._create_game_response(request.game_id, game_model, board)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves of the piece on the requested square (empty square: no moves)."""
        game_model = self._fetch_game(request.game_id)
        board = self._replay(game_model)
        self._ensure_not_over(board)

        position = parse_square(request.square)
        piece = board.piece(*position)
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            color=Color[piece.color.name] if piece is not None else None,
            legal_moves=[move.to_str() for move in self._legal_moves(board, position)],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt (coordinate notation)."""
        game_model = self._fetch_game(request.game_id)
        board = self._replay(game_model)
        self._ensure_not_over(board)

        requested = Move.from_str(request.move)
        move = self._validate(board, requested)

        board.move_piece(move)
        recorded = self._record(move)
        return self._store(request.game_id, game_model, board, recorded)

    def make_san_move(self, request: SanMoveRequest) -> GameResponse:
        """Make a move attempt (standard algebraic notation)."""
        game_model = self._fetch_game(request.game_id)
        board = self._replay(game_model)
        self._ensure_not_over(board)

        parsed = parse_san(request.san, board.active_color)
        if isinstance(parsed, CastlingSide):
            board.castle(board.active_color, parsed)
            return self._store(request.game_id, game_model, board, CASTLING_SAN[parsed])

        move = resolve_move(board, parsed)
        if leaves_king_in_check(board, move):
            raise IllegalMoveError(f"{request.san!r} leaves the own king in check")

        board.move_piece(move)
        return self._store(request.game_id, game_model, board, move.to_str())

    def castle(self, request: CastleRequest) -> GameResponse:
        """The side to move castles."""
        game_model = self._fetch_game(request.game_id)
        board = self._replay(game_model)
        self._ensure_not_over(board)

        side = CastlingSide(request.side.value)
        board.castle(board.active_color, side)
        return self._store(request.game_id, game_model, board, CASTLING_SAN[side])

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        deleted = self.repo.delete_game(request.game_id)
        if deleted is None:
            raise RepositoryError(f"Game with {request.game_id=} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _replay(self, model: GameModel) -> Board:
        """Rebuild the board: starting position + every recorded move"""
        board = Board.from_fen(model.starting_fen)
        for recorded in model.moves:
            if recorded in SAN_TO_CASTLING_SIDE:
                board.castle(board.active_color, SAN_TO_CASTLING_SIDE[recorded])
            else:
                board.move_piece(Move.from_str(recorded))
        return board

    def _legal_moves(self, board: Board, position: tuple[int, int]) -> list[Move]:
        """Board.legal_moves, with moves that expose the own king (pins) filtered out"""
        return [
            move
            for move in board.legal_moves(position)
            if move.castling or not leaves_king_in_check(board, move)
        ]

    def _validate(self, board: Board, requested: Move) -> Move:
        """Return the matching legal move (which knows whether it is a castle), or raise."""
        piece = board.piece(*requested.from_pos)
        if piece is None:
            raise StartPieceMissingError(
                f"There is no piece on {square_name(requested.from_pos)}"
            )
        if piece.color != board.active_color:
            raise WrongPieceColorError(
                f"It is {board.active_color.name.lower()}'s turn, {piece.name} cannot move"
            )

        for move in self._legal_moves(board, requested.from_pos):
            if move.to_pos == requested.to_pos:
                return move
        raise IllegalMoveError(f"{piece.name} cannot move {requested}")

    def _record(self, move: Move) -> str:
        """Castles are recorded in SAN, everything else in coordinate notation"""
        if not move.castling:
            return move.to_str()
        side = (
            CastlingSide.KINGSIDE
            if move.to_pos[1] > DEFAULT_KING_COL
            else CastlingSide.QUEENSIDE
        )
        return CASTLING_SAN[side]

    def _store(
        self, game_id: UUID, model: GameModel, board: Board, recorded: str
    ) -> GameResponse:
        """Capture the state after a move in a GameModel and persist it"""
        after_move = GameModel(
            starting_fen=model.starting_fen,
            current_fen=board.to_fen(),
            history_fen=[*model.history_fen, model.current_fen],
            moves=[*model.moves, recorded],
            status=board.status(),
        )
        self.repo.update_game(game_id, after_move)
        logger.info("Game %s: %s (%s)", game_id, recorded, after_move.status)
        return self._create_game_response(game_id, after_move, board)

    def _ensure_not_over(self, board: Board) -> None:
        current_status = board.status()
        if current_status in GAME_OVER:
            raise GameStateError(f"The game is over ({current_status})")

    def _create_game_response(
        self, game_id: UUID, model: GameModel, board: Board
    ) -> GameResponse:
        """Convert info in GameModel (and the rebuilt board) to a GameResponse"""
        return GameResponse(
            game_id=game_id,
            fen_state=model.current_fen,
            starting_state=model.starting_fen,
            move_history=model.moves,
            status=Status(model.status),
            active_color=Color[board.active_color.name],
            castling=board.castling_as_string(),
            highlighted=sorted(square_name(position) for position in board.highlighted),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
