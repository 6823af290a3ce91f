"""
Command line entry point

ex)
    chess-rules replay tests/chess/games/morphy_opera_1858.pgn
    chess-rules show "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 0"
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from src.chess.board import Board
from src.chess.pgn import parse_pgn
from src.core.config import configure_logging, get_settings
from src.core.exceptions import ChessError

logger = logging.getLogger(__name__)


def replay(pgn_path: Path) -> int:
    game = parse_pgn(pgn_path.read_text(encoding="utf-8"))
    for key, value in game.metadata.items():
        print(f"| {key:<20} | {value}")

    board = Board.from_fen(get_settings().starting_fen)
    descriptions = game.play(board)
    for ply, (token, description) in enumerate(zip(game.moves, descriptions), start=1):
        print(f"{ply:3} {token:<8} {description}")

    print(board)
    print(f"Result: {game.result} ({board.status()})")
    return 0


def show(fen_str: str) -> int:
    board = Board.from_fen(fen_str)
    print(board)
    print(f"FEN:      {board.to_fen()}")
    print(f"Castling: {board.castling_rights(check_empty_squares=True).to_fen()}")
    print(f"Status:   {board.status()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chess rules engine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_parser = subparsers.add_parser("replay", help="Replay a PGN game")
    replay_parser.add_argument("pgn", type=Path, help="Path to a .pgn file")

    show_parser = subparsers.add_parser("show", help="Render the board of a FEN string")
    show_parser.add_argument("fen", help="Complete FEN string (quoted)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings())

    try:
        if args.command == "replay":
            return replay(args.pgn)
        return show(args.fen)
    except ChessError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
