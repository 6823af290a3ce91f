"""
Contract for the Service layer.

Domain level data model of information representing a Game.

"""

from dataclasses import dataclass, field


@dataclass
class GameModel:
    """Chess specific data that has to survive between requests."""

    starting_fen: str
    current_fen: str
    history_fen: list[str] = field(default_factory=list)
    moves: list[str] = field(default_factory=list)
    status: str = "in progress"
