"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


# --- NOTE The domain layer has its own Color enum (src/chess/pieces.py). This one is the transport-safe string version.
class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class CastlingSide(StrEnum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"
