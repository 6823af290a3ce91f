"""
Application settings.

Values are read from environment variables (prefixed with CHESS_), anything not set falls back to the defaults below.
"""

import logging
import os
from functools import lru_cache
from typing import Self

from pydantic import BaseModel, field_validator

from src.chess.fen import INITIAL_FEN_BOARD

ENV_PREFIX = "CHESS_"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Settings(BaseModel):
    database_url: str = "sqlite:///./chess.db"
    echo_sql: bool = False
    log_level: str = "INFO"
    starting_fen: str = INITIAL_FEN_BOARD

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls) -> Self:
        """Collect CHESS_* variables. pydantic takes care of the type conversion ('1', 'true' -> True etc.)"""
        values = {
            field_name: os.environ[f"{ENV_PREFIX}{field_name.upper()}"]
            for field_name in cls.model_fields
            if f"{ENV_PREFIX}{field_name.upper()}" in os.environ
        }
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Settings) -> None:
    """Only entry points should call this. Library modules just use logging.getLogger(__name__)."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
