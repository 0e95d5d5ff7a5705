"""Queued ultimate tic-tac-toe: rules engine, serialization and computer players."""

from uttt.errors import (
    ConfigurationError,
    InvalidMoveError,
    StateValidationError,
    UTTTError,
)
from uttt.game_engine import GameEngine, generate_master_queue
from uttt.models import (
    DRAW,
    PLAYER_SYMBOLS,
    AIConfig,
    GameMode,
    GameState,
    Move,
    SavedGame,
)
from uttt.serialization import deserialize_state, serialize_state

__version__ = "1.0.0"

__all__ = [
    "DRAW",
    "PLAYER_SYMBOLS",
    "AIConfig",
    "ConfigurationError",
    "GameEngine",
    "GameMode",
    "GameState",
    "InvalidMoveError",
    "Move",
    "SavedGame",
    "StateValidationError",
    "UTTTError",
    "deserialize_state",
    "generate_master_queue",
    "serialize_state",
]
