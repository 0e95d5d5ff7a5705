"""
Pydantic Models for Queued Ultimate Tic-Tac-Toe
Field aliases follow the camelCase names of the persisted session record.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Dict, Optional, Tuple
from enum import Enum
from datetime import datetime, timezone


# Player symbols in turn order. A game with N players uses the first N.
PLAYER_SYMBOLS: Tuple[str, ...] = ("X", "O", "△", "□")

DRAW = "draw"

BOARD_COUNT = 9
CELLS_PER_BOARD = 9
QUEUE_LENGTH = BOARD_COUNT * BOARD_COUNT

MIN_PLAYERS = 2
MAX_PLAYERS = len(PLAYER_SYMBOLS)

BOARD_NAMES: Tuple[str, ...] = (
    "Top-Left", "Top-Center", "Top-Right",
    "Middle-Left", "Center", "Middle-Right",
    "Bottom-Left", "Bottom-Center", "Bottom-Right",
)

CELL_NAMES: Tuple[str, ...] = (
    "top-left", "top-center", "top-right",
    "middle-left", "center", "middle-right",
    "bottom-left", "bottom-center", "bottom-right",
)

# The 8 win lines of a 3x3 grid, as row-major indices.
LINES_3: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

Cell = Optional[str]
SmallBoard = Tuple[Cell, ...]


class AIType(str, Enum):
    """AI type enumeration"""
    RANDOM = "random"
    TIERED = "tiered"
    HEURISTIC = "heuristic"
    MINIMAX = "minimax"


class GameMode(str, Enum):
    """Session mode as stored on a saved game row"""
    SINGLE = "single"
    TWO = "two"
    THREE = "three"
    FOUR = "four"

    @property
    def num_players(self) -> int:
        return {"single": 2, "two": 2, "three": 3, "four": 4}[self.value]


class Move(BaseModel):
    """A single placement: which sub-board and which cell inside it."""
    big_row: int = Field(ge=0, le=2, alias="bigRow")
    big_col: int = Field(ge=0, le=2, alias="bigCol")
    small_row: int = Field(ge=0, le=2, alias="smallRow")
    small_col: int = Field(ge=0, le=2, alias="smallCol")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def board_index(self) -> int:
        return self.big_row * 3 + self.big_col

    @property
    def cell_index(self) -> int:
        return self.small_row * 3 + self.small_col

    @classmethod
    def from_indices(cls, board_index: int, cell_index: int) -> "Move":
        """Build a move from row-major board and cell indices (0-8)."""
        return cls(
            big_row=board_index // 3,
            big_col=board_index % 3,
            small_row=cell_index // 3,
            small_col=cell_index % 3,
        )

    def describe(self) -> str:
        """Human label, e.g. ``"Center board, top-left cell"``."""
        return (
            f"{BOARD_NAMES[self.board_index]} board, "
            f"{CELL_NAMES[self.cell_index]} cell"
        )

    def __str__(self) -> str:
        return f"Move(board={self.board_index}, cell={self.cell_index})"


class GameState(BaseModel):
    """Complete game state.

    Values are immutable. The engine produces successors with
    ``model_construct`` and never mutates an existing state.
    """
    boards: Tuple[SmallBoard, ...]
    global_wins: Tuple[Cell, ...] = Field(alias="globalWins")
    num_players: int = Field(2, ge=MIN_PLAYERS, le=MAX_PLAYERS, alias="numPlayers")
    current_player_index: int = Field(0, ge=0, alias="currentPlayerIndex")
    master_queue: Tuple[int, ...] = Field(alias="masterQueue")
    queue_position: int = Field(0, ge=0, le=QUEUE_LENGTH, alias="queuePosition")
    has_wildcard: bool = Field(False, alias="hasWildcard")
    game_over: Optional[str] = Field(None, alias="gameOver")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("boards")
    @classmethod
    def _check_boards(cls, value: Tuple[SmallBoard, ...]) -> Tuple[SmallBoard, ...]:
        if len(value) != BOARD_COUNT:
            raise ValueError(f"expected {BOARD_COUNT} boards, got {len(value)}")
        for index, board in enumerate(value):
            if len(board) != CELLS_PER_BOARD:
                raise ValueError(
                    f"board {index} has {len(board)} cells, expected {CELLS_PER_BOARD}"
                )
            for cell in board:
                if cell is not None and cell not in PLAYER_SYMBOLS:
                    raise ValueError(f"board {index} has unknown cell value {cell!r}")
        return value

    @field_validator("global_wins")
    @classmethod
    def _check_global_wins(cls, value: Tuple[Cell, ...]) -> Tuple[Cell, ...]:
        if len(value) != BOARD_COUNT:
            raise ValueError(f"expected {BOARD_COUNT} global markers, got {len(value)}")
        for marker in value:
            if marker is not None and marker not in PLAYER_SYMBOLS:
                raise ValueError(f"unknown global marker {marker!r}")
        return value

    @field_validator("master_queue")
    @classmethod
    def _check_master_queue(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        if len(value) != QUEUE_LENGTH:
            raise ValueError(f"master queue must have {QUEUE_LENGTH} slots, got {len(value)}")
        if any(not 0 <= slot < BOARD_COUNT for slot in value):
            raise ValueError("master queue entries must be board indices 0-8")
        return value

    @field_validator("game_over")
    @classmethod
    def _check_game_over(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value != DRAW and value not in PLAYER_SYMBOLS:
            raise ValueError(f"unknown game outcome {value!r}")
        return value

    @model_validator(mode="after")
    def _check_player_index(self) -> "GameState":
        if self.current_player_index >= self.num_players:
            raise ValueError(
                f"current player index {self.current_player_index} out of range "
                f"for {self.num_players} players"
            )
        return self

    @property
    def players(self) -> Tuple[str, ...]:
        """Symbols taking part in this game, in turn order."""
        return PLAYER_SYMBOLS[: self.num_players]

    @property
    def current_player(self) -> str:
        return PLAYER_SYMBOLS[self.current_player_index]

    @property
    def is_terminal(self) -> bool:
        return self.game_over is not None

    @property
    def next_board(self) -> Optional[int]:
        """Queue-designated board for the next move, if any.

        ``None`` while a wildcard is active, once the queue is exhausted,
        or after the game ends.
        """
        if self.game_over is not None or self.has_wildcard:
            return None
        if self.queue_position >= QUEUE_LENGTH:
            return None
        return self.master_queue[self.queue_position]


class AIConfig(BaseModel):
    """AI configuration"""
    difficulty: int = Field(ge=1, le=10)
    randomness: Optional[float] = Field(None, ge=0, le=1)
    rng_seed: Optional[int] = Field(None, alias="rngSeed")
    heuristic_profile_id: Optional[str] = Field(None, alias="heuristicProfileId")
    max_depth: Optional[int] = Field(None, ge=1, alias="maxDepth")

    class Config:
        populate_by_name = True


class SavedGame(BaseModel):
    """One persisted session row.

    The persistence backend stores ``state`` as an opaque JSON document;
    only the serialization adapter interprets it.
    """
    id: str
    state: Dict[str, Any]
    mode: GameMode
    difficulty: Optional[int] = Field(None, ge=1, le=10)
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    class Config:
        populate_by_name = True

    @classmethod
    def from_state(
        cls,
        game_id: str,
        state: GameState,
        mode: GameMode,
        difficulty: Optional[int] = None,
    ) -> "SavedGame":
        """Build a row for ``state``; difficulty only applies to single mode."""
        from .serialization import serialize_state

        return cls(
            id=game_id,
            state=serialize_state(state),
            mode=mode,
            difficulty=difficulty if mode == GameMode.SINGLE else None,
        )

    def load_state(self) -> GameState:
        """Rebuild the live game state from the stored record."""
        from .serialization import deserialize_state

        return deserialize_state(self.state)
