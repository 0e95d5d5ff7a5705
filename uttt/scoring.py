"""Point scoring for finished single-player games.

The score rewards quick, decisive wins against strong opponents:

- base 10,000
- -150 per move the player made
- -30 per whole second elapsed
- +500 per small board won, -200 per small board lost
- +5,000 for a win, +1,000 for a draw
- multiplied by ``0.5 + (difficulty - 1) * 2/9`` (0.5x at 1, 2.5x at 10)
- doubled in hell mode, then clamped at zero
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .models import GameState

BASE_SCORE = 10_000
MOVE_PENALTY = 150
SECOND_PENALTY = 30
BOARD_WON_BONUS = 500
BOARD_LOST_PENALTY = 200
WIN_BONUS = 5_000
DRAW_BONUS = 1_000
HELL_MODE_MULTIPLIER = 2


class GameResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


@dataclass(frozen=True)
class ScoreParams:
    result: GameResult
    moves: int
    elapsed_seconds: float
    boards_won: int
    boards_lost: int
    difficulty: int
    hell_mode: bool = False


def difficulty_multiplier(difficulty: int) -> float:
    return 0.5 + (difficulty - 1) * (2 / 9)


def calculate_score(params: ScoreParams) -> int:
    score = BASE_SCORE
    score -= params.moves * MOVE_PENALTY
    score -= math.floor(params.elapsed_seconds) * SECOND_PENALTY
    score += params.boards_won * BOARD_WON_BONUS
    score -= params.boards_lost * BOARD_LOST_PENALTY
    if params.result == GameResult.WIN:
        score += WIN_BONUS
    elif params.result == GameResult.DRAW:
        score += DRAW_BONUS

    # half-up rounding, not banker's rounding
    total = math.floor(score * difficulty_multiplier(params.difficulty) + 0.5)
    if params.hell_mode:
        total *= HELL_MODE_MULTIPLIER
    return max(0, total)


def count_boards(state: GameState, symbol: str) -> tuple[int, int]:
    """Return ``(won, lost)`` small-board counts for ``symbol``."""
    won = sum(1 for marker in state.global_wins if marker == symbol)
    lost = sum(1 for marker in state.global_wins if marker is not None and marker != symbol)
    return won, lost


def result_for(state: GameState, symbol: str) -> GameResult | None:
    """Outcome of a finished game from ``symbol``'s side; ``None`` while running."""
    if state.game_over is None:
        return None
    if state.game_over == symbol:
        return GameResult.WIN
    if state.game_over == "draw":
        return GameResult.DRAW
    return GameResult.LOSS
