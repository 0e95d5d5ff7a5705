"""Random AI implementation.

This agent selects uniformly random legal moves using the per-instance RNG on
the :class:`BaseAI`. It backs difficulty level 1 and is a handy baseline for
tests.
"""

from __future__ import annotations

from ..models import AIConfig, GameState, Move
from .base import BaseAI


class RandomAI(BaseAI):
    """AI that selects random valid moves."""

    def __init__(self, player_symbol: str, config: AIConfig, win_bias: bool = False):
        super().__init__(player_symbol, config)
        # When set, an available game-winning move is always taken.
        self.win_bias = win_bias

    def select_move(self, game_state: GameState) -> Move | None:
        """Select a random valid move for ``game_state``.

        Args:
            game_state: Current game state.

        Returns:
            A random valid :class:`Move` or ``None`` if no legal moves exist.
        """
        valid_moves = self.get_valid_moves(game_state)
        if not valid_moves:
            return None

        if self.win_bias:
            winning = self.find_immediate_wins(game_state, valid_moves)
            if winning:
                self.move_count += 1
                return self.get_random_element(winning)

        selected = self.get_random_element(valid_moves)
        self.move_count += 1
        return selected

    def evaluate_position(self, game_state: GameState) -> float:
        """Return a small random evaluation for ``game_state``.

        RandomAI does not evaluate positions meaningfully; the value only adds
        variance for diagnostic tooling that inspects scalar evaluations.
        """
        _ = game_state  # unused in this implementation
        return self.rng.uniform(-0.1, 0.1)
