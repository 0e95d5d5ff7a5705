"""
Base AI Player class
Abstract base class that all move-selection strategies inherit from
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Any

from ..game_engine import GameEngine
from ..models import PLAYER_SYMBOLS, AIConfig, GameState, Move


def derive_default_seed(config: AIConfig, player_symbol: str) -> int:
    """
    Derive a deterministic RNG seed when ``AIConfig.rng_seed`` is unset.

    Mixes the difficulty and the controlled symbol's turn slot into a 32-bit
    value so that two AIs in the same game do not share a random stream.
    Hosts that want varied play between sessions pass an explicit seed.
    """
    slot = PLAYER_SYMBOLS.index(player_symbol) + 1
    base = (config.difficulty * 1_000_003) ^ (slot * 97_911)
    return int(base & 0xFFFFFFFF)


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    def __init__(self, player_symbol: str, config: AIConfig):
        """
        Initialize AI player

        Args:
            player_symbol: The symbol this AI plays ("X", "O", ...)
            config: AI configuration settings
        """
        if player_symbol not in PLAYER_SYMBOLS:
            raise ValueError(f"Unknown player symbol: {player_symbol!r}")
        self.player_symbol = player_symbol
        self.config = config
        self.move_count = 0

        # Per-instance RNG used for all stochastic behaviour (tie-breaks,
        # random move selection, search-probability rolls).
        if self.config.rng_seed is not None:
            self.rng_seed: int = int(self.config.rng_seed)
        else:
            self.rng_seed = derive_default_seed(self.config, self.player_symbol)
        self.rng: random.Random = random.Random(self.rng_seed)

    @abstractmethod
    def select_move(self, game_state: GameState) -> Move | None:
        """
        Select the best move for the current game state

        Args:
            game_state: Current game state

        Returns:
            Selected move or None if no valid moves
        """

    @abstractmethod
    def evaluate_position(self, game_state: GameState) -> float:
        """
        Evaluate the current position from this AI's perspective

        Args:
            game_state: Current game state

        Returns:
            Evaluation score (positive = good for this AI, negative = bad)
        """

    def get_evaluation_breakdown(self, game_state: GameState) -> dict[str, float]:
        return {"total": self.evaluate_position(game_state)}

    def get_valid_moves(self, game_state: GameState) -> list[Move]:
        return GameEngine.get_valid_moves(game_state)

    def should_pick_random_move(self) -> bool:
        """
        Determine if AI should pick a random move based on randomness setting

        Returns:
            True if should pick random move
        """
        if self.config.randomness is None or self.config.randomness == 0:
            return False
        return self.rng.random() < self.config.randomness

    def get_random_element(self, items: list[Any]) -> Any | None:
        if not items:
            return None
        return self.rng.choice(items)

    def get_opponent_symbols(self, game_state: GameState) -> list[str]:
        return [s for s in game_state.players if s != self.player_symbol]

    def find_immediate_wins(
        self, game_state: GameState, moves: list[Move] | None = None
    ) -> list[Move]:
        """Moves that end the game in the current player's favour."""
        if moves is None:
            moves = self.get_valid_moves(game_state)
        mover = game_state.current_player
        return [
            move
            for move in moves
            if GameEngine.apply_move(game_state, move).game_over == mover
        ]

    def __repr__(self) -> str:
        """String representation of AI"""
        return (
            f"{self.__class__.__name__}"
            f"(player={self.player_symbol}, "
            f"difficulty={self.config.difficulty})"
        )
