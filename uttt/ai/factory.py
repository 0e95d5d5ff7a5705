"""Difficulty ladder and AI factory.

All computer-player creation should go through this module so that every
caller maps difficulty 1-10 onto the same strategies.

Usage:
    from uttt.ai.factory import AIFactory, choose_move, get_difficulty_profile

    # One-shot move for the side to move
    move = choose_move(state, level=7)

    # Reusable AI object for a whole session
    ai = AIFactory.create_from_difficulty(difficulty=5, player_symbol="O")
    move = ai.select_move(state)

    # Explicit type and config
    ai = AIFactory.create(
        ai_type=AIType.MINIMAX,
        player_symbol="O",
        config=AIConfig(difficulty=8, max_depth=4),
    )
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from typing import TYPE_CHECKING, TypedDict

from ..models import AIConfig, AIType, GameState, Move

if TYPE_CHECKING:
    from .base import BaseAI

logger = logging.getLogger(__name__)

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10

# -----------------------------------------------------------------------------
# Type definitions
# -----------------------------------------------------------------------------


class DifficultyProfile(TypedDict):
    """Canonical profile for a single ladder level."""
    ai_type: AIType
    randomness: float
    search_depth: int
    minimax_probability: float
    adaptive_depth: bool
    win_bias: bool


# -----------------------------------------------------------------------------
# Canonical difficulty profiles (1-10)
# -----------------------------------------------------------------------------

CANONICAL_DIFFICULTY_PROFILES: dict[int, DifficultyProfile] = {
    1: {
        # Beginner: uniform random
        "ai_type": AIType.RANDOM,
        "randomness": 1.0,
        "search_depth": 0,
        "minimax_probability": 0.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    2: {
        # Easy: one-ply heuristic 40% of the time, random otherwise
        "ai_type": AIType.HEURISTIC,
        "randomness": 0.6,
        "search_depth": 0,
        "minimax_probability": 0.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    3: {
        # Win, block, win a board, block a board, else random
        "ai_type": AIType.TIERED,
        "randomness": 0.0,
        "search_depth": 0,
        "minimax_probability": 0.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    4: {
        "ai_type": AIType.HEURISTIC,
        "randomness": 0.0,
        "search_depth": 0,
        "minimax_probability": 0.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    5: {
        # Heuristic with depth-1 search half the time
        "ai_type": AIType.MINIMAX,
        "randomness": 0.0,
        "search_depth": 1,
        "minimax_probability": 0.5,
        "adaptive_depth": False,
        "win_bias": False,
    },
    6: {
        "ai_type": AIType.MINIMAX,
        "randomness": 0.0,
        "search_depth": 2,
        "minimax_probability": 1.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    7: {
        "ai_type": AIType.MINIMAX,
        "randomness": 0.0,
        "search_depth": 3,
        "minimax_probability": 1.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    8: {
        "ai_type": AIType.MINIMAX,
        "randomness": 0.0,
        "search_depth": 4,
        "minimax_probability": 1.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    9: {
        "ai_type": AIType.MINIMAX,
        "randomness": 0.0,
        "search_depth": 5,
        "minimax_probability": 1.0,
        "adaptive_depth": False,
        "win_bias": False,
    },
    10: {
        # Deepest search, capped on wide (wildcard) positions but never
        # below level 9
        "ai_type": AIType.MINIMAX,
        "randomness": 0.0,
        "search_depth": 6,
        "minimax_probability": 1.0,
        "adaptive_depth": True,
        "win_bias": False,
    },
}


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def clamp_difficulty(difficulty: int) -> int:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(difficulty)))


def get_difficulty_profile(difficulty: int) -> DifficultyProfile:
    """Return the profile for ``difficulty``, clamped into 1-10.

    Out-of-range values still map to a well-defined profile instead of
    diverging between callers.
    """
    return CANONICAL_DIFFICULTY_PROFILES[clamp_difficulty(difficulty)]


def get_search_depth(difficulty: int) -> int:
    return get_difficulty_profile(difficulty)["search_depth"]


def get_difficulty_description(difficulty: int) -> str:
    profile = get_difficulty_profile(difficulty)
    ai_type = profile["ai_type"]
    if ai_type == AIType.MINIMAX and profile["minimax_probability"] >= 1.0:
        suffix = ", adaptive" if profile["adaptive_depth"] else ""
        return f"Minimax depth {profile['search_depth']}{suffix}"
    if ai_type == AIType.MINIMAX:
        return "Heuristic with occasional search"
    if ai_type == AIType.HEURISTIC and profile["randomness"] > 0:
        return f"Heuristic {1 - profile['randomness']:.0%} of the time"
    return ai_type.value.capitalize()


# -----------------------------------------------------------------------------
# AI Factory
# -----------------------------------------------------------------------------


class AIFactory:
    """Centralized factory for creating AI instances.

    Supports creation from a difficulty level, from an explicit type and
    config, and from custom constructors registered at runtime. AI classes
    are imported lazily on first use.
    """

    # Maps string identifiers to callables that create AI instances
    _custom_registry: dict[str, Callable[..., BaseAI]] = {}

    _class_cache: dict[AIType, type[BaseAI]] = {}

    @classmethod
    def register(cls, identifier: str, constructor: Callable[..., BaseAI]) -> None:
        """Register a custom AI implementation.

        Args:
            identifier: Unique string identifier for the AI type
            constructor: Callable accepting ``(player_symbol, config)``.
        """
        if identifier in cls._custom_registry:
            logger.warning(f"Overwriting existing custom AI: {identifier}")
        cls._custom_registry[identifier] = constructor
        logger.debug(f"Registered custom AI: {identifier}")

    @classmethod
    def unregister(cls, identifier: str) -> bool:
        if identifier in cls._custom_registry:
            del cls._custom_registry[identifier]
            logger.debug(f"Unregistered custom AI: {identifier}")
            return True
        return False

    @classmethod
    def create_custom(cls, identifier: str, player_symbol: str, config: AIConfig) -> BaseAI:
        if identifier not in cls._custom_registry:
            raise ValueError(f"Unknown custom AI: {identifier}")
        return cls._custom_registry[identifier](player_symbol, config)

    @classmethod
    def _get_ai_class(cls, ai_type: AIType) -> type[BaseAI]:
        """Get the AI class for a given type, with lazy loading.

        Raises:
            ValueError: If the AI type is not supported
        """
        if ai_type in cls._class_cache:
            return cls._class_cache[ai_type]

        if ai_type == AIType.RANDOM:
            from .random_ai import RandomAI
            ai_class = RandomAI
        elif ai_type == AIType.HEURISTIC:
            from .heuristic_ai import HeuristicAI
            ai_class = HeuristicAI
        elif ai_type == AIType.TIERED:
            from .heuristic_ai import TieredAI
            ai_class = TieredAI
        elif ai_type == AIType.MINIMAX:
            from .minimax_ai import MinimaxAI
            ai_class = MinimaxAI
        else:
            raise ValueError(f"Unsupported AI type: {ai_type}")

        cls._class_cache[ai_type] = ai_class
        return ai_class

    @classmethod
    def create(
        cls,
        ai_type: AIType,
        player_symbol: str,
        config: AIConfig,
        **kwargs,
    ) -> BaseAI:
        """Create an AI instance with explicit type and configuration.

        Extra keyword arguments go to the AI constructor (for example
        ``minimax_probability`` for :class:`MinimaxAI`).
        """
        ai_class = cls._get_ai_class(ai_type)
        return ai_class(player_symbol, config, **kwargs)

    @classmethod
    def create_from_difficulty(
        cls,
        difficulty: int,
        player_symbol: str,
        *,
        randomness_override: float | None = None,
        rng_seed: int | None = None,
        heuristic_profile_id: str | None = None,
    ) -> BaseAI:
        """Create an AI instance from a difficulty level.

        This is the recommended way to create AIs for normal play.
        """
        level = clamp_difficulty(difficulty)
        profile = get_difficulty_profile(level)

        config = AIConfig(
            difficulty=level,
            randomness=(
                randomness_override if randomness_override is not None
                else profile["randomness"]
            ),
            rng_seed=rng_seed,
            heuristic_profile_id=heuristic_profile_id,
            max_depth=profile["search_depth"] or None,
        )

        ai_type = profile["ai_type"]
        kwargs: dict[str, object] = {}
        if ai_type == AIType.RANDOM:
            kwargs["win_bias"] = profile["win_bias"]
        elif ai_type == AIType.MINIMAX:
            kwargs["minimax_probability"] = profile["minimax_probability"]
            kwargs["use_adaptive_depth"] = profile["adaptive_depth"]
            if profile["adaptive_depth"] and level > MIN_DIFFICULTY:
                kwargs["min_adaptive_depth"] = get_search_depth(level - 1)

        logger.debug(f"Creating {ai_type.value} AI for {player_symbol} at level {level}")
        return cls.create(ai_type, player_symbol, config, **kwargs)

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the class cache. Useful for testing."""
        cls._class_cache.clear()


def choose_move(
    game_state: GameState,
    level: int,
    ai_symbol: str | None = None,
    rng_seed: int | None = None,
) -> Move | None:
    """Pick a move for ``ai_symbol`` (default: the side to move) at ``level``.

    Returns ``None`` only when the position has no legal moves. Any level
    that fails to produce a move falls back to the one-ply heuristic.
    """
    if game_state.game_over is not None:
        return None
    symbol = ai_symbol or game_state.current_player
    if rng_seed is None:
        # One-shot callers get fresh randomness on every call.
        rng_seed = random.getrandbits(32)
    ai = AIFactory.create_from_difficulty(level, symbol, rng_seed=rng_seed)
    move = ai.select_move(game_state)
    if move is None:
        from .heuristic_ai import HeuristicAI

        fallback = HeuristicAI(
            symbol, AIConfig(difficulty=clamp_difficulty(level), rng_seed=rng_seed)
        )
        move = fallback.select_one_ply_move(game_state)
    return move
