"""Computer players.

The recommended entry points are the factory helpers:

    from uttt.ai import choose_move, AIFactory

    # One-shot move at a difficulty level (1-10)
    move = choose_move(state, level=6)

    # Reusable AI object
    ai = AIFactory.create_from_difficulty(difficulty=8, player_symbol="O")

Architecture:
- base.py: BaseAI abstract base class
- random_ai.py: uniform random play (level 1)
- heuristic_ai.py: static evaluator, one-ply and tiered play (levels 2-4)
- minimax_ai.py: alpha-beta search (levels 5-10)
- move_ordering.py: cheap move ordering for the search
- factory.py: difficulty ladder and AIFactory
- background.py: off-thread selection with inline fallback
"""

from uttt.ai.base import BaseAI
from uttt.ai.factory import (
    CANONICAL_DIFFICULTY_PROFILES,
    AIFactory,
    DifficultyProfile,
    choose_move,
    clamp_difficulty,
    get_difficulty_description,
    get_difficulty_profile,
)
from uttt.models import AIType

# Lazy-load AI implementations to avoid circular imports
_AI_CLASSES = {
    "BackgroundMoveSelector": "uttt.ai.background",
    "HeuristicAI": "uttt.ai.heuristic_ai",
    "MinimaxAI": "uttt.ai.minimax_ai",
    "RandomAI": "uttt.ai.random_ai",
    "TieredAI": "uttt.ai.heuristic_ai",
}


def __getattr__(name: str):
    """Lazy loading for AI implementation classes."""
    if name in _AI_CLASSES:
        import importlib
        module = importlib.import_module(_AI_CLASSES[name])
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "CANONICAL_DIFFICULTY_PROFILES",
    "AIFactory",
    "AIType",
    "BackgroundMoveSelector",
    "BaseAI",
    "DifficultyProfile",
    "HeuristicAI",
    "MinimaxAI",
    "RandomAI",
    "TieredAI",
    "choose_move",
    "clamp_difficulty",
    "get_difficulty_description",
    "get_difficulty_profile",
]
