"""Minimax AI implementation.

This agent runs depth-limited minimax with alpha-beta pruning over the
immutable engine states, using :class:`HeuristicAI` for leaf evaluation.

Whether a node maximizes is read from that node's ``current_player``, not
from ply parity; with three or more players every opponent is treated as a
minimizer (paranoid search).

Only the root and its immediate children are pre-sorted with
:class:`MovePriorityScorer`; deeper plies iterate in generation order.

Level 10 uses adaptive depth: when the legal-move count exceeds one of the
``UTTT_ADAPTIVE_DEPTH_THRESHOLDS`` entries the depth is capped at the
matching value, so wildcard turns with up to 81 options stay responsive.
The cap never drops below ``min_adaptive_depth``, which the ladder sets to
level 9's fixed depth.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from ..errors import ConfigurationError
from ..game_engine import GameEngine
from ..models import AIConfig, GameState, Move
from .heuristic_ai import HeuristicAI
from .move_ordering import MovePriorityScorer, order_moves

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_DEPTH = 2

# Plies (from the root) that get move ordering.
ORDERED_PLIES = 2

DEFAULT_ADAPTIVE_THRESHOLDS = "40:3,18:4,9:5"


def parse_depth_thresholds(text: str) -> list[tuple[int, int]]:
    """Parse ``"moves:depth,moves:depth"`` into pairs, most moves first.

    Raises:
        ConfigurationError: If an entry is malformed or not positive.
    """
    thresholds: list[tuple[int, int]] = []
    for raw in text.split(","):
        entry = raw.strip()
        if not entry:
            continue
        try:
            moves_text, depth_text = entry.split(":")
            moves, depth = int(moves_text), int(depth_text)
        except ValueError as exc:
            raise ConfigurationError(
                f"Malformed depth threshold '{entry}'",
                context={"value": text},
            ) from exc
        if moves < 0 or depth < 1:
            raise ConfigurationError(
                f"Depth threshold '{entry}' must have moves >= 0 and depth >= 1",
                context={"value": text},
            )
        thresholds.append((moves, depth))
    return sorted(thresholds, reverse=True)


def _load_adaptive_thresholds() -> list[tuple[int, int]]:
    raw = os.getenv("UTTT_ADAPTIVE_DEPTH_THRESHOLDS", DEFAULT_ADAPTIVE_THRESHOLDS)
    try:
        return parse_depth_thresholds(raw)
    except ConfigurationError as exc:
        logger.warning(f"Ignoring UTTT_ADAPTIVE_DEPTH_THRESHOLDS: {exc}")
        return parse_depth_thresholds(DEFAULT_ADAPTIVE_THRESHOLDS)


ADAPTIVE_DEPTH_THRESHOLDS = _load_adaptive_thresholds()


def adaptive_depth(
    max_depth: int,
    legal_move_count: int,
    thresholds: list[tuple[int, int]] | None = None,
) -> int:
    """Cap ``max_depth`` by the first threshold the move count exceeds."""
    if thresholds is None:
        thresholds = ADAPTIVE_DEPTH_THRESHOLDS
    for moves, depth in thresholds:
        if legal_move_count > moves:
            return min(max_depth, depth)
    return max_depth


@dataclass
class SearchResult:
    score: float
    best_move: Move | None
    nodes_visited: int = 0


class MinimaxAI(HeuristicAI):
    """AI that uses minimax with alpha-beta pruning.

    Args:
        player_symbol: Symbol this AI plays.
        config: ``config.max_depth`` sets the search depth.
        minimax_probability: Chance of searching on a given turn; otherwise
            the plain one-ply heuristic move is played.
        use_adaptive_depth: Cap the depth on wide positions.
        min_adaptive_depth: Floor for the adaptive cap.
    """

    def __init__(
        self,
        player_symbol: str,
        config: AIConfig,
        minimax_probability: float = 1.0,
        use_adaptive_depth: bool = False,
        adaptive_thresholds: list[tuple[int, int]] | None = None,
        min_adaptive_depth: int = 1,
    ) -> None:
        super().__init__(player_symbol, config)
        self.minimax_probability = minimax_probability
        self.use_adaptive_depth = use_adaptive_depth
        self.adaptive_thresholds = adaptive_thresholds
        self.min_adaptive_depth = min_adaptive_depth
        self.move_scorer = MovePriorityScorer()
        self.nodes_visited = 0

    def _get_max_depth(self, legal_move_count: int) -> int:
        depth = self.config.max_depth or DEFAULT_SEARCH_DEPTH
        if self.use_adaptive_depth:
            capped = adaptive_depth(depth, legal_move_count, self.adaptive_thresholds)
            depth = max(capped, min(self.min_adaptive_depth, depth))
        return depth

    def select_move(self, game_state: GameState) -> Move | None:
        valid_moves = self.get_valid_moves(game_state)
        if not valid_moves:
            return None

        if self.minimax_probability < 1.0 and self.rng.random() >= self.minimax_probability:
            return super().select_move(game_state)

        if self.should_pick_random_move():
            self.move_count += 1
            return self.get_random_element(valid_moves)

        depth = self._get_max_depth(len(valid_moves))
        result = self.search(game_state, depth)
        logger.debug(
            f"{self.player_symbol} minimax depth={depth} score={result.score:.1f} "
            f"nodes={result.nodes_visited} move={result.best_move}"
        )

        self.move_count += 1
        if result.best_move is None:
            return self.select_one_ply_move(game_state, valid_moves)
        return result.best_move

    def search(self, game_state: GameState, max_depth: int) -> SearchResult:
        """Alpha-beta search from ``game_state`` to ``max_depth`` plies.

        Returns:
            The root score and best move. ``best_move`` is ``None`` only when
            the root has no legal moves.
        """
        self.nodes_visited = 0
        score, move = self._minimax(
            game_state, 0, max(1, max_depth), float("-inf"), float("inf")
        )
        return SearchResult(score=score, best_move=move, nodes_visited=self.nodes_visited)

    def _minimax(
        self,
        game_state: GameState,
        depth: int,
        max_depth: int,
        alpha: float,
        beta: float,
    ) -> tuple[float, Move | None]:
        self.nodes_visited += 1

        if game_state.game_over is not None or depth >= max_depth:
            return self.evaluate_position(game_state, max_depth - depth), None

        moves = GameEngine.get_valid_moves(game_state)
        if not moves:
            return self.evaluate_position(game_state, max_depth - depth), None
        if depth < ORDERED_PLIES:
            moves = order_moves(game_state, moves, self.move_scorer)

        best_move: Move | None = None
        if game_state.current_player == self.player_symbol:
            best_score = float("-inf")
            for move in moves:
                child = GameEngine.apply_move(game_state, move)
                score, _ = self._minimax(child, depth + 1, max_depth, alpha, beta)
                if score > best_score:
                    best_score, best_move = score, move
                alpha = max(alpha, best_score)
                if alpha >= beta:
                    break
        else:
            best_score = float("inf")
            for move in moves:
                child = GameEngine.apply_move(game_state, move)
                score, _ = self._minimax(child, depth + 1, max_depth, alpha, beta)
                if score < best_score:
                    best_score, best_move = score, move
                beta = min(beta, best_score)
                if alpha >= beta:
                    break

        return best_score, best_move
