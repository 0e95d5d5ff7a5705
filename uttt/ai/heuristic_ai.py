"""Heuristic AI: static position evaluation and one-ply move selection.

Evaluation is always from the perspective of ``self.player_symbol``.

Scoring components
------------------
``terminal``
    Finished games short-circuit to ``±WIN_SCORE`` (0 for a draw). The
    magnitude grows with ``depth_remaining`` so a search prefers faster wins
    and slower losses.
``small_boards``
    Each undecided sub-board scores its 8 lines: an open line with one or two
    of our marks earns ``WEIGHT_SMALL_ONE`` / ``WEIGHT_SMALL_TWO``; a line held
    by a single opponent loses the same band times
    ``OPPONENT_PENALTY_FACTOR``. Occupied cells add the positional table value,
    signed by owner. The board total is scaled by the board's own positional
    weight relative to a corner.
``global_lines``
    The same line bands over the 3x3 matrix of board outcomes, using the much
    larger ``WEIGHT_GLOBAL_*`` values. Drawn boards block every line through
    them.
``global_position``
    Each won board adds ``WEIGHT_BOARD_POSITION`` times its positional value,
    signed by owner.
``wildcard``
    Whoever holds a pending wildcard gets ``WEIGHT_WILDCARD``.
``funnel``
    When the queue sends the mover to a board where they already threaten to
    complete a line, that board is close to decided in their favour.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..game_engine import (
    GameEngine,
    completes_line,
    is_board_playable,
)
from ..models import (
    BOARD_COUNT,
    DRAW,
    LINES_3,
    AIConfig,
    Cell,
    GameState,
    Move,
)
from .base import BaseAI
from .heuristic_weights import HEURISTIC_WEIGHT_PROFILES

logger = logging.getLogger(__name__)

# Center > corners > edges, for cells inside a board and boards in the grid.
POSITION_WEIGHTS: tuple[int, ...] = (3, 2, 3, 2, 4, 2, 3, 2, 3)
_CORNER_WEIGHT = 3.0

# Marker for a drawn (full, unwon) board in the global matrix. It blocks
# every global line through it.
_DEAD = "#"

WIN_SCORE = 1_000_000.0
DEPTH_BONUS = 1_000.0


class HeuristicAI(BaseAI):
    """AI that picks the move whose successor evaluates best."""

    WEIGHT_SMALL_THREE = 1_000.0
    WEIGHT_SMALL_TWO = 100.0
    WEIGHT_SMALL_ONE = 5.0
    WEIGHT_GLOBAL_THREE = 100_000.0
    WEIGHT_GLOBAL_TWO = 10_000.0
    WEIGHT_GLOBAL_ONE = 1_000.0
    OPPONENT_PENALTY_FACTOR = 0.9
    WEIGHT_CELL_POSITION = 1.0
    WEIGHT_BOARD_POSITION = 100.0
    WEIGHT_WILDCARD = 150.0
    WEIGHT_FUNNEL_THREAT = 80.0

    # Scores within this distance of the best count as ties.
    TIE_EPSILON = 1e-9

    def __init__(self, player_symbol: str, config: AIConfig) -> None:
        super().__init__(player_symbol, config)
        self._apply_weight_profile()

    def _apply_weight_profile(self) -> None:
        """Override class-level weights from ``config.heuristic_profile_id``."""
        profile_id = self.config.heuristic_profile_id
        if not profile_id:
            return
        weights = HEURISTIC_WEIGHT_PROFILES.get(profile_id)
        if weights is None:
            logger.warning(f"Unknown heuristic profile '{profile_id}', using defaults")
            return
        for name, value in weights.items():
            setattr(self, name, value)

    # ------------------------------------------------------------------
    # Move selection
    # ------------------------------------------------------------------

    def select_move(self, game_state: GameState) -> Move | None:
        """Select the best one-ply move, breaking ties at random.

        With ``config.randomness`` set, that fraction of calls returns a
        uniformly random legal move instead.
        """
        valid_moves = self.get_valid_moves(game_state)
        if not valid_moves:
            return None

        if self.should_pick_random_move():
            selected = self.get_random_element(valid_moves)
        else:
            selected = self.select_one_ply_move(game_state, valid_moves)

        self.move_count += 1
        return selected

    def select_one_ply_move(
        self, game_state: GameState, valid_moves: list[Move] | None = None
    ) -> Move | None:
        if valid_moves is None:
            valid_moves = self.get_valid_moves(game_state)
        if not valid_moves:
            return None

        best_moves: list[Move] = []
        best_score = float("-inf")
        for move in valid_moves:
            next_state = GameEngine.apply_move(game_state, move)
            score = self.evaluate_position(next_state)
            if score > best_score + self.TIE_EPSILON:
                best_score = score
                best_moves = [move]
            elif score >= best_score - self.TIE_EPSILON:
                best_moves.append(move)

        logger.debug(
            f"{self.player_symbol} one-ply: {len(best_moves)} best of "
            f"{len(valid_moves)} at {best_score:.1f}"
        )
        return self.get_random_element(best_moves)

    def select_tiered_move(self, game_state: GameState) -> Move | None:
        """Rule-of-thumb play in fixed tiers.

        1. Win the game.
        2. Block a cell that would win the game for an opponent.
        3. Win a sub-board.
        4. Block a cell that would win a sub-board for an opponent.
        5. Anything, at random.
        """
        valid_moves = self.get_valid_moves(game_state)
        if not valid_moves:
            return None

        mover = game_state.current_player
        opponents = [s for s in game_state.players if s != mover]
        tiers: list[list[Move]] = [[], [], [], []]
        for move in valid_moves:
            board = game_state.boards[move.board_index]
            cell = move.cell_index
            if completes_line(board, cell, mover):
                if self._wins_game_with_board(game_state, move.board_index, mover):
                    tiers[0].append(move)
                else:
                    tiers[2].append(move)
            for opponent in opponents:
                if completes_line(board, cell, opponent):
                    if self._wins_game_with_board(game_state, move.board_index, opponent):
                        tiers[1].append(move)
                    else:
                        tiers[3].append(move)
                    break

        self.move_count += 1
        for tier in tiers:
            if tier:
                return self.get_random_element(tier)
        return self.get_random_element(valid_moves)

    @staticmethod
    def _wins_game_with_board(game_state: GameState, board_index: int, symbol: str) -> bool:
        return completes_line(game_state.global_wins, board_index, symbol)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate_position(self, game_state: GameState, depth_remaining: int = 0) -> float:
        """Score ``game_state`` for this AI; positive favours us."""
        if game_state.game_over is not None:
            return self._terminal_score(game_state.game_over, depth_remaining)
        return sum(self._components(game_state).values())

    def get_evaluation_breakdown(self, game_state: GameState) -> dict[str, float]:
        if game_state.game_over is not None:
            terminal = self._terminal_score(game_state.game_over, 0)
            return {"terminal": terminal, "total": terminal}
        breakdown = self._components(game_state)
        breakdown["total"] = sum(breakdown.values())
        return breakdown

    def _terminal_score(self, outcome: str, depth_remaining: int) -> float:
        if outcome == DRAW:
            return 0.0
        magnitude = WIN_SCORE + depth_remaining * DEPTH_BONUS
        return magnitude if outcome == self.player_symbol else -magnitude

    def _components(self, game_state: GameState) -> dict[str, float]:
        me = self.player_symbol
        small_total = 0.0
        global_position = 0.0
        global_cells: list[Cell] = []

        for index in range(BOARD_COUNT):
            board = game_state.boards[index]
            winner = game_state.global_wins[index]
            if winner is not None:
                global_cells.append(winner)
                sign = 1.0 if winner == me else -1.0
                global_position += sign * self.WEIGHT_BOARD_POSITION * POSITION_WEIGHTS[index]
                continue
            if not is_board_playable(board, winner):
                global_cells.append(_DEAD)
                continue
            global_cells.append(None)
            board_score = self._score_lines(
                board, self.WEIGHT_SMALL_THREE, self.WEIGHT_SMALL_TWO, self.WEIGHT_SMALL_ONE
            )
            board_score += self._score_cells(board)
            small_total += board_score * POSITION_WEIGHTS[index] / _CORNER_WEIGHT

        global_lines = self._score_lines(
            global_cells,
            self.WEIGHT_GLOBAL_THREE,
            self.WEIGHT_GLOBAL_TWO,
            self.WEIGHT_GLOBAL_ONE,
        )

        return {
            "global_lines": global_lines,
            "global_position": global_position,
            "small_boards": small_total,
            "wildcard": self._score_wildcard(game_state),
            "funnel": self._score_funnel(game_state),
        }

    def _score_lines(
        self,
        cells: Sequence[Cell],
        three: float,
        two: float,
        one: float,
    ) -> float:
        me = self.player_symbol
        bands = (0.0, one, two, three)
        penalty = self.OPPONENT_PENALTY_FACTOR
        score = 0.0
        for a, b, c in LINES_3:
            own = 0
            holder: Cell = None
            blocked = False
            for value in (cells[a], cells[b], cells[c]):
                if value is None:
                    continue
                if value == me:
                    own += 1
                elif value == _DEAD or (holder is not None and holder != value):
                    blocked = True
                    break
                else:
                    holder = value
            if blocked:
                continue
            if holder is None:
                score += bands[own]
            elif own == 0:
                theirs = sum(1 for v in (cells[a], cells[b], cells[c]) if v == holder)
                score -= bands[theirs] * penalty
        return score

    def _score_cells(self, board: Sequence[Cell]) -> float:
        me = self.player_symbol
        score = 0.0
        for index, value in enumerate(board):
            if value is None:
                continue
            weight = POSITION_WEIGHTS[index] * self.WEIGHT_CELL_POSITION
            score += weight if value == me else -weight
        return score

    def _score_wildcard(self, game_state: GameState) -> float:
        if not game_state.has_wildcard:
            return 0.0
        if game_state.current_player == self.player_symbol:
            return self.WEIGHT_WILDCARD
        return -self.WEIGHT_WILDCARD

    def _score_funnel(self, game_state: GameState) -> float:
        target = game_state.next_board
        if target is None:
            return 0.0
        board = game_state.boards[target]
        if not is_board_playable(board, game_state.global_wins[target]):
            return 0.0
        mover = game_state.current_player
        threatened = any(
            board[cell] is None and completes_line(board, cell, mover)
            for cell in range(len(board))
        )
        if not threatened:
            return 0.0
        weight = self.WEIGHT_FUNNEL_THREAT * POSITION_WEIGHTS[target] / _CORNER_WEIGHT
        return weight if mover == self.player_symbol else -weight


class TieredAI(HeuristicAI):
    """Fixed win/block tiers instead of full evaluation."""

    def select_move(self, game_state: GameState) -> Move | None:
        return self.select_tiered_move(game_state)
