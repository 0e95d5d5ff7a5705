"""
Move Ordering Heuristics.

Good move ordering improves alpha-beta pruning by examining likely-best
moves first. Scoring here reads the current state directly and never builds
successor states, so it stays cheap enough to run at every ordered node.

Usage Example:
```python
from uttt.ai.move_ordering import MovePriorityScorer, order_moves

ordered = order_moves(state, moves, scorer=MovePriorityScorer())
```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..game_engine import completes_line

if TYPE_CHECKING:
    from ..models import GameState, Move

# Center > corners > edges.
_POSITION_WEIGHTS: tuple[int, ...] = (3, 2, 3, 2, 4, 2, 3, 2, 3)


@dataclass
class MovePriorityScorer:
    """Computes ordering scores for moves.

    Attributes
    ----------
    game_win_bonus : float
        Move wins a board that completes a global line for the mover.
    board_win_bonus : float
        Move completes a line inside its sub-board.
    block_bonus : float
        Move occupies a cell that would complete a line for an opponent.
    completion_bonus : float
        Move fills the last empty cell of its board, which hands out a
        wildcard.
    cell_position_weight, board_position_weight : float
        Multipliers on the positional table for the cell and its board.
    """

    game_win_bonus: float = 100_000.0
    board_win_bonus: float = 1_000.0
    block_bonus: float = 500.0
    completion_bonus: float = 50.0
    cell_position_weight: float = 10.0
    board_position_weight: float = 5.0

    def score(self, state: GameState, move: Move) -> float:
        """Ordering score for ``move`` in ``state`` (higher = search first)."""
        board_index = move.board_index
        cell = move.cell_index
        board = state.boards[board_index]
        mover = state.current_player

        score = (
            _POSITION_WEIGHTS[cell] * self.cell_position_weight
            + _POSITION_WEIGHTS[board_index] * self.board_position_weight
        )

        wins_board = completes_line(board, cell, mover)
        if wins_board:
            score += self.board_win_bonus
            if completes_line(state.global_wins, board_index, mover):
                score += self.game_win_bonus

        for opponent in state.players:
            if opponent != mover and completes_line(board, cell, opponent):
                score += self.block_bonus
                break

        if wins_board or sum(1 for c in board if c is None) == 1:
            score += self.completion_bonus

        return score


def order_moves(
    state: GameState,
    moves: list[Move],
    scorer: MovePriorityScorer | None = None,
) -> list[Move]:
    """Return ``moves`` sorted best-first; ties keep generation order."""
    if scorer is None:
        scorer = MovePriorityScorer()
    return sorted(moves, key=lambda m: scorer.score(state, m), reverse=True)
