"""State-building helpers shared by the test modules."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from uttt.game_engine import GameEngine
from uttt.models import GameState

IDENTITY_QUEUE: tuple[int, ...] = tuple(range(9)) * 9

EMPTY = (None,) * 9


def board_from_string(layout: str) -> tuple[Optional[str], ...]:
    """Parse a 9-character layout such as ``"XO.X....."`` ('.' = empty)."""
    cells = [c for c in layout if not c.isspace()]
    assert len(cells) == 9, layout
    return tuple(None if c == "." else c for c in cells)


def make_state(
    boards: Optional[dict[int, str]] = None,
    global_wins: Optional[dict[int, str]] = None,
    master_queue: Sequence[int] = IDENTITY_QUEUE,
    queue_position: int = 0,
    has_wildcard: bool = False,
    current_player_index: int = 0,
    num_players: int = 2,
    game_over: Optional[str] = None,
) -> GameState:
    """Build a validated state from sparse board layouts."""
    board_tuple = tuple(
        board_from_string(boards[i]) if boards and i in boards else EMPTY
        for i in range(9)
    )
    wins = tuple((global_wins or {}).get(i) for i in range(9))
    return GameState(
        boards=board_tuple,
        global_wins=wins,
        num_players=num_players,
        current_player_index=current_player_index,
        master_queue=tuple(master_queue),
        queue_position=queue_position,
        has_wildcard=has_wildcard,
        game_over=game_over,
    )


def play_random_game(
    rng: random.Random,
    max_moves: int = 200,
    num_players: int = 2,
) -> list[GameState]:
    """Every state of one random playout, starting with the initial state."""
    state = GameEngine.create_initial_state(num_players=num_players, rng=rng)
    states = [state]
    for _ in range(max_moves):
        moves = GameEngine.get_valid_moves(state)
        if not moves:
            break
        state = GameEngine.apply_move(state, rng.choice(moves))
        states.append(state)
    return states
