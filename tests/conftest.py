"""Shared pytest fixtures for the uttt tests."""

from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import Callable

import pytest

# Make `import uttt` work when pytest is run from the repo root without an
# editable install.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from uttt.game_engine import GameEngine  # noqa: E402
from uttt.models import GameState, Move  # noqa: E402
from tests.helpers import IDENTITY_QUEUE, make_state  # noqa: E402


@pytest.fixture
def initial_state() -> GameState:
    return GameEngine.create_initial_state(rng=random.Random(1234))


@pytest.fixture
def state_factory() -> Callable[..., GameState]:
    return make_state


@pytest.fixture
def move() -> Callable[[int, int], Move]:
    """``move(board, cell)`` shorthand."""
    return Move.from_indices


@pytest.fixture
def one_winning_move_state() -> GameState:
    """X to move, holding boards 0 and 4; only board 8 cell 2 wins the game."""
    return make_state(
        boards={8: "XX......."},
        global_wins={0: "X", 4: "X"},
        queue_position=8,
    )


@pytest.fixture
def must_block_state() -> GameState:
    """O to move in board 8, where X threatens a game-winning line.

    The queue sends X straight back to board 8 after O's move, so O has to
    take cell 2.
    """
    queue = tuple(range(9)) + (8, 0, 1, 2, 3, 4, 5, 6, 7) + tuple(range(9)) * 7
    return make_state(
        boards={8: "XX......."},
        global_wins={0: "X", 4: "X"},
        master_queue=queue,
        queue_position=8,
        current_player_index=1,
    )


@pytest.fixture
def late_game_state() -> GameState:
    """Late game: boards 6-8 open with three empty cells each."""
    return make_state(
        boards={
            6: "XO.OX.X.O",
            7: "OX.XO..XX",
            8: ".XO.OX.OX",
        },
        global_wins={0: "X", 1: "O", 2: "X", 3: "O", 4: "X", 5: "O"},
        master_queue=IDENTITY_QUEUE,
        queue_position=6,
    )
