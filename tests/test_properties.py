"""Property tests over random playouts.

Every reachable state must satisfy the structural rules of the game,
whatever the deal and whichever legal moves were chosen.
"""

from __future__ import annotations

import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from uttt.game_engine import (
    GameEngine,
    check_global_win,
    check_small_board_win,
    generate_master_queue,
    playable_boards,
)
from uttt.models import DRAW, QUEUE_LENGTH, Move
from uttt.serialization import deserialize_state, serialize_state
from tests.helpers import play_random_game

TEST_TIMEOUT_SECONDS = 120

seeds = st.integers(min_value=0, max_value=2**32 - 1)
player_counts = st.integers(min_value=2, max_value=4)


def _assert_consistent(state) -> None:
    for index in range(9):
        winner = check_small_board_win(state.boards[index])
        marker = state.global_wins[index]
        if marker is not None:
            assert winner == marker
        else:
            assert winner is None

    assert 0 <= state.queue_position <= QUEUE_LENGTH
    assert 0 <= state.current_player_index < state.num_players

    if state.game_over is None:
        assert check_global_win(state.global_wins) is None
        moves = GameEngine.get_valid_moves(state)
        assert moves
        boards = {move.board_index for move in moves}
        if state.has_wildcard:
            assert boards == set(playable_boards(state))
        elif state.next_board in playable_boards(state):
            assert boards == {state.next_board}
    elif state.game_over == DRAW:
        assert playable_boards(state) == []
        assert check_global_win(state.global_wins) is None
    else:
        assert check_global_win(state.global_wins) == state.game_over


@pytest.mark.timeout(TEST_TIMEOUT_SECONDS)
@settings(max_examples=40, deadline=None)
@given(seed=seeds, num_players=player_counts)
def test_reachable_states_are_consistent(seed, num_players):
    states = play_random_game(random.Random(seed), num_players=num_players)
    for state in states:
        _assert_consistent(state)
    assert states[-1].game_over is not None


@pytest.mark.timeout(TEST_TIMEOUT_SECONDS)
@settings(max_examples=40, deadline=None)
@given(seed=seeds)
def test_each_move_fills_exactly_one_cell(seed):
    states = play_random_game(random.Random(seed))
    for before, after in zip(states, states[1:]):
        changed = [
            (b, c)
            for b in range(9)
            for c in range(9)
            if before.boards[b][c] != after.boards[b][c]
        ]
        assert len(changed) == 1
        b, c = changed[0]
        assert before.boards[b][c] is None
        assert after.boards[b][c] == before.current_player
        assert after.current_player_index == (
            (before.current_player_index + 1) % before.num_players
        )
        assert after.queue_position >= before.queue_position
        assert after.master_queue == before.master_queue


@pytest.mark.timeout(TEST_TIMEOUT_SECONDS)
@settings(max_examples=40, deadline=None)
@given(
    seed=seeds,
    board=st.integers(min_value=0, max_value=8),
    cell=st.integers(min_value=0, max_value=8),
)
def test_illegal_moves_return_same_object(seed, board, cell):
    states = play_random_game(random.Random(seed), max_moves=25)
    state = states[-1]
    move = Move.from_indices(board, cell)
    result = GameEngine.apply_move(state, move)
    if move in GameEngine.get_valid_moves(state):
        assert result is not state
    else:
        assert result is state


@pytest.mark.timeout(TEST_TIMEOUT_SECONDS)
@settings(max_examples=25, deadline=None)
@given(seed=seeds, num_players=player_counts)
def test_records_round_trip(seed, num_players):
    for state in play_random_game(random.Random(seed), num_players=num_players)[::5]:
        assert deserialize_state(serialize_state(state)) == state


@settings(max_examples=100, deadline=None)
@given(seed=seeds)
def test_master_queue_is_nine_permutations(seed):
    queue = generate_master_queue(random.Random(seed))
    assert len(queue) == QUEUE_LENGTH
    for block in range(9):
        assert sorted(queue[block * 9:(block + 1) * 9]) == list(range(9))
